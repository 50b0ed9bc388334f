import logging

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_interview_pipeline
from app.core.exceptions import AppError, InternalServerError
from app.schemas.interview import ErrorResponse, GenerateInterviewResponse, HealthCheckResponse
from app.services.pipeline.interview_pipeline import InterviewPipeline

logger = logging.getLogger(__name__)

generate_router = APIRouter()


@generate_router.post(
    "/generate",
    response_model=GenerateInterviewResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_interview(
    request: Request,
    pipeline: InterviewPipeline = Depends(get_interview_pipeline),
):
    """
    Generate mock interview questions with Gemini and store the interview.

    The body is read raw rather than through a pydantic parameter so that
    malformed JSON and a wrong shape produce the two distinct 400 responses
    the frontend expects.
    """
    logger.info("📨 POST /api/vapi/generate received")
    raw_body = await request.body()

    try:
        result = await pipeline.run(raw_body, headers=request.headers)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Unhandled error in POST /api/vapi/generate: {type(e).__name__}: {e}", exc_info=True)
        raise InternalServerError(str(e) or "Unknown server error") from e

    return GenerateInterviewResponse(success=True, questionsCount=result.questions_count)


@generate_router.get("/generate", response_model=HealthCheckResponse)
async def generate_health():
    logger.info("📨 GET /api/vapi/generate received")
    return HealthCheckResponse(success=True, data="Thank you!")
