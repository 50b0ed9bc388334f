import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.vapi.generate import generate_router
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import AppError, app_error_handler, global_exception_handler, http_exception_handler
from app.core.firebase import get_firestore_client, initialize_firebase, shutdown_firebase
from app.core.llm import create_genai_client
from app.core.logger import CORRELATION_HEADER, set_correlation_id, setup_logger
from app.services.pipeline.interview_pipeline import InterviewPipeline
from app.services.pipeline.interview_repository import InterviewRepository
from app.services.pipeline.llm_service import LLMService

logger = logging.getLogger(__name__)


def build_interview_pipeline(settings: Settings):
    """
    Create the process-wide clients and wire them into a pipeline.

    Returns the pipeline and the Firebase app so the lifespan can tear it down.
    """
    genai_client = create_genai_client(settings)
    firebase_app = initialize_firebase(settings)
    repository = InterviewRepository(get_firestore_client(firebase_app), collection=settings.INTERVIEWS_COLLECTION)
    pipeline = InterviewPipeline(llm=LLMService(genai_client, settings.GEMINI_MODEL), repository=repository)
    return pipeline, firebase_app


def create_app(settings: Optional[Settings] = None, interview_pipeline: Optional[InterviewPipeline] = None) -> FastAPI:
    """
    Application factory.

    When ``interview_pipeline`` is given it is used as-is and no external
    client is created; otherwise Gemini and Firebase are initialized on startup.
    """
    settings = settings or default_settings
    setup_logger(
        log_level=settings.LOG_LEVEL,
        clear_log=settings.CLEAR_LOG_ON_STARTUP,
        use_json=settings.LOG_JSON,
        log_to_file=settings.LOG_TO_FILE,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Application startup: {settings.APP_NAME}")
        firebase_app = None
        if app.state.interview_pipeline is None:
            if not settings.GEMINI_API_KEY:
                logger.error("❌ GEMINI_API_KEY is missing. Set it in your environment variables.")
            app.state.interview_pipeline, firebase_app = build_interview_pipeline(settings)
        try:
            yield
        finally:
            if firebase_app is not None:
                shutdown_firebase(firebase_app)
            logger.info("Application shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Generates mock interview questions with Gemini and stores them in Firestore.",
        version="1.0.0",
        debug=settings.DEBUG_MODE,
        lifespan=lifespan,
    )
    app.state.interview_pipeline = interview_pipeline
    app.state.expose_diagnostics = settings.EXPOSE_DIAGNOSTICS

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        set_correlation_id(correlation_id)
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    app.include_router(generate_router, prefix="/api/vapi", tags=["interview"])

    @app.get("/health", tags=["system"])
    async def health():
        return {"status": "ok"}

    return app


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """Run the API with uvicorn."""
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


app = create_app()


if __name__ == "__main__":
    run_server(reload=True)
