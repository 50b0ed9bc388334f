"""
Interview generation pipeline orchestrator.

Stages, each gated on the previous one:
1. Parse the raw request body as JSON
2. Validate the body shape
3. Prompt the generative model
4. Parse the model output into questions
5. Build the interview record
6. Persist the record

Every failure is raised as one of the ``AppError`` variants; rendering the
HTTP response is left to the API layer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Protocol

from app.core.exceptions import InvalidJSONError, InvalidRequestStructureError
from app.core.logger import log_async_execution_time
from app.core.prompts import generate_interview_questions_prompt
from app.schemas.interview import Interview, InterviewRequest
from app.services.pipeline.llm_parser import parse_question_list, strict_json_loads
from app.services.pipeline.request_validator import InvalidRequest, RequestValidator
from app.services.tools.utils import get_random_interview_cover, split_techstack

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate_text(self, prompt: str) -> str: ...


class InterviewStore(Protocol):
    async def add(self, interview: Interview) -> str: ...


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class GenerationResult:
    interview: Interview
    document_id: str

    @property
    def questions_count(self) -> int:
        return len(self.interview.questions)


class InterviewPipeline:
    """
    Orchestrates one interview generation request.

    Collaborators are injected so the pipeline holds no global state: the
    model client, the storage repository, the cover picker and the clock.
    """

    def __init__(
        self,
        llm: TextGenerator,
        repository: InterviewStore,
        validator: Optional[RequestValidator] = None,
        cover_picker: Callable[[], str] = get_random_interview_cover,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.llm = llm
        self.repository = repository
        self.validator = validator or RequestValidator(logger=logger)
        self.cover_picker = cover_picker
        self.clock = clock

    @staticmethod
    def parse_body(raw_body: bytes, headers: Optional[Mapping[str, str]] = None) -> Any:
        """Decode the request body. Malformed JSON raises ``InvalidJSONError``."""
        logger.info("🔍 Attempting to parse request body...")
        try:
            body = strict_json_loads(raw_body)
        except ValueError as e:
            logger.error(f"❌ Failed to parse request JSON: {e}")
            if headers is not None:
                logger.error(f"Request headers: {dict(headers)}")
            raise InvalidJSONError(str(e) or "Unknown parsing error") from e
        logger.info(f"✅ Request body parsed: {body!r}")
        return body

    def validate(self, body: Any) -> InterviewRequest:
        verdict = self.validator.validate(body)
        if isinstance(verdict, InvalidRequest):
            raise InvalidRequestStructureError(verdict.reasons, received=verdict.received)
        return verdict.value

    def build_interview(self, request: InterviewRequest, questions: list[str]) -> Interview:
        return Interview(
            role=request.role,
            type=request.type,
            level=request.level,
            techstack=split_techstack(request.techstack),
            questions=questions,
            user_id=request.userid,
            finalized=True,
            cover_image=self.cover_picker(),
            created_at=self.clock(),
        )

    @log_async_execution_time
    async def run(self, raw_body: bytes, headers: Optional[Mapping[str, str]] = None) -> GenerationResult:
        body = self.parse_body(raw_body, headers)
        request = self.validate(body)
        logger.info(
            f"🎯 Processing interview request: type={request.type!r} role={request.role!r} "
            f"level={request.level!r} techstack={request.techstack!r} amount={request.amount!r} userid={request.userid!r}"
        )

        prompt = generate_interview_questions_prompt(
            role=request.role,
            level=request.level,
            techstack=request.techstack,
            interview_type=request.type,
            amount=request.amount,
        )
        raw_questions = await self.llm.generate_text(prompt)

        questions = parse_question_list(raw_questions)
        logger.info(f"📋 Generated {len(questions)} questions (requested {request.amount})")

        interview = self.build_interview(request, questions)
        logger.info(f"💾 Saving interview record: {interview.to_document()}")

        document_id = await self.repository.add(interview)
        return GenerationResult(interview=interview, document_id=document_id)
