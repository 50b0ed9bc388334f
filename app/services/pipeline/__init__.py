"""
Interview Generation Pipeline Package

Architecture:
- interview_pipeline.py: Orchestration (parse -> validate -> prompt -> parse output -> persist)
- request_validator.py: Request body shape validation
- llm_service.py: Gemini API call
- llm_parser.py: Model output parsing
- interview_repository.py: Firestore persistence
"""

from .interview_pipeline import GenerationResult, InterviewPipeline
from .interview_repository import InterviewRepository
from .llm_parser import clean_llm_json_output, parse_question_list
from .llm_service import LLMService
from .request_validator import InvalidRequest, RequestValidator, ValidRequest

__all__ = [
    'GenerationResult',
    'InterviewPipeline',
    'InterviewRepository',
    'LLMService',
    'RequestValidator',
    'ValidRequest',
    'InvalidRequest',
    'clean_llm_json_output',
    'parse_question_list',
]
