"""Shape validation for incoming interview generation requests."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from app.schemas.interview import InterviewRequest

REQUEST_FIELDS = ("type", "role", "level", "techstack", "amount", "userid")


@dataclass(frozen=True)
class ValidRequest:
    value: InterviewRequest


@dataclass(frozen=True)
class InvalidRequest:
    reasons: List[str]
    received: Any = field(default=None)


RequestValidation = Union[ValidRequest, InvalidRequest]


def describe_json_type(value: Any) -> str:
    """Name of the JSON type of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class RequestValidator:
    """
    Validates decoded request bodies against ``InterviewRequest``.

    Validation is all-or-nothing: a single missing or mistyped field rejects
    the whole body. The verdict is returned, never raised, so the caller
    decides how to respond.
    """

    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, body: Any) -> RequestValidation:
        try:
            request = InterviewRequest.model_validate(body)
        except ValidationError as e:
            reasons = list(dict.fromkeys(self._format_error(err) for err in e.errors()))
            self.logger.error(f"❌ Request validation failed: {self.field_types(body)} | reasons={reasons} | body={body!r}")
            return InvalidRequest(reasons=reasons, received=body)

        return ValidRequest(value=request)

    @staticmethod
    def field_types(body: Any) -> Dict[str, str]:
        """JSON type received for each expected field ('missing' when absent)."""
        if not isinstance(body, dict):
            return {name: "missing" for name in REQUEST_FIELDS}
        return {
            name: describe_json_type(body[name]) if name in body else "missing"
            for name in REQUEST_FIELDS
        }

    @staticmethod
    def _format_error(error: Dict[str, Any]) -> str:
        location = ".".join(str(part) for part in error.get("loc", ()))
        # Union members report their own location suffix (e.g. "amount.int"); keep the field name only
        if location:
            location = location.split(".")[0]
        return f"{location or 'body'}: {error.get('msg', 'invalid value')}"
