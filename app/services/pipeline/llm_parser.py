from typing import Any, List
import logging
import json
import math
import re

from app.core.exceptions import ModelOutputError, ModelOutputErrorKind

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r'```json|```')


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite JSON constant {name} is not allowed")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"Number {literal} is out of range")
    return value


def strict_json_loads(text: str | bytes) -> Any:
    """json.loads that refuses NaN/Infinity and numbers overflowing to them, none of which are JSON."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_finite_float)


def clean_llm_json_output(raw_text: str) -> str:
    """Removes markdown code fences from LLM output and trims surrounding whitespace."""
    if not raw_text:
        return ""
    return CODE_FENCE_PATTERN.sub('', raw_text).strip()


def parse_question_list(raw_text: str) -> List[str]:
    """
    Parse the model's reply into an ordered list of question strings.

    The reply must be a JSON array of strings, optionally wrapped in code
    fences. Anything else fails the whole parse; there is no attempt to
    salvage JSON embedded in surrounding prose.

    Raises:
        ModelOutputError: carrying the failure kind and the untouched raw text.
    """
    logger.info(f"🔍 Raw Gemini response received: {json.dumps(raw_text)}")

    cleaned = clean_llm_json_output(raw_text)
    logger.debug(f"🧹 Cleaned response: {json.dumps(cleaned)}")

    try:
        parsed = strict_json_loads(cleaned)
    except ValueError as e:
        raise _parse_failure(str(e), ModelOutputErrorKind.INVALID_JSON, raw_text) from e

    if not isinstance(parsed, list):
        logger.error(f"❌ Parsed response is not an array: {type(parsed).__name__} {parsed!r}")
        raise _parse_failure("LLM output was not an array", ModelOutputErrorKind.NOT_AN_ARRAY, raw_text)

    invalid_items = [item for item in parsed if not isinstance(item, str)]
    if invalid_items:
        logger.error(f"❌ Array contains non-string items: {invalid_items!r}")
        raise _parse_failure("Array contains non-string questions", ModelOutputErrorKind.NON_STRING_ITEMS, raw_text)

    logger.info(f"✅ Validated {len(parsed)} questions")
    return parsed


def _parse_failure(cause: str, kind: ModelOutputErrorKind, raw_text: str) -> ModelOutputError:
    logger.error(f"❌ Failed to parse Gemini response ({kind.value}): {cause}")
    logger.error(f"Original text that failed parsing: {raw_text!r}")
    return ModelOutputError(
        f"Failed to parse LLM response: {cause}",
        kind=kind,
        raw_response=raw_text,
    )
