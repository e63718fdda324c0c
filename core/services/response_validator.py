# =============================================================================
# core/services/response_validator.py - Model Output Validation
# =============================================================================
# Turns the model's raw text into an Assessment, or rejects it.
#
# Rules:
# - A surrounding markdown code fence (```json ... ```) is tolerated
# - Everything else is strict: "6" is not an integer, "true" is not a
#   boolean, unknown enum values are rejected, required fields have no
#   defaults
# - On failure nothing partial is returned; the error lists every bad field
# =============================================================================

import logging

from pydantic import ValidationError

from app.exceptions import AnalysisValidationError
from core.models.assessment import Assessment

logger = logging.getLogger(__name__)


def strip_code_fence(text: str) -> str:
    """
    Remove a markdown code fence wrapped around the whole response.

    Example:
        '```json\\n{"a": 1}\\n```' -> '{"a": 1}'
    """
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped

    lines = stripped.split("\n")
    lines = lines[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _format_errors(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "response"
        parts.append(f"{location}: {err.get('msg')}")
    return ", ".join(parts)


def parse_assessment(text: str) -> Assessment:
    """
    Parse and strictly validate the model's response.

    Args:
        text: Raw response text from the generation call

    Returns:
        Validated Assessment

    Raises:
        AnalysisValidationError: If the text is not JSON or violates the schema
    """
    if not text or not text.strip():
        raise AnalysisValidationError("empty response", raw_response=text)

    payload = strip_code_fence(text)

    try:
        assessment = Assessment.model_validate_json(payload, strict=True)
    except ValidationError as e:
        reason = _format_errors(e)
        logger.warning(f"Rejected model output: {reason}")
        raise AnalysisValidationError(reason, raw_response=text)

    logger.debug(f"Validated assessment with mood_score={assessment.mood_score}")
    return assessment
