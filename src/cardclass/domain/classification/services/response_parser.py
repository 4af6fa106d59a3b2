"""Extraction and validation of the classification object in model output.

Models are asked for bare JSON but frequently wrap it in prose or a
markdown code fence. Extraction order:

1. A fenced code block (optionally tagged ``json``) holding an object
2. The first brace-delimited object without nested braces

Whatever is found is validated against ``AIClassificationResponse``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from cardclass.domain.classification.exceptions import ResponseParseError
from cardclass.domain.classification.value_objects import AIClassificationResponse

logger = logging.getLogger(__name__)

_FENCED_OBJECT = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_FLAT_OBJECT = re.compile(r"\{[^{}]*\}")
_OUTERMOST_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def parse_ai_response(raw_text: str) -> AIClassificationResponse:
    json_data = extract_json(raw_text)
    if json_data is None:
        logger.warning("No JSON object in AI response: %s", raw_text[:200])
        raise ResponseParseError(raw_text)

    try:
        return AIClassificationResponse.model_validate(json_data)
    except PydanticValidationError as e:
        reason = _summarize_validation_error(e)
        logger.warning("AI response failed validation: %s", reason)
        raise ResponseParseError(raw_text, reason=reason) from e


def extract_json(text: str, *, allow_nested: bool = False) -> Optional[dict[str, Any]]:
    """Return the first JSON object found in ``text``, or None.

    With ``allow_nested`` the unfenced fallback spans from the first ``{`` to
    the last ``}``, for payloads whose string values contain braces.
    """
    if not text:
        return None

    # Try to find JSON in code blocks first
    fenced = _FENCED_OBJECT.search(text)
    if fenced:
        data = _loads_object(fenced.group(1))
        if data is not None:
            return data

    pattern = _OUTERMOST_OBJECT if allow_nested else _FLAT_OBJECT
    raw = pattern.search(text)
    if raw:
        return _loads_object(raw.group(0))

    return None


def _loads_object(candidate: str) -> Optional[dict[str, Any]]:
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _summarize_validation_error(error: PydanticValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "response"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)
