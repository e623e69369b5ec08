# sitegen/core/parser.py
"""
Tolerant extraction of the {html, css, js} object from a raw model reply.

Models wrap the JSON in prose or markdown fences and occasionally emit raw
control characters inside string values, both of which break json.loads.
The reply is reduced to the span between the first '{' and the last '}',
control characters are dropped, and the rest is left to the JSON parser.
"""
import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from sitegen.core.errors import MalformedResponseError
from sitegen.models import GeneratedSite

logger = logging.getLogger(__name__)

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def strip_control_chars(text: str) -> str:
    return _CONTROL_CHARS_RE.sub("", text)


def extract_json_span(raw_text: str) -> Optional[str]:
    """Substring from the first '{' to the last '}' inclusive, or None."""
    if not raw_text:
        return None
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return raw_text[start:end + 1]


def parse_model_response(raw_text: str) -> GeneratedSite:
    span = extract_json_span(raw_text)
    if span is None:
        raise MalformedResponseError("Model did not return a JSON object.")

    cleaned = strip_control_chars(span)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.debug("Unparseable model reply (%d chars): %s", len(cleaned), e)
        raise MalformedResponseError(f"Model reply is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise MalformedResponseError("Model reply is not a JSON object.")

    try:
        return GeneratedSite.model_validate(parsed)
    except ValidationError as e:
        # a key was present but did not hold a string
        raise MalformedResponseError(f"Model reply has the wrong shape: {e}") from e
