"""
Helpers for pulling JSON out of model responses.

Models asked for JSON still wrap it in markdown fences or a sentence of prose
now and then. ``extract_json`` trims that wrapping down to the first top-level
object or array so the result can be handed to ``json.loads``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_JSON = re.compile(r"```json", re.IGNORECASE)
_DECODER = json.JSONDecoder()


def strip_code_fences(text: str) -> str:
    """Remove ```json and ``` markers wherever they appear."""
    return _FENCE_JSON.sub("", text).replace("```", "").strip()


def extract_json(text: str) -> str:
    """Return the first JSON object or array found in ``text``.

    Whichever of ``{`` or ``[`` appears first decides the kind of value. The
    value is decoded from that position so braces inside string values and
    trailing prose are handled; if decoding fails the span runs to the last
    matching closing character instead. Text without an opening character
    comes back stripped but otherwise untouched.
    """
    if not text:
        return "{}"

    cleaned = strip_code_fences(text)
    first_brace = cleaned.find("{")
    first_bracket = cleaned.find("[")

    if first_brace != -1 and (first_bracket == -1 or first_brace < first_bracket):
        start, closing = first_brace, "}"
    elif first_bracket != -1:
        start, closing = first_bracket, "]"
    else:
        return cleaned

    try:
        _, end = _DECODER.raw_decode(cleaned, start)
        return cleaned[start:end]
    except json.JSONDecodeError:
        logger.debug("Could not decode JSON at offset %d; using last '%s' instead.", start, closing)

    end = cleaned.rfind(closing)
    if end < start:
        return cleaned
    return cleaned[start : end + 1]


def parse_json(text: str) -> Any:
    """Extract and decode JSON from a model response.

    Raises:
        json.JSONDecodeError: if the extracted text is not valid JSON.
    """
    return json.loads(extract_json(text))
