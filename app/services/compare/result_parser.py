"""Extract a ComparisonResult from free-text generation output."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from app.services.compare.errors import UpstreamParseFailure
from app.services.compare.schema import ComparisonResult, validate_comparison_result


def extract_json_object(raw_text: Any) -> dict[str, Any]:
    """
    Decode the JSON object spanning the first ``{`` to the last ``}``

    Raises:
        UpstreamParseFailure: No object-shaped span, or it does not decode
            to a JSON object
    """
    if isinstance(raw_text, dict):
        return raw_text
    if not isinstance(raw_text, str):
        raise UpstreamParseFailure("Generation response must be text")

    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end <= start:
        raise UpstreamParseFailure("No valid JSON found in AI response")

    try:
        document = json.loads(raw_text[start:end + 1])
    except ValueError as exc:
        raise UpstreamParseFailure(f"AI response JSON could not be decoded: {exc}") from exc

    if not isinstance(document, dict):
        raise UpstreamParseFailure("AI response JSON is not an object")
    return document


def parse_comparison_result(raw_text: Any) -> ComparisonResult:
    """Decode and schema-validate a generation response in one step."""
    document = extract_json_object(raw_text)
    try:
        return validate_comparison_result(document)
    except ValidationError as exc:
        raise UpstreamParseFailure(
            f"AI response failed schema validation ({exc.error_count()} errors)"
        ) from exc
