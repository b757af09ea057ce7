"""Turn raw model output into a :class:`GenerationResult`.

The completion is requested in JSON mode, so the whole text is tried first.
Providers that ignore JSON mode tend to wrap the object in prose or a Markdown
fence; for those the span from the first ``{`` to the last ``}`` is parsed.
"""

from __future__ import annotations

import json
from typing import Any

from snippet_seo.domain.entities import GenerationResult
from snippet_seo.domain.exceptions import LlmResponseFormatError

_TEXT_FIELDS = ("title", "description", "explanation", "html_output")


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the JSON object contained in *text*.

    Raises:
        LlmResponseFormatError: When no object can be located or parsed.
    """
    stripped = text.strip()
    try:
        data = json.loads(stripped)
    except json.JSONDecodeError:
        start = stripped.find("{")
        end = stripped.rfind("}")
        if start == -1 or end <= start:
            raise LlmResponseFormatError("Claude returned non-JSON", raw=text) from None
        try:
            data = json.loads(stripped[start : end + 1])
        except json.JSONDecodeError:
            raise LlmResponseFormatError("Claude returned non-JSON", raw=text) from None

    if not isinstance(data, dict):
        raise LlmResponseFormatError("Claude returned non-JSON", raw=text)
    return data


def parse_generation(text: str) -> GenerationResult:
    """Parse and shape-check a model completion."""
    data = extract_json_object(text)

    problems = [name for name in _TEXT_FIELDS if not isinstance(data.get(name), str)]
    if not isinstance(data.get("schema_markup"), dict):
        problems.append("schema_markup")
    if problems:
        raise LlmResponseFormatError(
            f"Claude returned malformed JSON (missing or invalid: {', '.join(problems)})",
            raw=text,
        )

    return GenerationResult(
        title=data["title"],
        description=data["description"],
        explanation=data["explanation"],
        html_output=data["html_output"],
        schema_markup=data["schema_markup"],
    )
