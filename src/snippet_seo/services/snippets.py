"""Snippet payload validation and export helpers."""

from __future__ import annotations

import json
import re
from typing import Any

from snippet_seo.domain.entities import NewSnippet
from snippet_seo.domain.exceptions import PayloadValidationError

_REQUIRED_TEXT: list[tuple[str, str]] = [
    ("code", "Code is required"),
    ("title", "Title is required"),
    ("description", "Description is required"),
    ("explanation", "Explanation is required"),
    ("html_output", "HTML output is required"),
]

_FILENAME_UNSAFE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _optional_text(value: Any) -> str | None:
    return value if _is_filled(value) else None


def validate_snippet_payload(body: Any) -> NewSnippet:
    """Check a client-submitted generation result.

    Raises:
        PayloadValidationError: Listing one message per missing or invalid field.
    """
    if not isinstance(body, dict):
        body = {}

    errors = [message for field, message in _REQUIRED_TEXT if not _is_filled(body.get(field))]
    if not isinstance(body.get("schema_markup"), dict):
        errors.append("Schema markup is required")

    if errors:
        raise PayloadValidationError("Invalid request data", details=errors)

    return NewSnippet(
        code=body["code"],
        title=body["title"],
        description=body["description"],
        explanation=body["explanation"],
        html_output=body["html_output"],
        schema_markup=body["schema_markup"],
        language=_optional_text(body.get("language")),
        github_url=_optional_text(body.get("github_url") or body.get("githubUrl")),
    )


def download_filename(title: str | None, extension: str) -> str:
    """``"My Title!"`` → ``"my_title_.html"``."""
    stem = _FILENAME_UNSAFE.sub("_", title or "snippet").lower() or "snippet"
    return f"{stem}.{extension}"


def export_json(snippet: dict[str, Any]) -> str:
    """Pretty-printed JSON export of the SEO fields of a stored snippet."""
    return json.dumps(
        {
            "title": snippet.get("title"),
            "description": snippet.get("description"),
            "explanation": snippet.get("explanation"),
            "schema_markup": snippet.get("schema_markup"),
        },
        indent=2,
        ensure_ascii=False,
    )
