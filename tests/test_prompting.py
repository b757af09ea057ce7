from __future__ import annotations

import json

import pytest

from snippet_seo.domain.entities import RepoContext
from snippet_seo.domain.exceptions import LlmResponseFormatError
from snippet_seo.services.prompt_builder import (
    build_contextual_prompt,
    build_user_prompt,
)
from snippet_seo.services.response_parser import extract_json_object, parse_generation

VALID = {
    "title": "T",
    "description": "D",
    "explanation": "E",
    "html_output": "<p>H</p>",
    "schema_markup": {"@type": "TechArticle"},
}


def test_build_user_prompt_given_no_language_when_built_then_auto_detect_is_requested() -> None:
    prompt = build_user_prompt("console.log(1)")

    assert "language: auto-detect" in prompt
    assert "console.log(1)" in prompt


def test_build_contextual_prompt_given_context_when_built_then_repository_facts_are_included(
    repo_context: RepoContext,
) -> None:
    # When
    prompt = build_contextual_prompt("const x = 1", "typescript", repo_context)

    # Then
    assert "with full repository context" in prompt
    assert "- Project: demo" in prompt
    assert "- Stars: 42" in prompt
    assert "- Topics: seo, nextjs" in prompt
    assert "- Owner: octo" in prompt
    assert "- Package.json: " in prompt
    assert '"@type": "Organization"' in prompt
    assert '"codeRepository": "https://github.com/octo/demo"' in prompt


def test_build_contextual_prompt_given_long_readme_when_built_then_excerpt_is_capped(
    repo_context: RepoContext,
) -> None:
    # When
    prompt = build_contextual_prompt("x", None, repo_context)

    # Then
    start = prompt.index("- README excerpt: ") + len("- README excerpt: ")
    assert prompt[start : start + 500] == repo_context.readme[:500]
    assert repo_context.readme[:501] not in prompt


def test_build_contextual_prompt_given_no_context_when_built_then_person_author_is_requested() -> None:
    # When
    prompt = build_contextual_prompt("x = 1", "python", None)

    # Then
    assert "with no additional context" in prompt
    assert "No additional repository context is available." in prompt
    assert "REPOSITORY CONTEXT" not in prompt
    assert '"@type": "Person"' in prompt
    assert '"codeRepository": null' in prompt
    assert '"programmingLanguage": "python"' in prompt


def test_extract_json_object_given_prose_and_fence_when_extracted_then_object_is_found() -> None:
    # Given
    raw = "Here is your content:\n```json\n" + json.dumps(VALID) + "\n```\nEnjoy!"

    # When
    data = extract_json_object(raw)

    # Then
    assert data == VALID


def test_extract_json_object_given_no_braces_when_extracted_then_format_error_is_raised() -> None:
    with pytest.raises(LlmResponseFormatError) as excinfo:
        extract_json_object("I cannot help with that.")

    assert excinfo.value.raw == "I cannot help with that."
    assert str(excinfo.value) == "Claude returned non-JSON"


def test_extract_json_object_given_broken_span_when_extracted_then_format_error_is_raised() -> None:
    with pytest.raises(LlmResponseFormatError):
        extract_json_object('prefix {"title": "x",} suffix')


def test_parse_generation_given_valid_json_when_parsed_then_result_is_returned() -> None:
    result = parse_generation(json.dumps(VALID))

    assert result.as_dict() == VALID


def test_parse_generation_given_missing_fields_when_parsed_then_malformed_error_names_them() -> None:
    # Given
    raw = json.dumps({"title": "T", "schema_markup": "not an object"})

    # When
    with pytest.raises(LlmResponseFormatError) as excinfo:
        parse_generation(raw)

    # Then
    message = str(excinfo.value)
    assert "malformed" in message
    for name in ("description", "explanation", "html_output", "schema_markup"):
        assert name in message
