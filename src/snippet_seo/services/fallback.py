"""Deterministic, template-based SEO content.

Used whenever the model path is unavailable or misbehaves, so the contextual
endpoint always has something to return.
"""

from __future__ import annotations

from html import escape

from snippet_seo.domain.entities import GenerationResult, RepoContext
from snippet_seo.services.prompt_builder import author_for, code_repository_for


def fallback_title(language: str | None, context: RepoContext | None) -> str:
    if context is not None:
        return f"{context.name} Code Example - {language or 'Programming'} Implementation"
    return f"{language or 'Code'} Example - Implementation Guide"


def fallback_description(language: str | None, context: RepoContext | None) -> str:
    if context is not None:
        return (
            f"Learn how to use this {language or 'code'} example from {context.name}. "
            f"{context.description[:80]}"
        ).strip()
    return (
        f"Understand this {language or 'code'} snippet with detailed explanation "
        "and usage examples."
    )


def fallback_explanation(language: str | None, context: RepoContext | None) -> str:
    if context is not None:
        about = f", {context.description}" if context.description else ""
        project_language = context.language or "software"
        return (
            f"This code snippet is from {context.name}{about}. The code demonstrates "
            f"{language or 'programming'} functionality within the context of this "
            f"{project_language} project with {context.stars} stars on GitHub."
        )
    return (
        f"This {language or 'code'} snippet demonstrates programming functionality. "
        "The code can be used as a reference for similar implementations in your projects."
    )


def render_html(
    code: str,
    language: str | None,
    context: RepoContext | None,
    title: str,
    description: str,
    explanation: str,
) -> str:
    """Hand-built article page; every interpolated value is HTML-escaped."""
    source_line = ""
    project_section = ""
    if context is not None:
        repo_link = escape(context.html_url, quote=True)
        repo_name = escape(context.name)
        source_line = f'\n            <p>From: <a href="{repo_link}">{repo_name}</a></p>'
        project_section = f"""
        <section>
            <h2>Project Context</h2>
            <p><strong>Repository:</strong> {repo_name}</p>
            <p><strong>Description:</strong> {escape(context.description)}</p>
            <p><strong>Language:</strong> {escape(context.language)}</p>
            <p><strong>GitHub:</strong> <a href="{repo_link}">View Repository</a></p>
        </section>"""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <meta name="description" content="{escape(description, quote=True)}">
</head>
<body>
    <article>
        <header>
            <h1>{escape(title)}</h1>{source_line}
        </header>

        <section>
            <h2>Code Example</h2>
            <pre><code class="language-{escape(language or 'text', quote=True)}">{escape(code)}</code></pre>
        </section>

        <section>
            <h2>Explanation</h2>
            <p>{escape(explanation)}</p>
        </section>{project_section}
    </article>
</body>
</html>
"""


def build_fallback_result(
    code: str,
    language: str | None = None,
    context: RepoContext | None = None,
) -> GenerationResult:
    """Assemble a complete :class:`GenerationResult` without calling any model."""
    title = fallback_title(language, context)
    description = fallback_description(language, context)
    explanation = fallback_explanation(language, context)

    return GenerationResult(
        title=title,
        description=description,
        explanation=explanation,
        html_output=render_html(code, language, context, title, description, explanation),
        schema_markup={
            "@context": "https://schema.org",
            "@type": "TechArticle",
            "name": title,
            "description": description,
            "programmingLanguage": language or "Unknown",
            "codeRepository": code_repository_for(context),
            "author": author_for(context),
        },
    )
