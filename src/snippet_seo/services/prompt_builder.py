"""Prompt construction for the SEO generation calls."""

from __future__ import annotations

import json

from snippet_seo.domain.entities import RepoContext

README_PROMPT_CHARS = 500
MANIFEST_PROMPT_CHARS = 300

# ── Prompt templates ────────────────────────────────────────────────────────

SYSTEM_PROMPT = """\
You are an expert at creating SEO-optimized content for code snippets.

Given a code snippet, you must:
1. Generate an SEO-friendly title that includes the programming language and main functionality
2. Create a meta description under 160 characters that's compelling for search results
3. Write a clear explanation paragraph that helps developers understand the code
4. Generate proper JSON-LD structured data for the code snippet

Return STRICT JSON only, with exactly these keys:
{
  "title": string,
  "description": string,
  "explanation": string,
  "html_output": string,
  "schema_markup": object
}

The html_output should include the code with syntax highlighting and the explanation.
The schema_markup should be valid JSON-LD structured data for a code snippet.
"""

CONTEXT_SYSTEM_PROMPT = """\
You are an expert technical writer and SEO specialist.  Answer with a single \
JSON object and nothing else.  The object must have exactly these keys: \
"title" (string), "description" (string), "explanation" (string), \
"html_output" (string) and "schema_markup" (object).
"""


def build_user_prompt(code: str, language: str | None = None) -> str:
    """Instruction text for the context-free generation endpoint."""
    return f"""\
Code snippet to optimize (language: {language or "auto-detect"}):

```{language or ""}
{code}
```

Generate SEO-optimized content with:
- Title: Include the language and what the code does (e.g., "React useEffect Hook Example for API Data Fetching")
- Description: Compelling meta description under 160 chars
- Explanation: 1-2 paragraph explanation of what the code does and how to use it
- HTML: Full HTML with syntax-highlighted code and explanation
- Schema: JSON-LD structured data for the code snippet

Return only JSON matching the required format."""


def author_for(context: RepoContext | None) -> dict[str, str]:
    """JSON-LD author: the repository owner as an Organization, else a generic Person."""
    if context is not None:
        return {"@type": "Organization", "name": context.owner}
    return {"@type": "Person", "name": "Developer"}


def code_repository_for(context: RepoContext | None) -> str | None:
    return context.html_url if context is not None else None


def build_context_block(context: RepoContext | None) -> str:
    """Render repository facts for the prompt, or an empty string without context."""
    if context is None:
        return ""
    lines = [
        "REPOSITORY CONTEXT:",
        f"- Project: {context.name}",
        f"- Description: {context.description}",
        f"- Language: {context.language}",
        f"- Stars: {context.stars}",
        f"- Topics: {', '.join(context.topics)}",
        f"- Owner: {context.owner}",
        f"- README excerpt: {context.readme[:README_PROMPT_CHARS]}",
    ]
    if context.manifest:
        lines.append(f"- Package.json: {context.manifest[:MANIFEST_PROMPT_CHARS]}")
    return "\n".join(lines)


def build_contextual_prompt(
    code: str,
    language: str | None = None,
    context: RepoContext | None = None,
) -> str:
    """Instruction text for the context-aware generation endpoint."""
    schema_skeleton = {
        "@context": "https://schema.org",
        "@type": "TechArticle",
        "name": "Article title",
        "description": "Article description",
        "programmingLanguage": language or "Unknown",
        "codeRepository": code_repository_for(context),
        "author": author_for(context),
    }
    if context is not None:
        scope = "full repository context"
        purpose = (
            "Uses repository context to provide better understanding of the "
            "code's purpose and usage"
        )
        context_block = "\n" + build_context_block(context) + "\n"
    else:
        scope = "no additional context"
        purpose = "Analyzes the code to determine its likely purpose and usage patterns"
        context_block = "\nNo additional repository context is available.\n"

    response_shape = {
        "title": (
            "SEO-optimized title (focus on what the code does, include "
            "framework/library names if relevant)"
        ),
        "description": "Meta description for search results (150-160 chars, developer-focused)",
        "explanation": (
            "Detailed explanation of what the code does, how it works, and when "
            "to use it. Include context about the project if available. Make it "
            "educational and helpful for developers."
        ),
        "html_output": (
            "Complete HTML page with proper structure, the code snippet, "
            "explanation, and usage examples. Include proper heading hierarchy "
            "and semantic markup."
        ),
        "schema_markup": schema_skeleton,
    }

    return f"""\
Create SEO-optimized content for this code snippet with {scope}.

CODE SNIPPET:
```{language or "auto"}
{code}
```
{context_block}
Generate comprehensive SEO content that:
1. Focuses on the specific code snippet provided
2. {purpose}
3. Targets developer search queries
4. Includes practical examples and use cases
5. Creates content that developers would actually find helpful

Return a JSON response with this exact structure:
{json.dumps(response_shape, indent=2, ensure_ascii=False)}"""
