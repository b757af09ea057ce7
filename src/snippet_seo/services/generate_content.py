"""SEO generation use cases.

Two policies share one model client:

* :meth:`SeoGenerator.generate_strict` surfaces every failure (public demo
  endpoint, where a misconfiguration should be visible).
* :meth:`SeoGenerator.generate` never raises; any failure on the model path
  routes straight to the deterministic fallback, with no retry.
"""

from __future__ import annotations

import logging

from snippet_seo.domain.entities import GenerationResult, RepoContext
from snippet_seo.domain.exceptions import LlmError, MissingCredentialError
from snippet_seo.domain.ports.llm_gateway import LlmGateway
from snippet_seo.services.fallback import build_fallback_result
from snippet_seo.services.prompt_builder import (
    CONTEXT_SYSTEM_PROMPT,
    SYSTEM_PROMPT,
    build_contextual_prompt,
    build_user_prompt,
)
from snippet_seo.services.repo_context import RepoContextFetcher
from snippet_seo.services.response_parser import parse_generation

logger = logging.getLogger(__name__)

STRICT_MAX_TOKENS = 2000
STRICT_TEMPERATURE = 0.1
CONTEXT_MAX_TOKENS = 4000


class SeoGenerator:
    """Generation client.

    Parameters
    ----------
    llm_gateway:
        Model adapter, or ``None`` when no API key is configured.
    """

    def __init__(self, llm_gateway: LlmGateway | None) -> None:
        self._llm = llm_gateway

    async def generate_strict(self, code: str, language: str | None = None) -> GenerationResult:
        """Generate without context, raising on any upstream problem.

        Raises:
            MissingCredentialError: No API key is configured.
            LlmError: The provider failed or answered with something other
                than the expected JSON object.
        """
        if self._llm is None:
            raise MissingCredentialError()

        text = await self._llm.complete(
            SYSTEM_PROMPT,
            build_user_prompt(code, language),
            max_tokens=STRICT_MAX_TOKENS,
            temperature=STRICT_TEMPERATURE,
        )
        return parse_generation(text)

    async def generate(
        self,
        code: str,
        language: str | None = None,
        context: RepoContext | None = None,
    ) -> GenerationResult:
        """Generate with optional repository context; always returns a result."""
        if self._llm is None:
            logger.info("No model credential configured, using template content")
            return build_fallback_result(code, language, context)

        try:
            text = await self._llm.complete(
                CONTEXT_SYSTEM_PROMPT,
                build_contextual_prompt(code, language, context),
                max_tokens=CONTEXT_MAX_TOKENS,
            )
            return parse_generation(text)
        except LlmError as exc:
            logger.warning("Model generation failed, using template content: %s", exc)
        except Exception:
            logger.exception("Unexpected error during model generation, using template content")
        return build_fallback_result(code, language, context)


class ContextualGenerationUseCase:
    """Enrich with repository context when a URL is given, then generate."""

    def __init__(self, generator: SeoGenerator, context_fetcher: RepoContextFetcher) -> None:
        self._generator = generator
        self._context_fetcher = context_fetcher

    async def execute(
        self,
        code: str,
        language: str | None = None,
        github_url: str | None = None,
    ) -> GenerationResult:
        context: RepoContext | None = None
        if github_url:
            context = await self._context_fetcher.fetch(github_url)
        return await self._generator.generate(code, language, context)
