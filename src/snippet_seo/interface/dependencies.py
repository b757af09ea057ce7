"""FastAPI dependency injection wiring."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, TypeVar

import httpx
from fastapi import Depends, Request
from supabase import AsyncClient

from snippet_seo.domain.entities import Principal
from snippet_seo.domain.exceptions import AuthenticationRequiredError, AuthProviderUnavailableError
from snippet_seo.domain.ports.auth_provider import AuthProvider
from snippet_seo.infrastructure.claude_adapter import ClaudeAdapter
from snippet_seo.infrastructure.config import Settings
from snippet_seo.infrastructure.github_rest_adapter import GitHubRestAdapter
from snippet_seo.infrastructure.posthog_analytics import NullAnalytics, PostHogAnalytics
from snippet_seo.infrastructure.supabase_auth_adapter import SupabaseAuthAdapter
from snippet_seo.infrastructure.supabase_client import create_supabase_client
from snippet_seo.infrastructure.supabase_snippet_store import SupabaseSnippetStore
from snippet_seo.interface.session_cookies import read_access_token
from snippet_seo.services.generate_content import ContextualGenerationUseCase, SeoGenerator
from snippet_seo.services.repo_context import RepoContextFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

_http_client: httpx.AsyncClient | None = None
_llm_adapter: ClaudeAdapter | None = None


async def startup(settings: Settings) -> None:
    """Initialise shared resources — called from the lifespan with the app's settings."""
    global _http_client, _llm_adapter  # noqa: PLW0603

    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout_seconds))

    if settings.claude_key is not None and settings.claude_key.get_secret_value():
        _llm_adapter = ClaudeAdapter(
            api_key=settings.claude_key.get_secret_value(),
            model=settings.claude_model,
            base_url=settings.claude_base_url,
            timeout=settings.http_timeout_seconds,
        )
    else:
        logger.warning("CLAUDE_KEY is not set: /api/generate will fail, contextual generation uses templates")

    missing = settings.missing_auth_settings()
    if missing:
        logger.warning("Missing environment variables: %s (authentication disabled)", ", ".join(missing))
    else:
        logger.info("Environment variables configured correctly")


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _llm_adapter  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    if _llm_adapter:
        await _llm_adapter.close()
        _llm_adapter = None


def resolve(request: Request, dependency: Callable[[Request], T]) -> T:
    """Call a request-scoped dependency outside the router, honouring overrides."""
    override: Callable[[], Any] | None = request.app.dependency_overrides.get(dependency)
    if override is not None:
        result: T = override()
        return result
    return dependency(request)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with (``create_app(settings)``)."""
    settings: Settings = request.app.state.settings
    return settings


def get_http_client() -> httpx.AsyncClient:
    assert _http_client is not None, "startup() was not called"
    return _http_client


def get_auth_provider(request: Request) -> SupabaseAuthAdapter | None:
    """Auth adapter, or ``None`` when the provider is not configured."""
    settings = get_app_settings(request)
    if not settings.auth_configured:
        return None
    assert settings.supabase_url is not None and settings.supabase_anon_key is not None
    url = settings.supabase_url
    anon_key = settings.supabase_anon_key.get_secret_value()
    timeout = settings.http_timeout_seconds

    async def client_factory() -> AsyncClient:
        return await create_supabase_client(url, anon_key, timeout=timeout)

    return SupabaseAuthAdapter(client_factory)


def get_analytics(request: Request) -> PostHogAnalytics | NullAnalytics:
    settings = get_app_settings(request)
    if not settings.posthog_key:
        return NullAnalytics()
    return PostHogAnalytics(
        client=get_http_client(),
        api_key=settings.posthog_key,
        host=settings.posthog_host,
    )


def get_generator() -> SeoGenerator:
    return SeoGenerator(llm_gateway=_llm_adapter)


def get_contextual_use_case(
    request: Request,
    generator: SeoGenerator = Depends(get_generator),
) -> ContextualGenerationUseCase:
    settings = get_app_settings(request)
    token = settings.github_token.get_secret_value() if settings.github_token else None
    github_adapter = GitHubRestAdapter(client=get_http_client(), token=token)
    return ContextualGenerationUseCase(
        generator=generator,
        context_fetcher=RepoContextFetcher(github_adapter),
    )


# ── Auth gate ────────────────────────────────────────────────────────────────


class AuthPolicy(str, Enum):
    """Per-endpoint authentication requirement."""

    OPTIONAL = "optional"
    REQUIRED = "required"


async def _lookup_principal(request: Request, auth: AuthProvider | None) -> Principal | None:
    if auth is None:
        return None
    access_token = read_access_token(request)
    if not access_token:
        return None
    return await auth.get_principal(access_token)


async def optional_principal(
    request: Request,
    auth: AuthProvider | None = Depends(get_auth_provider),
) -> Principal | None:
    """Resolve the session principal, or ``None``; an auth outage counts as anonymous."""
    try:
        return await _lookup_principal(request, auth)
    except AuthProviderUnavailableError as exc:
        logger.warning("Treating request as anonymous: %s", exc)
        return None


async def require_principal(
    request: Request,
    auth: AuthProvider | None = Depends(get_auth_provider),
) -> Principal:
    """Resolve the session principal; 401 without one, 503 when auth is down."""
    principal = await _lookup_principal(request, auth)
    if principal is None:
        raise AuthenticationRequiredError()
    return principal


def authenticate(policy: AuthPolicy) -> Callable[..., Any]:
    """Dependency enforcing *policy* for one endpoint."""
    if policy is AuthPolicy.REQUIRED:
        return require_principal
    return optional_principal


async def get_snippet_store(
    request: Request,
    principal: Principal = Depends(require_principal),
) -> SupabaseSnippetStore:
    """Store bound to the caller's access token; resolved only once authenticated."""
    settings = get_app_settings(request)
    access_token = read_access_token(request)
    assert settings.supabase_url is not None and settings.supabase_anon_key is not None
    assert access_token is not None
    client = await create_supabase_client(
        settings.supabase_url,
        settings.supabase_anon_key.get_secret_value(),
        access_token=access_token,
        timeout=settings.http_timeout_seconds,
    )
    return SupabaseSnippetStore(client)
