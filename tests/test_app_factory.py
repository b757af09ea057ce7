from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from snippet_seo.infrastructure.claude_adapter import ClaudeAdapter
from snippet_seo.infrastructure.config import Settings
from snippet_seo.infrastructure.supabase_auth_adapter import SupabaseAuthAdapter
from snippet_seo.interface.app import create_app
from snippet_seo.interface.dependencies import get_auth_provider, get_generator

ENV_NAMES = (
    "CLAUDE_KEY",
    "SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "NEXT_PUBLIC_SUPABASE_ANON_KEY",
)


@pytest.fixture
def bare_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def _request_for(app) -> Request:  # type: ignore[no-untyped-def]
    return Request({"type": "http", "app": app, "headers": []})


def test_create_app_given_explicit_settings_when_served_then_dependencies_use_them(
    bare_environment: None,
) -> None:
    # Given settings that exist only as constructor arguments
    settings = Settings(
        _env_file=None,
        supabase_url="https://project.supabase.co",
        supabase_anon_key="anon",
        claude_key="sk-test",
    )
    app = create_app(settings)

    # When
    with TestClient(app) as client:
        health = client.get("/health")
        auth = get_auth_provider(_request_for(app))
        generator = get_generator()

    # Then
    assert health.status_code == 200
    assert isinstance(auth, SupabaseAuthAdapter)
    assert isinstance(generator._llm, ClaudeAdapter)


def test_create_app_given_settings_without_supabase_when_served_then_auth_disabled(
    bare_environment: None,
) -> None:
    app = create_app(Settings(_env_file=None))

    with TestClient(app):
        auth = get_auth_provider(_request_for(app))
        generator = get_generator()

    assert auth is None
    assert generator._llm is None


def test_login_given_settings_without_supabase_when_posted_then_503(bare_environment: None) -> None:
    app = create_app(Settings(_env_file=None))

    with TestClient(app) as client:
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "pw"})

    assert resp.status_code == 503
    assert resp.json() == {"error": "Authentication is not configured on this server"}
