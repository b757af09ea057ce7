from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from snippet_seo.domain.entities import NewSnippet, Principal, RepoContext, Session
from snippet_seo.domain.exceptions import AuthProviderError
from snippet_seo.infrastructure.config import Settings
from snippet_seo.interface.app import create_app
from snippet_seo.interface.dependencies import (
    get_analytics,
    get_auth_provider,
    get_contextual_use_case,
    get_generator,
    get_snippet_store,
)
from snippet_seo.services.generate_content import ContextualGenerationUseCase, SeoGenerator

ALICE_TOKEN = "token-alice"
BOB_TOKEN = "token-bob"


class FakeLlm:
    """LlmGateway returning a canned reply, or raising a canned exception."""

    def __init__(self, reply: str | Exception) -> None:
        self.reply = reply
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int = 2000,
        temperature: float | None = None,
        json_mode: bool = True,
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class FakeAuth:
    """AuthProvider keyed by opaque tokens."""

    def __init__(
        self,
        tokens: dict[str, Principal],
        refreshable: dict[str, Session] | None = None,
    ) -> None:
        self.tokens = tokens
        self.refreshable = refreshable or {}
        self.signed_out: list[str] = []

    async def get_principal(self, access_token: str) -> Principal | None:
        return self.tokens.get(access_token)

    async def sign_in(self, email: str, password: str) -> Session:
        for token, principal in self.tokens.items():
            if principal.email == email and password == "correct-horse":
                return Session(
                    access_token=token,
                    refresh_token=f"refresh-{token}",
                    expires_in=3600,
                    principal=principal,
                )
        raise AuthProviderError("Invalid login credentials")

    async def sign_up(self, email: str, password: str) -> tuple[Principal, Session | None]:
        if any(p.email == email for p in self.tokens.values()):
            raise AuthProviderError("User already registered")
        return Principal(id="user-new", email=email), None

    async def refresh(self, refresh_token: str) -> Session:
        try:
            return self.refreshable[refresh_token]
        except KeyError:
            raise AuthProviderError("Invalid Refresh Token") from None

    async def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)


class FakeStore:
    """In-memory SnippetRepository recording every call."""

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def seed(self, user_id: str, **fields: Any) -> dict[str, Any]:
        self._clock += timedelta(minutes=1)
        row = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "code": "print('hi')",
            "language": "python",
            "title": "Title",
            "description": "Description",
            "explanation": "Explanation",
            "html_output": "<html></html>",
            "schema_markup": {"@type": "TechArticle"},
            "github_url": None,
            "created_at": self._clock.isoformat(),
            "updated_at": self._clock.isoformat(),
        }
        row.update(fields)
        self.rows.append(row)
        return row

    async def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        self.calls.append("list")
        owned = [r for r in self.rows if r["user_id"] == user_id]
        return sorted(owned, key=lambda r: r["created_at"], reverse=True)

    async def create(self, user_id: str, snippet: NewSnippet) -> dict[str, Any]:
        self.calls.append("create")
        fields = snippet.to_row(user_id)
        del fields["user_id"]
        return self.seed(user_id, **fields)

    async def get_owned(self, snippet_id: str, user_id: str) -> dict[str, Any] | None:
        self.calls.append("get_owned")
        for row in self.rows:
            if row["id"] == snippet_id and row["user_id"] == user_id:
                return row
        return None

    async def delete_owned(self, snippet_id: str, user_id: str) -> None:
        self.calls.append("delete_owned")
        self.rows = [
            r for r in self.rows if not (r["id"] == snippet_id and r["user_id"] == user_id)
        ]


class RecordingAnalytics:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    async def capture(
        self,
        event: str,
        distinct_id: str,
        properties: dict[str, Any] | None = None,
    ) -> None:
        self.events.append((event, distinct_id, properties or {}))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]


class FakeQuery:
    """Chainable stand-in for a supabase table query; records every builder call."""

    def __init__(self, table: str, result: Any) -> None:
        self.table = table
        self.result = result
        self.ops: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    def _record(self, name: str, *args: Any, **kwargs: Any) -> FakeQuery:
        self.ops.append((name, args, kwargs))
        return self

    def select(self, *args: Any, **kwargs: Any) -> FakeQuery:
        return self._record("select", *args, **kwargs)

    def insert(self, *args: Any, **kwargs: Any) -> FakeQuery:
        return self._record("insert", *args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> FakeQuery:
        return self._record("delete", *args, **kwargs)

    def eq(self, *args: Any, **kwargs: Any) -> FakeQuery:
        return self._record("eq", *args, **kwargs)

    def order(self, *args: Any, **kwargs: Any) -> FakeQuery:
        return self._record("order", *args, **kwargs)

    def limit(self, *args: Any, **kwargs: Any) -> FakeQuery:
        return self._record("limit", *args, **kwargs)

    async def execute(self) -> SimpleNamespace:
        if isinstance(self.result, Exception):
            raise self.result
        return SimpleNamespace(data=self.result)


class FakeSupabaseAuth:
    """Stand-in for ``AsyncClient.auth``: each method returns or raises a canned value."""

    def __init__(self, **replies: Any) -> None:
        self.replies = replies
        self.calls: list[tuple[str, Any]] = []
        self.admin = SimpleNamespace(sign_out=self._sign_out)

    async def _reply(self, name: str, argument: Any) -> Any:
        self.calls.append((name, argument))
        reply = self.replies.get(name)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def get_user(self, jwt: str) -> Any:
        return await self._reply("get_user", jwt)

    async def sign_in_with_password(self, credentials: dict[str, str]) -> Any:
        return await self._reply("sign_in_with_password", credentials)

    async def sign_up(self, credentials: dict[str, str]) -> Any:
        return await self._reply("sign_up", credentials)

    async def refresh_session(self, refresh_token: str) -> Any:
        return await self._reply("refresh_session", refresh_token)

    async def _sign_out(self, jwt: str) -> Any:
        return await self._reply("sign_out", jwt)


class FakeSupabaseClient:
    """Minimal ``supabase.AsyncClient``: table queries answer from *results* in order."""

    def __init__(self, results: list[Any] | None = None, auth: FakeSupabaseAuth | None = None) -> None:
        self.results = list(results or [])
        self.queries: list[FakeQuery] = []
        self.auth = auth or FakeSupabaseAuth()

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(name, self.results.pop(0) if self.results else [])
        self.queries.append(query)
        return query


def supabase_user(user_id: str = "user-1", email: str = "alice@example.com", provider: str = "github") -> SimpleNamespace:
    return SimpleNamespace(id=user_id, email=email, app_metadata={"provider": provider})


def client_factory(client: FakeSupabaseClient) -> Any:
    async def factory() -> FakeSupabaseClient:
        return client

    return factory


class FakeContextFetcher:
    def __init__(self, context: RepoContext | None) -> None:
        self.context = context
        self.urls: list[str] = []

    async def fetch(self, github_url: str) -> RepoContext | None:
        self.urls.append(github_url)
        return self.context


@pytest.fixture
def alice() -> Principal:
    return Principal(id="user-1", email="alice@example.com")


@pytest.fixture
def bob() -> Principal:
    return Principal(id="user-2", email="bob@example.org")


@pytest.fixture
def fake_auth(alice: Principal, bob: Principal) -> FakeAuth:
    return FakeAuth({ALICE_TOKEN: alice, BOB_TOKEN: bob})


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def analytics() -> RecordingAnalytics:
    return RecordingAnalytics()


@pytest.fixture
def repo_context() -> RepoContext:
    return RepoContext(
        name="demo",
        description="A demo project",
        language="TypeScript",
        stars=42,
        topics=["seo", "nextjs"],
        readme="# Demo\n" + "x" * 3000,
        manifest='{"name":"demo","version":"1.0.0"}',
        owner="octo",
        full_name="octo/demo",
    )


@pytest.fixture
def app(fake_auth: FakeAuth, fake_store: FakeStore, analytics: RecordingAnalytics) -> FastAPI:
    application = create_app(Settings(_env_file=None, secure_cookies=False))
    generator = SeoGenerator(llm_gateway=None)
    application.dependency_overrides[get_auth_provider] = lambda: fake_auth
    application.dependency_overrides[get_snippet_store] = lambda: fake_store
    application.dependency_overrides[get_analytics] = lambda: analytics
    application.dependency_overrides[get_generator] = lambda: generator
    application.dependency_overrides[get_contextual_use_case] = lambda: ContextualGenerationUseCase(
        generator=generator,
        context_fetcher=FakeContextFetcher(None),  # type: ignore[arg-type]
    )
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def alice_client(client: TestClient) -> TestClient:
    client.cookies.set("sb-access-token", ALICE_TOKEN)
    return client
