"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations

from typing import Any


class SnippetSeoError(Exception):
    """Base exception for the entire application."""


# ── Authentication ──────────────────────────────────────────────────────────


class AuthenticationRequiredError(SnippetSeoError):
    """The request carries no valid session (401)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class AuthProviderError(SnippetSeoError):
    """The auth provider rejected a sign-in, sign-up or refresh call."""


class AuthProviderUnavailableError(SnippetSeoError):
    """The auth provider could not answer (network error or 5xx).

    Distinct from a rejection: the session may still be valid, so callers must
    not treat it as signed out.
    """


class AuthNotConfiguredError(SnippetSeoError):
    """Auth endpoints were called on a server without Supabase settings."""

    def __init__(self, message: str = "Authentication is not configured on this server") -> None:
        super().__init__(message)


# ── Input validation ────────────────────────────────────────────────────────


class PayloadValidationError(SnippetSeoError):
    """The request body failed validation (400).

    ``details`` is either a list of messages or a ``{field: [messages]}`` map.
    """

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


# ── Persistence ─────────────────────────────────────────────────────────────


class SnippetNotFoundError(SnippetSeoError):
    """The snippet does not exist or belongs to another principal (404)."""

    def __init__(self, message: str = "Snippet not found") -> None:
        super().__init__(message)


class DataStoreError(SnippetSeoError):
    """The relational store rejected a query."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details
        self.hint = hint


# ── GitHub API errors ───────────────────────────────────────────────────────


class RepositoryFetchError(SnippetSeoError):
    """A GitHub REST call failed (network error or non-success status)."""


# ── LLM errors ──────────────────────────────────────────────────────────────


class MissingCredentialError(SnippetSeoError):
    """No LLM API key is configured on the server."""

    def __init__(self, message: str = "Server missing CLAUDE_KEY") -> None:
        super().__init__(message)


class LlmError(SnippetSeoError):
    """Any error originating from the LLM provider."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


class LlmResponseFormatError(LlmError):
    """The model answered, but not with the expected JSON object."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(message, details=raw)
        self.raw = raw
