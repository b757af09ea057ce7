"""Claude adapter — implements the LlmGateway port.

Talks to Anthropic's OpenAI-compatible endpoint through the ``openai`` SDK.
"""

from __future__ import annotations

import logging

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, AuthenticationError

from snippet_seo.domain.exceptions import LlmError

logger = logging.getLogger(__name__)


class ClaudeAdapter:
    """Concrete ``LlmGateway`` backed by the chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-sonnet-latest",
        base_url: str = "https://api.anthropic.com/v1/",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        # Single best-effort call: callers own the fallback policy.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )
        self._model = model

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int = 2000,
        temperature: float | None = None,
        json_mode: bool = True,
    ) -> str:
        """Send a system + user prompt and return the completion text."""
        try:
            kwargs: dict[str, object] = {
                "model": self._model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "max_tokens": max_tokens,
            }
            if temperature is not None:
                kwargs["temperature"] = temperature
            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            response = await self._client.chat.completions.create(**kwargs)  # type: ignore[arg-type]

            content = response.choices[0].message.content if response.choices else None

            if not content:
                raise LlmError("Claude returned empty response")

            return content

        except AuthenticationError as exc:
            raise LlmError(
                "Invalid Claude API key. "
                "Set a valid key in the CLAUDE_KEY environment variable."
            ) from exc

        except APIStatusError as exc:
            logger.error("Claude API error %s", exc.status_code)
            raise LlmError(
                f"Claude API error {exc.status_code}",
                details=exc.message,
            ) from exc

        except APIConnectionError as exc:
            raise LlmError(f"Claude API unreachable: {exc}") from exc

        except LlmError:
            raise

        except Exception as exc:
            raise LlmError(f"LLM call failed: {exc}") from exc

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()
