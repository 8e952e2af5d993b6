"""Reasoning-service client used to break near-ties between candidates.

Wraps a LiteLLM chat completion and validates the reply against a Pydantic
output model. Construct one client per process and pass it to every
``FieldResolver`` that needs it.
"""

from __future__ import annotations

import json
import logging
import os
import re
import threading
import time
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from src.resolver.config import ResolverConfig, get_resolver_config

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Keep LiteLLM from loading a local .env into os.environ.
os.environ.setdefault("LITELLM_MODE", "PRODUCTION")

# Providers LiteLLM cannot infer from a bare model id.
_PREFIXED_PROVIDERS = frozenset({"anthropic", "gemini", "mistral", "groq", "ollama"})

RETRY_BASE_DELAY = 0.5
RETRY_MAX_DELAY = 8.0
COMPLETION_TEMPERATURE = 0.2

_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(?P<body>.*?)\n?```$", re.DOTALL)
_EFFORT_OFF = frozenset({"off", "disabled", "0", "false"})


class ReasoningServiceError(Exception):
    """The reasoning service failed or answered outside the output schema."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


def _message_text(message: Any) -> str | None:
    """Reply text, falling back to the first tool call's arguments."""
    content = getattr(message, "content", None)
    if content is not None:
        return str(content)
    for call in getattr(message, "tool_calls", None) or []:
        arguments = getattr(getattr(call, "function", None), "arguments", None)
        if isinstance(arguments, str) and arguments.strip():
            return arguments
    return None


def _json_payload(text: str) -> str:
    """Cut the first JSON object out of a reply that may carry fences or prose."""
    text = text.strip()
    fenced = _FENCE.match(text)
    if fenced:
        text = fenced.group("body").strip()

    start = text.find("{")
    if start < 0:
        return text
    try:
        _, end = json.JSONDecoder().raw_decode(text, start)
    except json.JSONDecodeError:
        return text
    return text[start:end]


def _reasoning_effort(value: str | None) -> str | None:
    effort = (value or "").strip().lower()
    if not effort:
        return None
    return "disable" if effort in _EFFORT_OFF else effort


class ReasoningClient:
    """Schema-validated structured generation over LiteLLM.

    Calls are spaced by ``llm_min_interval_seconds`` and transport errors
    are retried ``llm_max_retries`` times with exponential backoff; a
    timeout or a malformed reply fails immediately.
    """

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self.config = config or get_resolver_config()
        self._lock = threading.Lock()
        self._last_call_at: float | None = None

    def _get_model_name(self) -> str:
        """LiteLLM route for the configured provider and model."""
        model = self.config.llm_model
        provider = self.config.llm_provider
        if "/" in model:
            return model
        if provider in _PREFIXED_PROVIDERS:
            return f"{provider}/{model}"
        if self.config.llm_base_url:
            # Custom endpoints are assumed OpenAI-compatible
            return f"openai/{model}"
        return model if provider == "openai" else f"{provider}/{model}"

    def _throttle(self) -> None:
        interval = self.config.llm_min_interval_seconds
        with self._lock:
            started = time.monotonic()
            if interval > 0 and self._last_call_at is not None:
                remaining = interval - (started - self._last_call_at)
                if remaining > 0:
                    time.sleep(remaining)
            self._last_call_at = time.monotonic()

    def generate_structured(
        self,
        *,
        prompt: str,
        output_model: type[T],
        system_prompt: str | None = None,
    ) -> T:
        """Ask for a reply shaped like ``output_model`` and validate it.

        Raises:
            ReasoningServiceError: On timeout, exhausted retries, or a reply
                that does not validate.
        """
        from litellm.exceptions import Timeout

        messages = [{"role": "user", "content": prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})

        retries = self.config.llm_max_retries
        attempt = 0
        while True:
            self._throttle()
            try:
                response = self._call_completion(messages=messages, response_format=output_model)
            except Timeout as e:
                raise ReasoningServiceError(
                    f"Reasoning request exceeded {self.config.llm_timeout}s "
                    "(raise RESOLVER_LLM_TIMEOUT to allow longer calls)",
                    e,
                ) from e
            except Exception as e:
                if attempt >= retries:
                    raise ReasoningServiceError(
                        f"Reasoning call failed after {attempt + 1} attempt(s): {e}", e
                    ) from e
                delay = min(RETRY_BASE_DELAY * 2**attempt, RETRY_MAX_DELAY)
                logger.warning(
                    "Reasoning call failed (attempt %d/%d), retrying in %.1fs: %s",
                    attempt + 1,
                    retries + 1,
                    delay,
                    e,
                )
                time.sleep(delay)
                attempt += 1
                continue
            return self._parse_response(response, output_model)

    def _call_completion(
        self,
        *,
        messages: list[dict[str, str]],
        response_format: type[BaseModel] | None = None,
    ):
        from litellm import completion

        options: dict[str, Any] = {
            "api_key": self.config.llm_api_key,
            "base_url": self.config.llm_base_url,
            "reasoning_effort": _reasoning_effort(self.config.llm_reasoning_effort),
            "response_format": response_format,
        }
        return completion(
            model=self._get_model_name(),
            messages=messages,
            timeout=self.config.llm_timeout,
            temperature=COMPLETION_TEMPERATURE,
            **{key: value for key, value in options.items() if value is not None},
        )

    def _parse_response(self, response, output_model: type[T]) -> T:
        try:
            text = _message_text(response.choices[0].message)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise ReasoningServiceError(
                f"Reasoning service returned a malformed response: {e}", e
            ) from e
        if text is None:
            raise ReasoningServiceError("Reasoning service returned an empty reply")

        try:
            return output_model.model_validate_json(_json_payload(text))
        except ValidationError as e:
            raise ReasoningServiceError(
                f"Reasoning reply does not match {output_model.__name__}: "
                f"{e.error_count()} error(s)",
                e,
            ) from e
