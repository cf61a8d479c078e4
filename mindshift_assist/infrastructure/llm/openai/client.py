"""OpenAI-compatible completion backend on httpx with tenacity retry.

The API key is checked when a call is attempted, not when the invoker is
built, so a missing credential degrades to scripted fallback text instead of
stopping the service.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx
import tenacity

from mindshift_assist.domain.errors import (
    ConfigurationError,
    ModelAuthError,
    ModelError,
    ModelRateLimitError,
    ModelResponseError,
    ModelTimeoutError,
)
from mindshift_assist.domain.models import ModelCompletion
from mindshift_assist.infrastructure.config.settings import Settings, get_settings
from mindshift_assist.infrastructure.llm.params import generation_params

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}


def _token_count(value: Any) -> int:
    # # Usage counters must be non-negative integers; null means not reported
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"token count {value!r} is not a number")
    if value < 0:
        raise ValueError(f"token count {value!r} is negative")
    return int(value)


def _is_retryable(exc: BaseException) -> bool:
    """Retry 429, 5xx and connection errors; fail fast on auth and other 4xx."""
    if isinstance(exc, ModelAuthError):
        return False
    if isinstance(exc, ModelRateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


class OpenAIModelInvoker:
    """Sync client for the ``/chat/completions`` endpoint.

    Implements the IModelInvoker protocol. The whole prompt travels as one
    system-role message.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        retry_wait: Optional[tenacity.wait.wait_base] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self._retry_wait = retry_wait
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        # # Lazily build the HTTP client; raises when the credential is missing
        if self._client is not None:
            return self._client

        api_key = self._settings.openai_api_key
        if not api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY environment variable is required"
            )

        self._client = httpx.Client(
            timeout=self._attempt_timeout(),
            transport=self._transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )
        return self._client

    def _attempts(self) -> int:
        return max(1, self._settings.model_max_retries + 1)

    def _attempt_timeout(self) -> float:
        # # Every attempt gets an equal share of the overall model timeout
        return self._settings.model_timeout_seconds / self._attempts()

    def invoke(self, prompt: str, linguistic: bool) -> ModelCompletion:
        client = self._get_client()
        params = generation_params(linguistic, self._settings)
        payload: Dict[str, Any] = {
            "model": self._settings.openai_model,
            "messages": [{"role": "system", "content": prompt}],
            "max_tokens": params.max_tokens,
            "temperature": params.temperature,
        }

        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=self._retry_wait or (
                tenacity.wait_exponential(multiplier=0.5, min=0.5, max=self._attempt_timeout())
                + tenacity.wait_random(0, 0.5)
            ),
            stop=(
                tenacity.stop_after_attempt(self._attempts())
                | tenacity.stop_after_delay(self._settings.model_timeout_seconds)
            ),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        start = time.perf_counter()
        try:
            data = retryer(self._post, client, payload)
        except httpx.TimeoutException as exc:
            raise ModelTimeoutError(f"Completion request timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise ModelError(
                f"Completion request failed: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ModelError(f"Completion request failed: {exc}") from exc
        latency_ms = (time.perf_counter() - start) * 1000.0

        return self._to_completion(data, latency_ms)

    def _post(self, client: httpx.Client, payload: Dict[str, Any]) -> Dict[str, Any]:
        # # Execute a single request (no retry)
        response = client.post(
            f"{self._settings.openai_base_url.rstrip('/')}/chat/completions",
            json=payload,
        )

        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise ModelAuthError(
                f"Authentication failed: HTTP {response.status_code}"
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: Optional[float] = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except (ValueError, TypeError):
                    pass
            raise ModelRateLimitError("Rate limited: HTTP 429", retry_after=retry_after)

        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as exc:
            raise ModelResponseError(f"Response is not JSON: {exc}") from exc
        if not isinstance(data, dict) or "choices" not in data:
            raise ModelResponseError("Unexpected response format: missing 'choices' key")
        return data

    def _to_completion(self, data: Dict[str, Any], latency_ms: float) -> ModelCompletion:
        # # Any shape or type mismatch in a 200 body is a response error
        try:
            content = data["choices"][0]["message"].get("content") or ""
            if not isinstance(content, str):
                raise TypeError(f"content is {type(content).__name__}, expected str")

            usage = data.get("usage") or {}
            if not isinstance(usage, dict):
                raise TypeError(f"usage is {type(usage).__name__}, expected object")
            input_tokens = _token_count(usage.get("prompt_tokens"))
            output_tokens = _token_count(usage.get("completion_tokens"))
            total_tokens = _token_count(usage.get("total_tokens"))
        except (KeyError, IndexError, TypeError, ValueError, OverflowError, AttributeError) as exc:
            raise ModelResponseError(f"Cannot extract completion from response: {exc}") from exc

        return ModelCompletion(
            content=content.strip(),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens,
            model=str(data.get("model") or self._settings.openai_model),
            latency_ms=latency_ms,
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
