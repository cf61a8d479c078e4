"""Tests for the OpenAI-compatible model backend.

Uses httpx.MockTransport so no network access is needed. Covers request
formatting per mode, usage extraction, retry behaviour and the error mapping
into the ModelError family.
"""

from __future__ import annotations

import json
import time

import httpx
import pytest
import tenacity

from mindshift_assist.domain.errors import (
    ConfigurationError,
    ModelAuthError,
    ModelError,
    ModelRateLimitError,
    ModelResponseError,
    ModelTimeoutError,
)
from mindshift_assist.infrastructure.config.settings import Settings
from mindshift_assist.infrastructure.llm.openai.client import OpenAIModelInvoker


def _success_response(content: str = "Pick one.", prompt_tokens: int = 40, completion_tokens: int = 6) -> dict:
    return {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }


def _settings(**overrides) -> Settings:
    values = {
        "OPENAI_API_KEY": "test-key",
        "MINDSHIFT_OPENAI_BASE_URL": "http://test-api/v1",
        "MINDSHIFT_MODEL_MAX_RETRIES": 2,
        "MINDSHIFT_TELEMETRY_ENABLED": False,
    }
    values.update(overrides)
    return Settings(**values)


def _invoker(handler, **overrides) -> OpenAIModelInvoker:
    return OpenAIModelInvoker(
        settings=_settings(**overrides),
        transport=httpx.MockTransport(handler),
        retry_wait=tenacity.wait_none(),
    )


def test_guidance_request_payload_and_usage() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_success_response(content="  Pick one.  "))

    completion = _invoker(handler).invoke("the prompt", linguistic=False)

    assert seen["url"] == "http://test-api/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"]["messages"] == [{"role": "system", "content": "the prompt"}]
    assert seen["body"]["max_tokens"] == 150
    assert seen["body"]["temperature"] == 0.7
    assert seen["body"]["model"] == "gpt-4o-mini"

    assert completion.content == "Pick one."
    assert completion.input_tokens == 40
    assert completion.output_tokens == 6
    assert completion.total_tokens == 46


def test_linguistic_mode_lowers_ceiling_and_temperature() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_success_response())

    _invoker(handler).invoke("the prompt", linguistic=True)

    assert seen["body"]["max_tokens"] == 100
    assert seen["body"]["temperature"] == 0.3


def test_missing_api_key_is_raised_at_call_time() -> None:
    invoker = OpenAIModelInvoker(settings=_settings(OPENAI_API_KEY=None))

    with pytest.raises(ConfigurationError):
        invoker.invoke("prompt", linguistic=False)


def test_auth_error_is_not_retried() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, json={"error": "bad key"})

    with pytest.raises(ModelAuthError):
        _invoker(handler).invoke("prompt", linguistic=False)
    assert len(calls) == 1


def test_rate_limit_is_retried_then_raised() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429, headers={"Retry-After": "2"}, json={"error": "slow down"})

    with pytest.raises(ModelRateLimitError) as excinfo:
        _invoker(handler).invoke("prompt", linguistic=False)

    assert len(calls) == 3
    assert excinfo.value.retry_after == 2.0


def test_server_error_recovers_on_retry() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(503, json={"error": "unavailable"})
        return httpx.Response(200, json=_success_response())

    completion = _invoker(handler).invoke("prompt", linguistic=False)

    assert completion.content == "Pick one."
    assert len(calls) == 2


def test_bad_request_becomes_model_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "bad"})

    with pytest.raises(ModelError):
        _invoker(handler).invoke("prompt", linguistic=False)


def test_missing_choices_is_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "x"})

    with pytest.raises(ModelResponseError):
        _invoker(handler).invoke("prompt", linguistic=False)


def test_empty_choices_is_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    with pytest.raises(ModelResponseError):
        _invoker(handler).invoke("prompt", linguistic=False)


def test_read_timeout_is_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(ModelTimeoutError):
        _invoker(handler).invoke("prompt", linguistic=False)


def test_missing_usage_counts_zero() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = _success_response()
        del body["usage"]
        return httpx.Response(200, json=body)

    completion = _invoker(handler).invoke("prompt", linguistic=False)

    assert completion.total_tokens == 0
    assert completion.input_tokens == 0


@pytest.mark.parametrize(
    "mutate",
    [
        lambda body: body["usage"].update(prompt_tokens="n/a"),
        lambda body: body["usage"].update(completion_tokens=-3),
        lambda body: body.update(usage=["not", "an", "object"]),
        lambda body: body["choices"][0]["message"].update(content=["a"]),
        lambda body: body["choices"].__setitem__(0, "not a choice"),
    ],
    ids=["non_numeric_usage", "negative_usage", "usage_list", "list_content", "choice_string"],
)
def test_malformed_completion_is_response_error(mutate) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = _success_response()
        mutate(body)
        return httpx.Response(200, json=body)

    with pytest.raises(ModelResponseError):
        _invoker(handler).invoke("prompt", linguistic=False)


def test_each_attempt_gets_a_share_of_the_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_success_response())

    invoker = _invoker(handler, MINDSHIFT_MODEL_TIMEOUT_SECONDS=9.0, MINDSHIFT_MODEL_MAX_RETRIES=2)
    invoker.invoke("prompt", linguistic=False)

    assert invoker._client.timeout.read == pytest.approx(3.0)
    assert invoker._client.timeout.connect == pytest.approx(3.0)


def test_retries_stop_once_the_timeout_budget_is_spent() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        time.sleep(0.12)
        return httpx.Response(503, json={"error": "unavailable"})

    invoker = _invoker(handler, MINDSHIFT_MODEL_TIMEOUT_SECONDS=0.2, MINDSHIFT_MODEL_MAX_RETRIES=5)

    with pytest.raises(ModelError):
        invoker.invoke("prompt", linguistic=False)
    assert len(calls) == 2
