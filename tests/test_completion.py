import json
from types import SimpleNamespace

import pytest

from cago.services import completion
from cago.services.completion import (
    AnthropicCompletionClient,
    CannedCompletionClient,
    OpenAICompletionClient,
    get_completion_client,
)
from cago.utils import metrics
from cago.utils.errors import UpstreamGenerationError


def test_missing_keys_raise():
    with pytest.raises(UpstreamGenerationError):
        AnthropicCompletionClient("", "claude-sonnet-4-20250514")
    with pytest.raises(UpstreamGenerationError):
        OpenAICompletionClient("", "gpt-4.1-mini")


@pytest.mark.asyncio
async def test_anthropic_returns_first_text_block():
    captured = {}

    async def fake_create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(
            content=[SimpleNamespace(type="text", text='{"ok": true}')],
            stop_reason="end_turn",
        )

    client = AnthropicCompletionClient("key", "claude-sonnet-4-20250514")
    client.client = SimpleNamespace(messages=SimpleNamespace(create=fake_create))

    text = await client.complete("prompt", system="sys", max_tokens=1024, operation="assessment")

    assert text == '{"ok": true}'
    assert captured["system"] == "sys"
    assert captured["max_tokens"] == 1024
    assert captured["messages"] == [{"role": "user", "content": "prompt"}]
    assert metrics.get_snapshot()["counters"]["anthropic.assessment.success"] == 1


@pytest.mark.asyncio
async def test_anthropic_failure_is_upstream_error():
    async def fake_create(**kwargs):
        raise RuntimeError("overloaded")

    client = AnthropicCompletionClient("key", "claude-sonnet-4-20250514")
    client.client = SimpleNamespace(messages=SimpleNamespace(create=fake_create))

    with pytest.raises(UpstreamGenerationError):
        await client.complete("prompt", system="sys", max_tokens=10, operation="plan")
    assert metrics.get_snapshot()["counters"]["anthropic.plan.error"] == 1


@pytest.mark.asyncio
async def test_openai_sends_system_message():
    captured = {}

    async def fake_create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(choices=[
            SimpleNamespace(finish_reason="length", message=SimpleNamespace(content='{"a": 1'))
        ])

    client = OpenAICompletionClient("key", "gpt-4.1-mini")
    client.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=fake_create)))

    text = await client.complete("prompt", system="sys", max_tokens=4096, operation="plan")

    assert text == '{"a": 1'
    assert captured["messages"][0] == {"role": "system", "content": "sys"}
    assert captured["model"] == "gpt-4.1-mini"


@pytest.mark.asyncio
async def test_canned_client_consumes_lists_in_order():
    client = CannedCompletionClient({"plan": ["first", "second"]})

    assert await client.complete("p", system="s", max_tokens=1, operation="plan") == "first"
    assert await client.complete("p", system="s", max_tokens=1, operation="plan") == "second"
    with pytest.raises(UpstreamGenerationError):
        await client.complete("p", system="s", max_tokens=1, operation="plan")
    assert len(client.calls) == 3


def test_mock_responses_are_valid_json():
    for operation, text in completion.MOCK_RESPONSES.items():
        assert isinstance(json.loads(text), dict), operation


def test_test_mode_selects_canned_client(monkeypatch):
    monkeypatch.setattr(completion, "_client", None)

    assert isinstance(get_completion_client(), CannedCompletionClient)
