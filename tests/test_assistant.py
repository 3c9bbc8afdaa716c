# File: tests/test_assistant.py
from __future__ import annotations

from types import SimpleNamespace

import pytest
import pytest_asyncio
from conftest import CONDECO, StubFetcher, page

from kb_scout.assistant import Assistant, OpenAICompletion
from kb_scout.engine import Engine
from kb_scout.errors import CompletionError


class FakeCompletion:
    def __init__(self, response="Use the Condeco app.", error: Exception | None = None):
        self.response = response
        self.error = error
        self.messages = None

    async def complete(self, messages):
        self.messages = list(messages)
        if self.error:
            raise self.error
        return self.response


@pytest_asyncio.fixture
async def engine(config):
    fetcher = StubFetcher({CONDECO.url: page("Condeco Home", "Book a desk with Condeco")})
    engine = Engine(config, fetcher=fetcher)
    await engine.crawl()
    return engine


@pytest.mark.asyncio()
async def test_reply_with_context_and_sources(engine):
    completion = FakeCompletion()
    reply = await Assistant(engine, completion).reply("desk")

    assert reply.response == "Use the Condeco app."
    assert reply.sources == [{"title": "Condeco Home", "url": CONDECO.url}]
    system, user = completion.messages
    assert system["role"] == "system"
    assert system["content"].startswith(
        "You are an AI assistant for Eptura Asset Management.\n\nBased on Eptura knowledge:"
    )
    assert f"Source: {CONDECO.url}" in system["content"]
    assert user == {"role": "user", "content": "desk"}


@pytest.mark.asyncio()
async def test_no_matches_gives_bare_system_prompt(engine):
    completion = FakeCompletion()
    reply = await Assistant(engine, completion).reply("zzz")
    assert reply.sources == []
    assert completion.messages[0]["content"] == "You are an AI assistant for Eptura Asset Management.\n\n"


@pytest.mark.asyncio()
async def test_only_last_ten_turns_forwarded(engine):
    completion = FakeCompletion()
    history = [{"role": "user" if i % 2 else "assistant", "content": f"turn {i}"} for i in range(15)]
    await Assistant(engine, completion).reply("desk", history)

    forwarded = completion.messages[1:-1]
    assert forwarded == history[-10:]


@pytest.mark.asyncio()
async def test_service_failure_becomes_completion_error_and_store_is_untouched(engine):
    before = engine.store.urls()
    with pytest.raises(CompletionError):
        await Assistant(engine, FakeCompletion(error=RuntimeError("rate limited"))).reply("desk")
    assert engine.store.urls() == before


@pytest.mark.asyncio()
async def test_openai_completion_passes_model_settings(config):
    captured = {}

    async def create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="hello"))])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    service = OpenAICompletion(config, client=client)

    assert await service.complete([{"role": "user", "content": "hi"}]) == "hello"
    assert captured["model"] == "gpt-3.5-turbo"
    assert captured["max_tokens"] == 1000
    assert captured["temperature"] == 0.7
