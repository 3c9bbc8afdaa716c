# === FILE: kb_scout/assistant.py ===
"""Chat assistant: knowledge context + recent conversation -> completion service.

The completion service is anything with an ``async complete(messages)``
method. :class:`OpenAICompletion` is the production one; tests pass a fake.
Nothing here writes to the document store.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from openai import AsyncOpenAI, OpenAIError

from kb_scout.config import KnowledgeConfig
from kb_scout.engine import Engine
from kb_scout.errors import CompletionError
from kb_scout.logger import logger
from kb_scout.search import SearchHit

__all__ = ["CompletionService", "OpenAICompletion", "ChatReply", "Assistant"]

Message = Dict[str, str]


class CompletionService(Protocol):
    async def complete(self, messages: Sequence[Message]) -> str: ...


class OpenAICompletion:
    """Chat completions through the OpenAI API (key from ``OPENAI_API_KEY``)."""

    def __init__(self, config: KnowledgeConfig, client: Optional[AsyncOpenAI] = None) -> None:
        self.config = config
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI()
        return self._client

    async def complete(self, messages: Sequence[Message]) -> str:
        try:
            completion = await self._get_client().chat.completions.create(
                model=self.config.openai_model,
                messages=list(messages),
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
        except OpenAIError as exc:
            raise CompletionError(str(exc)) from exc
        return completion.choices[0].message.content or ""


@dataclass(slots=True)
class ChatReply:
    response: str
    sources: List[Dict[str, str]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {"response": self.response, "sources": self.sources}


class Assistant:
    """Answers one user message with knowledge-base context attached."""

    def __init__(self, engine: Engine, completion: CompletionService) -> None:
        self.engine = engine
        self.completion = completion

    def build_messages(
        self, message: str, conversation: Sequence[Message] = ()
    ) -> tuple[List[Message], List[SearchHit]]:
        """System prompt with context, the last turns of *conversation*, then *message*."""
        config = self.engine.config
        context, hits = self.engine.context_for(message)
        history = list(conversation)[-config.history_limit:] if config.history_limit else []
        messages: List[Message] = [
            {"role": "system", "content": f"{config.system_prompt}\n\n{context}"},
            *history,
            {"role": "user", "content": message},
        ]
        return messages, hits

    async def reply(self, message: str, conversation: Sequence[Message] = ()) -> ChatReply:
        messages, hits = self.build_messages(message, conversation)
        logger.debug("Chat request: %d message(s), %d source(s)", len(messages), len(hits))
        try:
            response = await self.completion.complete(messages)
        except CompletionError:
            raise
        except Exception as exc:
            raise CompletionError(str(exc)) from exc
        return ChatReply(
            response=response,
            sources=[{"title": hit.title, "url": hit.url} for hit in hits],
        )
