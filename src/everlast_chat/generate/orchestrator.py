"""Per-turn response pipeline.

ResponseOrchestrator.handle_turn() is a function of (message, history,
current style): it holds no session state. Style classification and
knowledge retrieval run concurrently and are joined before the style
decision; a failure in either fails the turn. The answer call follows
prompt composition.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Sequence, Type

from everlast_chat.errors import CompletionFailed, EverlastChatError, InvalidInput, RetrievalUnavailable
from everlast_chat.logs import get_logger, log_with_context
from everlast_chat.search.retriever import Retriever
from everlast_chat.search.types import RetrievalResult

from .classifier import StyleClassifier
from .prompts import compose
from .types import (
    CompletionClient,
    ConversationStyle,
    Message,
    ModelParams,
    OrchestrationResult,
    Role,
    StyleDetectionResult,
    Turn,
)

logger = get_logger(__name__)

STYLE_SWITCH_THRESHOLD = 0.7


def resolve_style(
    detection: StyleDetectionResult,
    current_style: ConversationStyle,
    threshold: float = STYLE_SWITCH_THRESHOLD,
) -> ConversationStyle:
    """Switch to the suggested style only on an explicit, confident (> threshold) request."""
    if detection.requesting_style and detection.confidence > threshold and detection.suggested_style is not None:
        return detection.suggested_style
    return current_style


async def _bounded(fn: Callable[..., Any], *args: Any, timeout: float, error: Type[EverlastChatError], what: str) -> Any:
    """Run a blocking backend call in a worker thread; timeout becomes `error`."""
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout)
    except asyncio.TimeoutError as e:
        raise error(f"{what} timed out after {timeout}s") from e


class ResponseOrchestrator:
    def __init__(
        self,
        model_client: CompletionClient,
        classifier: StyleClassifier,
        retriever: Retriever,
        temperature: float = 0.5,
        max_tokens: int = 1024,
        switch_threshold: float = STYLE_SWITCH_THRESHOLD,
        classifier_timeout: float = 30.0,
        retrieval_timeout: float = 30.0,
        completion_timeout: float = 120.0,
    ):
        self.model_client = model_client
        self.classifier = classifier
        self.retriever = retriever
        self.params = ModelParams(temperature=temperature, max_tokens=max_tokens)
        self.switch_threshold = switch_threshold
        self.classifier_timeout = classifier_timeout
        self.retrieval_timeout = retrieval_timeout
        self.completion_timeout = completion_timeout

    async def _detect_and_retrieve(self, message: str) -> tuple[StyleDetectionResult, RetrievalResult]:
        tasks = [
            asyncio.create_task(
                _bounded(self.classifier.classify, message,
                         timeout=self.classifier_timeout, error=CompletionFailed, what="style detection")
            ),
            asyncio.create_task(
                _bounded(self.retriever.retrieve, message,
                         timeout=self.retrieval_timeout, error=RetrievalUnavailable, what="retrieval")
            ),
        ]
        try:
            detection, retrieval = await asyncio.gather(*tasks)
        except BaseException:
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return detection, retrieval

    async def _complete(self, instructions: str, turns: list[Turn]) -> str:
        try:
            return await _bounded(
                self.model_client.complete, instructions, turns, self.params,
                timeout=self.completion_timeout, error=CompletionFailed, what="completion",
            )
        except EverlastChatError:
            raise
        except Exception as e:
            logger.error(f"Completion call failed: {e}")
            raise CompletionFailed(str(e)) from e

    async def handle_turn(
        self,
        message: str,
        history: Sequence[Message],
        current_style: ConversationStyle = ConversationStyle.DEFAULT,
    ) -> OrchestrationResult:
        if not isinstance(message, str) or not message.strip():
            raise InvalidInput("message must be non-empty")
        try:
            current_style = ConversationStyle(current_style)
        except ValueError as e:
            raise InvalidInput(f"unknown style: {current_style!r}") from e

        detection, retrieval = await self._detect_and_retrieve(message)

        effective_style = resolve_style(detection, current_style, self.switch_threshold)
        if effective_style != current_style:
            log_with_context(
                logger, logging.INFO, "Style switched",
                previous=current_style.value, new=effective_style.value, confidence=detection.confidence,
            )

        prompt = compose(effective_style, retrieval.combined_text, history)
        turns = [*prompt.turns, Turn(role=Role.HUMAN, text=message)]
        answer = await self._complete(prompt.instructions, turns)

        log_with_context(
            logger, logging.INFO, "Turn complete",
            style=effective_style.value, passages=len(retrieval.results), history=len(history),
        )
        return OrchestrationResult(
            answer=answer,
            effective_style=effective_style,
            search_results=retrieval.results,
            style_detection=detection,
            previous_style=current_style,
        )

    def handle_turn_sync(
        self,
        message: str,
        history: Sequence[Message],
        current_style: ConversationStyle = ConversationStyle.DEFAULT,
    ) -> OrchestrationResult:
        """Blocking wrapper for callers without an event loop."""
        return asyncio.run(self.handle_turn(message, history, current_style))


def build_orchestrator(cfg) -> ResponseOrchestrator:
    """Wire clients, classifier and retriever from Settings."""
    from .clients import build_client
    from everlast_chat.search.stores import build_vector_store

    chat_client = build_client(cfg.LLM_PROVIDER, cfg.CHAT_MODEL, cfg)
    style_client = build_client(cfg.LLM_PROVIDER, cfg.STYLE_MODEL, cfg)
    retriever = Retriever(
        backend=build_vector_store(cfg),
        over_fetch=cfg.RETRIEVAL_OVER_FETCH,
        final_count=cfg.RETRIEVAL_FINAL_COUNT,
    )
    return ResponseOrchestrator(
        model_client=chat_client,
        classifier=StyleClassifier(style_client, temperature=cfg.STYLE_TEMPERATURE),
        retriever=retriever,
        temperature=cfg.CHAT_TEMPERATURE,
        max_tokens=cfg.MAX_TOKENS,
        switch_threshold=cfg.STYLE_SWITCH_THRESHOLD,
        classifier_timeout=cfg.CLASSIFIER_TIMEOUT_S,
        retrieval_timeout=cfg.RETRIEVAL_TIMEOUT_S,
        completion_timeout=cfg.COMPLETION_TIMEOUT_S,
    )
