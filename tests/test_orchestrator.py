# ===============================================
# tests/test_orchestrator.py
# Turn handling: join of classifier + retriever, style transition,
# composition handed to the completion client, error kinds.
# ===============================================

import asyncio
import time

import pytest

from everlast_chat.errors import CompletionFailed, InvalidInput, RetrievalUnavailable
from everlast_chat.generate import (
    ConversationStyle,
    Message,
    ResponseOrchestrator,
    Sender,
    StyleClassifier,
    StyleDetectionResult,
    resolve_style,
)
from everlast_chat.generate.prompts import STYLE_PROMPTS
from everlast_chat.generate.types import Role
from everlast_chat.search import Retriever

from fakes import FakeBackend, ScriptedClient, detection_json


def _detection(requesting, confidence, style):
    return StyleDetectionResult(
        requesting_style=requesting, confidence=confidence, suggested_style=style, explanation="",
    )


def _build(backend, chat_client, style_reply, **kwargs):
    return ResponseOrchestrator(
        model_client=chat_client,
        classifier=StyleClassifier(ScriptedClient([style_reply])),
        retriever=Retriever(backend),
        **{"classifier_timeout": 2.0, "retrieval_timeout": 2.0, "completion_timeout": 2.0, **kwargs},
    )


# -------------------------
# Style transition rule
# -------------------------
@pytest.mark.parametrize("confidence", [0.0, 0.71, 0.99, 1.0])
@pytest.mark.parametrize("style", [None, ConversationStyle.ANALYTICAL, ConversationStyle.DEFAULT])
def test_not_requesting_keeps_current_style(confidence, style):
    detection = _detection(False, confidence, style)
    assert resolve_style(detection, ConversationStyle.PRACTICAL) is ConversationStyle.PRACTICAL


def test_threshold_is_strict():
    assert resolve_style(_detection(True, 0.70, ConversationStyle.ANALYTICAL), ConversationStyle.DEFAULT) \
        is ConversationStyle.DEFAULT
    assert resolve_style(_detection(True, 0.71, ConversationStyle.ANALYTICAL), ConversationStyle.DEFAULT) \
        is ConversationStyle.ANALYTICAL


def test_missing_suggestion_keeps_current_style():
    assert resolve_style(_detection(True, 0.95, None), ConversationStyle.ANALYTICAL) \
        is ConversationStyle.ANALYTICAL


# -------------------------
# Scenarios
# -------------------------
def test_confident_request_switches_style(backend, chat_client):
    orch = _build(backend, chat_client, detection_json(True, 0.85, "analytical", "wants the why"))
    out = asyncio.run(orch.handle_turn("Explain the science please", [], ConversationStyle.DEFAULT))

    assert out.effective_style is ConversationStyle.ANALYTICAL
    assert out.new_style is ConversationStyle.ANALYTICAL
    assert len(out.search_results) == 2
    assert out.style_detection.confidence == 0.85
    assert out.answer == "Try four slow breaths in, hold, and out."

    instructions, _, _ = chat_client.calls[0]
    assert STYLE_PROMPTS[ConversationStyle.ANALYTICAL] in instructions


def test_low_confidence_request_keeps_style(backend, chat_client):
    orch = _build(backend, chat_client, detection_json(True, 0.5, "default", "unsure"))
    out = orch.handle_turn_sync("maybe simpler?", [], ConversationStyle.PRACTICAL)

    assert out.effective_style is ConversationStyle.PRACTICAL
    assert out.new_style is None
    instructions, _, _ = chat_client.calls[0]
    assert STYLE_PROMPTS[ConversationStyle.PRACTICAL] in instructions


def test_malformed_classification_keeps_style(backend, chat_client):
    orch = _build(backend, chat_client, "I think they want analytical!")
    out = orch.handle_turn_sync("go deeper", [], ConversationStyle.DEFAULT)

    assert out.effective_style is ConversationStyle.DEFAULT
    assert out.style_detection.requesting_style is False
    assert out.style_detection.confidence == 1.0
    assert out.style_detection.suggested_style is None


def test_completion_receives_context_history_and_message(orchestrator, chat_client):
    history = [
        Message(sender=Sender.USER, text="Hi"),
        Message(sender=Sender.ASSISTANT, text="Hello, how can I help?"),
    ]
    snapshot = list(history)
    orchestrator.handle_turn_sync("What helps with panic?", history, ConversationStyle.DEFAULT)

    instructions, turns, params = chat_client.calls[0]
    assert instructions.endswith(
        "Box breathing slows the heart rate within minutes.\n\nMagnesium glycinate supports GABA activity."
    )
    assert [(t.role, t.text) for t in turns] == [
        (Role.HUMAN, "Hi"),
        (Role.AI, "Hello, how can I help?"),
        (Role.HUMAN, "What helps with panic?"),
    ]
    assert params.temperature == 0.5
    assert history == snapshot


def test_classifier_and_retriever_both_see_message(orchestrator, backend, style_client):
    orchestrator.handle_turn_sync("racing thoughts at night", [])
    assert backend.calls == [("racing thoughts at night", 5)]
    assert style_client.calls[0][1][0].text == "racing thoughts at night"


# -------------------------
# Failures
# -------------------------
@pytest.mark.parametrize("message", ["", "   "])
def test_empty_message_is_invalid_input(orchestrator, backend, chat_client, message):
    with pytest.raises(InvalidInput):
        orchestrator.handle_turn_sync(message, [])
    assert backend.calls == []
    assert chat_client.calls == []


def test_unknown_style_is_invalid_input(orchestrator):
    with pytest.raises(InvalidInput):
        orchestrator.handle_turn_sync("hello", [], "poetic")


def test_retrieval_failure_fails_turn(chat_client):
    backend = FakeBackend([], error=ConnectionError("down"))
    orch = _build(backend, chat_client, detection_json(False, 0.9, None))
    with pytest.raises(RetrievalUnavailable):
        orch.handle_turn_sync("hello", [])
    assert chat_client.calls == []


def test_retrieval_timeout_is_retrieval_unavailable(chat_client):
    backend = FakeBackend([], delay=0.5)
    orch = _build(backend, chat_client, detection_json(False, 0.9, None), retrieval_timeout=0.05)
    with pytest.raises(RetrievalUnavailable):
        orch.handle_turn_sync("hello", [])
    assert chat_client.calls == []


def test_classifier_backend_failure_fails_turn(backend, chat_client):
    orch = ResponseOrchestrator(
        model_client=chat_client,
        classifier=StyleClassifier(ScriptedClient([""], error=RuntimeError("quota exceeded"))),
        retriever=Retriever(backend),
    )
    with pytest.raises(CompletionFailed):
        orch.handle_turn_sync("hello", [])
    assert chat_client.calls == []


def test_completion_failure_fails_turn(backend):
    chat_client = ScriptedClient([""], error=RuntimeError("overloaded"))
    orch = _build(backend, chat_client, detection_json(False, 0.9, None))
    with pytest.raises(CompletionFailed):
        orch.handle_turn_sync("hello", [])


def test_completion_timeout_is_completion_failed(backend):
    chat_client = ScriptedClient(["late"], delay=0.5)
    orch = _build(backend, chat_client, detection_json(False, 0.9, None), completion_timeout=0.05)
    with pytest.raises(CompletionFailed):
        orch.handle_turn_sync("hello", [])


def test_concurrent_turns_are_independent(backend):
    chat_client = ScriptedClient(["answer"])
    orch = _build(backend, chat_client, detection_json(True, 0.9, "practical", "steps"))

    async def run_both():
        return await asyncio.gather(
            orch.handle_turn("give me steps", [], ConversationStyle.DEFAULT),
            orch.handle_turn("give me steps", [], ConversationStyle.ANALYTICAL),
        )

    first, second = asyncio.run(run_both())
    assert first.effective_style is ConversationStyle.PRACTICAL
    assert second.effective_style is ConversationStyle.PRACTICAL
    assert first.new_style is ConversationStyle.PRACTICAL
    assert second.new_style is ConversationStyle.PRACTICAL


def test_classifier_and_retriever_overlap(chat_client):
    backend = FakeBackend([("Passage", 0.9, {"source": "kb.md"})], delay=0.3)
    orch = ResponseOrchestrator(
        model_client=chat_client,
        classifier=StyleClassifier(ScriptedClient([detection_json(False, 0.9, None)], delay=0.3)),
        retriever=Retriever(backend),
        classifier_timeout=2.0,
        retrieval_timeout=2.0,
        completion_timeout=2.0,
    )

    started = time.perf_counter()
    out = orch.handle_turn_sync("hello", [])
    elapsed = time.perf_counter() - started

    assert len(out.search_results) == 1
    assert elapsed < 0.55
