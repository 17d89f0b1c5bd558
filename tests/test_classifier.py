# ===============================================
# tests/test_classifier.py
# Style classifier decoding and fallback.
# ===============================================

import pytest

from everlast_chat.errors import CompletionFailed
from everlast_chat.generate import ConversationStyle, StyleClassifier
from everlast_chat.generate.classifier import PARSE_FAILURE_EXPLANATION, fallback_result
from everlast_chat.generate.prompts import STYLE_DETECTION_PROMPT
from everlast_chat.generate.types import Role

from fakes import ScriptedClient, detection_json


def classify(reply: str):
    return StyleClassifier(ScriptedClient([reply])).classify("Can you get more scientific?")


def test_valid_reply():
    out = classify(detection_json(True, 0.85, "analytical", "Asked for science."))
    assert out.requesting_style is True
    assert out.confidence == 0.85
    assert out.suggested_style is ConversationStyle.ANALYTICAL
    assert out.explanation == "Asked for science."


def test_valid_reply_with_backticks_in_explanation():
    out = classify(detection_json(True, 0.9, "analytical", "user wrote ```more science``` please"))
    assert out.suggested_style is ConversationStyle.ANALYTICAL
    assert out.explanation == "user wrote ```more science``` please"


def test_reply_in_code_fence():
    out = classify("```json\n" + detection_json(True, 0.9, "practical", "steps") + "\n```")
    assert out.suggested_style is ConversationStyle.PRACTICAL


def test_null_style_is_absent_not_default():
    assert classify(detection_json(False, 0.2, None)).suggested_style is None
    assert classify(detection_json(False, 0.2, "default")).suggested_style is ConversationStyle.DEFAULT


def test_omitted_style_is_absent():
    out = classify('{"requestingStyle": false, "confidence": 0.3, "explanation": "none"}')
    assert out.suggested_style is None


@pytest.mark.parametrize("reply", [
    "Sure! The user wants analytical answers.",
    "",
    "[1, 2, 3]",
    "Sure! Here is my analysis:\n```json\n" + detection_json(True, 0.9, "analytical", "x") + "\n```\nHope this helps.",
    "Here you go:\n```json\n" + detection_json(True, 0.9, "analytical", "x") + "\n```",
    '{"requestingStyle": true, "confidence": 0.9}',
    '{"requestingStyle": "yes", "confidence": 0.9, "suggestedStyle": "analytical", "explanation": "x"}',
    '{"requestingStyle": true, "confidence": "high", "suggestedStyle": "analytical", "explanation": "x"}',
    '{"requestingStyle": true, "confidence": 1.5, "suggestedStyle": "analytical", "explanation": "x"}',
    '{"requestingStyle": true, "confidence": 0.9, "suggestedStyle": "poetic", "explanation": "x"}',
    '{"requestingStyle": true, "confidence": 0.9, "suggestedStyle": "analytical", "explanation": 7}',
])
def test_malformed_reply_falls_back(reply):
    out = classify(reply)
    assert out.requesting_style is False
    assert out.confidence == 1.0
    assert out.suggested_style is None
    assert out.explanation == PARSE_FAILURE_EXPLANATION
    assert out == fallback_result()


def test_backend_error_is_not_masked():
    client = ScriptedClient([""], error=TimeoutError("upstream timeout"))
    with pytest.raises(CompletionFailed):
        StyleClassifier(client).classify("hello")


def test_single_call_with_fixed_instruction():
    client = ScriptedClient([detection_json(False, 0.9, None)])
    StyleClassifier(client, temperature=0.1).classify("Just tell me what to do")

    assert len(client.calls) == 1
    instructions, turns, params = client.calls[0]
    assert instructions == STYLE_DETECTION_PROMPT
    assert [(t.role, t.text) for t in turns] == [(Role.HUMAN, "Just tell me what to do")]
    assert params.temperature == 0.1


def test_non_text_reply_falls_back():
    out = StyleClassifier(ScriptedClient([None])).classify("hello")
    assert out == fallback_result()
