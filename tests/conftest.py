"""Pytest configuration and fixtures."""

import os

# Settings are read at import time, so the environment is set before any test module imports the app.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LLM_PROVIDER", "echo")
os.environ.setdefault("VECTOR_STORE", "faiss")

import pytest

from everlast_chat.generate import ResponseOrchestrator, StyleClassifier
from everlast_chat.search import Retriever

from fakes import FakeBackend, ScriptedClient, detection_json

PASSAGES = [
    ("Box breathing slows the heart rate within minutes.", 0.91, {"source": "docs/breathing.md"}),
    ("Magnesium glycinate supports GABA activity.", 0.84, {"source": "docs/supplements.md"}),
]


@pytest.fixture
def backend():
    return FakeBackend(PASSAGES)


@pytest.fixture
def chat_client():
    return ScriptedClient(["Try four slow breaths in, hold, and out."])


@pytest.fixture
def style_client():
    return ScriptedClient([detection_json(False, 0.9, None, "No style request.")])


@pytest.fixture
def orchestrator(backend, chat_client, style_client):
    return ResponseOrchestrator(
        model_client=chat_client,
        classifier=StyleClassifier(style_client),
        retriever=Retriever(backend),
        classifier_timeout=2.0,
        retrieval_timeout=2.0,
        completion_timeout=2.0,
    )
