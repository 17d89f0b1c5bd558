# Generator package

# Makes generate/ importable and exposes key interfaces.

from .classifier import StyleClassifier
from .orchestrator import ResponseOrchestrator, build_orchestrator, resolve_style
from .prompts import compose
from .types import (
    ComposedPrompt,
    ConversationStyle,
    Message,
    ModelParams,
    OrchestrationResult,
    Sender,
    StyleDetectionResult,
    Turn,
)
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "ResponseOrchestrator",
    "build_orchestrator",
    "resolve_style",
    "StyleClassifier",
    "compose",
    "ComposedPrompt",
    "ConversationStyle",
    "Message",
    "ModelParams",
    "OrchestrationResult",
    "Sender",
    "StyleDetectionResult",
    "Turn",
    "EchoDevClient",
]
