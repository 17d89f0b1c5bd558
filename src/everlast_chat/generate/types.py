# Typed structures shared across generator modules.

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from everlast_chat.search.types import SearchResult


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ConversationStyle(str, Enum):
    DEFAULT = "default"
    ANALYTICAL = "analytical"
    PRACTICAL = "practical"


class Role(str, Enum):
    HUMAN = "human"
    AI = "ai"


@dataclass(frozen=True)
class Message:
    """Single conversation entry as held by the caller."""
    sender: Sender
    text: str


@dataclass(frozen=True)
class Turn:
    """A role-tagged entry handed to a completion backend."""
    role: Role
    text: str


@dataclass(frozen=True)
class ComposedPrompt:
    instructions: str
    turns: List[Turn] = field(default_factory=list)


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class StyleDetectionResult(BaseModel):
    """Decoded classifier reply. `suggested_style=None` means the model gave none."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    requesting_style: bool = Field(alias="requestingStyle", strict=True)
    confidence: float = Field(ge=0.0, le=1.0)
    suggested_style: Optional[ConversationStyle] = Field(default=None, alias="suggestedStyle")
    explanation: str = Field(strict=True)

    @field_validator("confidence", mode="before")
    @classmethod
    def _numeric_confidence(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("confidence must be a number")
        return v

    @field_validator("suggested_style", mode="before")
    @classmethod
    def _empty_style_is_absent(cls, v):
        return None if v == "" else v


@dataclass(frozen=True)
class OrchestrationResult:
    """Everything the caller gets back for one turn."""
    answer: str
    effective_style: ConversationStyle
    search_results: List[SearchResult]
    style_detection: StyleDetectionResult
    previous_style: ConversationStyle

    @property
    def new_style(self) -> Optional[ConversationStyle]:
        """The effective style, only when it differs from the style passed in."""
        return self.effective_style if self.effective_style != self.previous_style else None


class CompletionClient(Protocol):
    model: str

    def complete(self, instructions: str, turns: Sequence[Turn], params: ModelParams) -> str:
        ...
