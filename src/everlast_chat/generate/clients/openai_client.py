# Client for OpenAI Chat Completions API.
# It follows the same interface as AnthropicClient.

import os
from typing import Sequence

from openai import OpenAI

from ..types import ModelParams, Role, Turn

_ROLES = {Role.HUMAN: "user", Role.AI: "assistant"}


class OpenAIClient:
    def __init__(self, model: str = "gpt-4o-mini", api_key: str | None = None):
        self.model = model
        self.client = OpenAI(api_key=api_key or os.getenv("OPENAI_API_KEY"))

    def complete(self, instructions: str, turns: Sequence[Turn], params: ModelParams) -> str:
        formatted = [{"role": "system", "content": instructions}]
        formatted += [{"role": _ROLES[t.role], "content": t.text} for t in turns]
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=formatted,
            temperature=params.temperature if params.temperature is not None else 0.3,
            max_tokens=params.max_tokens or 1000,
        )
        return (resp.choices[0].message.content or "").strip()
