# Client for the Anthropic Messages API (default completion backend).
# Same interface as the other clients: complete(instructions, turns, params) -> str.

import os
from typing import Sequence

from anthropic import Anthropic

from ..types import ModelParams, Role, Turn

_ROLES = {Role.HUMAN: "user", Role.AI: "assistant"}


class AnthropicClient:
    def __init__(self, model: str = "claude-3-sonnet-20240229", api_key: str | None = None):
        self.model = model
        self.client = Anthropic(api_key=api_key or os.getenv("ANTHROPIC_API_KEY"))

    def complete(self, instructions: str, turns: Sequence[Turn], params: ModelParams) -> str:
        resp = self.client.messages.create(
            model=self.model,
            system=instructions,
            messages=[{"role": _ROLES[t.role], "content": t.text} for t in turns],
            temperature=params.temperature if params.temperature is not None else 0.5,
            max_tokens=params.max_tokens or 1024,
        )
        return "".join(block.text for block in resp.content if block.type == "text").strip()
