# Dummy model client for local dev and testing without API calls.

from typing import Sequence

from ..types import ModelParams, Role, Turn


class EchoDevClient:
    def __init__(self):
        self.model = "echo-dev"

    def complete(self, instructions: str, turns: Sequence[Turn], params: ModelParams) -> str:
        human = [t.text for t in turns if t.role == Role.HUMAN]
        return f"[ECHO RESPONSE]\n{human[-1] if human else '(no user input)'}"
