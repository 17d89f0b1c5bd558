# Client for Ollama local inference.
# Flattens instructions + turns into a single prompt for /api/generate.

import os
from typing import Sequence

import requests

from ..types import ModelParams, Turn

OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434")


class OllamaClient:
    def __init__(self, model: str = "mistral:7b-instruct", host: str = OLLAMA_HOST):
        self.model = model
        self.host = host

    def complete(self, instructions: str, turns: Sequence[Turn], params: ModelParams) -> str:
        payload = {
            "model": self.model,
            "system": instructions,
            "prompt": self._compose_prompt(turns),
            "stream": False,
            "options": {
                "temperature": float(params.temperature if params.temperature is not None else 0.3),
                "num_predict": int(params.max_tokens or 1000),
            },
        }
        resp = requests.post(f"{self.host}/api/generate", json=payload, timeout=180)
        resp.raise_for_status()
        return resp.json().get("response", "").strip()

    def _compose_prompt(self, turns: Sequence[Turn]) -> str:
        parts = [f"{t.role.value.upper()}:\n{t.text.strip()}\n" for t in turns]
        parts.append("AI:\n")
        return "\n".join(parts)
