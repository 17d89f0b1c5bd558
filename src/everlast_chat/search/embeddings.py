# Query/document embedders for the vector stores.
# OpenAI is the default; Ollama serves local development.

from __future__ import annotations

import os
from typing import List

import requests
from openai import OpenAI

OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434")


class OpenAIEmbedder:
    def __init__(self, model: str = "text-embedding-3-small", api_key: str | None = None):
        self.model = model
        self.client = OpenAI(api_key=api_key or os.getenv("OPENAI_API_KEY"))

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        resp = self.client.embeddings.create(model=self.model, input=texts)
        return [d.embedding for d in sorted(resp.data, key=lambda d: d.index)]

    def embed_query(self, text: str) -> List[float]:
        return self.embed_documents([text])[0]


class OllamaEmbedder:
    def __init__(self, model: str = "bge-m3:latest", host: str = OLLAMA_HOST):
        self.model = model
        self.host = host

    def embed_query(self, text: str) -> List[float]:
        url = f"{self.host}/api/embeddings"
        resp = requests.post(url, json={"model": self.model, "prompt": text}, timeout=30)
        resp.raise_for_status()
        return resp.json()["embedding"]

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        return [self.embed_query(t) for t in texts]


def build_embedder(provider: str, model: str, api_key: str | None = None):
    if provider == "ollama":
        return OllamaEmbedder(model=model)
    if provider == "openai":
        return OpenAIEmbedder(model=model, api_key=api_key)
    raise ValueError(f"Unknown embed provider: {provider}")
