# Data models for the search layer.
# These types represent what the similarity backends and the retriever return.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence, Tuple


# (content, score, metadata) as returned by a similarity backend
Match = Tuple[str, float, Dict[str, Any]]


@dataclass(frozen=True)
class SearchResult:
    """A knowledge-base passage returned by the Retriever."""
    content: str
    score: float
    source: str

    @property
    def key(self) -> Tuple[str, str]:
        return (self.source, self.content)


@dataclass(frozen=True)
class RetrievalResult:
    """Deduplicated results plus their contents joined for the prompt."""
    results: List[SearchResult] = field(default_factory=list)
    combined_text: str = ""


@dataclass(frozen=True)
class DocumentChunk:
    """A chunk produced by offline ingestion, ready to embed and upsert."""
    content: str
    source: str
    meta: Dict[str, Any] = field(default_factory=dict)


class SimilarityBackend(Protocol):
    def search(self, query: str, k: int) -> Sequence[Match]:
        """Top-k matches, descending by score."""
        ...


class Embedder(Protocol):
    def embed_query(self, text: str) -> List[float]:
        ...

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        ...
