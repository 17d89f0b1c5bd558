# Dedup helpers for similarity results.
# Stateless; input arrives ranked by the backend and that order is kept.

from __future__ import annotations
from typing import Any, Dict, List, Sequence

from .types import Match, SearchResult


def to_search_results(matches: Sequence[Match]) -> List[SearchResult]:
    """Convert backend rows; raises TypeError or ValueError on a malformed row."""
    out: List[SearchResult] = []
    for content, score, metadata in matches:
        if not isinstance(content, str):
            raise TypeError(f"match content must be str, got {type(content).__name__}")
        if metadata is not None and not isinstance(metadata, dict):
            raise TypeError(f"match metadata must be a mapping, got {type(metadata).__name__}")
        source = (metadata or {}).get("source") or "unknown"
        out.append(SearchResult(content=content, score=float(score), source=str(source)))
    return out


def dedupe_ranked(results: Sequence[SearchResult], limit: int) -> List[SearchResult]:
    """
    Keep the first occurrence of each (source, content) key and clip to `limit`.
    Since `results` is score-sorted, the first occurrence is the best-scoring one.
    """
    seen: Dict[Any, None] = {}
    kept: List[SearchResult] = []
    for r in results:
        if r.key in seen:
            continue
        seen[r.key] = None
        kept.append(r)
        if len(kept) == limit:
            break
    return kept
