# Knowledge retriever over a pluggable similarity backend.
# - Over-fetch `over_fetch` matches so duplicates can be dropped
# - Dedup on exact (source, content), keep ranked order, clip to `final_count`
# - Backend failures surface as RetrievalUnavailable

from __future__ import annotations

from typing import List

from everlast_chat.errors import InvalidInput, RetrievalUnavailable
from everlast_chat.logs import get_logger

from .rank import dedupe_ranked, to_search_results
from .types import RetrievalResult, SearchResult, SimilarityBackend

logger = get_logger(__name__)

OVER_FETCH = 5
FINAL_COUNT = 3


class Retriever:
    def __init__(self, backend: SimilarityBackend, over_fetch: int = OVER_FETCH, final_count: int = FINAL_COUNT):
        if final_count < 1:
            raise ValueError("final_count must be at least 1")
        if over_fetch <= final_count:
            raise ValueError(f"over_fetch ({over_fetch}) must exceed final_count ({final_count})")
        self.backend = backend
        self.over_fetch = over_fetch
        self.final_count = final_count

    # -------------------------
    # Public API
    # -------------------------
    def retrieve(self, query: str) -> RetrievalResult:
        if not query or not query.strip():
            raise InvalidInput("query must be non-empty")

        try:
            matches = self.backend.search(query, self.over_fetch)
        except Exception as e:
            logger.error(f"Similarity search failed: {e}")
            raise RetrievalUnavailable(str(e)) from e

        try:
            ranked = to_search_results(matches)
        except (TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed similarity results: {e}")
            raise RetrievalUnavailable(f"malformed backend result: {e}") from e
        results: List[SearchResult] = dedupe_ranked(ranked, self.final_count)
        logger.debug(f"Retrieved {len(ranked)} matches, kept {len(results)}")
        return RetrievalResult(
            results=results,
            combined_text="\n\n".join(r.content for r in results),
        )
