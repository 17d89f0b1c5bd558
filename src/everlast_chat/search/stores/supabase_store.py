"""Supabase (pgvector) similarity backend.

Expects a `documents(content text, metadata jsonb, embedding vector)` table
and a `match_documents(query_embedding, match_count, filter)` function
returning `content`, `metadata` and `similarity`, ordered by similarity.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from everlast_chat.search.types import DocumentChunk, Embedder, Match


@lru_cache(maxsize=1)
def get_supabase(url: str, key: str) -> Client:
    """
    Get Supabase client instance (cached per url/key).

    Raises:
        RuntimeError: If client initialization fails
    """
    try:
        return create_client(url, key)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e


class SupabaseVectorStore:
    def __init__(
        self,
        client: Client,
        embedder: Embedder,
        table_name: str = "documents",
        query_name: str = "match_documents",
        filter: Optional[Dict[str, Any]] = None,
    ):
        self.client = client
        self.embedder = embedder
        self.table_name = table_name
        self.query_name = query_name
        self.filter = filter or {}

    def search(self, query: str, k: int) -> List[Match]:
        embedding = self.embedder.embed_query(query)
        resp = self.client.rpc(
            self.query_name,
            {"query_embedding": embedding, "match_count": k, "filter": self.filter},
        ).execute()

        rows = resp.data or []
        return [
            (row["content"], float(row.get("similarity", 0.0)), row.get("metadata") or {})
            for row in rows
        ]

    def add_documents(self, chunks: List[DocumentChunk], batch_size: int = 100) -> int:
        written = 0
        for i in range(0, len(chunks), batch_size):
            batch = chunks[i : i + batch_size]
            vectors = self.embedder.embed_documents([c.content for c in batch])
            rows = [
                {"content": c.content, "metadata": {"source": c.source, **c.meta}, "embedding": v}
                for c, v in zip(batch, vectors)
            ]
            self.client.table(self.table_name).insert(rows).execute()
            written += len(rows)
        return written
