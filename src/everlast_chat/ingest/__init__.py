# Offline ingestion: documents → chunks → embeddings → vector store.

from .normalize import chunk_text, normalize_text
from .run_ingest import collect_chunks, ingest

__all__ = ["chunk_text", "normalize_text", "collect_chunks", "ingest"]
