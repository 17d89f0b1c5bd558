# Similarity backends. Import lazily so FAISS / Supabase are only loaded when selected.

from __future__ import annotations

from everlast_chat.search.embeddings import build_embedder


def build_vector_store(cfg):
    """Construct the configured similarity backend from Settings."""
    embedder = build_embedder(cfg.EMBED_PROVIDER, cfg.EMBED_MODEL, api_key=cfg.OPENAI_API_KEY)

    if cfg.VECTOR_STORE == "faiss":
        from .faiss_store import FaissVectorStore

        return FaissVectorStore(db_path=cfg.DB_PATH, faiss_path=cfg.FAISS_PATH, embedder=embedder)

    if cfg.VECTOR_STORE == "supabase":
        from .supabase_store import SupabaseVectorStore, get_supabase

        if not cfg.SUPABASE_URL or not cfg.SUPABASE_PRIVATE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_PRIVATE_KEY are required for the supabase store")
        return SupabaseVectorStore(
            client=get_supabase(cfg.SUPABASE_URL, cfg.SUPABASE_PRIVATE_KEY),
            embedder=embedder,
            table_name=cfg.SUPABASE_TABLE,
            query_name=cfg.SUPABASE_QUERY_NAME,
        )

    raise ValueError(f"Unknown vector store: {cfg.VECTOR_STORE}")
