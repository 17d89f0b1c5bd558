#!/usr/bin/env python3
# ================================================================
# run_ingest.py
# ----------------------------------------------------------------
# One-shot batch job populating the similarity backend:
#   load .txt/.md → normalize → chunk (with overlap) → embed → upsert
# Each chunk is stored with its source file path as metadata.
# Uses ingest.config.yaml (next to this file or via --config) if present.
#
# Flags:
#   --src     <one or more input dirs/files>   (required)
#   --store   supabase | faiss                 (defaults to VECTOR_STORE)
#   --dry-run                                  (chunk only; no embed/upsert)
# ================================================================

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from everlast_chat.logs import get_logger
from everlast_chat.search.types import DocumentChunk
from everlast_chat.settings import get_settings

from .normalize import chunk_text, discover_inputs, normalize_text

logger = get_logger("ingest")


def load_cfg(path: Optional[Path] = None) -> dict:
    """Load ingest.config.yaml if present (optional)."""
    cfg_path = path or Path(__file__).with_name("ingest.config.yaml")
    if not cfg_path.exists():
        return {}
    return yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}


def collect_chunks(inputs: List[Path], chunk_size: int, overlap: int) -> List[DocumentChunk]:
    chunks: List[DocumentChunk] = []
    for root in inputs:
        files = discover_inputs(root)
        if not files:
            logger.warning(f"No .txt/.md files found under {root}")
        for f in files:
            try:
                raw = f.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Failed to read {f}: {e}")
                continue
            parts = chunk_text(normalize_text(raw), chunk_size, overlap)
            for i, part in enumerate(parts):
                chunks.append(DocumentChunk(content=part, source=f.as_posix(), meta={"chunk": i}))
            logger.info(f"{f} → {len(parts)} chunk(s)")
    return chunks


def ingest(store, inputs: List[Path], chunk_size: int, overlap: int) -> int:
    """Chunk every input and upsert into `store`. Returns the number of chunks written."""
    chunks = collect_chunks(inputs, chunk_size, overlap)
    if not chunks:
        return 0
    written = store.add_documents(chunks)
    logger.info(f"Upserted {written} chunk(s)")
    return written


def parse_args(argv: List[str]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Load knowledge-base documents into the vector store")
    ap.add_argument("--src", nargs="+", required=True, help="One or more input folders or files")
    ap.add_argument("--store", choices=["supabase", "faiss"], help="Override VECTOR_STORE")
    ap.add_argument("--config", type=Path, help="Path to ingest.config.yaml")
    ap.add_argument("--dry-run", action="store_true", help="Chunk only; skip embedding and upsert")
    return ap.parse_args(argv)


def main(argv: List[str]) -> int:
    args = parse_args(argv)
    cfg = get_settings()
    if args.store:
        cfg = cfg.model_copy(update={"VECTOR_STORE": args.store})

    ingest_cfg = load_cfg(args.config).get("ingest", {})
    chunk_size = int(ingest_cfg.get("chunk_size", cfg.INGEST_CHUNK_SIZE))
    overlap = int(ingest_cfg.get("chunk_overlap", cfg.INGEST_CHUNK_OVERLAP))
    inputs = [Path(s) for s in args.src]

    logger.info(f"== ingest == src={args.src} store={cfg.VECTOR_STORE} chunk_size={chunk_size} overlap={overlap}")

    if args.dry_run:
        chunks = collect_chunks(inputs, chunk_size, overlap)
        logger.info(f"== dry run complete == chunks={len(chunks)}")
        return 0

    from everlast_chat.search.stores import build_vector_store

    written = ingest(build_vector_store(cfg), inputs, chunk_size, overlap)
    logger.info(f"== ingest complete == written={written}")
    return 0


def cli() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
