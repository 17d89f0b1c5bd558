# Local vector store:
#  - FAISS inner-product index over L2-normalized embeddings (cosine)
#  - ids.npy sidecar mapping FAISS row -> documents.id
#  - SQLite documents(id, content, source) holding chunk text + origin
# Used for local development and tests; Supabase is the hosted default.

from __future__ import annotations

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import List, Optional

import faiss
import numpy as np

from everlast_chat.search.types import DocumentChunk, Embedder, Match

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    content TEXT NOT NULL,
    source  TEXT NOT NULL
);
"""


def _as_matrix(vectors: List[List[float]]) -> np.ndarray:
    mat = np.array(vectors, dtype="float32")
    if mat.ndim == 1:
        mat = mat.reshape(1, -1)
    faiss.normalize_L2(mat)
    return mat


class FaissVectorStore:
    def __init__(self, db_path: str, faiss_path: str, embedder: Embedder):
        self.db_path = db_path
        self.faiss_path = faiss_path
        self.embedder = embedder

        self._index: Optional[faiss.Index] = None
        self._ids: Optional[list[int]] = None  # FAISS row -> documents.id

    # -------------------------
    # Connections / loaders
    # -------------------------
    def _connect(self) -> sqlite3.Connection:
        # one connection per call: the store is shared across worker threads
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.executescript(_SCHEMA)
        return conn

    def _ids_path(self) -> Path:
        return Path(self.faiss_path).with_name("ids.npy")

    def _load(self) -> None:
        if self._index is not None:
            return
        if Path(self.faiss_path).exists():
            self._index = faiss.read_index(self.faiss_path)
            ids_path = self._ids_path()
            self._ids = np.load(ids_path.as_posix()).astype(int).tolist() if ids_path.exists() else []
        else:
            self._ids = []

    # -------------------------
    # Similarity backend
    # -------------------------
    def search(self, query: str, k: int) -> List[Match]:
        self._load()
        if self._index is None or self._index.ntotal == 0:
            return []

        qvec = _as_matrix([self.embedder.embed_query(query)])
        if qvec.shape[1] != self._index.d:
            raise ValueError(f"Query dim {qvec.shape[1]} != index dim {self._index.d}")
        D, I = self._index.search(qvec, k)

        matches: List[Match] = []
        with closing(self._connect()) as conn:
            for sim, row_idx in zip(D[0], I[0]):
                row_idx = int(row_idx)
                if row_idx < 0 or row_idx >= len(self._ids):
                    continue
                row = conn.execute(
                    "SELECT content, source FROM documents WHERE id = ? LIMIT 1;",
                    (self._ids[row_idx],),
                ).fetchone()
                if row:
                    matches.append((row[0], float(sim), {"source": row[1], "faiss_idx": row_idx}))
        return matches

    # -------------------------
    # Ingestion
    # -------------------------
    def add_documents(self, chunks: List[DocumentChunk]) -> int:
        if not chunks:
            return 0
        self._load()
        vecs = _as_matrix(self.embedder.embed_documents([c.content for c in chunks]))
        if self._index is None:
            self._index = faiss.IndexFlatIP(vecs.shape[1])

        with closing(self._connect()) as conn:
            new_ids = []
            for c in chunks:
                cur = conn.execute(
                    "INSERT INTO documents(content, source) VALUES (?, ?);",
                    (c.content, c.source),
                )
                new_ids.append(int(cur.lastrowid))
            conn.commit()

        self._index.add(vecs)
        self._ids.extend(new_ids)
        self.save()
        return len(chunks)

    def save(self) -> None:
        if self._index is None:
            return
        Path(self.faiss_path).parent.mkdir(parents=True, exist_ok=True)
        faiss.write_index(self._index, self.faiss_path)
        np.save(self._ids_path().as_posix(), np.array(self._ids, dtype=np.int64))
