# =============================================================
# normalize.py
# -------------------------------------------------------------
# Text cleanup and overlapping chunking for knowledge-base files:
# - NFKC unicode, HTML entities unescaped
# - control characters stripped (newlines/tabs kept)
# - runs of spaces collapsed, 3+ newlines collapsed to 2
# - fixed-size character chunks with overlap
# =============================================================

from __future__ import annotations

import html
import re
import unicodedata
from pathlib import Path
from typing import List

_WS = re.compile(r"[ \t]+")
_TRAILING_WS = re.compile(r"[ \t]+\n")
_MULTI_NL = re.compile(r"\n{3,}")
_CTRL = re.compile(r"[\u0000-\u0008\u000b\u000c\u000e-\u001f]")

SUPPORTED_SUFFIXES = (".txt", ".md")


def normalize_text(s: str) -> str:
    s = unicodedata.normalize("NFKC", s)
    s = html.unescape(s)
    s = _CTRL.sub("", s)
    s = _WS.sub(" ", s)
    s = _TRAILING_WS.sub("\n", s)
    s = _MULTI_NL.sub("\n\n", s)
    return s.strip()


def chunk_text(s: str, chunk_size: int, overlap: int) -> List[str]:
    """Split into `chunk_size` windows, each starting `chunk_size - overlap` after the previous."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not 0 <= overlap < chunk_size:
        raise ValueError("overlap must be in [0, chunk_size)")
    if not s:
        return []
    chunks: List[str] = []
    step = chunk_size - overlap
    i = 0
    while True:
        chunks.append(s[i : i + chunk_size])
        if i + chunk_size >= len(s):
            break
        i += step
    return chunks


def discover_inputs(input_path: Path) -> List[Path]:
    """Supported files under a directory (sorted), or the file itself."""
    if input_path.is_file():
        return [input_path] if input_path.suffix.lower() in SUPPORTED_SUFFIXES else []
    if input_path.is_dir():
        return sorted(p for p in input_path.rglob("*") if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES)
    return []
