# Makes the folder importable as a package.
# Exports Retriever and the search result types for convenience.

from .retriever import Retriever
from .types import DocumentChunk, RetrievalResult, SearchResult

__all__ = ["Retriever", "SearchResult", "RetrievalResult", "DocumentChunk"]
