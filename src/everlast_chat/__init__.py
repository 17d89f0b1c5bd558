"""Everlast Chat: style-adaptive retrieval-augmented assistant."""

__version__ = "0.3.0"
