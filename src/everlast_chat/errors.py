"""Error kinds reported by the response pipeline."""


class EverlastChatError(Exception):
    """Base class for pipeline errors."""

    kind = "EverlastChatError"


class InvalidInput(EverlastChatError):
    """Empty or malformed user input. Not retried."""

    kind = "InvalidInput"


class RetrievalUnavailable(EverlastChatError):
    """Similarity backend unreachable, erroring or timed out."""

    kind = "RetrievalUnavailable"


class ClassificationMalformed(EverlastChatError):
    """Style classifier reply could not be decoded. Recovered inside the classifier."""

    kind = "ClassificationMalformed"


class CompletionFailed(EverlastChatError):
    """Completion backend error on the classification or the answer call."""

    kind = "CompletionFailed"
