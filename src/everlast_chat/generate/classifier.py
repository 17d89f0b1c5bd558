"""Style-change intent classifier.

Runs one low-temperature call against a fast model and decodes the reply
into a StyleDetectionResult. A reply that is not a valid JSON object with
the four expected fields never escapes this module: it becomes the fallback
result. Transport errors from the backend are not masked and surface as
CompletionFailed.
"""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from everlast_chat.errors import ClassificationMalformed, CompletionFailed
from everlast_chat.logs import get_logger

from .prompts import STYLE_DETECTION_PROMPT
from .types import CompletionClient, ModelParams, Role, StyleDetectionResult, Turn

logger = get_logger(__name__)

PARSE_FAILURE_EXPLANATION = "Failed to parse style detection response"

_FENCE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def fallback_result() -> StyleDetectionResult:
    # confidence=1.0 on failure is long-standing behavior; callers only switch on requesting_style=True
    return StyleDetectionResult(
        requesting_style=False,
        confidence=1.0,
        suggested_style=None,
        explanation=PARSE_FAILURE_EXPLANATION,
    )


def _strip_fences(raw: str) -> str:
    """Unwrap a code fence only when it encloses the whole reply."""
    cleaned = raw.strip()
    m = _FENCE.fullmatch(cleaned)
    return m.group(1).strip() if m else cleaned


def parse_detection(raw: str) -> StyleDetectionResult:
    """
    Decode a classifier reply.

    Raises:
        ClassificationMalformed: reply is not a JSON object matching StyleDetectionResult
    """
    if not isinstance(raw, str):
        raise ClassificationMalformed(f"expected text reply, got {type(raw).__name__}")
    try:
        data = json.loads(_strip_fences(raw))
    except (json.JSONDecodeError, TypeError) as e:
        raise ClassificationMalformed(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ClassificationMalformed(f"expected a JSON object, got {type(data).__name__}")
    try:
        return StyleDetectionResult.model_validate(data)
    except ValidationError as e:
        raise ClassificationMalformed(f"schema violation: {e.error_count()} error(s)") from e


class StyleClassifier:
    def __init__(self, model_client: CompletionClient, temperature: float = 0.1, max_tokens: int = 256):
        self.model_client = model_client
        self.params = ModelParams(temperature=temperature, max_tokens=max_tokens)

    def classify(self, message: str) -> StyleDetectionResult:
        try:
            raw = self.model_client.complete(
                STYLE_DETECTION_PROMPT,
                [Turn(role=Role.HUMAN, text=message)],
                self.params,
            )
        except Exception as e:
            raise CompletionFailed(f"style detection call failed: {e}") from e

        logger.debug(f"Raw style detection response: {raw!r}")
        try:
            result = parse_detection(raw)
        except ClassificationMalformed as e:
            logger.warning(f"Style detection failed: {e}")
            return fallback_result()

        logger.debug(f"Style detection response: {result.model_dump_json(by_alias=True)}")
        return result
