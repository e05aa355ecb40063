"""Per-classifier decoders that turn raw JSON into a ClassificationResult.

Remote services disagree on field names, so every kind gets its own decoder
with its own field priority. A decoder never fails: missing fields fall back
to the ``"Unknown"`` label and an absent confidence.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from modelrelay.classify.icons import icon_for
from modelrelay.classify.models import ClassificationResult, ClassifierKind

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"


def confidence_percent(raw: object) -> float | None:
    """Scale a fractional confidence to a percentage, clamped to [0, 100].

    Returns None for missing or non-numeric values so an absent confidence is
    never confused with zero.
    """
    if raw is None or isinstance(raw, bool) or not isinstance(raw, int | float):
        if raw is not None:
            logger.warning("Ignoring non-numeric confidence %r", raw)
        return None
    percent = float(raw) * 100
    if percent != percent:  # NaN
        logger.warning("Ignoring NaN confidence")
        return None
    return max(0.0, min(100.0, percent))


def _first_label(data: dict[str, Any], fields: tuple[str, ...]) -> str:
    for field in fields:
        value = data.get(field)
        if value is not None:
            return str(value)
    return UNKNOWN_LABEL


def _decode(kind: ClassifierKind, body: object, label_fields: tuple[str, ...]) -> ClassificationResult:
    data = body if isinstance(body, dict) else {}
    label = _first_label(data, label_fields)
    return ClassificationResult(
        label=label,
        confidence_percent=confidence_percent(data.get("confidence")),
        category=icon_for(kind, label),
    )


def decode_image(body: object) -> ClassificationResult:
    """Decode ``{"label": ..., "confidence": ...}`` from the aircraft model."""
    return _decode(ClassifierKind.IMAGE, body, ("label",))


def decode_intent(body: object) -> ClassificationResult:
    """Decode the intent model's answer; ``intent`` wins over ``label``."""
    return _decode(ClassifierKind.INTENT, body, ("intent", "label"))


def decode_emotion(body: object) -> ClassificationResult:
    return _decode(ClassifierKind.EMOTION, body, ("label",))


DECODERS: dict[ClassifierKind, Callable[[object], ClassificationResult]] = {
    ClassifierKind.IMAGE: decode_image,
    ClassifierKind.INTENT: decode_intent,
    ClassifierKind.EMOTION: decode_emotion,
}
