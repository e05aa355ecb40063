"""Request and result value objects shared by the classifier client."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from modelrelay.classify.errors import ValidationError

if TYPE_CHECKING:
    from modelrelay.classify.icons import IconCategory


class ClassifierKind(StrEnum):
    IMAGE = "image"
    INTENT = "intent"
    EMOTION = "emotion"

    @property
    def is_text(self) -> bool:
        return self is not ClassifierKind.IMAGE


@dataclass(frozen=True)
class ClassificationRequest:
    """A validated request for one classifier.

    Image requests carry ``data``/``filename``/``content_type``; text requests
    carry ``text``. Use :meth:`image` or :meth:`for_text` rather than the
    constructor so the payload is checked.
    """

    kind: ClassifierKind
    text: str | None = None
    data: bytes | None = None
    filename: str | None = None
    content_type: str = "application/octet-stream"

    @classmethod
    def image(
        cls,
        data: bytes,
        filename: str = "upload",
        content_type: str = "application/octet-stream",
    ) -> ClassificationRequest:
        if not isinstance(data, bytes | bytearray) or not data:
            raise ValidationError("Image payload must be non-empty bytes")
        return cls(
            kind=ClassifierKind.IMAGE,
            data=bytes(data),
            filename=filename or "upload",
            content_type=content_type,
        )

    @classmethod
    def for_text(cls, kind: ClassifierKind, text: str) -> ClassificationRequest:
        if not kind.is_text:
            raise ValidationError(f"{kind} does not accept text payloads")
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Text payload must not be empty")
        return cls(kind=kind, text=text.strip())

    @classmethod
    def build(
        cls,
        kind: ClassifierKind,
        payload: bytes | str,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> ClassificationRequest:
        """Build the request variant ``kind`` calls for.

        Without an explicit ``content_type`` an image upload is typed from its
        filename extension, falling back to ``application/octet-stream``.
        """
        if kind is ClassifierKind.IMAGE:
            if not isinstance(payload, bytes | bytearray):
                raise ValidationError("Image payload must be non-empty bytes")
            if content_type is None:
                content_type = mimetypes.guess_type(filename or "")[0] or "application/octet-stream"
            return cls.image(payload, filename=filename or "upload", content_type=content_type)
        if not isinstance(payload, str):
            raise ValidationError("Text payload must be a string")
        return cls.for_text(kind, payload)


@dataclass(frozen=True)
class ClassificationResult:
    """Normalized answer from any classifier."""

    label: str
    confidence_percent: float | None
    category: IconCategory
