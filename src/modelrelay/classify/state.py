"""Request state tracking for front-ends.

A :class:`ClassificationController` owns one classifier kind and exposes the
lifecycle of its single outstanding request as an immutable
:class:`RequestState`. Any UI can render the state directly: a busy indicator
while ``in_flight``, the result or an error message afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from modelrelay.classify.errors import ClassifyError, RemoteError, ValidationError
from modelrelay.classify.models import ClassificationRequest, ClassificationResult, ClassifierKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from modelrelay.classify.client import ClassifierClient

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Could not reach the model API. Check API URL / CORS / endpoint."

_VALIDATION_MESSAGES: dict[ClassifierKind, str] = {
    ClassifierKind.IMAGE: "Please upload an aircraft image first.",
    ClassifierKind.INTENT: "Please type/paste a message first.",
    ClassifierKind.EMOTION: "Please paste a message first.",
}

_SUCCESS_MESSAGES: dict[ClassifierKind, str] = {
    ClassifierKind.IMAGE: "Classification completed.",
    ClassifierKind.INTENT: "Intent analysis completed.",
    ClassifierKind.EMOTION: "Emotion classification completed.",
}


class RequestStatus(StrEnum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class RequestState:
    """Snapshot of a controller's request."""

    status: RequestStatus = RequestStatus.IDLE
    result: ClassificationResult | None = None
    error: BaseException | None = None
    message: str = ""

    @property
    def busy(self) -> bool:
        return self.status is RequestStatus.IN_FLIGHT


@dataclass(frozen=True)
class ResultView:
    """Display values for the result panel. Every field may be absent."""

    title: str | None = None
    confidence: float | None = None
    icon_name: str | None = None

    @classmethod
    def from_result(cls, result: ClassificationResult) -> ResultView:
        return cls(
            title=result.label,
            confidence=result.confidence_percent,
            icon_name=str(result.category),
        )

    @property
    def title_text(self) -> str:
        return self.title if self.title is not None else "—"

    @property
    def confidence_text(self) -> str:
        return f"{self.confidence:.1f}%" if self.confidence is not None else "—"

    @property
    def bar_width(self) -> str:
        if self.confidence is None:
            return "0%"
        return f"{max(0.0, min(100.0, self.confidence)):g}%"


class ClassificationController:
    """Runs classifications for one kind, one request at a time."""

    def __init__(
        self,
        client: ClassifierClient,
        kind: ClassifierKind,
        on_change: Callable[[RequestState], None] | None = None,
    ) -> None:
        self._client = client
        self._kind = kind
        self._on_change = on_change
        self._state = RequestState()

    @property
    def kind(self) -> ClassifierKind:
        return self._kind

    @property
    def state(self) -> RequestState:
        return self._state

    def _set_state(self, state: RequestState) -> RequestState:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
        return state

    async def submit(
        self,
        payload: bytes | str,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> RequestState:
        """Validate and send ``payload``, returning the final state.

        While a request is in flight, further calls return the in-flight state
        without sending anything. The state is never left ``in_flight`` after
        this returns or raises; unexpected exceptions are recorded as
        ``failed`` and re-raised.
        """
        if self._state.busy:
            logger.debug("Ignoring %s submit while a request is in flight", self._kind)
            return self._state

        try:
            request = ClassificationRequest.build(
                self._kind, payload, filename=filename, content_type=content_type
            )
        except ValidationError as exc:
            return self._set_state(
                RequestState(RequestStatus.FAILED, error=exc, message=_VALIDATION_MESSAGES[self._kind])
            )

        try:
            self._set_state(RequestState(RequestStatus.IN_FLIGHT))
            result = await self._client.send(request)
        except ClassifyError as exc:
            if isinstance(exc, RemoteError):
                logger.warning("%s classification failed with HTTP %s", self._kind, exc.status_code)
            else:
                logger.warning("%s classification failed: %s", self._kind, exc)
            return self._set_state(RequestState(RequestStatus.FAILED, error=exc, message=GENERIC_FAILURE_MESSAGE))
        except Exception as exc:
            logger.exception("Unexpected error during %s classification", self._kind)
            self._set_state(RequestState(RequestStatus.FAILED, error=exc, message=GENERIC_FAILURE_MESSAGE))
            raise
        finally:
            # Cancellation skips the handlers above.
            if self._state.busy:
                self._set_state(RequestState(RequestStatus.FAILED, message=GENERIC_FAILURE_MESSAGE))

        return self._set_state(
            RequestState(RequestStatus.RESOLVED, result=result, message=_SUCCESS_MESSAGES[self._kind])
        )
