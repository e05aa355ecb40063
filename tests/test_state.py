"""Tests for the request state controller and result view."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from modelrelay.classify.client import ClassifierClient
from modelrelay.classify.errors import RemoteError, TransportError, ValidationError
from modelrelay.classify.icons import IconCategory
from modelrelay.classify.models import ClassificationResult, ClassifierKind
from modelrelay.classify.state import (
    GENERIC_FAILURE_MESSAGE,
    ClassificationController,
    RequestState,
    RequestStatus,
    ResultView,
)
from modelrelay.config import EndpointConfig

_ENDPOINTS = EndpointConfig(
    base_url="http://models.test",
    paths={kind: f"/{kind}" for kind in ClassifierKind},
    timeout=5.0,
)


def _controller(
    kind: ClassifierKind,
    transport: httpx.MockTransport | None = None,
    states: list[RequestState] | None = None,
) -> tuple[ClassificationController, list[httpx.Request]]:
    sent: list[httpx.Request] = []

    def respond(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(200, json={"intent": "flight", "label": "Positive", "confidence": 0.5})

    http = httpx.AsyncClient(transport=transport or httpx.MockTransport(respond))
    client = ClassifierClient(_ENDPOINTS, http)
    on_change = states.append if states is not None else None
    return ClassificationController(client, kind, on_change=on_change), sent


class _BlockingClient:
    """Stand-in whose send() waits until released."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.calls = 0

    async def send(self, request: object) -> ClassificationResult:
        self.calls += 1
        await self.release.wait()
        return ClassificationResult("flight", 50.0, IconCategory.CHAT_BUBBLE)


class _ExplodingClient:
    def __init__(self, exc: BaseException) -> None:
        self.exc = exc

    async def send(self, request: object) -> ClassificationResult:
        raise self.exc


class TestController:
    async def test_starts_idle(self) -> None:
        controller, _ = _controller(ClassifierKind.INTENT)
        assert controller.state.status is RequestStatus.IDLE
        assert not controller.state.busy

    async def test_success_transitions(self) -> None:
        states: list[RequestState] = []
        controller, sent = _controller(ClassifierKind.INTENT, states=states)

        final = await controller.submit("which flights to dubai")

        assert [s.status for s in states] == [RequestStatus.IN_FLIGHT, RequestStatus.RESOLVED]
        assert final.result is not None
        assert final.result.label == "flight"
        assert final.message == "Intent analysis completed."
        assert len(sent) == 1

    @pytest.mark.parametrize(
        ("kind", "payload", "message"),
        [
            (ClassifierKind.IMAGE, b"", "Please upload an aircraft image first."),
            (ClassifierKind.INTENT, "   ", "Please type/paste a message first."),
            (ClassifierKind.EMOTION, "", "Please paste a message first."),
        ],
    )
    async def test_validation_failure_skips_network(
        self, kind: ClassifierKind, payload: bytes | str, message: str
    ) -> None:
        states: list[RequestState] = []
        controller, sent = _controller(kind, states=states)

        final = await controller.submit(payload)

        assert final.status is RequestStatus.FAILED
        assert isinstance(final.error, ValidationError)
        assert final.message == message
        assert [s.status for s in states] == [RequestStatus.FAILED]
        assert sent == []

    async def test_remote_error_uses_generic_message(self) -> None:
        transport = httpx.MockTransport(lambda _request: httpx.Response(500, json={}))
        controller, _ = _controller(ClassifierKind.EMOTION, transport=transport)

        final = await controller.submit("hello")

        assert final.status is RequestStatus.FAILED
        assert isinstance(final.error, RemoteError)
        assert final.message == GENERIC_FAILURE_MESSAGE
        assert "500" not in final.message

    async def test_transport_error_uses_generic_message(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        controller, _ = _controller(ClassifierKind.INTENT, transport=httpx.MockTransport(refuse))

        final = await controller.submit("hello")

        assert isinstance(final.error, TransportError)
        assert final.message == GENERIC_FAILURE_MESSAGE
        assert not final.busy

    async def test_second_submit_while_in_flight_is_ignored(self) -> None:
        client = _BlockingClient()
        controller = ClassificationController(client, ClassifierKind.INTENT)  # type: ignore[arg-type]

        first = asyncio.create_task(controller.submit("one"))
        await asyncio.sleep(0)
        assert controller.state.busy

        repeated = await controller.submit("two")
        assert repeated.busy
        assert client.calls == 1

        client.release.set()
        final = await first
        assert final.status is RequestStatus.RESOLVED
        assert not controller.state.busy

    async def test_unexpected_exception_restores_interactivity(self) -> None:
        controller = ClassificationController(
            _ExplodingClient(RuntimeError("bug")),  # type: ignore[arg-type]
            ClassifierKind.EMOTION,
        )

        with pytest.raises(RuntimeError, match="bug"):
            await controller.submit("hello")

        assert controller.state.status is RequestStatus.FAILED
        assert controller.state.message == GENERIC_FAILURE_MESSAGE
        assert not controller.state.busy

    async def test_failing_change_callback_restores_interactivity(self) -> None:
        seen: list[RequestStatus] = []

        def on_change(state: RequestState) -> None:
            seen.append(state.status)
            if state.status is RequestStatus.IN_FLIGHT:
                raise RuntimeError("render failed")

        client = _BlockingClient()
        client.release.set()
        controller = ClassificationController(client, ClassifierKind.INTENT, on_change=on_change)  # type: ignore[arg-type]

        with pytest.raises(RuntimeError, match="render failed"):
            await controller.submit("hello")
        assert controller.state.status is RequestStatus.FAILED
        assert not controller.state.busy
        assert client.calls == 0

        with pytest.raises(RuntimeError, match="render failed"):
            await controller.submit("hello")
        assert seen == [
            RequestStatus.IN_FLIGHT,
            RequestStatus.FAILED,
            RequestStatus.IN_FLIGHT,
            RequestStatus.FAILED,
        ]

    async def test_cancellation_restores_interactivity(self) -> None:
        controller = ClassificationController(_BlockingClient(), ClassifierKind.INTENT)  # type: ignore[arg-type]

        task = asyncio.create_task(controller.submit("one"))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert controller.state.status is RequestStatus.FAILED
        assert not controller.state.busy


class TestResultView:
    def test_all_fields_absent(self) -> None:
        view = ResultView()
        assert view.title_text == "—"
        assert view.confidence_text == "—"
        assert view.bar_width == "0%"
        assert view.icon_name is None

    def test_from_result(self) -> None:
        result = ClassificationResult("flight", 77.67, IconCategory.CHAT_BUBBLE)
        view = ResultView.from_result(result)
        assert view.title_text == "flight"
        assert view.confidence_text == "77.7%"
        assert view.bar_width == "77.67%"
        assert view.icon_name == "chat_bubble"

    def test_bar_width_is_clamped(self) -> None:
        assert ResultView(confidence=140.0).bar_width == "100%"
        assert ResultView(confidence=-5.0).bar_width == "0%"

    def test_absent_confidence_is_not_zero(self) -> None:
        result = ClassificationResult("Unknown", None, IconCategory.MOOD)
        assert ResultView.from_result(result).confidence_text == "—"
