"""API route definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse, Response

from modelrelay.api.schemas import HealthResponse, IntentPrediction, IntentRequest, ProxyErrorResponse

if TYPE_CHECKING:
    from modelrelay.proxy.forwarder import Forwarder

router = APIRouter()

_BODYLESS_STATUSES = {status.HTTP_204_NO_CONTENT, status.HTTP_304_NOT_MODIFIED}

_INTENT_EXAMPLE = IntentRequest(text="which flights to dubai").model_dump()


def _get_forwarder(request: Request) -> Forwarder:
    forwarder: Forwarder = request.app.state.forwarder
    return forwarder


@router.post(
    "/api/predict/intent",
    response_model=IntentPrediction,
    responses={
        status.HTTP_502_BAD_GATEWAY: {"model": ProxyErrorResponse},
    },
    summary="Classify the intent of a message",
)
async def predict_intent(
    request: Request,
    payload: Annotated[dict[str, Any], Body(examples=[_INTENT_EXAMPLE])],
) -> Response:
    """Forward the body to the intent classifier and relay its answer."""
    forwarder = _get_forwarder(request)
    result = await forwarder.forward(payload)
    if result.status_code < status.HTTP_200_OK or result.status_code in _BODYLESS_STATUSES:
        return Response(status_code=result.status_code)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    forwarder = _get_forwarder(request)
    return HealthResponse(status="ok", upstream=forwarder.upstream_url)
