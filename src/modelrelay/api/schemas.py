"""Pydantic request/response schemas for the ModelRelay API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class IntentRequest(BaseModel):
    """Documented shape of the body forwarded to the intent classifier."""

    text: str = Field(description="Message to classify, e.g. 'which flights to dubai'")


class IntentPrediction(BaseModel):
    """Typical upstream answer. Relayed verbatim, so other shapes are possible."""

    intent: str | None = None
    label: str | None = None
    confidence: float | None = Field(default=None, description="Fractional confidence (0.0-1.0)")


class ProxyErrorResponse(BaseModel):
    """Returned when the upstream classifier cannot be reached."""

    error: str = "Proxy error"
    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    upstream: str
