"""Forwarding proxy: relay one JSON body to one fixed upstream URL."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from modelrelay.config import ProxyConfig

logger = logging.getLogger(__name__)

PROXY_ERROR_STATUS = 502
DEFAULT_ERROR_MESSAGE = "Could not reach intent API"


@dataclass(frozen=True)
class ForwardResult:
    """Status and JSON body to hand back to the caller."""

    status_code: int
    body: Any = field(default_factory=dict)


class Forwarder:
    """Stateless relay. Every call issues exactly one POST upstream."""

    def __init__(self, config: ProxyConfig, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client

    @property
    def upstream_url(self) -> str:
        return self._config.upstream_url

    async def forward(self, body: Any) -> ForwardResult:
        """POST ``body`` unmodified upstream and mirror the answer.

        The upstream status is relayed as-is, with ``{}`` standing in for a body
        that is not JSON. If the upstream cannot be reached the result is a 502
        with ``{"error": "Proxy error", "message": ...}``.
        """
        try:
            response = await self._http.post(
                self._config.upstream_url,
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self._config.timeout,
            )
        except httpx.TransportError as exc:
            logger.error("Intent API error: %r", exc)
            return ForwardResult(
                status_code=PROXY_ERROR_STATUS,
                body={"error": "Proxy error", "message": str(exc) or DEFAULT_ERROR_MESSAGE},
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("Upstream returned a non-JSON body (HTTP %s)", response.status_code)
            data = {}

        logger.info("Relayed upstream response (HTTP %s)", response.status_code)
        return ForwardResult(status_code=response.status_code, body=data)
