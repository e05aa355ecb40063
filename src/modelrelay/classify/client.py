"""Async client for the remote classifier endpoints.

One call to :meth:`ClassifierClient.classify` validates the payload, issues
exactly one POST and decodes the answer. Nothing is retried or cached.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from modelrelay.classify.decoding import DECODERS
from modelrelay.classify.errors import RemoteError, TransportError
from modelrelay.classify.models import ClassificationRequest, ClassificationResult, ClassifierKind

if TYPE_CHECKING:
    from types import TracebackType

    from modelrelay.config import EndpointConfig

logger = logging.getLogger(__name__)


class ClassifierClient:
    """Sends classification requests to the endpoints in an EndpointConfig."""

    def __init__(self, config: EndpointConfig, http_client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def classify(
        self,
        kind: ClassifierKind,
        payload: bytes | str,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> ClassificationResult:
        """Classify ``payload`` with the ``kind`` classifier.

        Raises:
            ValidationError: If the payload is empty; no request is sent.
            TransportError: If the endpoint cannot be reached.
            RemoteError: If the endpoint answers with a non-2xx status or a
                body that is not JSON.
        """
        request = ClassificationRequest.build(kind, payload, filename=filename, content_type=content_type)
        return await self.send(request)

    async def send(self, request: ClassificationRequest) -> ClassificationResult:
        """Dispatch an already validated request."""
        url = self._config.url_for(request.kind)
        logger.debug("POST %s (%s)", url, request.kind)

        try:
            if request.kind is ClassifierKind.IMAGE:
                response = await self._http.post(
                    url,
                    files={"file": (request.filename, request.data, request.content_type)},
                )
            else:
                response = await self._http.post(
                    url,
                    json={"text": request.text},
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TransportError as exc:
            logger.warning("%s classifier unreachable at %s: %r", request.kind, url, exc)
            raise TransportError(str(exc) or f"Could not reach {url}") from exc

        if not response.is_success:
            logger.warning("%s classifier returned HTTP %s", request.kind, response.status_code)
            raise RemoteError(response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("%s classifier returned a non-JSON body", request.kind)
            raise RemoteError(response.status_code, "response body is not valid JSON") from exc

        return DECODERS[request.kind](body)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> ClassifierClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
