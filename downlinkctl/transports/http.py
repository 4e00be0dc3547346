"""HTTP dispatch over httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from downlinkctl.core.errors import ApplicationError, TransportError
from downlinkctl.core.model import DispatchResult

LOGGER = logging.getLogger(__name__)
REQUEST_ENCODING_MESSAGE = "Request headers could not be encoded; check the saved API key"


class HttpDispatchClient:
    """POSTs downlink requests; never retries.

    An ``httpx.AsyncClient`` may be injected; otherwise one is opened per send
    with httpx's default timeout.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def send(
        self,
        url: str,
        headers: dict[str, str],
        body: dict[str, Any],
    ) -> DispatchResult:
        LOGGER.info("POST %s", url)
        try:
            if self._client is not None:
                response = await self._client.post(url, headers=headers, json=body)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(url, headers=headers, json=body)
        except (httpx.LocalProtocolError, UnicodeEncodeError):
            # Both carry the offending header bytes, which may include the API key.
            LOGGER.warning("Could not encode request for %s", url)
            return DispatchResult(error=TransportError(REQUEST_ENCODING_MESSAGE))
        except (httpx.TransportError, httpx.InvalidURL) as exc:
            message = str(exc) or exc.__class__.__name__
            LOGGER.warning("Transport failure for %s: %s", url, message)
            return DispatchResult(error=TransportError(message))

        if not (200 <= response.status_code < 300):
            LOGGER.warning("%s answered %s: %s", url, response.status_code, response.text[:400])
            return DispatchResult(
                status_code=response.status_code,
                error=ApplicationError(response.status_code),
            )

        LOGGER.info("%s answered %s", url, response.status_code)
        return DispatchResult(status_code=response.status_code)
