"""
Blizzard TACT version service client (HTTP).

Endpoints::

    GET {base_url}/{product}/versions   per-region versions of one product
    GET {base_url}/summary              every product the service publishes

No credentials are required.  One attempt per request, no retries.  Every
request, body included, must finish within ``timeout`` seconds: httpx bounds
each connect/read/write and ``asyncio.timeout`` bounds the request as a whole.

Usage::

    async with TactClient() as client:
        text = await client.fetch_versions("wow")

Tests substitute the network with ``transport=httpx.MockTransport(handler)``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from wownow.tact.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://us.patch.battle.net:1119"
DEFAULT_TIMEOUT_SECONDS = 5.0
SUMMARY_PRODUCT = "summary"


class TactClient:
    """Async client for the TACT version service.

    Attributes:
        base_url: Service root, without a trailing slash.
        timeout: Per-request timeout in seconds, applied to each network
            phase and to the request as a whole.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {timeout}.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "TactClient":
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def versions_url(self, product: str) -> str:
        return f"{self.base_url}/{product}/versions"

    def summary_url(self) -> str:
        return f"{self.base_url}/{SUMMARY_PRODUCT}"

    async def fetch_versions(self, product: str) -> str:
        """Fetch the raw versions response for ``product``.

        Raises:
            FetchError: On connection failure, timeout, invalid URL or non-2xx
                status.
        """
        return await self._get(self.versions_url(product), product)

    async def fetch_summary(self) -> str:
        """Fetch the raw summary listing.

        Raises:
            FetchError: Tagged with product ``"summary"``.
        """
        return await self._get(self.summary_url(), SUMMARY_PRODUCT)

    async def _get(self, url: str, product: str) -> str:
        if self._http is None:
            raise RuntimeError("TactClient must be used as an async context manager.")

        logger.debug("GET %s", url)
        try:
            async with asyncio.timeout(self.timeout):
                resp = await self._http.get(url)
            resp.raise_for_status()
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise FetchError(
                product,
                f"timed out after {self.timeout:g}s ({type(exc).__name__})",
                timed_out=True,
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(
                product,
                f"HTTP {status} from {url}",
                status_code=status,
            ) from exc
        except httpx.InvalidURL as exc:
            raise FetchError(product, f"invalid URL {url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(
                product,
                f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__,
            ) from exc

        logger.debug("%s: %d bytes", product, len(resp.content))
        return resp.text
