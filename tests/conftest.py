"""
Shared pytest fixtures for the wownow test suite.

Provides:
  - Sample TACT response bodies (versions and summary listings).
  - ``mock_transport``: a factory building an ``httpx.MockTransport`` that
    serves per-product bodies, status codes, or raised exceptions, with an
    optional per-product delay.
  - ``clean_env``: strips ``WOWNOW_*`` variables for the duration of a test.
"""

from __future__ import annotations

import asyncio
import os
from typing import Callable, Optional, Union

import httpx
import pytest

# ── Sample bodies ─────────────────────────────────────────────────────────────

WOW_VERSIONS_BODY = (
    "Region!STRING:0|BuildConfig!HEX:16|CDNConfig!HEX:16|KeyRing!HEX:16|BuildId!DEC:4"
    "|VersionsName!String:0|ProductConfig!HEX:16\n"
    "## seqn = 2118468\n"
    "us|47e9e06f8371afb141e22614a912acc8|74093d42ce367c7a67f2831dbf64088d||53584"
    "|10.2.5.53584|53020d32e1a25648c8e1eafd5771935f\n"
    "eu|47e9e06f8371afb141e22614a912acc8|74093d42ce367c7a67f2831dbf64088d||53584"
    "|10.2.5.53584|53020d32e1a25648c8e1eafd5771935f\n"
)

SUMMARY_BODY = (
    "Product!STRING:0|Seqn!DEC:4|Flags!STRING:0\n"
    "## seqn = 2119172\n"
    "agent|1476930|cdn\n"
    "agent|2118018|\n"
    "wow|2118468|\n"
    "wow|2118401|cdn\n"
    "wow_beta|2117001|\n"
    "wow_classic|2118470|\n"
    "wow_classic_era|2118472|bgdl\n"
    "wow_classic_era|2118473|\n"
)


def versions_body(rows: list[tuple[str, str, str]], seqn: Optional[int] = 1) -> str:
    """Build a minimal ``Region|VersionsName|BuildId`` response."""
    lines = ["Region|VersionsName|BuildId"]
    if seqn is not None:
        lines.append(f"## seqn = {seqn}")
    lines.extend("|".join(row) for row in rows)
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_versions_body() -> Callable[..., str]:
    return versions_body


@pytest.fixture
def wow_versions_body() -> str:
    return WOW_VERSIONS_BODY


@pytest.fixture
def summary_body() -> str:
    return SUMMARY_BODY


# ── HTTP mocking ──────────────────────────────────────────────────────────────

Reply = Union[str, int, Exception]


@pytest.fixture
def mock_transport() -> Callable[..., httpx.MockTransport]:
    """Factory for an ``httpx.MockTransport`` keyed by product id.

    ``replies`` maps a product id (or ``"summary"``) to:
      - ``str``: served with status 200;
      - ``int``: an empty response with that status;
      - ``Exception``: raised from the transport.

    ``delays`` maps a product id to seconds slept before replying.  The
    returned transport exposes ``.requested`` (paths, in arrival order) and
    ``.completed`` (product ids, in completion order).
    """

    def _factory(
        replies: dict[str, Reply],
        delays: Optional[dict[str, float]] = None,
    ) -> httpx.MockTransport:
        delays = delays or {}
        requested: list[str] = []
        completed: list[str] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.path)
            product = request.url.path.strip("/").split("/")[0]
            if product in delays:
                await asyncio.sleep(delays[product])
            completed.append(product)

            reply = replies.get(product, 404)
            if isinstance(reply, Exception):
                raise reply
            if isinstance(reply, int):
                return httpx.Response(reply, request=request)
            return httpx.Response(200, text=reply, request=request)

        transport = httpx.MockTransport(handler)
        transport.requested = requested
        transport.completed = completed
        return transport

    return _factory


# ── Environment ───────────────────────────────────────────────────────────────

@pytest.fixture
def clean_env(monkeypatch):
    """Remove every ``WOWNOW_*`` variable for the test."""
    for key in list(os.environ):
        if key.startswith("WOWNOW_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
