from __future__ import annotations

import httpx

from portal.config import Settings


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    transport = httpx.AsyncHTTPTransport(verify=settings.VERIFY_SSL)
    return httpx.AsyncClient(
        base_url=settings.API_BASE_URL,
        transport=transport,
        timeout=httpx.Timeout(settings.REQUEST_TIMEOUT),
        headers={"Accept": "application/json"},
    )


async def close_http_client(client: httpx.AsyncClient) -> None:
    await client.aclose()
