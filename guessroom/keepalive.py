"""
Self-ping so that free hosting tiers do not idle the process.

Disabled in DEV mode or when no public URL is configured.
"""
import logging

import anyio
import httpx

log = logging.getLogger(__name__)


def keep_alive_enabled(dev: bool, base_url: str | None) -> bool:
    return not dev and bool(base_url)


def health_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/health"


async def ping(client: httpx.AsyncClient, url: str) -> bool:
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        log.error(f"Self-ping error: {e}")
        return False

    if response.is_success:
        log.info("Self-ping successful")
        return True

    log.error(f"Self-ping failed with status: {response.status_code}")
    return False


async def keep_alive(base_url: str, interval: float, client: httpx.AsyncClient | None = None) -> None:
    """Ping ``<base_url>/health`` every ``interval`` seconds until cancelled."""
    url = health_url(base_url)
    log.info(f"Self-ping mechanism initialized for {url}")

    if client is not None:
        await _ping_forever(client, url, interval)
        return

    async with httpx.AsyncClient(timeout=10.0) as own_client:
        await _ping_forever(own_client, url, interval)


async def _ping_forever(client: httpx.AsyncClient, url: str, interval: float) -> None:
    while True:
        await anyio.sleep(interval)
        await ping(client, url)
