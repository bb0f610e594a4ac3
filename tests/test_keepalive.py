import anyio
import httpx

from guessroom.keepalive import health_url, keep_alive, keep_alive_enabled, ping


def test_enabled_only_outside_dev_with_url():
    assert keep_alive_enabled(False, "https://example.onrender.com")
    assert not keep_alive_enabled(True, "https://example.onrender.com")
    assert not keep_alive_enabled(False, None)
    assert not keep_alive_enabled(False, "")


def test_health_url():
    assert health_url("https://example.com/") == "https://example.com/health"
    assert health_url("https://example.com") == "https://example.com/health"


def client_for(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_ping_reports_status():
    async def main():
        async with client_for(lambda request: httpx.Response(200)) as client:
            assert await ping(client, "https://example.com/health")
        async with client_for(lambda request: httpx.Response(503)) as client:
            assert not await ping(client, "https://example.com/health")

    anyio.run(main)


def test_ping_swallows_transport_errors():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async def main():
        async with client_for(handler) as client:
            return await ping(client, "https://example.com/health")

    assert anyio.run(main) is False


def test_keep_alive_pings_health_until_cancelled():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200)

    async def main():
        async with client_for(handler) as client:
            with anyio.move_on_after(0.5):
                await keep_alive("https://example.com/", 0.05, client=client)
            # a caller-owned client is left open
            assert not client.is_closed
            assert await ping(client, "https://example.com/health")

    anyio.run(main)

    assert len(seen) >= 3
    assert set(seen) == {"https://example.com/health"}
