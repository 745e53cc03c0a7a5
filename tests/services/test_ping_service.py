"""Tests for the liveness client and the periodic ping service."""

import asyncio

import httpx
import pytest

from services.liveness.PingService import PingService, format_uptime
from shared.clients.liveness.LivenessClient import LivenessClient


def _liveness_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/ping":
        return httpx.Response(200, json={"status": "ok", "timestamp": "2026-01-01T00:00:00Z"})
    if request.url.path == "/api/health":
        return httpx.Response(200, json={"status": "OK", "uptime": 3725.4})
    return httpx.Response(404)


async def _booted_client(helper_config, transport) -> LivenessClient:
    client = LivenessClient(helper_config=helper_config, base_url="http://bridge.local")
    await client.boot(transport=transport)
    return client


def test_format_uptime():
    assert format_uptime(3725.9) == "1h 2m 5s"
    assert format_uptime(0) == "0h 0m 0s"


def test_liveness_client_defaults_to_ten_second_timeout(helper_config, monkeypatch):
    monkeypatch.delenv("LIVENESS_TIMEOUT", raising=False)
    client = LivenessClient(helper_config=helper_config, base_url="http://bridge.local")
    assert client.timeout == 10.0


@pytest.mark.asyncio
async def test_ping_and_health_check_succeed(helper_config, recording_transport):
    recorder = recording_transport(_liveness_handler)
    client = await _booted_client(helper_config, recorder.transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=60)

    assert await service.ping() is True
    health = await service.health_check()

    assert health == {"status": "OK", "uptime": 3725.4}
    assert [r.url.path for r in recorder.requests] == ["/api/ping", "/api/health"]
    await client.close()


@pytest.mark.asyncio
async def test_failed_ping_returns_false(helper_config, recording_transport):
    recorder = recording_transport(lambda request: httpx.Response(503, text="down"))
    client = await _booted_client(helper_config, recorder.transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=60)

    assert await service.ping() is False
    assert await service.health_check() is None


@pytest.mark.asyncio
async def test_unreachable_server_returns_false(helper_config, recording_transport):
    def timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = await _booted_client(helper_config, recording_transport(timeout).transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=60)

    assert await service.ping() is False


@pytest.mark.asyncio
async def test_start_pings_periodically_and_stop_halts(helper_config, recording_transport):
    recorder = recording_transport(_liveness_handler)
    client = await _booted_client(helper_config, recorder.transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=0.01)

    await service.start()
    await asyncio.sleep(0.1)
    await service.stop()

    pings = len(recorder.requests)
    assert pings >= 2
    assert service.is_running() is False

    await asyncio.sleep(0.05)
    assert len(recorder.requests) == pings


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent(helper_config, recording_transport):
    recorder = recording_transport(_liveness_handler)
    client = await _booted_client(helper_config, recorder.transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=60)

    await service.stop()  # not running yet

    await service.start()
    task = service._task
    await service.start()
    assert service._task is task

    await service.stop()
    await service.stop()
    assert service.is_running() is False


@pytest.mark.asyncio
async def test_failing_ticks_do_not_stop_the_loop(helper_config, recording_transport):
    recorder = recording_transport(lambda request: httpx.Response(500))
    client = await _booted_client(helper_config, recorder.transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=0.01)

    await service.start()
    await asyncio.sleep(0.1)
    assert service.is_running() is True
    await service.stop()

    assert len(recorder.requests) >= 2


@pytest.mark.asyncio
async def test_non_object_body_counts_as_failed_ping(helper_config, recording_transport):
    recorder = recording_transport(lambda request: httpx.Response(200, json=["not", "an", "object"]))
    client = await _booted_client(helper_config, recorder.transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=0.01)

    assert await service.ping() is False
    assert await service.health_check() is None

    await service.start()
    await asyncio.sleep(0.1)
    assert service.is_running() is True
    await service.stop()

    assert len(recorder.requests) >= 4


@pytest.mark.asyncio
async def test_unexpected_error_in_tick_keeps_loop_running(helper_config, recording_transport, monkeypatch):
    client = await _booted_client(helper_config, recording_transport(_liveness_handler).transport)
    service = PingService(helper_config=helper_config, liveness_client=client, interval_seconds=0.01)
    calls = []

    async def broken_ping():
        calls.append(1)
        raise RuntimeError("boom")

    monkeypatch.setattr(service, "ping", broken_ping)

    await service.start()
    await asyncio.sleep(0.1)
    assert service.is_running() is True
    await service.stop()

    assert len(calls) >= 2
