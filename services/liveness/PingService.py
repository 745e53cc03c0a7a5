"""Periodic liveness pinger.

Keeps a hosted instance warm by calling its /api/ping endpoint on a fixed
interval. A failed ping is logged and the next tick runs regardless; there
is no retry or backoff. Instances are owned by whoever starts them (the API
server lifespan or the keep-alive runner), never module-level singletons.
"""

import asyncio
import time
from contextlib import suppress

import httpx

from shared.clients.liveness.LivenessClient import LivenessClient
from shared.helper.HelperConfig import HelperConfig
from shared.helper.errors import UpstreamError


def format_uptime(seconds: float) -> str:
    """Render an uptime in seconds as "Hh Mm Ss"."""
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}h {minutes}m {secs}s"


class PingService:
    def __init__(
        self,
        helper_config: HelperConfig,
        liveness_client: LivenessClient,
        interval_seconds: float,
        name: str = "Ping service",
    ) -> None:
        self.logging = helper_config.get_logger()
        self._client = liveness_client
        self.interval_seconds = interval_seconds
        self.name = name
        self._task: asyncio.Task | None = None

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Ping immediately, then every interval. Starting a running service is a no-op."""
        if self.is_running():
            self.logging.info("%s is already running", self.name)
            return
        self.logging.info(
            "Starting %s: pinging %s every %ss", self.name, self._client.base_url, self.interval_seconds,
        )
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the ping loop. Stopping a stopped service is a no-op."""
        if not self.is_running():
            return
        self.logging.info("Stopping %s", self.name)
        task, self._task = self._task, None
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            try:
                await self.ping()
            except Exception:
                # one bad tick must not end the loop
                self.logging.exception("%s: unexpected error during ping", self.name)
            await asyncio.sleep(self.interval_seconds)

    ##########################################
    ################ CHECKS ##################
    ##########################################

    async def ping(self) -> bool:
        """Call /api/ping once. Returns False instead of raising on failure."""
        started = time.monotonic()
        try:
            data = await self._client.do_ping()
        except (httpx.HTTPError, UpstreamError, ValueError) as e:
            self.logging.error("Ping failed: %s", e)
            return False
        elapsed_ms = int((time.monotonic() - started) * 1000)
        self.logging.info(
            "Ping successful: %s at %s (%dms)", data.get("status"), data.get("timestamp"), elapsed_ms,
        )
        return True

    async def health_check(self) -> dict | None:
        """Call /api/health once. Returns the payload, or None on failure."""
        try:
            data = await self._client.do_health_check()
        except (httpx.HTTPError, UpstreamError, ValueError) as e:
            self.logging.error("Health check failed: %s", e)
            return None
        uptime = data.get("uptime")
        uptime_text = format_uptime(uptime) if isinstance(uptime, (int, float)) else "unknown"
        self.logging.info("Health check: %s - Uptime: %s", data.get("status"), uptime_text)
        return data
