"""
Connectivity signal for the tier orchestrator.

The host app reports network reachability (``set_online``); optionally a
background probe keeps the flag current by requesting a known URL. The
orchestrator reads ``is_online`` synchronously before the remote tier.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx

from ..config import ConnectivityConfig, settings

logger = logging.getLogger("agrinav.routing.connectivity")

Listener = Callable[[bool], None]


class ConnectivityMonitor:
    """Boolean reachability flag with change listeners and an optional probe."""

    def __init__(
        self,
        config: Optional[ConnectivityConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config or settings.connectivity
        self._online = self._config.assume_online
        self._listeners: list[Listener] = []
        self._transport = transport
        self._probe_task: Optional[asyncio.Task] = None
        self._last_probe_error: Optional[str] = None

    @property
    def is_online(self) -> bool:
        return self._online

    def set_online(self, online: bool) -> None:
        """Update the flag; listeners run only when the value changes."""
        online = bool(online)
        if online == self._online:
            return
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._listeners):
            try:
                listener(online)
            except Exception as e:
                logger.warning("Connectivity listener failed: %s", e)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def probe(self) -> bool:
        """Request the probe URL once and update the flag from the outcome."""
        url = self._config.probe_url
        if not url:
            return self._online
        try:
            async with httpx.AsyncClient(
                timeout=self._config.probe_timeout,
                transport=self._transport,
            ) as client:
                response = await client.head(url)
            online = response.status_code < 500
            self._last_probe_error = None
        except httpx.HTTPError as e:
            logger.debug("Connectivity probe failed: %s", e)
            self._last_probe_error = str(e)
            online = False
        self.set_online(online)
        return online

    async def _probe_loop(self) -> None:
        while True:
            await self.probe()
            await asyncio.sleep(self._config.probe_interval)

    def start(self) -> None:
        """Start the background probe if a probe URL is configured."""
        if not self._config.probe_url or self._probe_task is not None:
            return
        self._probe_task = asyncio.create_task(self._probe_loop())
        logger.info(
            "Connectivity probe started (%s every %.0fs)",
            self._config.probe_url, self._config.probe_interval,
        )

    async def stop(self) -> None:
        """Stop the background probe."""
        if self._probe_task is None:
            return
        self._probe_task.cancel()
        try:
            await self._probe_task
        except asyncio.CancelledError:
            pass
        self._probe_task = None
        logger.info("Connectivity probe stopped")

    def status(self) -> dict[str, Any]:
        return {
            "online": self._online,
            "probe_url": self._config.probe_url,
            "probing": self._probe_task is not None,
            "last_probe_error": self._last_probe_error,
        }
