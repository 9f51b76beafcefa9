"""
Availability Probe

Feeds the storage status badge. Tracks two signals:

- server_available: result of the last gateway.is_available() (None until
  the first probe finishes)
- online: host network connectivity, updated through set_online()

and derives one status:

    CHECKING     no probe finished yet
    AVAILABLE    last probe succeeded and the host is online
    UNAVAILABLE  last probe failed, or the host is offline

The probe re-runs every ``interval_seconds`` while started, and once more
whenever connectivity comes back. It never influences load() or save().
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from memoir.models.storage import ProbeSnapshot, StorageStatus
from memoir.services.storage.gateway import SyncGateway


logger = structlog.get_logger(__name__)

Listener = Callable[[ProbeSnapshot], None]


class AvailabilityProbe:
    """Periodic remote reachability check."""

    def __init__(
        self,
        gateway: SyncGateway,
        interval_seconds: float = 30.0,
        online: bool = True,
    ):
        self._gateway = gateway
        self._interval = interval_seconds
        self._server_available: Optional[bool] = None
        self._online = online
        self._checked_at: Optional[datetime] = None
        self._listeners: list[Listener] = []
        self._task: Optional[asyncio.Task] = None
        self._wakeup: Optional[asyncio.Event] = None

    @property
    def server_available(self) -> Optional[bool]:
        return self._server_available

    @property
    def online(self) -> bool:
        return self._online

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def status(self) -> StorageStatus:
        if self._server_available is None:
            return StorageStatus.CHECKING
        if self._server_available and self._online:
            return StorageStatus.AVAILABLE
        return StorageStatus.UNAVAILABLE

    def snapshot(self) -> ProbeSnapshot:
        return ProbeSnapshot(
            status=self.status,
            server_available=self._server_available,
            online=self._online,
            checked_at=self._checked_at,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error("probe_listener_failed", error=str(e))

    async def check(self) -> bool:
        """Run one probe now and publish the result."""
        try:
            available = bool(await self._gateway.is_available())
        except Exception as e:
            logger.error("probe_failed", error=str(e))
            available = False

        previous = self.status
        self._server_available = available
        self._checked_at = datetime.now(timezone.utc)
        if self.status != previous:
            logger.info("storage_status_changed", status=self.status.value)
        self._notify()
        return available

    def set_online(self, online: bool) -> None:
        """
        Record a connectivity change (the online/offline event).

        Coming back online wakes the running probe for an immediate check.
        """
        if online == self._online:
            return
        self._online = online
        logger.info("network_status_changed", online=online)
        self._notify()
        if online and self._wakeup is not None:
            self._wakeup.set()

    async def _run(self, wakeup: asyncio.Event) -> None:
        while True:
            await self.check()
            try:
                await asyncio.wait_for(wakeup.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
            wakeup.clear()

    def start(self) -> None:
        """Start periodic probing on the running event loop."""
        if self.running:
            return
        self._wakeup = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._wakeup))

    async def stop(self) -> None:
        """Stop periodic probing."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._wakeup = None

    async def __aenter__(self) -> "AvailabilityProbe":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
