"""Tests for the availability probe."""

import asyncio

import pytest

from memoir.models import StorageStatus
from memoir.services.storage import AvailabilityProbe


class StubGateway:
    """Answers is_available() from a scripted list; repeats the last answer."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = 0

    async def is_available(self) -> bool:
        self.calls += 1
        answer = self.answers[min(self.calls, len(self.answers)) - 1]
        if isinstance(answer, Exception):
            raise answer
        return answer


class TestStatus:

    def test_checking_before_first_probe(self):
        probe = AvailabilityProbe(StubGateway(True))

        assert probe.status == StorageStatus.CHECKING
        assert probe.server_available is None

    @pytest.mark.asyncio
    async def test_available(self):
        probe = AvailabilityProbe(StubGateway(True))

        assert await probe.check() is True
        assert probe.status == StorageStatus.AVAILABLE
        assert probe.snapshot().checked_at is not None

    @pytest.mark.asyncio
    async def test_unavailable(self):
        probe = AvailabilityProbe(StubGateway(False))
        await probe.check()

        assert probe.status == StorageStatus.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_exception_counts_as_unavailable(self):
        probe = AvailabilityProbe(StubGateway(RuntimeError("boom")))

        assert await probe.check() is False
        assert probe.status == StorageStatus.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_offline_overrides_server(self):
        probe = AvailabilityProbe(StubGateway(True))
        await probe.check()
        probe.set_online(False)

        assert probe.online is False
        assert probe.status == StorageStatus.UNAVAILABLE

        probe.set_online(True)
        assert probe.status == StorageStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_real_gateway(self, gateway, local_gateway):
        remote = AvailabilityProbe(gateway)
        local = AvailabilityProbe(local_gateway)
        await remote.check()
        await local.check()

        assert remote.status == StorageStatus.AVAILABLE
        assert local.status == StorageStatus.UNAVAILABLE


class TestListeners:

    @pytest.mark.asyncio
    async def test_listeners_receive_snapshots(self):
        probe = AvailabilityProbe(StubGateway(True))
        seen = []
        probe.subscribe(seen.append)

        await probe.check()
        probe.set_online(False)

        assert [s.status for s in seen] == [StorageStatus.AVAILABLE, StorageStatus.UNAVAILABLE]
        assert seen[-1].online is False

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        probe = AvailabilityProbe(StubGateway(True))
        seen = []
        unsubscribe = probe.subscribe(seen.append)
        unsubscribe()

        await probe.check()
        assert seen == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_probe(self):
        probe = AvailabilityProbe(StubGateway(True))
        seen = []

        def broken(snapshot):
            raise ValueError("listener bug")

        probe.subscribe(broken)
        probe.subscribe(seen.append)

        assert await probe.check() is True
        assert len(seen) == 1

    def test_repeated_online_state_is_ignored(self):
        probe = AvailabilityProbe(StubGateway(True))
        seen = []
        probe.subscribe(seen.append)

        probe.set_online(True)
        assert seen == []


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_start_probes_immediately_and_stops(self):
        gateway = StubGateway(True)
        probe = AvailabilityProbe(gateway, interval_seconds=60)

        async with probe:
            assert probe.running
            await asyncio.sleep(0.01)
            assert gateway.calls == 1
            assert probe.status == StorageStatus.AVAILABLE

        assert not probe.running

    @pytest.mark.asyncio
    async def test_periodic_recheck(self):
        gateway = StubGateway(False, True)
        probe = AvailabilityProbe(gateway, interval_seconds=0.01)

        probe.start()
        await asyncio.sleep(0.1)
        await probe.stop()

        assert gateway.calls >= 2
        assert probe.status == StorageStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_coming_online_triggers_recheck(self):
        gateway = StubGateway(True)
        probe = AvailabilityProbe(gateway, interval_seconds=60, online=False)

        probe.start()
        await asyncio.sleep(0.01)
        assert gateway.calls == 1

        probe.set_online(True)
        await asyncio.sleep(0.01)
        await probe.stop()

        assert gateway.calls == 2

    @pytest.mark.asyncio
    async def test_restart_uses_fresh_wakeup(self):
        gateway = StubGateway(True)
        probe = AvailabilityProbe(gateway, interval_seconds=60)

        probe.start()
        await asyncio.sleep(0.01)
        await probe.stop()

        probe.start()
        await asyncio.sleep(0.01)
        probe.set_online(False)
        probe.set_online(True)
        await asyncio.sleep(0.01)
        await probe.stop()

        assert gateway.calls == 3

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        probe = AvailabilityProbe(StubGateway(True))
        await probe.stop()
        assert not probe.running
