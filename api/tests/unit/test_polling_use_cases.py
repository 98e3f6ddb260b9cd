"""
Tests unitarios para FairnessPollerUseCases.

Verifican el patron single-flight: un ciclo nuevo solo empieza cuando el
anterior termino, aun si el ciclo dura mas que el intervalo.
"""
from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from app.application.use_cases.polling_use_cases import (
    FairnessPollerUseCases,
    poller_id_for_token,
)
from app.infrastructure.external.notion.sync_service import SyncResult
from app.shared.exceptions.domain import PollerNotFoundException


class _SlowSync:
    """Sync falso cuyo ciclo tarda mas que el intervalo del poller."""

    def __init__(self, delay: float = 0.02, fail_on: tuple[int, ...] = ()) -> None:
        self.delay = delay
        self.fail_on = fail_on
        self.active = 0
        self.max_active = 0
        self.runs = 0
        self.closed = False

    async def run_once(self) -> SyncResult:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            self.runs += 1
            if self.runs in self.fail_on:
                raise RuntimeError(f"boom en ciclo {self.runs}")
            return SyncResult(found=1, processed=1, skipped=0)
        finally:
            self.active -= 1

    async def aclose(self) -> None:
        self.closed = True


async def _wait_for(condition: Callable[[], bool], timeout: float = 2.0) -> None:
    async def _poll() -> None:
        while not condition():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


def _use_cases(fake: _SlowSync, calls: list[str] | None = None) -> FairnessPollerUseCases:
    def factory(token: str):
        if calls is not None:
            calls.append(token)
        return fake

    return FairnessPollerUseCases(sync_factory=factory, interval_seconds=0.001)


@pytest.mark.asyncio
async def test_start_polling_returns_running_status() -> None:
    fake = _SlowSync()
    use_cases = _use_cases(fake)

    status = await use_cases.start_polling("secret_token")

    assert status.poller_id == poller_id_for_token("secret_token")
    assert status.status == "running"
    assert status.interval_seconds == 0.001
    assert "secret_token" not in status.model_dump_json()

    await use_cases.stop_polling("tok", status.poller_id)


@pytest.mark.asyncio
async def test_cycles_never_overlap() -> None:
    fake = _SlowSync(delay=0.02)
    use_cases = _use_cases(fake)

    status = await use_cases.start_polling("tok")
    await _wait_for(lambda: fake.runs >= 3)
    await use_cases.stop_polling("tok", status.poller_id)

    assert fake.max_active == 1


@pytest.mark.asyncio
async def test_cycle_errors_are_logged_and_polling_continues() -> None:
    fake = _SlowSync(delay=0.001, fail_on=(1,))
    use_cases = _use_cases(fake)

    status = await use_cases.start_polling("tok")
    await _wait_for(lambda: fake.runs >= 3)
    final = await use_cases.stop_polling("tok", status.poller_id)

    assert final.failed_cycles == 1
    assert final.cycles >= 3
    assert final.processed_total >= 2
    assert final.last_error is None


@pytest.mark.asyncio
async def test_last_error_reported_while_failing() -> None:
    fake = _SlowSync(delay=0.001, fail_on=tuple(range(1, 1000)))
    use_cases = _use_cases(fake)

    status = await use_cases.start_polling("tok")
    await _wait_for(lambda: fake.runs >= 2)
    current = await use_cases.get_status("tok", status.poller_id)
    await use_cases.stop_polling("tok", status.poller_id)

    assert current.failed_cycles >= 1
    assert "boom" in (current.last_error or "")


@pytest.mark.asyncio
async def test_start_is_idempotent_per_token() -> None:
    fake = _SlowSync()
    calls: list[str] = []
    use_cases = _use_cases(fake, calls)

    first = await use_cases.start_polling("tok")
    second = await use_cases.start_polling("tok")

    assert first.poller_id == second.poller_id
    assert calls == ["tok"]
    assert (await use_cases.list_pollers("tok")).total == 1

    await use_cases.stop_polling("tok", first.poller_id)


@pytest.mark.asyncio
async def test_different_tokens_get_different_pollers() -> None:
    use_cases = FairnessPollerUseCases(sync_factory=lambda token: _SlowSync(), interval_seconds=0.001)

    a = await use_cases.start_polling("tok-a")
    b = await use_cases.start_polling("tok-b")

    assert a.poller_id != b.poller_id
    assert await use_cases.stop_all() == 2


@pytest.mark.asyncio
async def test_stop_cancels_task_and_closes_client() -> None:
    fake = _SlowSync()
    use_cases = _use_cases(fake)

    status = await use_cases.start_polling("tok")
    stopped = await use_cases.stop_polling("tok", status.poller_id)

    assert stopped.status == "stopped"
    assert stopped.in_flight is False
    assert fake.closed is True
    assert (await use_cases.get_status("tok", status.poller_id)).status == "stopped"


@pytest.mark.asyncio
async def test_restart_after_stop_creates_new_loop() -> None:
    calls: list[str] = []
    use_cases = _use_cases(_SlowSync(), calls)

    status = await use_cases.start_polling("tok")
    await use_cases.stop_polling("tok", status.poller_id)
    restarted = await use_cases.start_polling("tok")

    assert restarted.status == "running"
    assert calls == ["tok", "tok"]

    await use_cases.stop_polling("tok", restarted.poller_id)


@pytest.mark.asyncio
async def test_unknown_poller_raises() -> None:
    use_cases = FairnessPollerUseCases(sync_factory=lambda token: _SlowSync(), interval_seconds=0.001)

    with pytest.raises(PollerNotFoundException):
        await use_cases.get_status("tok", "missing")

    with pytest.raises(PollerNotFoundException):
        await use_cases.stop_polling("tok", "missing")


@pytest.mark.asyncio
async def test_pollers_are_scoped_to_their_token() -> None:
    owner = _SlowSync()
    use_cases = _use_cases(owner)

    status = await use_cases.start_polling("tok-owner")

    assert (await use_cases.list_pollers("tok-other")).total == 0
    assert (await use_cases.list_pollers("tok-owner")).total == 1
    with pytest.raises(PollerNotFoundException):
        await use_cases.get_status("tok-other", status.poller_id)
    with pytest.raises(PollerNotFoundException):
        await use_cases.stop_polling("tok-other", status.poller_id)

    assert (await use_cases.get_status("tok-owner", status.poller_id)).status == "running"
    assert owner.closed is False

    await use_cases.stop_polling("tok-owner", status.poller_id)
