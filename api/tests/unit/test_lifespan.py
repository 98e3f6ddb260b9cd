"""
Tests del ciclo de vida del servicio (startup/shutdown via lifespan).
"""
from __future__ import annotations

import pytest

from app.application.use_cases.polling_use_cases import FairnessPollerUseCases
from app.core.config import settings
from app.core.events import lifespan
from app.infrastructure.external.notion.sync_service import SyncResult


class _IdleSync:
    def __init__(self) -> None:
        self.closed = False

    async def run_once(self) -> SyncResult:
        return SyncResult(found=0, processed=0, skipped=0)

    async def aclose(self) -> None:
        self.closed = True


@pytest.mark.asyncio
async def test_shutdown_stops_running_pollers(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(settings, "LOG_FILE", str(tmp_path / "service.log"))
    monkeypatch.setattr(settings, "POLLING_AUTOSTART", False)
    fake = _IdleSync()
    use_cases = FairnessPollerUseCases(sync_factory=lambda token: fake, interval_seconds=0.01)

    from main import create_application

    async with lifespan(create_application()):
        status = await use_cases.start_polling("tok")

    assert fake.closed is True
    assert (await use_cases.get_status("tok", status.poller_id)).status == "stopped"
