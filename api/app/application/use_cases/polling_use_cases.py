"""
Casos de uso del poller Notion -> CFI -> Notion.

Patron single-flight:
- Un asyncio.Task por credencial ejecuta `run_once()` y luego espera el
  intervalo. El siguiente ciclo solo se arma cuando el anterior termino,
  asi dos ciclos nunca procesan la misma fila a la vez.
- Los errores de un ciclo se registran y el loop sigue (sin backoff).
- El cliente de Notion se construye una vez al iniciar el poller y se
  cierra al detenerlo.
"""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from loguru import logger

from app.application.dto.polling_dto import PollerListDTO, PollerStatusDTO
from app.core.config import settings
from app.infrastructure.external.notion.sync_service import FairnessIndicatorSync, build_from_settings
from app.shared.exceptions.domain import PollerNotFoundException


SyncFactory = Callable[[str], FairnessIndicatorSync]


def poller_id_for_token(token: str) -> str:
    """ID estable y no reversible para una credencial (el token nunca se expone)."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


@dataclass
class _PollerState:
    """Estado interno de un poller."""

    poller_id: str
    status: str  # running, stopped
    interval_seconds: float
    created_at: datetime
    updated_at: datetime
    cycles: int = 0
    failed_cycles: int = 0
    processed_total: int = 0
    in_flight: bool = False
    last_run_at: Optional[datetime] = None
    last_error: Optional[str] = None

    def to_dto(self) -> PollerStatusDTO:
        return PollerStatusDTO(
            poller_id=self.poller_id,
            status=self.status,
            interval_seconds=self.interval_seconds,
            cycles=self.cycles,
            failed_cycles=self.failed_cycles,
            processed_total=self.processed_total,
            in_flight=self.in_flight,
            created_at=self.created_at,
            updated_at=self.updated_at,
            last_run_at=self.last_run_at,
            last_error=self.last_error,
        )


class FairnessPollerUseCases:
    """
    Orquestador de pollers en memoria.

    El estado vive en atributos de clase: hay un unico registro de pollers
    por proceso, compartido por todas las instancias (endpoints, startup).
    """

    _pollers: Dict[str, _PollerState] = {}
    _tasks: Dict[str, asyncio.Task] = {}
    _services: Dict[str, FairnessIndicatorSync] = {}
    _lock = asyncio.Lock()

    def __init__(
        self,
        sync_factory: Optional[SyncFactory] = None,
        interval_seconds: Optional[float] = None,
    ) -> None:
        self._sync_factory = sync_factory or build_from_settings
        self._interval = interval_seconds if interval_seconds is not None else settings.POLL_INTERVAL_SECONDS

    async def start_polling(self, token: str) -> PollerStatusDTO:
        """
        Inicia el poller para la credencial. Si ya hay uno corriendo para el
        mismo token, retorna su estado sin crear otro.
        """
        poller_id = poller_id_for_token(token)

        async with self._lock:
            task = self._tasks.get(poller_id)
            if task is not None and not task.done():
                logger.info(f"[poller] {poller_id} ya estaba corriendo")
                return self._pollers[poller_id].to_dto()

            service = self._sync_factory(token)
            now = datetime.now(timezone.utc)
            state = _PollerState(
                poller_id=poller_id,
                status="running",
                interval_seconds=self._interval,
                created_at=now,
                updated_at=now,
            )
            self._pollers[poller_id] = state
            self._services[poller_id] = service
            self._tasks[poller_id] = asyncio.create_task(
                self._run_loop(poller_id, service, self._interval)
            )

        logger.info(f"[poller] {poller_id} iniciado (intervalo {self._interval}s)")
        return state.to_dto()

    def _owned_poller_id(self, token: str, poller_id: str) -> str:
        """Un token solo puede ver y detener su propio poller."""
        if poller_id != poller_id_for_token(token):
            raise PollerNotFoundException(poller_id)
        return poller_id

    async def stop_polling(self, token: str, poller_id: str) -> PollerStatusDTO:
        """
        Detiene el poller de la credencial. Un ciclo en curso se cancela en
        su siguiente await.

        Raises:
            PollerNotFoundException: Si el poller no existe o pertenece a
                otra credencial
        """
        return await self._stop(self._owned_poller_id(token, poller_id))

    async def _stop(self, poller_id: str) -> PollerStatusDTO:
        async with self._lock:
            state = self._pollers.get(poller_id)
            if state is None:
                raise PollerNotFoundException(poller_id)
            task = self._tasks.pop(poller_id, None)
            service = self._services.pop(poller_id, None)

        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if service is not None:
            await service.aclose()

        state.status = "stopped"
        state.in_flight = False
        state.updated_at = datetime.now(timezone.utc)
        logger.info(f"[poller] {poller_id} detenido tras {state.cycles} ciclos")
        return state.to_dto()

    async def get_status(self, token: str, poller_id: str) -> PollerStatusDTO:
        poller_id = self._owned_poller_id(token, poller_id)
        async with self._lock:
            state = self._pollers.get(poller_id)
        if state is None:
            raise PollerNotFoundException(poller_id)
        return state.to_dto()

    async def list_pollers(self, token: str) -> PollerListDTO:
        """Lista los pollers visibles para la credencial (a lo sumo uno)."""
        poller_id = poller_id_for_token(token)
        async with self._lock:
            states = [s for pid, s in self._pollers.items() if pid == poller_id]
        return PollerListDTO(pollers=[s.to_dto() for s in states], total=len(states))

    async def stop_all(self) -> int:
        """Detiene todos los pollers activos. Se usa en el shutdown."""
        async with self._lock:
            running = [pid for pid, task in self._tasks.items() if not task.done()]
        for poller_id in running:
            await self._stop(poller_id)
        return len(running)

    async def _run_loop(self, poller_id: str, service: FairnessIndicatorSync, interval: float) -> None:
        while True:
            await self._run_cycle(poller_id, service)
            await asyncio.sleep(interval)

    async def _run_cycle(self, poller_id: str, service: FairnessIndicatorSync) -> None:
        state = self._pollers[poller_id]
        state.in_flight = True
        state.last_run_at = datetime.now(timezone.utc)
        logger.info(f"[poller] {poller_id} ciclo {state.cycles + 1} iniciado")

        try:
            result = await service.run_once()
            state.processed_total += result.processed
            state.last_error = None
        except Exception as e:
            state.failed_cycles += 1
            state.last_error = str(e)[:2000]
            logger.error(f"[poller] {poller_id} error durante el ciclo: {e}")
        finally:
            state.cycles += 1
            state.in_flight = False
            state.updated_at = datetime.now(timezone.utc)
