"""
Configuración de fixtures para pytest.
"""
import asyncio

import pytest

from app.application.use_cases.polling_use_cases import FairnessPollerUseCases
from app.infrastructure.external.notion.sync_config import FairnessDatabaseConfig


@pytest.fixture
def fairness_config() -> FairnessDatabaseConfig:
    """Config por defecto del template CompX."""
    return FairnessDatabaseConfig()


@pytest.fixture(autouse=True)
def reset_pollers():
    """Limpia el registro de pollers (estado de clase) antes y despues de cada test."""
    FairnessPollerUseCases._pollers = {}
    FairnessPollerUseCases._tasks = {}
    FairnessPollerUseCases._services = {}
    FairnessPollerUseCases._lock = asyncio.Lock()
    yield
    FairnessPollerUseCases._pollers = {}
    FairnessPollerUseCases._tasks = {}
    FairnessPollerUseCases._services = {}
