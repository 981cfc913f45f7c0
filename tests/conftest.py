from __future__ import annotations

import random

import pytest

from src.core.config import SimulationSettings
from src.core.models import Endpoint, Session, ONLINE, OFFLINE
from src.sim.engine import SimulationEngine

FIXED_TS = "2026-02-19T10:00:00Z"

# Ensayos deterministas: avanzar siempre, nunca spawn ni ruido
QUIET = SimulationSettings(
    spawn_probability=0.0,
    advance_probability=1.0,
    heartbeat_loss_probability=0.0,
    recovery_probability=0.0,
)


def fixed_clock() -> str:
    return FIXED_TS


@pytest.fixture
def rng():
    return random.Random(1337)


@pytest.fixture
def quiet_engine():
    return SimulationEngine(seed=1337, settings=QUIET, clock=fixed_clock)


@pytest.fixture
def fleet():
    return [
        Endpoint(
            id="ep-1",
            hostname="WS-01",
            status=ONLINE,
            session_count=1,
            current_session=Session(
                username="alice",
                privilege_level="USER",
                allowed_actions=("chrome.exe", "winword.exe"),
                explicit_deny=("mimikatz.exe",),
            ),
        ),
        Endpoint(
            id="ep-2",
            hostname="KIOSK-02",
            status=ONLINE,
            session_count=3,
            current_session=Session(
                username="kiosk_guest",
                privilege_level="GUEST",
                allowed_actions=("chrome.exe",),
                explicit_deny=("*",),
            ),
        ),
        Endpoint(id="ep-3", hostname="NO-SESSION-03", status=ONLINE),
        Endpoint(id="ep-4", hostname="BUILD-04", status=OFFLINE, pinned_offline=True),
    ]
