from __future__ import annotations
import random
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from src.core.models import (
    Alert, Endpoint, ONLINE, ACTION_NEEDED, COMPROMISED, OFFLINE,
    POLICY_VIOLATION, BLOCKED, SUSPICIOUS, HIGH, SYSTEM_WATCHDOG,
)


def next_status(current: str, verdict: str) -> str:
    """
    Tabla de transición veredicto -> estado.
    compromised es terminal; offline solo lo mueve el ruido de fondo.
    """
    if current in (COMPROMISED, OFFLINE):
        return current
    if verdict in (POLICY_VIOLATION, BLOCKED):
        return COMPROMISED
    if verdict == SUSPICIOUS:
        return ACTION_NEEDED
    return current


def apply_verdict(endpoints: Sequence[Endpoint], endpoint_id: str, verdict: str) -> List[Endpoint]:
    out: List[Endpoint] = []
    for ep in endpoints:
        if ep.id == endpoint_id:
            status = next_status(ep.status, verdict)
            if status != ep.status:
                ep = replace(ep, status=status)
        out.append(ep)
    return out


def heartbeat_loss(
    endpoints: Sequence[Endpoint],
    rng: random.Random,
    probability: float,
    *,
    new_id: Callable[[], str],
    clock: Callable[[], str],
) -> Tuple[List[Endpoint], Optional[Alert]]:
    """Un endpoint online (solo online) pierde heartbeat y pasa a offline."""
    out = list(endpoints)
    if rng.random() >= probability:
        return out, None

    online = [e for e in out if e.status == ONLINE]
    if not online:
        return out, None

    victim = rng.choice(online)
    out = [replace(e, status=OFFLINE) if e.id == victim.id else e for e in out]
    alert = Alert(
        id=new_id(),
        timestamp=clock(),
        severity=HIGH,
        endpoint_id=victim.id,
        hostname=victim.hostname,
        engine=SYSTEM_WATCHDOG,
        title="Agent Heartbeat Lost",
        description="The backend service stopped communicating. Device marked as OFFLINE.",
        process_name="vigil-agent.exe",
        process_path="N/A",
        command_line="N/A",
        parent_process="N/A",
        hash="N/A",
        tags=["heartbeat_lost", "system"],
    )
    return out, alert


def recovery(
    endpoints: Sequence[Endpoint],
    rng: random.Random,
    probability: float,
) -> Tuple[List[Endpoint], Optional[Endpoint]]:
    """Un endpoint offline (no fijado) se reinicia y vuelve a online."""
    out = list(endpoints)
    if rng.random() >= probability:
        return out, None

    offline = [e for e in out if e.status == OFFLINE and not e.pinned_offline]
    if not offline:
        return out, None

    back = rng.choice(offline)
    back = replace(back, status=ONLINE, session_count=back.session_count + 1)
    out = [back if e.id == back.id else e for e in out]
    return out, back
