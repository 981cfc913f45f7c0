from __future__ import annotations

import threading
import time
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

from src.core import config
from src.core.models import Alert, Endpoint, ONLINE, COMPROMISED, ACTION_NEEDED
from src.host.event_log import append_alerts, write_endpoints
from src.host.history import AlertHistory
from src.sim.engine import SimulationEngine


@dataclass
class StepResult:
    tick: int
    alerts: List[Alert]
    endpoints: List[Endpoint]


class SimulationHost:
    """
    Host que conduce el motor a intervalo fijo.
    - nunca hay dos ticks en vuelo: si el lock está tomado, el tick se salta
    - guarda el historial acotado de alertas y el snapshot de endpoints
    - opcionalmente persiste el run (paths de prepare_run)
    """

    def __init__(
        self,
        engine: SimulationEngine,
        endpoints: Sequence[Endpoint],
        *,
        demo: bool = False,
        history_size: int = config.ALERT_HISTORY_SIZE,
        run_id: Optional[str] = None,
        paths: Optional[Dict[str, str]] = None,
        crash_probability: float = config.BACKEND_CRASH_PROBABILITY,
        crash_check_ticks: int = config.BACKEND_CRASH_CHECK_TICKS,
    ) -> None:
        self.engine = engine
        self.endpoints: List[Endpoint] = list(endpoints)
        self.history = AlertHistory(history_size)
        self.demo = demo
        self.run_id = run_id
        self.paths = paths
        self.crash_probability = crash_probability
        self.crash_check_ticks = crash_check_ticks
        self.sim_time = 0
        self.backend_running = True
        self.skipped = 0
        self._lock = threading.Lock()

    # --------- ciclo ---------
    def step(self) -> Optional[StepResult]:
        if not self._lock.acquire(blocking=False):
            self.skipped += 1
            return None
        try:
            if not self.backend_running:
                return None
            return self._step_locked()
        finally:
            self._lock.release()

    def _step_locked(self) -> StepResult:
        self.sim_time += 1

        # guion de demo: ransomware contra el equipo admin
        if self.demo and self.sim_time == config.DEMO_ATTACK_TICK:
            self.engine.trigger(config.DEMO_ATTACK_ENDPOINT, config.DEMO_ATTACK_TYPE)

        alerts, endpoints = self.engine.tick(self.endpoints)

        if alerts:
            self.history.extend(alerts)
        self.endpoints = endpoints

        if self.paths:
            if alerts:
                append_alerts(alerts, tick=self.sim_time, run_id=self.run_id, out_path=self.paths["alerts"])
            write_endpoints(endpoints, tick=self.sim_time, out_path=self.paths["endpoints"])

        self._maybe_crash()
        return StepResult(tick=self.sim_time, alerts=alerts, endpoints=endpoints)

    def _maybe_crash(self) -> None:
        # caída global del backend: se comprueba cada crash_check_ticks
        if self.crash_check_ticks <= 0 or self.sim_time % self.crash_check_ticks != 0:
            return
        if self.engine.rng.random() < self.crash_probability:
            self.backend_running = False

    def run(self, ticks: int, interval: float = config.TICK_INTERVAL_SEC) -> List[StepResult]:
        results: List[StepResult] = []
        for i in range(ticks):
            res = self.step()
            if res is not None:
                results.append(res)
            if interval > 0 and i < ticks - 1:
                time.sleep(interval)
        return results

    # --------- acciones externas ---------
    def pause(self) -> None:
        self.backend_running = False

    def resume(self) -> None:
        self.backend_running = True

    # las acciones esperan al tick en vuelo: un solo escritor del snapshot
    def remediate(self, endpoint_id: str) -> bool:
        """Limpia compromised/action_needed (fuera del motor de veredictos)."""
        with self._lock:
            changed = False
            out: List[Endpoint] = []
            for ep in self.endpoints:
                if ep.id == endpoint_id and ep.status in (COMPROMISED, ACTION_NEEDED):
                    ep = replace(ep, status=ONLINE)
                    changed = True
                out.append(ep)
            self.endpoints = out
            return changed

    def remove_endpoint(self, endpoint_id: str) -> int:
        with self._lock:
            self.endpoints = [e for e in self.endpoints if e.id != endpoint_id]
            return self.history.drop_endpoint(endpoint_id)

    def reset_campaigns(self) -> None:
        with self._lock:
            self.engine.registry.clear()
