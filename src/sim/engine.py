from __future__ import annotations

import random
from datetime import datetime, timezone
from itertools import count
from typing import Callable, List, Optional, Sequence, Tuple, TypedDict

from langgraph.graph import StateGraph, END

from src.core.config import DEFAULT_SETTINGS, SimulationSettings
from src.core.models import Alert, Campaign, Endpoint, KillChainStep
from src.core.scenarios import DEFAULT_CATALOG, KillChainCatalog, stage_name
from src.sim.campaigns import CampaignRegistry
from src.sim.policy import evaluate, user_context
from src.sim.transitions import apply_verdict, heartbeat_loss, recovery


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# --------- state ---------
class TickState(TypedDict, total=False):
    endpoints: List[Endpoint]
    alerts: List[Alert]
    spawned: Optional[str]      # id de la campaña creada en este tick
    swept: int                  # campañas retiradas al final del tick


class SimulationEngine:
    """
    Motor de simulación de ataques + veredictos de política.

    Cada tick recorre: spawn -> advance -> noise -> sweep.
    Los endpoints recibidos nunca se mutan; se devuelve una lista nueva.
    Un solo tick en vuelo a la vez (lo garantiza el host).
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        catalog: KillChainCatalog = DEFAULT_CATALOG,
        settings: SimulationSettings = DEFAULT_SETTINGS,
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random(seed)
        self.catalog = catalog
        self.settings = settings
        self.clock = clock or _iso_now
        self.registry = CampaignRegistry(
            catalog,
            self.rng,
            self.clock,
            spawn_probability=settings.spawn_probability,
            advance_probability=settings.advance_probability,
        )
        self._alert_ids = count(1)
        self._graph = self._build_graph()

    # --------- API ---------
    def trigger(self, endpoint_id: str, attack_type: str) -> Campaign:
        return self.registry.trigger(endpoint_id, attack_type)

    def tick(self, endpoints: Sequence[Endpoint]) -> Tuple[List[Alert], List[Endpoint]]:
        out = self._graph.invoke({"endpoints": list(endpoints), "alerts": []})
        return list(out["alerts"]), list(out["endpoints"])

    # --------- helpers ---------
    def _next_alert_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._alert_ids):06d}"

    def _materialize(self, campaign: Campaign, step: KillChainStep, target: Endpoint) -> Alert:
        session = target.current_session
        verdict, severity = evaluate(session, step.process_name, step.severity)
        return Alert(
            id=self._next_alert_id("alt"),
            timestamp=self.clock(),
            severity=severity,
            endpoint_id=target.id,
            hostname=target.hostname,
            engine=step.engine,
            title=step.title,
            description=step.description,
            process_name=step.process_name,
            process_path=step.process_path,
            command_line=step.command_line,
            verdict=verdict,
            user_context=user_context(session),
            campaign_id=campaign.id,
            tags=[
                "kill_chain",
                campaign.attack_type.lower(),
                f"stage:{stage_name(campaign.step_index - 1)}",
            ],
        )

    # --------- nodes ---------
    def _spawn(self, state: TickState) -> TickState:
        c = self.registry.spawn_random(state["endpoints"])
        return {"spawned": c.id if c else None}

    def _advance(self, state: TickState) -> TickState:
        endpoints = list(state["endpoints"])
        alerts = list(state.get("alerts") or [])

        for campaign in self.registry.campaigns:
            if not campaign.active or not self.registry.should_advance():
                continue
            step = self.registry.advance(campaign)
            if step is None:
                continue

            # join contra el snapshot del tick: si el endpoint no existe, se descarta
            target = next((e for e in state["endpoints"] if e.id == campaign.target_endpoint_id), None)
            if target is None:
                continue

            alert = self._materialize(campaign, step, target)
            alerts.append(alert)
            endpoints = apply_verdict(endpoints, target.id, alert.verdict)

        return {"alerts": alerts, "endpoints": endpoints}

    def _noise(self, state: TickState) -> TickState:
        alerts = list(state.get("alerts") or [])
        endpoints, lost = heartbeat_loss(
            state["endpoints"],
            self.rng,
            self.settings.heartbeat_loss_probability,
            new_id=lambda: self._next_alert_id("sys"),
            clock=self.clock,
        )
        if lost is not None:
            alerts.append(lost)
        endpoints, _ = recovery(endpoints, self.rng, self.settings.recovery_probability)
        return {"alerts": alerts, "endpoints": endpoints}

    def _sweep(self, state: TickState) -> TickState:
        return {"swept": self.registry.sweep()}

    def _build_graph(self):
        g = StateGraph(TickState)
        g.add_node("spawn", self._spawn)
        g.add_node("advance", self._advance)
        g.add_node("noise", self._noise)
        g.add_node("sweep", self._sweep)

        g.set_entry_point("spawn")
        g.add_edge("spawn", "advance")
        g.add_edge("advance", "noise")
        g.add_edge("noise", "sweep")
        g.add_edge("sweep", END)

        return g.compile()
