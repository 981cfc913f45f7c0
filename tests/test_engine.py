import random

from src.core.config import SimulationSettings
from src.core.models import (
    ONLINE, ACTION_NEEDED, COMPROMISED, OFFLINE,
    AUTHORIZED, SUSPICIOUS, POLICY_VIOLATION, CRITICAL, INFO, LOW, MEDIUM,
)
from src.core.scenarios import DEFAULT_CATALOG
from src.sim.engine import SimulationEngine

from conftest import QUIET, fixed_clock, FIXED_TS


def _status(endpoints, ep_id):
    return next(e.status for e in endpoints if e.id == ep_id)


def test_tick_empty_returns_empty():
    engine = SimulationEngine(seed=1)
    for _ in range(50):
        assert engine.tick([]) == ([], [])


def test_tick_empty_with_pending_campaign(quiet_engine):
    quiet_engine.trigger("ghost", "RANSOMWARE")
    assert quiet_engine.tick([]) == ([], [])


def test_ransomware_progression_with_partial_allow(quiet_engine, fleet):
    quiet_engine.trigger("ep-1", "RANSOMWARE")

    alerts, eps = quiet_engine.tick(fleet)
    assert len(alerts) == 1
    a = alerts[0]
    assert a.title == "Suspicious Office Macro Execution"
    assert (a.verdict, a.severity) == (AUTHORIZED, INFO)
    assert a.endpoint_id == "ep-1" and a.hostname == "WS-01"
    assert a.user_context == "User: alice (USER)"
    assert a.timestamp == FIXED_TS
    assert a.campaign_id is not None
    assert "stage:Recon" in a.tags and "ransomware" in a.tags
    assert _status(eps, "ep-1") == ONLINE

    alerts, eps = quiet_engine.tick(eps)
    assert alerts[0].title == "VSSAdmin Shadow Copy Deletion"
    assert (alerts[0].verdict, alerts[0].severity) == (SUSPICIOUS, CRITICAL)
    assert _status(eps, "ep-1") == ACTION_NEEDED

    alerts, eps = quiet_engine.tick(eps)
    assert alerts[0].title == "Mass File Modification Detected"
    assert len(quiet_engine.registry) == 0

    alerts, eps = quiet_engine.tick(eps)
    assert alerts == []


def test_policy_violation_compromises_and_sticks(quiet_engine, fleet):
    quiet_engine.trigger("ep-2", "DATA_EXFIL")
    alerts, eps = quiet_engine.tick(fleet)
    assert (alerts[0].verdict, alerts[0].severity) == (POLICY_VIOLATION, CRITICAL)
    assert _status(eps, "ep-2") == COMPROMISED

    quiet_engine.trigger("ep-1", "APT_LATERAL")
    for _ in range(5):
        alerts, eps = quiet_engine.tick(eps)
        assert _status(eps, "ep-2") == COMPROMISED


def test_deny_then_suspicious_keeps_compromised(quiet_engine, fleet):
    quiet_engine.trigger("ep-1", "APT_LATERAL")
    seen = []
    eps = fleet
    for _ in range(3):
        alerts, eps = quiet_engine.tick(eps)
        seen.append((alerts[0].verdict, _status(eps, "ep-1")))
    assert seen == [
        (SUSPICIOUS, ACTION_NEEDED),
        (POLICY_VIOLATION, COMPROMISED),
        (SUSPICIOUS, COMPROMISED),
    ]


def test_no_session_uses_template_severity(quiet_engine, fleet):
    quiet_engine.trigger("ep-3", "APT_LATERAL")
    alerts, eps = quiet_engine.tick(fleet)
    assert (alerts[0].verdict, alerts[0].severity) == (SUSPICIOUS, LOW)
    assert alerts[0].user_context == "User: Unknown"
    assert _status(eps, "ep-3") == ACTION_NEEDED


def test_offline_target_keeps_offline(quiet_engine, fleet):
    quiet_engine.trigger("ep-4", "CRYPTO_MINER")
    alerts, eps = quiet_engine.tick(fleet)
    assert alerts[0].severity == MEDIUM
    assert _status(eps, "ep-4") == OFFLINE


def test_missing_endpoint_consumes_steps_silently(quiet_engine, fleet):
    c = quiet_engine.trigger("removed", "RANSOMWARE")
    eps = fleet
    for _ in range(3):
        alerts, eps = quiet_engine.tick(eps)
        assert alerts == []
    assert c.step_index == 3 and not c.active
    assert len(quiet_engine.registry) == 0
    assert eps == fleet


def test_tick_does_not_mutate_input(quiet_engine, fleet):
    before = list(fleet)
    quiet_engine.trigger("ep-2", "RANSOMWARE")
    _, eps = quiet_engine.tick(fleet)
    assert fleet == before
    assert eps is not fleet
    assert fleet[1].status == ONLINE


def test_campaign_that_never_rolls_keeps_step_index(fleet):
    settings = SimulationSettings(spawn_probability=0.0, advance_probability=0.0,
                                  heartbeat_loss_probability=0.0, recovery_probability=0.0)
    engine = SimulationEngine(seed=3, settings=settings, clock=fixed_clock)
    c = engine.trigger("ep-1", "RANSOMWARE")
    for _ in range(10):
        assert engine.tick(fleet) == ([], fleet)
    assert c.step_index == 0 and c.active


def test_invariants_hold_under_random_run(fleet):
    settings = SimulationSettings(spawn_probability=0.5, advance_probability=0.5,
                                  heartbeat_loss_probability=0.1, recovery_probability=0.1)
    engine = SimulationEngine(rng=random.Random(99), settings=settings, clock=fixed_clock)
    eps = fleet
    compromised = set()
    for _ in range(300):
        _, eps = engine.tick(eps)
        for c in engine.registry.campaigns:
            n = len(DEFAULT_CATALOG.steps_for(c.attack_type))
            assert 0 <= c.step_index < n
            assert c.active
        for e in eps:
            # el ruido de fondo nunca toca compromised
            if e.id in compromised:
                assert e.status == COMPROMISED
            if e.status == COMPROMISED:
                compromised.add(e.id)


def test_seeded_runs_are_reproducible(fleet):
    settings = SimulationSettings(spawn_probability=0.3, advance_probability=0.4,
                                  heartbeat_loss_probability=0.05, recovery_probability=0.05)

    def run(seed):
        engine = SimulationEngine(seed=seed, settings=settings, clock=fixed_clock)
        eps, trace = fleet, []
        for _ in range(120):
            alerts, eps = engine.tick(eps)
            trace.extend((a.id, a.title, a.endpoint_id, a.verdict) for a in alerts)
        return trace, [e.status for e in eps]

    assert run(42) == run(42)
