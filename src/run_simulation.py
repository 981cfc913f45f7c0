#!/usr/bin/env python3
from __future__ import annotations

import argparse
from collections import Counter

from src.core.config import DEMO_ENDPOINTS, MOCK_ENDPOINTS, TICK_INTERVAL_SEC
from src.core.run_manager import new_run_id, prepare_run
from src.host.runner import SimulationHost
from src.sim.engine import SimulationEngine


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--ticks", type=int, default=60)
    ap.add_argument("--interval", type=float, default=TICK_INTERVAL_SEC,
                    help="Segundos entre ticks (0 = sin espera)")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--demo", action="store_true", help="Flota demo + ataque guionado")
    ap.add_argument("--run-id", type=str, default=None)
    ap.add_argument("--clean-run", action="store_true")
    ap.add_argument("--no-persist", action="store_true")
    args = ap.parse_args()

    endpoints = DEMO_ENDPOINTS if args.demo else MOCK_ENDPOINTS
    engine = SimulationEngine(seed=args.seed)

    run_id = None
    paths = None
    if not args.no_persist:
        run_id = args.run_id or new_run_id("sim")
        paths = prepare_run(run_id, clean=args.clean_run, meta={
            "component": "attack_simulation",
            "seed": args.seed,
            "demo": args.demo,
            "ticks": args.ticks,
        }, endpoints=endpoints)

    host = SimulationHost(engine, endpoints, demo=args.demo, run_id=run_id, paths=paths)
    for res in host.run(args.ticks, interval=args.interval):
        for a in res.alerts:
            print(f"[tick {res.tick:04d}] {a.severity:<8} {a.hostname} | {a.title} | {a.verdict or '-'}")

    status = Counter(e.status for e in host.endpoints)
    print(f"✅ Simulación terminada. run_id={run_id} ticks={host.sim_time} "
          f"alerts={len(host.history)} status={dict(status)}")
    if not host.backend_running:
        print("! Backend detenido (caída simulada)")


if __name__ == "__main__":
    main()
## python -m src.run_simulation --ticks 30 --interval 0 --demo --seed 7
