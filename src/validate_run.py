#!/usr/bin/env python3
"""
Validador de un run de simulación:
- Lee alerts.jsonl y endpoints.json del run
- Resume severidades, veredictos, motores y tags
- Verifica mínimos: que el run haya producido alertas de kill chain
"""

from __future__ import annotations

import argparse
import json
import os
from collections import Counter
from typing import Any, Dict, List

from src.core.run_manager import run_paths
from src.host.event_log import read_alerts


def summarize_alerts(alerts: List[Dict[str, Any]]) -> Dict[str, Any]:
    severity = Counter()
    verdict = Counter()
    engine = Counter()
    tags = Counter()
    hosts = Counter()
    campaigns = set()

    for a in alerts:
        severity[a.get("severity", "missing")] += 1
        verdict[a.get("verdict") or "none"] += 1
        engine[a.get("engine", "missing")] += 1
        hosts[a.get("hostname", "missing")] += 1
        for t in (a.get("tags") or []):
            tags[t] += 1
        if a.get("campaign_id"):
            campaigns.add(a["campaign_id"])

    return {
        "total": len(alerts),
        "severity": severity,
        "verdict": verdict,
        "engine": engine,
        "tags": tags,
        "top_hosts": hosts.most_common(5),
        "campaigns": len(campaigns),
    }


def pct(part: int, total: int) -> str:
    if total <= 0:
        return "0%"
    return f"{(part/total)*100:.1f}%"


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--run-id", required=True)
    ap.add_argument("--runs-dir", default=os.path.join("data", "runs"))
    ap.add_argument("--min-kill-chain", type=int, default=1,
                    help="Mínimo de alertas de kill chain esperadas")
    args = ap.parse_args()

    paths = run_paths(args.run_id, args.runs_dir)
    if not os.path.exists(paths["alerts"]):
        raise SystemExit(f"No existe el run: {paths['base']}")

    s = summarize_alerts(read_alerts(paths["alerts"]))
    total = s["total"]

    print(f"\n=== VALIDACIÓN RUN {args.run_id} ===")
    print(f"Alertas: {total} | campañas: {s['campaigns']}")

    print("\nSeveridad:")
    for k, v in s["severity"].most_common():
        print(f"  - {k}: {v} ({pct(v, total)})")

    print("\nVeredictos:")
    for k, v in s["verdict"].most_common():
        print(f"  - {k}: {v} ({pct(v, total)})")

    print("\nMotores:")
    for k, v in s["engine"].most_common():
        print(f"  - {k}: {v}")

    print(f"\nTop hosts: {s['top_hosts']}")

    if os.path.exists(paths["endpoints"]):
        with open(paths["endpoints"], "r", encoding="utf-8") as f:
            snap = json.load(f)
        status = Counter(e.get("status") for e in snap.get("endpoints", []))
        print(f"Estado final (tick {snap.get('tick')}): {dict(status)}")

    kc = s["tags"].get("kill_chain", 0)
    if kc < args.min_kill_chain:
        print(f"\n! kill_chain={kc} (<{args.min_kill_chain}). Sube --ticks o usa --demo.")
    else:
        print("\n✅ OK: el run tiene actividad de kill chain.")


if __name__ == "__main__":
    main()
## python -m src.validate_run --run-id sim_20260101_000000_abcd1234
