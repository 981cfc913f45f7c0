from __future__ import annotations
import json, os
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.core.models import Alert, Endpoint


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def append_alerts(
    alerts: Sequence[Alert],
    *,
    tick: int,
    out_path: str,
    run_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Anexa un lote de alertas al alerts.jsonl del run (una línea por alerta)."""
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    with open(out_path, "a", encoding="utf-8") as f:
        for a in alerts:
            record = {"tick": int(tick), "run_id": run_id, **asdict(a)}
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
    return {"ok": True, "path": out_path, "written": len(alerts)}


def write_endpoints(
    endpoints: Sequence[Endpoint],
    *,
    tick: int,
    out_path: str,
    timestamp: Optional[str] = None,
) -> Dict[str, Any]:
    """Snapshot completo de la flota (se sobrescribe en cada tick)."""
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    snapshot = {
        "timestamp": timestamp or _iso_now(),
        "tick": int(tick),
        "endpoints": [asdict(e) for e in endpoints],
    }
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(snapshot, f, ensure_ascii=False, indent=2)
    return {"ok": True, "path": out_path}


def iter_jsonl(path: str) -> Iterable[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            yield json.loads(line)


def read_alerts(path: str) -> List[Dict[str, Any]]:
    if not os.path.exists(path):
        return []
    return list(iter_jsonl(path))
