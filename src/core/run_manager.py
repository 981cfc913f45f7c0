from __future__ import annotations
import os, json, shutil
from dataclasses import asdict
from datetime import datetime, timezone
from uuid import uuid4
from typing import Dict, Sequence

from src.core.models import Endpoint


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def new_run_id(prefix: str = "sim") -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{ts}_{uuid4().hex[:8]}"


def run_dir(run_id: str, root: str = os.path.join("data", "runs")) -> str:
    return os.path.join(root, run_id)


def run_paths(run_id: str, root: str = os.path.join("data", "runs")) -> Dict[str, str]:
    base = run_dir(run_id, root)
    return {
        "base": base,
        "alerts": os.path.join(base, "alerts.jsonl"),
        "endpoints": os.path.join(base, "endpoints.json"),
        "meta": os.path.join(base, "run_meta.json"),
    }


def prepare_run(
    run_id: str,
    *,
    clean: bool = False,
    meta: dict | None = None,
    endpoints: Sequence[Endpoint] = (),
    root: str = os.path.join("data", "runs"),
) -> Dict[str, str]:
    """
    Prepara data/runs/<run_id>/ para una simulación.
    Un run existente sigue anexando alertas; clean=True lo rehace desde cero.
    El snapshot inicial (tick 0) de la flota queda en endpoints.json.
    """
    paths = run_paths(run_id, root)
    base_exists = os.path.exists(paths["base"])

    if clean and base_exists:
        shutil.rmtree(paths["base"])
        base_exists = False

    os.makedirs(paths["base"], exist_ok=True)

    if base_exists:
        return paths

    created_at = _iso_now()
    open(paths["alerts"], "w", encoding="utf-8").close()

    with open(paths["meta"], "w", encoding="utf-8") as f:
        json.dump({"run_id": run_id, "created_at": created_at, **(meta or {})},
                  f, ensure_ascii=False, indent=2)

    with open(paths["endpoints"], "w", encoding="utf-8") as f:
        json.dump({"timestamp": created_at, "tick": 0, "endpoints": [asdict(e) for e in endpoints]},
                  f, ensure_ascii=False, indent=2)

    return paths
