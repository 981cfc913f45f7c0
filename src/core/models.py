from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Severidades (de mayor a menor)
CRITICAL = "CRITICAL"
HIGH = "HIGH"
MEDIUM = "MEDIUM"
LOW = "LOW"
INFO = "INFO"
SEVERITIES = (CRITICAL, HIGH, MEDIUM, LOW, INFO)

# Veredictos de política
AUTHORIZED = "AUTHORIZED"
SUSPICIOUS = "SUSPICIOUS"
POLICY_VIOLATION = "POLICY_VIOLATION"
BLOCKED = "BLOCKED"   # nunca lo emite el evaluador, pero el transicionador lo acepta

# Estados de endpoint
ONLINE = "online"
ACTION_NEEDED = "action_needed"
COMPROMISED = "compromised"
OFFLINE = "offline"
ENDPOINT_STATUSES = (ONLINE, ACTION_NEEDED, COMPROMISED, OFFLINE)

# Motores de detección
BEHAVIORAL = "Behavioral Analysis"
SIGNATURE = "Signature Match"
ML_ANOMALY = "ML Anomaly"
EXPLOIT_GUARD = "Exploit Guard"
IDENTITY_CONTEXT = "Identity Context"
SYSTEM_WATCHDOG = "System Watchdog"

WILDCARD = "*"


@dataclass(frozen=True)
class Session:
    username: str
    privilege_level: str      # SYSTEM/ADMINISTRATOR/USER/GUEST
    groups: Tuple[str, ...] = ()
    allowed_actions: Tuple[str, ...] = ()
    explicit_deny: Tuple[str, ...] = ()
    interactive: bool = True
    login_time: Optional[str] = None


@dataclass(frozen=True)
class Endpoint:
    id: str
    hostname: str
    status: str               # online/action_needed/compromised/offline
    os: str = ""
    ip: str = ""
    last_seen: Optional[str] = None
    policy_version: str = "v1.0.0"
    session_count: int = 0
    current_session: Optional[Session] = None
    pinned_offline: bool = False   # endpoints de demo que el ruido nunca recupera


# Plantilla de una etapa del kill chain
@dataclass(frozen=True)
class KillChainStep:
    title: str
    description: str
    severity: Optional[str]
    process_name: str
    process_path: str
    command_line: str
    engine: str = BEHAVIORAL


@dataclass
class Campaign:
    id: str
    attack_type: str
    target_endpoint_id: str
    start_time: str
    total_steps: int
    step_index: int = 0
    active: bool = True


@dataclass
class Alert:
    id: str
    timestamp: str
    severity: str
    endpoint_id: str
    hostname: str
    engine: str
    title: str
    description: str
    process_name: str
    process_path: str
    command_line: str
    parent_process: str = "explorer.exe"
    hash: str = "a3f9c2d1e8b7a6c5d4e3f2a1b0c9d8e7"
    verdict: Optional[str] = None       # AUTHORIZED/SUSPICIOUS/POLICY_VIOLATION
    user_context: Optional[str] = None
    campaign_id: Optional[str] = None
    tags: List[str] = field(default_factory=list)
