from __future__ import annotations
from dataclasses import dataclass
from typing import List

from src.core.models import Endpoint, Session, ONLINE, OFFLINE


@dataclass(frozen=True)
class SimulationSettings:
    spawn_probability: float = 0.03           # nueva campaña por tick
    advance_probability: float = 0.15         # avance de cada campaña por tick
    heartbeat_loss_probability: float = 0.005  # un endpoint online pasa a offline
    recovery_probability: float = 0.002       # un endpoint offline vuelve a online


DEFAULT_SETTINGS = SimulationSettings()

# Host
TICK_INTERVAL_SEC = 2.0
ALERT_HISTORY_SIZE = 100
DEMO_ATTACK_TICK = 3                 # ~6 segundos con ticks de 2s
DEMO_ATTACK_ENDPOINT = "ep-demo-1"
DEMO_ATTACK_TYPE = "RANSOMWARE"
BACKEND_CRASH_PROBABILITY = 0.05
BACKEND_CRASH_CHECK_TICKS = 30       # ~60 segundos con ticks de 2s


# Flota por defecto
MOCK_ENDPOINTS: List[Endpoint] = [
    Endpoint(
        id="dev-001",
        hostname="HQ-WORKSTATION-01",
        os="Windows 11 Enterprise",
        ip="10.20.4.15",
        status=ONLINE,
        session_count=5,
        current_session=Session(
            username="muhammad.hussain",
            privilege_level="USER",
            groups=("Developers", "Docker Users"),
            allowed_actions=("code.exe", "chrome.exe", "node.exe", "git.exe"),
            explicit_deny=("powershell.exe", "psexec.exe"),
        ),
    ),
    Endpoint(
        id="dev-002",
        hostname="HQ-WORKSTATION-02",
        os="macOS Sonoma 14.2",
        ip="10.20.4.16",
        status=ONLINE,
        session_count=12,
        current_session=Session(
            username="john.reese",
            privilege_level="ADMINISTRATOR",
            groups=("SecOps", "Wheel"),
            allowed_actions=("*",),
            explicit_deny=("nc", "nmap"),
        ),
    ),
    Endpoint(
        id="dev-003",
        hostname="LEGACY-DB-SERVER",
        os="Ubuntu 20.04 LTS",
        ip="192.168.1.55",
        status=OFFLINE,
        session_count=2,
        current_session=None,  # sin sesión activa
    ),
]

# Flota del modo demo
DEMO_ENDPOINTS: List[Endpoint] = [
    Endpoint(
        id="ep-demo-1",
        hostname="ADMIN-DEVICE-01 (Lenovo X1)",
        os="Windows 11 Enterprise",
        ip="10.0.0.5",
        status=ONLINE,
        session_count=8,
        current_session=Session(
            username="muhammad.hussain",
            privilege_level="ADMINISTRATOR",
            groups=("Domain Admins", "Debuggers"),
            allowed_actions=("powershell.exe", "net.exe", "services.msc", "nmap.exe"),
            explicit_deny=("mimikatz.exe", "ransomware.exe", "tor.exe"),
        ),
    ),
    Endpoint(
        id="ep-demo-2",
        hostname="FINANCE-SYS-04 (Dell OptiPlex)",
        os="Windows 10 Pro",
        ip="10.0.0.12",
        status=ONLINE,
        session_count=3,
        current_session=Session(
            username="kiosk_guest",
            privilege_level="GUEST",
            groups=("Restricted Users",),
            allowed_actions=("chrome.exe", "calc.exe", "notepad.exe"),
            explicit_deny=("powershell.exe", "cmd.exe", "net.exe", "regedit.exe", "*"),
        ),
    ),
    Endpoint(
        id="ep-demo-3",
        hostname="BUILD-SERVER-09 (Offline)",
        os="Ubuntu 22.04 LTS",
        ip="192.168.1.45",
        status=OFFLINE,
        session_count=1,
        current_session=None,
        pinned_offline=True,
    ),
]
