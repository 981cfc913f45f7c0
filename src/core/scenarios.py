from __future__ import annotations
from typing import Dict, Mapping, Sequence, Tuple

from src.core.models import (
    KillChainStep, CRITICAL, HIGH, MEDIUM, LOW,
    BEHAVIORAL, SIGNATURE, ML_ANOMALY, EXPLOIT_GUARD,
)

# Vocabulario fijo de etapas (solo para mostrar)
KILL_CHAIN_STAGES = ("Recon", "Weaponize", "Deliver", "Exploit", "Install", "C2", "Actions")

# Definición de escenarios de ataque (ATT&CK IDs referenciales)
SCENARIOS = [
    {
        "name": "RANSOMWARE",
        "technique_ids": ["T1204.002", "T1490", "T1486"],
        "description": "Macro maliciosa + borrado de shadow copies + cifrado masivo",
    },
    {
        "name": "APT_LATERAL",
        "technique_ids": ["T1046", "T1003", "T1021"],
        "description": "Escaneo interno + volcado de credenciales + servicio remoto",
    },
    {
        "name": "DATA_EXFIL",
        "technique_ids": ["T1567", "T1560"],
        "description": "Subida masiva a la nube + compresión de datos sensibles",
    },
    {
        "name": "CRYPTO_MINER",
        "technique_ids": ["T1496"],
        "description": "Proceso sin firma con uso sostenido de CPU",
    },
]

KILL_CHAINS: Dict[str, Tuple[KillChainStep, ...]] = {
    "RANSOMWARE": (
        KillChainStep(
            title="Suspicious Office Macro Execution",
            description="Office application spawned a child process via macro.",
            severity=MEDIUM,
            process_name="winword.exe",
            process_path=r"C:\Program Files\Microsoft Office\root\Office16\WINWORD.EXE",
            command_line=r'"C:\Program Files\Microsoft Office\root\Office16\WINWORD.EXE" /n "C:\Users\User\Downloads\invoice.docm"',
            engine=BEHAVIORAL,
        ),
        KillChainStep(
            title="VSSAdmin Shadow Copy Deletion",
            description="Process attempted to delete system backup shadow copies.",
            severity=CRITICAL,
            process_name="vssadmin.exe",
            process_path=r"C:\Windows\System32\vssadmin.exe",
            command_line="vssadmin.exe Delete Shadows /All /Quiet",
            engine=EXPLOIT_GUARD,
        ),
        KillChainStep(
            title="Mass File Modification Detected",
            description="Rapid modification of files matching ransomware patterns.",
            severity=CRITICAL,
            process_name="encrypter.exe",
            process_path=r"C:\Users\User\AppData\Local\Temp\encrypter.exe",
            command_line=r"encrypter.exe --start --path C:\Users\User\Documents",
            engine=BEHAVIORAL,
        ),
    ),
    "APT_LATERAL": (
        KillChainStep(
            title="Network Scanner Detected",
            description="Internal network scanning activity detected.",
            severity=LOW,
            process_name="nmap.exe",
            process_path=r"C:\Tools\nmap.exe",
            command_line="nmap -sS -p 445 10.20.4.0/24",
            engine=SIGNATURE,
        ),
        KillChainStep(
            title="Credential Dumping Tool",
            description="Known credential dumping signature matched.",
            severity=HIGH,
            process_name="mimikatz.exe",
            process_path=r"C:\Windows\Temp\mimi.exe",
            command_line="sekurlsa::logonpasswords",
            engine=SIGNATURE,
        ),
        KillChainStep(
            title="Remote Service Creation",
            description="Lateral movement attempt via Service Control Manager.",
            severity=CRITICAL,
            process_name="services.exe",
            process_path=r"C:\Windows\System32\services.exe",
            command_line=r'sc create MalService binPath= "C:\Windows\Temp\rat.exe"',
            engine=BEHAVIORAL,
        ),
    ),
    "DATA_EXFIL": (
        KillChainStep(
            title="Large Outbound Data Transfer",
            description="Unusual outbound traffic volume to cloud storage.",
            severity=MEDIUM,
            process_name="chrome.exe",
            process_path=r"C:\Program Files\Google\Chrome\Application\chrome.exe",
            command_line="chrome.exe --headless --dump-dom https://mega.nz/upload",
            engine=ML_ANOMALY,
        ),
        KillChainStep(
            title="Sensitive File Access",
            description="Compression of sensitive data folders.",
            severity=HIGH,
            process_name="archiver.exe",
            process_path=r"C:\Program Files\7-Zip\7z.exe",
            command_line=r"7z a -tzip secret.zip C:\Users\Admin\Desktop\Confidential\*",
            engine=BEHAVIORAL,
        ),
    ),
    "CRYPTO_MINER": (
        KillChainStep(
            title="High CPU Usage - Unsigned Process",
            description="Sustained high CPU usage by unknown binary.",
            severity=MEDIUM,
            process_name="xmrig.exe",
            process_path=r"C:\Windows\Temp\xmrig.exe",
            command_line="xmrig -o pool.minexmr.com:443 -u WALLET_ID",
            engine=ML_ANOMALY,
        ),
    ),
}


class KillChainCatalog:
    """
    Catálogo inmutable: tipo de ataque -> secuencia ordenada de etapas.
    Falla al construirse si algún tipo no tiene etapas (nunca podría progresar).
    """

    def __init__(self, chains: Mapping[str, Sequence[KillChainStep]]) -> None:
        if not chains:
            raise ValueError("Kill-chain catalog has no attack types")
        empty = [t for t, steps in chains.items() if len(steps) == 0]
        if empty:
            raise ValueError(f"Attack types without kill-chain steps: {', '.join(empty)}")
        self._chains: Dict[str, Tuple[KillChainStep, ...]] = {
            t: tuple(steps) for t, steps in chains.items()
        }

    @property
    def attack_types(self) -> Tuple[str, ...]:
        return tuple(self._chains)

    def steps_for(self, attack_type: str) -> Tuple[KillChainStep, ...]:
        return self._chains[attack_type]

    def __contains__(self, attack_type: object) -> bool:
        return attack_type in self._chains

    def __len__(self) -> int:
        return len(self._chains)


def stage_name(step_index: int) -> str:
    # índices más allá del vocabulario se quedan en la última etapa
    i = min(max(step_index, 0), len(KILL_CHAIN_STAGES) - 1)
    return KILL_CHAIN_STAGES[i]


def technique_ids(attack_type: str) -> list[str]:
    for s in SCENARIOS:
        if s["name"] == attack_type:
            return list(s["technique_ids"])
    return []


DEFAULT_CATALOG = KillChainCatalog(KILL_CHAINS)
