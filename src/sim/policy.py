from __future__ import annotations
from typing import Optional, Sequence, Tuple

from src.core.models import (
    Session, WILDCARD, AUTHORIZED, SUSPICIOUS, POLICY_VIOLATION,
    CRITICAL, INFO, MEDIUM,
)


def _matches(entries: Sequence[str], process: str) -> bool:
    return process in entries or WILDCARD in entries


def evaluate(
    session: Optional[Session],
    process: Optional[str],
    template_severity: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Veredicto contextual de un evento contra la política de la sesión.
    Retorna (verdict, effective_severity). Función pura.

    Precedencia:
      1. sin sesión          -> SUSPICIOUS, severidad de la plantilla (o MEDIUM)
      2. deny-list (o "*")   -> POLICY_VIOLATION, CRITICAL
      3. allow-list (o "*")  -> AUTHORIZED, INFO
      4. resto               -> SUSPICIOUS, severidad de la plantilla (o MEDIUM)
    """
    base = template_severity or MEDIUM

    if session is None:
        return SUSPICIOUS, base

    proc = process or ""

    # deny gana aunque el mismo proceso esté también en allow
    if _matches(session.explicit_deny, proc):
        return POLICY_VIOLATION, CRITICAL

    if _matches(session.allowed_actions, proc):
        return AUTHORIZED, INFO

    return SUSPICIOUS, base


def user_context(session: Optional[Session]) -> str:
    if session is None:
        return "User: Unknown"
    return f"User: {session.username} ({session.privilege_level})"
