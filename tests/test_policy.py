import pytest

from src.core.models import (
    Session, AUTHORIZED, SUSPICIOUS, POLICY_VIOLATION,
    CRITICAL, HIGH, INFO, LOW, MEDIUM,
)
from src.sim.policy import evaluate, user_context

PROCESSES = ["winword.exe", "mimikatz.exe", "xmrig.exe", "", "powershell.exe"]


def _session(allow=(), deny=()):
    return Session(username="bob", privilege_level="USER", allowed_actions=tuple(allow), explicit_deny=tuple(deny))


def test_no_session_uses_template_severity():
    assert evaluate(None, "xmrig.exe", HIGH) == (SUSPICIOUS, HIGH)


def test_no_session_defaults_to_medium():
    assert evaluate(None, "xmrig.exe", None) == (SUSPICIOUS, MEDIUM)


def test_deny_beats_allow_for_same_process():
    s = _session(allow=["nmap.exe"], deny=["nmap.exe"])
    assert evaluate(s, "nmap.exe", LOW) == (POLICY_VIOLATION, CRITICAL)


def test_deny_wildcard_beats_allow_wildcard():
    s = _session(allow=["*"], deny=["*"])
    assert evaluate(s, "chrome.exe", LOW) == (POLICY_VIOLATION, CRITICAL)


@pytest.mark.parametrize("proc", PROCESSES)
def test_deny_wildcard_is_always_violation(proc):
    s = _session(allow=[proc], deny=["*"])
    assert evaluate(s, proc, LOW) == (POLICY_VIOLATION, CRITICAL)


@pytest.mark.parametrize("proc", PROCESSES)
def test_allow_wildcard_with_empty_deny_is_authorized(proc):
    s = _session(allow=["*"])
    assert evaluate(s, proc, CRITICAL) == (AUTHORIZED, INFO)


def test_explicit_allow_is_authorized():
    s = _session(allow=["winword.exe"], deny=["psexec.exe"])
    assert evaluate(s, "winword.exe", MEDIUM) == (AUTHORIZED, INFO)


def test_unlisted_process_keeps_template_severity():
    s = _session(allow=["chrome.exe"], deny=["psexec.exe"])
    assert evaluate(s, "vssadmin.exe", CRITICAL) == (SUSPICIOUS, CRITICAL)
    assert evaluate(s, "vssadmin.exe", None) == (SUSPICIOUS, MEDIUM)


def test_evaluate_is_pure():
    s = _session(allow=["chrome.exe"], deny=["nc"])
    first = evaluate(s, "nc", LOW)
    for _ in range(5):
        assert evaluate(s, "nc", LOW) == first
    assert s.explicit_deny == ("nc",)


def test_user_context():
    assert user_context(_session()) == "User: bob (USER)"
    assert user_context(None) == "User: Unknown"
