"""Prometheus counters for authentication outcomes."""

from __future__ import annotations

from prometheus_client import Counter

SESSION_CHECKS = Counter(
    "account_session_checks_total",
    "Session token checks grouped by outcome.",
    ("outcome",),
)

SIGN_INS = Counter(
    "account_sign_in_total",
    "Sign-in attempts grouped by outcome.",
    ("outcome",),
)


def record_session_check(outcome: str) -> None:
    SESSION_CHECKS.labels(outcome=outcome).inc()


def record_sign_in(outcome: str) -> None:
    SIGN_INS.labels(outcome=outcome).inc()
