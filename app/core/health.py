from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from app.core.settings import settings
from app.services.loan_repository import LoanRepository

APP_VERSION = "0.1.0"


def _check_loan_store(repository: LoanRepository | None) -> dict[str, Any]:
    if repository is None:
        return {"status": "error", "error": "Loan store not initialized"}
    return {"status": "ok", "loans": len(repository)}


def _check_api() -> dict[str, str]:
    return {"status": "ok", "version": APP_VERSION}


def _overall_status(checks: dict[str, dict[str, Any]]) -> tuple[str, bool]:
    ready = all(check.get("status") == "ok" for check in checks.values())
    return ("ok" if ready else "degraded", ready)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def live_payload() -> dict[str, str]:
    return {
        "status": "ok",
        "timestamp": _timestamp(),
    }


def ready_payload(repository: LoanRepository | None) -> dict[str, Any]:
    checks = {
        "api": _check_api(),
        "loan_store": _check_loan_store(repository),
    }
    overall, ready = _overall_status(checks)
    return {
        "status": overall,
        "ready": ready,
        "environment": settings.environment,
        "timestamp": _timestamp(),
        "checks": checks,
    }


def status_summary_payload(repository: LoanRepository | None) -> dict[str, Any]:
    payload = ready_payload(repository)
    payload["version"] = APP_VERSION
    return payload
