"""Global test fixtures and shared test infrastructure.

Provides:
- Environment variable defaults (must be set before any app import)
- Caller factories (make_caller) and a fresh loan service per test
- Dependency overrides for the authenticated caller
- Ephemeral RSA keys for JWT tests
"""

from __future__ import annotations

import os

# Environment defaults must be set before importing the app, which triggers
# pydantic Settings validation on import.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

from datetime import datetime, timezone
from typing import Callable

import pytest
from fastapi.testclient import TestClient
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.api import deps
from app.core.permissions import Role
from app.main import app
from app.models.caller import CallerIdentity
from app.models.loan import Loan
from app.schemas.loan import LoanStatus
from app.services.loan_repository import LoanRepository
from app.services.loan_workflow import LoanWorkflowService


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_caller(role: Role | str = Role.USER, caller_id: str | None = None) -> CallerIdentity:
    role = Role(role)
    return CallerIdentity(id=caller_id or f"{role.value}1", role=role)


def make_loan(**overrides) -> Loan:
    defaults = dict(
        user_id="user1",
        amount=5000,
        purpose="Business expansion",
        created_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        status=LoanStatus.PENDING,
    )
    defaults.update(overrides)
    return Loan(**defaults)


# ---------------------------------------------------------------------------
# Shared pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Replace the shared limiter with a fresh in-memory limiter for all tests."""
    original = app.state.limiter
    app.state.limiter = Limiter(
        key_func=get_remote_address,
        storage_uri="memory://",
    )
    yield
    app.state.limiter = original


@pytest.fixture
def repository() -> LoanRepository:
    return LoanRepository()


@pytest.fixture
def service(repository) -> LoanWorkflowService:
    return LoanWorkflowService(repository=repository)


@pytest.fixture(autouse=True)
def _fresh_loan_service(service):
    """Each test gets an empty in-memory loan store behind the app."""
    original = app.state.loan_service
    app.state.loan_service = service
    yield
    app.state.loan_service = original


@pytest.fixture
def user() -> CallerIdentity:
    return make_caller(Role.USER, "user456")


@pytest.fixture
def officer() -> CallerIdentity:
    return make_caller(Role.OFFICER, "officer1")


@pytest.fixture
def manager() -> CallerIdentity:
    return make_caller(Role.MANAGER, "manager1")


@pytest.fixture
def act_as() -> Callable[[CallerIdentity], None]:
    """Override the authenticated caller; call again to switch identity mid-test."""

    def _act_as(caller: CallerIdentity) -> None:
        async def _get_caller():
            return caller

        app.dependency_overrides[deps.get_current_caller] = _get_caller

    yield _act_as

    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def patch_jwt_keys(monkeypatch, tmp_path):
    """Generate ephemeral RSA keys and patch settings for JWT tests."""
    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import rsa

    from app.core import security
    from app.core.settings import settings

    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    priv_file = tmp_path / "priv.pem"
    pub_file = tmp_path / "pub.pem"
    priv_file.write_bytes(private_pem)
    pub_file.write_bytes(public_pem)
    monkeypatch.setattr(settings, "jwt_private_key_path", str(priv_file))
    monkeypatch.setattr(settings, "jwt_public_key_path", str(pub_file))
    security._load_private_key.cache_clear()
    security._load_public_key.cache_clear()
    yield
    security._load_private_key.cache_clear()
    security._load_public_key.cache_clear()
