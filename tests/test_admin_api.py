import pytest

from conftest import make_caller

from app.core.permissions import Role
from app.core.security import decode_token
from app.services.loan_errors import LoanAuthorizationError, LoanValidationError
from app.services.role_claims import assign_role


@pytest.fixture
def admin():
    return make_caller(Role.ADMIN, "admin1")


def test_admin_assigns_role(patch_jwt_keys, client, act_as, admin):
    act_as(admin)
    resp = client.post("/api/v1/admin/users/officer42/claims", json={"role": "officer"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Role officer assigned to user officer42"
    data = body["data"]
    assert data["userId"] == "officer42"
    assert data["role"] == "officer"
    assert data["tokenType"] == "bearer"

    claims = decode_token(data["accessToken"], expected_type="access")
    assert claims["sub"] == "officer42"
    assert claims["role"] == "officer"


def test_issued_token_carries_the_granted_role(patch_jwt_keys, client, act_as, admin):
    act_as(admin)
    token = client.post("/api/v1/admin/users/manager7/claims", json={"role": "manager"}).json()[
        "data"
    ]["accessToken"]
    client.app.dependency_overrides.clear()

    resp = client.get("/api/v1/loans", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"count": 0, "loans": []}


@pytest.mark.parametrize("role", [Role.USER, Role.OFFICER, Role.MANAGER])
def test_only_admins_assign_roles(patch_jwt_keys, client, act_as, role):
    act_as(make_caller(role))
    resp = client.post("/api/v1/admin/users/someone/claims", json={"role": "manager"})
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"
    assert resp.json()["details"]["action"] == "admin.assign_role"


def test_unknown_role_is_rejected(client, act_as, admin):
    act_as(admin)
    resp = client.post("/api/v1/admin/users/someone/claims", json={"role": "superhero"})
    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"


def test_admin_routes_require_authentication(client):
    resp = client.post("/api/v1/admin/users/someone/claims", json={"role": "user"})
    assert resp.status_code == 401


def test_assign_role_checks_permission_first(user):
    with pytest.raises(LoanAuthorizationError):
        assign_role(user, "someone", "superhero")


def test_assign_role_validates_input(admin):
    with pytest.raises(LoanValidationError, match="Unknown role: superhero"):
        assign_role(admin, "someone", "superhero")
    with pytest.raises(LoanValidationError, match="User id is required"):
        assign_role(admin, "   ", Role.USER)
