from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api import deps
from app.models.caller import CallerIdentity
from app.schemas.admin import RoleClaimsRequest, RoleClaimsResponse
from app.services.role_claims import assign_role

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/users/{user_id}/claims",
    response_model=RoleClaimsResponse,
    summary="Assign a role to a user by issuing a role-bearing token",
    responses={
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Caller is not an admin"},
    },
)
async def set_user_claims(
    user_id: str,
    payload: RoleClaimsRequest,
    caller: CallerIdentity = Depends(deps.require_authenticated_caller),
) -> RoleClaimsResponse:
    grant = assign_role(caller, user_id, payload.role)
    return RoleClaimsResponse(
        message=f"Role {grant.role.value} assigned to user {grant.user_id}",
        user_id=grant.user_id,
        role=grant.role,
        access_token=grant.access_token,
    )
