from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.context import set_caller_id
from app.core.permissions import Role
from app.core.security import decode_token
from app.models.caller import CallerIdentity
from app.services.loan_workflow import LoanWorkflowService

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CallerIdentity:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_token(credentials.credentials, expected_type="access")
    except ValueError as exc:
        raise _unauthorized(str(exc)) from exc

    subject = payload.get("sub")
    if not subject:
        raise _unauthorized("Invalid token")
    try:
        role = Role(payload.get("role"))
    except ValueError as exc:
        raise _unauthorized("Invalid role claim") from exc

    set_caller_id(str(subject))
    return CallerIdentity(id=str(subject), role=role)


async def require_authenticated_caller(
    caller: CallerIdentity = Depends(get_current_caller),
) -> CallerIdentity:
    """Simple guard to require an authenticated caller (no policy checks)."""
    return caller


def get_loan_service(request: Request) -> LoanWorkflowService:
    return request.app.state.loan_service
