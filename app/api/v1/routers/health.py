from fastapi import APIRouter, Request

from app.core.health import live_payload, ready_payload, status_summary_payload
from app.core.limiter import limiter

router = APIRouter(tags=["health"])


def _repository(request: Request):
    service = getattr(request.app.state, "loan_service", None)
    return service.repository if service is not None else None


@router.get("/health/live", summary="Service liveness check")
@limiter.exempt
async def health_live(request: Request) -> dict:
    return live_payload()


@router.get("/health/ready", summary="Service readiness check")
@limiter.exempt
async def health_ready(request: Request) -> dict:
    return ready_payload(_repository(request))


@router.get("/health", summary="Backward-compatible readiness check")
@limiter.exempt
async def read_health(request: Request) -> dict:
    return ready_payload(_repository(request))


@router.get("/status/summary", tags=["status"], summary="Service status summary")
@limiter.exempt
async def status_summary(request: Request) -> dict:
    return status_summary_payload(_repository(request))
