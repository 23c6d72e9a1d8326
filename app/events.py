import logging

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def register_event_handlers(app: FastAPI) -> None:
    @app.on_event("startup")
    async def on_startup() -> None:
        service = app.state.loan_service
        logger.info(
            "Application startup",
            extra={
                "policies": {
                    operation.value: sorted(role.value for role in policy.allowed_roles)
                    for operation, policy in service.policies.items()
                }
            },
        )

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info(
            "Application shutdown",
            extra={"loans_in_memory": len(app.state.loan_service.repository)},
        )
