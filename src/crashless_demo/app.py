"""
Demo service

Every route below fails in some way except /ping and, half the time,
/external. All failures leave through the crashless envelope.

Usage:
    python -m crashless_demo
    ENVIRONMENT=production python -m crashless_demo
"""

from typing import Any

from fastapi import Body, FastAPI

from crashless import (
    DomainError,
    MiddlewareConfig,
    RequestMeta,
    ServiceSettings,
    create_error,
    get_logger,
    install,
    setup_logging,
)
from crashless_demo import db

logger = get_logger()


def log_telemetry(error: DomainError, meta: RequestMeta) -> None:
    logger.info(
        "telemetry",
        summary=f"{meta.method} {meta.path} -> {meta.status} ({error.code or 'NO_CODE'})",
    )


def create_app(settings: ServiceSettings | None = None) -> FastAPI:
    """Build the demo application.

    Args:
        settings: Service settings; read from the environment when omitted.

    Returns:
        The configured FastAPI application.
    """
    settings = settings or ServiceSettings(service_name="crashless-demo")
    setup_logging(settings.service_name, settings.log_level, settings.log_format)

    app = FastAPI(title="crashless demo", version="0.1.0")
    install(
        app,
        MiddlewareConfig(
            handle_async=True,
            log=True,
            mask_messages=True,
            default_status=500,
            on_telemetry=log_telemetry,
        ),
    )

    @app.get("/user/{user_id}")
    async def read_user(user_id: str):
        return await db.get_user(user_id)

    @app.post("/user", status_code=201)
    async def add_user(payload: dict[str, Any] | None = Body(default=None)):
        return await db.create_user(payload or {})

    @app.delete("/user/{user_id}")
    async def remove_user(user_id: str):
        return await db.delete_user(user_id)

    @app.get("/external")
    async def external():
        return await db.fetch_external_data()

    @app.get("/crash")
    def crash():
        raise create_error("Manual crash triggered!", 500, "ORGANIC_CRASH")

    @app.get("/ping")
    async def ping() -> dict[str, Any]:
        return {"success": True, "message": "Server alive"}

    logger.info(
        "demo_configured",
        environment=settings.environment,
        logs="masked and concise" if settings.is_production else "verbose",
    )
    return app
