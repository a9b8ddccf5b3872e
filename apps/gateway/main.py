from __future__ import annotations

import logging
import uuid

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from apps.gateway.routers import health, lookups, pages
from packages.common.config import get_settings
from packages.common.logging import request_id_var, setup_json_logging


def create_app() -> FastAPI:
    settings = get_settings()
    setup_json_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response

    # Routers
    app.include_router(health.router)
    app.include_router(pages.router)
    app.include_router(lookups.router)

    logging.getLogger(__name__).info(
        "api_started",
        extra={"environment": settings.environment, "upstream": settings.base_domain or None},
    )
    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    uvicorn.run("apps.gateway.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
