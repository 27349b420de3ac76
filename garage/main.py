import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from garage.api.routes import health, parts, sponsors, teams
from garage.container import build_services
from garage.core.config import Settings, settings as default_settings
from garage.core.errors import GarageError
from garage.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    cfg = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(cfg.log_level)
        app.state.services = build_services(cfg)
        try:
            yield
        finally:
            app.state.services.close()

    app = FastAPI(title="F1 Garage Manager API", version="0.1.0", lifespan=lifespan)

    @app.exception_handler(GarageError)
    async def garage_error_handler(request: Request, exc: GarageError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s rejected (%d): %s", request.method, request.url.path,
                           exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body.", "details": jsonable_encoder(exc.errors())},
        )

    # Routers
    app.include_router(health.router, tags=["system"])
    app.include_router(parts.router, prefix="/parts", tags=["parts"])
    app.include_router(teams.router, prefix="/teams", tags=["teams"])
    app.include_router(sponsors.router, prefix="/sponsors", tags=["sponsors"])

    @app.get("/", include_in_schema=False)
    def root():
        return {"message": "F1 Garage Manager API - see /docs"}

    return app


app = create_app()
