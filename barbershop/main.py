# barbershop/main.py

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .db import init_db
from .errors import SchedulingError
from .log import request_context_middleware, setup_logging
from .routers import (
    appointments_routes,
    auth_routes,
    notifications_routes,
    shops_routes,
    users_routes,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON or not settings.is_development)
    init_db()
    logger.info("startup", env=settings.APP_ENV)
    yield


app = FastAPI(title="Barbershop Scheduling API", lifespan=lifespan)
app.middleware("http")(request_context_middleware)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    logger.info(
        "scheduling_error",
        error_type=type(exc).__name__,
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(shops_routes.router)
app.include_router(appointments_routes.router)
app.include_router(notifications_routes.router)
