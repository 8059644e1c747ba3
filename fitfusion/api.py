# -*- coding: utf-8 -*-
"""
FitFusion API

Diet plans, food/exercise tracking, a product marketplace with cart and
checkout, and an AI-assisted meal-plan generator.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .app_db import init_app_db
from .auth.api import router as auth_router
from .config import settings
from .diet_plans.api import ai_router as ai_diet_plan_router
from .diet_plans.api import router as diet_plans_router
from .health.api import router as health_router
from .nutrition.api import router as nutrition_router
from .orders.api import router as orders_router
from .products.api import router as products_router
from .seed import try_seed_sample_data
from .tracker.api import router as tracker_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="FitFusion API",
    description="Diet plans, health tracking and a fitness product marketplace",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    # Browsers reject credentialed requests against a wildcard origin.
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _init_storage() -> None:
    init_app_db(settings.db_path)
    if settings.seed_sample_data:
        try_seed_sample_data(settings.db_path)


@app.on_event("startup")
def _startup_init_db() -> None:
    _init_storage()


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
_init_storage()


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    msg = str(first.get("msg") or "Invalid request")
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "header")]
    return f"{'.'.join(loc)}: {msg}" if loc else msg


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"success": False, "message": _validation_message(exc)})


@app.middleware("http")
async def _unhandled_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})


app.include_router(auth_router)
app.include_router(products_router)
app.include_router(orders_router)
app.include_router(diet_plans_router)
app.include_router(ai_diet_plan_router)
app.include_router(nutrition_router)
app.include_router(health_router)
app.include_router(tracker_router)


@app.get("/api/health", summary="Liveness probe")
def health():
    return {"status": "OK"}
