#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyFlow - Dashboard API
FastAPI application exposing statistics, streaks, insights and notifications as JSON
"""

import time
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from dailyflow import __version__
from dailyflow.config import FlowConfig, get_config
from dailyflow.core.exceptions import DailyFlowError, EntityNotFoundError, ValidationError
from dailyflow.services.data_service import DataService, get_data_service
from dailyflow.services.notifications import ReminderService
from dailyflow.dashboard.api import habits, notifications, stats

logger = logging.getLogger(__name__)


class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    uptime_seconds: float
    users: int


def _status_for(exc: DailyFlowError) -> int:
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, ValidationError):
        return 422
    return 500


def create_app(config: Optional[FlowConfig] = None, start_reminders: Optional[bool] = None) -> FastAPI:
    """
    Build the dashboard application.

    The reminder scheduler runs inside the app's event loop when reminders
    are enabled in the configuration, unless start_reminders overrides it.
    """
    config = config or get_config()
    if start_reminders is None:
        start_reminders = config.reminders.enabled

    started_at = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting DailyFlow dashboard (%s)", config.environment.value)
        reminder_service = None

        if start_reminders:
            reminder_service = ReminderService(
                get_data_service(),
                tz_name=config.timezone,
                interval_minutes=config.reminders.check_interval_minutes
            )
            reminder_service.start()

        logger.info("🌐 Dashboard available at http://%s:%d", config.server.host, config.server.port)
        yield

        logger.info("🛑 Stopping DailyFlow dashboard...")
        if reminder_service is not None:
            reminder_service.shutdown()

    show_docs = config.server.debug_mode or config.is_development()
    app = FastAPI(
        title="DailyFlow",
        description="Streak and statistics engine for the DailyFlow productivity dashboard",
        version=__version__,
        docs_url="/api/docs" if show_docs else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if show_docs else None,
        lifespan=lifespan
    )

    # ===== MIDDLEWARE =====

    if config.server.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.server.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            "%s %s - %d - %.3fs", request.method, request.url.path, response.status_code, process_time
        )
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response

    # ===== ERRORS =====

    @app.exception_handler(DailyFlowError)
    async def flow_error_handler(request: Request, exc: DailyFlowError):
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error("❌ %s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.warning("⚠️ %s %s: %s", request.method, request.url.path, exc)

        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__}
        )

    # ===== ROUTES =====

    app.include_router(stats.router)
    app.include_router(habits.router)
    app.include_router(notifications.router)

    @app.get("/health", response_model=HealthCheck)
    async def health_check(data_service: DataService = Depends(get_data_service)):
        return HealthCheck(
            status="healthy",
            service="dailyflow",
            version=__version__,
            timestamp=time.time(),
            uptime_seconds=round(time.time() - started_at, 2),
            users=len(data_service.list_users())
        )

    return app
