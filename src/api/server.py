"""HTTP surface for the forwarding service"""

import asyncio
import platform
import secrets
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from src.analytics.metrics import ForwardingMetrics
from src.config.settings import Settings
from src.forwarding.models import ForwardingRequest
from src.forwarding.service import ForwardingService
from src.utils.log_setup import mask_secret

SERVICE_NAME = "gmail-forwarding-service"
SERVICE_VERSION = "1.0.0"

# Strong references to in-flight workflows; a shielded task outlives a cancelled handler
_background_tasks = set()


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "N/A")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(
    settings: Settings,
    service: Optional[ForwardingService] = None,
    metrics: Optional[ForwardingMetrics] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Loaded service settings
        service: Forwarding service (built from settings when missing)
        metrics: Shared metrics tracker (the service's when missing)
    """
    service = service or ForwardingService(settings, metrics=metrics)
    metrics = metrics or service.metrics
    started_at = time.monotonic()

    app = FastAPI(
        title=SERVICE_NAME,
        version=SERVICE_VERSION,
        description="Accepts Gmail forwarding confirmation requests",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:13]
        request.state.request_id = request_id
        request_start = time.monotonic()

        response = await call_next(request)

        duration = time.monotonic() - request_start
        response.headers["x-request-id"] = request_id
        route = request.scope.get("route")
        metrics.record_http_request(
            request.method,
            route.path if route else request.url.path,
            response.status_code,
            duration,
        )
        logger.info(f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} ({duration * 1000:.0f}ms)")
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        request_id = _request_id(request)
        details = [
            {"field": ".".join(str(part) for part in error["loc"] if part != "body"), "message": error["msg"]}
            for error in exc.errors()
        ]
        logger.warning(f"[{request_id}] Request validation failed: {details}")
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation error",
                "message": "Request body validation failed",
                "details": details,
                "requestId": request_id,
                "timestamp": _timestamp(),
            },
        )

    async def require_api_key(request: Request):
        if not settings.api_key_required:
            return
        api_key = request.headers.get(settings.api_key_header)
        if not api_key:
            logger.warning(f"[{_request_id(request)}] API key missing")
            raise HTTPException(status_code=401, detail=f"Missing {settings.api_key_header} header")
        if not any(secrets.compare_digest(api_key, key) for key in settings.api_keys):
            logger.warning(f"[{_request_id(request)}] Invalid API key: {mask_secret(api_key)}")
            raise HTTPException(status_code=403, detail="Invalid API key")

    @app.get("/health")
    async def health(detailed: bool = False):
        data = {
            "status": "healthy",
            "timestamp": _timestamp(),
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": settings.env,
        }
        if detailed:
            data["system"] = {
                "uptime": time.monotonic() - started_at,
                "active_requests": metrics.metrics["active_requests"],
                "active_browsers": metrics.metrics["active_browsers"],
                "python_version": platform.python_version(),
                "platform": platform.system().lower(),
            }
        metrics.set_health("api", True)
        return data

    @app.get("/metrics")
    async def get_metrics():
        if not settings.enable_metrics:
            raise HTTPException(status_code=404, detail="Metrics disabled")
        return metrics.get_summary()

    @app.post("/accept-forwarding", dependencies=[Depends(require_api_key)])
    async def accept_forwarding(body: ForwardingRequest, request: Request):
        request_id = _request_id(request)
        logger.info(f"[{request_id}] Processing email forwarding request")

        # Shielded: a client disconnect must not abandon a running browser
        task = asyncio.ensure_future(service.accept_forwarding(body, correlation_id=request_id))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        try:
            result = await asyncio.shield(task)
        except asyncio.CancelledError:
            logger.warning(f"[{request_id}] Client went away; forwarding continues in background")
            raise
        except Exception as e:
            logger.exception(f"[{request_id}] Unexpected error in email forwarding endpoint: {e}")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "message": "Internal server error",
                    "requestId": request_id,
                    "timestamp": _timestamp(),
                },
            )

        logger.info(
            f"[{request_id}] Email forwarding request completed: success={result.success} "
            f"alreadyConfirmed={result.already_confirmed} ({result.response_time}ms)"
        )
        return JSONResponse(
            status_code=200 if result.success else 400,
            content={**result.to_response(), "requestId": request_id, "timestamp": _timestamp()},
        )

    return app
