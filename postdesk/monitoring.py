from __future__ import annotations

import os
import time

import structlog
from flask import Flask, current_app, g, request
from werkzeug.wrappers.response import Response

log = structlog.get_logger(__name__)


def register_request_hooks(app: Flask) -> None:
    """Attach per-request id, timing and access logging to the app."""

    @app.before_request
    def start_request() -> None:
        g.request_id = request.headers.get("X-Request-ID") or os.urandom(8).hex()
        g.request_started = time.perf_counter()
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=g.request_id,
            method=request.method,
            path=request.path,
        )

    @app.after_request
    def finish_request(response: Response) -> Response:
        started = getattr(g, "request_started", None)
        if started is None:
            return response
        duration_ms = int((time.perf_counter() - started) * 1000)
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        response.headers["X-Request-ID"] = g.request_id

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
            ip=request.remote_addr,
        )
        if duration_ms > current_app.config.get("SLOW_REQUEST_THRESHOLD_MS", 1000):
            log.warning(
                "slow_request_detected",
                url=request.full_path.rstrip("?"),
                duration=f"{duration_ms}ms",
            )
        return response

    @app.teardown_request
    def end_request(exc: BaseException | None) -> None:
        structlog.contextvars.clear_contextvars()
