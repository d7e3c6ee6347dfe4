from __future__ import annotations

from flask import current_app, request
from werkzeug.wrappers.response import Response


def apply_security_headers(response: Response) -> Response:
    # HSTS (only meaningful over HTTPS)
    hsts_seconds = current_app.config.get("SECURITY_HSTS_SECONDS", 31536000)
    response.headers.setdefault("Strict-Transport-Security", f"max-age={hsts_seconds}; includeSubDomains")

    # Basic security headers
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault("X-Frame-Options", "DENY")

    csp = current_app.config.get("SECURITY_CSP")
    if csp:
        response.headers.setdefault("Content-Security-Policy", csp)

    # Responses carrying identities or tokens must not be cached by intermediaries
    if request.path.startswith("/api/users") or "Authorization" in request.headers:
        response.headers.setdefault("Cache-Control", "no-store, private")

    return apply_cors_headers(response)


def apply_cors_headers(response: Response) -> Response:
    origin = current_app.config.get("CORS_ALLOW_ORIGIN")
    if not origin:
        return response
    response.headers.setdefault("Access-Control-Allow-Origin", origin)
    response.headers.setdefault("Access-Control-Allow-Headers", "Authorization, Content-Type, X-Request-ID")
    response.headers.setdefault("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS")
    response.headers.setdefault("Access-Control-Expose-Headers", "X-Request-ID, X-Response-Time")
    if origin != "*":
        response.headers.setdefault("Vary", "Origin")
    return response
