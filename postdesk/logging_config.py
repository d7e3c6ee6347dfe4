from __future__ import annotations

import logging

import structlog
from flask import g, has_app_context


def configure_logging(level: str = "INFO", cache_loggers: bool = True) -> None:
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            timestamper,
            add_request_id,
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(str(level).upper())
        ),
        cache_logger_on_first_use=cache_loggers,
    )


def add_request_id(logger, method_name, event_dict):
    if not has_app_context():
        return event_dict
    req_id = getattr(g, "request_id", None)
    if req_id:
        event_dict.setdefault("request_id", req_id)
    return event_dict
