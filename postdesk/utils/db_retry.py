"""Database connection retry utilities."""

import time
import functools
from typing import Any, Callable, TypeVar

import structlog
from sqlalchemy.exc import OperationalError, DisconnectionError
from psycopg2 import OperationalError as Psycopg2OperationalError

F = TypeVar('F', bound=Callable[..., Any])

log = structlog.get_logger(__name__)

RETRYABLE_MESSAGES = (
    'ssl syscall error', 'eof detected', 'connection closed',
    'server closed the connection', 'connection reset',
    'connection timed out', 'could not connect',
    'ssl error: decryption failed', 'bad record mac',
)


def is_retryable(exc: BaseException) -> bool:
    error_msg = str(exc).lower()
    return any(keyword in error_msg for keyword in RETRYABLE_MESSAGES)


def retry_db_operation(max_retries: int = 3, delay: float = 0.5, backoff: float = 2.0):
    """
    Decorator to retry database reads on connection failures.

    Args:
        max_retries: Maximum number of retry attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier for delay after each retry
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except (OperationalError, DisconnectionError, Psycopg2OperationalError) as e:
                    # Only retry on connection-related errors
                    if not is_retryable(e) or attempt >= max_retries:
                        if attempt:
                            log.error("db_operation_failed", attempts=attempt + 1, error=str(e))
                        raise
                    log.warning(
                        "db_connection_error",
                        attempt=attempt + 1,
                        max_attempts=max_retries + 1,
                        retry_in=round(current_delay, 1),
                        error=str(e),
                    )
                    # Drop the broken connection before trying again
                    from postdesk.extensions import db
                    db.session.rollback()
                    time.sleep(current_delay)
                    current_delay *= backoff

        return wrapper  # type: ignore[return-value]
    return decorator

