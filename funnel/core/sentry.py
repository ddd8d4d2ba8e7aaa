"""
Sentry Error Tracking Configuration
Centralized Sentry SDK initialization for the Funnel.vc backend.
"""

import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from funnel.core.config import settings

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("authorization", "cookie")
HEALTH_TRANSACTIONS = ("/health", "/health/ready", "/health/live")


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """
    Process events before sending to Sentry.

    Drops health check noise and redacts credentials.
    """
    request = event.get("request")
    if request is None:
        return event

    if request.get("url", "").endswith("/health"):
        return None

    headers = request.get("headers")
    if headers:
        for header in SENSITIVE_HEADERS:
            if header in headers:
                headers[header] = "[REDACTED]"

    return event


def before_send_transaction(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Skip health probes from performance monitoring."""
    if event.get("transaction", "") in HEALTH_TRANSACTIONS:
        return None
    return event


def init_sentry() -> bool:
    """
    Initialize Sentry SDK with FastAPI integration.

    Returns:
        bool: True if Sentry was initialized successfully, False otherwise.
    """
    if not settings.sentry_dsn:
        logger.info("Sentry DSN not configured, error tracking disabled")
        return False

    try:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.sentry_environment or settings.environment,
            release=f"funnel-backend@{settings.app_version}",
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                StarletteIntegration(transaction_style="endpoint"),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR,
                ),
                SqlalchemyIntegration(),
            ],
            before_send=before_send,
            before_send_transaction=before_send_transaction,
            send_default_pii=False,
            attach_stacktrace=True,
            max_breadcrumbs=50,
        )
        sentry_sdk.set_tag("service", "backend")
        sentry_sdk.set_tag("app_name", settings.app_name)

        logger.info(
            f"Sentry initialized successfully "
            f"(env={settings.sentry_environment or settings.environment}, "
            f"traces={settings.sentry_traces_sample_rate})"
        )
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def capture_exception(
    error: Exception,
    user_id: str | None = None,
    extra: dict[str, Any] | None = None,
) -> str | None:
    """
    Capture an exception and send to Sentry.

    Args:
        error: The exception to capture
        user_id: Optional user ID for context
        extra: Optional extra data to attach

    Returns:
        Event ID if captured, None otherwise
    """
    with sentry_sdk.new_scope() as scope:
        if user_id:
            scope.set_user({"id": user_id})

        if extra:
            for key, value in extra.items():
                scope.set_extra(key, value)

        return sentry_sdk.capture_exception(error)
