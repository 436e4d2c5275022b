from __future__ import annotations

from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from app.core.config import settings
from app.core.errors import MenuItemNotFound, MenuItemValidationError
from app.core.logging import request_id_ctx


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Tag Sentry events with the current request id."""
    request_id = request_id_ctx.get()
    if request_id:
        event.setdefault("tags", {})["request_id"] = request_id

    # Expected client errors are not faults
    exc_info = hint.get("exc_info")
    if exc_info and isinstance(exc_info[1], (MenuItemNotFound, MenuItemValidationError)):
        return None

    return event


def init_sentry() -> bool:
    """Initialize Sentry error tracking when a DSN is configured."""
    if not settings.sentry_dsn:
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment or settings.environment,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=None,  # Capture all log levels
                event_level=None,  # Don't create events from logs
            ),
        ],
        traces_sample_rate=0.1,
        before_send=before_send,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )

    sentry_sdk.set_tag("service", settings.app_name)
    sentry_sdk.set_tag("environment", settings.environment)
    return True
