"""
Webhook alerts: POST a small JSON payload to ERROR_ALERT_WEBHOOK.

Used when the store connection fails so Slack/Teams/alerting integrations
can pick it up. Delivery failures are logged and never raised: an alert must
not mask the error that triggered it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx

from shortstay_api.shortstay_logging import get_logger

logger = get_logger(__name__)

ALERT_TIMEOUT_SEC = 5.0


def send_alert(webhook_url: str | None, event: str, message: str, **extra: Any) -> bool:
    """
    Send one alert. Returns True when the webhook answered 2xx.

    No-op (False) when webhook_url is empty.
    """
    if not webhook_url:
        return False
    payload: dict[str, Any] = {
        "event": event,
        "message": message,
        "time": datetime.now(timezone.utc).isoformat(),
        **extra,
    }
    try:
        with httpx.Client(timeout=ALERT_TIMEOUT_SEC) as client:
            resp = client.post(webhook_url, json=payload)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("alert_webhook_failed", alert_event=event, error=str(e))
        return False
    logger.info("alert_sent", alert_event=event, status=resp.status_code)
    return True
