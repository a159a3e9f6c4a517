"""
Operational alerts: webhook notifications for infrastructure failures.
"""

from shortstay_api.alerts.webhook import send_alert

__all__ = ["send_alert"]
