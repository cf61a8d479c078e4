import json
import logging
import os
from decimal import Decimal
from typing import List, Optional

import requests

from mindshift_assist.infrastructure.telemetry.dispatch import BackgroundDispatcher, get_dispatcher

logger = logging.getLogger(__name__)


class DatadogEventEmitter:
    # Agentless Datadog Events via HTTP API
    def __init__(self, dispatcher: Optional[BackgroundDispatcher] = None) -> None:
        self._dispatcher = dispatcher or get_dispatcher()
        self.api_key = os.getenv("DD_API_KEY")
        self.site = os.getenv("DD_SITE", "datadoghq.eu")

        if not self.api_key:
            raise RuntimeError("DD_API_KEY is required for DatadogEventEmitter")

        # Full host: e.g. https://api.datadoghq.eu
        self.host = f"https://api.{self.site}"
        self.url = f"{self.host}/api/v1/events"

        self.headers = {
            "DD-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }

    def emit_event(
        self,
        title: str,
        text: str,
        tags: Optional[List[str]] = None,
        alert_type: str = "info",
    ) -> None:
        payload = {
            "title": title,
            "text": text,
            "tags": tags or [],
            "alert_type": alert_type,
        }
        self._dispatcher.submit(self._post, payload)

    def _post(self, payload: dict) -> None:
        try:
            resp = requests.post(self.url, headers=self.headers, data=json.dumps(payload), timeout=3)
            if resp.status_code >= 300:
                logger.warning("Event submit failed: %s %s", resp.status_code, resp.text)
        except requests.RequestException as e:
            logger.warning("Event submit network error: %s", e)

    def emit_budget_exceeded_event(
        self,
        session_id: str,
        reason: str,
        call_count: int,
        total_cost: Decimal,
    ) -> None:
        self.emit_event(
            title="Session Assistance Budget Exceeded",
            text=f"Session hit {reason} after {call_count} calls (cost {total_cost}). Serving scripted fallbacks.",
            tags=[f"session:{session_id}", "source:mindshift_assist", f"signal:{reason}"],
            alert_type="warning",
        )


class NoOpEventEmitter:
    # Used when telemetry is disabled
    def emit_budget_exceeded_event(self, session_id: str, reason: str, call_count: int, total_cost: Decimal) -> None:
        return None
