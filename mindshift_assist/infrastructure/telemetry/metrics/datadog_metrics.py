import logging
import os
import time
from typing import List, Optional

import requests

from mindshift_assist.infrastructure.telemetry.dispatch import BackgroundDispatcher, get_dispatcher

logger = logging.getLogger(__name__)


class MetricSender:
    # Send metrics to Datadog Agentless API /api/v2/series
    def __init__(self, dispatcher: Optional[BackgroundDispatcher] = None) -> None:
        self._dispatcher = dispatcher or get_dispatcher()
        self.api_key = os.getenv("DD_API_KEY")
        self.site = os.getenv("DD_SITE", "datadoghq.eu")

        if not self.api_key:
            raise RuntimeError("DD_API_KEY is required for MetricSender")

        # v2 series endpoint
        self.url = f"https://api.{self.site}/api/v2/series"

        self.headers = {
            "DD-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }

    def gauge(self, metric_name: str, value: float, tags: Optional[List[str]] = None) -> None:
        self._submit(metric_name, value, tags, metric_type=3)  # 3 = GAUGE

    def count(self, metric_name: str, value: float, tags: Optional[List[str]] = None) -> None:
        self._submit(metric_name, value, tags, metric_type=1)  # 1 = COUNT

    def _submit(self, metric_name: str, value: float, tags: Optional[List[str]], metric_type: int) -> None:
        payload = {
            "series": [
                {
                    "metric": metric_name,
                    "type": metric_type,
                    "points": [
                        {"timestamp": int(time.time()), "value": float(value)}
                    ],
                    "tags": tags or [],
                }
            ]
        }

        # Queued for the telemetry worker; the request thread never waits on Datadog
        self._dispatcher.submit(self._post, payload)

    def _post(self, payload: dict) -> None:
        # Metrics are best effort; a failed submit never reaches the protocol
        try:
            resp = requests.post(
                self.url,
                headers=self.headers,
                json=payload,
                timeout=4,
            )
            if resp.status_code >= 300:
                logger.warning("Metric submit failed: %s %s", resp.status_code, resp.text)
        except requests.RequestException as e:
            logger.warning("Metric submit network error: %s", e)
