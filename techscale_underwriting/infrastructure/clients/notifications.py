"""Notification dispatcher client with exponential backoff retry logic"""

import asyncio
import logging
import httpx
from typing import Dict, Optional
from techscale_underwriting.config import settings
from techscale_underwriting.domain.exceptions import NotificationDispatchError
from techscale_underwriting.domain.models import Notification
from techscale_underwriting.infrastructure.observability.metrics import (
    notification_failure_counter,
    notification_latency_histogram,
)

logger = logging.getLogger(__name__)


class NotificationClient:
    """Client for handing events to the email / in-app notification dispatcher"""

    def __init__(self, webhook_url: str | None = None, auth_token: Optional[str] = None):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.auth_token = auth_token or settings.notification_auth_token
        self.timeout = settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    def _headers(self) -> Dict[str, str]:
        if self.auth_token:
            return {"Authorization": f"Bearer {self.auth_token}"}
        return {}

    async def send(self, notification: Notification) -> None:
        """
        Deliver a notification with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base × 2^attempt)
        - Retries on 5xx errors and network failures; 4xx fails immediately
        - Tracks latency histogram and failure counter

        Raises:
            NotificationDispatchError: after the final failed attempt
        """
        payload = {
            "userId": notification.user_id,
            "type": notification.type.value,
            "data": notification.data,
        }
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with notification_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            headers=self._headers(),
                        )
                        response.raise_for_status()
                        return  # Success

                except httpx.HTTPStatusError as e:
                    attempt += 1
                    notification_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise NotificationDispatchError(
                            f"Dispatcher rejected {notification.type.value}: {e.response.status_code}"
                        ) from e
                    if attempt >= self.max_retries:
                        raise NotificationDispatchError(
                            f"Dispatcher error after {attempt} attempts: {e.response.status_code}"
                        ) from e

                except httpx.RequestError as e:
                    attempt += 1
                    notification_failure_counter.inc()
                    if attempt >= self.max_retries:
                        raise NotificationDispatchError(
                            f"Dispatcher unreachable after {attempt} attempts: {e}"
                        ) from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.warning(
                    "Notification delivery failed, retrying",
                    extra={"type": notification.type.value, "attempt": attempt, "backoff_s": backoff},
                )
                await asyncio.sleep(backoff)
