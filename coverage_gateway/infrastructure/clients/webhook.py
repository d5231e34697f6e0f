"""Plan webhook client with exponential backoff retry logic"""

import httpx
import asyncio
from typing import Dict, Any
from coverage_gateway.config import settings
from coverage_gateway.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class PlanWebhookClient:
    """Client for notifying downstream treasury services about new coverage plans"""

    def __init__(
        self,
        webhook_url: str | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.plan_webhook_url
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base if backoff_base is None else backoff_base
        self.transport = transport

    async def send_plan_event(self, payload: Dict[str, Any]) -> None:
        """
        Send coverage plan event with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on HTTP status errors and network failures
        - Tracks latency histogram and failure counter

        Args:
            payload: Event data to send to the webhook
        """
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=settings.http_timeout_seconds,
                        )
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError):
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
