"""HTTP client that posts normalized events to the logging API."""

import logging

import httpx

from syncer.src.models import DeliveryResult, NormalizedEvent

logger = logging.getLogger(__name__)


class SinkClient:
    """Single-attempt delivery of one event per request. No retries."""

    def __init__(self, endpoint: str, timeout: float = 10.0,
                 transport: httpx.BaseTransport | None = None):
        self._endpoint = endpoint
        self._client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def deliver(self, event: NormalizedEvent) -> DeliveryResult:
        try:
            response = self._client.post(self._endpoint, json=event.to_payload())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Failed to send %s/%s: %s", event.category.value, event.action, exc)
            return DeliveryResult(delivered=False, error=str(exc))

        if not response.is_success:
            logger.warning("Sink rejected %s/%s with HTTP %d",
                           event.category.value, event.action, response.status_code)
            return DeliveryResult(delivered=False, status_code=response.status_code,
                                  error=f"HTTP {response.status_code}")
        return DeliveryResult(delivered=True, status_code=response.status_code)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
