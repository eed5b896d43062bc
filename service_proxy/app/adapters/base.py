"""
Common HTTP plumbing for upstream clients.
"""

from typing import Any, Optional

import httpx

from shared.errors import TransportError, UpstreamStatusError
from shared.logging import get_logger
from shared.metrics import MetricsCollector


class UpstreamClient:
    """Issue one outbound call and translate its outcome into shared errors."""

    service_label = "Upstream"
    metrics_label = "upstream"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.metrics = metrics
        self.logger = get_logger(f"proxy.{self.metrics_label}_client")

    def _record(self, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.record_upstream_call(self.metrics_label, outcome)

    def _error_detail(self, response: httpx.Response) -> Optional[str]:
        """Extra text appended to status errors. Override per upstream."""
        return None

    async def _request(self, method: str, url: str, *, fallback_message: str, **kwargs) -> Any:
        """Send the request and return the decoded JSON body."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            self._record("transport_error")
            self.logger.error(
                f"{self.service_label} request failed",
                url=url,
                error_type=type(exc).__name__,
                error=str(exc)
            )
            raise TransportError(self.service_label, str(exc) or fallback_message, details={"url": url})

        if not response.is_success:
            self._record("status_error")
            self.logger.warning(
                f"{self.service_label} returned error status",
                url=url,
                status_code=response.status_code
            )
            raise UpstreamStatusError(self.service_label, response.status_code, self._error_detail(response))

        try:
            data = response.json()
        except ValueError as exc:
            self._record("invalid_payload")
            self.logger.error(f"{self.service_label} returned invalid JSON", url=url, error=str(exc))
            raise TransportError(
                self.service_label,
                f"{self.service_label} API returned invalid JSON",
                details={"url": url},
            )

        self._record("success")
        self.logger.debug(f"{self.service_label} response received", url=url)
        return data
