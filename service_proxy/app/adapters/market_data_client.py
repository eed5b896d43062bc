"""
Market data (Yahoo Finance chart API) client.
"""

from typing import Any
from urllib.parse import quote, urlencode

from service_proxy.app.domain.validation import ChartParams, QuoteParams

from .base import UpstreamClient


class MarketDataClient(UpstreamClient):
    """Fetch chart and quote payloads keyed by symbol."""

    service_label = "Yahoo Finance"
    metrics_label = "market_data"

    def _chart_path(self, symbol: str) -> str:
        return f"{self.base_url}/v8/finance/chart/{quote(symbol, safe='')}"

    def chart_url(self, params: ChartParams) -> str:
        query = urlencode({
            "period1": params.period1,
            "period2": params.period2,
            "interval": params.interval,
        })
        return f"{self._chart_path(params.symbol)}?{query}"

    def quote_url(self, params: QuoteParams) -> str:
        query = urlencode({"interval": params.interval, "range": params.range})
        return f"{self._chart_path(params.symbol)}?{query}"

    async def get_chart(self, params: ChartParams) -> Any:
        """Fetch historical chart data between two Unix timestamps."""
        return await self._request("GET", self.chart_url(params), fallback_message="Failed to fetch chart data")

    async def get_quote(self, params: QuoteParams) -> Any:
        """Fetch the latest quote window for a symbol."""
        return await self._request("GET", self.quote_url(params), fallback_message="Failed to fetch quote data")
