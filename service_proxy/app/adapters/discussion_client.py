"""
Discussion (Reddit public JSON API) client.
"""

from typing import Any, Optional

import httpx

from service_proxy.app.domain.validation import ListingParams, PostParams
from shared.metrics import MetricsCollector

from .base import UpstreamClient


class DiscussionClient(UpstreamClient):
    """Fetch subreddit listings and post threads."""

    service_label = "Reddit"
    metrics_label = "discussion"

    def __init__(
        self,
        base_url: str,
        *,
        user_agent: str = "TradingApp/1.0",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport, metrics=metrics)
        self.user_agent = user_agent

    def listing_url(self, params: ListingParams) -> str:
        url = f"{self.base_url}/r/{params.subreddit}/{params.sort}.json?limit={params.limit}"
        # Reddit only honours the time window on the top listing
        if params.sort == "top" and params.t:
            url += f"&t={params.t}"
        return url

    def post_url(self, params: PostParams) -> str:
        return f"{self.base_url}/r/{params.subreddit}/comments/{params.post_id}.json"

    async def get_listing(self, params: ListingParams) -> Any:
        return await self._request(
            "GET",
            self.listing_url(params),
            headers={"User-Agent": self.user_agent},
            fallback_message="Failed to fetch Reddit listing",
        )

    async def get_post(self, params: PostParams) -> Any:
        return await self._request(
            "GET",
            self.post_url(params),
            headers={"User-Agent": self.user_agent},
            fallback_message="Failed to fetch Reddit post",
        )
