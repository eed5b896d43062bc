"""
Proxy service for the Market Signal Proxy.
"""

import json
from typing import Any, Dict, Optional

from fastapi import Query, Request
from fastapi.responses import JSONResponse

from service_proxy.app.adapters import CompletionClient, DiscussionClient, MarketDataClient
from service_proxy.app.domain import (
    analyze_params,
    portfolio_review_params,
    position_review_params,
    validate_chart_params,
    validate_listing_params,
    validate_post_params,
    validate_quote_params,
)
from service_proxy.app.throttle import ThrottleGate, ThrottleTicket
from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import ErrorResponse, ValidationError


class ProxyService(BaseService):
    """Gateway to the market data, discussion and completion upstreams."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("proxy", config)

        timeout = self.config.upstream_timeout_seconds
        self.throttle_gate = ThrottleGate(self.config.throttle_min_interval_seconds)
        self.market_data_client = MarketDataClient(
            self.config.market_data_base_url,
            timeout=timeout,
            metrics=self.metrics,
        )
        self.discussion_client = DiscussionClient(
            self.config.reddit_base_url,
            user_agent=self.config.reddit_user_agent,
            timeout=timeout,
            metrics=self.metrics,
        )
        # The API key is read once here; absence only fails completion routes.
        self.completion_client = CompletionClient(
            self.config.openai_base_url,
            self.config.openai_api_key,
            default_model=self.config.openai_model,
            timeout=timeout,
            metrics=self.metrics,
        )

        @self.app.on_event("startup")
        async def _startup():
            self.logger.info(
                "Proxy server ready",
                host=self.config.host,
                port=self.config.port,
                completion_configured=bool(self.completion_client.api_key),
                endpoints=[
                    "GET /health",
                    "GET /api/chart/{symbol}?period1&period2&interval",
                    "GET /api/quote/{symbol}?interval&range",
                    "GET /api/reddit?subreddit&sort&limit&t",
                    "GET /api/reddit/post?subreddit&postId",
                    "POST /api/ai/position-review",
                    "POST /api/ai/portfolio-review",
                    "POST /api/ai/analyze",
                ],
            )

        self._setup_market_data_routes()
        self._setup_discussion_routes()
        self._setup_completion_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.proxy_service = self

    async def _throttle(self) -> ThrottleTicket:
        """Wait for the shared gate before calling a rate-sensitive upstream."""
        ticket = await self.throttle_gate.acquire()
        self.metrics.record_throttle_wait(ticket.waited)
        if ticket.waited > 0.001:
            self.logger.info(
                "Request throttled",
                position=ticket.position,
                waited_ms=round(ticket.waited * 1000, 1)
            )
        return ticket

    async def _read_json_body(self, request: Request) -> Dict[str, Any]:
        """Parse the request body as a JSON object."""
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError("Request body must be valid JSON")
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body

    def _setup_market_data_routes(self):
        """Set up Yahoo Finance proxy routes."""

        @self.app.get("/api/chart/{symbol}")
        async def get_chart(
            symbol: str,
            period1: Optional[str] = None,
            period2: Optional[str] = None,
            interval: Optional[str] = None,
        ):
            """Historical chart data between two Unix timestamps."""
            params = validate_chart_params(symbol, period1, period2, interval)
            await self._throttle()
            return JSONResponse(content=await self.market_data_client.get_chart(params))

        @self.app.get("/api/quote/{symbol}")
        async def get_quote(
            symbol: str,
            interval: Optional[str] = None,
            range_: Optional[str] = Query(None, alias="range"),
        ):
            """Latest quote window for a symbol."""
            params = validate_quote_params(symbol, interval, range_)
            await self._throttle()
            return JSONResponse(content=await self.market_data_client.get_quote(params))

    def _setup_discussion_routes(self):
        """Set up Reddit proxy routes."""

        @self.app.get("/api/reddit")
        async def get_listing(
            subreddit: Optional[str] = None,
            sort: Optional[str] = None,
            limit: Optional[str] = None,
            t: Optional[str] = None,
        ):
            """Subreddit listing."""
            params = validate_listing_params(subreddit, sort, limit, t)
            await self._throttle()
            return JSONResponse(content=await self.discussion_client.get_listing(params))

        @self.app.get("/api/reddit/post")
        async def get_post(
            subreddit: Optional[str] = None,
            post_id: Optional[str] = Query(None, alias="postId"),
        ):
            """Single post with its comment tree."""
            params = validate_post_params(subreddit, post_id)
            await self._throttle()
            return JSONResponse(content=await self.discussion_client.get_post(params))

        @self.app.get("/api/twitter")
        async def get_twitter():
            return JSONResponse(
                status_code=501,
                content=ErrorResponse(error="not yet implemented").model_dump()
            )

    def _setup_completion_routes(self):
        """Set up OpenAI completion routes."""

        @self.app.post("/api/ai/position-review")
        async def position_review(request: Request):
            """Review a single position."""
            self.completion_client.ensure_configured()
            params = position_review_params(await self._read_json_body(request))
            return {"result": await self.completion_client.complete(params)}

        @self.app.post("/api/ai/portfolio-review")
        async def portfolio_review(request: Request):
            """Weekly review of the whole portfolio."""
            self.completion_client.ensure_configured()
            params = portfolio_review_params(await self._read_json_body(request))
            return {"result": await self.completion_client.complete(params)}

        @self.app.post("/api/ai/analyze")
        async def analyze(request: Request):
            """Free-form prompt."""
            self.completion_client.ensure_configured()
            params = analyze_params(await self._read_json_body(request))
            return {"result": await self.completion_client.complete(params)}


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = ProxyService(config)
    return service.app


if __name__ == "__main__":
    service = ProxyService()
    service.run()
