"""
Unit tests for upstream adapters.
"""

import httpx
import pytest

from service_proxy.app.adapters import CompletionClient, DiscussionClient, MarketDataClient
from service_proxy.app.domain import CompletionParams
from service_proxy.app.domain.validation import ChartParams, ListingParams, PostParams, QuoteParams
from shared.errors import ConfigurationError, TransportError, UpstreamStatusError
from shared.metrics import MetricsCollector


class TestMarketDataClient:

    @pytest.fixture
    def market_client(self):
        return MarketDataClient("https://query1.finance.yahoo.com/")

    def test_chart_url(self, market_client):
        url = market_client.chart_url(ChartParams("AAPL", 1700000000, 1700086400, "1h"))

        assert url == (
            "https://query1.finance.yahoo.com/v8/finance/chart/AAPL"
            "?period1=1700000000&period2=1700086400&interval=1h"
        )

    def test_quote_url_encodes_symbol(self, market_client):
        url = market_client.quote_url(QuoteParams("EURUSD=X", "1d", "5d"))

        assert url == "https://query1.finance.yahoo.com/v8/finance/chart/EURUSD%3DX?interval=1d&range=5d"

    @pytest.mark.asyncio
    async def test_status_error_recorded_in_metrics(self):
        metrics = MetricsCollector("proxy")
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        market_client = MarketDataClient("https://example.test", transport=transport, metrics=metrics)

        with pytest.raises(UpstreamStatusError) as exc_info:
            await market_client.get_quote(QuoteParams("AAPL", "1d", "1d"))

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "Yahoo Finance API returned status 503"
        sample = metrics.registry.get_sample_value(
            "upstream_requests_total", {"upstream": "market_data", "outcome": "status_error"}
        )
        assert sample == 1.0

    @pytest.mark.asyncio
    async def test_transport_error_carries_message(self):
        def refuse(request):
            raise httpx.ConnectError("Name or service not known", request=request)

        market_client = MarketDataClient("https://example.test", transport=httpx.MockTransport(refuse))

        with pytest.raises(TransportError) as exc_info:
            await market_client.get_chart(ChartParams("AAPL", 1, 2, "1d"))

        assert exc_info.value.message == "Name or service not known"
        assert exc_info.value.status_code == 500


class TestDiscussionClient:

    @pytest.fixture
    def discussion_client(self):
        return DiscussionClient("https://www.reddit.com")

    def test_listing_url_top_with_window(self, discussion_client):
        url = discussion_client.listing_url(ListingParams("options", "top", 100, "month"))

        assert url == "https://www.reddit.com/r/options/top.json?limit=100&t=month"

    @pytest.mark.parametrize("sort", ["hot", "new", "rising"])
    def test_listing_url_drops_window_for_other_sorts(self, discussion_client, sort):
        url = discussion_client.listing_url(ListingParams("options", sort, 5, "day"))

        assert url == f"https://www.reddit.com/r/options/{sort}.json?limit=5"

    def test_post_url(self, discussion_client):
        assert discussion_client.post_url(PostParams("stocks", "xyz123")) == (
            "https://www.reddit.com/r/stocks/comments/xyz123.json"
        )

    @pytest.mark.asyncio
    async def test_custom_user_agent(self):
        seen = []

        def handler(request):
            seen.append(request.headers["User-Agent"])
            return httpx.Response(200, json={"data": {"children": []}})

        discussion_client = DiscussionClient(
            "https://www.reddit.com",
            user_agent="signal-proxy/2.0",
            transport=httpx.MockTransport(handler),
        )

        await discussion_client.get_listing(ListingParams("stocks", "new", 3))

        assert seen == ["signal-proxy/2.0"]


class TestCompletionClient:

    @pytest.mark.asyncio
    async def test_complete_without_key_never_calls_upstream(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        completion_client = CompletionClient(
            "https://api.openai.com/v1",
            None,
            default_model="gpt-4o-mini",
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(ConfigurationError):
            await completion_client.complete(CompletionParams(user_content="hi", max_tokens=10))

        assert calls == []

    def test_build_payload_uses_default_model(self):
        completion_client = CompletionClient("https://api.openai.com/v1", "sk", default_model="gpt-4o-mini")

        payload = completion_client.build_payload(
            CompletionParams(user_content="hi", max_tokens=10, system_prompt="sys")
        )

        assert payload == {
            "model": "gpt-4o-mini",
            "messages": [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}],
            "temperature": 0.7,
            "max_tokens": 10,
        }

    @pytest.mark.asyncio
    async def test_error_detail_falls_back_to_reason(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="upstream exploded"))
        completion_client = CompletionClient(
            "https://api.openai.com/v1", "sk", default_model="gpt-4o-mini", transport=transport
        )

        with pytest.raises(UpstreamStatusError) as exc_info:
            await completion_client.complete(CompletionParams(user_content="hi", max_tokens=10))

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "OpenAI API returned status 500: Internal Server Error"
