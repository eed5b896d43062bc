"""
Adapters package for the proxy.

Contains HTTP client wrappers for the upstream APIs. These adapters
encapsulate:

- Base URLs and request shapes
- Server-held credentials and headers
- Error handling that maps to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .base import UpstreamClient
from .completion_client import CompletionClient
from .discussion_client import DiscussionClient
from .market_data_client import MarketDataClient

__all__ = [
    "UpstreamClient",
    "CompletionClient",
    "DiscussionClient",
    "MarketDataClient",
]
