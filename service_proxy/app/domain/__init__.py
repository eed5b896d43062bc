"""
Domain layer for the proxy: request validation and completion shaping.
"""

from .completion import (
    CompletionParams,
    analyze_params,
    extract_content,
    portfolio_review_params,
    position_review_params,
)
from .validation import (
    ChartParams,
    ListingParams,
    PostParams,
    QuoteParams,
    validate_chart_params,
    validate_listing_params,
    validate_post_params,
    validate_quote_params,
)

__all__ = [
    "ChartParams",
    "CompletionParams",
    "ListingParams",
    "PostParams",
    "QuoteParams",
    "analyze_params",
    "extract_content",
    "portfolio_review_params",
    "position_review_params",
    "validate_chart_params",
    "validate_listing_params",
    "validate_post_params",
    "validate_quote_params",
]
