"""
Inbound parameter validation for proxy routes.

Each ``validate_*`` function takes the raw query/body values of one route and
returns a frozen params object, or raises ``ValidationError`` naming the
offending field. Upstream URLs and payloads are built only from these
objects.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from shared.errors import ValidationError

CHART_INTERVALS = ("1m", "5m", "15m", "30m", "1h", "1d", "5d", "1wk", "1mo", "3mo")
QUOTE_INTERVALS = ("1d", "5d", "1wk", "1mo", "3mo")
QUOTE_RANGES = ("1d", "5d", "1mo", "3mo", "6mo", "1y", "2y", "5y", "ytd", "max")
LISTING_SORTS = ("hot", "top", "new", "rising")
LISTING_TIME_WINDOWS = ("hour", "day", "week", "month", "year", "all")

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
SYMBOL_PATTERN = re.compile(r"^[A-Za-z0-9.^=\-]+$")
PERIOD_PATTERN = re.compile(r"^-?\d+$")

DEFAULT_LISTING_LIMIT = 20
MIN_LISTING_LIMIT = 1
MAX_LISTING_LIMIT = 100


@dataclass(frozen=True)
class ChartParams:
    symbol: str
    period1: int
    period2: int
    interval: str


@dataclass(frozen=True)
class QuoteParams:
    symbol: str
    interval: str
    range: str


@dataclass(frozen=True)
class ListingParams:
    subreddit: str
    sort: str
    limit: int
    t: Optional[str] = None


@dataclass(frozen=True)
class PostParams:
    subreddit: str
    post_id: str


def _present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def _check_choice(field: str, value: str, allowed) -> str:
    if value not in allowed:
        raise ValidationError(
            f"Invalid {field}: must be one of {', '.join(allowed)}",
            details={"field": field, "value": value},
        )
    return value


def _check_identifier(field: str, value: Optional[str]) -> str:
    if not _present(value):
        raise ValidationError(f"Missing required query parameter: {field}", details={"field": field})
    if not IDENTIFIER_PATTERN.match(value):
        raise ValidationError(
            f"Invalid {field}: only letters, digits and underscores are allowed",
            details={"field": field, "value": value},
        )
    return value


def _check_symbol(symbol: Optional[str]) -> str:
    symbol = (symbol or "").strip()
    if not symbol:
        raise ValidationError("Missing required path parameter: symbol", details={"field": "symbol"})
    if not SYMBOL_PATTERN.match(symbol):
        raise ValidationError("Invalid symbol format", details={"field": "symbol", "value": symbol})
    return symbol


def validate_chart_params(
    symbol: Optional[str],
    period1: Optional[str],
    period2: Optional[str],
    interval: Optional[str],
) -> ChartParams:
    """Validate /api/chart/{symbol} parameters."""
    symbol = _check_symbol(symbol)

    missing = [
        name for name, value in (("period1", period1), ("period2", period2), ("interval", interval))
        if not _present(value)
    ]
    if missing:
        raise ValidationError(
            "Missing required query parameters: period1, period2, interval",
            details={"missing": missing},
        )

    invalid = [name for name, value in (("period1", period1), ("period2", period2)) if not PERIOD_PATTERN.match(value)]
    if invalid:
        raise ValidationError(
            "Invalid period1/period2: must be numeric Unix timestamps",
            details={"invalid": invalid},
        )

    _check_choice("interval", interval, CHART_INTERVALS)
    return ChartParams(symbol=symbol, period1=int(period1), period2=int(period2), interval=interval)


def validate_quote_params(
    symbol: Optional[str],
    interval: Optional[str] = None,
    range_: Optional[str] = None,
) -> QuoteParams:
    """Validate /api/quote/{symbol} parameters, applying 1d defaults."""
    symbol = _check_symbol(symbol)
    interval = interval if _present(interval) else "1d"
    range_ = range_ if _present(range_) else "1d"
    _check_choice("interval", interval, QUOTE_INTERVALS)
    _check_choice("range", range_, QUOTE_RANGES)
    return QuoteParams(symbol=symbol, interval=interval, range=range_)


def validate_listing_params(
    subreddit: Optional[str],
    sort: Optional[str] = None,
    limit: Optional[str] = None,
    t: Optional[str] = None,
) -> ListingParams:
    """Validate /api/reddit listing parameters."""
    subreddit = _check_identifier("subreddit", subreddit)

    sort = sort if _present(sort) else "hot"
    _check_choice("sort", sort, LISTING_SORTS)

    if _present(limit):
        try:
            parsed_limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError(
                f"Invalid limit: must be an integer between {MIN_LISTING_LIMIT} and {MAX_LISTING_LIMIT}",
                details={"field": "limit", "value": limit},
            )
        if not MIN_LISTING_LIMIT <= parsed_limit <= MAX_LISTING_LIMIT:
            raise ValidationError(
                f"Invalid limit: must be an integer between {MIN_LISTING_LIMIT} and {MAX_LISTING_LIMIT}",
                details={"field": "limit", "value": limit},
            )
    else:
        parsed_limit = DEFAULT_LISTING_LIMIT

    if _present(t):
        _check_choice("t", t, LISTING_TIME_WINDOWS)
    else:
        t = None

    return ListingParams(subreddit=subreddit, sort=sort, limit=parsed_limit, t=t)


def validate_post_params(subreddit: Optional[str], post_id: Optional[str]) -> PostParams:
    """Validate /api/reddit/post parameters."""
    return PostParams(
        subreddit=_check_identifier("subreddit", subreddit),
        post_id=_check_identifier("postId", post_id),
    )


def require_object(body: Mapping[str, Any], field: str) -> Dict[str, Any]:
    value = body.get(field)
    if value is None:
        raise ValidationError(f"Missing required field: {field}", details={"field": field})
    if not isinstance(value, dict):
        raise ValidationError(f"Invalid {field}: must be an object", details={"field": field})
    return value


def require_string(body: Mapping[str, Any], field: str) -> str:
    value = body.get(field)
    if value is None or value == "":
        raise ValidationError(f"Missing required field: {field}", details={"field": field})
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {field}: must be a string", details={"field": field})
    return value


def optional_string(body: Mapping[str, Any], field: str) -> Optional[str]:
    value = body.get(field)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {field}: must be a string", details={"field": field})
    return value


def optional_positive_int(body: Mapping[str, Any], field: str, default: int) -> int:
    value = body.get(field)
    if value is None:
        return default
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"Invalid {field}: must be a positive integer", details={"field": field})
    return value
