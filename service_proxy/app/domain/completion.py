"""
Completion request shaping and response extraction.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from shared.errors import EmptyResultError

from .validation import optional_positive_int, optional_string, require_object, require_string

DEFAULT_TEMPERATURE = 0.7
POSITION_REVIEW_MAX_TOKENS = 1500
PORTFOLIO_REVIEW_MAX_TOKENS = 2000
ANALYZE_DEFAULT_MAX_TOKENS = 2000


@dataclass(frozen=True)
class CompletionParams:
    """Validated inputs for one chat-completion call."""

    user_content: str
    max_tokens: int
    system_prompt: Optional[str] = None
    model: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE

    def messages(self) -> List[Dict[str, str]]:
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": self.user_content})
        return messages


def _pretty_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def position_review_params(body: Mapping[str, Any]) -> CompletionParams:
    position = require_object(body, "positionData")
    system_prompt = require_string(body, "systemPrompt")
    return CompletionParams(
        user_content=_pretty_json(position),
        system_prompt=system_prompt,
        model=optional_string(body, "model"),
        max_tokens=POSITION_REVIEW_MAX_TOKENS,
    )


def portfolio_review_params(body: Mapping[str, Any]) -> CompletionParams:
    portfolio = require_object(body, "portfolioData")
    system_prompt = require_string(body, "systemPrompt")
    return CompletionParams(
        user_content=_pretty_json(portfolio),
        system_prompt=system_prompt,
        model=optional_string(body, "model"),
        max_tokens=PORTFOLIO_REVIEW_MAX_TOKENS,
    )


def analyze_params(body: Mapping[str, Any]) -> CompletionParams:
    user_prompt = require_string(body, "userPrompt")
    return CompletionParams(
        user_content=user_prompt,
        system_prompt=optional_string(body, "systemPrompt"),
        model=optional_string(body, "model"),
        max_tokens=optional_positive_int(body, "maxTokens", ANALYZE_DEFAULT_MAX_TOKENS),
    )


def extract_content(payload: Any) -> str:
    """Return the first choice's message content or raise EmptyResultError."""
    content = None
    if isinstance(payload, dict):
        choices = payload.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message") or {}
            if isinstance(message, dict):
                content = message.get("content")

    if not isinstance(content, str) or not content:
        raise EmptyResultError()
    return content
