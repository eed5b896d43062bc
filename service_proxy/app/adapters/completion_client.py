"""
Chat-completion (OpenAI) client.
"""

from typing import Any, Dict, Optional

import httpx

from service_proxy.app.domain.completion import CompletionParams, extract_content
from shared.errors import ConfigurationError
from shared.metrics import MetricsCollector

from .base import UpstreamClient


class CompletionClient(UpstreamClient):
    """Send chat-completion requests with the server-held API key."""

    service_label = "OpenAI"
    metrics_label = "completion"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        *,
        default_model: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport, metrics=metrics)
        self.api_key = api_key
        self.default_model = default_model

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when no API key is held."""
        if not self.api_key:
            raise ConfigurationError(
                "OpenAI API key not configured. Set OPENAI_API_KEY in the server environment."
            )

    def build_payload(self, params: CompletionParams) -> Dict[str, Any]:
        return {
            "model": params.model or self.default_model,
            "messages": params.messages(),
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
        }

    def _error_detail(self, response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase or None
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return response.reason_phrase or None

    async def complete(self, params: CompletionParams) -> str:
        """Run one completion and return the first choice's content."""
        self.ensure_configured()
        payload = await self._request(
            "POST",
            self.completions_url,
            json=self.build_payload(params),
            headers={"Authorization": f"Bearer {self.api_key}"},
            fallback_message="Failed to reach OpenAI API",
        )
        content = extract_content(payload)
        self.logger.info("Completion generated", model=params.model or self.default_model, chars=len(content))
        return content
