"""
Shared utilities for the Market Signal Proxy.

This package aggregates common building blocks consumed by the proxy service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI application shell

Do not import from service_* packages into shared/.
"""
