"""Market Signal Proxy service."""
