"""
Throttling package for the proxy.

Holds the process-wide gate that spaces outbound calls to rate-sensitive
upstreams while preserving arrival order.
"""

from .gate import ThrottleGate, ThrottleTicket

__all__ = ["ThrottleGate", "ThrottleTicket"]
