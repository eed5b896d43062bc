"""
Proxy service package for the Market Signal Proxy.

The proxy fronts client requests to three upstreams, enforcing:
- Input validation: every parameter is checked before an upstream URL is built
- Throttling: a process-wide FIFO gate spaces market data and Reddit calls
- Secret injection: the OpenAI API key never leaves the server

Structure:
- app.main: FastAPI app, routes, and service wiring.
- app.adapters: HTTP clients for the upstream APIs.
- app.domain: Validation rules and completion request shaping.
- app.throttle: The throttle gate.
"""
