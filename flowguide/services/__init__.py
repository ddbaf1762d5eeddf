"""Business logic services.

- workflow: The build-order engine (pure, no I/O)
- build_order_service: Request-level orchestration used by the API
"""
