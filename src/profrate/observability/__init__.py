"""
profrate.observability

Structured logging configuration and request-scoped log context.
"""
