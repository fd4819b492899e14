"""
profrate.api

FastAPI app factory, dependency wiring and routers.
"""
