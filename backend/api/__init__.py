"""
API routes module.

FastAPI app factory, dependency wiring and routers for all HTTP endpoints.
"""
