"""
HTTP API - FastAPI application, middleware, and error mapping.
"""
