"""
HTTP API server package.

Read-only FastAPI surface over the token history pipeline.
"""
