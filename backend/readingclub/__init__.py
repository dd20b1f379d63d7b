"""Application package for the reading group administration backend.

This package exposes the service, repository and model modules used by
the FastAPI application. Routers live in `readingclub.routers`; the
individual modules contain the concrete implementations and documentation.
"""
