"""REST API presentation layer for MindWell.

This package provides a FastAPI-based REST API for the authentication
backend.

Structure:
    api/
    ├── app.py                # FastAPI application factory
    ├── dependencies.py       # Dependency injection and auth gates
    ├── exception_handlers.py # Error mapping
    ├── routers/              # API route handlers
    └── schemas/              # Pydantic request/response schemas
"""

from mindwell.presentation.api.app import create_app

__all__ = ["create_app"]
