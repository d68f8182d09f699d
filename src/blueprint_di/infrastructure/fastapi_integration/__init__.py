"""
FastAPI integration module.

Provides helpers for exposing container services to FastAPI endpoints.
"""

from .integration import create_fastapi_dependency, inject

__all__ = [
    "create_fastapi_dependency",
    "inject",
]
