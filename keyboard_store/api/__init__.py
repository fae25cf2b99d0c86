"""
HTTP surface of the keyboard store (FastAPI).
"""

from .app import create_app, status_for_error

__all__ = [
    "create_app",
    "status_for_error",
]
