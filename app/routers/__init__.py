"""Routers package for API endpoints.

This package contains the FastAPI routers for the CalendAI website scanner.
"""

from app.routers import scanner

__all__ = ["scanner"]
