"""
Routers package for FastAPI endpoints.

Organized by domain:
- extract: PDF product table extraction
"""

from . import extract

__all__ = ["extract"]
