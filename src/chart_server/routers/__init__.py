"""
Router package for the Chart Server.

Routers:
- series.py: Annotated bar/brick series and summary
"""

from .series import router as series_router

__all__ = [
    "series_router",
]
