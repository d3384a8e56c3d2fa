"""
Route package initialization.
"""
from .listings import router as listings_router
from .ui import router as ui_router

__all__ = ["listings_router", "ui_router"]
