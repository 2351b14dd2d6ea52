"""API module."""

from .companion import router as companion_router
from .chatbox import router as chatbox_router
from .safety import router as safety_router
from .wellness import router as wellness_router

__all__ = ['companion_router', 'chatbox_router', 'safety_router', 'wellness_router']
