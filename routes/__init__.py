# Routes package __init__.py - re-exports routers for main.py convenience
from .game import router as game_router
from .history import router as history_router
from .stats import router as stats_router

__all__ = ['game_router', 'history_router', 'stats_router']
