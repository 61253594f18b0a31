"""
ROUTERS - FastAPI Router Modules

Usage:
    from routers import grading_router

    app.include_router(grading_router)
"""

from .grading import router as grading_router

__all__ = [
    'grading_router',
]
