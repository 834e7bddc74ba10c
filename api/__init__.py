"""
HTTP API for the Questões AI backend.

Routers:
- pdf_router:   PDF text extraction
- study_router: question generation, essays, summaries
"""

from .pdf_routes import router as pdf_router
from .study_routes import router as study_router

__all__ = ["pdf_router", "study_router"]
