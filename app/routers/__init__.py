"""
API routers package
"""

from app.routers.import_export import router as import_export_router
from app.routers.meta import router as meta_router
from app.routers.entities import (
    participants_router,
    matching_nights_router,
    matchboxes_router,
    penalties_router,
    broadcast_notes_router,
    probability_cache_router,
)
