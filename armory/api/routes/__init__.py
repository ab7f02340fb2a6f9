"""API route modules."""

from armory.api.routes.assign import router as assign_router
from armory.api.routes.expend import router as expend_router
from armory.api.routes.health import router as health_router
from armory.api.routes.purchase import router as purchase_router
from armory.api.routes.settings import router as settings_router
from armory.api.routes.transfers import router as transfers_router
from armory.api.routes.views import router as views_router

__all__ = [
    "health_router",
    "settings_router",
    "purchase_router",
    "transfers_router",
    "assign_router",
    "expend_router",
    "views_router",
]
