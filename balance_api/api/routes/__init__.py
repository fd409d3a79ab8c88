"""API routes package."""

from fastapi import APIRouter

from balance_api.api.routes.pending_transactions import router as pending_transactions_router
from balance_api.api.routes.transactions import router as transactions_router
from balance_api.api.routes.websites import router as websites_router

# Create API router with all sub-routers
api_router = APIRouter()

# Register all route modules
api_router.include_router(pending_transactions_router)
api_router.include_router(transactions_router)
api_router.include_router(websites_router)


__all__ = [
    "api_router",
    "pending_transactions_router",
    "transactions_router",
    "websites_router",
]
