from fastapi import APIRouter

from marketplace.api.routers import bundles, subscriptions

api_router = APIRouter()

api_router.include_router(bundles.router)
api_router.include_router(subscriptions.router)
