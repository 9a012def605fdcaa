from fastapi import APIRouter

from lounge.api.customers import router as customers_router
from lounge.api.dashboard import router as dashboard_router
from lounge.api.verification import router as verification_router
from lounge.core.config import settings

api_router = APIRouter(prefix=settings.API_V1_PREFIX)
api_router.include_router(customers_router)
api_router.include_router(dashboard_router)
api_router.include_router(verification_router)
