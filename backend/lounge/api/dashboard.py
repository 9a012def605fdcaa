"""Dashboard endpoints."""

from fastapi import APIRouter, Depends

from lounge.api.deps import get_repository
from lounge.core.config import settings
from lounge.schemas.customer import CustomerStats
from lounge.services.customers import CustomerRepository
from lounge.services.stats import compute_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=CustomerStats)
async def get_stats(repo: CustomerRepository = Depends(get_repository)):
    """Member totals per tier and memberships expiring within the window."""
    return await compute_stats(repo, window_days=settings.EXPIRING_SOON_DAYS)
