"""Admin statistics endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.stats import StatsSummaryResponse
from services.auth import require_admin
from services.stats_service import StatsService


router = APIRouter()


@router.get("/stats/summary", response_model=StatsSummaryResponse)
def get_stats_summary(
    limit: int = Query(50, ge=1, le=500),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """User/check-in totals and check-ins per location."""
    return StatsService(db).get_summary(limit=limit)
