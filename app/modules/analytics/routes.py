from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.analytics.schemas import AnalyticsResponse, StatsResponse, StatsData
from app.modules.analytics.service import AnalyticsService
from app.core.dependencies import require_admin
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/admin", tags=["analytics"])


def get_analytics_service(supabase: Client = Depends(get_supabase)) -> AnalyticsService:
    return AnalyticsService(supabase)


@router.get("/analytics", response_model=AnalyticsResponse)
async def analytics(
    plan: Optional[str] = None,
    status: Optional[str] = None,
    autopay: Optional[str] = None,
    limit: int = Query(1000, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    user_data: Dict = Depends(require_admin),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Subscriptions, revenue, orders and downloads for the analytics panel"""
    return AnalyticsResponse(**service.get_analytics(plan=plan, status=status, autopay=autopay, limit=limit, offset=offset))


@router.get("/stats", response_model=StatsResponse)
async def stats(
    user_data: Dict = Depends(require_admin),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return StatsResponse(data=StatsData(**service.get_stats()))
