from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class AnalyticsResponse(BaseModel):
    ok: bool = True
    totals: Dict[str, Any]
    orders: List[Dict[str, Any]]
    order_items: List[Dict[str, Any]]
    subscriptions: List[Dict[str, Any]]
    downloads: List[Dict[str, Any]]
    top_templates: List[Dict[str, Any]]
    pagination: Pagination


class StatsData(BaseModel):
    templates: int
    orders: int
    revenue: float
    totalSubscriptionRevenue: float
    vendorPoolAmount: float
    celiteAmount: float


class StatsResponse(BaseModel):
    ok: bool = True
    data: StatsData
