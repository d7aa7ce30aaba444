from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class BulkSfxRequest(BaseModel):
    count: int = Field(5, ge=1, le=100)
    soundType: str = "whoosh"
    subcategoryName: Optional[str] = None
    subcategorySlug: Optional[str] = None


class NodeSummary(BaseModel):
    id: str
    slug: str


class BulkSfxResponse(BaseModel):
    ok: bool = True
    message: str
    results: List[Dict[str, Any]]
    category: NodeSummary
    subcategory: NodeSummary
