from pydantic import BaseModel
from typing import Optional, List, Literal


class CategorySave(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class SubcategorySave(BaseModel):
    id: Optional[str] = None
    category_id: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None


class SubSubcategorySave(BaseModel):
    id: Optional[str] = None
    subcategory_id: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None


class SubSubcategoryNode(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None


class SubcategoryNode(SubSubcategoryNode):
    sub_subcategories: List[SubSubcategoryNode] = []


class CategoryNode(SubSubcategoryNode):
    icon: Optional[str] = None
    subcategories: List[SubcategoryNode] = []


class CategoryTreeResponse(BaseModel):
    ok: bool = True
    categories: List[CategoryNode]


class NodeRef(BaseModel):
    type: Literal["category", "subcategory", "sub_subcategory", "root"]
    id: Optional[str] = None


class MoveRequest(BaseModel):
    source: NodeRef
    target: NodeRef
    confirm: bool = False


class MoveResponse(BaseModel):
    ok: bool = True
    applied: bool
    case: str
    summary: str
    steps: List[str] = []
