from pydantic import BaseModel
from typing import Optional, List, Any, Dict


class BillingDetails(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    company: Optional[str] = None


class OrderProduct(BaseModel):
    slug: Optional[str] = None
    name: Optional[str] = None
    price: Optional[Any] = None
    img: Optional[str] = None


class OrderCreate(BaseModel):
    amount: Optional[float] = None
    product: Optional[OrderProduct] = None
    billing: Optional[BillingDetails] = None


class CartItem(BaseModel):
    slug: str
    name: Optional[str] = None
    price: Optional[float] = 0
    quantity: Optional[int] = 1
    img: Optional[str] = None


class PaymentVerify(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    billing: Optional[BillingDetails] = None
    cartItems: Optional[List[CartItem]] = None


class OrderCreateResponse(BaseModel):
    ok: bool = True
    key: str
    order: Dict[str, Any]


class VerifiedItem(BaseModel):
    item_id: str
    item_name: Optional[str] = None
    price: float
    quantity: int = 1


class PaymentVerifyResponse(BaseModel):
    ok: bool = True
    order_id: str
    total: float
    items: List[VerifiedItem]


class SubscriptionCreate(BaseModel):
    plan: Optional[str] = None
    billing: Optional[BillingDetails] = None


class SubscriptionCreateResponse(BaseModel):
    ok: bool = True
    subscription: Dict[str, Any]


class WebhookResponse(BaseModel):
    status: str = "ok"
    message: Optional[str] = None
