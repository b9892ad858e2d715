# backend/schemas/order.py
from datetime import datetime
from typing import List, Optional
from pydantic import EmailStr, Field

from models.order import OrderStatus, PaymentMethod
from schemas.base import ORMBase


# ---- Order submission (POST /api/orders) ----

class CustomerIn(ORMBase):
    email: EmailStr
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    create_account: Optional[bool] = None


class ShippingIn(ORMBase):
    street: str = Field(min_length=1)
    number: str = Field(min_length=1)
    apartment: Optional[str] = None
    region: str = Field(min_length=1)
    city: str = Field(min_length=1)
    comuna: str = Field(min_length=1)
    zip_code: Optional[str] = None


class PaymentIn(ORMBase):
    method: PaymentMethod


class OrderItemIn(ORMBase):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price: int = Field(ge=0)
    quantity: int = Field(ge=1)
    image: Optional[str] = None
    artist: Optional[str] = None
    category: Optional[str] = None


# Draft order assembled by the checkout workflow.
# total and shippingCost are informational, the server recomputes both.
class OrderCreate(ORMBase):
    customer: CustomerIn
    shipping: ShippingIn
    payment: PaymentIn
    items: List[OrderItemIn] = Field(min_length=1)
    total: int = Field(ge=0)
    subtotal: Optional[int] = Field(default=None, ge=0)
    shipping_cost: Optional[int] = Field(default=None, ge=0)


class OrderCreated(ORMBase):
    success: bool = True
    message: str
    order_id: str
    order_number: str


# ---- Order detail ----

class AddressOut(ORMBase):
    street: str
    number: str
    apartment: Optional[str] = None
    region: str
    city: str
    comuna: str
    zip_code: Optional[str] = None


class OrderItemOut(ORMBase):
    id: int
    product_id: str
    product_name: str
    artist: Optional[str] = None
    category: Optional[str] = None
    quantity: int
    price: int
    image_url: Optional[str] = None


class OrderDetail(ORMBase):
    id: int
    order_number: str
    status: OrderStatus
    customer_name: str
    customer_email: str
    customer_phone: str
    subtotal: int
    shipping: int
    tax: int
    total: int
    payment_method: PaymentMethod
    created_at: datetime
    updated_at: datetime
    paid_at: Optional[datetime] = None
    items: List[OrderItemOut]
    address: AddressOut


class OrderDetailResponse(ORMBase):
    success: bool = True
    order: OrderDetail


# ---- Admin ----

# Row of the back-office order table
class AdminOrderRow(ORMBase):
    id: int
    order_number: str
    customer_name: str
    customer_email: str
    total: int
    status: OrderStatus
    created_at: datetime
    item_count: int


class AdminOrdersResponse(ORMBase):
    success: bool = True
    orders: List[AdminOrderRow]


# Schema for updating order status
class OrderStatusPatch(ORMBase):
    status: OrderStatus


class OrderUpdated(ORMBase):
    success: bool = True
    message: str
    order: OrderDetail
