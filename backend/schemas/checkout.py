# backend/schemas/checkout.py
# Forms of the storefront checkout steps. Stricter than the server-side
# OrderCreate schema: they gate step advancement.
from typing import Optional
from pydantic import EmailStr, Field

from models.order import PaymentMethod
from schemas.base import ORMBase


class ContactForm(ORMBase):
    email: EmailStr
    first_name: str = Field(min_length=2)
    last_name: str = Field(min_length=2)
    phone: str = Field(min_length=8)
    create_account: bool = False


class ShippingForm(ORMBase):
    street: str = Field(min_length=3)
    number: str = Field(min_length=1)
    apartment: Optional[str] = None
    region: str = Field(min_length=1)
    city: str = Field(min_length=1)
    comuna: str = Field(min_length=1)
    zip_code: Optional[str] = None


class PaymentForm(ORMBase):
    method: PaymentMethod
