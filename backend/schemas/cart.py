# backend/schemas/cart.py
from typing import Optional
from pydantic import Field

from schemas.base import ORMBase


# A cart line as held by the storefront cart store
class CartItem(ORMBase):
    id: str = Field(min_length=1)
    name: str
    price: int = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    image: Optional[str] = None
    artist: Optional[str] = None
    category: Optional[str] = None

    @property
    def line_total(self) -> int:
        return self.price * self.quantity
