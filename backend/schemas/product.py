# backend/schemas/product.py
from datetime import datetime
from typing import Optional, List, Literal
from models.product import ProductFormat, ProductCondition
from schemas.base import ORMBase

ProductSort = Literal["newest", "price_asc", "price_desc", "name_asc", "name_desc"]


# Full product representation as shown in catalog and product pages
class ProductOut(ORMBase):
    id: int
    sku: str
    slug: str
    name: str
    artist: Optional[str] = None
    description: Optional[str] = None
    price: int
    image: Optional[str] = None
    category: Optional[str] = None
    format: ProductFormat
    condition: ProductCondition
    stock: int
    release_year: Optional[int] = None
    created_at: datetime


class Pagination(ORMBase):
    page: int
    limit: int
    total: int
    total_pages: int


# Paginated response for catalog listings
class ProductsResponse(ORMBase):
    products: List[ProductOut]
    pagination: Pagination
