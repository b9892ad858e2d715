# backend/routes/products.py
import math
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product, ProductFormat, ProductCondition
from schemas.product import ProductOut, ProductsResponse, Pagination, ProductSort

router = APIRouter(prefix="/api/products", tags=["Products"])

# Sort keys exposed to the storefront, id breaks ties so pages are stable
SORTS = {
    "newest": (Product.created_at.desc(), Product.id.desc()),
    "price_asc": (Product.price.asc(), Product.id.asc()),
    "price_desc": (Product.price.desc(), Product.id.asc()),
    "name_asc": (Product.name.asc(), Product.id.asc()),
    "name_desc": (Product.name.desc(), Product.id.asc()),
}


# =========================
# CATALOG LISTING
# =========================
@router.get("", response_model=ProductsResponse)
def list_products(
    search: Optional[str] = Query(None, description="Search by album name or artist"),
    format: Optional[ProductFormat] = Query(None),
    condition: Optional[ProductCondition] = Query(None),
    minPrice: Optional[int] = Query(None, ge=0),
    maxPrice: Optional[int] = Query(None, ge=0),
    sort: ProductSort = Query("newest"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = db.query(Product)

    # 1. Filter
    if search:
        like = f"%{search}%"
        query = query.filter(or_(Product.name.ilike(like), Product.artist.ilike(like)))
    if format:
        query = query.filter(Product.format == format)
    if condition:
        query = query.filter(Product.condition == condition)
    if minPrice is not None:
        query = query.filter(Product.price >= minPrice)
    if maxPrice is not None:
        query = query.filter(Product.price <= maxPrice)

    # 2. Sort
    query = query.order_by(*SORTS[sort])

    # 3. Paginate
    total = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()

    return ProductsResponse(
        products=[ProductOut.model_validate(p) for p in items],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)),
    )


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/slug/{slug}", response_model=ProductOut)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.slug == slug).first()
    if not product:
        raise HTTPException(status_code=404, detail="Producto no encontrado")
    return product


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Producto no encontrado")
    return product
