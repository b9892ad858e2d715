# backend/models/product.py
import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, CheckConstraint
from database import Base
from utils.clock import utc_now


class ProductFormat(str, enum.Enum):
    VINYL_LP = "VINYL_LP"
    VINYL_EP = "VINYL_EP"
    CD_ALBUM = "CD_ALBUM"
    TURNTABLE = "TURNTABLE"
    OTHER = "OTHER"


class ProductCondition(str, enum.Enum):
    SEALED = "SEALED"
    NEAR_MINT = "NEAR_MINT"
    VERY_GOOD = "VERY_GOOD"
    GOOD = "GOOD"
    FAIR = "FAIR"


# Product
# A single catalog entry (record, CD or turntable).
# Prices are whole CLP. Stock is informational only: placing an order
# does not decrement it.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String, unique=True, nullable=False, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    artist = Column(String, nullable=True, index=True)
    description = Column(String, nullable=True)

    price = Column(Integer, CheckConstraint("price >= 0"), nullable=False)
    image = Column(String, nullable=True)
    category = Column(String, nullable=True)
    format = Column(Enum(ProductFormat), nullable=False, default=ProductFormat.VINYL_LP)
    condition = Column(Enum(ProductCondition), nullable=False, default=ProductCondition.NEAR_MINT)

    # Inventory figures, used by the dashboard low-stock counter
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)
    min_stock = Column(Integer, nullable=True)

    release_year = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
