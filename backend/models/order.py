# backend/models/order.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from database import Base
from utils.clock import utc_now


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Statuses that imply the (simulated) payment went through
PAID_STATUSES = frozenset({
    OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED,
})

# Statuses counted as "pending" on the admin dashboard
PENDING_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


class PaymentMethod(str, enum.Enum):
    WEBPAY = "webpay"
    MERCADOPAGO = "mercadopago"
    FLOW = "flow"
    TRANSFER = "transfer"


# Shipping address, owned one-to-one by an order
class Address(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    street = Column(String, nullable=False)
    number = Column(String, nullable=False)
    apartment = Column(String, nullable=True)
    region = Column(String, nullable=False)
    city = Column(String, nullable=False)
    comuna = Column(String, nullable=False)
    zip_code = Column(String, nullable=True)

    order = relationship("Order", back_populates="address", uselist=False)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False, index=True)

    # Customer contact as entered at checkout
    customer_name = Column(String, nullable=False, index=True)
    customer_email = Column(String, nullable=False, index=True)
    customer_phone = Column(String, nullable=False)

    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)
    payment_method = Column(Enum(PaymentMethod), nullable=False)

    # Amounts in CLP. total = subtotal + shipping; tax is informational.
    subtotal = Column(Integer, nullable=False)
    shipping = Column(Integer, nullable=False)
    tax = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)

    address_id = Column(Integer, ForeignKey("addresses.id"), nullable=False)

    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    paid_at = Column(DateTime, nullable=True, index=True)

    address = relationship("Address", back_populates="order")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


# Snapshot of a purchased product. product_id is deliberately not a foreign key.
class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String, nullable=False, index=True)
    product_name = Column(String, nullable=False)
    artist = Column(String, nullable=True)
    category = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)
    image_url = Column(String, nullable=True)

    order = relationship("Order", back_populates="items")


# Per-day counter backing ORD-YYYYMMDD-NNNNN numbers
class OrderSequence(Base):
    __tablename__ = "order_sequences"

    day = Column(String(8), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
