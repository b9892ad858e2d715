# backend/models/users.py
from sqlalchemy import Column, Integer, String, DateTime
from database import Base
from utils.clock import utc_now

# Roles allowed into the back-office
ADMIN_ROLES = frozenset({"ADMIN", "SUPER_ADMIN", "EMPLOYEE"})
CUSTOMER_ROLE = "user"

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=CUSTOMER_ROLE)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)
