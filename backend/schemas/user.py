from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from schemas.base import ORMBase

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str = Field(min_length=1)

# Schema for storefront registration requests
class UserCreate(UserBase):
    name: str = Field(min_length=2)
    password: str = Field(min_length=8)
    phone: Optional[str] = None

# Output schema for user profile details
class UserResponse(ORMBase):
    id: int
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
