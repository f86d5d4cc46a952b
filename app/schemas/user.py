from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
from datetime import datetime

from app.core.constants import RoleEnum

class UserBase(BaseModel):
    """Base user schema with common fields."""
    full_name: str
    email: EmailStr
    role: RoleEnum = RoleEnum.STUDENT

class User(UserBase):
    """Main user schema for reading user data."""
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class UserContext(BaseModel):
    """The authenticated caller and the role the request is evaluated under."""
    user: User
    role: RoleEnum

    model_config = ConfigDict(from_attributes=True)
