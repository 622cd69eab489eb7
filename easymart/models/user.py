from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, SQLModel
from .base import TimestampMixin, new_id


class UserRole(str, Enum):
    MANAGER = "manager"
    CASHIER = "cashier"
    CUSTOMER = "customer"


class User(TimestampMixin, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    username: str = Field(unique=True, index=True)
    password: str  # compared as-is at login
    role: UserRole = Field(default=UserRole.CASHIER)
    name: Optional[str] = None
    email: Optional[str] = None


class UserRead(SQLModel):
    id: str
    username: str
    role: UserRole
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime


class UserCreate(SQLModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    name: Optional[str] = None
    email: Optional[str] = None


class UserUpdate(SQLModel):
    role: Optional[UserRole] = None
    name: Optional[str] = None
    email: Optional[str] = None


class LoginRequest(SQLModel):
    username: Optional[str] = None
    password: Optional[str] = None
