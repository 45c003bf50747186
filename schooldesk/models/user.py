"""
User Model
Authenticated dashboard users and the auth context passed to services
"""
from typing import Optional
from pydantic import BaseModel
from enum import Enum


class Role(str, Enum):
    """Dashboard user roles"""
    ADMIN = "admin"
    PRINCIPAL = "principal"
    TEACHER = "teacher"
    PARENT = "parent"


class User(BaseModel):
    """User profile as returned by the school API"""
    id: str
    full_name: str
    role: Role
    phone_number: Optional[str] = None
    email: Optional[str] = None
    preferred_language: Optional[str] = None
    last_login: Optional[str] = None


class AuthSession(BaseModel):
    """Bearer token plus the user it belongs to"""
    token: str
    user: User

    @property
    def role(self) -> Role:
        return self.user.role


class LoginRequest(BaseModel):
    """Login request"""
    phone_number: str
    password: str


class LoginResponse(BaseModel):
    """Login response"""
    token: str
    token_type: str = "bearer"
    user: User
