from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialises as camelCase, accepts camelCase or snake_case on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Role(str, Enum):
    user = "user"
    admin = "admin"


class RequestStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    completed = "completed"


# ────────────────────────────── AUTH ──────────────────────────────

class RegisterIn(CamelModel):
    name: str
    phone: str
    password: str


class LoginIn(CamelModel):
    phone: str
    password: str


class UserOut(CamelModel):
    id: int
    name: str
    phone: str
    role: Role


class TokenClaims(CamelModel):
    user_id: int
    phone: str
    role: Role


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    user: UserOut
    token: str


# ────────────────────────────── SERVICES ──────────────────────────────

class ServiceCreate(CamelModel):
    name: str
    description: str
    icon: Optional[str] = None
    color: Optional[str] = None


class ServiceUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class ServiceOut(CamelModel):
    id: int
    name: str
    description: str
    icon: str
    color: str
    is_active: bool
    created_at: datetime


class ServiceResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    service: ServiceOut


class ServiceListResponse(CamelModel):
    success: bool = True
    services: List[ServiceOut]


# ────────────────────────────── REQUESTS ──────────────────────────────

class RequestCreate(CamelModel):
    user_name: str
    user_phone: str
    service_name: str
    service_id: Union[str, int]
    aadhar_number: Optional[str] = Field(None, max_length=12)
    address: Optional[str] = None
    registration_no: Optional[str] = None

    @field_validator("service_id", mode="after")
    @classmethod
    def service_id_as_text(cls, value):
        return str(value)


class StatusUpdate(CamelModel):
    status: str


class RequestOut(CamelModel):
    id: int
    user_name: str
    user_phone: str
    service_name: str
    service_id: str
    aadhar_number: Optional[str] = None
    address: Optional[str] = None
    registration_no: str
    status: RequestStatus
    submitted_at: datetime
    updated_at: datetime


class RequestResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    request: RequestOut


class RequestListResponse(CamelModel):
    success: bool = True
    requests: List[RequestOut]


class MessageResponse(CamelModel):
    success: bool = True
    message: str
