# costtrack/schemas/user_dto.py
from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from pydantic import Field

from costtrack.db.enums import UserRole
from costtrack.schemas.base_dto import BaseDTO, PatchDTO, RequestDTO


class LoginRequest(RequestDTO):
    account: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class UserCreate(RequestDTO):
    account: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=8)
    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: UserRole = UserRole.PM


class UserPatch(PatchDTO):
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"role", "is_active"})

    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    profile_image_url: Optional[str] = Field(default=None, max_length=500)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserDTO(BaseDTO):
    id: str
    account: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    display_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
