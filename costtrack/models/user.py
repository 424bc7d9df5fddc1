# costtrack/models/user.py
from typing import Optional

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from costtrack.db.base import Base
from costtrack.db.enums import UserRole
from costtrack.models.mixins.timestamps import TimestampMixin


class User(TimestampMixin, Base):
    """
    Authenticated operator. Role is advisory metadata and gates nothing.
    """

    __tablename__ = "users"

    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="User UUID (session subject id)")

    account :Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Login account, immutable",
    )

    email :Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True, comment="User email address")
    first_name :Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="Given name")
    last_name :Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="Family name")
    profile_image_url :Mapped[Optional[str]] = mapped_column(String(500), nullable=True, comment="Avatar URL")

    role :Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.PM,
        comment="PM / Estimator / Accountant / Executive",
    )

    # accounts provisioned by an upstream identity provider carry no local password
    password_hash :Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="bcrypt hash for local sign-in",
    )

    is_active :Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, comment="Whether the account may sign in")

    @property
    def display_name(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.account

    def __repr__(self) -> str:
        return f"<User id={self.id} account={self.account} role={self.role.value}>"
