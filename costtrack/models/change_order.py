# costtrack/models/change_order.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from costtrack.db.base import Base, utcnow
from costtrack.db.enums import ChangeOrderStatus
from costtrack.models.mixins.timestamps import TimestampMixin


class ChangeOrder(TimestampMixin, Base):
    """
    Requested budget / scope modification.

    Invariants:
    - starts pending; approved and rejected are terminal
    - approved_by and approval_date are written together, only when approved
    """

    __tablename__ = "change_orders"

    # =========
    # Identity & ownership
    # =========
    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="Change order UUID")

    project_id :Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning project",
    )
    change_order_number :Mapped[str] = mapped_column(String(50), nullable=False, comment="Change order number, e.g. CO-004")

    # =========
    # Editable while pending
    # =========
    description :Mapped[str] = mapped_column(Text, nullable=False, comment="Requested change")
    amount :Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="Cost impact")

    # =========
    # Workflow (system maintained)
    # =========
    status :Mapped[ChangeOrderStatus] = mapped_column(
        Enum(ChangeOrderStatus, name="change_order_status"),
        nullable=False,
        default=ChangeOrderStatus.pending,
        comment="pending / approved / rejected",
    )
    requested_by :Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, comment="Requesting user")
    approved_by :Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("users.id"), nullable=True, comment="Approving user")
    request_date :Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, comment="When the change was requested")
    approval_date :Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="When the change was approved")

    def __repr__(self) -> str:
        return (
            f"<ChangeOrder id={self.id} "
            f"number={self.change_order_number} "
            f"status={self.status.value}>"
        )
