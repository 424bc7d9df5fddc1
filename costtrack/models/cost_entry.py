# costtrack/models/cost_entry.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from costtrack.db.base import Base
from costtrack.models.mixins.timestamps import TimestampMixin


class CostEntry(TimestampMixin, Base):
    """
    One recorded expense against a project.

    Invariants:
    - belongs to exactly one project and one cost code
    - amount is authoritative; quantity * unit_cost is informational only
    """

    __tablename__ = "cost_entries"

    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="Cost entry UUID")

    project_id :Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning project",
    )
    cost_code_id :Mapped[str] = mapped_column(
        String(36),
        ForeignKey("cost_codes.id"),
        nullable=False,
        comment="Classification",
    )

    description :Mapped[str] = mapped_column(Text, nullable=False, comment="What was spent")
    amount :Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="Authoritative amount")
    quantity :Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True, comment="Informational quantity")
    unit_cost :Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True, comment="Informational unit cost")

    entry_date :Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True, comment="Date the cost was incurred")
    attachment_path :Mapped[Optional[str]] = mapped_column(String(500), nullable=True, comment="Receipt / invoice object path")

    entered_by :Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        comment="User who recorded the entry",
    )

    def __repr__(self) -> str:
        return (
            f"<CostEntry id={self.id} "
            f"project={self.project_id} "
            f"amount={self.amount}>"
        )
