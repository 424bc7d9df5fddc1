# costtrack/models/cost_code.py
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Enum, Numeric, String, true
from sqlalchemy.orm import Mapped, mapped_column

from costtrack.db.base import Base
from costtrack.db.enums import CostCategory
from costtrack.models.mixins.timestamps import TimestampMixin


class CostCode(TimestampMixin, Base):
    """
    Reference table used to classify cost entries.
    Never deleted; deactivated through is_active.
    """

    __tablename__ = "cost_codes"

    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="Cost code UUID")
    code :Mapped[str] = mapped_column(String(20), unique=True, nullable=False, comment="Cost code, e.g. 26-0519")
    description :Mapped[str] = mapped_column(String(255), nullable=False, comment="What the code covers")

    category :Mapped[CostCategory] = mapped_column(
        Enum(CostCategory, name="cost_category"),
        nullable=False,
        comment="labor / materials / equipment / subcontractors",
    )

    unit_price :Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True, comment="Reference unit price")
    unit :Mapped[Optional[str]] = mapped_column(String(50), nullable=True, comment="hours, feet, each, ...")

    is_active :Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
        comment="Inactive codes are hidden from lists and refused for new entries",
    )

    def __repr__(self) -> str:
        return f"<CostCode code={self.code} category={self.category.value}>"
