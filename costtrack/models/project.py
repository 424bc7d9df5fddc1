# costtrack/models/project.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from costtrack.db.base import Base
from costtrack.db.enums import ProjectStatus, ProjectType
from costtrack.models.mixins.timestamps import TimestampMixin


class Project(TimestampMixin, Base):
    """
    Aggregation root for CostEntry and ChangeOrder.
    Both hold a foreign key here; deleting a project removes them.
    """
    __tablename__ = "projects"

    # =========
    # Identity
    # =========
    id :Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment='Project UUID')
    project_number :Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        comment='Business project number')
    created_by :Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        comment='User who created the project')

    # =========
    # Editable
    # =========
    name :Mapped[str] = mapped_column(String(255), nullable=False, comment="Project name")
    description :Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="Free text description")
    start_date :Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="Planned start")
    end_date :Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="Planned end")

    budget :Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Approved budget")

    status :Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus, name="project_status"),
        nullable=False,
        default=ProjectStatus.active,
        comment="active / completed / archived",
    )
    project_type :Mapped[ProjectType] = mapped_column(
        Enum(ProjectType, name="project_type"),
        nullable=False,
        comment="commercial / residential / industrial",
    )

    def __repr__(self) -> str:
        return f"<Project id={self.id} number={self.project_number} name={self.name}>"
