# costtrack/models/mixins/timestamps.py
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from costtrack.db.base import utcnow


class TimestampMixin:
    """
    created_at / updated_at for every mutable entity.

    Invariants:
    - created_at is written once
    - every ORM flush that updates the row refreshes updated_at
    - bulk UPDATE statements must set updated_at explicitly
    """
    created_at :Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,               # ORM default
        server_default=func.now(),    # DB default
        nullable=False,
        comment="Creation timestamp (UTC)"
    )

    updated_at :Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
        comment="Last update timestamp (UTC)"
    )
