# costtrack/schemas/cost_entry_dto.py
from datetime import datetime
from typing import Any, ClassVar, FrozenSet, Optional

from pydantic import Field

from costtrack.schemas.base_dto import (
    Amount,
    BaseDTO,
    Money,
    PatchDTO,
    Quantity,
    QuantityValue,
    RequestDTO,
    UnitPrice,
    UtcDateTime,
)


class CostEntryCreate(RequestDTO):
    project_id: str = Field(min_length=1, max_length=36)
    cost_code_id: str = Field(min_length=1, max_length=36)
    description: str = Field(min_length=1)
    amount: Money
    quantity: Optional[Quantity] = None
    unit_cost: Optional[UnitPrice] = None
    entry_date: UtcDateTime
    attachment_path: Optional[str] = Field(default=None, max_length=500)

    # server controlled: taken from the session, whatever the client sends
    entered_by: Optional[Any] = Field(default=None, exclude=True)


class CostEntryPatch(PatchDTO):
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset(
        {"project_id", "cost_code_id", "description", "amount", "entry_date"}
    )

    project_id: Optional[str] = Field(default=None, min_length=1, max_length=36)
    cost_code_id: Optional[str] = Field(default=None, min_length=1, max_length=36)
    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Money] = None
    quantity: Optional[Quantity] = None
    unit_cost: Optional[UnitPrice] = None
    entry_date: Optional[UtcDateTime] = None
    attachment_path: Optional[str] = Field(default=None, max_length=500)


class CostEntryDTO(BaseDTO):
    id: str
    project_id: str
    cost_code_id: str
    description: str
    amount: Amount
    quantity: Optional[QuantityValue] = None
    unit_cost: Optional[Amount] = None
    entry_date: datetime
    attachment_path: Optional[str] = None
    entered_by: str
    created_at: datetime
    updated_at: datetime
