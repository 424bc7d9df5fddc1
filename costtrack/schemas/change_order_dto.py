# costtrack/schemas/change_order_dto.py
from datetime import datetime
from typing import Any, ClassVar, FrozenSet, Optional

from pydantic import Field

from costtrack.db.enums import ChangeOrderStatus
from costtrack.schemas.base_dto import Amount, BaseDTO, Money, PatchDTO, RequestDTO


class ChangeOrderCreate(RequestDTO):
    '''
    A new change order is always pending and requested by the caller.
    Workflow fields a client may echo back are accepted and discarded.
    '''
    project_id: str = Field(min_length=1, max_length=36)
    change_order_number: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1)
    amount: Money

    status: Optional[Any] = Field(default=None, exclude=True)
    requested_by: Optional[Any] = Field(default=None, exclude=True)
    approved_by: Optional[Any] = Field(default=None, exclude=True)
    request_date: Optional[Any] = Field(default=None, exclude=True)
    approval_date: Optional[Any] = Field(default=None, exclude=True)


class ChangeOrderPatch(PatchDTO):
    '''
    approvedBy / approvalDate are not settable: approval stamps them.
    '''
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset(
        {"change_order_number", "description", "amount", "status"}
    )

    change_order_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Money] = None
    status: Optional[ChangeOrderStatus] = None


class ChangeOrderDTO(BaseDTO):
    id: str
    project_id: str
    change_order_number: str
    description: str
    amount: Amount
    status: ChangeOrderStatus
    requested_by: str
    approved_by: Optional[str] = None
    request_date: datetime
    approval_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
