# costtrack/schemas/cost_code_dto.py
from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from pydantic import Field

from costtrack.db.enums import CostCategory
from costtrack.schemas.base_dto import Amount, BaseDTO, PatchDTO, RequestDTO, UnitPrice


class CostCodeCreate(RequestDTO):
    code: str = Field(min_length=1, max_length=20)
    description: str = Field(min_length=1, max_length=255)
    category: CostCategory
    unit_price: Optional[UnitPrice] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = True


class CostCodePatch(PatchDTO):
    '''code and category are fixed once entries may reference them'''
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"description", "is_active"})

    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    unit_price: Optional[UnitPrice] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = None


class CostCodeDTO(BaseDTO):
    id: str
    code: str
    description: str
    category: CostCategory
    unit_price: Optional[Amount] = None
    unit: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
