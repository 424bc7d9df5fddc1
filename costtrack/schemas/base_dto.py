# costtrack/schemas/base_dto.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, ClassVar, Dict, FrozenSet

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)
from pydantic.alias_generators import to_camel


def _reject_float(value: Any) -> Any:
    # a JSON number has already been through binary floating point
    if isinstance(value, float):
        raise ValueError("decimal values must be sent as strings, e.g. \"1250.00\"")
    return value


def _format_money(value: Decimal) -> str:
    return f"{value:.2f}"


def _format_quantity(value: Decimal) -> str:
    return f"{value:.3f}"


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Monetary amount as stored: NUMERIC(12, 2)
Money = Annotated[
    Decimal,
    BeforeValidator(_reject_float),
    Field(max_digits=12, decimal_places=2),
    PlainSerializer(_format_money, return_type=str, when_used="json"),
]

# Unit prices / unit costs: NUMERIC(10, 2)
UnitPrice = Annotated[
    Decimal,
    BeforeValidator(_reject_float),
    Field(max_digits=10, decimal_places=2),
    PlainSerializer(_format_money, return_type=str, when_used="json"),
]

# Quantities: NUMERIC(10, 3)
Quantity = Annotated[
    Decimal,
    BeforeValidator(_reject_float),
    Field(max_digits=10, decimal_places=3),
    PlainSerializer(_format_quantity, return_type=str, when_used="json"),
]

# Outbound values: already constrained by their column
Amount = Annotated[
    Decimal,
    PlainSerializer(_format_money, return_type=str, when_used="json"),
]

QuantityValue = Annotated[
    Decimal,
    PlainSerializer(_format_quantity, return_type=str, when_used="json"),
]

UtcDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]


class BaseDTO(BaseModel):
    """
    Outbound representation of an ORM row. camelCase on the wire.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class RequestDTO(BaseModel):
    """
    Inbound request body. Unknown keys are refused rather than dropped.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class PatchDTO(RequestDTO):
    '''
    Partial update. Only fields the client actually sent are applied.

    Subclasses list, in NON_NULLABLE, the fields whose column cannot hold NULL;
    an explicit null for one of them is a validation error, not a reset.
    '''
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_nulls(self):
        for name in self.model_fields_set & self.NON_NULLABLE:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
