# costtrack/schemas/project_dto.py
from datetime import datetime
from typing import Any, ClassVar, FrozenSet, Optional

from pydantic import Field, model_validator

from costtrack.db.enums import ProjectStatus, ProjectType
from costtrack.schemas.base_dto import Amount, BaseDTO, Money, PatchDTO, RequestDTO, UtcDateTime


def _check_dates(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("endDate must not be before startDate")


class ProjectCreate(RequestDTO):
    name: str = Field(min_length=1, max_length=255)
    project_number: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    budget: Money = Field(ge=0)
    status: ProjectStatus = ProjectStatus.active
    project_type: ProjectType

    # server controlled: taken from the session, whatever the client sends
    created_by: Optional[Any] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _dates_in_order(self):
        _check_dates(self.start_date, self.end_date)
        return self


class ProjectPatch(PatchDTO):
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset(
        {"name", "project_number", "budget", "status", "project_type"}
    )

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    project_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    budget: Optional[Money] = Field(default=None, ge=0)
    status: Optional[ProjectStatus] = None
    project_type: Optional[ProjectType] = None


class ProjectDTO(BaseDTO):
    id: str
    name: str
    project_number: str
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Amount
    status: ProjectStatus
    project_type: ProjectType
    created_by: str
    created_at: datetime
    updated_at: datetime
