# costtrack/schemas/audit_log_dto.py
from datetime import datetime
from typing import Any, Optional

from costtrack.db.enums import AuditAction, AuditEntityType
from costtrack.schemas.base_dto import BaseDTO


class AuditLogDTO(BaseDTO):
    id: str
    project_id: Optional[str] = None
    entity_type: AuditEntityType
    entity_id: str
    action: AuditAction
    changed_attribute: str
    before_value: Optional[Any] = None
    after_value: Optional[Any] = None
    operator_id: str
    timestamp: datetime
