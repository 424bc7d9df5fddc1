from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional
from uuid import uuid4

from sqlalchemy import desc
from sqlalchemy.orm import Session

from costtrack.db.base import utcnow
from costtrack.db.enums import AuditAction, AuditEntityType
from costtrack.models.audit_log import AuditLog


class AuditLogService:
    """
    Centralized service for recording all auditable actions.
    This service is the ONLY place where AuditLog records can be created.
    Records join the caller's transaction; they commit or roll back with it.
    """

    def __init__(self, db: Session):
        self.db = db

    def serialize_audit_value(self, value) -> Any:
        if value is None:
            return None
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (int, float, str, bool)):
            return value
        return str(value)

    def _record(
        self,
        *,
        project_id: Optional[str],
        entity_type: AuditEntityType,
        entity_id: str,
        action: AuditAction,
        operator_id: str,
        changed_attribute: str = "__all__",
        before_value: Any = None,
        after_value: Any = None,
    ) -> AuditLog:
        log = AuditLog(
            id=str(uuid4()),
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            changed_attribute=changed_attribute,
            before_value=self.serialize_audit_value(before_value),
            after_value=self.serialize_audit_value(after_value),
            operator_id=operator_id,
            timestamp=utcnow(),
        )
        self.db.add(log)
        return log

    def record_create(
        self,
        *,
        project_id: Optional[str],
        entity_type: AuditEntityType,
        entity_id: str,
        operator_id: str,
    ) -> None:
        '''
        Record the creation of an entity.

        :param project_id: owning project, if any
        :param entity_type: audited entity type
        :param entity_id: id of the created entity
        :param operator_id: acting user id
        '''
        self._record(
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=AuditAction.create,
            operator_id=operator_id,
        )

    def record_update(
        self,
        *,
        project_id: Optional[str],
        entity_type: AuditEntityType,
        entity_id: str,
        changed_attribute: str,
        before_value: Any,
        after_value: Any,
        operator_id: str,
    ) -> None:
        '''
        Record one changed attribute. Callers emit one record per attribute.

        :param changed_attribute: column name that changed
        :param before_value: value before the change
        :param after_value: value after the change
        '''
        self._record(
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=AuditAction.update,
            operator_id=operator_id,
            changed_attribute=changed_attribute,
            before_value=before_value,
            after_value=after_value,
        )

    def record_delete(
        self,
        *,
        project_id: Optional[str],
        entity_type: AuditEntityType,
        entity_id: str,
        operator_id: str,
    ) -> None:
        self._record(
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=AuditAction.delete,
            operator_id=operator_id,
        )

    def record_transition(
        self,
        *,
        project_id: str,
        entity_type: AuditEntityType,
        entity_id: str,
        action: AuditAction,
        before_value: Any,
        after_value: Any,
        operator_id: str,
    ) -> None:
        '''
        Record a workflow transition (approve / reject).
        This is also where the rejecting user is kept; the change order row has no field for it.
        '''
        self._record(
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            operator_id=operator_id,
            changed_attribute="status",
            before_value=before_value,
            after_value=after_value,
        )

    def record_session(self, *, user_id: str, action: AuditAction) -> None:
        '''login / logout'''
        self._record(
            project_id=None,
            entity_type=AuditEntityType.User,
            entity_id=user_id,
            action=action,
            operator_id=user_id,
        )

    def list_logs(
        self,
        *,
        project_id: Optional[str] = None,
        entity_type: Optional[AuditEntityType] = None,
        entity_id: Optional[str] = None,
        limit: int = 200,
    ) -> List[AuditLog]:
        query = self.db.query(AuditLog)
        if project_id:
            query = query.filter(AuditLog.project_id == project_id)
        if entity_type:
            query = query.filter(AuditLog.entity_type == entity_type)
        if entity_id:
            query = query.filter(AuditLog.entity_id == entity_id)
        return query.order_by(desc(AuditLog.timestamp)).limit(limit).all()
