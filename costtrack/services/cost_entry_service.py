from typing import List, Optional
from uuid import uuid4

from sqlalchemy import desc
from sqlalchemy.orm import Session

from costtrack.db.enums import AuditEntityType
from costtrack.errors import InputError, IntegrityViolation, NotFoundError
from costtrack.models.cost_code import CostCode
from costtrack.models.cost_entry import CostEntry
from costtrack.models.project import Project
from costtrack.schemas.cost_entry_dto import CostEntryCreate, CostEntryPatch
from costtrack.services.audit_log_service import AuditLogService


class CostEntryService:
    """
    Record, correct and remove cost entries.

    Rules:
    - entered_by is the acting user
    - referenced project and cost code must exist
    - a cost code newly attached to an entry must be active
    - amount is stored as given; quantity * unit_cost is never reconciled against it
    """

    def __init__(self, db: Session, audit_log_service: AuditLogService):
        self.db = db
        self.audit_log_service = audit_log_service

    def _assert_project_exists(self, project_id: str) -> None:
        if self.db.get(Project, project_id) is None:
            raise IntegrityViolation(f"Project does not exist: {project_id}", field="projectId")

    def _load_usable_cost_code(self, cost_code_id: str) -> CostCode:
        cost_code = self.db.get(CostCode, cost_code_id)
        if cost_code is None:
            raise IntegrityViolation(f"Cost code does not exist: {cost_code_id}", field="costCodeId")
        if not cost_code.is_active:
            raise InputError(f"Cost code {cost_code.code} is inactive", field="costCodeId")
        return cost_code

    def create_cost_entry(self, *, payload: CostEntryCreate, operator_id: str) -> CostEntry:
        '''
        :param payload: validated request body
        :param operator_id: acting user, stored as entered_by
        '''
        self._assert_project_exists(payload.project_id)
        self._load_usable_cost_code(payload.cost_code_id)

        entry = CostEntry(
            id=str(uuid4()),
            entered_by=operator_id,
            **payload.model_dump(),
        )
        self.db.add(entry)
        self.db.flush()

        self.audit_log_service.record_create(
            project_id=entry.project_id,
            entity_type=AuditEntityType.CostEntry,
            entity_id=entry.id,
            operator_id=operator_id,
        )
        return entry

    def get_cost_entry(self, entry_id: str) -> Optional[CostEntry]:
        return self.db.get(CostEntry, entry_id)

    def list_cost_entries(self, *, project_id: Optional[str] = None) -> List[CostEntry]:
        '''newest entry_date first; the client's "recent entries" views rely on this order'''
        query = self.db.query(CostEntry)
        if project_id:
            query = query.filter(CostEntry.project_id == project_id)
        return query.order_by(desc(CostEntry.entry_date), desc(CostEntry.created_at)).all()

    def update_cost_entry(self, *, entry_id: str, patch: CostEntryPatch, operator_id: str) -> CostEntry:
        entry = self.get_cost_entry(entry_id)
        if not entry:
            raise NotFoundError(f"Cost entry not found: {entry_id}")

        changes = patch.changes()
        if "project_id" in changes and changes["project_id"] != entry.project_id:
            self._assert_project_exists(changes["project_id"])
        if "cost_code_id" in changes and changes["cost_code_id"] != entry.cost_code_id:
            self._load_usable_cost_code(changes["cost_code_id"])

        for field, new_value in changes.items():
            old_value = getattr(entry, field)
            if old_value == new_value:
                continue
            setattr(entry, field, new_value)
            self.audit_log_service.record_update(
                project_id=entry.project_id,
                entity_type=AuditEntityType.CostEntry,
                entity_id=entry.id,
                changed_attribute=field,
                before_value=old_value,
                after_value=new_value,
                operator_id=operator_id,
            )

        self.db.flush()
        return entry

    def delete_cost_entry(self, *, entry_id: str, operator_id: str) -> None:
        entry = self.get_cost_entry(entry_id)
        if not entry:
            raise NotFoundError(f"Cost entry not found: {entry_id}")

        project_id = entry.project_id
        self.db.delete(entry)
        self.db.flush()

        self.audit_log_service.record_delete(
            project_id=project_id,
            entity_type=AuditEntityType.CostEntry,
            entity_id=entry_id,
            operator_id=operator_id,
        )
