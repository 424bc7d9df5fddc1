from typing import List, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from costtrack.db.enums import AuditEntityType, CostCategory
from costtrack.errors import IntegrityViolation, NotFoundError
from costtrack.models.cost_code import CostCode
from costtrack.schemas.cost_code_dto import CostCodeCreate, CostCodePatch
from costtrack.services.audit_log_service import AuditLogService


class CostCodeService:
    """
    Lookup table maintenance. Codes are deactivated, never deleted,
    so historical entries keep a valid reference.
    """

    def __init__(self, db: Session, audit_log_service: AuditLogService):
        self.db = db
        self.audit_log_service = audit_log_service

    def create_cost_code(self, *, payload: CostCodeCreate, operator_id: str) -> CostCode:
        exists = self.db.query(CostCode).filter(CostCode.code == payload.code).first()
        if exists:
            raise IntegrityViolation(f"Cost code '{payload.code}' already exists", field="code")

        cost_code = CostCode(id=str(uuid4()), **payload.model_dump())
        self.db.add(cost_code)
        self.db.flush()

        self.audit_log_service.record_create(
            project_id=None,
            entity_type=AuditEntityType.CostCode,
            entity_id=cost_code.id,
            operator_id=operator_id,
        )
        return cost_code

    def get_cost_code(self, cost_code_id: str) -> Optional[CostCode]:
        return self.db.get(CostCode, cost_code_id)

    def list_cost_codes(self, *, category: Optional[CostCategory] = None) -> List[CostCode]:
        '''active codes only, ordered by code'''
        query = self.db.query(CostCode).filter(CostCode.is_active.is_(True))
        if category is not None:
            query = query.filter(CostCode.category == category)
        return query.order_by(CostCode.code).all()

    def update_cost_code(self, *, cost_code_id: str, patch: CostCodePatch, operator_id: str) -> CostCode:
        cost_code = self.get_cost_code(cost_code_id)
        if not cost_code:
            raise NotFoundError(f"Cost code not found: {cost_code_id}")

        for field, new_value in patch.changes().items():
            old_value = getattr(cost_code, field)
            if old_value == new_value:
                continue
            setattr(cost_code, field, new_value)
            self.audit_log_service.record_update(
                project_id=None,
                entity_type=AuditEntityType.CostCode,
                entity_id=cost_code.id,
                changed_attribute=field,
                before_value=old_value,
                after_value=new_value,
                operator_id=operator_id,
            )

        self.db.flush()
        return cost_code

    def deactivate_cost_code(self, *, cost_code_id: str, operator_id: str) -> CostCode:
        return self.update_cost_code(
            cost_code_id=cost_code_id,
            patch=CostCodePatch(is_active=False),
            operator_id=operator_id,
        )
