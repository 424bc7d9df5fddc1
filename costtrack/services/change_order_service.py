from typing import List, Optional
from uuid import uuid4

from sqlalchemy import delete, desc, select, update
from sqlalchemy.orm import Session

from costtrack.db.base import utcnow
from costtrack.db.enums import AuditAction, AuditEntityType, ChangeOrderStatus
from costtrack.errors import IntegrityViolation, NotFoundError, StateConflictError
from costtrack.logger import get_logger
from costtrack.models.change_order import ChangeOrder
from costtrack.models.project import Project
from costtrack.schemas.change_order_dto import ChangeOrderCreate, ChangeOrderPatch
from costtrack.services.audit_log_service import AuditLogService

logger = get_logger(__name__)


class ChangeOrderService:
    """
    Change order lifecycle.

        pending ──approve──> approved   (terminal)
           └─────reject───> rejected   (terminal)

    - creation always yields pending, requested by the acting user
    - approving stamps approved_by and approval_date; rejecting stamps nothing
    - a terminal change order accepts no further change of any kind
    - every write (edit, decision, withdrawal) re-checks status = pending in its own statement
    - the requester may approve their own change order; no separation of duties is enforced
    """

    def __init__(self, db: Session, audit_log_service: AuditLogService):
        self.db = db
        self.audit_log_service = audit_log_service

    def create_change_order(self, *, payload: ChangeOrderCreate, operator_id: str) -> ChangeOrder:
        '''
        :param payload: validated request body; workflow fields in it are ignored
        :param operator_id: acting user, stored as requested_by
        '''
        if self.db.get(Project, payload.project_id) is None:
            raise IntegrityViolation(f"Project does not exist: {payload.project_id}", field="projectId")

        change_order = ChangeOrder(
            id=str(uuid4()),
            status=ChangeOrderStatus.pending,
            requested_by=operator_id,
            approved_by=None,
            request_date=utcnow(),
            approval_date=None,
            **payload.model_dump(),
        )
        self.db.add(change_order)
        self.db.flush()

        self.audit_log_service.record_create(
            project_id=change_order.project_id,
            entity_type=AuditEntityType.ChangeOrder,
            entity_id=change_order.id,
            operator_id=operator_id,
        )
        return change_order

    def get_change_order(self, change_order_id: str) -> Optional[ChangeOrder]:
        return self.db.get(ChangeOrder, change_order_id)

    def list_change_orders(self, *, project_id: Optional[str] = None) -> List[ChangeOrder]:
        '''newest request_date first'''
        query = self.db.query(ChangeOrder)
        if project_id:
            query = query.filter(ChangeOrder.project_id == project_id)
        return query.order_by(desc(ChangeOrder.request_date), desc(ChangeOrder.created_at)).all()

    def update_change_order(
        self,
        *,
        change_order_id: str,
        patch: ChangeOrderPatch,
        operator_id: str,
    ) -> ChangeOrder:
        '''
        Edit a pending change order and/or move it to a terminal status.
        Edits are written only while the row is still pending.

        :raises NotFoundError: change order does not exist
        :raises StateConflictError: change order is already approved or rejected
        '''
        change_order = self._load_pending(change_order_id)

        changes = patch.changes()
        target_status = changes.pop("status", None)

        edits = {
            field: new_value
            for field, new_value in changes.items()
            if getattr(change_order, field) != new_value
        }
        if edits:
            before = {field: getattr(change_order, field) for field in edits}
            result = self.db.execute(
                update(ChangeOrder)
                .where(
                    ChangeOrder.id == change_order_id,
                    ChangeOrder.status == ChangeOrderStatus.pending,
                )
                .values(updated_at=utcnow(), **edits)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self._raise_not_pending(change_order_id)
            self.db.refresh(change_order)

            for field, new_value in edits.items():
                self.audit_log_service.record_update(
                    project_id=change_order.project_id,
                    entity_type=AuditEntityType.ChangeOrder,
                    entity_id=change_order.id,
                    changed_attribute=field,
                    before_value=before[field],
                    after_value=new_value,
                    operator_id=operator_id,
                )

        if target_status is ChangeOrderStatus.approved:
            return self.approve_change_order(change_order_id=change_order_id, operator_id=operator_id)
        if target_status is ChangeOrderStatus.rejected:
            return self.reject_change_order(change_order_id=change_order_id, operator_id=operator_id)
        return change_order

    def approve_change_order(self, *, change_order_id: str, operator_id: str) -> ChangeOrder:
        return self._transition(
            change_order_id=change_order_id,
            target=ChangeOrderStatus.approved,
            operator_id=operator_id,
        )

    def reject_change_order(self, *, change_order_id: str, operator_id: str) -> ChangeOrder:
        return self._transition(
            change_order_id=change_order_id,
            target=ChangeOrderStatus.rejected,
            operator_id=operator_id,
        )

    def delete_change_order(self, *, change_order_id: str, operator_id: str) -> None:
        '''Only pending change orders can be withdrawn; decided ones are history.'''
        change_order = self._load_pending(change_order_id)
        project_id = change_order.project_id

        result = self.db.execute(
            delete(ChangeOrder)
            .where(
                ChangeOrder.id == change_order_id,
                ChangeOrder.status == ChangeOrderStatus.pending,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self._raise_not_pending(change_order_id)
        self.db.expunge(change_order)

        self.audit_log_service.record_delete(
            project_id=project_id,
            entity_type=AuditEntityType.ChangeOrder,
            entity_id=change_order_id,
            operator_id=operator_id,
        )

    def _load_pending(self, change_order_id: str) -> ChangeOrder:
        change_order = self.get_change_order(change_order_id)
        if not change_order:
            raise NotFoundError(f"Change order not found: {change_order_id}")
        if change_order.status.is_terminal:
            raise StateConflictError(
                f"Change order {change_order.change_order_number} is already {change_order.status.value}",
                field="status",
            )
        return change_order

    def _raise_not_pending(self, change_order_id: str) -> None:
        '''A guarded write matched no row: report what the row turned into.'''
        current = self.db.execute(
            select(ChangeOrder.change_order_number, ChangeOrder.status)
            .where(ChangeOrder.id == change_order_id)
        ).first()
        if current is None:
            raise NotFoundError(f"Change order not found: {change_order_id}")
        raise StateConflictError(
            f"Change order {current.change_order_number} is already {current.status.value}",
            field="status",
        )

    def _transition(
        self,
        *,
        change_order_id: str,
        target: ChangeOrderStatus,
        operator_id: str,
    ) -> ChangeOrder:
        '''
        Compare-and-set on status = pending, so two concurrent decisions cannot both win.
        '''
        if not target.is_terminal:
            raise ValueError(f"Not a terminal status: {target.value}")

        now = utcnow()
        values = {"status": target, "updated_at": now}
        if target is ChangeOrderStatus.approved:
            values["approved_by"] = operator_id
            values["approval_date"] = now

        result = self.db.execute(
            update(ChangeOrder)
            .where(
                ChangeOrder.id == change_order_id,
                ChangeOrder.status == ChangeOrderStatus.pending,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self._raise_not_pending(change_order_id)

        change_order = self.get_change_order(change_order_id)
        self.db.refresh(change_order)

        self.audit_log_service.record_transition(
            project_id=change_order.project_id,
            entity_type=AuditEntityType.ChangeOrder,
            entity_id=change_order.id,
            action=AuditAction.approve if target is ChangeOrderStatus.approved else AuditAction.reject,
            before_value=ChangeOrderStatus.pending,
            after_value=target,
            operator_id=operator_id,
        )
        logger.info("Change order %s %s by %s", change_order.id, target.value, operator_id)
        return change_order
