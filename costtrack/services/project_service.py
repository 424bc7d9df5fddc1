from typing import List, Optional
from uuid import uuid4

from sqlalchemy import desc
from sqlalchemy.orm import Session

from costtrack.db.enums import AuditEntityType
from costtrack.errors import InputError, IntegrityViolation, NotFoundError
from costtrack.logger import get_logger
from costtrack.models.change_order import ChangeOrder
from costtrack.models.cost_entry import CostEntry
from costtrack.models.project import Project
from costtrack.schemas.project_dto import ProjectCreate, ProjectPatch
from costtrack.services.audit_log_service import AuditLogService

logger = get_logger(__name__)


class ProjectService:
    """
    Service for managing Project lifecycle and metadata.
    - created_by is the acting user, never client supplied
    - project_number stays unique
    - deleting a project deletes its cost entries and change orders in the same transaction
    """

    def __init__(
        self,
        db: Session,
        audit_log_service: AuditLogService,
    ):
        self.db = db
        self.audit_log_service = audit_log_service

    def _assert_number_free(self, project_number: str, project_id: Optional[str] = None) -> None:
        holder = (
            self.db.query(Project)
            .filter(Project.project_number == project_number)
            .first()
        )
        if holder and holder.id != project_id:
            raise IntegrityViolation(
                f"Project number '{project_number}' already exists",
                field="projectNumber",
            )

    def create_project(
        self,
        *,
        payload: ProjectCreate,
        operator_id: str,
    ) -> Project:
        '''
        Create a new project owned by the acting user.

        :param payload: validated request body
        :type payload: ProjectCreate
        :param operator_id: acting user id
        :type operator_id: str
        :return: the created project
        :rtype: Project
        '''
        self._assert_number_free(payload.project_number)

        project = Project(
            id=str(uuid4()),
            created_by=operator_id,
            **payload.model_dump(),
        )
        self.db.add(project)
        self.db.flush()

        self.audit_log_service.record_create(
            project_id=project.id,
            entity_type=AuditEntityType.Project,
            entity_id=project.id,
            operator_id=operator_id,
        )
        logger.info("Project %s (%s) created by %s", project.id, project.project_number, operator_id)
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.db.get(Project, project_id)

    def list_projects(self) -> List[Project]:
        '''newest first'''
        return (
            self.db.query(Project)
            .order_by(desc(Project.created_at))
            .all()
        )

    def update_project(
        self,
        *,
        project_id: str,
        patch: ProjectPatch,
        operator_id: str,
    ) -> Project:
        '''
        Apply a partial update. Unchanged fields are skipped and not audited.

        :raises NotFoundError: project does not exist
        :raises IntegrityViolation: new project number is taken
        '''
        project = self.get_project(project_id)
        if not project:
            raise NotFoundError(f"Project not found: {project_id}")

        changes = patch.changes()
        if "project_number" in changes:
            self._assert_number_free(changes["project_number"], project.id)

        start = changes.get("start_date", project.start_date)
        end = changes.get("end_date", project.end_date)
        if start is not None and end is not None and end < start:
            raise InputError("endDate must not be before startDate", field="endDate")

        for field, new_value in changes.items():
            old_value = getattr(project, field)
            if old_value == new_value:
                continue
            setattr(project, field, new_value)
            self.audit_log_service.record_update(
                project_id=project.id,
                entity_type=AuditEntityType.Project,
                entity_id=project.id,
                changed_attribute=field,
                before_value=old_value,
                after_value=new_value,
                operator_id=operator_id,
            )

        self.db.flush()
        return project

    def delete_project(
        self,
        *,
        project_id: str,
        operator_id: str,
    ) -> None:
        '''
        Hard delete with cascade: cost entries and change orders go first,
        then the project row. The ON DELETE CASCADE foreign keys enforce the
        same rule for deletes issued outside this service.
        '''
        project = self.get_project(project_id)
        if not project:
            raise NotFoundError(f"Project not found: {project_id}")

        entries_deleted = (
            self.db.query(CostEntry)
            .filter(CostEntry.project_id == project_id)
            .delete(synchronize_session=False)
        )
        change_orders_deleted = (
            self.db.query(ChangeOrder)
            .filter(ChangeOrder.project_id == project_id)
            .delete(synchronize_session=False)
        )
        self.db.delete(project)
        self.db.flush()

        self.audit_log_service.record_delete(
            project_id=project_id,
            entity_type=AuditEntityType.Project,
            entity_id=project_id,
            operator_id=operator_id,
        )
        logger.info(
            "Project %s deleted by %s (%d cost entries, %d change orders removed)",
            project_id, operator_id, entries_deleted, change_orders_deleted,
        )
