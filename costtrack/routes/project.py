# costtrack/routes/project.py
from flask import Blueprint, jsonify

from costtrack.db.session import get_session
from costtrack.errors import NotFoundError
from costtrack.routes.gate import current_user_id, dump_many, parse_body, require_login
from costtrack.schemas.project_dto import ProjectCreate, ProjectDTO, ProjectPatch
from costtrack.services.audit_log_service import AuditLogService
from costtrack.services.project_service import ProjectService

project_bp = Blueprint('project', __name__, url_prefix='/api/projects')
project_bp.before_request(require_login)


def _project_service(db) -> ProjectService:
    return ProjectService(db, AuditLogService(db))


@project_bp.route('', methods=['GET'])
def list_projects():
    """Projects, newest first."""
    db = get_session()
    try:
        projects = _project_service(db).list_projects()
        return jsonify(dump_many(ProjectDTO, projects))
    finally:
        db.close()


@project_bp.route('/<project_id>', methods=['GET'])
def get_project(project_id):
    db = get_session()
    try:
        project = _project_service(db).get_project(project_id)
        if not project:
            raise NotFoundError(f"Project not found: {project_id}")
        return jsonify(ProjectDTO.model_validate(project).to_json())
    finally:
        db.close()


@project_bp.route('', methods=['POST'])
def create_project():
    """Create a project; created_by is the signed-in user."""
    payload = parse_body(ProjectCreate)

    db = get_session()
    try:
        project = _project_service(db).create_project(
            payload=payload,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(ProjectDTO.model_validate(project).to_json()), 201
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@project_bp.route('/<project_id>', methods=['PUT'])
def update_project(project_id):
    """Partial update of the mutable project fields."""
    patch = parse_body(ProjectPatch)

    db = get_session()
    try:
        project = _project_service(db).update_project(
            project_id=project_id,
            patch=patch,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(ProjectDTO.model_validate(project).to_json())
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@project_bp.route('/<project_id>', methods=['DELETE'])
def delete_project(project_id):
    """Delete a project together with its cost entries and change orders."""
    db = get_session()
    try:
        _project_service(db).delete_project(
            project_id=project_id,
            operator_id=current_user_id(),
        )
        db.commit()
        return '', 204
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
