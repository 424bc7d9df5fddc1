# costtrack/routes/cost_entry.py
from flask import Blueprint, jsonify, request

from costtrack.db.session import get_session
from costtrack.errors import NotFoundError
from costtrack.routes.gate import current_user_id, dump_many, parse_body, require_login
from costtrack.schemas.cost_entry_dto import CostEntryCreate, CostEntryDTO, CostEntryPatch
from costtrack.services.audit_log_service import AuditLogService
from costtrack.services.cost_entry_service import CostEntryService

cost_entry_bp = Blueprint('cost_entry', __name__, url_prefix='/api/cost-entries')
cost_entry_bp.before_request(require_login)


@cost_entry_bp.route('', methods=['GET'])
def list_cost_entries():
    """Cost entries, newest entry date first, optionally for one project."""
    project_id = request.args.get('projectId', '').strip() or None

    db = get_session()
    try:
        entries = CostEntryService(db, AuditLogService(db)).list_cost_entries(project_id=project_id)
        return jsonify(dump_many(CostEntryDTO, entries))
    finally:
        db.close()


@cost_entry_bp.route('/<entry_id>', methods=['GET'])
def get_cost_entry(entry_id):
    db = get_session()
    try:
        entry = CostEntryService(db, AuditLogService(db)).get_cost_entry(entry_id)
        if not entry:
            raise NotFoundError(f"Cost entry not found: {entry_id}")
        return jsonify(CostEntryDTO.model_validate(entry).to_json())
    finally:
        db.close()


@cost_entry_bp.route('', methods=['POST'])
def create_cost_entry():
    """Record a cost; entered_by is the signed-in user."""
    payload = parse_body(CostEntryCreate)

    db = get_session()
    try:
        entry = CostEntryService(db, AuditLogService(db)).create_cost_entry(
            payload=payload,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(CostEntryDTO.model_validate(entry).to_json()), 201
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@cost_entry_bp.route('/<entry_id>', methods=['PUT'])
def update_cost_entry(entry_id):
    patch = parse_body(CostEntryPatch)

    db = get_session()
    try:
        entry = CostEntryService(db, AuditLogService(db)).update_cost_entry(
            entry_id=entry_id,
            patch=patch,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(CostEntryDTO.model_validate(entry).to_json())
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@cost_entry_bp.route('/<entry_id>', methods=['DELETE'])
def delete_cost_entry(entry_id):
    db = get_session()
    try:
        CostEntryService(db, AuditLogService(db)).delete_cost_entry(
            entry_id=entry_id,
            operator_id=current_user_id(),
        )
        db.commit()
        return '', 204
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
