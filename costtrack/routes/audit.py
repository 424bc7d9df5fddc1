# costtrack/routes/audit.py
from flask import Blueprint, jsonify, request

from costtrack.db.enums import AuditEntityType
from costtrack.db.session import get_session
from costtrack.errors import InputError
from costtrack.routes.gate import dump_many, require_login
from costtrack.schemas.audit_log_dto import AuditLogDTO
from costtrack.services.audit_log_service import AuditLogService

audit_bp = Blueprint('audit', __name__, url_prefix='/api/audit-logs')
audit_bp.before_request(require_login)


@audit_bp.route('', methods=['GET'])
def list_logs():
    """Audit trail, newest first. Filters: projectId, entityType, entityId, limit."""
    project_id = request.args.get('projectId', '').strip() or None
    entity_id = request.args.get('entityId', '').strip() or None

    entity_type = None
    raw_type = request.args.get('entityType', '').strip()
    if raw_type:
        try:
            entity_type = AuditEntityType(raw_type)
        except ValueError:
            raise InputError(f"Unknown entityType '{raw_type}'", field="entityType")

    try:
        limit = int(request.args.get('limit', 200))
    except ValueError:
        raise InputError("limit must be an integer", field="limit")
    limit = max(1, min(limit, 1000))

    db = get_session()
    try:
        logs = AuditLogService(db).list_logs(
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            limit=limit,
        )
        return jsonify(dump_many(AuditLogDTO, logs))
    finally:
        db.close()
