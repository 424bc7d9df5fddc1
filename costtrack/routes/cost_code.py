# costtrack/routes/cost_code.py
from flask import Blueprint, jsonify, request

from costtrack.db.enums import CostCategory
from costtrack.db.session import get_session
from costtrack.errors import InputError, NotFoundError
from costtrack.routes.gate import current_user_id, dump_many, parse_body, require_login
from costtrack.schemas.cost_code_dto import CostCodeCreate, CostCodeDTO, CostCodePatch
from costtrack.services.audit_log_service import AuditLogService
from costtrack.services.cost_code_service import CostCodeService

cost_code_bp = Blueprint('cost_code', __name__, url_prefix='/api/cost-codes')
cost_code_bp.before_request(require_login)


def _parse_category(raw):
    if not raw:
        return None
    try:
        return CostCategory(raw)
    except ValueError:
        allowed = ", ".join(c.value for c in CostCategory)
        raise InputError(f"Unknown category '{raw}', expected one of: {allowed}", field="category")


@cost_code_bp.route('', methods=['GET'])
def list_cost_codes():
    """Active cost codes, optionally one category."""
    category = _parse_category(request.args.get('category', '').strip())

    db = get_session()
    try:
        cost_codes = CostCodeService(db, AuditLogService(db)).list_cost_codes(category=category)
        return jsonify(dump_many(CostCodeDTO, cost_codes))
    finally:
        db.close()


@cost_code_bp.route('/<cost_code_id>', methods=['GET'])
def get_cost_code(cost_code_id):
    db = get_session()
    try:
        cost_code = CostCodeService(db, AuditLogService(db)).get_cost_code(cost_code_id)
        if not cost_code:
            raise NotFoundError(f"Cost code not found: {cost_code_id}")
        return jsonify(CostCodeDTO.model_validate(cost_code).to_json())
    finally:
        db.close()


@cost_code_bp.route('', methods=['POST'])
def create_cost_code():
    payload = parse_body(CostCodeCreate)

    db = get_session()
    try:
        cost_code = CostCodeService(db, AuditLogService(db)).create_cost_code(
            payload=payload,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(CostCodeDTO.model_validate(cost_code).to_json()), 201
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@cost_code_bp.route('/<cost_code_id>', methods=['PUT'])
def update_cost_code(cost_code_id):
    patch = parse_body(CostCodePatch)

    db = get_session()
    try:
        cost_code = CostCodeService(db, AuditLogService(db)).update_cost_code(
            cost_code_id=cost_code_id,
            patch=patch,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(CostCodeDTO.model_validate(cost_code).to_json())
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@cost_code_bp.route('/<cost_code_id>', methods=['DELETE'])
def deactivate_cost_code(cost_code_id):
    """Soft delete: the code stays referenced by existing entries."""
    db = get_session()
    try:
        CostCodeService(db, AuditLogService(db)).deactivate_cost_code(
            cost_code_id=cost_code_id,
            operator_id=current_user_id(),
        )
        db.commit()
        return '', 204
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
