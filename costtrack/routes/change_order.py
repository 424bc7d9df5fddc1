# costtrack/routes/change_order.py
from flask import Blueprint, jsonify, request

from costtrack.db.session import get_session
from costtrack.errors import NotFoundError
from costtrack.routes.gate import current_user_id, dump_many, parse_body, require_login
from costtrack.schemas.change_order_dto import ChangeOrderCreate, ChangeOrderDTO, ChangeOrderPatch
from costtrack.services.audit_log_service import AuditLogService
from costtrack.services.change_order_service import ChangeOrderService

change_order_bp = Blueprint('change_order', __name__, url_prefix='/api/change-orders')
change_order_bp.before_request(require_login)


@change_order_bp.route('', methods=['GET'])
def list_change_orders():
    """Change orders, newest request first, optionally for one project."""
    project_id = request.args.get('projectId', '').strip() or None

    db = get_session()
    try:
        change_orders = ChangeOrderService(db, AuditLogService(db)).list_change_orders(project_id=project_id)
        return jsonify(dump_many(ChangeOrderDTO, change_orders))
    finally:
        db.close()


@change_order_bp.route('/<change_order_id>', methods=['GET'])
def get_change_order(change_order_id):
    db = get_session()
    try:
        change_order = ChangeOrderService(db, AuditLogService(db)).get_change_order(change_order_id)
        if not change_order:
            raise NotFoundError(f"Change order not found: {change_order_id}")
        return jsonify(ChangeOrderDTO.model_validate(change_order).to_json())
    finally:
        db.close()


@change_order_bp.route('', methods=['POST'])
def create_change_order():
    """Request a change order. Always starts pending, requested by the signed-in user."""
    payload = parse_body(ChangeOrderCreate)

    db = get_session()
    try:
        change_order = ChangeOrderService(db, AuditLogService(db)).create_change_order(
            payload=payload,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(ChangeOrderDTO.model_validate(change_order).to_json()), 201
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@change_order_bp.route('/<change_order_id>', methods=['PUT'])
def update_change_order(change_order_id):
    """
    Edit a pending change order or decide it.
    {"status": "approved"} stamps approvedBy / approvalDate server side.
    """
    patch = parse_body(ChangeOrderPatch)

    db = get_session()
    try:
        change_order = ChangeOrderService(db, AuditLogService(db)).update_change_order(
            change_order_id=change_order_id,
            patch=patch,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(ChangeOrderDTO.model_validate(change_order).to_json())
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@change_order_bp.route('/<change_order_id>', methods=['DELETE'])
def delete_change_order(change_order_id):
    """Withdraw a pending change order."""
    db = get_session()
    try:
        ChangeOrderService(db, AuditLogService(db)).delete_change_order(
            change_order_id=change_order_id,
            operator_id=current_user_id(),
        )
        db.commit()
        return '', 204
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
