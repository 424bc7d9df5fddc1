# costtrack/routes/user.py
from flask import Blueprint, jsonify

from costtrack.db.session import get_session
from costtrack.errors import NotFoundError
from costtrack.routes.gate import current_user_id, dump_many, parse_body, require_login
from costtrack.schemas.user_dto import UserCreate, UserDTO, UserPatch
from costtrack.services.audit_log_service import AuditLogService
from costtrack.services.user_service import UserService

user_bp = Blueprint('user', __name__, url_prefix='/api/users')
user_bp.before_request(require_login)


@user_bp.route('', methods=['GET'])
def list_users():
    """All accounts, by account name."""
    db = get_session()
    try:
        return jsonify(dump_many(UserDTO, UserService(db).list_users()))
    finally:
        db.close()


@user_bp.route('/<user_id>', methods=['GET'])
def get_user(user_id):
    db = get_session()
    try:
        user = UserService(db).get_user_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return jsonify(UserDTO.model_validate(user).to_json())
    finally:
        db.close()


@user_bp.route('', methods=['POST'])
def create_user():
    """Register an account with a local password."""
    payload = parse_body(UserCreate)

    db = get_session()
    try:
        user = UserService(db, AuditLogService(db)).create_user(
            account=payload.account,
            password=payload.password,
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(UserDTO.model_validate(user).to_json()), 201
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@user_bp.route('/<user_id>', methods=['PUT'])
def update_user(user_id):
    """Profile, role and active flag. Roles are recorded, not enforced."""
    patch = parse_body(UserPatch)

    db = get_session()
    try:
        user = UserService(db, AuditLogService(db)).update_user(
            user_id=user_id,
            patch=patch,
            operator_id=current_user_id(),
        )
        db.commit()
        return jsonify(UserDTO.model_validate(user).to_json())
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
