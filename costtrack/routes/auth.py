# costtrack/routes/auth.py
from flask import Blueprint, jsonify, session

from costtrack.db.enums import AuditAction
from costtrack.db.session import get_session
from costtrack.logger import get_logger
from costtrack.routes.gate import current_user_id, parse_body, require_login
from costtrack.schemas.user_dto import LoginRequest, UserDTO
from costtrack.services.audit_log_service import AuditLogService
from costtrack.services.user_service import UserService

auth_bp = Blueprint('auth', __name__, url_prefix='/api')

logger = get_logger(__name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Sign in with account + password; establishes the session."""
    payload = parse_body(LoginRequest)

    db = get_session()
    try:
        audit_log_service = AuditLogService(db)
        user_service = UserService(db, audit_log_service)
        user = user_service.authenticate(account=payload.account, password=payload.password)

        user = user_service.refresh_sign_in(user)
        audit_log_service.record_session(user_id=user.id, action=AuditAction.login)
        db.commit()

        session.clear()
        session['user_id'] = user.id
        session['user_account'] = user.account

        logger.info("User %s signed in", user.account)
        return jsonify(UserDTO.model_validate(user).to_json())
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Sign out. Idempotent."""
    user_id = session.get('user_id')
    if user_id:
        db = get_session()
        try:
            AuditLogService(db).record_session(user_id=user_id, action=AuditAction.logout)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
    session.clear()
    return '', 204


@auth_bp.route('/auth/user', methods=['GET'])
def current_user():
    """The signed-in user."""
    check = require_login()
    if check:
        return check

    db = get_session()
    try:
        user = UserService(db).get_user_by_id(current_user_id())
        return jsonify(UserDTO.model_validate(user).to_json())
    finally:
        db.close()
