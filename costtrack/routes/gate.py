# costtrack/routes/gate.py
from typing import Any, Dict, Type, TypeVar

from flask import jsonify, request, session

from costtrack.db.session import get_session
from costtrack.errors import AccountDisabledError, AuthenticationError, MalformedRequestError
from costtrack.logger import get_logger
from costtrack.models.user import User
from costtrack.schemas.base_dto import RequestDTO

T = TypeVar("T", bound=RequestDTO)

logger = get_logger(__name__)


def require_login():
    """
    before_request hook for every protected blueprint.
    The session user is re-read on every request: an account deleted or
    deactivated after sign-in loses its session (401 / 403).
    """
    user_id = session.get('user_id')
    if not user_id:
        return jsonify(AuthenticationError("Authentication required").to_dict()), 401

    db = get_session()
    try:
        user = db.get(User, user_id)
        is_active = user is not None and user.is_active
    finally:
        db.close()

    if user is None:
        session.clear()
        return jsonify(AuthenticationError("Session user no longer exists").to_dict()), 401
    if not is_active:
        logger.info("Rejected request from deactivated account %s", user_id)
        session.clear()
        return jsonify(AccountDisabledError("User account is deactivated").to_dict()), 403
    return None


def current_user_id() -> str:
    '''Subject id of the signed-in user; the only identity passed to services.'''
    user_id = session.get('user_id')
    if not user_id:
        raise AuthenticationError("Authentication required")
    return user_id


def parse_body(dto_cls: Type[T]) -> T:
    '''
    Validate the JSON request body into dto_cls.
    pydantic.ValidationError propagates to the app level handler (422).
    '''
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise MalformedRequestError("Request body must be a JSON object")
    return dto_cls.model_validate(payload)


def dump_many(dto_cls, rows) -> list[Dict[str, Any]]:
    return [dto_cls.model_validate(row).to_json() for row in rows]
