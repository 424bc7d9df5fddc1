'''Flask application factory. Builds and configures the app; never starts a server.
Used by run.py, WSGI servers (gunicorn / uwsgi) and the test suite.'''
# costtrack/app_factory.py
import os

import pydantic
from cachelib.file import FileSystemCache
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_session import Session
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from werkzeug.exceptions import HTTPException

from costtrack.errors import CostTrackError, ErrorType, StoreTimeoutError
from costtrack.logger import get_logger

# .env values become process environment
load_dotenv()

logger = get_logger(__name__)

# project root (absolute)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def create_app(config_name='development', test_config=None):
    """Application factory; test_config overrides any setting."""
    app = Flask(__name__)

    # core
    secret_key = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    if isinstance(secret_key, bytes):
        secret_key = secret_key.decode('utf-8')
    app.config['SECRET_KEY'] = secret_key
    app.config['ENV_NAME'] = config_name
    app.json.sort_keys = False

    # database: get_engine() reads DATABASE_URL from the environment
    db_path = os.path.join(BASE_DIR, 'costtrack.db')
    os.environ.setdefault('DATABASE_URL', f"sqlite:///{db_path}")
    app.config['DATABASE_URL'] = os.environ['DATABASE_URL']

    # server side sessions (Flask-Session over cachelib)
    session_dir = os.path.join(BASE_DIR, 'flask_session')
    app.config['SESSION_TYPE'] = 'cachelib'
    app.config['SESSION_PERMANENT'] = False
    app.config['SESSION_KEY_PREFIX'] = 'costtrack:'
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['SESSION_COOKIE_SECURE'] = config_name == 'production'

    if test_config:
        app.config.update(test_config)

    if 'SESSION_CACHELIB' not in app.config:
        os.makedirs(session_dir, exist_ok=True)
        app.config['SESSION_CACHELIB'] = FileSystemCache(cache_dir=session_dir, threshold=500)

    # sessions
    Session(app)

    # blueprints
    from costtrack.routes.auth import auth_bp
    from costtrack.routes.user import user_bp
    from costtrack.routes.project import project_bp
    from costtrack.routes.cost_code import cost_code_bp
    from costtrack.routes.cost_entry import cost_entry_bp
    from costtrack.routes.change_order import change_order_bp
    from costtrack.routes.report import report_bp
    from costtrack.routes.audit import audit_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(project_bp)
    app.register_blueprint(cost_code_bp)
    app.register_blueprint(cost_entry_bp)
    app.register_blueprint(change_order_bp)
    app.register_blueprint(report_bp)
    app.register_blueprint(audit_bp)

    # error handlers
    register_error_handlers(app)

    logger.info("costtrack app created (%s)", config_name)
    return app


def _validation_errors(exc: pydantic.ValidationError) -> list:
    errors = []
    for error in exc.errors(include_url=False, include_input=False):
        loc = [str(part) for part in error.get("loc", ())]
        errors.append({
            "field": ".".join(loc) if loc else None,
            "message": error.get("msg"),
        })
    return errors


def register_error_handlers(app):
    """
    One JSON shape for every failure: {"message", "errorType", ...}.
    Internal detail is logged, never returned.
    """

    @app.errorhandler(CostTrackError)
    def handle_service_error(error: CostTrackError):
        level = logger.error if error.status_code >= 500 else logger.info
        level("%s %s -> %d %s: %s", request.method, request.path,
              error.status_code, error.error_type.value, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(pydantic.ValidationError)
    def handle_validation_error(error: pydantic.ValidationError):
        errors = _validation_errors(error)
        logger.info("%s %s -> 422 validation: %s", request.method, request.path, errors)
        return jsonify({
            "message": "Request validation failed",
            "errorType": ErrorType.VALIDATION_ERROR.value,
            "errors": errors,
        }), 422

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        logger.warning("%s %s -> 409 integrity: %s", request.method, request.path, error.orig)
        return jsonify({
            "message": "The change conflicts with existing records",
            "errorType": ErrorType.INTEGRITY_ERROR.value,
        }), 409

    @app.errorhandler(OperationalError)
    @app.errorhandler(PoolTimeoutError)
    def handle_store_unavailable(error):
        logger.error("%s %s -> 503 database unavailable: %s", request.method, request.path, error)
        body = StoreTimeoutError("Database did not respond in time, please retry").to_dict()
        return jsonify(body), 503

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        error_type = ErrorType.NOT_FOUND if error.code == 404 else ErrorType.VALIDATION_ERROR
        if error.code and error.code >= 500:
            error_type = ErrorType.SYSTEM_ERROR
        return jsonify({
            "message": error.description,
            "errorType": error_type.value,
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception("%s %s -> 500 unhandled %s", request.method, request.path, type(error).__name__)
        return jsonify({
            "message": "Internal server error",
            "errorType": ErrorType.SYSTEM_ERROR.value,
        }), 500
