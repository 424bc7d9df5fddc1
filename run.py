# run.py
"""
Development server entry point.
Production deployments serve costtrack.app_factory:create_app() from a WSGI server.
"""
import os

from costtrack.app_factory import create_app
from costtrack.db.auto_init import auto_init
from costtrack.logger import get_logger

logger = get_logger(__name__)


def configure_database():
    """
    Default to costtrack.db next to this script when DATABASE_URL is not configured.
    """
    if os.getenv("DATABASE_URL"):
        return
    base_dir = os.path.abspath(os.path.dirname(__file__))
    db_path = os.path.join(base_dir, "costtrack.db")
    os.environ["DATABASE_URL"] = f"sqlite:///{db_path}"
    logger.info("Using database: %s", db_path)


def main():
    # 0. database location
    configure_database()

    # 1. schema + bootstrap account
    auto_init()

    # 2. app
    app = create_app(os.getenv("APP_ENV", "development"))

    # 3. serve
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    app.run(host=host, port=port, debug=debug, use_reloader=False)


if __name__ == "__main__":
    main()
