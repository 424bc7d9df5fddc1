"""
Startup database check: create missing tables and seed the first account.
"""
import os

from sqlalchemy import inspect

from costtrack.db.enums import UserRole
from costtrack.db.init_db import init_db
from costtrack.db.session import get_engine, get_session
from costtrack.logger import get_logger
from costtrack.services.user_service import UserService

logger = get_logger(__name__)

REQUIRED_TABLES = {"users", "projects", "cost_codes", "cost_entries", "change_orders", "audit_logs"}


def check_tables_exist() -> bool:
    """Whether every table of the schema exists."""
    inspector = inspect(get_engine())
    return REQUIRED_TABLES.issubset(set(inspector.get_table_names()))


def ensure_admin_user() -> None:
    """Create the bootstrap account when it does not exist yet."""
    account = os.getenv("ADMIN_ACCOUNT", "admin")
    password = os.getenv("ADMIN_PASSWORD", "admin123")

    db = get_session()
    try:
        user_service = UserService(db)
        if user_service.get_user_by_account(account):
            logger.info("Admin account '%s' already exists", account)
            return

        user_service.create_user(
            account=account,
            password=password,
            first_name="System",
            last_name="Administrator",
            role=UserRole.Executive,
        )
        db.commit()
        logger.warning("Created admin account '%s'; change its password after first sign-in", account)
    except Exception:
        db.rollback()
        logger.exception("Failed to create admin account '%s'", account)
        raise
    finally:
        db.close()


def auto_init():
    """
    Run on startup: create the schema if any table is missing, then make sure
    an account exists to sign in with.
    """
    logger.info("Checking database initialization state")

    if not check_tables_exist():
        logger.info("Schema incomplete, creating tables")
        init_db()
    else:
        logger.info("All tables present")

    ensure_admin_user()
    logger.info("Database initialization check complete")


if __name__ == "__main__":
    auto_init()
