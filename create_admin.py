# create_admin.py
"""
Create an account, or reset its password, from the command line.
For development and manual maintenance only.

    python create_admin.py alice 's3cret-pass' --role Executive
    python create_admin.py alice 'n3w-pass' --reset-password
"""
import argparse

from costtrack.db.enums import UserRole
from costtrack.db.init_db import init_db
from costtrack.db.session import get_session
from costtrack.logger import get_logger
from costtrack.services.user_service import UserService

logger = get_logger(__name__)


def create_admin(account: str, password: str, role: UserRole, reset_password: bool = False):
    db = get_session()
    try:
        user_service = UserService(db)

        existing = user_service.get_user_by_account(account)
        if existing and not reset_password:
            logger.warning("User '%s' already exists, skipping", account)
            return
        if existing:
            user_service.reset_password(user_id=existing.id, new_password=password)
            logger.info("Password of '%s' reset", account)
        else:
            if reset_password:
                logger.warning("User '%s' does not exist, creating it", account)
            user_service.create_user(account=account, password=password, role=role)
            logger.info("User '%s' created with role %s", account, role.value)

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to create user '%s'", account)
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create a costtrack account")
    parser.add_argument("account")
    parser.add_argument("password")
    parser.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.Executive.value)
    parser.add_argument("--reset-password", action="store_true", help="reset the password of an existing account")
    args = parser.parse_args()

    init_db()
    create_admin(args.account, args.password, UserRole(args.role), reset_password=args.reset_password)


if __name__ == "__main__":
    main()
