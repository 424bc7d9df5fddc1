# costtrack/services/user_service.py
from typing import List, Optional
from uuid import uuid4

import bcrypt
from sqlalchemy.orm import Session

from costtrack.db.base import utcnow
from costtrack.db.enums import AuditEntityType, UserRole
from costtrack.errors import AccountDisabledError, AuthenticationError, IntegrityViolation, NotFoundError
from costtrack.models.user import User
from costtrack.schemas.user_dto import UserPatch


class UserService:
    """
    Accounts and sign-in.
    Provides:
    - registration
    - authentication
    - sign-in stamping
    - profile / role maintenance

    Sessions are handled by the routes; nothing here reads them.
    """

    def __init__(self, db: Session, audit_log_service=None):
        self.db = db
        self.audit_log_service = audit_log_service

    # ======================================================
    # Internal helpers
    # ======================================================

    def _hash_password(self, password: str) -> str:
        '''Hash a password using bcrypt'''
        return bcrypt.hashpw(
            password.encode("utf-8"),
            bcrypt.gensalt(),
        ).decode("utf-8")

    def _verify_password(self, password: str, password_hash: str) -> bool:
        '''verify a password against its hash'''
        return bcrypt.checkpw(
            password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )

    def _assert_email_free(self, email: Optional[str], user_id: Optional[str] = None) -> None:
        if not email:
            return
        holder = self.db.query(User).filter(User.email == email).first()
        if holder and holder.id != user_id:
            raise IntegrityViolation(f"Email '{email}' is already in use", field="email")

    # ======================================================
    # User CRUD
    # ======================================================

    def create_user(
        self,
        *,
        account: str,
        password: Optional[str],
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        role: UserRole = UserRole.PM,
        operator_id: Optional[str] = None,
    ) -> User:
        """
        Register a new account.

        :param account: Login account (unique)
        :param password: Plaintext password; None for externally authenticated accounts
        :param role: Advisory role
        :param operator_id: Acting user, when registered through the API
        """
        if self.get_user_by_account(account):
            raise IntegrityViolation(f"Account '{account}' already exists", field="account")
        self._assert_email_free(email)

        user = User(
            id=str(uuid4()),
            account=account,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            password_hash=self._hash_password(password) if password else None,
            is_active=True,
        )
        self.db.add(user)
        self.db.flush()

        if self.audit_log_service is not None:
            self.audit_log_service.record_create(
                project_id=None,
                entity_type=AuditEntityType.User,
                entity_id=user.id,
                operator_id=operator_id or user.id,
            )
        return user

    def refresh_sign_in(self, user: User) -> User:
        """
        Stamp a successful sign-in on the user row (updated_at).
        Profile, role and password are left untouched.
        """
        user.updated_at = utcnow()
        self.db.flush()
        return user

    def authenticate(
        self,
        *,
        account: str,
        password: str,
    ) -> User:
        """
        Authenticate user by account + password.
        Returns User if successful.
        """
        user = self.get_user_by_account(account)

        if not user or not user.password_hash:
            raise AuthenticationError("Invalid account or password")

        if not self._verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid account or password")

        if not user.is_active:
            raise AccountDisabledError("User account is deactivated")

        return user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_account(self, account: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.account == account)
            .first()
        )

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.account).all()

    # ======================================================
    # Account maintenance
    # ======================================================

    def update_user(
        self,
        *,
        user_id: str,
        patch: UserPatch,
        operator_id: str,
    ) -> User:
        user = self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")

        changes = patch.changes()
        if "email" in changes:
            self._assert_email_free(changes["email"], user.id)

        for field, new_value in changes.items():
            old_value = getattr(user, field)
            if old_value == new_value:
                continue
            setattr(user, field, new_value)
            if self.audit_log_service is not None:
                self.audit_log_service.record_update(
                    project_id=None,
                    entity_type=AuditEntityType.User,
                    entity_id=user.id,
                    changed_attribute=field,
                    before_value=old_value,
                    after_value=new_value,
                    operator_id=operator_id,
                )

        self.db.flush()
        return user

    def reset_password(
        self,
        *,
        user_id: str,
        new_password: str,
    ) -> None:
        user = self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")

        user.password_hash = self._hash_password(new_password)
        self.db.flush()
