import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flightgo.api.schemas import UserCreate
from flightgo.core.config import Settings
from flightgo.core.models import ApprovalStatus, User, UserType
from flightgo.core.security import hash_password, verify_password

from .exceptions import AuthenticationError, ConflictError, InvalidOperationError, NotFoundError

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, bcrypt_rounds: int = 10):
        self.bcrypt_rounds = bcrypt_rounds

    def get_user(self, db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_user_by_email(self, db: Session, email: str):
        return db.scalars(select(User).where(User.email == email)).first()

    def list_users(self, db: Session) -> List[User]:
        return list(db.scalars(select(User).order_by(User.created_at)))

    def register(self, db: Session, user_data: UserCreate) -> User:
        if self.get_user_by_email(db, user_data.email):
            raise ConflictError("User already exists")

        # Operators wait for an admin decision
        approval = ApprovalStatus.APPROVED
        if user_data.usertype == UserType.OPERATOR:
            approval = ApprovalStatus.PENDING

        db_user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=hash_password(user_data.password, self.bcrypt_rounds),
            usertype=user_data.usertype.value,
            approval=approval.value,
        )
        db.add(db_user)
        try:
            db.commit()
        except IntegrityError:
            # Another request registered the same email after our check
            db.rollback()
            raise ConflictError("User already exists")
        db.refresh(db_user)
        logger.info("Registered %s account %s", db_user.usertype, db_user.email)
        return db_user

    def authenticate(self, db: Session, email: str, password: str) -> User:
        user = self.get_user_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        return user

    def _set_approval(self, db: Session, user_id: str, approval: ApprovalStatus) -> User:
        user = self.get_user(db, user_id)
        if user.usertype != UserType.OPERATOR.value:
            raise InvalidOperationError(f"User {user_id} is not a flight operator")

        user.approval = approval.value
        db.commit()
        db.refresh(user)
        logger.info("Operator %s %s", user.email, approval.value)
        return user

    def approve_operator(self, db: Session, user_id: str) -> User:
        return self._set_approval(db, user_id, ApprovalStatus.APPROVED)

    def reject_operator(self, db: Session, user_id: str) -> User:
        return self._set_approval(db, user_id, ApprovalStatus.REJECTED)

    def ensure_default_admin(self, db: Session, settings: Settings) -> bool:
        admin_count = len(db.scalars(
            select(User.id).where(User.usertype == UserType.ADMIN.value)
        ).all())
        if admin_count:
            logger.info("%d admin account(s) present", admin_count)
            return False

        if self.get_user_by_email(db, settings.DEFAULT_ADMIN_EMAIL):
            logger.warning(
                "Cannot seed admin: %s is taken by a non-admin account",
                settings.DEFAULT_ADMIN_EMAIL,
            )
            return False

        db.add(User(
            username=settings.DEFAULT_ADMIN_NAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD, self.bcrypt_rounds),
            usertype=UserType.ADMIN.value,
            approval=ApprovalStatus.APPROVED.value,
        ))
        db.commit()
        logger.info("Created default admin %s", settings.DEFAULT_ADMIN_EMAIL)
        return True
