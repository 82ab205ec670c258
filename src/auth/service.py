import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from src.models import User
from src.auth.schemas import UserCreate, UserRole, UserStatus
from src.auth.utils import get_password_hash, verify_password
from src.exceptions import Forbidden, ValidationError
from typing import List, Optional

logger = logging.getLogger(__name__)

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def default_status(role: str) -> str:
        """Station masters wait for admin approval, everyone else starts active"""
        if role == UserRole.STATION_MASTER.value:
            return UserStatus.PENDING.value
        return UserStatus.ACTIVE.value

    @staticmethod
    def create_user(db: Session, user: UserCreate, allow_admin: bool = False) -> User:
        """Create a new user"""
        role = UserRole(user.role).value
        if role == UserRole.ADMIN.value and not allow_admin:
            raise Forbidden("Admin accounts cannot be self-registered")

        if UserService.get_user_by_email(db, user.email):
            raise ValidationError("Email already registered")

        db_user = User(
            username=user.username,
            email=user.email,
            password=get_password_hash(user.password),
            role=role,
            status=UserService.default_status(role)
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            db.rollback()
            raise ValidationError("Email already registered")

        logger.info("Registered user %s with role %s (status %s)", db_user.id, db_user.role, db_user.status)
        return db_user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        user = UserService.get_user_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password):
            return None
        return user

    @staticmethod
    def list_users(
        db: Session,
        role: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[User]:
        """List users, optionally narrowed by role and status"""
        query = db.query(User)
        if role:
            query = query.filter(User.role == role)
        if status:
            query = query.filter(User.status == status)
        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def is_admin(user: User) -> bool:
        return user.role == UserRole.ADMIN.value

    @staticmethod
    def is_approved_station_master(user: User) -> bool:
        """A station master only acts as one once activated with a station"""
        return (
            user.role == UserRole.STATION_MASTER.value
            and user.status == UserStatus.ACTIVE.value
            and bool(user.assigned_station_id)
        )
