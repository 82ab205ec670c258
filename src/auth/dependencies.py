from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from src.database import get_db
from src.auth.utils import verify_token
from src.auth.service import UserService
from src.exceptions import Forbidden, Unauthenticated
from src.models import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """Get current authenticated user"""
    credentials_exception = Unauthenticated("Could not validate credentials").to_http()

    # Verify token and get payload
    token_data = verify_token(token, credentials_exception)

    # Get user from database
    user = UserService.get_user_by_id(db, user_id=token_data["user_id"])
    if user is None:
        raise credentials_exception

    return user

def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require admin role for access"""
    if not UserService.is_admin(current_user):
        raise Forbidden("Admin access only").to_http()
    return current_user

def require_staff(current_user: User = Depends(get_current_user)) -> User:
    """Require an admin or an approved station master"""
    if UserService.is_admin(current_user):
        return current_user
    if UserService.is_approved_station_master(current_user):
        return current_user
    raise Forbidden("Admin or Station Master access only").to_http()
