from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from datetime import timedelta
from src.database import get_db
from src.auth.schemas import UserCreate, User, LoginRequest, AuthResponse
from src.auth.service import UserService
from src.auth.utils import create_access_token
from src.auth.dependencies import get_current_user
from src.config import settings
from src.exceptions import BookingSystemError
from src.models import User as UserModel

router = APIRouter()

def _issue_token(user: UserModel) -> AuthResponse:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": str(user.id), "role": user.role}, expires_delta=access_token_expires
    )
    return AuthResponse(
        access_token=access_token,
        token_type="bearer",
        user=User.model_validate(user)
    )

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new rider or station master"""
    try:
        db_user = UserService.create_user(db=db, user=user)
    except BookingSystemError as e:
        raise e.to_http()
    return _issue_token(db_user)

@router.post("/login", response_model=AuthResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    user = UserService.authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)

@router.get("/me", response_model=User)
def read_users_me(current_user: UserModel = Depends(get_current_user)):
    """Get current user profile"""
    return current_user
