from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from .schemas import UserStatusUpdate, BookingSummaryRequest, BookingSummary
from .admin_service import AdminManagementService
from ..database import get_db
from ..auth.dependencies import require_admin
from ..auth.schemas import User, UserRole, UserStatus
from ..auth.service import UserService
from ..exceptions import BookingSystemError
from ..models import User as UserModel

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

# User Management
@router.get("/users", response_model=List[User])
def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    user_status: Optional[UserStatus] = Query(None, alias="status", description="Filter by account status"),
    admin_user: UserModel = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """List user accounts"""
    return UserService.list_users(
        db,
        role=role.value if role else None,
        status=user_status.value if user_status else None
    )

@router.get("/users/pending-station-masters", response_model=List[User])
def list_pending_station_masters(
    admin_user: UserModel = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Station masters waiting for approval"""
    return AdminManagementService(db).list_pending_station_masters()

@router.put("/users/{user_id}/status", response_model=User)
def update_user_status(
    user_id: int,
    update: UserStatusUpdate,
    admin_user: UserModel = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Approve a station master (assigning their station) or change an account's status"""
    admin_service = AdminManagementService(db)
    try:
        return admin_service.update_user_status(admin_user, user_id, update)
    except BookingSystemError as e:
        raise e.to_http()

# Analytics
@router.get("/bookings/summary", response_model=BookingSummary)
def get_booking_summary(
    date_from: Optional[date] = Query(None, description="First travel date"),
    date_to: Optional[date] = Query(None, description="Last travel date"),
    from_station: Optional[str] = Query(None, description="Origin station ID"),
    admin_user: UserModel = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Booking counts and revenue by status"""
    request = BookingSummaryRequest(date_from=date_from, date_to=date_to, from_station=from_station)
    return AdminManagementService(db).get_booking_summary(request)
