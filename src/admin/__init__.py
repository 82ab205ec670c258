"""
Admin System Module

Administrative functionality for the Bus Ticket Booking System:

- User management, including approval of station masters and assignment
  of the station they manage
- Booking summaries for the admin dashboard

Station CRUD lives in the stations module behind the same admin check.
"""

from . import router, schemas, admin_service

__all__ = [
    "router",
    "schemas",
    "admin_service"
]
