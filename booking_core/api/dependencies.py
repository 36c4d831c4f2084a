# ============================================================================
# FILE: booking_core/api/dependencies.py
# Shared request dependencies for the public booking API
# ============================================================================
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, Query, status

from booking_core.core.exceptions import HTTP_422_UNPROCESSABLE

ANY_EMPLOYEE = "any"


def parse_employee_id(value: Optional[str]) -> Optional[UUID]:
    """
    Turn an employee_id parameter into a UUID.

    Empty values and the literal "any" mean "no specific employee".
    """
    if value is None or value.strip() == "" or value.strip().lower() == ANY_EMPLOYEE:
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        raise HTTPException(
            status_code=HTTP_422_UNPROCESSABLE,
            detail=f"employee_id must be a UUID or '{ANY_EMPLOYEE}'"
        )


def optional_employee_id(
        employee_id: Optional[str] = Query(
            None, description=f"Employee ID, or '{ANY_EMPLOYEE}' for any qualified employee"
        )
) -> Optional[UUID]:
    """Query dependency wrapping parse_employee_id."""
    return parse_employee_id(employee_id)


def ensure_found(obj, detail: str = "Not found"):
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return obj
