# ============================================================================
# booking_core/services/directory/directory_service.py
# Lookups of businesses, services and the employees qualified for them
# ============================================================================
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from booking_core.core.exceptions import NotFoundError
from booking_core.models.business import Business
from booking_core.models.employee import Employee, employee_services
from booking_core.models.service import Service


class DirectoryService:
    """Resolves tenant-scoped entities, raising NotFoundError for unknown ids."""

    @staticmethod
    def get_business(db: Session, business_id: UUID) -> Business:
        business = db.query(Business).filter(
            Business.id == business_id,
            Business.is_active == True  # noqa: E712
        ).first()
        if not business:
            raise NotFoundError("Business not found", details={"business_id": str(business_id)})
        return business

    @staticmethod
    def get_service(db: Session, business_id: UUID, service_id: UUID) -> Service:
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.business_id == business_id,
            Service.is_active == True  # noqa: E712
        ).first()
        if not service:
            raise NotFoundError("Service not found", details={"service_id": str(service_id)})
        return service

    @staticmethod
    def get_employee(db: Session, business_id: UUID, employee_id: UUID) -> Employee:
        employee = db.query(Employee).filter(
            Employee.id == employee_id,
            Employee.business_id == business_id,
            Employee.is_active == True  # noqa: E712
        ).first()
        if not employee:
            raise NotFoundError("Employee not found", details={"employee_id": str(employee_id)})
        return employee

    @staticmethod
    def get_qualified_employees(db: Session, business_id: UUID, service_id: UUID) -> List[UUID]:
        """Ids of active employees linked to the service, in a stable order."""
        rows = db.query(Employee.id).join(
            employee_services, employee_services.c.employee_id == Employee.id
        ).filter(
            employee_services.c.service_id == service_id,
            Employee.business_id == business_id,
            Employee.is_active == True  # noqa: E712
        ).order_by(Employee.id).all()
        return [row[0] for row in rows]

    @staticmethod
    def is_qualified(db: Session, business_id: UUID, service_id: UUID, employee_id: UUID) -> bool:
        return employee_id in DirectoryService.get_qualified_employees(db, business_id, service_id)
