# booking_core/models/employee.py
"""
Employee Model - staff members who perform services
"""
from sqlalchemy import Column, String, Boolean, ForeignKey, Table, UniqueConstraint
from sqlalchemy import Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from booking_core.models.base import Base
from booking_core.models.types import UTCDateTime


# Which employees are qualified to perform which services
employee_services = Table(
    "employee_services",
    Base.metadata,
    Column("employee_id", Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
    Column("service_id", Uuid(as_uuid=True), ForeignKey("services.id", ondelete="CASCADE"), nullable=False),
    UniqueConstraint("employee_id", "service_id", name="unique_employee_service"),
)


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    business = relationship("Business", back_populates="employees")
    services = relationship("Service", secondary=employee_services, back_populates="employees")

    def __repr__(self):
        return f"<Employee(id={self.id}, name={self.name}, business_id={self.business_id})>"
