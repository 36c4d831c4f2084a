# booking_core/models/service.py
"""
Service Model - what customers book
Duration and buffers decide how much of an employee's time a booking occupies.
"""
from sqlalchemy import Column, String, Integer, ForeignKey, Boolean, Text, CheckConstraint
from sqlalchemy import Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from booking_core.models.base import Base
from booking_core.models.employee import employee_services
from booking_core.models.types import UTCDateTime


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("buffer_before_minutes >= 0", name="check_buffer_before_non_negative"),
        CheckConstraint("buffer_after_minutes >= 0", name="check_buffer_after_non_negative"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Duration in minutes
    duration = Column(Integer, nullable=False)
    buffer_before_minutes = Column(Integer, nullable=False, default=0)
    buffer_after_minutes = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    business = relationship("Business", back_populates="services")
    employees = relationship("Employee", secondary=employee_services, back_populates="services")

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, business_id={self.business_id})>"

