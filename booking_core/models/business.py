# booking_core/models/business.py
"""
Business Model - the tenant that owns services, employees and bookings
"""
from sqlalchemy import Column, String, Boolean, JSON
from sqlalchemy import Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from booking_core.config.settings import get_settings
from booking_core.models.base import Base
from booking_core.models.types import UTCDateTime


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)

    # All working hours of the business are wall-clock times in this zone
    timezone = Column(String(50), nullable=False, default=lambda: get_settings().DEFAULT_TIMEZONE)

    # {"slot_step_minutes": 15, "auto_confirm": false}
    booking_settings = Column(JSON, default=dict)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())
    is_active = Column(Boolean, default=True)

    employees = relationship("Employee", back_populates="business")
    services = relationship("Service", back_populates="business")

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"

    @property
    def slot_step_minutes(self):
        """Granularity of offered start times, None if the business did not set one"""
        return (self.booking_settings or {}).get("slot_step_minutes")

    @property
    def auto_confirm(self) -> bool:
        return bool((self.booking_settings or {}).get("auto_confirm", False))
