"""Service catalogue and booking data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from salon_booking.schemas.customer_schema import ContactDetails


class BookingMode(str, Enum):
    """How the customer wants to book."""
    SCHEDULED = "scheduled"
    IMMEDIATE = "immediate"


class Service(BaseModel):
    """A bookable salon service. Static reference data."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    duration: str
    price: str
    description: str
    category_id: str
    modes: tuple[BookingMode, ...] = (BookingMode.SCHEDULED,)

    def supports(self, mode: BookingMode) -> bool:
        return mode in self.modes


class Category(BaseModel):
    """A group of related services."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    description: str
    services: tuple[Service, ...]

    def services_for(self, mode: BookingMode) -> list[Service]:
        return [s for s in self.services if s.supports(mode)]


class Booking(BaseModel):
    """A confirmed selection held in session memory only."""
    model_config = ConfigDict(frozen=True)

    service: Service
    mode: BookingMode
    slot: datetime
    contact: Optional[ContactDetails] = None
