# barbershop/models.py

import uuid
from typing import Optional, List
from datetime import datetime, date as Date

from sqlalchemy import Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


def generate_id(prefix: str) -> str:
    """Generate a prefixed short UUID."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


class Appointment(SQLModel, table=True):
    # one active booking per staff member and slot; unassigned bookings
    # (staff_id NULL) are not covered here and rely on the conflict checker
    __table_args__ = (
        Index(
            "uq_active_staff_slot",
            "shop_id", "date", "time", "staff_id",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: str = Field(primary_key=True)

    shop_id: str = Field(index=True)
    client_id: str = Field(index=True)
    staff_id: Optional[str] = Field(default=None, index=True)
    date: Date = Field(index=True)
    time: str  # HH:MM
    status: str = "confirmed"

    # display cache, copied at creation and never re-synced
    client_name: str = ""
    client_phone: str = ""
    shop_name: str = ""

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class Account(SQLModel, table=True):
    id: str = Field(default_factory=lambda: generate_id("USR"), primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str
    phone: str = ""
    password_hash: str = ""
    role: str  # client, barber or admin
    status: str = "active"
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Shop(SQLModel, table=True):
    id: str = Field(default_factory=lambda: generate_id("SHP"), primary_key=True)
    name: str
    description: Optional[str] = None
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""

    owner_id: str = Field(index=True)
    join_code: str = Field(
        default_factory=lambda: uuid.uuid4().hex[:8].upper(), index=True
    )
    is_active: bool = True

    working_days: List[int] = Field(default_factory=list, sa_column=Column(JSON))  # 0=Mon
    opening_time: str = "09:00"
    closing_time: str = "18:00"
    # [{"time": "09:00", "duration_minutes": 30}, ...] kept in chronological order
    available_time_slots: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    staff_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Notification(SQLModel, table=True):
    id: str = Field(default_factory=lambda: generate_id("NTF"), primary_key=True)
    type: str
    recipient_id: str = Field(index=True)
    message: str
    related_appointment_id: Optional[str] = None
    related_shop_id: Optional[str] = None
    reason: Optional[str] = None
    read: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
