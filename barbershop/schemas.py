# barbershop/schemas.py

from pydantic import BaseModel, Field, field_validator
from enum import Enum
from datetime import datetime, date as Date
from typing import List, Optional

from .data import weekday_from_name, DEFAULT_SLOT_DURATION

# HH:MM, 24-hour, zero padded
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    client = "client"
    barber = "barber"
    admin = "admin"


class AccountStatus(str, Enum):
    active = "active"
    blocked = "blocked"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class NotificationType(str, Enum):
    appointment_created = "appointment_created"
    appointment_rescheduled = "appointment_rescheduled"
    appointment_cancel = "appointment_cancel"
    barber_join = "barber_join"
    barber_leave = "barber_leave"


class UserPublic(BaseModel):
    id: str
    email: str
    name: str
    phone: str
    role: UserRole
    status: AccountStatus


class UserCreate(BaseModel):
    email: str
    name: str
    phone: str = ""
    password: str = Field(min_length=8, max_length=72)
    role: UserRole

    @field_validator("role")
    @classmethod
    def no_self_service_admin(cls, value):
        if value == UserRole.admin:
            raise ValueError("admin accounts cannot be self-registered")
        return value


class TimeSlot(BaseModel):
    time: str = Field(pattern=TIME_PATTERN)
    duration_minutes: int = DEFAULT_SLOT_DURATION


class ShopSchedule(BaseModel):
    working_days: List[int]     # 0=Mon, 1=Tue ... accepts names too
    opening_time: str = Field(pattern=TIME_PATTERN)
    closing_time: str = Field(pattern=TIME_PATTERN)
    available_time_slots: List[TimeSlot] = []

    @field_validator("working_days", mode="before")
    @classmethod
    def translate_day_names(cls, value):
        if not isinstance(value, list):
            return value
        return [weekday_from_name(day) for day in value]


class ShopCreate(ShopSchedule):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class ShopPublic(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    phone: str
    address: str
    city: str
    state: str
    zip_code: str
    owner_id: str
    is_active: bool
    working_days: List[int]
    opening_time: str
    closing_time: str
    available_time_slots: List[TimeSlot]
    staff_ids: List[str]


class ShopOwnerView(ShopPublic):
    join_code: str


class JoinShop(BaseModel):
    join_code: str


class AppointmentCreate(BaseModel):
    shop_id: str
    client_id: str
    date: Date
    time: str = Field(pattern=TIME_PATTERN)
    staff_id: Optional[str] = None
    client_name: Optional[str] = None
    client_phone: str = ""


class ClientAppointmentCreate(BaseModel):
    date: Date
    time: str = Field(pattern=TIME_PATTERN)
    staff_id: Optional[str] = None
    client_phone: str = ""


class AppointmentReschedule(BaseModel):
    date: Optional[Date] = None
    time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class AppointmentPublic(BaseModel):
    id: str
    shop_id: str
    shop_name: str
    client_id: str
    client_name: str
    client_phone: str
    staff_id: Optional[str] = None
    date: Date
    time: str
    status: AppointmentStatus
    created_at: datetime
    updated_at: Optional[datetime] = None


class AvailabilityResponse(BaseModel):
    shop_id: str
    date: Date
    staff_id: Optional[str] = None
    available_times: List[str]


class NotificationPublic(BaseModel):
    id: str
    type: NotificationType
    recipient_id: str
    message: str
    related_appointment_id: Optional[str] = None
    related_shop_id: Optional[str] = None
    reason: Optional[str] = None
    read: bool
    created_at: datetime
