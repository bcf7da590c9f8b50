# barbershop/routers/appointments_routes.py

from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.auth import get_current_user
from barbershop.core.lifecycle import AppointmentManager
from barbershop.core.notifications import CANCELLED, CREATED, RESCHEDULED, appointment_events
from barbershop.core.slots import resolve_slots
from barbershop.db import get_session
from barbershop.deps import get_manager, get_outbox, require_role
from barbershop.models import Appointment, Shop
from barbershop.routers.shops_routes import load_shop
from barbershop.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentReschedule,
    CancelRequest,
    ClientAppointmentCreate,
    StatusUpdate,
)
from barbershop.stores import SqlOutbox

router = APIRouter(
    tags=["appointments"],
)

STATUS_FILTERS = ("confirmed", "pending", "completed", "cancelled", "all")


def is_shop_staff(user: dict, shop: Optional[Shop]) -> bool:
    return shop is not None and user["id"] in (shop.staff_ids or [])


def authorize(user: dict, appt: Appointment, shop: Optional[Shop], client_allowed: bool = True):
    if user["role"] == "admin" or is_shop_staff(user, shop):
        return
    if client_allowed and user["id"] == appt.client_id:
        return
    raise HTTPException(status_code=403, detail="Forbidden")


def ensure_slot_offered(shop: Shop, on_date: date, time: str):
    # closed days and times off the shop's grid are rejected before the
    # conflict check runs
    offered = resolve_slots(shop, on_date)
    if not offered:
        raise HTTPException(status_code=422, detail="The shop is closed that day")
    if time not in offered:
        raise HTTPException(status_code=422, detail="The shop does not offer that time")


def notify(outbox: SqlOutbox, action: str, appt: Appointment, shop, actor_id: str, reason=None):
    for event in appointment_events(action, appt, shop, actor_id, reason):
        outbox.enqueue(event)


def filter_status(appointments: List[Appointment], status: str) -> List[Appointment]:
    if status not in STATUS_FILTERS:
        raise HTTPException(status_code=422, detail=f"status must be one of {', '.join(STATUS_FILTERS)}")
    if status == "all":
        return appointments
    return [a for a in appointments if a.status == status]


@router.post("/shops/{shop_id}/appointments", response_model=AppointmentPublic, status_code=201)
def client_create_appointment(
    shop_id: str,
    appt: ClientAppointmentCreate,
    session: Session = Depends(get_session),
    manager: AppointmentManager = Depends(get_manager),
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")

    # 1) Shop must exist and accept bookings
    shop = load_shop(session, shop_id)
    if not shop.is_active:
        raise HTTPException(status_code=409, detail="The shop is not accepting appointments")

    # 2) Staff member must work at this shop
    if appt.staff_id is not None and appt.staff_id not in shop.staff_ids:
        raise HTTPException(status_code=422, detail="Barber does not work at this shop")

    # 3) Slot must exist on that day
    ensure_slot_offered(shop, appt.date, appt.time)

    # 4) Conflict check and write
    created = manager.create(
        AppointmentCreate(
            shop_id=shop.id,
            client_id=current_user["id"],
            date=appt.date,
            time=appt.time,
            staff_id=appt.staff_id,
            client_name=current_user["name"],
            client_phone=appt.client_phone or current_user["phone"],
        )
    )

    notify(outbox, CREATED, created, shop, current_user["id"])
    return created


@router.get("/appointments/{appt_id}", response_model=AppointmentPublic)
def get_appointment(
    appt_id: str,
    session: Session = Depends(get_session),
    manager: AppointmentManager = Depends(get_manager),
    current_user: dict = Depends(get_current_user),
):
    target = manager.get(appt_id)
    authorize(current_user, target, session.get(Shop, target.shop_id))
    return target


@router.patch("/appointments/{appt_id}", response_model=AppointmentPublic)
def reschedule_appointment(
    appt_id: str,
    changes: AppointmentReschedule,
    session: Session = Depends(get_session),
    manager: AppointmentManager = Depends(get_manager),
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    target = manager.get(appt_id)
    shop = session.get(Shop, target.shop_id)
    authorize(current_user, target, shop)

    new_date = changes.date or target.date
    new_time = changes.time or target.time
    moved = (new_date, new_time) != (target.date, target.time)
    if moved and shop is not None:
        ensure_slot_offered(shop, new_date, new_time)

    updated = manager.reschedule(appt_id, changes.date, changes.time)
    if moved:
        notify(outbox, RESCHEDULED, updated, shop, current_user["id"])
    return updated


@router.patch("/appointments/{appt_id}/status", response_model=AppointmentPublic)
def update_appointment_status(
    appt_id: str,
    body: StatusUpdate,
    session: Session = Depends(get_session),
    manager: AppointmentManager = Depends(get_manager),
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    target = manager.get(appt_id)
    shop = session.get(Shop, target.shop_id)
    authorize(current_user, target, shop, client_allowed=False)

    updated = manager.set_status(appt_id, body.status)
    if updated.status == "cancelled" and target.status != "cancelled":
        notify(outbox, CANCELLED, updated, shop, current_user["id"])
    return updated


@router.patch("/appointments/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: str,
    body: Optional[CancelRequest] = None,
    session: Session = Depends(get_session),
    manager: AppointmentManager = Depends(get_manager),
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    # 1) Find the appointment
    target = manager.get(appt_id)
    shop = session.get(Shop, target.shop_id)

    # 2) Already cancelled?
    if target.status == "cancelled":
        raise HTTPException(status_code=409, detail="Appointment already cancelled")

    # 3) Authorization: client who booked OR shop staff
    authorize(current_user, target, shop)

    # 4) Cancel, persist and tell the other side
    updated = manager.cancel(appt_id)
    reason = body.reason if body is not None else None
    notify(outbox, CANCELLED, updated, shop, current_user["id"], reason)
    return updated


@router.delete("/appointments/{appt_id}", status_code=204)
def delete_appointment(
    appt_id: str,
    session: Session = Depends(get_session),
    manager: AppointmentManager = Depends(get_manager),
    current_user: dict = Depends(get_current_user),
):
    target = manager.get(appt_id)
    shop = session.get(Shop, target.shop_id)
    is_owner = shop is not None and shop.owner_id == current_user["id"]
    if current_user["role"] != "admin" and not is_owner:
        raise HTTPException(status_code=403, detail="Forbidden")

    manager.delete(appt_id)


@router.get("/clients/me/appointments", response_model=List[AppointmentPublic])
def list_my_appointments(
    status: str = "all",
    manager: AppointmentManager = Depends(get_manager),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")
    return filter_status(manager.for_client(current_user["id"]), status)


@router.get("/barbers/me/appointments", response_model=List[AppointmentPublic])
def list_barber_appointments(
    shop_id: Optional[str] = None,
    status: str = "confirmed",
    on_date: Optional[date] = None,
    manager: AppointmentManager = Depends(get_manager),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")

    appts = manager.for_staff(current_user["id"], shop_id)
    if on_date is not None:
        appts = [a for a in appts if a.date == on_date]
    return filter_status(appts, status)
