# barbershop/routers/shops_routes.py

from datetime import datetime, date as Date
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.core.availability import available_slots, available_slots_any_staff
from barbershop.core.lifecycle import AppointmentManager
from barbershop.core.notifications import barber_join_event, barber_leave_event
from barbershop.core.slots import check_schedule
from barbershop.db import get_session
from barbershop.deps import get_manager, get_outbox, require_role
from barbershop.models import Shop
from barbershop.schemas import (
    AvailabilityResponse,
    JoinShop,
    ShopCreate,
    ShopOwnerView,
    ShopPublic,
    ShopSchedule,
    UserPublic,
)
from barbershop.stores import SqlOutbox

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/shops",
    tags=["shops"],
)


def load_shop(session: Session, shop_id: str) -> Shop:
    shop = session.get(Shop, shop_id)
    if shop is None:
        raise HTTPException(status_code=404, detail="Shop not found")
    return shop


@router.post("", response_model=ShopOwnerView, status_code=201)
def create_shop(
    data: ShopCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")
    slots = check_schedule(
        data.working_days, data.opening_time, data.closing_time, data.available_time_slots
    )

    shop = Shop(
        **data.model_dump(exclude={"available_time_slots"}),
        available_time_slots=[slot.model_dump() for slot in slots],
        owner_id=current_user["id"],
        staff_ids=[current_user["id"]],
    )
    session.add(shop)
    session.commit()
    session.refresh(shop)

    logger.info("shop_created", shop_id=shop.id, owner_id=shop.owner_id)
    return shop


@router.get("", response_model=List[ShopPublic])
def list_shops(
    city: Optional[str] = None,
    session: Session = Depends(get_session),
):
    query = select(Shop).where(Shop.is_active == True)
    if city:
        query = query.where(Shop.city == city)
    return session.exec(query.order_by(Shop.name)).all()


@router.get("/{shop_id}", response_model=ShopPublic)
def get_shop(shop_id: str, session: Session = Depends(get_session)):
    return load_shop(session, shop_id)


@router.put("/{shop_id}/schedule", response_model=ShopPublic)
def update_schedule(
    shop_id: str,
    schedule: ShopSchedule,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    shop = load_shop(session, shop_id)
    if shop.owner_id != current_user["id"]:
        raise HTTPException(status_code=403, detail="Only the shop owner can change the schedule")

    slots = check_schedule(
        schedule.working_days,
        schedule.opening_time,
        schedule.closing_time,
        schedule.available_time_slots,
    )

    shop.working_days = schedule.working_days
    shop.opening_time = schedule.opening_time
    shop.closing_time = schedule.closing_time
    shop.available_time_slots = [slot.model_dump() for slot in slots]
    shop.updated_at = datetime.utcnow()
    session.add(shop)
    session.commit()
    session.refresh(shop)

    logger.info("shop_schedule_updated", shop_id=shop.id, custom_slots=len(slots))
    return shop


@router.post("/join", response_model=ShopPublic)
def join_shop(
    body: JoinShop,
    session: Session = Depends(get_session),
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")

    shop = session.exec(
        select(Shop).where(Shop.join_code == body.join_code.strip().upper())
    ).first()
    if shop is None:
        raise HTTPException(status_code=404, detail="Invalid join code")
    if current_user["id"] in shop.staff_ids:
        raise HTTPException(status_code=409, detail="Already a member of this shop")

    shop.staff_ids = [*shop.staff_ids, current_user["id"]]
    shop.updated_at = datetime.utcnow()
    session.add(shop)
    session.commit()
    session.refresh(shop)

    outbox.enqueue(barber_join_event(shop, current_user["name"]))
    return shop


@router.post("/{shop_id}/leave", response_model=ShopPublic)
def leave_shop(
    shop_id: str,
    session: Session = Depends(get_session),
    outbox: SqlOutbox = Depends(get_outbox),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")

    shop = load_shop(session, shop_id)
    if shop.owner_id == current_user["id"]:
        raise HTTPException(status_code=409, detail="The owner cannot leave the shop")
    if current_user["id"] not in shop.staff_ids:
        raise HTTPException(status_code=409, detail="Not a member of this shop")

    shop.staff_ids = [s for s in shop.staff_ids if s != current_user["id"]]
    shop.updated_at = datetime.utcnow()
    session.add(shop)
    session.commit()
    session.refresh(shop)

    logger.info("barber_left_shop", shop_id=shop.id, barber_id=current_user["id"])
    outbox.enqueue(barber_leave_event(shop, current_user["name"]))
    return shop


@router.get("/{shop_id}/staff", response_model=List[UserPublic])
def list_staff(shop_id: str, manager: AppointmentManager = Depends(get_manager)):
    return manager.eligible_staff(shop_id)


@router.get("/{shop_id}/availability", response_model=AvailabilityResponse)
def shop_availability(
    shop_id: str,
    date: Date,
    staff_id: Optional[str] = None,
    any_staff: bool = False,
    exempt_id: Optional[str] = None,
    session: Session = Depends(get_session),
    manager: AppointmentManager = Depends(get_manager),
):
    shop = load_shop(session, shop_id)
    appointments = manager.appointments.load_all()

    if any_staff and staff_id is None:
        times = available_slots_any_staff(shop, appointments, date, exempt_id=exempt_id)
    else:
        times = available_slots(shop, appointments, date, staff_id, exempt_id)

    return {
        "shop_id": shop.id,
        "date": date,
        "staff_id": staff_id,
        "available_times": times,
    }
