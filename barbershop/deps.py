# barbershop/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session

from .core.lifecycle import AppointmentManager, ShopLocks
from .db import get_session
from .stores import (
    SqlAccountDirectory,
    SqlAppointmentStore,
    SqlOutbox,
    SqlShopDirectory,
)

# shared by every request served by this process
shop_locks = ShopLocks()


def require_role(user: dict, *roles: str):
    if user["role"] not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_manager(session: Session = Depends(get_session)) -> AppointmentManager:
    return AppointmentManager(
        appointments=SqlAppointmentStore(session),
        shops=SqlShopDirectory(session),
        accounts=SqlAccountDirectory(session),
        locks=shop_locks,
    )


def get_outbox(session: Session = Depends(get_session)) -> SqlOutbox:
    return SqlOutbox(session)
