# barbershop/core/lifecycle.py

"""Appointment lifecycle: create, reschedule, status changes and deletion.

Every write that moves an appointment onto a slot is re-validated against a
fresh snapshot of the appointment store, under a per-shop lock, right before
the snapshot is written back.
"""

import threading
from datetime import datetime, date as Date
from typing import Callable, Dict, List, Optional, Union

import structlog

from ..data import SHOP_NOT_FOUND, STAFF_NOT_FOUND
from ..errors import InvalidRequest, NotFound, SlotConflict
from ..models import Account, Appointment, generate_id
from ..schemas import AppointmentCreate, AppointmentStatus
from ..stores import AccountDirectory, AppointmentStore, ShopDirectory
from .conflicts import CANCELLED, find_conflicts
from .slots import parse_date, to_minutes

logger = structlog.get_logger(__name__)

CONFIRMED = AppointmentStatus.confirmed.value
STATUSES = {status.value for status in AppointmentStatus}


def new_appointment_id() -> str:
    return generate_id("APT")


class ShopLocks:
    """One lock per shop so check-then-write runs single file within a process."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def for_shop(self, shop_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(shop_id, threading.Lock())


def _chronological(appointments: List[Appointment]) -> List[Appointment]:
    return sorted(appointments, key=lambda a: (a.date, to_minutes(a.time)))


class AppointmentManager:
    def __init__(
        self,
        appointments: AppointmentStore,
        shops: ShopDirectory,
        accounts: AccountDirectory,
        clock: Callable[[], datetime] = datetime.utcnow,
        locks: Optional[ShopLocks] = None,
        id_factory: Callable[[], str] = new_appointment_id,
    ):
        self.appointments = appointments
        self.shops = shops
        self.accounts = accounts
        self.clock = clock
        self.locks = locks or ShopLocks()
        self.id_factory = id_factory

    # =====================================================================
    # Reads
    # =====================================================================

    def get(self, appointment_id: str) -> Appointment:
        for appt in self.appointments.load_all():
            if appt.id == appointment_id:
                return appt
        raise NotFound("Appointment not found")

    def for_client(self, client_id: str) -> List[Appointment]:
        return _chronological(
            [a for a in self.appointments.load_all() if a.client_id == client_id]
        )

    def for_shop(self, shop_id: str) -> List[Appointment]:
        return _chronological(
            [a for a in self.appointments.load_all() if a.shop_id == shop_id]
        )

    def for_staff(self, staff_id: str, shop_id: Optional[str] = None) -> List[Appointment]:
        """Appointments assigned to ``staff_id``, plus the unassigned ones of
        ``shop_id`` when the staff member works there."""
        shop = self.shops.find_by_id(shop_id) if shop_id else None
        serves_shop = shop is not None and staff_id in (shop.staff_ids or [])

        def belongs(appt: Appointment) -> bool:
            if appt.staff_id:
                return appt.staff_id == staff_id
            return serves_shop and appt.shop_id == shop_id

        return _chronological([a for a in self.appointments.load_all() if belongs(a)])

    def staff_name(self, staff_id: str) -> str:
        account = self.accounts.find_by_id(staff_id)
        return account.name if account is not None else STAFF_NOT_FOUND

    def eligible_staff(self, shop_id: str) -> List[Account]:
        shop = self.shops.find_by_id(shop_id)
        if shop is None:
            raise NotFound(SHOP_NOT_FOUND)
        members = set(shop.staff_ids or [])
        return [a for a in self.accounts.find_all() if a.id in members]

    # =====================================================================
    # Writes
    # =====================================================================

    def create(self, request: AppointmentCreate) -> Appointment:
        shop = self.shops.find_by_id(request.shop_id)
        if shop is None:
            raise NotFound(SHOP_NOT_FOUND)

        on_date = parse_date(request.date)
        client_name = request.client_name
        if not client_name:
            client = self.accounts.find_by_id(request.client_id)
            client_name = client.name if client is not None else ""

        with self.locks.for_shop(shop.id):
            appointments = self.appointments.load_all()
            conflicts = find_conflicts(
                appointments, shop.id, on_date, request.time, request.staff_id
            )
            if conflicts:
                logger.info(
                    "slot_conflict",
                    shop_id=shop.id,
                    date=on_date.isoformat(),
                    time=request.time,
                    staff_id=request.staff_id,
                    held_by=[c.id for c in conflicts],
                )
                raise SlotConflict("This time slot is already taken")

            appt = Appointment(
                id=self.id_factory(),
                shop_id=shop.id,
                client_id=request.client_id,
                staff_id=request.staff_id,
                date=on_date,
                time=request.time,
                status=CONFIRMED,
                client_name=client_name,
                client_phone=request.client_phone,
                shop_name=shop.name,
                created_at=self.clock(),
            )
            appointments.append(appt)
            self.appointments.save_all(appointments)

        logger.info(
            "appointment_created",
            appointment_id=appt.id,
            shop_id=appt.shop_id,
            date=appt.date.isoformat(),
            time=appt.time,
            staff_id=appt.staff_id,
        )
        return appt

    def reschedule(
        self,
        appointment_id: str,
        new_date: Union[Date, str, None] = None,
        new_time: Optional[str] = None,
    ) -> Appointment:
        shop_id = self.get(appointment_id).shop_id

        with self.locks.for_shop(shop_id):
            appointments = self.appointments.load_all()
            target = self._find(appointments, appointment_id)

            on_date = parse_date(new_date) if new_date is not None else target.date
            time = new_time or target.time
            moved = (on_date, time) != (target.date, target.time)

            if moved and target.status != CANCELLED:
                conflicts = find_conflicts(
                    appointments,
                    target.shop_id,
                    on_date,
                    time,
                    target.staff_id,
                    exclude_id=target.id,
                )
                if conflicts:
                    logger.info(
                        "slot_conflict",
                        appointment_id=target.id,
                        date=on_date.isoformat(),
                        time=time,
                        held_by=[c.id for c in conflicts],
                    )
                    raise SlotConflict("The new time slot is already taken")

            previous = (target.date.isoformat(), target.time)
            target.date = on_date
            target.time = time
            target.updated_at = self.clock()
            self.appointments.save_all(appointments)

        logger.info(
            "appointment_rescheduled",
            appointment_id=target.id,
            previous=previous,
            date=target.date.isoformat(),
            time=target.time,
        )
        return target

    def set_status(self, appointment_id: str, status) -> Appointment:
        # any status from any status, cancelled included
        status = getattr(status, "value", status)
        if status not in STATUSES:
            raise InvalidRequest(f"Unknown appointment status: {status}")

        shop_id = self.get(appointment_id).shop_id
        with self.locks.for_shop(shop_id):
            appointments = self.appointments.load_all()
            target = self._find(appointments, appointment_id)
            previous = target.status
            target.status = status
            target.updated_at = self.clock()
            self.appointments.save_all(appointments)

        logger.info(
            "appointment_status_changed",
            appointment_id=target.id,
            previous=previous,
            status=status,
        )
        return target

    def cancel(self, appointment_id: str) -> Appointment:
        return self.set_status(appointment_id, CANCELLED)

    def delete(self, appointment_id: str) -> Appointment:
        shop_id = self.get(appointment_id).shop_id
        with self.locks.for_shop(shop_id):
            appointments = self.appointments.load_all()
            target = self._find(appointments, appointment_id)
            self.appointments.save_all([a for a in appointments if a.id != target.id])

        logger.info("appointment_deleted", appointment_id=target.id, shop_id=shop_id)
        return target

    @staticmethod
    def _find(appointments: List[Appointment], appointment_id: str) -> Appointment:
        for appt in appointments:
            if appt.id == appointment_id:
                return appt
        raise NotFound("Appointment not found")
