# barbershop/stores.py

"""Storage seams consumed by the scheduling core.

The core never talks to a database directly. It reads accounts and shops
through the directories and treats ``AppointmentStore`` as a whole-collection
snapshot: ``load_all`` then ``save_all``.
"""

from typing import Iterable, List, Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .errors import SlotConflict
from .models import Account, Appointment, Notification, Shop


class AccountDirectory(Protocol):
    def find_by_id(self, account_id: str) -> Optional[Account]: ...

    def find_all(self) -> List[Account]: ...


class ShopDirectory(Protocol):
    def find_by_id(self, shop_id: str) -> Optional[Shop]: ...


class AppointmentStore(Protocol):
    def load_all(self) -> List[Appointment]: ...

    def save_all(self, appointments: Iterable[Appointment]) -> None: ...


class NotificationOutbox(Protocol):
    def enqueue(self, event) -> None: ...


def clone_appointment(appt: Appointment) -> Appointment:
    return Appointment(**appt.model_dump())


# =========================================================================
# In-memory implementations
# =========================================================================

class InMemoryAccountDirectory:
    def __init__(self, accounts: Iterable[Account] = ()):
        self.accounts = {account.id: account for account in accounts}

    def find_by_id(self, account_id: str) -> Optional[Account]:
        return self.accounts.get(account_id)

    def find_all(self) -> List[Account]:
        return list(self.accounts.values())


class InMemoryShopDirectory:
    def __init__(self, shops: Iterable[Shop] = ()):
        self.shops = {shop.id: shop for shop in shops}

    def find_by_id(self, shop_id: str) -> Optional[Shop]:
        return self.shops.get(shop_id)


class InMemoryAppointmentStore:
    """Hands out copies so callers work on a snapshot until ``save_all``."""

    def __init__(self, appointments: Iterable[Appointment] = ()):
        self._appointments = [clone_appointment(a) for a in appointments]

    def load_all(self) -> List[Appointment]:
        return [clone_appointment(a) for a in self._appointments]

    def save_all(self, appointments: Iterable[Appointment]) -> None:
        self._appointments = [clone_appointment(a) for a in appointments]


class InMemoryOutbox:
    def __init__(self):
        self.events = []

    def enqueue(self, event) -> None:
        self.events.append(event)

    def for_recipient(self, recipient_id: str) -> list:
        return [e for e in self.events if e.recipient_id == recipient_id]


# =========================================================================
# SQLModel implementations
# =========================================================================

class SqlAccountDirectory:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, account_id: str) -> Optional[Account]:
        return self.session.get(Account, account_id)

    def find_by_email(self, email: str) -> Optional[Account]:
        return self.session.exec(
            select(Account).where(Account.email == email)
        ).first()

    def find_all(self) -> List[Account]:
        return list(self.session.exec(select(Account)).all())


class SqlShopDirectory:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, shop_id: str) -> Optional[Shop]:
        return self.session.get(Shop, shop_id)


class SqlAppointmentStore:
    """Whole-set load/save over the ``appointment`` table.

    ``save_all`` upserts every given row and deletes rows that are no longer
    present, in one transaction. Any write that breaks the per-staff unique
    index, insert or update, is rolled back and raised as ``SlotConflict``.
    """

    def __init__(self, session: Session):
        self.session = session

    def load_all(self) -> List[Appointment]:
        rows = self.session.exec(
            select(Appointment).order_by(Appointment.date, Appointment.time)
        ).all()
        return [clone_appointment(row) for row in rows]

    def save_all(self, appointments: Iterable[Appointment]) -> None:
        appointments = list(appointments)
        keep = {appt.id for appt in appointments}

        try:
            # flush only in commit() so index violations are caught below
            with self.session.no_autoflush:
                existing = self.session.exec(select(Appointment)).all()
                for row in existing:
                    if row.id not in keep:
                        self.session.delete(row)

                for appt in appointments:
                    self.session.merge(appt)

            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise SlotConflict("Appointment already exists for that slot")


class SqlOutbox:
    def __init__(self, session: Session):
        self.session = session

    def enqueue(self, event) -> None:
        self.session.add(
            Notification(
                type=event.type,
                recipient_id=event.recipient_id,
                message=event.message,
                related_appointment_id=event.related_appointment_id,
                related_shop_id=event.related_shop_id,
                reason=event.reason,
            )
        )
        self.session.commit()

    def for_recipient(self, recipient_id: str) -> List[Notification]:
        return list(
            self.session.exec(
                select(Notification)
                .where(Notification.recipient_id == recipient_id)
                .order_by(Notification.created_at.desc())
            ).all()
        )

    def mark_read(self, notification_id: str, recipient_id: str) -> Optional[Notification]:
        note = self.session.get(Notification, notification_id)
        if note is None or note.recipient_id != recipient_id:
            return None
        note.read = True
        self.session.add(note)
        self.session.commit()
        self.session.refresh(note)
        return note

    def mark_all_read(self, recipient_id: str) -> int:
        unread = self.session.exec(
            select(Notification).where(
                Notification.recipient_id == recipient_id,
                Notification.read == False,
            )
        ).all()
        for note in unread:
            note.read = True
            self.session.add(note)
        self.session.commit()
        return len(unread)
