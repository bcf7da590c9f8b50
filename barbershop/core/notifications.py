# barbershop/core/notifications.py

"""Notification events produced by appointment lifecycle actions.

The core only builds the events; enqueuing them on an outbox is the
caller's job.
"""

from typing import List, Optional

from pydantic import BaseModel

CREATED = "created"
RESCHEDULED = "rescheduled"
CANCELLED = "cancelled"

EVENT_TYPES = {
    CREATED: "appointment_created",
    RESCHEDULED: "appointment_rescheduled",
    CANCELLED: "appointment_cancel",
}


class NotificationEvent(BaseModel):
    type: str
    recipient_id: str
    message: str
    related_appointment_id: Optional[str] = None
    related_shop_id: Optional[str] = None
    reason: Optional[str] = None


def counterparties(appointment, shop, actor_id: str) -> List[str]:
    """Who hears about an action taken by ``actor_id``.

    The client's action goes to the assigned staff member, or to the shop
    owner when nobody is assigned. Anyone else acting notifies the client.
    """
    if actor_id == appointment.client_id:
        if appointment.staff_id:
            return [appointment.staff_id]
        return [shop.owner_id] if shop is not None else []
    return [appointment.client_id]


def _describe(action: str, appointment, reason: Optional[str]) -> str:
    when = f"{appointment.date.isoformat()} {appointment.time}"
    if action == CREATED:
        message = f"New appointment with {appointment.client_name} on {when}"
    elif action == RESCHEDULED:
        message = f"Appointment at {appointment.shop_name} moved to {when}"
    else:
        message = f"Appointment at {appointment.shop_name} on {when} was cancelled"
        if reason:
            message += f". Reason: {reason}"
    return message


def appointment_events(
    action: str,
    appointment,
    shop,
    actor_id: str,
    reason: Optional[str] = None,
) -> List[NotificationEvent]:
    if action not in EVENT_TYPES:
        raise ValueError(f"Unknown appointment action: {action}")

    message = _describe(action, appointment, reason)
    return [
        NotificationEvent(
            type=EVENT_TYPES[action],
            recipient_id=recipient,
            message=message,
            related_appointment_id=appointment.id,
            related_shop_id=appointment.shop_id,
            reason=reason if action == CANCELLED else None,
        )
        for recipient in counterparties(appointment, shop, actor_id)
        if recipient != actor_id
    ]


def _membership_event(kind: str, shop, barber_name: str, verb: str) -> NotificationEvent:
    return NotificationEvent(
        type=kind,
        recipient_id=shop.owner_id,
        message=f"{barber_name} {verb} {shop.name}",
        related_shop_id=shop.id,
    )


def barber_join_event(shop, barber_name: str) -> NotificationEvent:
    return _membership_event("barber_join", shop, barber_name, "joined")


def barber_leave_event(shop, barber_name: str) -> NotificationEvent:
    return _membership_event("barber_leave", shop, barber_name, "left")
