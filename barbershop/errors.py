# barbershop/errors.py

class SchedulingError(Exception):
    """Base class for failures raised by the scheduling core."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class SlotConflict(SchedulingError):
    """The date/time/staff combination is held by a non-cancelled appointment."""

    status_code = 409


class NotFound(SchedulingError):
    status_code = 404


class InvalidConfiguration(SchedulingError):
    """Shop availability settings that cannot produce a slot grid."""

    status_code = 422


class InvalidRequest(SchedulingError):
    status_code = 422
