# barbershop/data.py

# 0=Mon .. 6=Sun, the names the booking forms show
WEEKDAY_NAMES = (
    "Lunes",
    "Martes",
    "Miércoles",
    "Jueves",
    "Viernes",
    "Sábado",
    "Domingo",
)

# default grid step when a shop has no custom slot list
SLOT_MINUTES = 60

DEFAULT_SLOT_DURATION = 60

STAFF_NOT_FOUND = "Barber not found"
SHOP_NOT_FOUND = "Shop not found"


def weekday_from_name(value) -> int:
    """Translate a weekday name (or an int already) to 0=Mon .. 6=Sun."""
    if isinstance(value, int):
        return value
    lowered = str(value).strip().lower()
    for index, name in enumerate(WEEKDAY_NAMES):
        if name.lower() == lowered:
            return index
    if lowered.isdigit():
        return int(lowered)
    raise ValueError(f"Unknown weekday: {value}")
