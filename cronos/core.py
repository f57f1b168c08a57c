# cronos/core.py

from datetime import datetime
from typing import Iterable, List, Optional

from .schemas import Appointment, AppointmentStatus


def _instant(value: datetime) -> float:
    # naive values are local wall-clock, aware ones carry their own offset
    return value.timestamp()


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open [start, end) intersection. Touching intervals do not overlap."""
    return _instant(a_start) < _instant(b_end) and _instant(a_end) > _instant(b_start)


def _competes(
    existing: Appointment,
    provider_id: Optional[str],
    exclude_id: Optional[str],
) -> bool:
    if existing.status == AppointmentStatus.cancelled:
        return False
    if exclude_id and existing.id == exclude_id:
        return False
    # Only skip when both sides name a provider and they differ.
    # A providerless side is compared against everything.
    if provider_id and existing.provider_id and provider_id != existing.provider_id:
        return False
    return True


def find_conflicts(
    start: datetime,
    end: datetime,
    provider_id: Optional[str],
    exclude_id: Optional[str],
    appointments: Iterable[Appointment],
) -> List[Appointment]:
    return [
        a for a in appointments
        if _competes(a, provider_id, exclude_id) and overlaps(start, end, a.start, a.end)
    ]


def has_conflict(
    start: datetime,
    end: datetime,
    provider_id: Optional[str],
    exclude_id: Optional[str],
    appointments: Iterable[Appointment],
) -> bool:
    for a in appointments:
        if not _competes(a, provider_id, exclude_id):
            continue
        if overlaps(start, end, a.start, a.end):
            return True
    return False
