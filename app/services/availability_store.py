# app/services/availability_store.py
"""
Per-date slot storage for a technician calendar (or the studio calendar).

get/save/delete are plain reads and overwrites. add_slots and remove_slot
are read-merge-write cycles protected by the record's version counter: a
concurrent writer makes the flush fail with StaleDataError (or IntegrityError
when two writers create the first record for a date), the session is rolled
back and the cycle runs again on fresh data.
"""
import logging
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import settings
from app.core.errors import AvailabilityConflict, ValidationFailed
from app.db.models.availability import AvailabilityRecord
from app.services.slots import merge_slots, remove_slots
from app.services.timefmt import canonical_time

logger = logging.getLogger(__name__)

STUDIO_SCOPE = "studio"


def scope_for(technician_id: Optional[str]) -> str:
    return technician_id or STUDIO_SCOPE


def _get_record(db: Session, scope: str, day: date) -> Optional[AvailabilityRecord]:
    return (
        db.query(AvailabilityRecord)
        .filter(AvailabilityRecord.scope == scope, AvailabilityRecord.date == day)
        .first()
    )


def get_slots(db: Session, scope: str, day: date) -> List[str]:
    record = _get_record(db, scope, day)
    if record is None:
        return []
    return list(record.slots or [])


def save_slots(db: Session, scope: str, day: date, slots: Iterable[str]) -> List[str]:
    """Overwrite the slots for ``day`` with exactly ``slots`` (no merge)."""
    slots = list(slots)
    seen = set()
    for slot in slots:
        key = canonical_time(slot)
        if key in seen:
            raise ValidationFailed(f"Duplicate slot {slot!r}", field="slots")
        seen.add(key)

    record = _get_record(db, scope, day)
    if record is None:
        record = AvailabilityRecord(scope=scope, date=day, slots=slots)
        db.add(record)
    else:
        record.slots = slots
    try:
        db.commit()
    except (StaleDataError, IntegrityError):
        db.rollback()
        raise AvailabilityConflict(f"Availability for {day.isoformat()} changed while saving")
    logger.info(f"Saved {len(slots)} slot(s) for {scope} on {day.isoformat()}")
    return list(record.slots)


def delete_slots(db: Session, scope: str, day: date) -> bool:
    record = _get_record(db, scope, day)
    if record is None:
        return False
    db.delete(record)
    db.commit()
    logger.info(f"Deleted availability for {scope} on {day.isoformat()}")
    return True


def get_slots_for_range(db: Session, scope: str, start: date, end: date) -> Dict[str, List[str]]:
    """
    Slots for every date in [start, end] that has a record, keyed by ISO date.
    One lookup per day; ranges are capped by CALENDAR_MAX_RANGE_DAYS.
    """
    if end < start:
        raise ValidationFailed("end date must not be before start date", field="end")
    days = (end - start).days + 1
    if days > settings.calendar_max_range_days:
        raise ValidationFailed(
            f"Date range too long ({days} days, max {settings.calendar_max_range_days})", field="end"
        )

    result = {}
    for offset in range(days):
        day = start + timedelta(days=offset)
        slots = get_slots(db, scope, day)
        if slots:
            result[day.isoformat()] = slots
    return result


def _read_merge_write(db: Session, scope: str, day: date, apply: Callable[[List[str]], List[str]]) -> List[str]:
    attempts = max(1, settings.availability_max_retries)
    for attempt in range(1, attempts + 1):
        record = _get_record(db, scope, day)
        if record is None:
            record = AvailabilityRecord(scope=scope, date=day, slots=apply([]))
            db.add(record)
        else:
            # assign a new list so the JSON column registers the change
            record.slots = apply(list(record.slots or []))
        try:
            db.commit()
        except (StaleDataError, IntegrityError) as exc:
            db.rollback()
            logger.warning(
                f"Availability write conflict for {scope} on {day.isoformat()} "
                f"(attempt {attempt}/{attempts}): {exc.__class__.__name__}"
            )
            continue
        return list(record.slots)

    raise AvailabilityConflict(
        f"Availability for {day.isoformat()} kept changing, please reload and try again"
    )


def add_slots(db: Session, scope: str, day: date, incoming: Iterable[str]) -> List[str]:
    """Merge ``incoming`` into the slots already published for ``day``."""
    incoming = list(incoming)
    # validate before touching the store
    merge_slots([], incoming)
    slots = _read_merge_write(db, scope, day, lambda existing: merge_slots(existing, incoming))
    logger.info(f"Added {len(incoming)} slot(s) for {scope} on {day.isoformat()}, now {len(slots)}")
    return slots


def add_slots_for_dates(db: Session, scope: str, days: Iterable[date], incoming: Iterable[str]) -> Dict[str, List[str]]:
    incoming = list(incoming)
    merge_slots([], incoming)
    return {day.isoformat(): add_slots(db, scope, day, incoming) for day in days}


def remove_slot(db: Session, scope: str, day: date, slot: str) -> List[str]:
    canonical_time(slot)
    if _get_record(db, scope, day) is None:
        return []
    slots = _read_merge_write(db, scope, day, lambda existing: remove_slots(existing, [slot]))
    logger.info(f"Removed slot {slot} for {scope} on {day.isoformat()}")
    return slots
