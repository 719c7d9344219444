# app/services/slots.py
from typing import Iterable, List

from app.services.timefmt import canonical_time, to_12_hour


def _by_canonical(slots: Iterable[str]) -> dict:
    return {canonical_time(slot): slot for slot in slots}


def merge_slots(existing: Iterable[str], incoming: Iterable[str]) -> List[str]:
    """
    Union of two slot lists.
    Entries are compared on their 24-hour value, so "9:00 AM" and "09:00"
    are the same slot. Result is chronological and in 12-hour display form.
    """
    keys = set(_by_canonical(existing)) | set(_by_canonical(incoming))
    # zero-padded HH:MM sorts chronologically as text
    return [to_12_hour(key) for key in sorted(keys)]


def remove_slots(existing: Iterable[str], to_remove: Iterable[str]) -> List[str]:
    drop = set(_by_canonical(to_remove))
    keys = set(_by_canonical(existing)) - drop
    return [to_12_hour(key) for key in sorted(keys)]


def contains_slot(slots: Iterable[str], time: str) -> bool:
    wanted = canonical_time(time)
    return any(canonical_time(slot) == wanted for slot in slots)
