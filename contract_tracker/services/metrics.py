from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from ..dates.arithmetic import days_between, to_calendar_date
from ..models.contract_record import ContractRecord

"""Derived classifications consumed by the presentation layer.

Badge, sidebar counters, table filter and calendar markers are all computed
here from ContractRecords. Classification order is fixed: an expired record
is ``expired`` even when its status is ``online``.
"""

__all__ = [
    "CalendarEvent",
    "ContractClass",
    "ContractStats",
    "StatusFilter",
    "calendar_events",
    "classify",
    "compute_stats",
    "events_on",
    "filter_records",
    "is_due_soon",
    "is_expired",
    "remaining_days",
]

DUE_SOON_DAYS = 30
ONLINE_STATUS = "online"


class ContractClass(Enum):
    """Exactly one lifecycle class per record.

    - EXPIRED: days remaining <= 0
    - DUE_SOON: 0 < days remaining <= due_soon_days
    - ACTIVE_ONLINE: status is the online tag and more days remain
    - OTHER: anything else
    """
    EXPIRED = "expired"
    DUE_SOON = "dueSoon"
    ACTIVE_ONLINE = "activeOnline"
    OTHER = "other"


class StatusFilter(Enum):
    ALL = "Alle"
    ONLINE = "Online"
    DUE = "Fällig"
    EXPIRED = "Abgelaufen"


@dataclass(frozen=True)
class ContractStats:
    total: int
    online: int
    due: int
    expired: int


@dataclass(frozen=True)
class CalendarEvent:
    date: date
    title: str
    is_expired: bool
    is_due: bool


def remaining_days(record: ContractRecord, reference_now: date | datetime | None = None) -> int:
    """Days remaining, recomputed against ``reference_now`` when an end date exists."""
    if reference_now is None or record.end_date is None:
        return record.days_remaining
    ref = to_calendar_date(reference_now)
    if ref is None:
        return record.days_remaining
    return days_between(record.end_date, ref)


def is_expired(days: int) -> bool:
    return days <= 0


def is_due_soon(days: int, due_soon_days: int = DUE_SOON_DAYS) -> bool:
    return 0 < days <= due_soon_days


def classify(
    record: ContractRecord,
    reference_now: date | datetime | None = None,
    *,
    due_soon_days: int = DUE_SOON_DAYS,
    online_status: str = ONLINE_STATUS,
) -> ContractClass:
    days = remaining_days(record, reference_now)
    if is_expired(days):
        return ContractClass.EXPIRED
    if is_due_soon(days, due_soon_days):
        return ContractClass.DUE_SOON
    if record.status == online_status:
        return ContractClass.ACTIVE_ONLINE
    return ContractClass.OTHER


def compute_stats(
    records: Iterable[ContractRecord],
    *,
    due_soon_days: int = DUE_SOON_DAYS,
    online_status: str = ONLINE_STATUS,
) -> ContractStats:
    """Sidebar counters. Undated records count as expired (0 days remaining)."""
    total = online = due = expired = 0
    for r in records:
        total += 1
        cls = classify(r, due_soon_days=due_soon_days, online_status=online_status)
        if cls is ContractClass.EXPIRED:
            expired += 1
        elif cls is ContractClass.DUE_SOON:
            due += 1
        elif cls is ContractClass.ACTIVE_ONLINE:
            online += 1
    return ContractStats(total=total, online=online, due=due, expired=expired)


def filter_records(
    records: Iterable[ContractRecord],
    status_filter: StatusFilter = StatusFilter.ALL,
    search: str = "",
    *,
    due_soon_days: int = DUE_SOON_DAYS,
    online_status: str = ONLINE_STATUS,
) -> list[ContractRecord]:
    """Table filter: name search first, then the status filter.

    ``Fällig`` and ``Abgelaufen`` only match records that have an end date;
    ``Online`` matches by status and remaining days alone.
    """
    needle = search.lower()
    out: list[ContractRecord] = []
    for r in records:
        if needle and needle not in r.name.lower():
            continue
        if status_filter is StatusFilter.ALL:
            out.append(r)
            continue
        days = r.days_remaining
        if status_filter is StatusFilter.DUE:
            keep = r.end_date is not None and is_due_soon(days, due_soon_days)
        elif status_filter is StatusFilter.EXPIRED:
            keep = r.end_date is not None and is_expired(days)
        else:
            keep = r.status == online_status and days > due_soon_days
        if keep:
            out.append(r)
    return out


def calendar_events(
    records: Iterable[ContractRecord],
    *,
    due_soon_days: int = DUE_SOON_DAYS,
) -> list[CalendarEvent]:
    """One event per record with an end date, placed on that end date."""
    return [
        CalendarEvent(
            date=r.end_date,
            title=r.name,
            is_expired=is_expired(r.days_remaining),
            is_due=is_due_soon(r.days_remaining, due_soon_days),
        )
        for r in records
        if r.end_date is not None
    ]


def events_on(
    records: Iterable[ContractRecord],
    day: date | datetime,
    *,
    due_soon_days: int = DUE_SOON_DAYS,
) -> list[CalendarEvent]:
    target = to_calendar_date(day)
    return [e for e in calendar_events(records, due_soon_days=due_soon_days) if e.date == target]
