"""Time helpers shared by the stores and the derived views."""

from datetime import date, datetime
from typing import Callable

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current local wall-clock time."""
    return datetime.now()


def to_local(moment: datetime) -> datetime:
    """Express a timestamp in local time; naive values are already local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def local_date(moment: datetime) -> date:
    return to_local(moment).date()


def with_offset(moment: datetime) -> datetime:
    """Attach the local UTC offset to a naive local timestamp."""
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment
