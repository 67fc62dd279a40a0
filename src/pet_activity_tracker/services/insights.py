"""Derived views over the activity store: daily summary and walk reminder."""

from datetime import datetime
from typing import Iterable, List

from ..domain.clock import local_date, to_local, with_offset
from ..domain.models import Activity, ActivityType, Reminder, Summary

REMINDER_HOUR = 18


def filter_today(activities: Iterable[Activity], reference: datetime) -> List[Activity]:
    """Activities whose local calendar day matches that of ``reference``."""
    today = local_date(reference)
    return [a for a in activities if local_date(a.date_time) == today]


def of_type(activities: Iterable[Activity], activity_type: ActivityType) -> List[Activity]:
    return [a for a in activities if a.type == activity_type]


def summarize(activities: Iterable[Activity], reference: datetime) -> Summary:
    """Aggregate today's activities.

    ``walks`` is the total walk duration in minutes; ``meals`` and
    ``medications`` are counts.
    """
    todays = filter_today(activities, reference)
    walks = sum(a.duration for a in of_type(todays, ActivityType.WALK))
    return Summary(
        walks=int(walks) if float(walks).is_integer() else walks,
        meals=len(of_type(todays, ActivityType.MEAL)),
        medications=len(of_type(todays, ActivityType.MEDICATION)),
        total_activities=len(todays),
    )


def evaluate_reminder(
    activities: Iterable[Activity],
    current_pet: str,
    now: datetime,
    reminder_hour: int = REMINDER_HOUR,
) -> Reminder:
    """Decide whether the evening walk reminder should be shown."""
    reminder = Reminder(current_time=with_offset(now))
    if to_local(now).hour < reminder_hour or not current_pet:
        return reminder

    if not of_type(filter_today(activities, now), ActivityType.WALK):
        reminder.show_reminder = True
        reminder.message = f"{current_pet} still needs exercise today!"
    return reminder
