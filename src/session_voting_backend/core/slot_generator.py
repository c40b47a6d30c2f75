'''
Candidate time slot generation for a voting week.
'''
from datetime import date, datetime, time, timedelta

from ..common.logger import log

SUNDAY = 6  # date.weekday(): 0=Mon, 6=Sun
WEEKEND_DAYS = (5, 6)

EVENING_SESSION = time(18, 0)
MORNING_SESSION = time(10, 0)
DAYS_PER_WEEK = 7


def next_deadline(today: date) -> date:
    """
    Returns the first Sunday strictly after `today`.
    On a Sunday this is the Sunday one week later, never today itself.
    """
    days_ahead = (SUNDAY - today.weekday()) % DAYS_PER_WEEK
    if days_ahead == 0:
        days_ahead = DAYS_PER_WEEK
    return today + timedelta(days=days_ahead)


def session_times_for(day: date) -> list[time]:
    """Every day gets an evening session; weekends also get a morning one."""
    if day.weekday() in WEEKEND_DAYS:
        return [MORNING_SESSION, EVENING_SESSION]
    return [EVENING_SESSION]


def generate_time_slots(deadline: date) -> list[datetime]:
    """
    Generates the candidate slots for the week served by `deadline`.

    The served week starts the day after the deadline (Monday, for a Sunday
    deadline) and spans seven days. Output is in chronological order.
    """
    start_date = deadline + timedelta(days=1)

    slots = []
    for day_offset in range(DAYS_PER_WEEK):
        day = start_date + timedelta(days=day_offset)
        for session_time in session_times_for(day):
            slots.append(datetime.combine(day, session_time))

    log.info(f"Generated {len(slots)} timeslots for week starting {start_date}")
    return slots
