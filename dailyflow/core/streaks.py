"""
Streak calculation for habits and the day-log calendar.

A streak is a pure function of a set of completion dates and a reference
"today". Nothing here trusts a previously cached value: every caller that
mutates a completion set recomputes through calculate_streak().
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Set

from pydantic import BaseModel

from dailyflow.core.models import AppData, DayRecord, DayStatus, Habit
from dailyflow.utils.datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class StreakResult(BaseModel):
    """Current and best run lengths, in days"""
    current: int = 0
    best: int = 0


def parse_completion_dates(values: Iterable, today: Optional[date] = None) -> Set[date]:
    """
    Turn raw completion entries into a set of dates.

    Malformed entries are logged and skipped. When today is given, dates
    after it are dropped as well.
    """
    dates = set()
    skipped = 0

    for value in values or ():
        parsed = parse_iso_date(value)
        if parsed is None:
            skipped += 1
            logger.warning("Skipping malformed completion date %r", value)
            continue
        if today is not None and parsed > today:
            logger.debug("Ignoring completion date %s after %s", parsed, today)
            continue
        dates.add(parsed)

    if skipped:
        logger.info("Skipped %d malformed completion date(s)", skipped)

    return dates


def current_streak(dates: Set[date], today: date) -> int:
    """Consecutive days ending at today; 0 when today has no completion"""
    streak = 0
    check_date = today

    while check_date in dates:
        streak += 1
        check_date -= ONE_DAY

    return streak


def best_streak(dates: Iterable[date]) -> int:
    """Longest run of calendar-adjacent dates"""
    best = 0
    run = 0
    previous = None

    for d in sorted(set(dates)):
        if previous is not None and d - previous == ONE_DAY:
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = d

    return best


def calculate_streak(values: Iterable, today: date) -> StreakResult:
    """Current and best streak for raw completion entries"""
    dates = parse_completion_dates(values, today)
    if not dates:
        return StreakResult()

    return StreakResult(
        current=current_streak(dates, today),
        best=best_streak(dates)
    )


def habit_streak(habit: Habit, today: date) -> StreakResult:
    return calculate_streak(habit.completed_dates, today)


def recalculate_habit(habit: Habit, today: date) -> StreakResult:
    """Recompute a habit's streak from scratch and refresh its cached value"""
    result = habit_streak(habit, today)

    if habit.current_streak != result.current:
        logger.debug(
            "Habit %s streak %d -> %d", habit.id, habit.current_streak, result.current
        )
        habit.current_streak = result.current

    return result


def recalculate_all_habits(data: AppData, today: date) -> Dict[str, StreakResult]:
    return {habit.id: recalculate_habit(habit, today) for habit in data.habits}


def completed_calendar_dates(calendar: Mapping[str, DayRecord], today: Optional[date] = None) -> Set[date]:
    """Dates whose day record has status completed"""
    completed = [
        key for key, record in calendar.items()
        if record.status == DayStatus.COMPLETED
    ]
    return parse_completion_dates(completed, today)


def calendar_best_streak(calendar: Mapping[str, DayRecord], today: Optional[date] = None) -> int:
    """
    Longest run of completed records taken in date order.

    Only a record that is not completed ends a run; dates without a record
    are not part of the log and are passed over.
    """
    records = []
    for key, record in calendar.items():
        parsed = parse_iso_date(key)
        if parsed is None:
            logger.warning("Skipping calendar entry with malformed date %r", key)
            continue
        if today is not None and parsed > today:
            continue
        records.append((parsed, record))

    best = 0
    run = 0
    for _, record in sorted(records, key=lambda item: item[0]):
        if record.status == DayStatus.COMPLETED:
            run += 1
            best = max(best, run)
        else:
            run = 0

    return best


def calendar_streak(calendar: Mapping[str, DayRecord], today: date) -> StreakResult:
    """
    Streak of completed days in the day log.

    The current streak walks back from today and stops at the first date
    without a completed record. The best streak is calendar_best_streak().
    """
    dates = completed_calendar_dates(calendar, today)
    if not dates:
        return StreakResult()

    return StreakResult(
        current=current_streak(dates, today),
        best=calendar_best_streak(calendar, today)
    )


def streak_runs(values: Iterable, today: date) -> List[Dict[str, object]]:
    """All maximal runs, oldest first, as {start, end, length} dicts"""
    runs = []
    start = previous = None

    for d in sorted(parse_completion_dates(values, today)):
        if previous is not None and d - previous == ONE_DAY:
            previous = d
            continue
        if start is not None:
            runs.append({"start": start, "end": previous, "length": (previous - start).days + 1})
        start = previous = d

    if start is not None:
        runs.append({"start": start, "end": previous, "length": (previous - start).days + 1})

    return runs
