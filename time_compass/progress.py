"""
Progress calculators for the four time windows.

Each calculator is a pure function of (settings, now) that returns a
TimeProgress. `now` is a naive local datetime. Percentages are left
unclamped here; clamp_percentage() is applied only when rendering.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

DAY = timedelta(days=1)
HOUR = timedelta(hours=1)
MINUTE = timedelta(minutes=1)
# Life progress converts to years with a fixed Julian year
YEAR = timedelta(days=365.25)
# Semester subtext counts 30-day months, not calendar months
MONTH_DAYS = 30


@dataclass(frozen=True)
class TimeProgress:
    percentage: float
    label: str
    subtext: str
    color_class: str
    is_active: bool


def clamp_percentage(percentage: float) -> float:
    return min(max(percentage, 0.0), 100.0)


def js_weekday(moment) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday"""
    return moment.isoweekday() % 7


def _hours_minutes(delta):
    hours, rest = divmod(delta, HOUR)
    return hours, rest // MINUTE


# ===================== DAY =====================

def calculate_day_progress(settings, now: datetime) -> TimeProgress:
    start_h, start_m = settings.work_start
    end_h, end_m = settings.work_end
    start = now.replace(hour=start_h, minute=start_m, second=0, microsecond=0)
    end = now.replace(hour=end_h, minute=end_m, second=0, microsecond=0)

    label = "Today's Work"
    color = "emerald"

    if now < start:
        return TimeProgress(0.0, label, f"Work starts at {settings.work_start_time}.", color, False)
    if now > end:
        return TimeProgress(100.0, label, "Today's work is done.", color, True)
    if end == start:
        # Zero-length window: nothing left to do
        return TimeProgress(100.0, label, "Today's work is done.", color, True)

    elapsed = now - start
    remaining = end - now
    percentage = elapsed / (end - start) * 100

    elapsed_h, elapsed_m = _hours_minutes(elapsed)
    remain_h, remain_m = _hours_minutes(remaining)
    subtext = f"{elapsed_h}h {elapsed_m}m elapsed, {remain_h}h {remain_m}m remaining."
    return TimeProgress(percentage, label, subtext, color, True)


# ===================== WEEK =====================

def start_of_week(now: datetime) -> datetime:
    """Monday 00:00 of the week containing now"""
    monday = now - timedelta(days=now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def calculate_week_progress(settings, now: datetime) -> TimeProgress:
    week_start = start_of_week(now)
    work_days = set(settings.work_days)

    total = timedelta(0)
    elapsed = timedelta(0)
    for offset in range(7):
        day_start = week_start + timedelta(days=offset)
        if js_weekday(day_start) not in work_days:
            continue

        total += DAY
        day_end = day_start + DAY
        if now >= day_end:
            elapsed += DAY
        elif now > day_start:
            elapsed += now - day_start

    percentage = 0.0 if not total else elapsed / total * 100

    remaining = total - elapsed
    days_left, rest = divmod(remaining, DAY)
    hours_left = rest // HOUR

    subtext = (f"{percentage:.1f}% of this week's workdays gone "
               f"({days_left}d {hours_left}h left). Make every minute count.")
    return TimeProgress(percentage, "This Week's Workdays", subtext, "blue", True)


# ===================== SEMESTER =====================

def anchor_month_day(month_day, year: int) -> datetime:
    """Local midnight of (month, day) in year; Feb 29 clamps to Feb 28"""
    month, day = month_day
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, min(day, last_day))


def semester_ranges(settings, year: int):
    """Candidate ranges in match order: sem1 Y->Y+1, sem1 Y-1->Y, sem2 Y->Y"""
    (s1_start, s1_end), (s2_start, s2_end) = settings.semester1, settings.semester2
    return [
        (anchor_month_day(s1_start, year), anchor_month_day(s1_end, year + 1)),
        (anchor_month_day(s1_start, year - 1), anchor_month_day(s1_end, year)),
        (anchor_month_day(s2_start, year), anchor_month_day(s2_end, year)),
    ]


def find_semester(settings, now: datetime):
    for range_start, range_end in semester_ranges(settings, now.year):
        if range_start <= now <= range_end:
            return range_start, range_end
    return None


def _months_days(delta):
    days = delta // DAY
    return divmod(days, MONTH_DAYS)


def calculate_semester_progress(settings, now: datetime) -> TimeProgress:
    label = "Semester"
    found = find_semester(settings, now)
    if found is None:
        return TimeProgress(0.0, label, "Not in a semester right now (on break). Rest well!", "slate", False)

    range_start, range_end = found
    total = range_end - range_start
    elapsed = now - range_start
    # A same-day range only matches at its own midnight
    percentage = 100.0 if not total else elapsed / total * 100

    elapsed_months, elapsed_days = _months_days(elapsed)
    remain_months, remain_days = _months_days(total - elapsed)
    subtext = (f"{percentage:.1f}% of this semester gone "
               f"({elapsed_months} months {elapsed_days} days elapsed, "
               f"{remain_months} months {remain_days} days left). Stay focused on learning!")
    return TimeProgress(percentage, label, subtext, "purple", True)


# ===================== LIFE =====================

def life_end(settings) -> datetime:
    """Birth date plus life_expectancy calendar years (Feb 29 -> Feb 28)"""
    birth = settings.birth
    end = birth + relativedelta(years=settings.life_expectancy)
    return datetime(end.year, end.month, end.day)


def calculate_life_progress(settings, now: datetime) -> TimeProgress:
    birth = settings.birth
    birth_dt = datetime(birth.year, birth.month, birth.day)
    total = life_end(settings) - birth_dt
    elapsed = now - birth_dt
    # Not clamped: past life expectancy reads above 100, a future birth date below 0
    percentage = elapsed / total * 100

    years_past = elapsed / YEAR
    years_left = (total - elapsed) / YEAR
    subtext = (f"You have lived {percentage:.1f}% of your life ({years_past:.1f} years past), "
               f"about {years_left:.1f} years remain. Time is finite; cherish every minute.")
    return TimeProgress(percentage, "Life", subtext, "red", True)


def calculate_all(settings, now: datetime):
    """Day, week, semester and life progress for one tick"""
    return (
        calculate_day_progress(settings, now),
        calculate_week_progress(settings, now),
        calculate_semester_progress(settings, now),
        calculate_life_progress(settings, now),
    )
