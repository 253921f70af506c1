"""
User settings: defaults, validation and the persisted store.

The settings record lives in the ConfigManager blob under SETTINGS_KEY.
Loading shallow-merges the stored record over DEFAULT_SETTINGS, so fields
added in newer versions are back-filled and older files keep working.
"""

import calendar
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime
from typing import Callable, List, Tuple

logger = logging.getLogger('time_compass.settings')

SETTINGS_KEY = "timeCompassSettings"

DEFAULT_SETTINGS = {
    "birth_date": "1990-01-01",
    "life_expectancy": 80,
    "work_start_time": "09:00",
    "work_end_time": "18:00",
    "focus_duration": 45,
    "has_onboarded": False,
    "work_days": [1, 2, 3, 4, 5],  # Monday to Friday
    "semester1_start": "09-01",
    "semester1_end": "01-31",
    "semester2_start": "03-01",
    "semester2_end": "06-30",
}


class SettingsError(ValueError):
    """Raised when a settings value cannot be accepted"""


MAX_LIFE_EXPECTANCY = 150
# birth year + life expectancy must stay representable as a datetime
MAX_LIFE_END_YEAR = datetime.max.year


# ===================== PARSERS =====================

def parse_date(value: str) -> date:
    """'YYYY-MM-DD' -> date"""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise SettingsError(f"expected a YYYY-MM-DD date, got {value!r}")


def parse_clock(value: str) -> Tuple[int, int]:
    """'HH:MM' -> (hour, minute)"""
    try:
        parsed = datetime.strptime(value, "%H:%M")
    except (TypeError, ValueError):
        raise SettingsError(f"expected an HH:MM time, got {value!r}")
    return parsed.hour, parsed.minute


def parse_month_day(value: str) -> Tuple[int, int]:
    """'MM-DD' -> (month, day); Feb 29 is accepted"""
    try:
        month_s, day_s = value.split("-")
        month, day = int(month_s), int(day_s)
    except (AttributeError, TypeError, ValueError):
        raise SettingsError(f"expected an MM-DD month-day, got {value!r}")
    # 2000 is a leap year, so every real month-day fits
    if not 1 <= month <= 12 or not 1 <= day <= calendar.monthrange(2000, month)[1]:
        raise SettingsError(f"{value!r} is not a valid month-day")
    return month, day


# ===================== FIELD NORMALIZERS =====================

def _date_field(value):
    return parse_date(value).isoformat()


def _clock_field(value):
    hour, minute = parse_clock(value)
    return f"{hour:02d}:{minute:02d}"


def _month_day_field(value):
    month, day = parse_month_day(value)
    return f"{month:02d}-{day:02d}"


def _positive_int_field(value):
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise SettingsError(f"expected a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise SettingsError(f"expected a positive integer, got {value!r}")
    if number <= 0:
        raise SettingsError(f"expected a positive integer, got {value!r}")
    return number


def _life_expectancy_field(value):
    years = _positive_int_field(value)
    if years > MAX_LIFE_EXPECTANCY:
        raise SettingsError(f"life expectancy must be at most {MAX_LIFE_EXPECTANCY} years, got {years}")
    return years


def _bool_field(value):
    if not isinstance(value, bool):
        raise SettingsError(f"expected true/false, got {value!r}")
    return value


def _work_days_field(value):
    if not isinstance(value, (list, tuple, set)):
        raise SettingsError(f"expected a list of weekday indices, got {value!r}")
    days = set()
    for day in value:
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise SettingsError(f"weekday index must be 0-6 (0=Sunday), got {day!r}")
        days.add(day)
    return sorted(days)


FIELD_NORMALIZERS = {
    "birth_date": _date_field,
    "life_expectancy": _life_expectancy_field,
    "work_start_time": _clock_field,
    "work_end_time": _clock_field,
    "focus_duration": _positive_int_field,
    "has_onboarded": _bool_field,
    "work_days": _work_days_field,
    "semester1_start": _month_day_field,
    "semester1_end": _month_day_field,
    "semester2_start": _month_day_field,
    "semester2_end": _month_day_field,
}


# ===================== MODEL =====================

@dataclass
class UserSettings:
    birth_date: str = DEFAULT_SETTINGS["birth_date"]
    life_expectancy: int = DEFAULT_SETTINGS["life_expectancy"]
    work_start_time: str = DEFAULT_SETTINGS["work_start_time"]
    work_end_time: str = DEFAULT_SETTINGS["work_end_time"]
    focus_duration: int = DEFAULT_SETTINGS["focus_duration"]
    has_onboarded: bool = DEFAULT_SETTINGS["has_onboarded"]
    work_days: List[int] = field(default_factory=lambda: list(DEFAULT_SETTINGS["work_days"]))
    semester1_start: str = DEFAULT_SETTINGS["semester1_start"]
    semester1_end: str = DEFAULT_SETTINGS["semester1_end"]
    semester2_start: str = DEFAULT_SETTINGS["semester2_start"]
    semester2_end: str = DEFAULT_SETTINGS["semester2_end"]

    @classmethod
    def from_dict(cls, data, strict=False) -> "UserSettings":
        """
        Merge data over the defaults and normalize every field.

        With strict=False an invalid value is replaced by its default and
        logged; with strict=True it raises SettingsError naming the field.
        """
        merged = dict(DEFAULT_SETTINGS)
        for key, value in data.items():
            if key in FIELD_NORMALIZERS:
                merged[key] = value
            elif strict:
                raise SettingsError(f"unknown setting: {key}")
            else:
                logger.debug(f"Dropping unknown stored setting {key!r}")

        values = {}
        for name, normalize in FIELD_NORMALIZERS.items():
            try:
                values[name] = normalize(merged[name])
            except SettingsError as e:
                if strict:
                    raise SettingsError(f"{name}: {e}")
                logger.warning(f"Invalid stored setting {name}, using default: {e}")
                values[name] = normalize(DEFAULT_SETTINGS[name])

        end_year = parse_date(values["birth_date"]).year + values["life_expectancy"]
        if end_year > MAX_LIFE_END_YEAR:
            msg = f"birth date plus life expectancy reaches year {end_year}, past {MAX_LIFE_END_YEAR}"
            if strict:
                raise SettingsError(f"birth_date: {msg}")
            logger.warning(f"Invalid stored setting birth_date, using default: {msg}")
            values["birth_date"] = DEFAULT_SETTINGS["birth_date"]
        return cls(**values)

    def to_dict(self):
        return asdict(self)

    @property
    def birth(self) -> date:
        return parse_date(self.birth_date)

    @property
    def work_start(self) -> Tuple[int, int]:
        return parse_clock(self.work_start_time)

    @property
    def work_end(self) -> Tuple[int, int]:
        return parse_clock(self.work_end_time)

    @property
    def semester1(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return parse_month_day(self.semester1_start), parse_month_day(self.semester1_end)

    @property
    def semester2(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return parse_month_day(self.semester2_start), parse_month_day(self.semester2_end)


SETTINGS_FIELDS = tuple(f.name for f in fields(UserSettings))


# ===================== STORE =====================

class SettingsStore:
    """Owns the single UserSettings instance and writes it through on change"""

    def __init__(self, config_mgr):
        self.config = config_mgr
        self._listeners: List[Callable[[UserSettings], None]] = []

        stored = self.config.get(SETTINGS_KEY)
        if stored is None:
            stored = {}
        elif not isinstance(stored, dict):
            logger.warning("Stored settings are not an object, using defaults")
            stored = {}
        self.settings = UserSettings.from_dict(stored)
        self.save()

    def save(self):
        self.config.set(SETTINGS_KEY, self.settings.to_dict())

    def subscribe(self, callback: Callable[[UserSettings], None]):
        self._listeners.append(callback)

    def update(self, **changes) -> UserSettings:
        """Apply changes, persist, and notify listeners. Raises SettingsError."""
        merged = self.settings.to_dict()
        merged.update(changes)
        new_settings = UserSettings.from_dict(merged, strict=True)
        if new_settings == self.settings:
            return self.settings

        self.settings = new_settings
        self.save()
        logger.info(f"Settings updated: {', '.join(sorted(changes))}")
        for callback in list(self._listeners):
            callback(new_settings)
        return new_settings
