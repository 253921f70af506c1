"""
Time Compass - progress through the workday, workweek, semester and life,
with a focus countdown timer.
"""

__version__ = "1.0.0"

from time_compass.focus_timer import FocusTimerLogic, Permission, Phase
from time_compass.progress import TimeProgress, calculate_all
from time_compass.settings import SettingsError, SettingsStore, UserSettings

__all__ = [
    'FocusTimerLogic',
    'Permission',
    'Phase',
    'TimeProgress',
    'calculate_all',
    'SettingsError',
    'SettingsStore',
    'UserSettings',
]
