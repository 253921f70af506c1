from datetime import datetime, timedelta

import pytest

from time_compass.progress import (
    anchor_month_day,
    calculate_all,
    calculate_day_progress,
    calculate_life_progress,
    calculate_semester_progress,
    calculate_week_progress,
    clamp_percentage,
    find_semester,
    js_weekday,
    life_end,
    start_of_week,
)

# 2026-10-12 is a Monday
MONDAY = datetime(2026, 10, 12)


class TestDayProgress:
    def test_before_start_is_zero_and_inactive(self, settings):
        p = calculate_day_progress(settings, datetime(2026, 10, 14, 8, 59))
        assert p.percentage == 0
        assert not p.is_active
        assert p.subtext == "Work starts at 09:00."

    def test_long_before_start_is_still_zero(self, settings):
        assert calculate_day_progress(settings, datetime(2026, 10, 14, 0, 0)).percentage == 0

    def test_start_instant_is_zero_and_active(self, settings):
        p = calculate_day_progress(settings, datetime(2026, 10, 14, 9, 0))
        assert p.percentage == 0
        assert p.is_active
        assert p.subtext == "0h 0m elapsed, 9h 0m remaining."

    def test_end_instant_is_hundred(self, settings):
        p = calculate_day_progress(settings, datetime(2026, 10, 14, 18, 0))
        assert p.percentage == pytest.approx(100)
        assert p.is_active

    def test_after_end_is_complete(self, settings):
        for moment in (datetime(2026, 10, 14, 18, 0, 1), datetime(2026, 10, 14, 23, 59)):
            p = calculate_day_progress(settings, moment)
            assert p.percentage == 100
            assert p.is_active
            assert p.subtext == "Today's work is done."

    def test_midday_fraction_and_subtext(self, settings):
        p = calculate_day_progress(settings, datetime(2026, 10, 14, 13, 30))
        assert p.percentage == pytest.approx(50)
        assert p.subtext == "4h 30m elapsed, 4h 30m remaining."

    def test_subtext_floors_minutes(self, settings):
        p = calculate_day_progress(settings, datetime(2026, 10, 14, 10, 0, 59))
        assert p.subtext == "1h 0m elapsed, 7h 59m remaining."

    def test_monotonic_within_window(self, settings):
        moment = datetime(2026, 10, 14, 9, 0)
        last = -1.0
        while moment <= datetime(2026, 10, 14, 18, 0):
            pct = calculate_day_progress(settings, moment).percentage
            assert pct >= last
            last = pct
            moment += timedelta(minutes=7)

    def test_zero_length_window_is_complete(self, make_settings):
        s = make_settings(work_start_time="12:00", work_end_time="12:00")
        assert calculate_day_progress(s, datetime(2026, 10, 14, 12, 0)).percentage == 100
        assert calculate_day_progress(s, datetime(2026, 10, 14, 11, 0)).percentage == 0
        assert calculate_day_progress(s, datetime(2026, 10, 14, 13, 0)).percentage == 100


class TestWeekProgress:
    def test_start_of_week_is_monday_midnight(self):
        sunday_night = datetime(2026, 10, 18, 23, 30)
        assert start_of_week(sunday_night) == MONDAY
        assert start_of_week(MONDAY + timedelta(hours=5)) == MONDAY

    def test_js_weekday_uses_sunday_zero(self):
        assert js_weekday(MONDAY) == 1
        assert js_weekday(datetime(2026, 10, 18)) == 0
        assert js_weekday(datetime(2026, 10, 17)) == 6

    def test_no_work_days_is_zero(self, make_settings):
        s = make_settings(work_days=[])
        p = calculate_week_progress(s, datetime(2026, 10, 15, 12, 0))
        assert p.percentage == 0
        assert "(0d 0h left)" in p.subtext

    def test_monday_midnight_is_zero(self, settings):
        p = calculate_week_progress(settings, MONDAY)
        assert p.percentage == 0
        assert "(5d 0h left)" in p.subtext

    def test_midweek(self, settings):
        p = calculate_week_progress(settings, datetime(2026, 10, 14, 12, 0))
        assert p.percentage == pytest.approx(50)
        assert "(2d 12h left)" in p.subtext
        assert p.is_active

    def test_weekend_after_full_week(self, settings):
        assert calculate_week_progress(settings, datetime(2026, 10, 17, 10, 0)).percentage == 100
        assert calculate_week_progress(settings, datetime(2026, 10, 18, 23, 0)).percentage == 100

    def test_every_day_matches_fraction_since_monday(self, make_settings):
        s = make_settings(work_days=[0, 1, 2, 3, 4, 5, 6])
        now = datetime(2026, 10, 15, 6, 0)
        expected = (now - MONDAY) / timedelta(days=7) * 100
        assert calculate_week_progress(s, now).percentage == pytest.approx(expected)

    def test_sunday_only(self, make_settings):
        s = make_settings(work_days=[0])
        assert calculate_week_progress(s, datetime(2026, 10, 17, 20, 0)).percentage == 0
        assert calculate_week_progress(s, datetime(2026, 10, 18, 12, 0)).percentage == pytest.approx(50)


class TestSemesterProgress:
    def test_autumn_falls_in_range_starting_this_year(self, settings):
        now = datetime(2026, 10, 15)
        assert find_semester(settings, now) == (datetime(2026, 9, 1), datetime(2027, 1, 31))

        p = calculate_semester_progress(settings, now)
        assert p.is_active
        assert p.percentage == pytest.approx(44 / 152 * 100)
        assert "1 months 14 days elapsed" in p.subtext
        assert "3 months 18 days left" in p.subtext

    def test_january_falls_in_range_from_last_year(self, settings):
        now = datetime(2026, 1, 15)
        assert find_semester(settings, now) == (datetime(2025, 9, 1), datetime(2026, 1, 31))
        assert calculate_semester_progress(settings, now).is_active

    def test_spring_falls_in_second_semester(self, settings):
        assert find_semester(settings, datetime(2026, 4, 1, 12)) == (datetime(2026, 3, 1), datetime(2026, 6, 30))

    def test_summer_is_recess(self, settings):
        p = calculate_semester_progress(settings, datetime(2026, 7, 15))
        assert p.percentage == 0
        assert not p.is_active
        assert "on break" in p.subtext
        assert p.color_class == "slate"

    def test_bounds_are_midnight_inclusive(self, settings):
        assert calculate_semester_progress(settings, datetime(2026, 1, 31)).percentage == pytest.approx(100)
        assert not calculate_semester_progress(settings, datetime(2026, 1, 31, 12)).is_active

    def test_months_are_thirty_days(self, make_settings):
        s = make_settings(semester2_start="03-01", semester2_end="06-30")
        # 2026-03-01 + 61 days: two real months, but 2 x 30-day months plus 1 day
        p = calculate_semester_progress(s, datetime(2026, 5, 1))
        assert "2 months 1 days elapsed" in p.subtext

    def test_feb_29_clamps_in_common_years(self):
        assert anchor_month_day((2, 29), 2026) == datetime(2026, 2, 28)
        assert anchor_month_day((2, 29), 2028) == datetime(2028, 2, 29)


class TestLifeProgress:
    def test_birth_instant_is_zero(self, make_settings):
        s = make_settings(birth_date="2000-01-01", life_expectancy=80)
        assert calculate_life_progress(s, datetime(2000, 1, 1)).percentage == pytest.approx(0)

    def test_expectancy_instant_is_hundred(self, make_settings):
        s = make_settings(birth_date="2000-01-01", life_expectancy=80)
        assert calculate_life_progress(s, datetime(2080, 1, 1)).percentage == pytest.approx(100)

    def test_halfway_subtext(self, make_settings):
        s = make_settings(birth_date="2000-01-01", life_expectancy=80)
        p = calculate_life_progress(s, datetime(2040, 1, 1))
        assert p.percentage == pytest.approx(50)
        assert "(40.0 years past)" in p.subtext
        assert "about 40.0 years remain" in p.subtext
        assert p.is_active

    def test_unclamped_past_expectancy_and_before_birth(self, make_settings):
        s = make_settings(birth_date="2000-01-01", life_expectancy=80)
        assert calculate_life_progress(s, datetime(2090, 1, 1)).percentage > 100
        before = calculate_life_progress(s, datetime(1999, 1, 1))
        assert before.percentage < 0
        assert before.is_active
        assert "(-1.0 years past)" in before.subtext

    def test_leap_day_birth_clamps_to_feb_28(self, make_settings):
        s = make_settings(birth_date="2000-02-29", life_expectancy=1)
        assert life_end(s) == datetime(2001, 2, 28)


class TestRendering:
    def test_clamp(self):
        assert clamp_percentage(-5) == 0
        assert clamp_percentage(42.5) == 42.5
        assert clamp_percentage(130) == 100

    def test_calculate_all_order(self, settings):
        labels = [p.label for p in calculate_all(settings, datetime(2026, 10, 14, 12))]
        assert labels == ["Today's Work", "This Week's Workdays", "Semester", "Life"]
