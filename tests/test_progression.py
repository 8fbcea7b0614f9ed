"""Tests für den Kursfortschritt aus gehaltenen Stunden."""

import random
from datetime import date

import pytest

from config.schema import ProgressionConfig
from grading.errors import InvalidTargetError
from grading.progression import (
    ProgressionStatus,
    compute_progression,
    course_progression,
    hours_completed,
    progression_status,
)
from models.session import CourseTarget, SessionLog


def _log(course_id: str, hours: float, day: int = 1) -> SessionLog:
    return SessionLog(course_id=course_id, date=date(2024, 9, day), duration_hours=hours)


# ─── BERECHNUNG ───────────────────────────────────────────────────────────────

class TestComputeProgression:
    def test_partial(self):
        assert compute_progression([2, 3], 20) == pytest.approx(25.0)

    def test_clamped_at_100(self):
        """12h bei 10h Soll → 100, nicht 120."""
        assert compute_progression([12], 10) == 100.0

    def test_clamped_25_of_20(self):
        """25h bei 20h Soll → 100, nicht 125."""
        assert compute_progression([10, 10, 5], 20) == 100.0

    def test_no_sessions_is_zero(self):
        assert compute_progression([], 40) == 0.0

    @pytest.mark.parametrize("planned", [0, -5])
    def test_invalid_target(self, planned):
        with pytest.raises(InvalidTargetError) as exc:
            compute_progression([2], planned)
        assert exc.value.planned_hours == planned

    @pytest.mark.parametrize("seed", range(15))
    def test_monotone_when_appending(self, seed: int):
        """Jede zusätzliche Einheit lässt den Fortschritt nie sinken."""
        rng = random.Random(seed)
        planned = rng.uniform(5, 60)
        durations: list[float] = []
        last = compute_progression(durations, planned)
        for _ in range(30):
            durations.append(rng.choice([0, 0.75, 1.5, 2.0]))
            current = compute_progression(durations, planned)
            assert current >= last
            assert 0.0 <= current <= 100.0
            last = current


class TestCourseProgression:
    def test_filters_other_courses(self):
        sessions = [_log("ma", 5), _log("de", 50), _log("ma", 5, day=2)]
        target = CourseTarget(course_id="ma", planned_hours=40)
        assert course_progression(target, sessions) == pytest.approx(25.0)

    def test_hours_completed(self):
        sessions = [_log("ma", 1.5), _log("de", 2), _log("ma", 2)]
        assert hours_completed("ma", sessions) == pytest.approx(3.5)
        assert hours_completed("ph", sessions) == 0

    def test_invalid_target_propagates(self):
        with pytest.raises(InvalidTargetError):
            course_progression(CourseTarget(course_id="ma", planned_hours=0), [])


# ─── EINSTUFUNG ───────────────────────────────────────────────────────────────

class TestProgressionStatus:
    @pytest.mark.parametrize("value,status", [
        (100, ProgressionStatus.ON_TRACK),
        (75, ProgressionStatus.ON_TRACK),
        (74.9, ProgressionStatus.ATTENTION),
        (50, ProgressionStatus.ATTENTION),
        (49.9, ProgressionStatus.IN_PROGRESS),
        (0, ProgressionStatus.IN_PROGRESS),
    ])
    def test_default_thresholds(self, value, status):
        assert progression_status(value, ProgressionConfig()) == status

    def test_custom_thresholds(self):
        config = ProgressionConfig(on_track_threshold=90, attention_threshold=30)
        assert progression_status(80, config) == ProgressionStatus.ATTENTION
