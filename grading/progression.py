"""Kursfortschritt aus gehaltenen Stunden.

Fortschritt = clamp(100 * Summe(Dauer) / Soll, 0, 100).

Der Wert wird bei jedem Aufruf aus der vollständigen Stundensumme neu
berechnet. Damit ist er bei wachsender Stundenliste monoton nicht fallend,
und ein gespeicherter Fortschritt ist nur ein Zwischenspeicher.
"""

from enum import Enum
from typing import Iterable

from config.schema import ProgressionConfig
from grading.errors import InvalidTargetError
from models.session import CourseTarget, SessionLog


class ProgressionStatus(str, Enum):
    ON_TRACK = "on_track"
    ATTENTION = "attention"
    IN_PROGRESS = "in_progress"


def compute_progression(durations: Iterable[float], planned_hours: float) -> float:
    """Fortschritt in Prozent, auf [0, 100] begrenzt.

    Raises:
        InvalidTargetError: wenn planned_hours ≤ 0.
    """
    if planned_hours <= 0:
        raise InvalidTargetError(planned_hours)
    done = sum(durations)
    return max(0.0, min(100.0, 100.0 * done / planned_hours))


def hours_completed(course_id: str, sessions: Iterable[SessionLog]) -> float:
    """Summe der gehaltenen Stunden eines Kurses."""
    return sum(s.duration_hours for s in sessions if s.course_id == course_id)


def course_progression(target: CourseTarget, sessions: Iterable[SessionLog]) -> float:
    """Fortschritt eines Kurses; Einheiten anderer Kurse werden ignoriert."""
    return compute_progression(
        (s.duration_hours for s in sessions if s.course_id == target.course_id),
        target.planned_hours,
    )


def progression_status(value: float, config: ProgressionConfig) -> ProgressionStatus:
    """Einstufung für Dashboard und Kursliste (≥75 auf Kurs, ≥50 Achtung)."""
    if value >= config.on_track_threshold:
        return ProgressionStatus.ON_TRACK
    if value >= config.attention_threshold:
        return ProgressionStatus.ATTENTION
    return ProgressionStatus.IN_PROGRESS
