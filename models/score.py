"""Datenmodelle für Noten und Prüfungen (Pydantic v2)."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EvaluationKind(str, Enum):
    QUIZ = "quiz"
    EXAM = "exam"
    PRACTICAL = "practical"
    ORAL = "oral"


class EvaluationSpec(BaseModel):
    """Eine Prüfung eines Kurses (Test, Klausur, Praktikum, Mündlich)."""

    id: str                                   # stabiler Schlüssel, unabhängig vom Namen
    course_id: str
    name: str                                 # "Klausur 1"
    kind: EvaluationKind = EvaluationKind.QUIZ
    weight: Optional[float] = Field(None, ge=0.1, le=10.0)  # None → Koeffizient der Prüfungsart
    held_on: Optional[date] = None            # Prüfungsdatum
    description: Optional[str] = None


class ScoreRecord(BaseModel):
    """Eine Note eines Schülers in einer Prüfung.

    Identität ist (student_id, course_id, evaluation_id): pro Identität gilt
    nur der zuletzt erfasste Wert.
    """

    student_id: str
    course_id: str
    evaluation_id: str
    value: float
    weight: Optional[float] = None            # None → aus der Prüfung ableiten
    recorded_date: Optional[date] = None
    comment: Optional[str] = Field(None, max_length=500)

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.student_id, self.course_id, self.evaluation_id)
