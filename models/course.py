"""Datenmodell für einen Kurs (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel

from models.session import CourseTarget


class Course(BaseModel):
    """Ein Kurs einer Klasse in einem Schuljahr."""

    id: str
    name: str                      # "Mathematik"
    institution_id: str
    class_name: str                # "10a"
    school_year: str               # "2024-2025"
    planned_hours: float           # Stundensoll
    progression: float = 0.0       # Zwischenspeicher, Quelle ist die Stundensumme
    color: str = "#2563eb"
    description: Optional[str] = None

    @property
    def target(self) -> CourseTarget:
        """Das Stundensoll als CourseTarget für die Fortschrittsberechnung."""
        return CourseTarget(course_id=self.id, planned_hours=self.planned_hours)
