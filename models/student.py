"""Datenmodell für einen Schüler (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel


class Student(BaseModel):
    """Repräsentiert einen Schüler."""

    id: str
    last_name: str
    first_name: str
    number: str                    # Schülernummer "2024001"
    institution_id: str
    class_name: str                # "10a"
    school_year: str               # "2024-2025"
    email: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def cohort(self) -> tuple[str, str]:
        """Jahrgangs-Schlüssel (Klasse, Schuljahr)."""
        return (self.class_name, self.school_year)
