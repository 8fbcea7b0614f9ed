"""Datenmodelle für Unterrichtsstunden und Stundensoll (Pydantic v2)."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class SessionLog(BaseModel):
    """Eine gehaltene Unterrichtseinheit. Wird nur angehängt, nie geändert."""

    course_id: str
    date: date
    duration_hours: float = Field(ge=0.0)
    content: Optional[str] = None             # behandelter Stoff


class CourseTarget(BaseModel):
    """Geplantes Stundenvolumen eines Kurses.

    planned_hours wird hier nicht auf > 0 geprüft: ein ungültiges Soll soll
    als InvalidTargetError aus der Fortschrittsberechnung kommen.
    """

    course_id: str
    planned_hours: float
