"""Demo-Daten für das Notenbuch.

Erzeugt einen deterministischen Datensatz (bei gleichem Seed) mit einer
Einrichtung, mehreren Klassen, Kursen, Prüfungen, Noten und gehaltenen
Unterrichtsstunden.

Absichtliche Auffälligkeiten für Dashboard und Statistik:
  1. Einzelne Schüler ohne Note in einer Prüfung (Beteiligung < 100 %)
  2. Ein schwacher Kurs (Physik 11a) mit niedriger Bestehensquote
  3. Kurse mit unterschiedlichem Fortschritt (wenige Stunden bis fast fertig)
"""

import random
from datetime import date, timedelta
from typing import Optional

from config.schema import GradebookConfig
from grading.progression import course_progression
from models.course import Course
from models.gradebook import GradeBook
from models.institution import Institution
from models.score import EvaluationKind, EvaluationSpec, ScoreRecord
from models.session import SessionLog
from models.student import Student

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anna", "Ben", "Clara", "David", "Emma", "Felix", "Greta", "Hannah",
    "Jonas", "Lea", "Leon", "Lina", "Luca", "Marie", "Mia", "Noah",
    "Paul", "Sophie", "Tim", "Yusuf", "Zoe", "Elif", "Finn", "Ida",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
    "Schwarz", "Zimmermann", "Braun", "Krüger", "Hartmann", "Lange",
]

# ─── Kurse und Prüfungen ──────────────────────────────────────────────────────

_SCHOOL_YEAR = "2024-2025"
_CLASSES = ["10a", "10b", "11a"]

# Kürzel → (Name, Stundensoll, Farbe)
_COURSES: dict[str, tuple[str, float, str]] = {
    "ma": ("Mathematik", 120.0, "#2563eb"),
    "de": ("Deutsch", 100.0, "#dc2626"),
    "en": ("Englisch", 90.0, "#16a34a"),
    "ph": ("Physik", 60.0, "#9333ea"),
}

# (Name, Art) – Physik bekommt zusätzlich ein Praktikum
_EVALUATIONS: list[tuple[str, EvaluationKind]] = [
    ("Test 1", EvaluationKind.QUIZ),
    ("Klausur 1", EvaluationKind.EXAM),
    ("Test 2", EvaluationKind.QUIZ),
    ("Mündliche Note", EvaluationKind.ORAL),
]

_COMMENTS = [
    "Sehr sorgfältig", "Rechenfehler", "Gute Mitarbeit",
    "Thema verfehlt", "Deutliche Steigerung",
]

_TERM_START = date(2024, 9, 2)


class SampleDataGenerator:
    """Generiert einen vollständigen Demo-Datensatz auf Basis der GradebookConfig."""

    def __init__(
        self,
        config: GradebookConfig,
        seed: Optional[int] = None,
        class_size: int = 12,
    ) -> None:
        self.config = config
        self.rng = random.Random(seed)
        self.class_size = class_size
        self._ability: dict[str, float] = {}

    # ─── Stammdaten ───────────────────────────────────────────────────────────

    def _generate_institution(self) -> Institution:
        return Institution(
            id="inst-1",
            name=self.config.institution_name,
            scale=self.config.scale,
        )

    def _generate_students(self) -> list[Student]:
        """Erzeugt pro Klasse class_size Schüler mit eindeutigen Namen."""
        scale = self.config.scale
        mid = (scale.min_grade + scale.max_grade) / 2
        spread = (scale.max_grade - scale.min_grade) / 7

        students = []
        number = 1
        for class_name in _CLASSES:
            used: set[tuple[str, str]] = set()
            while len(used) < self.class_size:
                name = (self.rng.choice(_FIRST_NAMES), self.rng.choice(_LAST_NAMES))
                if name in used:
                    continue
                used.add(name)
                sid = f"s-{number:03d}"
                students.append(Student(
                    id=sid,
                    first_name=name[0],
                    last_name=name[1],
                    number=f"2024{number:03d}",
                    institution_id="inst-1",
                    class_name=class_name,
                    school_year=_SCHOOL_YEAR,
                ))
                # Leistungsniveau leicht über der Mitte der Skala
                self._ability[sid] = self.rng.gauss(mid + spread / 2, spread)
                number += 1
        return students

    def _generate_courses(self) -> list[Course]:
        courses = []
        for class_name in _CLASSES:
            for code, (name, hours, color) in _COURSES.items():
                courses.append(Course(
                    id=f"c-{class_name}-{code}",
                    name=name,
                    institution_id="inst-1",
                    class_name=class_name,
                    school_year=_SCHOOL_YEAR,
                    planned_hours=hours,
                    color=color,
                ))
        return courses

    def _generate_evaluations(self, courses: list[Course]) -> list[EvaluationSpec]:
        evaluations = []
        for course in courses:
            defs = list(_EVALUATIONS)
            if course.id.endswith("-ph"):
                defs.append(("Praktikum", EvaluationKind.PRACTICAL))
            for i, (name, kind) in enumerate(defs, start=1):
                evaluations.append(EvaluationSpec(
                    id=f"e-{course.id[2:]}-{i}",
                    course_id=course.id,
                    name=name,
                    kind=kind,
                    held_on=_TERM_START + timedelta(weeks=3 * i),
                ))
        return evaluations

    # ─── Bewegungsdaten ───────────────────────────────────────────────────────

    def _generate_scores(
        self,
        students: list[Student],
        courses: list[Course],
        evaluations: list[EvaluationSpec],
    ) -> list[ScoreRecord]:
        """Noten auf halbe Punkte gerundet; ca. 8 % der Noten fehlen."""
        scale = self.config.scale
        spread = (scale.max_grade - scale.min_grade) / 8
        by_course = {c.id: c for c in courses}

        scores = []
        for ev in evaluations:
            course = by_course[ev.course_id]
            # Physik 11a ist absichtlich schwach
            malus = 3 * spread if course.id == "c-11a-ph" else 0.0
            for s in students:
                if s.cohort != (course.class_name, course.school_year):
                    continue
                if self.rng.random() < 0.08:
                    continue
                raw = self.rng.gauss(self._ability[s.id] - malus, spread)
                value = min(scale.max_grade, max(scale.min_grade, round(raw * 2) / 2))
                comment = self.rng.choice(_COMMENTS) if self.rng.random() < 0.15 else None
                scores.append(ScoreRecord(
                    student_id=s.id,
                    course_id=course.id,
                    evaluation_id=ev.id,
                    value=value,
                    recorded_date=ev.held_on,
                    comment=comment,
                ))
        return scores

    def _generate_sessions(self, courses: list[Course]) -> list[SessionLog]:
        """Wöchentliche Einheiten à 1.5h oder 2h bis zu einem zufälligen Stand."""
        sessions = []
        for course in courses:
            goal = course.planned_hours * self.rng.uniform(0.2, 0.95)
            done = 0.0
            day = _TERM_START + timedelta(days=self.rng.randint(0, 4))
            while done < goal:
                duration = self.rng.choice([1.5, 2.0])
                sessions.append(SessionLog(
                    course_id=course.id,
                    date=day,
                    duration_hours=duration,
                ))
                done += duration
                day += timedelta(days=self.rng.choice([2, 3, 7]))
        return sessions

    def generate(self) -> GradeBook:
        """Erzeugt den vollständigen Datensatz als GradeBook-Objekt."""
        institution = self._generate_institution()
        students = self._generate_students()
        courses = self._generate_courses()
        evaluations = self._generate_evaluations(courses)
        scores = self._generate_scores(students, courses, evaluations)
        sessions = self._generate_sessions(courses)
        for course in courses:
            course.progression = course_progression(course.target, sessions)
        return GradeBook(
            institutions=[institution],
            courses=courses,
            students=students,
            evaluations=evaluations,
            scores=scores,
            sessions=sessions,
        )

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: GradeBook) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        table.add_row("Schüler", str(len(data.students)),
                      f"{len(_CLASSES)} Klassen à {self.class_size}")
        table.add_row("Kurse", str(len(data.courses)),
                      ", ".join(name for name, _, _ in _COURSES.values()))
        table.add_row("Prüfungen", str(len(data.evaluations)), "")
        table.add_row("Noten", str(len(data.scores)), "")
        table.add_row("Unterrichtseinheiten", str(len(data.sessions)),
                      f"{sum(s.duration_hours for s in data.sessions):g}h")

        console.print(table)
