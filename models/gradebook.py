"""GradeBook: Vollständiger Notenbuch-Datensatz + Konsistenz-Check (Pydantic v2).

Der Datensatz ist die Quelle für Klassenliste, Noten und Unterrichtsstunden,
aus denen die Statistik berechnet wird. Er speichert selbst nur Rohdaten und
den Kursfortschritt als Zwischenspeicher.
"""

import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from config.schema import GradingScaleConfig
from models.course import Course
from models.institution import Institution
from models.score import EvaluationSpec, ScoreRecord
from models.session import CourseTarget, SessionLog
from models.student import Student

logger = logging.getLogger(__name__)


class GradebookError(ValueError):
    """Unbekannte Referenz oder ungültige Eingabe beim Ändern des Notenbuchs."""


class ConsistencyReport(BaseModel):
    """Ergebnis des Konsistenz-Checks."""

    is_consistent: bool
    errors: list[str]      # Daten, die die Statistik verfälschen
    warnings: list[str]    # Auffälligkeiten ohne Einfluss auf die Berechnung

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_consistent:
            status = "[bold green]✓ KONSISTENT[/bold green]"
        else:
            status = "[bold red]✗ INKONSISTENT[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Konsistenz-Check", border_style="cyan"))


class GradeBook(BaseModel):
    """Vollständiger Datensatz: Einrichtungen, Kurse, Schüler, Prüfungen, Noten, Stunden."""

    institutions: list[Institution]
    courses: list[Course]
    students: list[Student]
    evaluations: list[EvaluationSpec] = []
    scores: list[ScoreRecord] = []
    sessions: list[SessionLog] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        total_hours = sum(s.duration_hours for s in self.sessions)
        lines = [
            f"Einrichtungen: {len(self.institutions)}",
            f"Kurse: {len(self.courses)}",
            f"Schüler: {len(self.students)} "
            f"({len({s.cohort for s in self.students})} Klassen)",
            f"Prüfungen: {len(self.evaluations)}",
            f"Noten: {len(self.scores)}",
            f"Unterrichtseinheiten: {len(self.sessions)} ({total_hours:g}h)",
        ]
        return "\n".join(lines)

    # ─── Nachschlagen ───

    def get_course(self, course_id: str) -> Course:
        for c in self.courses:
            if c.id == course_id:
                return c
        raise GradebookError(f"Kurs nicht gefunden: {course_id}")

    def get_student(self, student_id: str) -> Student:
        for s in self.students:
            if s.id == student_id:
                return s
        raise GradebookError(f"Schüler nicht gefunden: {student_id}")

    def get_evaluation(self, evaluation_id: str) -> EvaluationSpec:
        for e in self.evaluations:
            if e.id == evaluation_id:
                return e
        raise GradebookError(f"Prüfung nicht gefunden: {evaluation_id}")

    def scale_for_institution(self, institution_id: str) -> GradingScaleConfig:
        """Notenskala einer Einrichtung (Standard-Skala als Rückfall)."""
        for inst in self.institutions:
            if inst.id == institution_id:
                return inst.scale
        return GradingScaleConfig()

    def scale_for_course(self, course_id: str) -> GradingScaleConfig:
        return self.scale_for_institution(self.get_course(course_id).institution_id)

    # ─── Datenquellen für die Statistik ───

    def roster(self, course_id: str) -> list[str]:
        """Schüler-IDs der Klasse des Kurses, sortiert nach Name.

        Die Sortierung bestimmt die Reihenfolge bei Gleichstand in Ranglisten.
        """
        course = self.get_course(course_id)
        members = [
            s for s in self.students
            if s.institution_id == course.institution_id
            and s.cohort == (course.class_name, course.school_year)
        ]
        members.sort(key=lambda s: (s.last_name, s.first_name, s.id))
        return [s.id for s in members]

    def scores_for_course(self, course_id: str) -> list[ScoreRecord]:
        return [r for r in self.scores if r.course_id == course_id]

    def evaluations_for_course(self, course_id: str) -> list[EvaluationSpec]:
        return [e for e in self.evaluations if e.course_id == course_id]

    def sessions_for_course(self, course_id: str) -> list[SessionLog]:
        return [s for s in self.sessions if s.course_id == course_id]

    def target_for_course(self, course_id: str) -> CourseTarget:
        return self.get_course(course_id).target

    # ─── Ändern ───

    def upsert_score(self, record: ScoreRecord) -> Optional[ScoreRecord]:
        """Erfasst eine Note; eine vorhandene Note derselben Identität wird ersetzt.

        Gibt die ersetzte Note zurück (oder None).
        """
        self.get_student(record.student_id)
        evaluation = self.get_evaluation(record.evaluation_id)
        if evaluation.course_id != record.course_id:
            raise GradebookError(
                f"Prüfung '{evaluation.id}' gehört zu Kurs '{evaluation.course_id}', "
                f"nicht zu '{record.course_id}'"
            )
        scale = self.scale_for_course(record.course_id)
        if not scale.contains(record.value):
            raise GradebookError(
                f"Note {record.value} liegt außerhalb der Skala "
                f"{scale.min_grade:g}–{scale.max_grade:g}"
            )
        if record.weight is not None and not 0 < record.weight < math.inf:
            raise GradebookError(f"Koeffizient muss endlich und > 0 sein (ist {record.weight})")

        replaced = None
        kept = []
        for r in self.scores:
            if r.identity == record.identity:
                replaced = r
            else:
                kept.append(r)
        kept.append(record)
        self.scores = kept

        if replaced is not None:
            logger.info(
                f"Note ersetzt: {record.student_id}/{record.evaluation_id} "
                f"{replaced.value:g} → {record.value:g}"
            )
        return replaced

    def append_session(self, log: SessionLog) -> Optional[float]:
        """Hängt eine Unterrichtseinheit an und aktualisiert den Kursfortschritt.

        Der Fortschritt wird aus der vollständigen Stundensumme neu berechnet
        und überschreibt den gespeicherten Wert (letzter Wert gilt). Nur ein
        Schreiber pro Kurs: gleichzeitige Aufrufe müssen serialisiert werden.
        Gibt den neuen Fortschritt zurück, oder None bei ungültigem Stundensoll.
        """
        from grading.errors import InvalidTargetError
        from grading.progression import course_progression

        course = self.get_course(log.course_id)
        self.sessions.append(log)
        try:
            progression = course_progression(course.target, self.sessions)
        except InvalidTargetError as e:
            logger.warning(f"Fortschritt für '{course.id}' nicht berechenbar: {e}")
            return None

        course.progression = progression
        logger.info(
            f"Fortschritt '{course.id}': {progression:.1f}% "
            f"(+{log.duration_hours:g}h am {log.date.isoformat()})"
        )
        return progression

    # ─── Konsistenz-Check ───

    def check_consistency(self) -> ConsistencyReport:
        """Prüft Referenzen, Notenbereiche und gespeicherten Fortschritt.

        Prüfungen:
        1. Noten verweisen auf existierende Schüler, Kurse und Prüfungen
        2. Noten liegen innerhalb der Skala der Einrichtung
        3. Mehrere Noten mit gleicher Identität (nur die letzte zählt)
        4. Stundensoll > 0
        5. Gespeicherter Fortschritt entspricht der Stundensumme
        """
        from grading.errors import InvalidTargetError
        from grading.progression import course_progression

        errors: list[str] = []
        warnings: list[str] = []

        student_ids = {s.id for s in self.students}
        course_ids = {c.id for c in self.courses}
        evaluation_ids = {e.id for e in self.evaluations}

        seen: set[tuple[str, str, str]] = set()
        for r in self.scores:
            if r.student_id not in student_ids:
                errors.append(f"Note für unbekannten Schüler '{r.student_id}'.")
            if r.course_id not in course_ids:
                errors.append(f"Note für unbekannten Kurs '{r.course_id}'.")
                continue
            if r.evaluation_id not in evaluation_ids:
                warnings.append(
                    f"Note von '{r.student_id}' verweist auf unbekannte "
                    f"Prüfung '{r.evaluation_id}' (Koeffizient 1)."
                )
            scale = self.scale_for_course(r.course_id)
            if not scale.contains(r.value):
                errors.append(
                    f"Note {r.value:g} von '{r.student_id}' außerhalb der Skala "
                    f"{scale.min_grade:g}–{scale.max_grade:g}."
                )
            if r.identity in seen:
                warnings.append(
                    f"Mehrere Noten für {r.student_id}/{r.evaluation_id} – "
                    f"nur die zuletzt erfasste zählt."
                )
            seen.add(r.identity)

        for course in self.courses:
            try:
                expected = course_progression(course.target, self.sessions)
            except InvalidTargetError:
                errors.append(
                    f"Kurs '{course.id}': Stundensoll {course.planned_hours:g}h ist ungültig."
                )
                continue
            if abs(expected - course.progression) > 0.5:
                warnings.append(
                    f"Kurs '{course.id}': gespeicherter Fortschritt "
                    f"{course.progression:.0f}% weicht von {expected:.0f}% ab."
                )

        return ConsistencyReport(
            is_consistent=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "GradeBook":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
