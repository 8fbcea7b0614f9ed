"""Dashboard-Übersicht über den gesamten Notenbuch-Datensatz.

Kennzahlen, Jahrgangsstatistik pro (Klasse, Schuljahr) und Hinweise zu
Kursfortschritt, niedrigen Bestehensquoten und anstehenden Prüfungen.
"""

from collections import defaultdict
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel

from config.schema import GradebookConfig
from grading.averages import arithmetic_mean
from grading.distribution import pass_rate
from grading.errors import InvalidTargetError
from grading.progression import ProgressionStatus, course_progression, progression_status
from grading.statistics import StandingStatus, course_statistics, current_records
from models.gradebook import GradeBook
from analysis.helpers import colored_progression, fmt_percent, fmt_score

UPCOMING_DAYS = 7   # Vorlauf für den Hinweis auf anstehende Prüfungen


class Alert(BaseModel):
    """Ein einzelner Hinweis auf dem Dashboard."""

    severity: Literal["info", "warning"]
    kind: str            # z.B. "low_pass_rate"
    entity: str          # course_id / evaluation_id
    message: str


class CohortStatistics(BaseModel):
    """Notenkennzahlen eines Jahrgangs (Klasse, Schuljahr) über alle Kurse."""

    institution_id: str
    class_name: str
    school_year: str
    student_count: int
    score_count: int
    mean: Optional[float] = None          # ungewichteter Schnitt aller Noten
    pass_rate: Optional[float] = None     # Prozent >= Bestehensgrenze


class CourseOverview(BaseModel):
    course_id: str
    name: str
    class_name: str
    progression: Optional[float]
    status: Optional[ProgressionStatus]
    enrolled_count: int
    graded_count: int
    mean: Optional[float] = None          # Schnitt der Schülerschnitte
    pass_rate: Optional[float] = None


class DashboardSummary(BaseModel):
    """Alle Kennzahlen für die Dashboard-Ansicht."""

    institution_name: str
    course_count: int
    student_count: int
    evaluation_count: int
    score_count: int
    session_hours: float
    overall_mean: Optional[float]
    average_progression: Optional[float]
    courses: list[CourseOverview]
    cohorts: list[CohortStatistics]
    alerts: list[Alert]

    def print_rich(self, decimals: int = 1) -> None:
        """Gibt das Dashboard formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        avg_prog = (
            f"{self.average_progression:.0f}%"
            if self.average_progression is not None else "-"
        )
        console.print(Panel(
            f"Kurse: [bold]{self.course_count}[/bold] | "
            f"Schüler: [bold]{self.student_count}[/bold] | "
            f"Prüfungen: [bold]{self.evaluation_count}[/bold] | "
            f"Noten: [bold]{self.score_count}[/bold]\n"
            f"Gesamtschnitt: [bold]{fmt_score(self.overall_mean, decimals)}[/bold] | "
            f"Stunden gehalten: {self.session_hours:g}h | "
            f"Ø Fortschritt: {avg_prog}",
            title=f"Dashboard – {self.institution_name}",
            border_style="cyan",
        ))

        table = Table(title="Kurse", box=box.ROUNDED)
        table.add_column("Kurs", width=20)
        table.add_column("Klasse", width=8)
        table.add_column("Fortschritt", width=22)
        table.add_column("Benotet", justify="right", width=8)
        table.add_column("Schnitt", justify="right", width=8)
        table.add_column("Bestanden", justify="right", width=10)
        for c in self.courses:
            table.add_row(
                c.name,
                c.class_name,
                colored_progression(c.progression, c.status),
                f"{c.graded_count}/{c.enrolled_count}",
                fmt_score(c.mean, decimals),
                fmt_percent(c.pass_rate, decimals),
            )
        console.print(table)

        if self.cohorts:
            table = Table(title="Jahrgänge", box=box.ROUNDED)
            table.add_column("Klasse", width=8)
            table.add_column("Schuljahr", width=10)
            table.add_column("Schüler", justify="right", width=8)
            table.add_column("Noten", justify="right", width=7)
            table.add_column("Schnitt", justify="right", width=8)
            table.add_column("Bestanden", justify="right", width=10)
            for co in self.cohorts:
                table.add_row(
                    co.class_name, co.school_year, str(co.student_count),
                    str(co.score_count), fmt_score(co.mean, decimals),
                    fmt_percent(co.pass_rate, decimals),
                )
            console.print(table)

        if not self.alerts:
            console.print("[dim]Keine Hinweise.[/dim]")
            return
        lines = []
        for a in self.alerts:
            color = "yellow" if a.severity == "warning" else "cyan"
            lines.append(f"[{color}]• {a.message}[/{color}]")
        console.print(Panel("\n".join(lines), title="Hinweise", border_style="yellow"))


class OverviewAnalyzer:
    """Erstellt die Dashboard-Übersicht aus einem GradeBook."""

    def __init__(self, gradebook: GradeBook, config: GradebookConfig):
        self.data = gradebook
        self.config = config

    def analyze(self, today: Optional[date] = None) -> DashboardSummary:
        """Berechnet das Dashboard; `today` bestimmt, welche Prüfungen anstehen."""
        alerts: list[Alert] = []
        courses = [self._course_overview(c.id, alerts) for c in self.data.courses]
        alerts.extend(self._upcoming_evaluations(today or date.today()))
        records = current_records(self.data.scores)

        progressions = [c.progression for c in courses if c.progression is not None]
        return DashboardSummary(
            institution_name=self.config.institution_name,
            course_count=len(self.data.courses),
            student_count=len(self.data.students),
            evaluation_count=len(self.data.evaluations),
            score_count=len(records),
            session_hours=sum(s.duration_hours for s in self.data.sessions),
            overall_mean=arithmetic_mean([r.value for r in records]) if records else None,
            average_progression=arithmetic_mean(progressions) if progressions else None,
            courses=courses,
            cohorts=self._cohorts(records),
            alerts=alerts,
        )

    # ─── Kurse ────────────────────────────────────────────────────────────────

    def _course_overview(self, course_id: str, alerts: list[Alert]) -> CourseOverview:
        course = self.data.get_course(course_id)
        scale = self.data.scale_for_course(course_id)
        limit = self.config.statistics.low_pass_rate_alert

        try:
            progression = course_progression(course.target, self.data.sessions)
            status = progression_status(progression, self.config.progression)
        except InvalidTargetError:
            progression, status = None, None
            alerts.append(Alert(
                severity="warning", kind="invalid_target", entity=course.id,
                message=f"{course.name} ({course.class_name}): Stundensoll "
                        f"{course.planned_hours:g}h ist ungültig.",
            ))
        if status == ProgressionStatus.ON_TRACK:
            alerts.append(Alert(
                severity="info", kind="progression", entity=course.id,
                message=f"{course.name} ({course.class_name}) ist zu "
                        f"{progression:.0f}% abgeschlossen.",
            ))

        stats = course_statistics(
            course_id,
            self.data.scores_for_course(course_id),
            self.data.evaluations_for_course(course_id),
            self.data.roster(course_id),
            scale,
            thresholds=[scale.pass_mark],
        )

        invalid = [s for s in stats.standings if s.status == StandingStatus.INVALID_WEIGHT]
        if invalid:
            alerts.append(Alert(
                severity="warning", kind="invalid_weight", entity=course.id,
                message=f"{course.name}: Schnitt für {len(invalid)} Schüler "
                        f"nicht berechenbar (Koeffizient ungültig).",
            ))

        mean = rate = None
        if stats.distribution is not None:
            mean = stats.distribution.mean
            rate = stats.distribution.pass_rates[scale.pass_mark]
            if rate < limit:
                alerts.append(Alert(
                    severity="warning", kind="low_pass_rate", entity=course.id,
                    message=f"{course.name} ({course.class_name}): nur "
                            f"{rate:.0f}% der Schüler bestehen.",
                ))

        names = {e.id: e.name for e in self.data.evaluations_for_course(course_id)}
        for ev in stats.evaluations:
            if ev.distribution is None:
                continue
            ev_rate = ev.distribution.pass_rates[scale.pass_mark]
            if ev_rate < limit:
                alerts.append(Alert(
                    severity="warning", kind="low_pass_rate", entity=ev.evaluation_id,
                    message=f"{course.name} – {names.get(ev.evaluation_id, ev.evaluation_id)}: "
                            f"Bestehensquote {ev_rate:.0f}%.",
                ))

        return CourseOverview(
            course_id=course.id,
            name=course.name,
            class_name=course.class_name,
            progression=progression,
            status=status,
            enrolled_count=stats.enrolled_count,
            graded_count=stats.graded_count,
            mean=mean,
            pass_rate=rate,
        )

    # ─── Anstehende Prüfungen ─────────────────────────────────────────────────

    def _upcoming_evaluations(self, today: date) -> list[Alert]:
        """Prüfungen in den nächsten UPCOMING_DAYS Tagen (heute ausgenommen), nach Datum."""
        courses = {c.id: c for c in self.data.courses}
        upcoming = [
            e for e in self.data.evaluations
            if e.held_on is not None and e.course_id in courses
            and 0 < (e.held_on - today).days <= UPCOMING_DAYS
        ]
        upcoming.sort(key=lambda e: (e.held_on, e.id))

        alerts = []
        for ev in upcoming:
            course = courses[ev.course_id]
            days = (ev.held_on - today).days
            unit = "Tag" if days == 1 else "Tagen"
            alerts.append(Alert(
                severity="info", kind="upcoming_evaluation", entity=ev.id,
                message=f"{course.name} ({course.class_name}) – {ev.name} am "
                        f"{ev.held_on:%d.%m.%Y} (in {days} {unit}).",
            ))
        return alerts

    # ─── Jahrgänge ────────────────────────────────────────────────────────────

    def _cohorts(self, records) -> list[CohortStatistics]:
        """Kennzahlen pro (Einrichtung, Klasse, Schuljahr), sortiert nach Schlüssel."""
        members: dict[tuple[str, str, str], set[str]] = defaultdict(set)
        for s in self.data.students:
            members[(s.institution_id, s.class_name, s.school_year)].add(s.id)

        result = []
        for key in sorted(members):
            institution_id, class_name, school_year = key
            ids = members[key]
            values = [r.value for r in records if r.student_id in ids]
            scale = self.data.scale_for_institution(institution_id)
            result.append(CohortStatistics(
                institution_id=institution_id,
                class_name=class_name,
                school_year=school_year,
                student_count=len(ids),
                score_count=len(values),
                mean=arithmetic_mean(values) if values else None,
                pass_rate=pass_rate(values, scale.pass_mark) if values else None,
            ))
        return result
