"""Kursbericht und Notenblatt einer Prüfung.

Verbindet den Datensatz (Klassenliste, Noten, Stunden) mit der Statistik-
Fassade und bereitet die Ergebnisse für die Ausgabe auf.
"""

from typing import Optional

from pydantic import BaseModel

from config.schema import GradebookConfig, GradingScaleConfig
from grading.distribution import appreciation, classify_score, pass_rate, GradeBand
from grading.errors import InvalidTargetError
from grading.progression import (
    ProgressionStatus, course_progression, hours_completed, progression_status,
)
from grading.ranking import top_k
from grading.statistics import (
    CourseStatistics, EvaluationStatistics, StandingStatus,
    course_statistics, current_records, evaluation_statistics,
)
from models.gradebook import GradeBook, GradebookError
from analysis.helpers import (
    band_rows, colored_band, colored_progression, fmt_percent, fmt_score, band_label,
)


# ─── Berichts-Modelle ─────────────────────────────────────────────────────────

class CourseReport(BaseModel):
    """Kursstatistik mit Namen und Fortschritt für die Anzeige."""

    course_id: str
    course_name: str
    class_name: str
    scale: GradingScaleConfig
    statistics: CourseStatistics
    student_names: dict[str, str]
    evaluation_names: dict[str, str]
    hours_completed: float
    planned_hours: float
    progression: Optional[float]                 # None bei ungültigem Stundensoll
    progression_status: Optional[ProgressionStatus]


class SheetRow(BaseModel):
    """Eine Zeile des Notenblatts."""

    student_id: str
    name: str
    value: Optional[float]
    band: Optional[GradeBand]
    appreciation: str


class EvaluationSheet(BaseModel):
    """Notenblatt einer Prüfung: alle Schüler der Klasse plus Statistik."""

    course_name: str
    evaluation_id: str
    evaluation_name: str
    weight: float
    scale: GradingScaleConfig
    rows: list[SheetRow]
    statistics: EvaluationStatistics


# ─── Analyzer ─────────────────────────────────────────────────────────────────

class CourseAnalyzer:
    """Erstellt Kursberichte und Notenblätter aus einem GradeBook."""

    def __init__(self, gradebook: GradeBook, config: GradebookConfig):
        self.data = gradebook
        self.config = config

    def analyze(self, course_id: str) -> CourseReport:
        """Hauptmethode: Kursstatistik inkl. Fortschritt."""
        course = self.data.get_course(course_id)
        scale = self.data.scale_for_course(course_id)
        roster = self.data.roster(course_id)

        stats = course_statistics(
            course_id,
            self.data.scores_for_course(course_id),
            self.data.evaluations_for_course(course_id),
            roster,
            scale,
        )

        try:
            progression = course_progression(course.target, self.data.sessions)
            status = progression_status(progression, self.config.progression)
        except InvalidTargetError:
            progression, status = None, None

        return CourseReport(
            course_id=course.id,
            course_name=course.name,
            class_name=course.class_name,
            scale=scale,
            statistics=stats,
            student_names={sid: self.data.get_student(sid).full_name for sid in roster},
            evaluation_names={
                e.id: e.name for e in self.data.evaluations_for_course(course_id)
            },
            hours_completed=hours_completed(course_id, self.data.sessions),
            planned_hours=course.planned_hours,
            progression=progression,
            progression_status=status,
        )

    def evaluation_sheet(self, course_id: str, evaluation_id: str) -> EvaluationSheet:
        """Notenblatt einer Prüfung mit Bewertungstext und Kommentar."""
        course = self.data.get_course(course_id)
        evaluation = self.data.get_evaluation(evaluation_id)
        if evaluation.course_id != course_id:
            raise GradebookError(
                f"Prüfung '{evaluation_id}' gehört nicht zu Kurs '{course_id}'")
        scale = self.data.scale_for_course(course_id)
        roster = self.data.roster(course_id)
        records = {
            r.student_id: r
            for r in current_records(self.data.scores_for_course(course_id))
            if r.evaluation_id == evaluation_id
        }

        rows = []
        for sid in roster:
            rec = records.get(sid)
            value = rec.value if rec else None
            rows.append(SheetRow(
                student_id=sid,
                name=self.data.get_student(sid).full_name,
                value=value,
                band=classify_score(value, scale) if value is not None else None,
                appreciation=appreciation(value, scale,
                                          comment=rec.comment if rec else None),
            ))

        weight = evaluation.weight
        if weight is None:
            weight = scale.kind_coefficients.get(evaluation.kind.value, 1.0)

        return EvaluationSheet(
            course_name=course.name,
            evaluation_id=evaluation.id,
            evaluation_name=evaluation.name,
            weight=weight,
            scale=scale,
            rows=rows,
            statistics=evaluation_statistics(
                course_id, evaluation_id, records.values(), roster, scale,
            ),
        )

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_rich(self, report: CourseReport) -> None:
        """Gibt den Kursbericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        dec = self.config.statistics.display_decimals
        stats = report.statistics
        scale = report.scale
        top = f"/{scale.max_grade:g}"

        dist = stats.distribution
        if dist is not None:
            overview = (
                f"Klassenschnitt: [bold]{fmt_score(dist.mean, dec)}{top}[/bold] | "
                f"Standardabweichung: {fmt_score(dist.std_dev, dec)} | "
                f"Min–Max: [red]{fmt_score(dist.min, dec)}[/red]–"
                f"[green]{fmt_score(dist.max, dec)}[/green]"
            )
        else:
            overview = "[dim]Noch keine Noten erfasst.[/dim]"
        console.print(Panel(
            f"{overview}\n"
            f"Beteiligung: [bold]{stats.graded_count}/{stats.enrolled_count}[/bold] "
            f"({stats.participation_rate:.0%})\n"
            f"Stunden: {report.hours_completed:g}/{report.planned_hours:g}h | "
            f"Fortschritt: {colored_progression(report.progression, report.progression_status)}",
            title=f"{report.course_name} ({report.class_name})",
            border_style="cyan",
        ))

        if dist is not None:
            self._print_distribution(console, dist, scale)

        # Schüler-Tabelle
        table = Table(title="Schülerschnitte", box=box.ROUNDED)
        table.add_column("Schüler", width=26)
        table.add_column("Noten", justify="right", width=6)
        table.add_column("Schnitt", justify="right", width=8)
        table.add_column("Bewertung", width=14)
        for s in stats.standings:
            if s.status == StandingStatus.GRADED:
                avg = fmt_score(s.average, dec)
                band = colored_band(s.band)
            elif s.status == StandingStatus.INVALID_WEIGHT:
                avg = "-"
                band = "[red]nicht berechenbar[/red]"
            else:
                avg = "-"
                band = "[dim]ohne Note[/dim]"
            table.add_row(report.student_names.get(s.student_id, s.student_id),
                          str(s.score_count), avg, band)
        console.print(table)

        self.print_leaderboard(report)

        if dist is not None:
            rate = pass_rate(
                (s.average for s in stats.standings if s.is_graded), scale.pass_mark
            )
            if rate < self.config.statistics.low_pass_rate_alert:
                console.print(Panel(
                    f"Die Bestehensquote liegt bei {fmt_percent(rate, dec)} und damit "
                    f"unter {self.config.statistics.low_pass_rate_alert:g}%.",
                    title="Achtung", border_style="dark_orange",
                ))

    def print_leaderboard(self, report: CourseReport, k: Optional[int] = None) -> None:
        """Rangliste der Kursschnitte (Top k, Standard aus der Config)."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        dec = self.config.statistics.display_decimals
        k = self.config.statistics.leaderboard_size if k is None else k
        entries = top_k(report.statistics.leaderboard, k)
        if not entries:
            console.print("[dim]Keine Rangliste – noch keine Noten.[/dim]")
            return

        table = Table(title=f"Rangliste (Top {k})", box=box.ROUNDED)
        table.add_column("#", justify="right", width=4)
        table.add_column("Schüler", width=26)
        table.add_column("Schnitt", justify="right", width=8)
        for e in entries:
            rank = f"[bold]{e.rank}[/bold]" if e.rank <= 3 else str(e.rank)
            table.add_row(rank, report.student_names.get(e.student_id, e.student_id),
                          f"{fmt_score(e.average, dec)}/{report.scale.max_grade:g}")
        console.print(table)

    def print_sheet(self, sheet: EvaluationSheet) -> None:
        """Gibt das Notenblatt einer Prüfung aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        dec = self.config.statistics.display_decimals
        stats = sheet.statistics
        top = f"/{sheet.scale.max_grade:g}"

        table = Table(
            title=f"{sheet.course_name} – {sheet.evaluation_name} (Koeff. {sheet.weight:g})",
            box=box.ROUNDED,
        )
        table.add_column("Nr.", justify="right", width=4)
        table.add_column("Schüler", width=26)
        table.add_column(f"Note {top}", justify="right", width=9)
        table.add_column("Bewertung")
        for i, row in enumerate(sheet.rows, start=1):
            table.add_row(str(i), row.name, fmt_score(row.value, dec), row.appreciation)
        console.print(table)

        dist = stats.distribution
        if dist is None:
            console.print("[dim]Keine Note für diese Prüfung erfasst.[/dim]")
            return

        console.print(Panel(
            f"Schnitt: [bold]{fmt_score(dist.mean, dec)}{top}[/bold] | "
            f"Standardabweichung: {fmt_score(dist.std_dev, dec)} | "
            f"Min–Max: {fmt_score(dist.min, dec)}–{fmt_score(dist.max, dec)}\n"
            f"Beteiligung: {stats.graded_count}/{stats.enrolled_count} "
            f"({stats.participation_rate:.0%})",
            title="Klassenstatistik",
            border_style="cyan",
        ))
        self._print_distribution(console, dist, sheet.scale)

    def _print_distribution(self, console, dist, scale: GradingScaleConfig) -> None:
        from rich.table import Table
        from rich import box

        dec = self.config.statistics.display_decimals
        table = Table(title="Notenverteilung", box=box.SIMPLE)
        table.add_column("Band", width=14)
        table.add_column("Anzahl", justify="right", width=7)
        table.add_column("Anteil", justify="right", width=8)
        for band, count in band_rows(dist.bands):
            table.add_row(colored_band(band), str(count),
                          fmt_percent(dist.band_share(band), dec))
        console.print(table)

        rates = Table(title="Bestehensquote pro Schwelle", box=box.SIMPLE)
        rates.add_column("Schwelle")
        rates.add_column("Quote", justify="right", width=8)
        for threshold, rate in dist.pass_rates.items():
            label = band_label(classify_score(threshold, scale))
            rates.add_row(f"≥ {threshold:g} ({label})", fmt_percent(rate, dec))
        console.print(rates)
