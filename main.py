"""Notenbuch — Haupt-CLI.

Verwendung:
  python main.py setup                          Ersteinrichtung (Wizard)
  python main.py config show                    Konfiguration anzeigen
  python main.py generate                       Demo-Daten erzeugen und speichern
  python main.py validate                       Konsistenz-Check des Datensatzes
  python main.py courses                        Kursliste mit Fortschritt
  python main.py stats course <kurs>            Kursstatistik
  python main.py stats evaluation <kurs> <prf>  Notenblatt einer Prüfung
  python main.py ranking <kurs> [--top K]       Rangliste eines Kurses
  python main.py session add <kurs> <stunden>   Unterrichtseinheit erfassen
  python main.py score set <s> <kurs> <prf> <note>  Note erfassen/ersetzen
  python main.py dashboard                      Übersicht mit Hinweisen
"""

import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfad für den gespeicherten Datensatz
DEFAULT_DATA_JSON = Path("output/gradebook.json")

json_path_option = click.option(
    "--json-path", default=str(DEFAULT_DATA_JSON),
    help="Pfad zur gespeicherten JSON-Datei.",
)


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py setup[/bold] aus."
        )
        sys.exit(1)
    try:
        return mgr, mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_data_or_abort(json_path: str):
    """Lädt den Datensatz oder bricht mit Hinweis auf 'generate' ab."""
    from models.gradebook import GradeBook

    p = Path(json_path)
    try:
        return GradeBook.load_json(p)
    except FileNotFoundError:
        console.print(
            f"[red]Keine Datendatei gefunden: {p}[/red]\n"
            "Verwenden Sie [bold]python main.py generate[/bold]."
        )
        sys.exit(1)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--defaults", "use_defaults", is_flag=True, default=False,
              help="Standard-Konfiguration ohne Rückfragen schreiben.")
def cmd_setup(use_defaults: bool):
    """Ersteinrichtung: Notenbuch-Konfiguration anlegen."""
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not use_defaults:
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    if use_defaults:
        from config.defaults import default_gradebook_config
        config = default_gradebook_config()
    else:
        from config.wizard import run_wizard
        config = run_wizard()

    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py generate[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from config.defaults import BAND_LABELS, KIND_LABELS
    from grading.distribution import band_cutoffs

    mgr, config = _load_config_or_abort()
    sc = config.scale

    console.print(Panel(
        f"[bold]{config.institution_name}[/bold]  |  "
        f"Skala {sc.min_grade:g}–{sc.max_grade:g}  |  bestanden ab {sc.pass_mark:g}",
        title="Notenbuch-Konfiguration",
        border_style="cyan",
    ))

    table = Table(title="Notenbänder", box=box.ROUNDED)
    table.add_column("Band")
    table.add_column("Ab Note", justify="right")
    for band, cutoff in band_cutoffs(sc):
        table.add_row(BAND_LABELS[band.value], f"{cutoff:g}")
    table.add_row(BAND_LABELS["insufficient"], "darunter")
    console.print(table)

    table2 = Table(title="Koeffizienten pro Prüfungsart", box=box.ROUNDED)
    table2.add_column("Art")
    table2.add_column("Koeffizient", justify="right")
    for kind, coeff in sc.kind_coefficients.items():
        table2.add_row(KIND_LABELS.get(kind, kind), f"{coeff:g}")
    console.print(table2)

    pc = config.progression
    st = config.statistics
    console.print(
        f"\n[bold]Fortschritt:[/bold] Auf Kurs ≥ {pc.on_track_threshold:g}% | "
        f"Achtung ≥ {pc.attention_threshold:g}%"
    )
    console.print(
        f"[bold]Statistik:[/bold] Rangliste Top {st.leaderboard_size} | "
        f"Warnung unter {st.low_pass_rate_alert:g}% | "
        f"Schwellen {', '.join(f'{t:g}' for t in sc.pass_thresholds)}"
    )


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--class-size", default=12, help="Schüler pro Klasse.")
@json_path_option
def cmd_generate(seed: int, class_size: int, json_path: str):
    """Erzeugt Demo-Daten (Schüler, Kurse, Prüfungen, Noten, Stunden)."""
    mgr, config = _load_config_or_abort()
    from data.sample_data import SampleDataGenerator

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = SampleDataGenerator(config, seed=seed, class_size=class_size)
    data = gen.generate()
    gen.print_summary(data)

    console.print(f"\n[dim]{data.summary()}[/dim]")

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@json_path_option
def cmd_validate(json_path: str):
    """Prüft Referenzen, Notenbereiche und gespeicherten Fortschritt."""
    data = _load_data_or_abort(json_path)
    console.print(f"\n{data.summary()}\n")
    report = data.check_consistency()
    report.print_rich()
    sys.exit(0 if report.is_consistent else 1)


# ─── COURSES ──────────────────────────────────────────────────────────────────

@click.command("courses")
@json_path_option
def cmd_courses(json_path: str):
    """Listet alle Kurse mit Stundenstand und Fortschritt."""
    from analysis.helpers import colored_progression
    from grading.errors import InvalidTargetError
    from grading.progression import course_progression, hours_completed, progression_status

    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path)

    table = Table(title="Kurse", box=box.ROUNDED)
    table.add_column("ID", style="bold", width=12)
    table.add_column("Kurs", width=16)
    table.add_column("Klasse", width=7)
    table.add_column("Schüler", justify="right", width=8)
    table.add_column("Stunden", justify="right", width=10)
    table.add_column("Fortschritt", width=22)
    for c in data.courses:
        try:
            value = course_progression(c.target, data.sessions)
            status = progression_status(value, config.progression)
        except InvalidTargetError:
            value, status = None, None
        table.add_row(
            c.id, c.name, c.class_name,
            str(len(data.roster(c.id))),
            f"{hours_completed(c.id, data.sessions):g}/{c.planned_hours:g}h",
            colored_progression(value, status),
        )
    console.print(table)


# ─── STATS ────────────────────────────────────────────────────────────────────

@click.group("stats")
def cmd_stats():
    """Statistik eines Kurses oder einer Prüfung."""


@cmd_stats.command("course")
@click.argument("course_id")
@json_path_option
def stats_course(course_id: str, json_path: str):
    """Kursstatistik: Schülerschnitte, Verteilung, Rangliste."""
    from analysis.course_report import CourseAnalyzer

    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path)
    analyzer = CourseAnalyzer(data, config)
    analyzer.print_rich(analyzer.analyze(course_id))


@cmd_stats.command("evaluation")
@click.argument("course_id")
@click.argument("evaluation_id")
@json_path_option
def stats_evaluation(course_id: str, evaluation_id: str, json_path: str):
    """Notenblatt und Klassenstatistik einer Prüfung."""
    from analysis.course_report import CourseAnalyzer

    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path)
    analyzer = CourseAnalyzer(data, config)
    analyzer.print_sheet(analyzer.evaluation_sheet(course_id, evaluation_id))


# ─── RANKING ──────────────────────────────────────────────────────────────────

@click.command("ranking")
@click.argument("course_id")
@click.option("--top", "k", type=int, default=None,
              help="Anzahl Einträge (Standard aus der Konfiguration).")
@json_path_option
def cmd_ranking(course_id: str, k: Optional[int], json_path: str):
    """Rangliste der Kursschnitte."""
    from analysis.course_report import CourseAnalyzer

    if k is not None and k < 0:
        raise click.BadParameter("muss ≥ 0 sein", param_hint="--top")
    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path)
    analyzer = CourseAnalyzer(data, config)
    analyzer.print_leaderboard(analyzer.analyze(course_id), k)


# ─── SESSION ──────────────────────────────────────────────────────────────────

@click.group("session")
def cmd_session():
    """Gehaltene Unterrichtseinheiten erfassen."""


@cmd_session.command("add")
@click.argument("course_id")
@click.argument("hours", type=float)
@click.option("--date", "on", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Datum (YYYY-MM-DD), Standard heute.")
@click.option("--content", default=None, help="Behandelter Stoff.")
@json_path_option
def session_add(course_id: str, hours: float, on: Optional[datetime],
                content: Optional[str], json_path: str):
    """Hängt eine Unterrichtseinheit an und aktualisiert den Fortschritt."""
    from models.session import SessionLog

    data = _load_data_or_abort(json_path)
    day = on.date() if on else date.today()
    log = SessionLog(course_id=course_id, date=day, duration_hours=hours, content=content)

    progression = data.append_session(log)
    data.save_json(Path(json_path))
    if progression is None:
        console.print(
            f"[yellow]⚠[/yellow]  Einheit gespeichert, Fortschritt für "
            f"'{course_id}' nicht berechenbar (Stundensoll prüfen)."
        )
    else:
        console.print(
            f"[green]✓[/green] {hours:g}h erfasst – Fortschritt {progression:.0f}%"
        )


# ─── SCORE ────────────────────────────────────────────────────────────────────

@click.group("score")
def cmd_score():
    """Noten erfassen."""


@cmd_score.command("set")
@click.argument("student_id")
@click.argument("course_id")
@click.argument("evaluation_id")
@click.argument("value", type=float)
@click.option("--weight", type=float, default=None, help="Eigener Koeffizient.")
@click.option("--comment", default=None, help="Kommentar zur Note.")
@json_path_option
def score_set(student_id: str, course_id: str, evaluation_id: str, value: float,
              weight: Optional[float], comment: Optional[str], json_path: str):
    """Erfasst eine Note; eine vorhandene Note wird ersetzt."""
    from grading.distribution import appreciation
    from models.score import ScoreRecord

    data = _load_data_or_abort(json_path)
    record = ScoreRecord(
        student_id=student_id,
        course_id=course_id,
        evaluation_id=evaluation_id,
        value=value,
        weight=weight,
        recorded_date=date.today(),
        comment=comment,
    )
    replaced = data.upsert_score(record)
    data.save_json(Path(json_path))

    text = appreciation(value, data.scale_for_course(course_id), comment=comment)
    if replaced is not None:
        console.print(f"[green]✓[/green] Note ersetzt: {replaced.value:g} → {value:g} ({text})")
    else:
        console.print(f"[green]✓[/green] Note erfasst: {value:g} ({text})")


# ─── DASHBOARD ────────────────────────────────────────────────────────────────

@click.command("dashboard")
@click.option("--date", "on", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Stichtag für anstehende Prüfungen (YYYY-MM-DD), Standard heute.")
@json_path_option
def cmd_dashboard(on: Optional[datetime], json_path: str):
    """Übersicht: Kennzahlen, Jahrgänge und Hinweise."""
    from analysis.overview import OverviewAnalyzer

    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path)
    summary = OverviewAnalyzer(data, config).analyze(today=on.date() if on else None)
    summary.print_rich(config.statistics.display_decimals)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe.")
def cli(verbose: bool):
    """Notenbuch: Durchschnitte, Verteilungen, Ranglisten und Kursfortschritt.

    Starten Sie mit: python main.py setup
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    from models.gradebook import GradebookError
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim Notenbuch![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    try:
        cli(standalone_mode=False)
    except click.exceptions.Abort:
        console.print("[yellow]Abgebrochen.[/yellow]")
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except GradebookError as e:
        console.print(f"[red bold]Fehler:[/red bold] {e}")
        sys.exit(1)


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_validate)
cli.add_command(cmd_courses)
cli.add_command(cmd_stats)
cli.add_command(cmd_ranking)
cli.add_command(cmd_session)
cli.add_command(cmd_score)
cli.add_command(cmd_dashboard)


if __name__ == "__main__":
    main()
