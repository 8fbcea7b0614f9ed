"""Interaktiver Setup-Wizard für die Ersteinrichtung des Notenbuchs.

Führt den Nutzer Schritt für Schritt durch Einrichtung, Notenskala und
Anzeige-Schwellen. Nutzt rich für die Konsolenausgabe.
"""

from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import (
    BandFractions,
    GradebookConfig,
    GradingScaleConfig,
    ProgressionConfig,
    StatisticsConfig,
)
from config.defaults import BAND_LABELS, KIND_LABELS, default_scale

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def _show_scale_table(scale: GradingScaleConfig) -> None:
    """Zeigt Bänder und Koeffizienten einer Skala als rich-Tabelle an."""
    fr = scale.band_fractions
    table = Table(title=f"Notenskala {scale.min_grade:g}–{scale.max_grade:g}",
                  box=box.ROUNDED)
    table.add_column("Band", style="bold", width=14)
    table.add_column("Ab Note", justify="right", width=8)
    for key, fraction in [("excellent", fr.excellent), ("good", fr.good),
                          ("fair", fr.fair), ("passable", fr.passable)]:
        table.add_row(BAND_LABELS[key], f"{fraction * scale.max_grade:g}")
    table.add_row(BAND_LABELS["insufficient"], "darunter")
    console.print(table)

    coeffs = ", ".join(
        f"{KIND_LABELS.get(k, k)} {v:g}" for k, v in scale.kind_coefficients.items()
    )
    _info(f"Bestehensgrenze: {scale.pass_mark:g} | Koeffizienten: {coeffs}")


# ─── SCHRITT 1: Einrichtung ───

def _wizard_institution() -> str:
    _header("Schritt 1 — Einrichtung")
    return Prompt.ask("Name der Schule", default="Muster-Gymnasium")


# ─── SCHRITT 2: Notenskala ───

def _wizard_scale() -> GradingScaleConfig:
    _header("Schritt 2 — Notenskala")
    default = default_scale()
    _show_scale_table(default)

    if Confirm.ask("Standard-Skala übernehmen?", default=True):
        _success("Standard-Skala übernommen.")
        return default

    while True:
        max_grade = FloatPrompt.ask("Höchstnote", default=default.max_grade)
        pass_mark = FloatPrompt.ask("Bestehensgrenze", default=max_grade / 2)
        _info("Bandgrenzen als Anteil der Höchstnote (z.B. 0.8).")
        try:
            fractions = BandFractions(
                excellent=FloatPrompt.ask(f"  {BAND_LABELS['excellent']} ab", default=0.8),
                good=FloatPrompt.ask(f"  {BAND_LABELS['good']} ab", default=0.7),
                fair=FloatPrompt.ask(f"  {BAND_LABELS['fair']} ab", default=0.6),
                passable=FloatPrompt.ask(f"  {BAND_LABELS['passable']} ab", default=0.5),
            )
            scale = GradingScaleConfig(
                max_grade=max_grade,
                pass_mark=pass_mark,
                band_fractions=fractions,
                pass_thresholds=[
                    round(f * max_grade, 9)
                    for f in (fractions.passable, fractions.fair,
                              fractions.good, fractions.excellent)
                ],
            )
        except ValidationError as e:
            _warn(f"Ungültige Skala: {e.errors()[0]['msg']}")
            continue
        _show_scale_table(scale)
        return scale


# ─── SCHRITT 3: Anzeige ───

def _wizard_display() -> tuple[ProgressionConfig, StatisticsConfig]:
    _header("Schritt 3 — Fortschritt & Statistik")
    if Confirm.ask("Standard-Schwellen übernehmen (75% / 50%, Top 10)?", default=True):
        _success("Standard-Schwellen übernommen.")
        return ProgressionConfig(), StatisticsConfig()

    on_track = FloatPrompt.ask("Fortschritt 'Auf Kurs' ab (%)", default=75.0)
    attention = FloatPrompt.ask("Fortschritt 'Achtung' ab (%)", default=50.0)
    size = IntPrompt.ask("Länge der Rangliste", default=10)
    alert = FloatPrompt.ask("Warnung bei Bestehensquote unter (%)", default=50.0)
    return (
        ProgressionConfig(on_track_threshold=on_track, attention_threshold=attention),
        StatisticsConfig(leaderboard_size=size, low_pass_rate_alert=alert),
    )


# ─── ZUSAMMENFASSUNG ───

def _show_summary(config: GradebookConfig) -> None:
    _header("Zusammenfassung")
    table = Table(box=box.ROUNDED, title="Konfigurationsübersicht")
    table.add_column("Bereich", style="bold cyan")
    table.add_column("Wert")

    sc = config.scale
    table.add_row("Schule", config.institution_name)
    table.add_row("Skala", f"{sc.min_grade:g}–{sc.max_grade:g}, bestanden ab {sc.pass_mark:g}")
    table.add_row("Schwellen", ", ".join(f"{t:g}" for t in sc.pass_thresholds))
    table.add_row(
        "Fortschritt",
        f"Auf Kurs ≥ {config.progression.on_track_threshold:g}%, "
        f"Achtung ≥ {config.progression.attention_threshold:g}%",
    )
    table.add_row("Rangliste", f"Top {config.statistics.leaderboard_size}")
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[GradebookConfig]:
    """Führt den interaktiven Setup-Wizard aus.

    Returns:
        Fertige GradebookConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen beim Notenbuch![/bold]\n\n"
        "Der Wizard richtet Schule, Notenskala und Anzeige-Schwellen ein.\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Notenbuch[/bold cyan]",
        border_style="cyan",
    ))

    try:
        name = _wizard_institution()
        scale = _wizard_scale()
        progression, statistics = _wizard_display()
        config = GradebookConfig(
            institution_name=name,
            scale=scale,
            progression=progression,
            statistics=statistics,
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None
    except ValidationError as e:
        console.print(f"\n[red]Ungültige Konfiguration: {e}[/red]")
        return None

    _show_summary(config)
    if not Confirm.ask("\nKonfiguration speichern?", default=True):
        console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
        return None
    return config
