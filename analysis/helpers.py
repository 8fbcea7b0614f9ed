"""Gemeinsame Formatierungs-Hilfen für die Rich-Ausgabe.

Gerundet wird ausschließlich hier, beim Anzeigen.
"""

from typing import Optional

from config.defaults import BAND_LABELS, PROGRESSION_LABELS
from grading.distribution import BAND_ORDER, GradeBand
from grading.progression import ProgressionStatus

# ─── Farben (Rich-Stilnamen) ──────────────────────────────────────────────────

BAND_COLORS: dict[GradeBand, str] = {
    GradeBand.EXCELLENT:    "green",
    GradeBand.GOOD:         "blue",
    GradeBand.FAIR:         "yellow",
    GradeBand.PASSABLE:     "dark_orange",
    GradeBand.INSUFFICIENT: "red",
}

PROGRESSION_COLORS: dict[ProgressionStatus, str] = {
    ProgressionStatus.ON_TRACK:    "green",
    ProgressionStatus.ATTENTION:   "yellow",
    ProgressionStatus.IN_PROGRESS: "cyan",
}


def fmt_score(value: Optional[float], decimals: int = 1) -> str:
    """Note mit fester Nachkommastellenzahl; ohne Wert "-"."""
    if value is None:
        return "-"
    return f"{value:.{decimals}f}"


def fmt_percent(value: Optional[float], decimals: int = 1) -> str:
    """Prozentwert (0–100) mit %-Zeichen; ohne Wert "-"."""
    if value is None:
        return "-"
    return f"{value:.{decimals}f}%"


def band_label(band: GradeBand) -> str:
    return BAND_LABELS[band.value]


def colored_band(band: Optional[GradeBand]) -> str:
    """Bandname in der Bandfarbe (Rich-Markup)."""
    if band is None:
        return "[dim]-[/dim]"
    color = BAND_COLORS[band]
    return f"[{color}]{band_label(band)}[/{color}]"


def colored_progression(value: Optional[float], status: Optional[ProgressionStatus]) -> str:
    if value is None or status is None:
        return "[red]nicht berechenbar[/red]"
    color = PROGRESSION_COLORS[status]
    return f"[{color}]{value:.0f}% ({PROGRESSION_LABELS[status.value]})[/{color}]"


def band_rows(bands: dict[GradeBand, int]) -> list[tuple[GradeBand, int]]:
    """Bänder in fester Reihenfolge von oben nach unten."""
    return [(b, bands.get(b, 0)) for b in BAND_ORDER]
