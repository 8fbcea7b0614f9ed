"""Notenverteilung: Bänder, Bestehensquoten und Kennzahlen einer Notenliste.

Die Bandgrenzen sind Anteile der Höchstnote (siehe GradingScaleConfig) und
werden nicht auf eine feste Skala verdrahtet. Untergrenzen sind inklusiv:
eine Note genau auf einem Schnittpunkt gehört zum höheren Band.
"""

import math
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel

from config.defaults import BAND_LABELS
from config.schema import GradingScaleConfig
from grading.averages import arithmetic_mean
from grading.errors import NoDataError


class GradeBand(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    PASSABLE = "passable"
    INSUFFICIENT = "insufficient"


# Reihenfolge von oben nach unten
BAND_ORDER: list[GradeBand] = [
    GradeBand.EXCELLENT,
    GradeBand.GOOD,
    GradeBand.FAIR,
    GradeBand.PASSABLE,
    GradeBand.INSUFFICIENT,
]


class ScoreDistribution(BaseModel):
    """Kennzahlen einer (nicht leeren) Notenliste."""

    count: int
    min: float
    max: float
    mean: float                       # ungewichtet
    std_dev: float                    # Populations-Standardabweichung
    bands: dict[GradeBand, int]       # Anzahl pro Band, Summe == count
    pass_rates: dict[float, float]    # Schwelle → Prozent >= Schwelle

    def band_share(self, band: GradeBand) -> float:
        """Anteil eines Bandes in Prozent."""
        return 100.0 * self.bands.get(band, 0) / self.count


def band_cutoffs(scale: GradingScaleConfig) -> list[tuple[GradeBand, float]]:
    """Gibt die Untergrenzen der vier oberen Bänder zurück (absteigend)."""
    fr = scale.band_fractions
    # Runden, damit z.B. 0.7 * 20 exakt 14.0 ergibt und nicht 14.000000000000002
    return [
        (GradeBand.EXCELLENT, round(fr.excellent * scale.max_grade, 9)),
        (GradeBand.GOOD,      round(fr.good * scale.max_grade, 9)),
        (GradeBand.FAIR,      round(fr.fair * scale.max_grade, 9)),
        (GradeBand.PASSABLE,  round(fr.passable * scale.max_grade, 9)),
    ]


def classify_score(value: float, scale: GradingScaleConfig) -> GradeBand:
    """Ordnet eine Note ihrem Band zu."""
    for band, cutoff in band_cutoffs(scale):
        if value >= cutoff:
            return band
    return GradeBand.INSUFFICIENT


def band_counts(
    values: Iterable[float], scale: GradingScaleConfig
) -> dict[GradeBand, int]:
    """Zählt die Noten pro Band. Alle Bänder sind immer enthalten."""
    counts = {band: 0 for band in BAND_ORDER}
    cutoffs = band_cutoffs(scale)
    for value in values:
        band = next((b for b, c in cutoffs if value >= c), GradeBand.INSUFFICIENT)
        counts[band] += 1
    return counts


def pass_rates(
    values: Iterable[float], thresholds: Iterable[float]
) -> dict[float, float]:
    """Prozentsatz der Noten >= Schwelle, pro Schwelle.

    Leere Notenliste → 0.0 für jede Schwelle (nie NaN).
    """
    values = list(values)
    n = len(values)
    rates: dict[float, float] = {}
    for t in thresholds:
        if n == 0:
            rates[t] = 0.0
        else:
            rates[t] = 100.0 * sum(1 for v in values if v >= t) / n
    return rates


def pass_rate(values: Iterable[float], threshold: float) -> float:
    """Bestehensquote für eine einzelne Schwelle (in Prozent)."""
    return pass_rates(values, [threshold])[threshold]


def population_std_dev(values: Iterable[float]) -> float:
    """sqrt(mean((x - mean)^2)). NoDataError bei leerer Eingabe."""
    values = list(values)
    mean = arithmetic_mean(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def summarize_scores(
    values: Iterable[float],
    scale: GradingScaleConfig,
    thresholds: Optional[Iterable[float]] = None,
) -> ScoreDistribution:
    """Berechnet alle Kennzahlen einer Notenliste.

    thresholds: Schwellen für die Bestehensquoten; Standard aus der Skala.

    Raises:
        NoDataError: bei leerer Notenliste.
    """
    values = list(values)
    if not values:
        raise NoDataError("Keine Noten für die Verteilung")
    if thresholds is None:
        thresholds = scale.pass_thresholds

    return ScoreDistribution(
        count=len(values),
        min=min(values),
        max=max(values),
        mean=arithmetic_mean(values),
        std_dev=population_std_dev(values),
        bands=band_counts(values, scale),
        pass_rates=pass_rates(values, thresholds),
    )


def appreciation(
    value: Optional[float],
    scale: GradingScaleConfig,
    labels: Optional[dict[str, str]] = None,
    comment: Optional[str] = None,
) -> str:
    """Bewertungstext einer einzelnen Note, optional mit Kommentar.

    Ohne Note → "-". Dieselben Bezeichnungen nutzen Notentabelle und Export.
    """
    if value is None:
        return "-"
    labels = labels or BAND_LABELS
    text = labels[classify_score(value, scale).value]
    if comment:
        text += f" - {comment}"
    return text
