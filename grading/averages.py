"""Gewichteter Durchschnitt und einfacher Mittelwert.

Es wird nie intern gerundet: Rundung ist Sache der Anzeige, damit mehrstufige
Aggregation (Kursschnitt aus Prüfungsschnitten) keine Rundungsfehler aufhäuft.
"""

import math
from typing import Iterable

from grading.errors import InvalidWeightError, NoDataError


def weighted_average(pairs: Iterable[tuple[float, float]]) -> float:
    """Berechnet sum(wert * gewicht) / sum(gewicht).

    pairs: (wert, gewicht)-Paare; jedes Gewicht muss endlich und > 0 sein.

    Raises:
        NoDataError: wenn keine Paare übergeben wurden.
        InvalidWeightError: wenn ein Gewicht ≤ 0, NaN oder unendlich ist.
    """
    total_points = 0.0
    total_weight = 0.0
    count = 0
    for value, weight in pairs:
        if not 0 < weight < math.inf:
            raise InvalidWeightError(weight)
        total_points += value * weight
        total_weight += weight
        count += 1

    if count == 0:
        raise NoDataError("Keine Noten für den gewichteten Durchschnitt")
    # Ein einzelnes Paar liefert exakt seinen Rohwert (v*w/w kann abweichen)
    if count == 1:
        return float(value)
    return total_points / total_weight


def arithmetic_mean(values: Iterable[float]) -> float:
    """Ungewichteter Mittelwert. NoDataError bei leerer Eingabe."""
    values = list(values)
    if not values:
        raise NoDataError("Keine Werte für den Mittelwert")
    return sum(values) / len(values)
