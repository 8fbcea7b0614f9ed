"""Fehlerklassen der Notenberechnung.

Alle Fehler sind lokal und behebbar: die Statistik-Fassade übersetzt sie in
Anzeigezustände ("ohne Note", "nicht berechenbar"), statt abzubrechen.
"""


class GradingError(ValueError):
    """Basisklasse aller Berechnungsfehler."""


class NoDataError(GradingError):
    """Keine Werte vorhanden – ausdrücklich verschieden von einer Note 0."""


class InvalidWeightError(GradingError):
    """Koeffizient ≤ 0 oder nicht endlich für einen Wert, der in einen Durchschnitt eingeht."""

    def __init__(self, weight: float, message: str = ""):
        self.weight = weight
        super().__init__(message or f"Koeffizient muss endlich und > 0 sein (ist {weight})")


class InvalidTargetError(GradingError):
    """Geplante Stundenzahl ≤ 0 – Fortschritt nicht berechenbar."""

    def __init__(self, planned_hours: float):
        self.planned_hours = planned_hours
        super().__init__(
            f"Geplante Stunden müssen > 0 sein (sind {planned_hours})"
        )
