from config.schema import (
    BandFractions,
    GradebookConfig,
    GradingScaleConfig,
    ProgressionConfig,
    StatisticsConfig,
)


# Anzeigenamen der Notenbänder (Reihenfolge = Band-Reihenfolge)
BAND_LABELS: dict[str, str] = {
    "excellent":    "Sehr gut",
    "good":         "Gut",
    "fair":         "Befriedigend",
    "passable":     "Ausreichend",
    "insufficient": "Ungenügend",
}

# Anzeigenamen der Prüfungsarten
KIND_LABELS: dict[str, str] = {
    "quiz":      "Test",
    "exam":      "Klausur",
    "practical": "Praktikum",
    "oral":      "Mündlich",
}

PROGRESSION_LABELS: dict[str, str] = {
    "on_track":    "Auf Kurs",
    "attention":   "Achtung",
    "in_progress": "Läuft",
}


def default_scale() -> GradingScaleConfig:
    """Standard-Notenskala 0–20 mit Bestehensgrenze 10.

    Bänder:
      Sehr gut       ≥ 16
      Gut            14 – 15.99
      Befriedigend   12 – 13.99
      Ausreichend    10 – 11.99
      Ungenügend     < 10

    Koeffizienten pro Prüfungsart:
      Test 1, Klausur 2, Praktikum 1.5, Mündlich 1
    """
    return GradingScaleConfig(
        min_grade=0.0,
        max_grade=20.0,
        band_fractions=BandFractions(
            excellent=0.80, good=0.70, fair=0.60, passable=0.50,
        ),
        pass_mark=10.0,
        pass_thresholds=[10.0, 12.0, 14.0, 16.0],
        kind_coefficients={"quiz": 1.0, "exam": 2.0, "practical": 1.5, "oral": 1.0},
    )


def default_gradebook_config() -> GradebookConfig:
    """Vollständige Standard-Konfiguration."""
    return GradebookConfig(
        institution_name="Muster-Gymnasium",
        scale=default_scale(),
        progression=ProgressionConfig(on_track_threshold=75.0,
                                      attention_threshold=50.0),
        statistics=StatisticsConfig(leaderboard_size=10,
                                    low_pass_rate_alert=50.0,
                                    display_decimals=1),
    )
