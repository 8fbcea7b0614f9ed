from pydantic import BaseModel, Field, field_validator, model_validator


# ─── NOTENSKALA (pro Einrichtung konfigurierbar) ───

class BandFractions(BaseModel):
    """Schnittpunkte der Notenbänder als Anteil der Höchstnote.

    Die Untergrenze eines Bandes gehört jeweils zum höheren Band (>=).
    Alles unterhalb von ``passable`` ist ``insufficient``.
    """
    # Ab 80 % der Höchstnote: exzellent (16/20)
    excellent: float = Field(0.80, gt=0.0, le=1.0)
    # Ab 70 %: gut (14/20)
    good: float = Field(0.70, gt=0.0, le=1.0)
    # Ab 60 %: befriedigend (12/20)
    fair: float = Field(0.60, gt=0.0, le=1.0)
    # Ab 50 %: ausreichend (10/20)
    passable: float = Field(0.50, gt=0.0, le=1.0)

    @model_validator(mode='after')
    def validate_order(self):
        """Die Schnittpunkte müssen streng absteigend sein."""
        cuts = [self.excellent, self.good, self.fair, self.passable]
        for upper, lower in zip(cuts, cuts[1:]):
            if lower >= upper:
                raise ValueError(
                    f"Bandgrenzen nicht streng absteigend: {cuts}")
        return self


class GradingScaleConfig(BaseModel):
    """Notenskala einer Einrichtung.

    Wird explizit an Klassifizierer und Fassade übergeben, nie global gelesen.
    """
    # Niedrigste erreichbare Note
    min_grade: float = Field(0.0,
        description="Niedrigste Note der Skala")
    # Höchstnote (Bezugsgröße für die Bandgrenzen)
    max_grade: float = Field(20.0,
        description="Höchstnote der Skala")
    # Bandgrenzen relativ zur Höchstnote
    band_fractions: BandFractions = Field(default_factory=BandFractions)
    # Bestehensgrenze (z.B. 10/20)
    pass_mark: float = Field(10.0,
        description="Bestehensgrenze")
    # Schwellen für die Bestehensquoten-Übersicht
    pass_thresholds: list[float] = Field(
        default=[10.0, 12.0, 14.0, 16.0],
        description="Schwellen für Bestehensquoten")
    # Koeffizient pro Prüfungsart, falls weder Note noch Prüfung einen haben
    kind_coefficients: dict[str, float] = Field(
        default={"quiz": 1.0, "exam": 2.0, "practical": 1.5, "oral": 1.0},
        description="Standard-Koeffizient pro Prüfungsart")

    @field_validator("kind_coefficients")
    @classmethod
    def validate_coefficients(cls, v: dict[str, float]) -> dict[str, float]:
        for kind, coeff in v.items():
            if coeff <= 0:
                raise ValueError(
                    f"Koeffizient für '{kind}' muss > 0 sein (ist {coeff})")
        return v

    @model_validator(mode='after')
    def validate_bounds(self):
        """Höchstnote > Mindestnote, Bestehensgrenze innerhalb der Skala.

        Schwellen für Bestehensquoten liegen in der Skala und steigen streng.
        """
        if self.max_grade <= self.min_grade:
            raise ValueError(
                f"max_grade ({self.max_grade}) muss größer als "
                f"min_grade ({self.min_grade}) sein")
        if not self.min_grade <= self.pass_mark <= self.max_grade:
            raise ValueError(
                f"pass_mark ({self.pass_mark}) liegt außerhalb der Skala "
                f"{self.min_grade}–{self.max_grade}")
        for t in self.pass_thresholds:
            if not self.min_grade <= t <= self.max_grade:
                raise ValueError(
                    f"Schwelle {t} liegt außerhalb der Skala "
                    f"{self.min_grade}–{self.max_grade}")
        for lower, upper in zip(self.pass_thresholds, self.pass_thresholds[1:]):
            if upper <= lower:
                raise ValueError(
                    f"Schwellen nicht streng aufsteigend: {self.pass_thresholds}")
        return self

    def contains(self, value: float) -> bool:
        """True wenn der Wert innerhalb der Skala liegt."""
        return self.min_grade <= value <= self.max_grade


# ─── KURSFORTSCHRITT ───

class ProgressionConfig(BaseModel):
    """Schwellen für die Fortschrittsanzeige der Kurse (in Prozent)."""
    # Ab hier gilt ein Kurs als "auf Kurs" und löst einen Hinweis aus
    on_track_threshold: float = Field(75.0, ge=0.0, le=100.0,
        description="Fortschritt ab dem ein Kurs als weit fortgeschritten gilt")
    # Ab hier wird "Achtung" angezeigt
    attention_threshold: float = Field(50.0, ge=0.0, le=100.0,
        description="Fortschritt ab dem 'Achtung' angezeigt wird")

    @model_validator(mode='after')
    def validate_order(self):
        if self.attention_threshold > self.on_track_threshold:
            raise ValueError(
                "attention_threshold darf nicht über on_track_threshold liegen")
        return self


# ─── STATISTIK-ANZEIGE ───

class StatisticsConfig(BaseModel):
    """Anzeige-Parameter der Statistiken (reine View-Parameter)."""
    # Länge der angezeigten Rangliste
    leaderboard_size: int = Field(10, ge=1,
        description="Anzahl Einträge in der Rangliste")
    # Unterhalb dieser Bestehensquote (in %) wird gewarnt
    low_pass_rate_alert: float = Field(50.0, ge=0.0, le=100.0,
        description="Warnschwelle Bestehensquote (%)")
    # Nachkommastellen bei der Ausgabe
    display_decimals: int = Field(1, ge=0, le=4,
        description="Nachkommastellen in der Anzeige")


# ─── GESAMT-CONFIG ───

class GradebookConfig(BaseModel):
    """Gesamtkonfiguration des Notenbuchs."""
    # Name der Einrichtung
    institution_name: str = Field("Muster-Gymnasium",
        description="Name der Einrichtung")
    # Notenskala mit Bandgrenzen und Koeffizienten
    scale: GradingScaleConfig = Field(default_factory=GradingScaleConfig)
    # Schwellen der Fortschrittsanzeige
    progression: ProgressionConfig = Field(default_factory=ProgressionConfig)
    # Anzeige-Parameter der Statistik
    statistics: StatisticsConfig = Field(default_factory=StatisticsConfig)
