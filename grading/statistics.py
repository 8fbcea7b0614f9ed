"""Statistik-Fassade: setzt Durchschnitt, Verteilung und Rangliste zusammen.

Alle Funktionen sind rein: sie lesen eine Momentaufnahme der Noten, ändern
ihre Eingaben nicht und halten keinen Zustand. Fehlende oder ungültige Daten
eines einzelnen Schülers werden als Anzeigezustand abgebildet und brechen die
Klassenstatistik nie ab.

Betrachtet wird immer die übergebene Klassenliste (roster): nur deren Schüler
gehen in Verteilung und Rangliste ein, und alle zählen im Nenner der
Beteiligungsquote mit, auch ohne eine einzige Note.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel

from config.schema import GradingScaleConfig
from grading.averages import weighted_average
from grading.distribution import GradeBand, ScoreDistribution, classify_score, summarize_scores
from grading.errors import InvalidWeightError, NoDataError
from grading.ranking import RankingEntry, rank_students
from models.score import EvaluationSpec, ScoreRecord


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class StandingStatus(str, Enum):
    GRADED = "graded"
    UNGRADED = "ungraded"              # keine Note → kein Durchschnitt
    INVALID_WEIGHT = "invalid_weight"  # Koeffizient ≤ 0 oder NaN → nicht berechenbar


class StudentStanding(BaseModel):
    """Durchschnitt eines Schülers im Kurs oder sein Anzeigezustand."""

    student_id: str
    status: StandingStatus
    average: Optional[float] = None
    band: Optional[GradeBand] = None
    score_count: int = 0

    @property
    def is_graded(self) -> bool:
        return self.status == StandingStatus.GRADED


class EvaluationStatistics(BaseModel):
    """Klassenstatistik einer einzelnen Prüfung."""

    course_id: str
    evaluation_id: str
    distribution: Optional[ScoreDistribution]   # None wenn niemand benotet ist
    leaderboard: list[RankingEntry]
    enrolled_count: int
    graded_count: int
    participation_rate: float                   # 0.0–1.0


class CourseStatistics(BaseModel):
    """Kursübersicht: Schülerschnitte, Klassenverteilung und Prüfungen."""

    course_id: str
    standings: list[StudentStanding]            # in Reihenfolge der Klassenliste
    distribution: Optional[ScoreDistribution]   # über die Schnitte benoteter Schüler
    score_distribution: Optional[ScoreDistribution]  # über alle Einzelnoten
    leaderboard: list[RankingEntry]
    enrolled_count: int
    graded_count: int
    participation_rate: float
    evaluations: list[EvaluationStatistics]

    def standing(self, student_id: str) -> Optional[StudentStanding]:
        return next((s for s in self.standings if s.student_id == student_id), None)


# ─── Bausteine ────────────────────────────────────────────────────────────────

def current_records(records: Iterable[ScoreRecord]) -> list[ScoreRecord]:
    """Reduziert auf eine Note pro (Schüler, Kurs, Prüfung); die letzte gilt."""
    latest: dict[tuple[str, str, str], ScoreRecord] = {}
    for r in records:
        latest[r.identity] = r
    return list(latest.values())


def resolve_weight(
    record: ScoreRecord,
    evaluations: dict[str, EvaluationSpec],
    scale: GradingScaleConfig,
) -> float:
    """Koeffizient einer Note.

    Reihenfolge: Note selbst → Prüfung → Koeffizient der Prüfungsart → 1.0.
    """
    if record.weight is not None:
        return record.weight
    spec = evaluations.get(record.evaluation_id)
    if spec is None:
        return 1.0
    if spec.weight is not None:
        return spec.weight
    return scale.kind_coefficients.get(spec.kind.value, 1.0)


def participation_rate(scored_ids: Iterable[str], roster: Iterable[str]) -> float:
    """Anteil der Klassenliste mit mindestens einer Note (0.0–1.0).

    Leere Klassenliste → 0.0.
    """
    enrolled = set(roster)
    if not enrolled:
        return 0.0
    return len(enrolled & set(scored_ids)) / len(enrolled)


def _index_evaluations(
    evaluations: Iterable[EvaluationSpec],
) -> dict[str, EvaluationSpec]:
    return {e.id: e for e in evaluations}


def _course_records(
    records: Iterable[ScoreRecord], course_id: str
) -> list[ScoreRecord]:
    return [r for r in current_records(records) if r.course_id == course_id]


# ─── Schülerschnitt ───────────────────────────────────────────────────────────

def student_course_average(
    student_id: str,
    course_id: str,
    records: Iterable[ScoreRecord],
    evaluations: Iterable[EvaluationSpec],
    scale: GradingScaleConfig,
) -> float:
    """Gewichteter Kursdurchschnitt eines Schülers über alle Prüfungen.

    Raises:
        NoDataError: Schüler hat im Kurs keine Note.
        InvalidWeightError: eine Note hat einen Koeffizienten ≤ 0.
    """
    specs = _index_evaluations(evaluations)
    own = [
        r for r in _course_records(records, course_id)
        if r.student_id == student_id
    ]
    return weighted_average(
        (r.value, resolve_weight(r, specs, scale)) for r in own
    )


def _standing(
    student_id: str,
    own: list[ScoreRecord],
    specs: dict[str, EvaluationSpec],
    scale: GradingScaleConfig,
) -> StudentStanding:
    try:
        avg = weighted_average(
            (r.value, resolve_weight(r, specs, scale)) for r in own
        )
    except NoDataError:
        return StudentStanding(student_id=student_id,
                               status=StandingStatus.UNGRADED)
    except InvalidWeightError:
        return StudentStanding(student_id=student_id,
                               status=StandingStatus.INVALID_WEIGHT,
                               score_count=len(own))
    return StudentStanding(
        student_id=student_id,
        status=StandingStatus.GRADED,
        average=avg,
        band=classify_score(avg, scale),
        score_count=len(own),
    )


# ─── Prüfungsstatistik ────────────────────────────────────────────────────────

def evaluation_statistics(
    course_id: str,
    evaluation_id: str,
    records: Iterable[ScoreRecord],
    roster: Iterable[str],
    scale: GradingScaleConfig,
    thresholds: Optional[Iterable[float]] = None,
) -> EvaluationStatistics:
    """Klassenstatistik und Rangliste einer Prüfung.

    Bei Gleichstand in der Rangliste entscheidet die Reihenfolge der Klassenliste.
    """
    roster = list(dict.fromkeys(roster))
    enrolled = set(roster)
    by_student = {
        r.student_id: r.value
        for r in _course_records(records, course_id)
        if r.evaluation_id == evaluation_id and r.student_id in enrolled
    }
    graded = [(sid, by_student[sid]) for sid in roster if sid in by_student]
    values = [v for _, v in graded]

    return EvaluationStatistics(
        course_id=course_id,
        evaluation_id=evaluation_id,
        distribution=summarize_scores(values, scale, thresholds) if values else None,
        leaderboard=rank_students(graded),
        enrolled_count=len(roster),
        graded_count=len(graded),
        participation_rate=participation_rate(by_student, roster),
    )


# ─── Kursstatistik ────────────────────────────────────────────────────────────

def course_statistics(
    course_id: str,
    records: Iterable[ScoreRecord],
    evaluations: Iterable[EvaluationSpec],
    roster: Iterable[str],
    scale: GradingScaleConfig,
    thresholds: Optional[Iterable[float]] = None,
) -> CourseStatistics:
    """Vollständige Kursstatistik für eine Klassenliste.

    Schüler ohne Note ("ungraded") oder mit ungültigem Koeffizienten gehen
    nicht in Mittelwert, Standardabweichung und Bestehensquote ein, zählen
    aber im Nenner der Beteiligungsquote.
    """
    roster = list(dict.fromkeys(roster))
    enrolled = set(roster)
    records = [r for r in _course_records(records, course_id)
               if r.student_id in enrolled]
    evaluations = [e for e in evaluations if e.course_id == course_id]
    specs = _index_evaluations(evaluations)
    thresholds = list(thresholds) if thresholds is not None else None

    per_student: dict[str, list[ScoreRecord]] = {sid: [] for sid in roster}
    for r in records:
        per_student[r.student_id].append(r)

    standings = [_standing(sid, per_student[sid], specs, scale) for sid in roster]
    graded = [(s.student_id, s.average) for s in standings if s.is_graded]
    averages = [avg for _, avg in graded]
    raw_values = [r.value for r in records]

    # Prüfungen mit Spezifikation zuerst, danach Noten ohne bekannte Prüfung
    evaluation_ids = list(specs)
    for r in records:
        if r.evaluation_id not in specs and r.evaluation_id not in evaluation_ids:
            evaluation_ids.append(r.evaluation_id)

    return CourseStatistics(
        course_id=course_id,
        standings=standings,
        distribution=summarize_scores(averages, scale, thresholds) if averages else None,
        score_distribution=(
            summarize_scores(raw_values, scale, thresholds) if raw_values else None
        ),
        leaderboard=rank_students(graded),
        enrolled_count=len(roster),
        graded_count=len(graded),
        participation_rate=participation_rate(
            (sid for sid, own in per_student.items() if own), roster),
        evaluations=[
            evaluation_statistics(course_id, eid, records, roster, scale, thresholds)
            for eid in evaluation_ids
        ],
    )
