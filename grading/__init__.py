"""Notenberechnung: Durchschnitte, Verteilung, Rangliste, Kursfortschritt."""

from .errors import GradingError, NoDataError, InvalidWeightError, InvalidTargetError
from .averages import weighted_average, arithmetic_mean
from .distribution import (
    GradeBand, ScoreDistribution, classify_score, band_counts,
    pass_rates, summarize_scores, appreciation,
)
from .ranking import RankingEntry, rank_students, top_k
from .progression import (
    ProgressionStatus, compute_progression, course_progression, progression_status,
)
from .statistics import (
    StandingStatus, StudentStanding, EvaluationStatistics, CourseStatistics,
    student_course_average, evaluation_statistics, course_statistics,
    participation_rate,
)

__all__ = [
    "GradingError",
    "NoDataError",
    "InvalidWeightError",
    "InvalidTargetError",
    "weighted_average",
    "arithmetic_mean",
    "GradeBand",
    "ScoreDistribution",
    "classify_score",
    "band_counts",
    "pass_rates",
    "summarize_scores",
    "appreciation",
    "RankingEntry",
    "rank_students",
    "top_k",
    "ProgressionStatus",
    "compute_progression",
    "course_progression",
    "progression_status",
    "StandingStatus",
    "StudentStanding",
    "EvaluationStatistics",
    "CourseStatistics",
    "student_course_average",
    "evaluation_statistics",
    "course_statistics",
    "participation_rate",
]
