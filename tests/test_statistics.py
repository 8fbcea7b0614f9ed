"""Tests für die Statistik-Fassade (Schülerschnitte, Prüfungs- und Kursstatistik)."""

import pytest

from config.schema import GradingScaleConfig
from grading.distribution import GradeBand
from grading.errors import InvalidWeightError, NoDataError
from grading.statistics import (
    StandingStatus,
    course_statistics,
    current_records,
    evaluation_statistics,
    participation_rate,
    resolve_weight,
    student_course_average,
)
from models.score import EvaluationKind, EvaluationSpec, ScoreRecord


SCALE = GradingScaleConfig()
ROSTER = ["s1", "s2", "s3", "s4"]


def _rec(sid: str, eid: str, value: float, weight=None, course: str = "ma") -> ScoreRecord:
    return ScoreRecord(student_id=sid, course_id=course, evaluation_id=eid,
                       value=value, weight=weight)


def _evals() -> list[EvaluationSpec]:
    return [
        EvaluationSpec(id="t1", course_id="ma", name="Test 1", kind=EvaluationKind.QUIZ),
        EvaluationSpec(id="k1", course_id="ma", name="Klausur 1", kind=EvaluationKind.EXAM),
    ]


# ─── BAUSTEINE ────────────────────────────────────────────────────────────────

class TestBuildingBlocks:
    def test_last_record_wins(self):
        records = [_rec("s1", "t1", 8), _rec("s2", "t1", 12), _rec("s1", "t1", 15)]
        current = current_records(records)
        assert len(current) == 2
        assert {r.student_id: r.value for r in current}["s1"] == 15

    def test_resolve_weight_order(self):
        specs = {e.id: e for e in _evals()}
        specs["w"] = EvaluationSpec(id="w", course_id="ma", name="Extra", weight=3)
        assert resolve_weight(_rec("s1", "k1", 10, weight=0.5), specs, SCALE) == 0.5
        assert resolve_weight(_rec("s1", "w", 10), specs, SCALE) == 3
        assert resolve_weight(_rec("s1", "k1", 10), specs, SCALE) == 2.0
        assert resolve_weight(_rec("s1", "unbekannt", 10), specs, SCALE) == 1.0

    def test_participation_rate(self):
        assert participation_rate(["s1", "s2"], ROSTER) == pytest.approx(0.5)

    def test_participation_ignores_non_members(self):
        assert participation_rate(["s1", "x9"], ROSTER) == pytest.approx(0.25)

    def test_participation_empty_roster(self):
        assert participation_rate(["s1"], []) == 0.0


# ─── SCHÜLERSCHNITT ───────────────────────────────────────────────────────────

class TestStudentCourseAverage:
    def test_weighted_by_evaluation_kind(self):
        """Test (Koeff. 1) 10 und Klausur (Koeff. 2) 16 → 14.0."""
        records = [_rec("s1", "t1", 10), _rec("s1", "k1", 16)]
        avg = student_course_average("s1", "ma", records, _evals(), SCALE)
        assert avg == pytest.approx(14.0)

    def test_other_course_ignored(self):
        records = [_rec("s1", "t1", 10), _rec("s1", "t1", 2, course="de")]
        assert student_course_average("s1", "ma", records, _evals(), SCALE) == 10

    def test_no_scores_raises(self):
        with pytest.raises(NoDataError):
            student_course_average("s2", "ma", [_rec("s1", "t1", 10)], _evals(), SCALE)

    def test_invalid_weight_raises(self):
        records = [_rec("s1", "t1", 10, weight=0)]
        with pytest.raises(InvalidWeightError):
            student_course_average("s1", "ma", records, _evals(), SCALE)


# ─── PRÜFUNGSSTATISTIK ────────────────────────────────────────────────────────

class TestEvaluationStatistics:
    def test_distribution_and_participation(self):
        records = [_rec("s1", "t1", 12), _rec("s2", "t1", 8), _rec("s3", "k1", 15)]
        stats = evaluation_statistics("ma", "t1", records, ROSTER, SCALE)
        assert stats.graded_count == 2
        assert stats.enrolled_count == 4
        assert stats.participation_rate == pytest.approx(0.5)
        assert stats.distribution.mean == pytest.approx(10.0)
        assert stats.distribution.pass_rates[10] == pytest.approx(50.0)

    def test_nobody_graded(self):
        stats = evaluation_statistics("ma", "t1", [], ROSTER, SCALE)
        assert stats.distribution is None
        assert stats.leaderboard == []
        assert stats.participation_rate == 0.0

    def test_non_members_excluded(self):
        records = [_rec("s1", "t1", 12), _rec("fremd", "t1", 20)]
        stats = evaluation_statistics("ma", "t1", records, ROSTER, SCALE)
        assert stats.graded_count == 1
        assert [e.student_id for e in stats.leaderboard] == ["s1"]

    def test_ties_follow_roster_order(self):
        records = [_rec("s3", "t1", 14), _rec("s1", "t1", 14), _rec("s2", "t1", 18)]
        stats = evaluation_statistics("ma", "t1", records, ROSTER, SCALE)
        assert [e.student_id for e in stats.leaderboard] == ["s2", "s1", "s3"]


# ─── KURSSTATISTIK ────────────────────────────────────────────────────────────

class TestCourseStatistics:
    def test_ungraded_student_in_denominator_only(self):
        """Ein Schüler ohne Note zählt nur im Nenner der Beteiligung."""
        records = [
            _rec("s1", "t1", 10), _rec("s1", "k1", 16),   # Schnitt 14
            _rec("s2", "t1", 8),                          # Schnitt 8
            _rec("s3", "k1", 12),                         # Schnitt 12
        ]
        stats = course_statistics("ma", records, _evals(), ROSTER, SCALE)

        assert stats.enrolled_count == 4
        assert stats.graded_count == 3
        assert stats.participation_rate == pytest.approx(0.75)
        assert stats.standing("s4").status == StandingStatus.UNGRADED
        assert stats.standing("s4").average is None
        assert stats.distribution.count == 3
        assert stats.distribution.mean == pytest.approx((14 + 8 + 12) / 3)
        assert stats.distribution.pass_rates[10] == pytest.approx(200 / 3)

    def test_standings_in_roster_order(self):
        stats = course_statistics("ma", [_rec("s3", "t1", 11)], _evals(), ROSTER, SCALE)
        assert [s.student_id for s in stats.standings] == ROSTER
        assert stats.standing("s3").band == GradeBand.PASSABLE
        assert stats.standing("s3").score_count == 1

    def test_invalid_weight_does_not_abort(self):
        """Ungültiger Koeffizient eines Schülers → "nicht berechenbar", Rest läuft."""
        records = [_rec("s1", "t1", 15, weight=0), _rec("s2", "t1", 11)]
        stats = course_statistics("ma", records, _evals(), ROSTER, SCALE)
        assert stats.standing("s1").status == StandingStatus.INVALID_WEIGHT
        assert stats.standing("s2").is_graded
        assert stats.graded_count == 1
        assert [e.student_id for e in stats.leaderboard] == ["s2"]
        # Beteiligung zählt die abgegebene Note trotzdem
        assert stats.participation_rate == pytest.approx(0.5)

    def test_nan_weight_keeps_class_statistics_intact(self):
        """NaN-Koeffizient → "nicht berechenbar"; Klassenschnitt bleibt eine Zahl."""
        records = [_rec("s1", "t1", 10, weight=float("nan")),
                   _rec("s2", "t1", 12), _rec("s3", "t1", 16)]
        stats = course_statistics("ma", records, _evals(), ROSTER, SCALE)
        assert stats.standing("s1").status == StandingStatus.INVALID_WEIGHT
        assert stats.standing("s1").average is None
        assert stats.graded_count == 2
        assert stats.distribution.mean == pytest.approx(14.0)
        assert stats.distribution.std_dev == pytest.approx(2.0)
        assert stats.distribution.pass_rates[10] == pytest.approx(100.0)

    def test_leaderboard_by_average(self):
        records = [_rec("s1", "t1", 12), _rec("s2", "t1", 18), _rec("s3", "t1", 12)]
        stats = course_statistics("ma", records, _evals(), ROSTER, SCALE)
        assert [(e.rank, e.student_id) for e in stats.leaderboard] == [
            (1, "s2"), (2, "s1"), (3, "s3"),
        ]

    def test_replaced_score_counts_once(self):
        records = [_rec("s1", "t1", 5), _rec("s1", "t1", 17)]
        stats = course_statistics("ma", records, _evals(), ROSTER, SCALE)
        assert stats.standing("s1").average == 17
        assert stats.score_distribution.count == 1

    def test_evaluations_listed(self):
        records = [_rec("s1", "t1", 12), _rec("s1", "orphan", 9)]
        stats = course_statistics("ma", records, _evals(), ROSTER, SCALE)
        ids = [e.evaluation_id for e in stats.evaluations]
        assert ids == ["t1", "k1", "orphan"]
        k1 = next(e for e in stats.evaluations if e.evaluation_id == "k1")
        assert k1.distribution is None

    def test_raw_score_distribution(self):
        records = [_rec("s1", "t1", 10), _rec("s1", "k1", 16), _rec("s2", "t1", 4)]
        stats = course_statistics("ma", records, _evals(), ROSTER, SCALE)
        assert stats.score_distribution.count == 3
        assert stats.score_distribution.mean == pytest.approx(10.0)

    def test_empty_course(self):
        stats = course_statistics("ma", [], _evals(), ROSTER, SCALE)
        assert stats.distribution is None
        assert stats.score_distribution is None
        assert stats.graded_count == 0
        assert stats.participation_rate == 0.0

    def test_inputs_not_mutated(self):
        records = [_rec("s1", "t1", 10), _rec("s1", "t1", 12)]
        snapshot = [r.model_copy() for r in records]
        course_statistics("ma", records, _evals(), ROSTER, SCALE)
        assert records == snapshot
