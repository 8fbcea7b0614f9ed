"""Tests für die Datenmodelle und den GradeBook-Datensatz."""

import logging
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from config.schema import GradingScaleConfig
from models import (
    Course,
    EvaluationKind,
    EvaluationSpec,
    GradeBook,
    GradebookError,
    Institution,
    ScoreRecord,
    SessionLog,
    Student,
)


def _student(sid: str, last: str, first: str = "Max", class_name: str = "10a") -> Student:
    return Student(id=sid, last_name=last, first_name=first, number=sid,
                   institution_id="inst", class_name=class_name, school_year="2024-2025")


def _make_gradebook() -> GradeBook:
    """Kleiner Datensatz: eine Schule, zwei Kurse, fünf Schüler in zwei Klassen."""
    return GradeBook(
        institutions=[Institution(id="inst", name="Testschule")],
        courses=[
            Course(id="ma", name="Mathematik", institution_id="inst",
                   class_name="10a", school_year="2024-2025", planned_hours=20),
            Course(id="de", name="Deutsch", institution_id="inst",
                   class_name="10b", school_year="2024-2025", planned_hours=10),
        ],
        students=[
            _student("s1", "Weber"),
            _student("s2", "Albers"),
            _student("s3", "Meyer", class_name="10b"),
            _student("s4", "Albers", first="Anna"),
        ],
        evaluations=[
            EvaluationSpec(id="t1", course_id="ma", name="Test 1"),
            EvaluationSpec(id="k1", course_id="ma", name="Klausur 1",
                           kind=EvaluationKind.EXAM),
            EvaluationSpec(id="d1", course_id="de", name="Aufsatz"),
        ],
    )


# ─── MODELLE ──────────────────────────────────────────────────────────────────

class TestModels:
    def test_student_properties(self):
        s = _student("s1", "Weber", "Lena")
        assert s.full_name == "Lena Weber"
        assert s.cohort == ("10a", "2024-2025")

    def test_course_target(self):
        c = _make_gradebook().get_course("ma")
        assert c.target.course_id == "ma"
        assert c.target.planned_hours == 20

    def test_score_identity(self):
        r = ScoreRecord(student_id="s1", course_id="ma", evaluation_id="t1", value=12)
        assert r.identity == ("s1", "ma", "t1")

    def test_evaluation_weight_range(self):
        with pytest.raises(ValidationError):
            EvaluationSpec(id="x", course_id="ma", name="X", weight=0)
        with pytest.raises(ValidationError):
            EvaluationSpec(id="x", course_id="ma", name="X", weight=11)

    def test_session_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            SessionLog(course_id="ma", date=date(2024, 9, 2), duration_hours=-1)

    def test_comment_length(self):
        with pytest.raises(ValidationError):
            ScoreRecord(student_id="s1", course_id="ma", evaluation_id="t1",
                        value=12, comment="x" * 501)


# ─── NACHSCHLAGEN & KLASSENLISTE ──────────────────────────────────────────────

class TestLookup:
    def test_unknown_course(self):
        with pytest.raises(GradebookError):
            _make_gradebook().get_course("xx")

    def test_roster_sorted_by_name(self):
        """Klassenliste: nur die Klasse des Kurses, sortiert nach Nach-/Vorname."""
        gb = _make_gradebook()
        assert gb.roster("ma") == ["s4", "s2", "s1"]
        assert gb.roster("de") == ["s3"]

    def test_scale_fallback(self):
        gb = _make_gradebook()
        assert gb.scale_for_course("ma") == GradingScaleConfig()
        assert gb.scale_for_institution("unbekannt") == GradingScaleConfig()

    def test_institution_scale_used(self):
        gb = _make_gradebook()
        gb.institutions[0].scale = GradingScaleConfig(max_grade=100, pass_mark=50)
        assert gb.scale_for_course("de").max_grade == 100

    def test_summary(self):
        text = _make_gradebook().summary()
        assert "Kurse: 2" in text
        assert "Schüler: 4 (2 Klassen)" in text


# ─── NOTEN ERFASSEN ───────────────────────────────────────────────────────────

class TestUpsertScore:
    def _rec(self, value: float, **kw) -> ScoreRecord:
        data = dict(student_id="s1", course_id="ma", evaluation_id="t1", value=value)
        data.update(kw)
        return ScoreRecord(**data)

    def test_insert(self):
        gb = _make_gradebook()
        assert gb.upsert_score(self._rec(12)) is None
        assert len(gb.scores) == 1

    def test_replace_same_identity(self, caplog):
        gb = _make_gradebook()
        gb.upsert_score(self._rec(12))
        with caplog.at_level(logging.INFO, logger="models.gradebook"):
            replaced = gb.upsert_score(self._rec(15))
        assert replaced.value == 12
        assert [r.value for r in gb.scores] == [15]
        assert "Note ersetzt" in caplog.text

    def test_out_of_scale_rejected(self):
        gb = _make_gradebook()
        with pytest.raises(GradebookError):
            gb.upsert_score(self._rec(21))
        assert gb.scores == []

    def test_unknown_student(self):
        with pytest.raises(GradebookError):
            _make_gradebook().upsert_score(self._rec(12, student_id="xx"))

    def test_evaluation_of_other_course(self):
        with pytest.raises(GradebookError):
            _make_gradebook().upsert_score(self._rec(12, evaluation_id="d1"))

    def test_non_positive_weight(self):
        with pytest.raises(GradebookError):
            _make_gradebook().upsert_score(self._rec(12, weight=0))

    def test_nan_weight_rejected(self):
        gb = _make_gradebook()
        with pytest.raises(GradebookError):
            gb.upsert_score(self._rec(12, weight=float("nan")))
        assert gb.scores == []


# ─── STUNDEN & FORTSCHRITT ────────────────────────────────────────────────────

class TestAppendSession:
    def test_progression_updated(self):
        gb = _make_gradebook()
        p = gb.append_session(SessionLog(course_id="ma", date=date(2024, 9, 2),
                                         duration_hours=5))
        assert p == pytest.approx(25.0)
        assert gb.get_course("ma").progression == pytest.approx(25.0)

    def test_recomputed_from_full_sum(self):
        """Fortschritt wird aus der Summe neu berechnet und bei 100 begrenzt."""
        gb = _make_gradebook()
        for day in range(1, 5):
            gb.append_session(SessionLog(course_id="de", date=date(2024, 9, day),
                                         duration_hours=3))
        assert gb.get_course("de").progression == 100.0
        assert len(gb.sessions_for_course("de")) == 4

    def test_invalid_target_keeps_session(self, caplog):
        gb = _make_gradebook()
        gb.get_course("ma").planned_hours = 0
        with caplog.at_level(logging.WARNING, logger="models.gradebook"):
            p = gb.append_session(SessionLog(course_id="ma", date=date(2024, 9, 2),
                                             duration_hours=2))
        assert p is None
        assert len(gb.sessions) == 1
        assert gb.get_course("ma").progression == 0.0
        assert "nicht berechenbar" in caplog.text

    def test_unknown_course(self):
        gb = _make_gradebook()
        with pytest.raises(GradebookError):
            gb.append_session(SessionLog(course_id="xx", date=date(2024, 9, 2),
                                         duration_hours=2))
        assert gb.sessions == []


# ─── KONSISTENZ-CHECK ─────────────────────────────────────────────────────────

class TestConsistency:
    def test_clean_dataset(self):
        report = _make_gradebook().check_consistency()
        assert report.is_consistent
        assert report.errors == []
        assert report.warnings == []

    def test_unknown_references(self):
        gb = _make_gradebook()
        gb.scores.append(ScoreRecord(student_id="xx", course_id="ma",
                                     evaluation_id="t1", value=10))
        gb.scores.append(ScoreRecord(student_id="s1", course_id="zz",
                                     evaluation_id="t1", value=10))
        report = gb.check_consistency()
        assert not report.is_consistent
        assert len(report.errors) == 2

    def test_out_of_scale_and_duplicates(self):
        gb = _make_gradebook()
        gb.scores.append(ScoreRecord(student_id="s1", course_id="ma",
                                     evaluation_id="t1", value=25))
        gb.scores.append(ScoreRecord(student_id="s1", course_id="ma",
                                     evaluation_id="t1", value=12))
        report = gb.check_consistency()
        assert any("außerhalb der Skala" in e for e in report.errors)
        assert any("Mehrere Noten" in w for w in report.warnings)

    def test_stale_progression_warning(self):
        gb = _make_gradebook()
        gb.sessions.append(SessionLog(course_id="ma", date=date(2024, 9, 2),
                                      duration_hours=10))
        report = gb.check_consistency()
        assert report.is_consistent
        assert any("Fortschritt" in w for w in report.warnings)

    def test_invalid_target_error(self):
        gb = _make_gradebook()
        gb.get_course("de").planned_hours = -1
        report = gb.check_consistency()
        assert not report.is_consistent


# ─── PERSISTENZ ───────────────────────────────────────────────────────────────

class TestPersistence:
    def test_json_roundtrip(self, tmp_path: Path):
        gb = _make_gradebook()
        gb.upsert_score(ScoreRecord(student_id="s1", course_id="ma", evaluation_id="t1",
                                    value=13.5, recorded_date=date(2024, 10, 1)))
        gb.append_session(SessionLog(course_id="ma", date=date(2024, 9, 2),
                                     duration_hours=2))
        path = tmp_path / "out" / "gradebook.json"
        gb.save_json(path)

        loaded = GradeBook.load_json(path)
        assert loaded.scores == gb.scores
        assert loaded.sessions == gb.sessions
        assert loaded.get_course("ma").progression == pytest.approx(10.0)
        assert loaded.created_at is not None
        assert loaded.modified_at is not None

    def test_load_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            GradeBook.load_json(tmp_path / "fehlt.json")
