"""Tests für den Demo-Daten-Generator."""

import pytest

from config.schema import GradebookConfig, GradingScaleConfig
from data.sample_data import SampleDataGenerator
from grading.progression import course_progression
from grading.statistics import course_statistics


@pytest.fixture(scope="module")
def sample():
    return SampleDataGenerator(GradebookConfig(), seed=42).generate()


class TestSampleData:
    def test_sizes(self, sample):
        assert len(sample.students) == 36          # 3 Klassen à 12
        assert len(sample.courses) == 12           # 4 Kurse pro Klasse
        assert len(sample.evaluations) == 12 * 4 + 3   # Physik mit Praktikum
        assert sample.scores
        assert sample.sessions

    def test_deterministic(self):
        a = SampleDataGenerator(GradebookConfig(), seed=7).generate()
        b = SampleDataGenerator(GradebookConfig(), seed=7).generate()
        assert a.model_dump() == b.model_dump()

    def test_consistent(self, sample):
        report = sample.check_consistency()
        assert report.is_consistent, report.errors
        assert report.warnings == []

    def test_scores_inside_scale(self, sample):
        scale = GradingScaleConfig()
        assert all(scale.contains(r.value) for r in sample.scores)

    def test_one_score_per_identity(self, sample):
        identities = [r.identity for r in sample.scores]
        assert len(identities) == len(set(identities))

    def test_stored_progression_matches_sessions(self, sample):
        for c in sample.courses:
            assert c.progression == pytest.approx(course_progression(c.target, sample.sessions))
            assert 0 < c.progression <= 100

    def test_rosters_filled(self, sample):
        for c in sample.courses:
            assert len(sample.roster(c.id)) == 12

    def test_statistics_run_for_every_course(self, sample):
        for c in sample.courses:
            stats = course_statistics(
                c.id, sample.scores_for_course(c.id), sample.evaluations_for_course(c.id),
                sample.roster(c.id), sample.scale_for_course(c.id),
            )
            assert stats.enrolled_count == 12
            assert stats.graded_count > 0

    def test_custom_scale(self):
        config = GradebookConfig(scale=GradingScaleConfig(max_grade=100, pass_mark=50,
                                                          pass_thresholds=[50]))
        data = SampleDataGenerator(config, seed=1, class_size=5).generate()
        assert len(data.students) == 15
        assert all(0 <= r.value <= 100 for r in data.scores)
        assert data.institutions[0].scale.max_grade == 100
