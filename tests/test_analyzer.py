"""Tests for the course analyzer over the bundled dataset."""

import pytest
from pathlib import Path
from analytics.analyzer import CourseAnalyzer
from config.settings import Settings
from retrieval.csv_loader import LoadError

CIRCUITS = "Circuits and Electronics"
HEALTH = "Health in Numbers: Quantitative Methods in Clinical & Public Health Research"
CS50 = "Introduction to Computer Science"
NEURO = "Fundamentals of Neuroscience"
BIOLOGY = "Introduction to Biology - The Secret of Life"
BIOLOGY_RELAUNCH = "Introduction to Biology: The Secret of Life"
CHEMISTRY = "Introduction to Solid State Chemistry"


class TestCourseAnalyzer:
    """Test analyzer queries end to end."""

    def setup_method(self):
        """Set up test fixtures."""
        self.sample_csv_path = Path(__file__).parent.parent / "data" / "online_courses.csv"
        self.analyzer = CourseAnalyzer.from_csv(str(self.sample_csv_path))

    def test_loaded_records(self):
        """Test every offering is loaded."""
        assert len(self.analyzer) == 8

    def test_participants_by_institution(self):
        """Test institution totals."""
        result = self.analyzer.participants_by_institution()

        assert result == {"HarvardX": 110002, "MITx": 108105}
        assert sum(result.values()) == sum(r.participants for r in self.analyzer.records)

    def test_participants_by_institution_and_subject(self):
        """Test composite totals with the descending key tie-break."""
        result = self.analyzer.participants_by_institution_and_subject()

        assert list(result.items()) == [
            ("MITx-Science, Technology, Engineering, and Mathematics", 60105),
            ("HarvardX-Computer Science", 50000),
            ("HarvardX-Government Health and Social Science", 30002),
            ("MITx-Biology", 30000),
            ("HarvardX-Biology", 30000),
            ("MITx-Chemistry", 18000),
        ]

    def test_institution_subject_participation(self):
        """Test the structured form mirrors the keyed totals."""
        groups = self.analyzer.institution_subject_participation()

        assert [g.display_key for g in groups] == list(
            self.analyzer.participants_by_institution_and_subject()
        )

    def test_courses_by_instructor(self):
        """Test solo and co-taught listings."""
        result = self.analyzer.courses_by_instructor()

        assert result["Eric Lander"].as_pair() == ([BIOLOGY], [BIOLOGY_RELAUNCH])
        assert result["Graham Walker"].as_pair() == ([], [BIOLOGY_RELAUNCH])
        assert result["Khurram Afridi"].as_pair() == ([CIRCUITS], [])
        assert result["Anant Agarwal"].as_pair() == ([], [CIRCUITS])
        assert result["Marcello Pagano"].co_taught == [HEALTH]
        assert len(result) == 10

    def test_top_courses_by_participants(self):
        """Test ranking by participants."""
        assert self.analyzer.top_courses(3, "participants") == [CS50, CIRCUITS, HEALTH]

    def test_top_courses_by_hours(self):
        """Test ranking by hours with a tie on 80 hours."""
        assert self.analyzer.top_courses(4, "hours") == [CIRCUITS, HEALTH, BIOLOGY, CHEMISTRY]

    def test_top_courses_all(self):
        """Test a large k returns every distinct title once."""
        result = self.analyzer.top_courses(100, "participants")

        assert len(result) == 7
        assert result[-1] == BIOLOGY_RELAUNCH

    def test_search_courses(self):
        """Test subject search with audit and hour limits."""
        assert self.analyzer.search_courses("bio", 10.0, 100.0) == [NEURO, BIOLOGY, BIOLOGY_RELAUNCH]
        assert self.analyzer.search_courses("science", 0.0, 1000.0) == [CIRCUITS, HEALTH, CS50]
        assert self.analyzer.search_courses("SCIENCE", 20.0, 200.0) == [HEALTH]
        assert self.analyzer.search_courses("physics", 0.0, 1000.0) == []

    def test_recommend_courses(self):
        """Test recommendations are ordered by similarity."""
        result = self.analyzer.recommend_courses(25, 1, 1)

        assert result == [HEALTH, CIRCUITS, CHEMISTRY, CS50, BIOLOGY_RELAUNCH, NEURO]
        # The relaunched offering is the course's latest
        assert BIOLOGY not in result

    def test_recommendation_limit_setting(self):
        """Test the recommendation cap comes from settings."""
        analyzer = CourseAnalyzer(self.analyzer.records, settings=Settings(recommendation_limit=2))

        assert analyzer.recommend_courses(25, 1, 1) == [HEALTH, CIRCUITS]

    def test_results_are_deterministic(self):
        """Test a second load answers every query identically."""
        other = CourseAnalyzer.from_csv(str(self.sample_csv_path))

        assert other.participants_by_institution() == self.analyzer.participants_by_institution()
        assert list(other.participants_by_institution_and_subject().items()) == list(
            self.analyzer.participants_by_institution_and_subject().items()
        )
        assert other.courses_by_instructor() == self.analyzer.courses_by_instructor()
        assert other.top_courses(5, "hours") == self.analyzer.top_courses(5, "hours")
        assert other.search_courses("bio", 0.0, 500.0) == self.analyzer.search_courses("bio", 0.0, 500.0)
        assert other.recommend_courses(40, 0, 1) == self.analyzer.recommend_courses(40, 0, 1)

    def test_empty_analyzer(self):
        """Test queries over no records return empty results."""
        analyzer = CourseAnalyzer([])

        assert analyzer.participants_by_institution() == {}
        assert analyzer.participants_by_institution_and_subject() == {}
        assert analyzer.courses_by_instructor() == {}
        assert analyzer.top_courses(3, "hours") == []
        assert analyzer.search_courses("bio", 0.0, 100.0) == []
        assert analyzer.recommend_courses(30, 1, 1) == []

    def test_from_csv_uses_settings_path(self, monkeypatch):
        """Test the dataset path falls back to settings and the environment."""
        monkeypatch.setenv("COURSES_CSV_PATH", str(self.sample_csv_path))

        analyzer = CourseAnalyzer.from_csv()

        assert len(analyzer) == 8

    def test_from_csv_missing_file(self, tmp_path):
        """Test load failures surface as LoadError."""
        with pytest.raises(LoadError):
            CourseAnalyzer.from_csv(str(tmp_path / "nope.csv"))
