"""Tests for application settings."""

import pytest
from pydantic import ValidationError
from config.settings import Settings


class TestSettings:
    """Test settings defaults and environment fallback."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("COURSES_CSV_PATH", raising=False)
        settings = Settings()

        assert settings.csv_path == "data/online_courses.csv"
        assert settings.on_bad_rows == "abort"
        assert settings.recommendation_limit == 10
        assert settings.date_format == "%m/%d/%Y"

    def test_csv_path_from_environment(self, monkeypatch):
        monkeypatch.setenv("COURSES_CSV_PATH", "/tmp/courses.csv")

        assert Settings().csv_path == "/tmp/courses.csv"
        assert Settings(csv_path=None).csv_path == "/tmp/courses.csv"
        assert Settings(csv_path="other.csv").csv_path == "other.csv"

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            Settings(on_bad_rows="ignore")
        with pytest.raises(ValidationError):
            Settings(recommendation_limit=-1)
