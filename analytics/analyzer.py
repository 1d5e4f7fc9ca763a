"""Query engine over a loaded set of course offerings."""

import logging
from typing import Iterable, Optional, Union

from analytics import queries
from config.settings import Settings
from retrieval.csv_loader import CSVLoader
from schemas.course import CourseRecord
from schemas.results import InstructorCourses, RankingCriterion, SubjectParticipation

logger = logging.getLogger(__name__)


class CourseAnalyzer:
    """Answer analytical queries over an immutable collection of offerings."""

    def __init__(self, records: Iterable[CourseRecord], settings: Optional[Settings] = None):
        """
        Initialize with records.

        Args:
            records: Course offerings, in file order
            settings: Application settings
        """
        self.settings = settings or Settings()
        self.records: tuple[CourseRecord, ...] = tuple(records)

    @classmethod
    def from_csv(cls, csv_path: Optional[str] = None, settings: Optional[Settings] = None) -> "CourseAnalyzer":
        """
        Load a dataset file and build an analyzer over it.

        Args:
            csv_path: Path to CSV file (defaults to settings.csv_path)
            settings: Application settings

        Raises:
            LoadError: If the file cannot be loaded
        """
        settings = settings or Settings()
        csv_path = csv_path or settings.csv_path
        logger.info(f"Using CSV data source: {csv_path}")
        loader = CSVLoader.from_settings(settings)
        return cls(loader.load_records(csv_path), settings=settings)

    def __len__(self) -> int:
        return len(self.records)

    def participants_by_institution(self) -> dict[str, int]:
        return queries.participants_by_institution(self.records)

    def participants_by_institution_and_subject(self) -> dict[str, int]:
        return queries.participants_by_institution_and_subject(self.records)

    def institution_subject_participation(self) -> list[SubjectParticipation]:
        return queries.institution_subject_participation(self.records)

    def courses_by_instructor(self) -> dict[str, InstructorCourses]:
        return queries.courses_by_instructor(self.records)

    def top_courses(self, k: int, criterion: Union[RankingCriterion, str]) -> list[str]:
        return queries.top_courses(self.records, k, criterion)

    def search_courses(self, subject: str, min_audited_percent: float, max_total_hours: float) -> list[str]:
        return queries.search_courses(self.records, subject, min_audited_percent, max_total_hours)

    def recommend_courses(self, age: int, gender: int, is_bachelor_or_higher: int) -> list[str]:
        return queries.recommend_courses(
            self.records,
            age,
            gender,
            is_bachelor_or_higher,
            limit=self.settings.recommendation_limit,
        )
