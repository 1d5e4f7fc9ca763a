"""Structured query result schemas."""

from enum import Enum
from pydantic import BaseModel, Field


class RankingCriterion(str, Enum):
    """Numeric field used to rank courses."""
    HOURS = "hours"
    PARTICIPANTS = "participants"


class SubjectParticipation(BaseModel):
    """Participants summed over one institution and subject."""
    institution: str
    subject: str
    participants: int = 0

    @property
    def display_key(self) -> str:
        """Composite `institution-subject` key used at the API boundary."""
        return f"{self.institution}-{self.subject}"


class InstructorCourses(BaseModel):
    """Courses taught by one instructor."""
    solo_taught: list[str] = Field(default_factory=list, description="Titles taught alone, sorted")
    co_taught: list[str] = Field(default_factory=list, description="Titles taught with others, sorted")

    def as_pair(self) -> tuple[list[str], list[str]]:
        """Return the (solo, co-taught) lists."""
        return self.solo_taught, self.co_taught
