"""Course offering record schema."""

from datetime import date
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, model_validator

INSTRUCTOR_SEPARATOR = ", "


def split_instructors(instructors: str) -> tuple[str, ...]:
    """Split a raw instructors field into individual names.

    Empty components are dropped; a field naming nobody yields the single
    name "" so the offering is still attributed to someone.
    """
    names = tuple(name for name in instructors.split(INSTRUCTOR_SEPARATOR) if name)
    return names or ("",)


class CourseRecord(BaseModel):
    """One offering (one row) of an online course."""

    model_config = ConfigDict(frozen=True)

    # Identity / categorical
    institution: str
    course_number: str
    launch_date: date
    course_title: str
    instructors: str
    course_subject: str

    # Counts
    year: int = Field(ge=0)
    honor_code_certificates: int = Field(ge=0)
    participants: int = Field(ge=0)
    audited: int = Field(ge=0)
    certified: int = Field(ge=0)

    # Percentages
    audited_percent: float
    certified_percent: float
    certified_of_audited_percent: float
    played_video_percent: float
    posted_in_forum_percent: float
    grade_higher_than_zero_percent: float
    total_course_hours: float  # Pre-scaled by the source, compared as-is
    median_hours_for_certification: float
    median_age: float
    male_percent: float
    female_percent: float
    bachelor_degree_or_higher_percent: float

    # Derived from `instructors` when not given
    instructor_names: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _derive_instructor_names(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("instructor_names"):
            data = dict(data)
            data["instructor_names"] = split_instructors(str(data.get("instructors", "")))
        return data

    @property
    def is_co_taught(self) -> bool:
        """Whether the instructors field contains a separator."""
        return INSTRUCTOR_SEPARATOR in self.instructors
