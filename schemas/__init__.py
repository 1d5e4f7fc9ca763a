"""Pydantic schemas for the online courses analyzer."""

from .course import CourseRecord, INSTRUCTOR_SEPARATOR, split_instructors
from .results import InstructorCourses, RankingCriterion, SubjectParticipation

__all__ = [
    "CourseRecord",
    "INSTRUCTOR_SEPARATOR",
    "split_instructors",
    "InstructorCourses",
    "RankingCriterion",
    "SubjectParticipation",
]
