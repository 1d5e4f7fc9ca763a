"""Query engine for the online courses dataset."""

from .analyzer import CourseAnalyzer

__all__ = ["CourseAnalyzer"]
