"""Aggregation, ranking, search and recommendation over course offerings.

Every function here is pure: it takes the (immutable) sequence of records and
builds its result from scratch.
"""

import logging
from collections import defaultdict
from typing import Iterable, Sequence, Union

from schemas.course import CourseRecord
from schemas.results import InstructorCourses, RankingCriterion, SubjectParticipation

logger = logging.getLogger(__name__)

RECOMMENDATION_LIMIT = 10

_RANKING_FIELDS = {
    RankingCriterion.HOURS: "total_course_hours",
    RankingCriterion.PARTICIPANTS: "participants",
}


def _distinct(titles: Iterable[str]) -> list[str]:
    """Deduplicate while preserving order."""
    seen = set()
    result = []
    for title in titles:
        if title not in seen:
            result.append(title)
            seen.add(title)
    return result


def participants_by_institution(records: Sequence[CourseRecord]) -> dict[str, int]:
    """Sum participants per institution, ordered by institution name."""
    totals: dict[str, int] = defaultdict(int)
    for record in records:
        totals[record.institution] += record.participants
    return {institution: totals[institution] for institution in sorted(totals)}


def institution_subject_participation(records: Sequence[CourseRecord]) -> list[SubjectParticipation]:
    """
    Sum participants per (institution, subject).

    Ordered by participants descending, then by the `institution-subject`
    display key descending.
    """
    totals: dict[tuple[str, str], int] = defaultdict(int)
    for record in records:
        totals[(record.institution, record.course_subject)] += record.participants

    groups = [
        SubjectParticipation(institution=institution, subject=subject, participants=count)
        for (institution, subject), count in totals.items()
    ]
    # Both keys descending, so a single reversed sort gives the required order
    groups.sort(key=lambda g: (g.participants, g.display_key), reverse=True)
    return groups


def participants_by_institution_and_subject(records: Sequence[CourseRecord]) -> dict[str, int]:
    """
    Sum participants per `institution-subject` key, largest first.

    Ties are broken by the key in descending order. Distinct institution and
    subject pairs that render to the same key are merged.
    """
    totals: dict[str, int] = defaultdict(int)
    sources: dict[str, tuple[str, str]] = {}
    for group in institution_subject_participation(records):
        key = group.display_key
        if key in sources:
            logger.warning(
                f"Key {key!r} is shared by {sources[key]} and "
                f"{(group.institution, group.subject)}; merging their participants"
            )
        else:
            sources[key] = (group.institution, group.subject)
        totals[key] += group.participants

    ordered = sorted(totals.items(), key=lambda item: (item[1], item[0]), reverse=True)
    return dict(ordered)


def courses_by_instructor(records: Sequence[CourseRecord]) -> dict[str, InstructorCourses]:
    """
    List the titles each instructor taught alone and with others.

    An offering naming a single instructor counts as solo-taught for them; an
    offering naming several counts as co-taught for every one of them. Both
    lists are distinct and sorted.
    """
    solo: dict[str, set[str]] = defaultdict(set)
    co: dict[str, set[str]] = defaultdict(set)
    for record in records:
        target = co if record.is_co_taught else solo
        for name in record.instructor_names:
            target[name].add(record.course_title)

    return {
        name: InstructorCourses(
            solo_taught=sorted(solo.get(name, ())),
            co_taught=sorted(co.get(name, ())),
        )
        for name in sorted(solo.keys() | co.keys())
    }


def top_courses(
    records: Sequence[CourseRecord],
    k: int,
    criterion: Union[RankingCriterion, str],
) -> list[str]:
    """
    Titles of the top `k` offerings by total hours or participants.

    Ties on the numeric field are broken by title; repeated titles keep
    their best position.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    criterion = RankingCriterion(criterion)
    field = _RANKING_FIELDS[criterion]

    ranked = sorted(records, key=lambda r: (-getattr(r, field), r.course_title))
    return _distinct(r.course_title for r in ranked)[:k]


def search_courses(
    records: Sequence[CourseRecord],
    subject: str,
    min_audited_percent: float,
    max_total_hours: float,
) -> list[str]:
    """
    Titles whose subject contains `subject` (case-insensitive), audited at
    least `min_audited_percent` and running at most `max_total_hours`.
    """
    needle = subject.lower()
    titles = {
        r.course_title
        for r in records
        if needle in r.course_subject.lower()
        and r.audited_percent >= min_audited_percent
        and r.total_course_hours <= max_total_hours
    }
    return sorted(titles)


def recommend_courses(
    records: Sequence[CourseRecord],
    age: int,
    gender: int,
    is_bachelor_or_higher: int,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[str]:
    """
    Recommend courses whose typical audience resembles the given person.

    Each course number is scored by the squared distance between the person
    and the course's average median age, male percentage and bachelor-or-higher
    percentage (gender and degree mapped to 0 or 100). The latest offering of
    each course supplies its title.

    Args:
        records: Course offerings
        age: Age of the person
        gender: 1 for male, 0 for female
        is_bachelor_or_higher: 1 if the person holds a bachelor's degree or higher
        limit: Maximum number of titles

    Returns:
        Distinct titles, most similar first
    """
    if gender not in (0, 1):
        raise ValueError(f"gender must be 0 or 1, got {gender}")
    if is_bachelor_or_higher not in (0, 1):
        raise ValueError(f"is_bachelor_or_higher must be 0 or 1, got {is_bachelor_or_higher}")

    offerings: dict[str, list[CourseRecord]] = defaultdict(list)
    for record in records:
        offerings[record.course_number].append(record)

    scored = []
    for course_number, group in offerings.items():
        count = len(group)
        mean_age = sum(r.median_age for r in group) / count
        mean_male = sum(r.male_percent for r in group) / count
        mean_bachelor = sum(r.bachelor_degree_or_higher_percent for r in group) / count

        # max() keeps the first offering among equally recent ones
        latest = max(group, key=lambda r: r.launch_date)

        score = (
            (age - mean_age) ** 2
            + (gender * 100 - mean_male) ** 2
            + (is_bachelor_or_higher * 100 - mean_bachelor) ** 2
        )
        scored.append((score, latest.course_title))

    scored.sort()
    return _distinct(title for _, title in scored)[:limit]
