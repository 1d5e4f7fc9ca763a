#!/usr/bin/env python3
"""Online Courses Analyzer CLI."""

import argparse
import json
import logging
import sys
from config.settings import Settings
from analytics.analyzer import CourseAnalyzer
from retrieval.csv_loader import LoadError
from schemas.results import RankingCriterion


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Online Courses Analyzer - participant, instructor and recommendation queries"
    )
    parser.add_argument(
        "--csv-path",
        type=str,
        help="Path to CSV file (default: $COURSES_CSV_PATH or data/online_courses.csv)"
    )
    parser.add_argument(
        "--skip-bad-rows",
        action="store_true",
        help="Drop malformed rows instead of aborting the load"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("institutions", help="Participants per institution")
    commands.add_parser("subjects", help="Participants per institution and subject")
    commands.add_parser("instructors", help="Solo and co-taught courses per instructor")

    top = commands.add_parser("top", help="Top courses by hours or participants")
    top.add_argument("--k", type=int, default=None, help="Number of courses (default: settings top_k)")
    top.add_argument(
        "--by",
        type=str,
        choices=[c.value for c in RankingCriterion],
        default=RankingCriterion.PARTICIPANTS.value,
        help="Ranking criterion (default: participants)"
    )

    search = commands.add_parser("search", help="Search courses by subject, audit rate and length")
    search.add_argument("--subject", type=str, required=True, help="Case-insensitive subject fragment")
    search.add_argument("--min-audited", type=float, default=0.0, help="Minimum audited percent")
    search.add_argument("--max-hours", type=float, default=float("inf"), help="Maximum total course hours")

    recommend = commands.add_parser("recommend", help="Recommend courses for a person")
    recommend.add_argument("--age", type=int, required=True, help="Age of the person")
    recommend.add_argument("--gender", type=int, choices=[0, 1], required=True, help="1 for male, 0 for female")
    recommend.add_argument(
        "--bachelor",
        type=int,
        choices=[0, 1],
        required=True,
        help="1 if bachelor's degree or higher, else 0"
    )

    return parser


def run_query(analyzer: CourseAnalyzer, args: argparse.Namespace):
    """Run the selected command and return a JSON-serializable result."""
    if args.command == "institutions":
        return analyzer.participants_by_institution()
    if args.command == "subjects":
        return analyzer.participants_by_institution_and_subject()
    if args.command == "instructors":
        return {
            name: courses.model_dump()
            for name, courses in analyzer.courses_by_instructor().items()
        }
    if args.command == "top":
        k = args.k if args.k is not None else analyzer.settings.top_k
        return analyzer.top_courses(k, args.by)
    if args.command == "search":
        return analyzer.search_courses(args.subject, args.min_audited, args.max_hours)
    if args.command == "recommend":
        return analyzer.recommend_courses(args.age, args.gender, args.bachelor)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings(
        csv_path=args.csv_path,
        on_bad_rows="skip" if args.skip_bad_rows else "abort",
        verbose=args.verbose,
    )

    try:
        analyzer = CourseAnalyzer.from_csv(settings=settings)
        result = run_query(analyzer, args)
    except LoadError as e:
        print(f"Error loading {settings.csv_path}: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error processing query: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(2)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
