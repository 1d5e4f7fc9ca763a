"""CSV loader for the online courses dataset."""

import logging
import re
import pandas as pd
import yaml
from pathlib import Path
from typing import Optional
from pydantic import ValidationError

from schemas.course import CourseRecord

logger = logging.getLogger(__name__)

# pandas reports tokenizer failures as "... Expected 23 fields in line 7, saw 24"
_PARSER_LINE_PATTERN = re.compile(r"line (\d+)")

# Rows are numbered like file lines: the header is row 1
_FIRST_DATA_ROW = 2


class LoadError(ValueError):
    """A dataset row (or the whole file) could not be loaded."""

    def __init__(self, row: Optional[int], reason: str):
        self.row = row
        self.reason = reason
        location = f"row {row}" if row is not None else "file"
        super().__init__(f"{location}: {reason}")


class CSVLoader:
    """Load course offerings from CSV into immutable records."""

    ENCODINGS = ['utf-8-sig', 'utf-8', 'latin-1']

    def __init__(
        self,
        columns_config_path: Optional[str] = None,
        date_format: str = "%m/%d/%Y",
        on_bad_rows: str = "abort",
    ):
        """
        Initialize CSV loader.

        Args:
            columns_config_path: Path to columns.yaml config
            date_format: strptime format of the launch date column
            on_bad_rows: "abort" to raise on the first bad row, "skip" to drop it
        """
        if on_bad_rows not in ("abort", "skip"):
            raise ValueError(f"Unsupported on_bad_rows policy: {on_bad_rows}")

        if columns_config_path is None:
            # Default to config/columns.yaml
            base_path = Path(__file__).parent.parent
            columns_config_path = base_path / "config" / "columns.yaml"

        with open(columns_config_path, 'r') as f:
            layout = yaml.safe_load(f)

        self.fields: list[str] = list(layout["fields"])
        self.date_fields: list[str] = list(layout.get("date_fields", []))
        self.integer_fields: list[str] = list(layout.get("integer_fields", []))
        self.float_fields: list[str] = list(layout.get("float_fields", []))
        self.date_format = date_format
        self.on_bad_rows = on_bad_rows

    @classmethod
    def from_settings(cls, settings) -> "CSVLoader":
        """Build a loader from application settings."""
        return cls(
            columns_config_path=settings.columns_config_path,
            date_format=settings.date_format,
            on_bad_rows=settings.on_bad_rows,
        )

    @property
    def column_count(self) -> int:
        return len(self.fields)

    def load_records(self, csv_path: str) -> tuple[CourseRecord, ...]:
        """
        Load every offering in the file.

        Args:
            csv_path: Path to CSV file

        Returns:
            Records in file order

        Raises:
            LoadError: If the file or a row is malformed (rows are dropped
                instead when on_bad_rows is "skip")
        """
        df = self.load_csv(csv_path)

        records = []
        for row_number, values in zip(df.index, df.to_dict("records")):
            try:
                records.append(CourseRecord(**values))
            except ValidationError as e:
                self._reject(row_number, self._describe_validation_error(e))

        logger.info(f"Loaded {len(records)} course offerings from {csv_path}")
        return tuple(records)

    def load_csv(self, csv_path: str) -> pd.DataFrame:
        """
        Load CSV file into a typed DataFrame indexed by row number.

        Args:
            csv_path: Path to CSV file

        Returns:
            Cleaned DataFrame with one column per configured field
        """
        df = self._read_raw(csv_path)
        return self._clean_dataframe(df)

    def _read_raw(self, csv_path: str) -> pd.DataFrame:
        """Read every field as text, trying the supported encodings in turn."""
        read_options = dict(
            header=None,
            skiprows=1,
            dtype=str,
            keep_default_na=False,
            delimiter=',',
        )
        if self.on_bad_rows == "skip":
            read_options.update(engine="python", on_bad_lines=self._skip_bad_line)

        df = None
        for encoding in self.ENCODINGS:
            try:
                df = pd.read_csv(csv_path, encoding=encoding, **read_options)
                break
            except (UnicodeDecodeError, UnicodeError):
                continue
            except pd.errors.EmptyDataError:
                # Header only (or nothing at all)
                return pd.DataFrame(columns=range(self.column_count), dtype=str)
            except pd.errors.ParserError as e:
                match = _PARSER_LINE_PATTERN.search(str(e))
                row = int(match.group(1)) if match else None
                raise LoadError(row, f"expected {self.column_count} columns: {e}") from e
            except OSError as e:
                raise LoadError(None, f"could not read {csv_path}: {e}") from e

        if df is None:
            raise LoadError(None, f"could not decode {csv_path} with any of {self.ENCODINGS}")

        df.index = df.index + _FIRST_DATA_ROW
        return df

    def _skip_bad_line(self, fields: list[str]) -> None:
        logger.warning(
            f"Skipping row with {len(fields)} columns (expected {self.column_count}): {fields[:2]}"
        )
        return None

    def _clean_dataframe(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Check column counts and coerce typed fields.

        Args:
            df: Raw all-text DataFrame

        Returns:
            DataFrame of Python values keyed by field name
        """
        width = max(len(df.columns), self.column_count)
        df = df.reindex(columns=range(width))

        # Missing trailing fields come back as NaN, extra ones as non-NaN
        found = df.notna().sum(axis=1)
        for row_number in df.index[found != self.column_count]:
            self._reject(
                row_number,
                f"expected {self.column_count} columns, found {found[row_number]}",
            )
        df = df.loc[found == self.column_count, list(range(self.column_count))]
        df.columns = self.fields

        for field in self.integer_fields:
            df = self._coerce(df, field, self._parse_integer(df[field]), int, "integer")
        for field in self.float_fields:
            df = self._coerce(df, field, pd.to_numeric(df[field], errors='coerce'), float, "number")
        for field in self.date_fields:
            dates = pd.to_datetime(df[field], format=self.date_format, errors='coerce')
            df = self._coerce(df, field, dates, lambda v: v.date(), f"date ({self.date_format})")

        return df

    def _coerce(self, df: pd.DataFrame, field: str, parsed: pd.Series, convert, kind: str) -> pd.DataFrame:
        """Replace a text column with parsed values, rejecting rows that failed."""
        bad = parsed.isna()
        for row_number in df.index[bad]:
            self._reject(row_number, f"{field} is not a valid {kind}: {df.at[row_number, field]!r}")

        df = df.loc[~bad].copy()
        df[field] = pd.Series(
            [convert(value) for value in parsed[~bad]], index=df.index, dtype=object
        )
        return df

    def _parse_integer(self, series: pd.Series) -> pd.Series:
        """Parse whole numbers; anything fractional or non-numeric becomes NaN."""
        numbers = pd.to_numeric(series, errors='coerce')
        whole = (numbers % 1 == 0).fillna(False).astype(bool)
        return numbers.where(whole)

    def _reject(self, row_number: int, reason: str) -> None:
        """Abort the load, or log and move on when skipping bad rows."""
        if self.on_bad_rows == "abort":
            raise LoadError(int(row_number), reason)
        logger.warning(f"Skipping row {row_number}: {reason}")

    @staticmethod
    def _describe_validation_error(error: ValidationError) -> str:
        problems = []
        for item in error.errors():
            location = ".".join(str(part) for part in item["loc"])
            problems.append(f"{location}: {item['msg']}")
        return "; ".join(problems)
