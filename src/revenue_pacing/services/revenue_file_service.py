"""
Revenue file import/export.

Reads daily revenue spreadsheets (CSV or Excel) with the columns
``Date``, ``Austin Revenue`` and ``Charlotte Revenue``, and writes exports
and a blank template in the same layout.
"""

import logging
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from revenue_pacing.models.entities import RevenueRecord, TargetConfiguration, ValidationResult
from revenue_pacing.models.validators import DataIntegrityValidator
from revenue_pacing.utils.date_range_utils import DateParseError, DateRangeUtils

logger = logging.getLogger(__name__)


class RevenueFileError(Exception):
    """Raised when a revenue file cannot be read or written."""
    pass


@dataclass
class ImportResult:
    """Records parsed from a file plus the validation findings for every row."""
    source: Path
    records: List[RevenueRecord] = field(default_factory=list)
    validation: ValidationResult = field(default_factory=ValidationResult)
    skipped_rows: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": str(self.source),
            "records": [r.to_dict() for r in self.records],
            "validation": self.validation.to_dict(),
            "skipped_rows": self.skipped_rows,
        }


class RevenueFileService:
    """Reads and writes daily revenue files."""

    # File column -> record field
    COLUMN_MAPPING = {
        "Date": "date",
        "Austin Revenue": "austin",
        "Charlotte Revenue": "charlotte",
    }

    EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
    SHEET_NAME = "Revenue"

    def __init__(self, validator: Optional[DataIntegrityValidator] = None):
        self.validator = validator or DataIntegrityValidator()
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------ read

    def read_rows(self, file_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Read a file into raw row mappings ({"date", "austin", "charlotte"}).

        Dates are normalized to YYYY-MM-DD strings when the cell holds a real
        date; amounts become floats when numeric. Anything else is passed
        through untouched so validation can report it.

        Raises:
            RevenueFileError: If the file is missing, unreadable or lacks a column
        """
        path = Path(file_path)
        if not path.exists():
            raise RevenueFileError(f"File not found: {path}")

        try:
            if path.suffix.lower() in self.EXCEL_SUFFIXES:
                frame = pd.read_excel(path, engine="openpyxl", dtype=object)
            else:
                frame = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
        except (OSError, ValueError, InvalidFileException, zipfile.BadZipFile) as e:
            self.logger.error(f"Failed to read {path}: {e}")
            raise RevenueFileError(f"Error reading {path.name}: {e}") from e

        frame.columns = [str(c).strip() for c in frame.columns]
        missing = [c for c in self.COLUMN_MAPPING if c not in frame.columns]
        if missing:
            raise RevenueFileError(f"{path.name} is missing required column(s): {', '.join(missing)}")

        rows = []
        for raw in frame[list(self.COLUMN_MAPPING)].to_dict(orient="records"):
            if all(self._is_blank(raw[c]) for c in self.COLUMN_MAPPING):
                continue
            rows.append({
                "date": self._normalize_date(raw["Date"]),
                "austin": self._normalize_amount(raw["Austin Revenue"]),
                "charlotte": self._normalize_amount(raw["Charlotte Revenue"]),
            })

        self.logger.info(f"Read {len(rows)} rows from {path.name}")
        return rows

    def load(
        self,
        file_path: Union[str, Path],
        config: Optional[TargetConfiguration] = None,
        today: Optional[date] = None,
    ) -> ImportResult:
        """Read, validate and convert a file; rows that cannot be converted are skipped."""
        path = Path(file_path)
        rows = self.read_rows(path)
        result = ImportResult(source=path, validation=self.validator.validate(rows, config, today))

        for row in rows:
            try:
                result.records.append(RevenueRecord.from_dict(row))
            except (DateParseError, TypeError, ValueError):
                result.skipped_rows += 1

        if result.skipped_rows:
            self.logger.warning(f"Skipped {result.skipped_rows} unparseable row(s) in {path.name}")
        return result

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        try:
            return bool(pd.isna(value))
        except (TypeError, ValueError):
            return False

    def _normalize_date(self, value: Any) -> Any:
        if isinstance(value, (datetime, pd.Timestamp)):
            return DateRangeUtils.format_date(value.date())
        if isinstance(value, date):
            return DateRangeUtils.format_date(value)
        if self._is_blank(value):
            return None
        return str(value).strip()

    def _normalize_amount(self, value: Any) -> Any:
        if self._is_blank(value):
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        text = str(value).strip().replace(",", "").lstrip("$")
        try:
            return float(text)
        except ValueError:
            return value

    # ----------------------------------------------------------------- write

    def _frame(self, records: Iterable[RevenueRecord]) -> pd.DataFrame:
        ordered = sorted(records, key=lambda r: r.date)
        return pd.DataFrame(
            [
                {
                    "Date": DateRangeUtils.format_date(r.date),
                    "Austin Revenue": r.austin,
                    "Charlotte Revenue": r.charlotte,
                }
                for r in ordered
            ],
            columns=list(self.COLUMN_MAPPING),
        )

    def export(self, records: Iterable[RevenueRecord], destination: Union[str, Path]) -> Path:
        """Write records (sorted by date) to CSV, or to Excel for an .xlsx destination."""
        path = Path(destination)
        frame = self._frame(records)
        try:
            if path.suffix.lower() in self.EXCEL_SUFFIXES:
                with pd.ExcelWriter(path, engine="openpyxl") as writer:
                    frame.to_excel(writer, sheet_name=self.SHEET_NAME, index=False)
            else:
                frame.to_csv(path, index=False)
        except OSError as e:
            self.logger.error(f"Failed to write {path}: {e}")
            raise RevenueFileError(f"Error writing {path.name}: {e}") from e

        self.logger.info(f"Exported {len(frame)} records to {path}")
        return path

    def write_template(self, destination: Union[str, Path], today: Optional[date] = None) -> Path:
        """One example row dated today with zero revenue."""
        today = today or date.today()
        return self.export([RevenueRecord(date=today)], destination)

    @staticmethod
    def default_export_name(today: Optional[date] = None) -> str:
        today = today or date.today()
        return f"revenue_data_{DateRangeUtils.format_date(today)}.csv"
