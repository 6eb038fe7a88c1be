"""Storage library for managing application records in a CSV file.

This module loads and persists the ordered collection of application records
that drives both pipeline passes. Every save is a full rewrite of the file
under the fixed header schema.
"""

import csv
from pathlib import Path
from typing import List, Optional

from ..logging_config import setup_logging
from ..models import CSV_HEADERS, ApplicationRecord

logger = setup_logging(__name__)


class ApplicationStore:
    """A class for managing storage operations on the applications CSV."""

    def __init__(self, csv_path: Path):
        """Initialize the storage with the CSV file path.

        Args:
            csv_path: Path to the applications CSV file.
        """
        self.csv_path = Path(csv_path)

    def _ensure_file_exists(self) -> bool:
        """Create the data directory and a header-only CSV if necessary.

        Returns:
            bool: True if the file had to be created.
        """
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        if self.csv_path.exists():
            return False
        logger.warning(f"CSV file not found at {self.csv_path}. Creating it with headers.")
        self._write_rows([])
        return True

    def load(self) -> List[ApplicationRecord]:
        """Load every application record in file order.

        Returns:
            List of records; empty when the file was just created.
        """
        if self._ensure_file_exists():
            return []

        records: List[ApplicationRecord] = []
        with open(self.csv_path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            fieldnames = reader.fieldnames or []
            missing = [h for h in CSV_HEADERS if h not in fieldnames]
            if missing:
                logger.warning(
                    "CSV file is missing columns, treating them as empty",
                    extra={"csv_file": str(self.csv_path), "missing": missing},
                )
            for row in reader:
                records.append(
                    ApplicationRecord(**{h: _cell(row.get(h)) for h in CSV_HEADERS})
                )

        logger.info(f"Loaded {len(records)} application(s) from {self.csv_path}")
        return records

    def save(self, records: List[ApplicationRecord]) -> None:
        """Rewrite the CSV file with the given records, preserving their order.

        Args:
            records: The complete record collection.
        """
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        self._write_rows(records)
        logger.info(f"CSV file updated successfully at: {self.csv_path}")

    def _write_rows(self, records: List[ApplicationRecord]) -> None:
        with open(self.csv_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_HEADERS)
            writer.writeheader()
            for record in records:
                writer.writerow(record.to_row())


def _cell(value: Optional[str]) -> Optional[str]:
    """Empty cells and columns absent from the file both load as None."""
    if value is None or value == "":
        return None
    return value
