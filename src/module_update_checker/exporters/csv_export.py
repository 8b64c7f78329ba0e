"""
CSV Exporter — Writes the report as a CSV table with a header row.
"""

import csv
import io
import logging
from pathlib import Path

import aiofiles

from module_update_checker.models.module import ReportRow

logger = logging.getLogger(__name__)


class CSVExporter:
    """Exports ReportRow objects as rows of one CSV file."""

    def __init__(self, path: Path, full: bool = False):
        self.path = path
        self.full = full
        self.buffer = io.StringIO()
        self.writer = csv.DictWriter(
            self.buffer, fieldnames=ReportRow.field_names(full=full), lineterminator="\n"
        )
        self.writer.writeheader()
        self.count = 0

    async def export(self, row: ReportRow) -> None:
        values = row.to_dict(full=self.full)
        self.writer.writerow({k: "" if v is None else v for k, v in values.items()})
        self.count += 1

    async def finalize(self) -> None:
        """Write the buffered table."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "w", newline="") as f:
            await f.write(self.buffer.getvalue())
        logger.info(f"[CSV] Export complete: {self.count} rows written to {self.path}")
