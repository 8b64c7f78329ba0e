"""
JSON Exporter — Writes the report as a single JSON array.
"""

import json
import logging
from pathlib import Path

import aiofiles

from module_update_checker.models.module import ReportRow

logger = logging.getLogger(__name__)


class JSONExporter:
    """
    Exports ReportRow objects as one JSON file.

    Each row becomes an object holding either the full or the reduced set of
    columns.
    """

    def __init__(self, path: Path, full: bool = False):
        self.path = path
        self.full = full
        self.rows: list[dict] = []

    async def export(self, row: ReportRow) -> None:
        self.rows.append(row.to_dict(full=self.full))

    async def finalize(self) -> None:
        """Write the collected rows."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "w") as f:
            await f.write(json.dumps(self.rows, indent=2))
        logger.info(f"[JSON] Export complete: {len(self.rows)} rows written to {self.path}")

    @property
    def count(self) -> int:
        return len(self.rows)
