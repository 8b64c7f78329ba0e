"""
Exporter Protocol — Base interface for report export backends.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from module_update_checker.models.module import ReportRow


@runtime_checkable
class Exporter(Protocol):
    """
    Protocol that all exporters must implement.

    Exporters receive ReportRow objects in display order and persist them in
    their format once finalize() is called.
    """

    async def export(self, row: ReportRow) -> None:
        """Add a single row to the export."""
        ...

    async def finalize(self) -> None:
        """Called after all rows have been exported. Writes the output file."""
        ...
