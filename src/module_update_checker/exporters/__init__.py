"""Export backends for module status reports."""

from pathlib import Path

from module_update_checker.exporters.base import Exporter
from module_update_checker.exporters.csv_export import CSVExporter
from module_update_checker.exporters.json_export import JSONExporter


def get_exporter(format_name: str, path: str | Path, full: bool = False) -> Exporter:
    """Factory function to create an exporter by format name."""
    out = Path(path)
    match format_name:
        case "json":
            return JSONExporter(path=out, full=full)
        case "csv":
            return CSVExporter(path=out, full=full)
        case _:
            raise ValueError(f"Unknown export format: {format_name!r}. Use 'json' or 'csv'.")


__all__ = ["Exporter", "JSONExporter", "CSVExporter", "get_exporter"]
