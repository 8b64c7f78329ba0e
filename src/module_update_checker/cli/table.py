"""
Table rendering for report rows and local inventory listings.
"""

from rich.table import Table

from module_update_checker.models.module import LocalRecord, NONE

COLUMN_TITLES = {
    "download_count": "Downloads",
    "registry_version": "Gallery",
    "local_version": "Installed",
    "install_path": "Install Path",
    "published_date": "Published",
    "last_updated": "Last Updated",
    "is_prerelease": "Prerelease",
    "license_uri": "License",
    "project_uri": "Project",
}


def report_table(rows: list[dict]) -> Table:
    """Build a rich table from projected report rows (see reconciler.project)."""
    table = Table(show_header=True, header_style="bold cyan")
    if not rows:
        table.add_column("Name")
        return table

    for key in rows[0]:
        justify = "right" if key == "download_count" else "left"
        table.add_column(COLUMN_TITLES.get(key, key.replace("_", " ").title()), justify=justify)

    for row in rows:
        cells = [_cell(key, value) for key, value in row.items()]
        table.add_row(*cells)
    return table


def inventory_table(records: list[LocalRecord]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    for title in ("Name", "Version", "Edition", "Install Path"):
        table.add_column(title)
    for record in records:
        table.add_row(record.name, record.version, record.edition or NONE, record.install_path)
    return table


def _cell(key: str, value) -> str:
    if value is None:
        return ""
    if key == "updatable" and value == "Yes":
        return "[bold yellow]Yes[/bold yellow]"
    if key == "download_count":
        return f"{value:,}"
    return str(value)
