"""
Module Reconciler — merges gallery metadata with local installations.

For each requested module name the reconciler asks the gallery for the latest
published version, asks the local inventory for installed copies, and emits one
ReportRow per installed copy (or a single row when nothing is installed). An
optional second pass force-installs newer versions over outdated copies.

Names are processed strictly one after another.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from module_update_checker.core.config import CheckOptions
from module_update_checker.core.errors import FailureKind
from module_update_checker.core.installer import Installer
from module_update_checker.core.progress import CheckProgress, ModuleStatus
from module_update_checker.core.versioning import is_newer
from module_update_checker.models.module import LocalRecord, RemoteRecord, ReportRow

logger = logging.getLogger(__name__)


class Registry(Protocol):
    async def find_module(self, name: str) -> RemoteRecord | None: ...


class Inventory(Protocol):
    def find(self, name: str) -> list[LocalRecord]: ...


@dataclass
class ReconcileResult:
    """Outcome of a full run: either the report rows or why there are none."""

    rows: list[ReportRow] = field(default_factory=list)
    failure: FailureKind | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, rows: list[ReportRow]) -> "ReconcileResult":
        return cls(rows=rows)

    @classmethod
    def fail(cls, error: Exception) -> "ReconcileResult":
        return cls(rows=[], failure=FailureKind.of(error), error=error)


def dedupe_names(names: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first spelling and order."""
    seen: set[str] = set()
    unique = []
    for name in names:
        name = name.strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        unique.append(name)
    return unique


def sort_rows(rows: Iterable[ReportRow]) -> list[ReportRow]:
    """Order rows by module name. Stable, so one module's rows keep discovery order."""
    return sorted(rows, key=lambda row: row.name.lower())


def project(rows: Iterable[ReportRow], full: bool = False) -> list[dict]:
    """
    Shape rows for display, sorted by module name.

    The reduced projection keeps the columns needed to decide on updates.
    """
    return [row.to_dict(full=full) for row in sort_rows(rows)]


class ModuleReconciler:
    """
    Builds the update-status report for a list of module names.

    Args:
        registry: Gallery lookup (GalleryClient in production).
        inventory: Local installation lookup (LocalInventory in production).
        installer: Used by update(); may be omitted for report-only runs.
        console: Rich console for the progress display.
    """

    def __init__(
        self,
        registry: Registry,
        inventory: Inventory,
        installer: Installer | None = None,
        console: Console | None = None,
    ):
        self.registry = registry
        self.inventory = inventory
        self.installer = installer
        self.console = console or Console(stderr=True)

    # ──────────────────────────────────────────────
    # Report
    # ──────────────────────────────────────────────

    async def reconcile(
        self,
        names: Iterable[str],
        progress: CheckProgress | None = None,
        show_progress: bool = False,
    ) -> list[ReportRow]:
        """
        Build report rows for the given module names.

        Registry and inventory errors are not caught here; they abort the
        whole pass.
        """
        names = dedupe_names(names)
        if not names:
            logger.info("No module names to check.")
            return []

        if progress is None:
            progress = CheckProgress.create(names)
        else:
            progress.total = len(names)

        rows: list[ReportRow] = []
        # Local versions already reported anywhere in this run
        emitted_versions: set[str] = set()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
            disable=not show_progress,
            transient=True,
        ) as bar:
            task_id = bar.add_task("[green]Checking modules...[/green]", total=len(names))

            for name in names:
                bar.update(task_id, description=f"[green]Checking {name}...[/green]")
                new_rows = await self._reconcile_one(name, emitted_versions)
                if new_rows is None:
                    progress.record(name, ModuleStatus.NOT_FOUND)
                else:
                    rows.extend(new_rows)
                    progress.record(name, ModuleStatus.FOUND, rows=len(new_rows))
                bar.advance(task_id)

        logger.debug(progress.summary())
        return rows

    async def _reconcile_one(self, name: str, emitted_versions: set[str]) -> list[ReportRow] | None:
        """Rows for one module, or None when the gallery does not know it."""
        remote = await self.registry.find_module(name)
        if remote is None:
            logger.info(f"Module {name!r} was not found in the gallery.")
            return None

        installed = self.inventory.find(name)
        if not installed:
            row = ReportRow.from_records(remote)
            emitted_versions.add(row.local_version)
            return [row]

        rows = []
        for local in installed:
            # TODO: confirm whether this guard should be scoped to the current module;
            # as written it also hides another module's install with the same version.
            if local.version in emitted_versions:
                logger.debug(f"Skipping {local.name} {local.version} at {local.module_base}: version already reported")
                continue
            row = ReportRow.from_records(
                remote, local, updatable=is_newer(remote.version, local.version)
            )
            rows.append(row)
            emitted_versions.add(local.version)

        return rows

    # ──────────────────────────────────────────────
    # Update
    # ──────────────────────────────────────────────

    async def update(self, rows: Sequence[ReportRow]) -> None:
        """
        Install the gallery version over every outdated local copy.

        Only local_version of a successfully updated row changes. Install
        failures are logged and do not stop the pass.
        """
        for row in rows:
            if not row.is_installed:
                logger.info(f"{row.name} is not installed locally; nothing to update.")
                continue
            if not row.updatable:
                logger.debug(f"{row.name} {row.local_version} is current.")
                continue
            if self.installer is None:
                logger.warning(f"No installer configured; cannot update {row.name}.")
                continue

            logger.info(f"Updating {row.name} {row.local_version} -> {row.registry_version} in {row.install_path}")
            try:
                await self.installer.install(row.name, row.registry_version, row.install_path)
            except Exception as e:
                logger.error(f"Failed to update {row.name}: {e}")
                continue

            row.local_version = row.registry_version

    # ──────────────────────────────────────────────
    # Main Run
    # ──────────────────────────────────────────────

    async def run(self, names: Iterable[str], options: CheckOptions) -> ReconcileResult:
        """
        Reconcile, then update if requested.

        Any error while building the report is captured in the result; no
        partial rows are returned.
        """
        progress = CheckProgress()
        try:
            rows = await self.reconcile(
                names, progress=progress, show_progress=not options.disable_progress_bar
            )
            if options.update:
                await self.update(rows)
        except Exception as e:
            logger.debug(f"Check aborted after {progress.processed} module(s): {e}")
            return ReconcileResult.fail(e)

        logger.info(progress.summary())
        return ReconcileResult.success(rows)
