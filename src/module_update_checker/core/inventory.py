"""
Local Inventory — installed module discovery.

Scans the PSModulePath roots for module directories, in either layout:

    <root>/<Name>/<Version>/<Name>.psd1    (side-by-side versions)
    <root>/<Name>/<Name>.psd1              (single unversioned copy)
"""

import logging
import os
import re
import sys
from pathlib import Path

from module_update_checker.core.errors import InventoryQueryError
from module_update_checker.models.module import CORE_EDITION, DESKTOP_EDITION, LocalRecord
from module_update_checker.parsers.manifest import parse_manifest

logger = logging.getLogger(__name__)

MODULE_PATH_ENV = "PSModulePath"

# Checked in this order: the legacy path also contains the modern marker
DESKTOP_MARKER = "windowspowershell"
CORE_MARKER = "powershell"

VERSION_DIR_PATTERN = re.compile(r"^\d+(\.\d+){1,3}$")
MODULE_FILE_SUFFIXES = (".psd1", ".psm1")


def classify_edition(path: str) -> str | None:
    """
    Infer the PowerShell edition an install path belongs to.

    'C:\\Program Files\\WindowsPowerShell\\Modules\\Pester\\3.4.0' -> 'Desktop'
    '/usr/local/share/powershell/Modules/Pester/5.5.0' -> 'Core'
    """
    lowered = path.lower()
    if DESKTOP_MARKER in lowered:
        return DESKTOP_EDITION
    if CORE_MARKER in lowered:
        return CORE_EDITION
    return None


def truncate_install_path(module_base: str, name: str) -> str:
    """
    Strip the module's own directory (and any version directory) from a path.

    'C:\\Program Files\\PowerShell\\Modules\\Pester\\5.5.0' -> 'C:\\Program Files\\PowerShell\\Modules'

    Falls back to the last 'Modules' segment, then to the parent directory,
    when the module name does not appear in the path.
    """
    parts = re.split(r"[\\/]", module_base)
    sep = "\\" if "\\" in module_base else "/"

    for index in range(len(parts) - 1, -1, -1):
        if parts[index].lower() == name.lower():
            return sep.join(parts[:index]) or sep

    for index in range(len(parts) - 1, -1, -1):
        if parts[index].lower() == "modules":
            return sep.join(parts[: index + 1])

    return sep.join(parts[:-1]) or module_base


def default_module_roots() -> list[Path]:
    """Module roots PowerShell uses when PSModulePath is not set."""
    home = Path.home()
    if sys.platform == "win32":
        program_files = Path(os.environ.get("ProgramFiles", r"C:\Program Files"))
        system_root = Path(os.environ.get("SystemRoot", r"C:\Windows"))
        documents = home / "Documents"
        return [
            documents / "PowerShell" / "Modules",
            program_files / "PowerShell" / "Modules",
            documents / "WindowsPowerShell" / "Modules",
            program_files / "WindowsPowerShell" / "Modules",
            system_root / "System32" / "WindowsPowerShell" / "v1.0" / "Modules",
        ]
    return [
        home / ".local" / "share" / "powershell" / "Modules",
        Path("/usr/local/share/powershell/Modules"),
        Path("/opt/microsoft/powershell/7/Modules"),
    ]


class LocalInventory:
    """
    Finds installed copies of modules.

    Roots come from the explicit list, else PSModulePath, else the platform
    defaults. Duplicate roots are scanned once.
    """

    def __init__(self, roots: list[Path] | None = None):
        if roots is None:
            env_value = os.environ.get(MODULE_PATH_ENV)
            if env_value:
                roots = [Path(p) for p in env_value.split(os.pathsep) if p.strip()]
            else:
                roots = default_module_roots()

        self.roots: list[Path] = []
        seen: set[str] = set()
        for root in roots:
            key = os.path.normcase(str(root))
            if key not in seen:
                seen.add(key)
                self.roots.append(root)

    def find(self, name: str) -> list[LocalRecord]:
        """
        Find every installed copy of a module across all roots.

        Raises:
            InventoryQueryError: if an existing root cannot be read.
        """
        records: list[LocalRecord] = []
        for root in self.roots:
            if not root.is_dir():
                continue
            for module_dir in self._matching_dirs(root, name):
                records.extend(self._scan_module_dir(module_dir))

        logger.debug(f"[Inventory] {name}: {len(records)} installation(s)")
        return records

    def list_all(self) -> list[LocalRecord]:
        """Every installed module under every root, sorted by name."""
        records: list[LocalRecord] = []
        for root in self.roots:
            if not root.is_dir():
                continue
            for module_dir in self._list_dir(root):
                if module_dir.is_dir():
                    records.extend(self._scan_module_dir(module_dir))
        return sorted(records, key=lambda r: r.name.lower())

    def _matching_dirs(self, root: Path, name: str) -> list[Path]:
        return [
            entry
            for entry in self._list_dir(root)
            if entry.is_dir() and entry.name.lower() == name.lower()
        ]

    def _list_dir(self, path: Path) -> list[Path]:
        try:
            return sorted(path.iterdir())
        except OSError as e:
            raise InventoryQueryError(f"Cannot read module directory {path}: {e}") from e

    def _scan_module_dir(self, module_dir: Path) -> list[LocalRecord]:
        name = module_dir.name
        records = []

        for entry in self._list_dir(module_dir):
            if entry.is_dir() and VERSION_DIR_PATTERN.match(entry.name) and _has_module_file(entry, name):
                records.append(self._make_record(name, entry.name, entry))

        if not records and _has_module_file(module_dir, name):
            version = _manifest_version(_module_file(module_dir, name, ".psd1"))
            if version:
                records.append(self._make_record(name, version, module_dir))
            else:
                logger.debug(f"[Inventory] No ModuleVersion for unversioned {module_dir}")

        return records

    @staticmethod
    def _make_record(name: str, version: str, module_base: Path) -> LocalRecord:
        base = str(module_base)
        return LocalRecord(
            name=name,
            version=version,
            module_base=base,
            install_path=truncate_install_path(base, name),
            edition=classify_edition(base),
        )


def _module_file(directory: Path, name: str, suffix: str) -> Path | None:
    """<name><suffix> inside directory, matched case-insensitively."""
    wanted = f"{name}{suffix}".lower()
    try:
        for entry in directory.iterdir():
            if entry.name.lower() == wanted and entry.is_file():
                return entry
    except OSError as e:
        raise InventoryQueryError(f"Cannot read module directory {directory}: {e}") from e
    return None


def _has_module_file(directory: Path, name: str) -> bool:
    return any(_module_file(directory, name, suffix) for suffix in MODULE_FILE_SUFFIXES)


def _manifest_version(manifest: Path | None) -> str | None:
    if manifest is None:
        return None
    try:
        content = manifest.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as e:
        logger.warning(f"Failed to read manifest {manifest}: {e}")
        return None
    return parse_manifest(content)["module_version"]
