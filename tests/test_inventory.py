"""Tests for local module discovery and path classification."""

import os
from pathlib import Path

import pytest

from module_update_checker.core.errors import InventoryQueryError
from module_update_checker.core.inventory import (
    LocalInventory,
    classify_edition,
    truncate_install_path,
)


def install(root: Path, name: str, version: str | None, manifest_version: str | None = None) -> Path:
    """Create a fake installed module; version=None makes an unversioned layout."""
    module_dir = root / name
    base = module_dir / version if version else module_dir
    base.mkdir(parents=True, exist_ok=True)
    (base / f"{name}.psd1").write_text(f"@{{\n    ModuleVersion = '{manifest_version or version}'\n}}\n")
    return base


# ═══════════════════════════════════════════
# Edition Classification
# ═══════════════════════════════════════════


class TestClassifyEdition:
    def test_windows_powershell_is_desktop(self):
        assert classify_edition(r"C:\Program Files\WindowsPowerShell\Modules\Pester\3.4.0") == "Desktop"

    def test_powershell_is_core(self):
        assert classify_edition(r"C:\Program Files\PowerShell\Modules\Pester\5.5.0") == "Core"

    def test_linux_path_is_core(self):
        assert classify_edition("/usr/local/share/powershell/Modules/Pester/5.5.0") == "Core"

    def test_unknown(self):
        assert classify_edition("/srv/psmods/Pester/5.5.0") is None


# ═══════════════════════════════════════════
# Install Path Truncation
# ═══════════════════════════════════════════


class TestTruncateInstallPath:
    def test_windows_versioned(self):
        path = r"C:\Program Files\PowerShell\Modules\Pester\5.5.0"
        assert truncate_install_path(path, "Pester") == r"C:\Program Files\PowerShell\Modules"

    def test_posix_versioned(self):
        path = "/home/me/.local/share/powershell/Modules/Pester/5.5.0"
        assert truncate_install_path(path, "pester") == "/home/me/.local/share/powershell/Modules"

    def test_unversioned(self):
        assert truncate_install_path("/srv/psmods/Foo", "Foo") == "/srv/psmods"

    def test_falls_back_to_modules_segment(self):
        assert truncate_install_path("/opt/Modules/Other/1.0", "Foo") == "/opt/Modules"

    def test_falls_back_to_parent(self):
        assert truncate_install_path("/srv/x/1.0", "Foo") == "/srv/x"


# ═══════════════════════════════════════════
# LocalInventory
# ═══════════════════════════════════════════


class TestLocalInventory:
    def test_finds_side_by_side_versions(self, tmp_path):
        root = tmp_path / "powershell" / "Modules"
        install(root, "Pester", "4.10.1")
        install(root, "Pester", "5.5.0")

        records = LocalInventory(roots=[root]).find("Pester")
        assert [r.version for r in records] == ["4.10.1", "5.5.0"]
        assert all(r.install_path == str(root) for r in records)
        assert all(r.edition == "Core" for r in records)
        assert records[0].module_base == str(root / "Pester" / "4.10.1")

    def test_case_insensitive_name(self, tmp_path):
        install(tmp_path, "PSReadLine", "2.3.4")
        records = LocalInventory(roots=[tmp_path]).find("psreadline")
        assert [r.name for r in records] == ["PSReadLine"]

    def test_unversioned_layout_reads_manifest(self, tmp_path):
        install(tmp_path, "Legacy", None, manifest_version="1.2.0")
        [record] = LocalInventory(roots=[tmp_path]).find("Legacy")
        assert record.version == "1.2.0"
        assert record.install_path == str(tmp_path)

    def test_manifest_spelled_differently_from_directory(self, tmp_path):
        base = tmp_path / "Pester" / "5.5.0"
        base.mkdir(parents=True)
        (base / "PESTER.psd1").write_text("@{ ModuleVersion = '5.5.0' }")

        [record] = LocalInventory(roots=[tmp_path]).find("pester")
        assert record.version == "5.5.0"
        assert record.module_base == str(base)

    def test_unversioned_manifest_spelled_differently(self, tmp_path):
        module_dir = tmp_path / "Legacy"
        module_dir.mkdir()
        (module_dir / "legacy.psd1").write_text("@{ ModuleVersion = '0.9.1' }")

        [record] = LocalInventory(roots=[tmp_path]).find("Legacy")
        assert record.version == "0.9.1"

    def test_multiple_roots(self, tmp_path):
        desktop = tmp_path / "WindowsPowerShell" / "Modules"
        core = tmp_path / "PowerShell" / "Modules"
        install(desktop, "Foo", "1.0.0")
        install(core, "Foo", "2.0.0")

        records = LocalInventory(roots=[desktop, core]).find("Foo")
        assert [(r.version, r.edition) for r in records] == [("1.0.0", "Desktop"), ("2.0.0", "Core")]

    def test_not_installed(self, tmp_path):
        assert LocalInventory(roots=[tmp_path]).find("Nothing") == []

    def test_missing_root_skipped(self, tmp_path):
        assert LocalInventory(roots=[tmp_path / "absent"]).find("Foo") == []

    def test_directory_without_module_file_ignored(self, tmp_path):
        (tmp_path / "Foo" / "1.0.0").mkdir(parents=True)
        assert LocalInventory(roots=[tmp_path]).find("Foo") == []

    def test_duplicate_roots_scanned_once(self, tmp_path):
        install(tmp_path, "Foo", "1.0.0")
        inventory = LocalInventory(roots=[tmp_path, tmp_path])
        assert len(inventory.roots) == 1
        assert len(inventory.find("Foo")) == 1

    def test_roots_from_environment(self, tmp_path, monkeypatch):
        first, second = tmp_path / "a", tmp_path / "b"
        monkeypatch.setenv("PSModulePath", os.pathsep.join([str(first), str(second)]))
        assert LocalInventory().roots == [first, second]

    def test_list_all_sorted(self, tmp_path):
        install(tmp_path, "Zeta", "1.0.0")
        install(tmp_path, "alpha", "2.0.0")
        assert [r.name for r in LocalInventory(roots=[tmp_path]).list_all()] == ["alpha", "Zeta"]

    def test_unreadable_root_raises(self, tmp_path, monkeypatch):
        def refuse(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "iterdir", refuse)
        with pytest.raises(InventoryQueryError, match="denied"):
            LocalInventory(roots=[tmp_path]).find("Foo")
