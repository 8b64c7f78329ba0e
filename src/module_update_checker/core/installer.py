"""
Module Installer — unpack gallery packages into a module root.

A .nupkg is a zip archive holding the module files plus NuGet packaging
metadata. The module files are written to <root>/<Name>/<Version>/, replacing
any existing copy of that version.
"""

import io
import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable
from urllib.parse import unquote

import aiofiles

from module_update_checker.core.errors import InstallError
from module_update_checker.core.gallery import GalleryClient

logger = logging.getLogger(__name__)

PACKAGING_ENTRIES = ("[Content_Types].xml",)
PACKAGING_DIRS = ("_rels", "package")


@runtime_checkable
class Installer(Protocol):
    """Anything that can install a module version into a module root."""

    async def install(self, name: str, version: str, destination_root: str) -> Path:
        """Install name/version under destination_root and return the module directory."""
        ...


class NupkgInstaller:
    """Installs modules by downloading and unpacking their .nupkg archive."""

    def __init__(self, gallery: GalleryClient):
        self.gallery = gallery

    async def install(self, name: str, version: str, destination_root: str) -> Path:
        """
        Force-install a module version.

        The archive is unpacked into a hidden sibling directory first and only
        swapped in once every file is written, so a failed install leaves any
        existing copy untouched.

        Raises:
            InstallError: if the download fails, the archive is invalid or
                the files cannot be written.
        """
        payload = await self.gallery.download_package(name, version)
        # Side-by-side directories never carry the prerelease label
        target = Path(destination_root) / name / version.split("-")[0]

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{target.name}-", dir=target.parent))
        except OSError as e:
            raise InstallError(f"{name} {version}: cannot write to {target} ({e})") from e

        try:
            with zipfile.ZipFile(io.BytesIO(payload)) as archive:
                members = _module_members(archive, staging)
                for info, dest in members:
                    dest.parent.mkdir(parents=True, exist_ok=True)
                    async with aiofiles.open(dest, "wb") as f:
                        await f.write(archive.read(info))
            staging.chmod(0o755)
            _swap_into_place(staging, target)
        except zipfile.BadZipFile as e:
            raise InstallError(f"{name} {version}: not a valid package archive ({e})") from e
        except OSError as e:
            raise InstallError(f"{name} {version}: cannot write to {target} ({e})") from e
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info(f"[Install] {name} {version} -> {target} ({len(members)} files)")
        return target


def _swap_into_place(staging: Path, target: Path) -> None:
    """Rename staging to target, moving any existing target aside first."""
    if not target.exists():
        os.replace(staging, target)
        return

    backup = staging.with_name(f"{staging.name}.old")
    os.replace(target, backup)
    try:
        os.replace(staging, target)
    except OSError:
        os.replace(backup, target)
        raise
    shutil.rmtree(backup, ignore_errors=True)


def _module_members(archive: zipfile.ZipFile, target: Path) -> list[tuple[zipfile.ZipInfo, Path]]:
    """Map archive entries to destination paths, dropping NuGet metadata."""
    members = []
    resolved_target = target.resolve()

    for info in archive.infolist():
        if info.is_dir():
            continue
        name = unquote(info.filename)
        parts = PurePosixPath(name.replace("\\", "/")).parts
        if not parts:
            continue
        if name in PACKAGING_ENTRIES or parts[0] in PACKAGING_DIRS:
            continue
        if len(parts) == 1 and name.lower().endswith(".nuspec"):
            continue

        dest = target.joinpath(*parts)
        if not dest.resolve().is_relative_to(resolved_target):
            raise InstallError(f"Archive entry escapes install directory: {info.filename!r}")
        members.append((info, dest))

    return members
