"""
Module Records — registry, local and report shapes.

A RemoteRecord is the gallery's answer for one module name, a LocalRecord is
one installed copy found on disk, and a ReportRow is the merged view of the two.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime


# Placeholder for local fields when a module is not installed
NONE = "none"

DESKTOP_EDITION = "Desktop"
CORE_EDITION = "Core"

FULL_FIELDS = (
    "name",
    "published_date",
    "download_count",
    "registry_version",
    "local_version",
    "edition",
    "install_path",
    "last_updated",
    "updatable",
    "is_prerelease",
    "provider",
    "tags",
    "license_uri",
    "project_uri",
)

REDUCED_FIELDS = (
    "name",
    "download_count",
    "registry_version",
    "local_version",
    "edition",
    "updatable",
    "install_path",
)


@dataclass(frozen=True)
class RemoteRecord:
    """Latest published version of a module as reported by the gallery."""

    name: str
    version: str
    published_date: datetime | None = None
    download_count: int = 0
    tags: frozenset[str] = field(default_factory=frozenset)
    license_uri: str | None = None
    project_uri: str | None = None
    is_prerelease: bool = False
    last_updated: date | None = None
    provider: str = "NuGet"
    repository: str = "PSGallery"

    @property
    def tags_text(self) -> str:
        return ",".join(sorted(self.tags))


@dataclass(frozen=True)
class LocalRecord:
    """One installed copy of a module."""

    name: str
    version: str
    module_base: str
    install_path: str
    edition: str | None = None


@dataclass
class ReportRow:
    """
    Reconciled status of a module for one local installation.

    When the module is not installed locally, local_version, edition and
    install_path hold the NONE sentinel.
    """

    name: str
    registry_version: str
    local_version: str = NONE
    edition: str = NONE
    install_path: str = NONE
    updatable: bool = False
    published_date: datetime | None = None
    download_count: int = 0
    last_updated: date | None = None
    is_prerelease: bool = False
    provider: str = ""
    tags: str = ""
    license_uri: str | None = None
    project_uri: str | None = None

    @property
    def is_installed(self) -> bool:
        return self.install_path != NONE

    @classmethod
    def from_records(
        cls, remote: RemoteRecord, local: LocalRecord | None = None, updatable: bool = False
    ) -> "ReportRow":
        """Merge a registry record with an optional local installation."""
        row = cls(
            name=remote.name,
            registry_version=remote.version,
            updatable=updatable,
            published_date=remote.published_date,
            download_count=remote.download_count,
            last_updated=remote.last_updated,
            is_prerelease=remote.is_prerelease,
            provider=remote.provider,
            tags=remote.tags_text,
            license_uri=remote.license_uri,
            project_uri=remote.project_uri,
        )
        if local is not None:
            row.local_version = local.version
            row.edition = local.edition or NONE
            row.install_path = local.install_path
        return row

    def to_dict(self, full: bool = True) -> dict:
        """Serialize to a JSON-compatible dictionary, in display column order."""
        data = asdict(self)
        data["updatable"] = "Yes" if self.updatable else "No"
        if self.published_date is not None:
            data["published_date"] = self.published_date.isoformat()
        if self.last_updated is not None:
            data["last_updated"] = self.last_updated.isoformat()
        keys = FULL_FIELDS if full else REDUCED_FIELDS
        return {key: data[key] for key in keys}

    @staticmethod
    def field_names(full: bool = True) -> list[str]:
        return list(FULL_FIELDS if full else REDUCED_FIELDS)
