"""
Error types raised while checking modules.

Query errors abort a whole run; install errors are reported per module and
never stop the update pass.
"""

from enum import Enum


class ModuleCheckerError(Exception):
    """Base class for all module-update-checker errors."""


class QueryError(ModuleCheckerError):
    """A registry or local inventory lookup could not be completed."""


class RegistryQueryError(QueryError):
    """The gallery could not be reached or returned an unusable answer."""


class InventoryQueryError(QueryError):
    """A local module root could not be scanned."""


class InstallError(ModuleCheckerError):
    """Downloading or unpacking a module failed."""


class VersionParseError(ModuleCheckerError):
    """A version string could not be interpreted."""


class FailureKind(Enum):
    """Why a run produced no report."""

    QUERY = "query"
    UNEXPECTED = "unexpected"

    @classmethod
    def of(cls, error: BaseException) -> "FailureKind":
        return cls.QUERY if isinstance(error, QueryError) else cls.UNEXPECTED
