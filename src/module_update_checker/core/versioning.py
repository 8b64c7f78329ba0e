"""
Version ordering for gallery and installed module versions.

Gallery versions are SemVer-like ("2.0.0", "1.0.0-beta", "5.1.0.3"). Most of
them are valid PEP 440 versions once normalized, so packaging.version does the
ordering. A "-label" suffix always marks a prerelease, even where PEP 440 would
read it as a post-release ("1.0.0-1", "1.0.0-rev2"). Labels PEP 440 cannot
order as a prerelease are treated as a dev release of their base version,
below every named prerelease.
"""

import re

from packaging.version import InvalidVersion, Version

from module_update_checker.core.errors import VersionParseError


def parse_version(text: str) -> Version:
    """
    Parse a module version string.

    Args:
        text: Version as published or found in a manifest.

    Returns:
        A comparable packaging Version.

    Raises:
        VersionParseError: if not even the release part is a version.
    """
    text = text.strip()
    # Build metadata after "+" never carries the prerelease label
    has_label = "-" in text.split("+", 1)[0]

    try:
        parsed = Version(text)
    except InvalidVersion:
        parsed = None

    if parsed is not None and (not has_label or parsed.is_prerelease):
        return parsed

    base = re.split(r"[-+]", text, maxsplit=1)[0]
    try:
        return Version(f"{base}.dev0")
    except InvalidVersion:
        raise VersionParseError(f"Unrecognized version: {text!r}") from None


def is_newer(candidate: str, installed: str) -> bool:
    """True when candidate is strictly greater than installed."""
    return parse_version(candidate) > parse_version(installed)
