"""
PowerShell Module Manifest Parser.

Pulls a few scalar keys out of .psd1 manifests using regex-based parsing of the
hashtable literal. Only single-line quoted values are supported, which covers
ModuleVersion, GUID, Author and RootModule.
"""

import re


def parse_manifest(content: str) -> dict:
    """
    Parse .psd1 content and extract module metadata.

    Args:
        content: Raw manifest text.

    Returns:
        Dictionary with keys: module_version, guid, author, root_module, prerelease.
    """
    content = _strip_comments(content)
    return {
        "module_version": _extract_value(content, "ModuleVersion"),
        "guid": _extract_value(content, "GUID"),
        "author": _extract_value(content, "Author"),
        "root_module": _extract_value(content, "RootModule"),
        "prerelease": _extract_value(content, "Prerelease"),
    }


def _strip_comments(content: str) -> str:
    content = re.sub(r"<#.*?#>", "", content, flags=re.DOTALL)
    return re.sub(r"(?m)^\s*#.*$", "", content)


def _extract_value(content: str, key: str) -> str | None:
    """Extract a simple assignment like ModuleVersion = '1.2.3'."""
    match = re.search(rf"(?im)^\s*{key}\s*=\s*['\"]([^'\"\n]*)['\"]", content)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None
