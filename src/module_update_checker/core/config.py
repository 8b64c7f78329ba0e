"""
Run configuration.

CheckOptions carries the switches of a single check; the repository table maps
well-known gallery names to their NuGet v2 feed URLs.
"""

import os
from dataclasses import dataclass


DEFAULT_REPOSITORY = "PSGallery"
DEFAULT_MODULE = "PowerShellGet"

PSGALLERY_URL = "https://www.powershellgallery.com/api/v2"
GALLERY_URL_ENV = "MODULE_CHECKER_GALLERY_URL"

KNOWN_REPOSITORIES = {
    "psgallery": PSGALLERY_URL,
}


@dataclass
class CheckOptions:
    """Switches for one check run. Every flag is off unless asked for."""

    repository: str = DEFAULT_REPOSITORY
    show_full: bool = False
    disable_progress_bar: bool = False
    update: bool = False
    enable_exception: bool = False


def resolve_repository_url(repository: str) -> str:
    """
    Resolve a repository identifier to a feed base URL.

    Args:
        repository: A known gallery name (case-insensitive) or an http(s) URL.

    Returns:
        Feed base URL without a trailing slash.
    """
    if repository.startswith(("http://", "https://")):
        return repository.rstrip("/")

    key = repository.lower()
    if key not in KNOWN_REPOSITORIES:
        known = ", ".join(sorted(KNOWN_REPOSITORIES))
        raise ValueError(f"Unknown repository: {repository!r}. Use a URL or one of: {known}.")

    if key == "psgallery":
        return os.environ.get(GALLERY_URL_ENV, PSGALLERY_URL).rstrip("/")
    return KNOWN_REPOSITORIES[key]
