"""
NuGet v2 OData Feed Parser.

Extracts package entries from the Atom feeds served by PowerShell galleries
(FindPackagesById(), Packages()). Each <entry> carries its fields inside an
<m:properties> element; null values are marked with m:null="true".
"""

import xml.etree.ElementTree as ET
from datetime import datetime


ATOM_NS = "http://www.w3.org/2005/Atom"
DATA_NS = "http://schemas.microsoft.com/ado/2007/08/dataservices"
META_NS = "http://schemas.microsoft.com/ado/2007/08/dataservices/metadata"

# The gallery uses this date for packages that were never listed
UNPUBLISHED_YEAR = 1900


def parse_feed(content: str | bytes) -> list[dict]:
    """
    Parse an OData Atom feed into a list of package dictionaries.

    Args:
        content: Raw feed XML. A lone <entry> document is accepted too.

    Returns:
        One dict per entry with keys: id, version, published, download_count,
        tags, license_url, project_url, is_prerelease, is_latest_version,
        last_updated.

    Raises:
        xml.etree.ElementTree.ParseError: if the content is not XML.
    """
    root = ET.fromstring(content)
    if root.tag == f"{{{ATOM_NS}}}entry":
        entries = [root]
    else:
        entries = root.findall(f"{{{ATOM_NS}}}entry")
    return [_parse_entry(entry) for entry in entries]


def find_next_link(content: str | bytes) -> str | None:
    """Return the href of the feed's rel="next" paging link, if any."""
    root = ET.fromstring(content)
    for link in root.findall(f"{{{ATOM_NS}}}link"):
        if link.get("rel") == "next" and link.get("href"):
            return link.get("href")
    return None


def _parse_entry(entry: ET.Element) -> dict:
    props = entry.find(f"{{{META_NS}}}properties")
    if props is None:
        props = ET.Element("empty")

    title = entry.findtext(f"{{{ATOM_NS}}}title")
    package_id = _text(props, "Id") or (title.strip() if title else None)

    return {
        "id": package_id,
        "version": _text(props, "NormalizedVersion") or _text(props, "Version"),
        "published": _datetime(_text(props, "Published")),
        "download_count": _int(_text(props, "DownloadCount")),
        "tags": _tags(_text(props, "Tags")),
        "license_url": _text(props, "LicenseUrl"),
        "project_url": _text(props, "ProjectUrl"),
        "is_prerelease": _bool(_text(props, "IsPrerelease")),
        "is_latest_version": _bool(_text(props, "IsLatestVersion")),
        "last_updated": _datetime(_text(props, "LastUpdated")),
    }


def _text(props: ET.Element, name: str) -> str | None:
    """Return the stripped text of a d:<name> property, or None when null/empty."""
    element = props.find(f"{{{DATA_NS}}}{name}")
    if element is None or element.get(f"{{{META_NS}}}null") == "true":
        return None
    text = (element.text or "").strip()
    return text or None


def _datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.year <= UNPUBLISHED_YEAR:
        return None
    return parsed


def _int(value: str | None) -> int:
    try:
        return max(0, int(value)) if value else 0
    except ValueError:
        return 0


def _bool(value: str | None) -> bool:
    return (value or "").lower() == "true"


def _tags(value: str | None) -> frozenset[str]:
    """Tags are a single space-separated string in the feed."""
    if not value:
        return frozenset()
    return frozenset(tag for tag in value.split() if tag)
