"""Helpers for building CMR responses in tests.

Usage:
    from tests.unit.fixtures import make_entries, make_feed

    responses.add(responses.GET, COLLECTIONS_URL, json=make_feed(make_entries(10)))
"""

from typing import Any, Dict, List

COLLECTIONS_URL = "https://cmr.earthdata.nasa.gov/search/collections"
GRANULES_URL = "https://cmr.earthdata.nasa.gov/search/granules"


def make_entries(count: int, start: int = 0) -> List[Dict[str, Any]]:
    """Build `count` minimal feed entries with unique ids.

    Args:
        count: Number of entries.
        start: Number used in the first entry's id.

    Returns:
        Entries of the form ``{"id": "C<n>-PROV"}``.
    """
    return [{"id": f"C{n}-PROV"} for n in range(start, start + count)]


def make_feed(entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap entries in CMR's JSON feed envelope."""
    return {"feed": {"entry": entries}}
