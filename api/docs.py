"""
Official documentation links.

The docs site has no public JSON search API, so this source returns a
constructed "search the docs" link rather than live results.
"""

import urllib.parse
from datetime import datetime, timezone
from typing import Optional

from models.search import ResultSource, SearchCandidate

__all__ = ["search", "docs_search_url", "DEFAULT_DOCS"]

DEFAULT_DOCS = "https://docs.umbraco.com"


def docs_search_url(
    query: str, version: Optional[str] = None, base_url: Optional[str] = None
) -> str:
    root = (base_url or DEFAULT_DOCS).rstrip("/")
    encoded = urllib.parse.quote(query, safe="")
    if version:
        return f"{root}/{version}/search?q={encoded}"
    return f"{root}/search?q={encoded}"


async def search(
    query: str,
    version: Optional[str] = None,
    *,
    base_url: Optional[str] = None,
    product_name: str = "Umbraco",
    now: Optional[datetime] = None,
) -> list[SearchCandidate]:
    """Return a single link entry pointing at the docs site search."""
    return [
        SearchCandidate(
            title=f"Official Docs: {query}",
            url=docs_search_url(query, version, base_url),
            preview=f"Search official {product_name} documentation for detailed guides",
            timestamp=now or datetime.now(timezone.utc),
            source=ResultSource.DOCS,
        )
    ]
