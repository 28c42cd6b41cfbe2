"""
GitHub code and package links.

Builds two search links: the core CMS repository (source and issues) and a
GitHub-wide search for community packages. No API call is made, so there is
no token or rate limit to manage.
"""

import urllib.parse
from datetime import datetime, timezone
from typing import Optional

from models.search import ResultSource, SearchCandidate

__all__ = ["search", "DEFAULT_REPO"]

DEFAULT_REPO = "umbraco/Umbraco-CMS"
GITHUB_BASE = "https://github.com"


async def search(
    query: str,
    *,
    repo: str = DEFAULT_REPO,
    product_name: str = "Umbraco",
    now: Optional[datetime] = None,
) -> list[SearchCandidate]:
    """
    Return repository and community-package search links.

    Example:
        >>> links = await search("block list editor")
        >>> links[0].url
        'https://github.com/umbraco/Umbraco-CMS/search?q=block%20list%20editor'
    """
    encoded = urllib.parse.quote(query, safe="")
    stamp = now or datetime.now(timezone.utc)
    product_slug = urllib.parse.quote(product_name.lower(), safe="")

    return [
        SearchCandidate(
            title=f"{product_name} CMS Repository",
            url=f"{GITHUB_BASE}/{repo}/search?q={encoded}",
            preview=f"Search {product_name} CMS source code and issues",
            timestamp=stamp,
            source=ResultSource.GITHUB,
        ),
        SearchCandidate(
            title=f"{product_name} Community Packages",
            url=f"{GITHUB_BASE}/search?q={product_slug}+{encoded}",
            preview="Search community packages and examples",
            timestamp=stamp,
            source=ResultSource.GITHUB,
        ),
    ]
