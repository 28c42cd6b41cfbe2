"""
Upstream sources for the Umbraco Forum MCP.

    discourse   Umbraco forum JSON API (search, topics, latest, categories)
    docs        Official documentation search links
    github      GitHub repository and package search links
"""

from api import discourse, docs, github

__all__ = ["discourse", "docs", "github"]
