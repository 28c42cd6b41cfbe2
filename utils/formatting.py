"""
Markdown and JSON rendering for tool replies.

"No results" replies start with "❌ No results found" (or "✅ No new posts"
for the monitor) and never with "Error:", so callers can tell an empty
answer apart from a failed request.
"""

import json
from datetime import datetime, timezone
from typing import Optional, Sequence

from models.forum import (
    ForumCategoryDetail,
    ForumSearchResponse,
    ForumTopic,
    ForumTopicDetail,
)
from models.search import AggregatedResult, RankedResult, ResultSource
from utils.html import extract_code_blocks, truncate

__all__ = [
    "NO_RESULTS",
    "SEPARATOR",
    "format_date",
    "format_error",
    "format_search_results",
    "format_smart_results",
    "format_smart_results_json",
    "format_aggregated_results",
    "format_aggregated_results_json",
    "format_monitor_results",
    "format_topic_details",
    "format_latest_topics",
    "format_categories",
]

NO_RESULTS = "❌ No results found."
SEPARATOR = "═" * 59

SEARCH_TIPS = [
    "\n💡 Tips:",
    "   - Use specific version numbers (e.g., 'Umbraco 13')",
    "   - Include error messages or error codes",
    "   - Use technical terms (e.g., 'ModelsBuilder', 'Content Delivery API')",
]

SLOT_HEADINGS = {
    ResultSource.FORUM: "📱 **FORUM DISCUSSIONS:**",
    ResultSource.DOCS: "📚 **OFFICIAL DOCUMENTATION:**",
    ResultSource.GITHUB: "💻 **GITHUB RESOURCES:**",
}


def format_date(value: Optional[datetime], with_time: bool = False) -> str:
    if value is None:
        return "unknown"
    return value.strftime("%b %d, %Y %H:%M" if with_time else "%b %d, %Y")


def format_error(message: str) -> str:
    return f"Error: {message}"


# ══════════════════════════════════════════════════════════════════════════════
# Search
# ══════════════════════════════════════════════════════════════════════════════


def format_search_results(
    results: ForumSearchResponse, query: str, forum_url: str, limit: int = 3
) -> str:
    """Plain search: top topics by engagement, falling back to posts."""
    lines = [f'🔍 Search results for: "{query}"\n']

    if results.topics:
        top_topics = sorted(
            results.topics, key=lambda t: t.engagement_score, reverse=True
        )[:limit]
        lines.append(f"📊 Found {len(top_topics)} relevant discussion(s):\n")
        for i, topic in enumerate(top_topics, 1):
            lines.extend(
                [
                    f"**{i}. {topic.display_title}**",
                    f"   🔗 {forum_url}/t/{topic.slug}/{topic.id}",
                    f"   👤 Author: {results.author_of(topic.id)}",
                    f"   👁 {topic.views} views · 💬 {topic.reply_count} replies · ❤ {topic.like_count} likes",
                    f"   📅 Last activity: {format_date(topic.last_activity)}",
                    "",
                ]
            )
    elif results.posts:
        top_posts = sorted(results.posts, key=lambda p: p.like_count, reverse=True)[
            :limit
        ]
        lines.append(f"📊 Found {len(top_posts)} relevant post(s):\n")
        for i, post in enumerate(top_posts, 1):
            lines.extend(
                [
                    f"**{i}. {post.name or post.username}**",
                    f"   🔗 {forum_url}/t/{post.topic_id}",
                    f"   By {post.username} · ❤ {post.like_count} likes",
                    f"   {truncate(post.blurb or '', 150)}",
                    f"   📅 {format_date(post.created_at)}",
                    "",
                ]
            )
    else:
        lines.append(f"{NO_RESULTS} Try different search terms.")
        lines.extend(SEARCH_TIPS)
        return "\n".join(lines)

    lines.append("---")
    lines.append("💡 Click the links above to view full discussions on the forum.")
    return "\n".join(lines)


def format_smart_results(
    results: Sequence[RankedResult], query: str, version: Optional[str] = None
) -> str:
    """Ranked search reply; `results` is already truncated to the top-N."""
    lines = [f'🎯 **Smart Search Results for: "{query}"**']
    if version:
        lines.append(f"🔖 Filtered for: **{version}**")
    lines.append("")

    if not results:
        lines.append(NO_RESULTS)
        lines.extend(SEARCH_TIPS)
        return "\n".join(lines)

    lines.append(f"📊 Found {len(results)} highly relevant result(s):\n")
    for i, result in enumerate(results, 1):
        version_badge = f" `{result.detected_version}`" if result.detected_version else ""
        tag_badge = f" 🏷️ {', '.join(result.matched_tags)}" if result.matched_tags else ""
        lines.extend(
            [
                f"**{i}. {result.title}**{version_badge}{tag_badge}",
                f"   🔗 {result.url}",
                f"   {result.preview}",
                f"   📅 {format_date(result.timestamp)} · Relevance: {result.relevance_score}",
                "",
            ]
        )

    lines.append("---")
    lines.append("💡 Results ranked by version match, tags, recency, and engagement.")
    return "\n".join(lines)


def format_smart_results_json(
    results: Sequence[RankedResult], query: str, version: Optional[str] = None
) -> str:
    return json.dumps(
        {
            "query": query,
            "version": version,
            "total_results": len(results),
            "results": [r.to_dict() for r in results],
        },
        indent=2,
        ensure_ascii=False,
    )


# ══════════════════════════════════════════════════════════════════════════════
# Multi-Source
# ══════════════════════════════════════════════════════════════════════════════


def format_aggregated_results(results: AggregatedResult, query: str) -> str:
    lines = [
        f'🌐 **Multi-Source Search: "{query}"**',
        "Results from Forum, Docs, and GitHub\n",
        SEPARATOR + "\n",
    ]

    for source, items in results.slots():
        if not items:
            continue
        lines.append(SLOT_HEADINGS[source] + "\n")
        for item in items:
            lines.extend(
                [
                    f"• **{item.title}**",
                    f"  🔗 {item.url}",
                    f"  {item.preview}\n",
                ]
            )

    if results.total == 0:
        lines.append(NO_RESULTS + "\n")

    lines.append(SEPARATOR)
    lines.append(
        "💡 TIP: Check forum for community solutions, docs for official guides, "
        "GitHub for code examples."
    )
    return "\n".join(lines)


def format_aggregated_results_json(results: AggregatedResult, query: str) -> str:
    return json.dumps(
        {"query": query, "total_results": results.total, "results": results.to_dict()},
        indent=2,
        ensure_ascii=False,
    )


# ══════════════════════════════════════════════════════════════════════════════
# Monitoring / Browsing
# ══════════════════════════════════════════════════════════════════════════════


def format_monitor_results(
    topics: Sequence[ForumTopic],
    topic_filter: str,
    hours: int,
    forum_url: str,
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    lines = [f'🔔 **Forum Monitor: "{topic_filter}"**', f"📅 Last {hours} hours\n"]

    if not topics:
        lines.append(
            f'✅ No new posts about "{topic_filter}" in the last {hours} hours.'
        )
        lines.append("\n💡 This is good - means no major new issues!")
        return "\n".join(lines)

    lines.append(f"⚠️ Found {len(topics)} new post(s):\n")
    for topic in topics:
        hours_ago = int((now - topic.last_activity).total_seconds() // 3600)
        lines.extend(
            [
                f"**{topic.display_title}**",
                f"   🔗 {forum_url}/t/{topic.slug}/{topic.id}",
                f"   🕐 {hours_ago}h ago · 💬 {topic.reply_count} replies · 👁 {topic.views} views",
                "",
            ]
        )

    lines.append("---")
    lines.append("💡 Stay updated with these recent discussions!")
    return "\n".join(lines)


def format_topic_details(topic: ForumTopicDetail, forum_url: str) -> str:
    """Topic summary with the opening post, top replies and every code snippet."""
    link = f"{forum_url}/t/{topic.slug}/{topic.id}"
    lines = [
        f"📖 **{topic.title}**\n",
        f"🔗 {link}",
        f"👁 {topic.views} views · 💬 {topic.posts_count} posts · ❤ {topic.like_count} likes",
        f"📅 Created: {format_date(topic.created_at)}\n",
    ]

    # (username, snippet, from accepted answer)
    snippets = []
    posts = topic.posts

    if posts:
        first = posts[0]
        text, first_snippets = extract_code_blocks(first.cooked or "")
        lines.append("**Original Post:**")
        lines.append(f"By: {first.username}")
        lines.append(f"{truncate(text, 500)}\n")
        snippets.extend((first.username, s, False) for s in first_snippets)

        replies = posts[1:]
        if replies:
            lines.append(f"**{len(replies)} Replies:**")
            accepted = next((p for p in replies if p.accepted_answer), None)
            if accepted is not None:
                shown = [accepted] + [p for p in replies if p.id != accepted.id][:2]
            else:
                shown = replies[:3]

            for post in shown:
                reply_text, reply_snippets = extract_code_blocks(post.cooked or "")
                badge = "✅ ACCEPTED SOLUTION - " if post.accepted_answer else ""
                lines.append(
                    f"\n- **{badge}{post.username}** ({format_date(post.created_at)}):"
                )
                lines.append(f"  {truncate(reply_text, 200)}")
                snippets.extend(
                    (post.username, s, post.accepted_answer) for s in reply_snippets
                )

            if len(posts) > 4:
                lines.append(f"\n... and {len(posts) - 4} more replies.")

    if snippets:
        lines.extend(
            [
                "\n",
                SEPARATOR,
                "💻 **CODE SNIPPETS FOUND IN DISCUSSION:**",
                SEPARATOR + "\n",
            ]
        )
        solution = [s for s in snippets if s[2]]
        other = [s for s in snippets if not s[2]]
        for heading, group in (
            ("✅ **SOLUTION CODE (from accepted answer):**\n", solution),
            ("📝 **Other code examples from discussion:**\n", other),
        ):
            if not group:
                continue
            lines.append(heading)
            for i, (username, snippet, _) in enumerate(group, 1):
                lines.extend(
                    [
                        f"**Snippet {i}** (by {username}):",
                        f"```{snippet.language}",
                        snippet.code,
                        "```\n",
                    ]
                )
        lines.extend(
            [
                SEPARATOR,
                "💡 **TIP:** You can copy these code snippets directly to fix your issue!",
                SEPARATOR + "\n",
            ]
        )

    lines.append("---")
    lines.append(f"💡 View full discussion at: {link}")
    return "\n".join(lines)


def format_latest_topics(topics: Sequence[ForumTopic], forum_url: str) -> str:
    lines = ["📰 **Latest Topics from the Forum**\n"]
    if not topics:
        lines.append(NO_RESULTS)
        return "\n".join(lines)

    for i, topic in enumerate(topics, 1):
        lines.extend(
            [
                f"**{i}. {topic.display_title}**",
                f"   🔗 {forum_url}/t/{topic.slug}/{topic.id}",
                f"   👁 {topic.views} views · 💬 {topic.reply_count} replies · ❤ {topic.like_count} likes",
                f"   📅 {format_date(topic.last_activity, with_time=True)}",
                "",
            ]
        )

    lines.append("---")
    lines.append("💡 These are the most recent discussions in the community.")
    return "\n".join(lines)


def format_categories(categories: Sequence[ForumCategoryDetail], forum_url: str) -> str:
    lines = ["📂 **Forum Categories**\n"]

    visible = sorted((c for c in categories if c.name), key=lambda c: c.position)
    if not visible:
        lines.append(NO_RESULTS)
        return "\n".join(lines)

    for category in visible:
        lines.append(f"**{category.name}**")
        if category.description:
            lines.append(f"   {truncate(category.description, 100)}")
        lines.append(f"   📊 {category.topic_count} topics")
        lines.append(f"   🔗 {forum_url}/c/{category.slug}/{category.id}")
        lines.append("")

    lines.append("---")
    lines.append("💡 Use these categories to focus your forum searches.")
    return "\n".join(lines)
