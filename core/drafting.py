"""
Forum post drafting.

Templated helpers for when searching turns up nothing useful: draft a new
post, decide whether posting is worthwhile, and tighten a post title.
"""

from typing import Optional

from models.search import parse_priority_tags

__all__ = [
    "draft_forum_post",
    "should_create_post",
    "optimize_post_title",
    "extract_error_code",
    "generate_title",
    "suggest_category",
    "generate_tags",
    "generate_post_body",
    "optimize_title_string",
]

SEPARATOR = "═" * 59
MAX_TAGS = 5
ERROR_CODES = ("404", "500", "401", "403")

# (keyword, category); first keyword found in the issue or tags wins
CATEGORY_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("api",), "💻 Developing Websites (API/Backend Development)"),
    (("deploy",), "🚀 Umbraco Cloud / Deploy"),
    (("forms",), "📝 Umbraco Forms"),
    (("commerce",), "🛒 Umbraco Commerce"),
)
DEFAULT_CATEGORY = "💻 Developing Websites (General)"
UPGRADE_CATEGORY = "⬆️ Upgrading Umbraco"

KEYWORD_TAGS: tuple[tuple[str, str], ...] = (
    ("api", "api"),
    ("404", "routing"),
    ("500", "server-error"),
    ("model", "modelsbuilder"),
    ("deploy", "deployment"),
    ("content", "content"),
    ("media", "media"),
)

GENERIC_TITLE_KEYWORDS = ("404", "error", "API", "issue", "problem")


# ══════════════════════════════════════════════════════════════════════════════
# Building Blocks
# ══════════════════════════════════════════════════════════════════════════════


def extract_error_code(error_message: Optional[str]) -> Optional[str]:
    if not error_message:
        return None
    return next((code for code in ERROR_CODES if code in error_message), None)


def generate_title(issue: str, version: str, error_message: Optional[str] = None) -> str:
    title = ""
    code = extract_error_code(error_message)
    if code:
        title += f"{code} - "

    title += issue[:57] + "..." if len(issue) > 60 else issue

    if version.lower() not in title.lower():
        title += f" ({version})"
    return title


def suggest_category(issue: str, tags: Optional[str] = None) -> str:
    issue_lower = issue.lower()
    tags_lower = (tags or "").lower()

    for keywords, category in CATEGORY_RULES:
        if any(k in issue_lower or k in tags_lower for k in keywords):
            return category
    if "upgrade" in issue_lower or "migration" in issue_lower:
        return UPGRADE_CATEGORY
    return DEFAULT_CATEGORY


def generate_tags(issue: str, version: str, user_tags: Optional[str] = None) -> list[str]:
    """Version tag first, then user tags, then auto-detected ones; at most five."""
    tags: list[str] = []

    def add(tag: str):
        if tag and tag not in tags:
            tags.append(tag)

    add(version.lower().replace("v", "umbraco-"))
    for tag in parse_priority_tags(user_tags):
        add(tag)

    issue_lower = issue.lower()
    for keyword, tag in KEYWORD_TAGS:
        if keyword in issue_lower:
            add(tag)

    return tags[:MAX_TAGS]


def generate_post_body(
    issue: str,
    version: str,
    error_message: Optional[str] = None,
    attempted_solutions: Optional[str] = None,
    code_snippet: Optional[str] = None,
) -> str:
    lines = [
        "## Issue Description",
        "",
        issue,
        "",
        "## Environment",
        "",
        f"- **Umbraco Version:** {version}",
        "- **.NET Version:** [Please specify, e.g., .NET 8]",
        "- **Hosting:** [e.g., Umbraco Cloud, Azure, IIS, Self-hosted]",
        "",
    ]

    if error_message:
        lines.extend(["## Error Message", "", "```", error_message, "```", ""])
    if code_snippet:
        lines.extend(["## Relevant Code", "", "```csharp", code_snippet, "```", ""])
    if attempted_solutions:
        lines.extend(["## What I've Tried", "", attempted_solutions, ""])

    lines.extend(
        [
            "## Expected Behavior",
            "",
            "[Describe what you expected to happen]",
            "",
            "## Actual Behavior",
            "",
            "[Describe what actually happens]",
            "",
            "---",
            "",
            "Any help would be greatly appreciated! Thank you! 🙏",
        ]
    )
    return "\n".join(lines)


def optimize_title_string(title: str, version: str) -> str:
    optimized = title.strip()

    lowered = optimized.lower()
    for prefix in ("help:", "help", "please"):
        if lowered.startswith(prefix):
            optimized = optimized[len(prefix):].strip()
            lowered = optimized.lower()

    if version.lower() not in optimized.lower():
        optimized = f"{optimized} - {version}"

    if optimized:
        optimized = optimized[0].upper() + optimized[1:]

    if len(optimized) > 100:
        optimized = optimized[:97] + "..."
    return optimized


# ══════════════════════════════════════════════════════════════════════════════
# Tool Bodies
# ══════════════════════════════════════════════════════════════════════════════


def draft_forum_post(
    issue: str,
    version: str,
    error_message: Optional[str] = None,
    attempted_solutions: Optional[str] = None,
    code_snippet: Optional[str] = None,
    tags: Optional[str] = None,
    forum_url: str = "https://forum.umbraco.com",
) -> str:
    """Render a ready-to-paste draft post with title, category and tags."""
    lines = [
        "📝 **DRAFT FORUM POST**",
        f"Ready to post at: {forum_url}/",
        "",
        SEPARATOR,
        "",
        "**TITLE:**",
        generate_title(issue, version, error_message),
        "",
        "**SUGGESTED CATEGORY:**",
        suggest_category(issue, tags),
        "",
        "**SUGGESTED TAGS:**",
        ", ".join(generate_tags(issue, version, tags)),
        "",
        SEPARATOR,
        "",
        "**POST CONTENT:**",
        "",
        "```markdown",
        generate_post_body(issue, version, error_message, attempted_solutions, code_snippet),
        "```",
        "",
        SEPARATOR,
        "",
        "💡 **TIPS FOR BETTER RESPONSES:**",
        "   ✅ Include all relevant details above",
        "   ✅ Add screenshots if applicable",
        "   ✅ Specify your environment (.NET version, hosting)",
        "   ✅ Check for typos before posting",
        "",
        "🔗 **READY TO POST:**",
        "   1. Copy the content above",
        f"   2. Go to {forum_url}/",
        "   3. Click 'New Topic'",
        "   4. Paste and review",
        "   5. Add any screenshots",
        "   6. Post!",
        "",
        SEPARATOR,
    ]
    return "\n".join(lines)


def should_create_post(issue: str, results_found: int, results_helpful: str) -> str:
    """Recommend posting or trying existing answers first."""
    helpful = results_helpful.strip().lower()

    if results_found == 0:
        should_post, confidence = True, "HIGH"
        reasoning = [
            "✅ No existing discussions found - this is a new issue",
            "✅ Community will benefit from your question",
            "✅ You might be the first to encounter this",
        ]
    elif helpful == "no":
        should_post, confidence = True, "HIGH"
        reasoning = [
            "✅ Existing results don't solve your specific case",
            "✅ Your variation might help others",
            "✅ Include what you tried from other posts",
        ]
    elif helpful == "somewhat":
        should_post, confidence = False, "MEDIUM"
        reasoning = [
            "⚠️ Some relevant results exist",
            "⚠️ Try implementing existing solutions first",
            "💡 If those don't work, post with details on what you tried",
        ]
    else:
        should_post, confidence = False, "LOW"
        reasoning = [
            "❌ Helpful results found",
            "💡 Try implementing existing solutions",
            "💡 Comment on existing threads if you need clarification",
        ]

    recommendation = "YES, CREATE A POST" if should_post else "TRY EXISTING SOLUTIONS FIRST"
    lines = [
        "🤔 **SHOULD YOU CREATE A FORUM POST?**",
        "",
        f"**RECOMMENDATION:** {recommendation}",
        f"**CONFIDENCE:** {confidence}",
        "",
        "**REASONING:**",
        *(f"   {reason}" for reason in reasoning),
        "",
    ]

    if should_post:
        lines.extend(
            [
                "🚀 **NEXT STEPS:**",
                "   1. Use `draft_forum_post` to create a well-formatted post",
                "   2. Include all relevant details (version, error, code)",
                "   3. Post to the forum",
                "   4. Monitor for responses",
            ]
        )
    else:
        lines.extend(
            [
                "💡 **SUGGESTED ACTIONS:**",
                "   1. Try solutions from existing posts",
                "   2. Check official documentation",
                "   3. If still stuck after trying, then create a post",
                "   4. Reference what you tried in your post",
            ]
        )
    return "\n".join(lines)


def optimize_post_title(draft_title: str, version: str) -> str:
    """Review a draft title and propose a searchable rewrite."""
    issues: list[str] = []
    improvements: list[str] = []

    if version.lower() not in draft_title.lower():
        issues.append("❌ Missing Umbraco version")
        improvements.append("Add version for better targeting")
    if len(draft_title) < 20:
        issues.append("⚠️ Title might be too short")
        improvements.append("Add more context")
    if len(draft_title) > 100:
        issues.append("⚠️ Title might be too long")
        improvements.append("Make it more concise")
    if draft_title.lower().startswith(("help", "please")):
        issues.append("⚠️ Starts with generic word")
        improvements.append("Start with the actual issue")

    has_keywords = any(k in draft_title for k in GENERIC_TITLE_KEYWORDS)
    if not has_keywords:
        issues.append("⚠️ Missing specific keywords")
        improvements.append("Include error type or component")

    optimized = optimize_title_string(draft_title, version)

    def check(ok: bool) -> str:
        return "✅" if ok else "❌"

    lines = [
        "📊 **POST TITLE OPTIMIZATION**",
        "",
        "**ORIGINAL TITLE:**",
        f'"{draft_title}"',
        "",
        "**ANALYSIS:**",
    ]
    if issues:
        lines.extend(f"   {issue}" for issue in issues)
    else:
        lines.append("   ✅ Title looks good!")
    lines.append("")

    if improvements:
        lines.append("**SUGGESTED IMPROVEMENTS:**")
        lines.extend(f"   💡 {improvement}" for improvement in improvements)
        lines.append("")

    lines.extend(
        [
            "**OPTIMIZED TITLE:**",
            f'"{optimized}"',
            "",
            "**TITLE CHECKLIST:**",
            f"   {check(20 <= len(optimized) <= 100)} Length: {len(optimized)} chars (ideal: 40-80)",
            f"   {check(version.lower() in optimized.lower())} Includes version",
            f"   {check(has_keywords)} Contains specific keywords",
            f"   {check(not optimized.lower().startswith('help'))} Starts with issue description",
        ]
    )
    return "\n".join(lines)
