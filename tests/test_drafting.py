"""Tests for core/drafting.py."""

import pytest

from core import drafting


class TestGenerateTitle:
    def test_error_code_prefix_and_version_suffix(self):
        title = drafting.generate_title("Custom API controller", "v13", "HTTP 404 Not Found")
        assert title == "404 - Custom API controller (v13)"

    def test_version_already_present(self):
        assert drafting.generate_title("Block list in v14 fails", "v14") == "Block list in v14 fails"

    def test_long_issue_truncated(self):
        issue = "x" * 61
        assert drafting.generate_title(issue, "v13") == "x" * 57 + "... (v13)"

    def test_sixty_chars_kept(self):
        issue = "y" * 60
        assert drafting.generate_title(issue, "v13") == issue + " (v13)"

    def test_first_known_code_wins(self):
        assert drafting.extract_error_code("500 after 404") == "404"
        assert drafting.extract_error_code("nothing here") is None
        assert drafting.extract_error_code(None) is None


class TestSuggestCategory:
    @pytest.mark.parametrize(
        "issue,tags,expected",
        [
            ("Custom API returns 404", None, "API/Backend"),
            ("Deploy fails", None, "Cloud / Deploy"),
            ("Form submission lost", "forms", "Umbraco Forms"),
            ("Checkout broken", "commerce", "Commerce"),
            ("Migration from v8", None, "Upgrading"),
            ("Upgrade to v14", None, "Upgrading"),
            ("Image cropper", None, "(General)"),
        ],
    )
    def test_keywords(self, issue, tags, expected):
        assert expected in drafting.suggest_category(issue, tags)


class TestGenerateTags:
    def test_version_user_and_auto_tags(self):
        tags = drafting.generate_tags("API returns 404 for content", "v13", "Routing, Custom")
        assert tags == ["umbraco-13", "routing", "custom", "api", "content"]

    def test_capped_at_five(self):
        tags = drafting.generate_tags(
            "api 404 500 model deploy content media", "v14"
        )
        assert len(tags) == 5
        assert tags[0] == "umbraco-14"

    def test_no_duplicates(self):
        tags = drafting.generate_tags("api issue", "v13", "api")
        assert tags == ["umbraco-13", "api"]


class TestDraftForumPost:
    def test_sections(self):
        draft = drafting.draft_forum_post(
            "Custom API returns 404",
            "v13",
            error_message="404 Not Found",
            attempted_solutions="Restarted the site",
            code_snippet="public class Foo {}",
            tags="routing",
        )

        assert "**TITLE:**\n404 - Custom API returns 404 (v13)" in draft
        assert "## Error Message" in draft
        assert "```csharp\npublic class Foo {}\n```" in draft
        assert "## What I've Tried\n\nRestarted the site" in draft
        assert "## Expected Behavior" in draft
        assert "umbraco-13, routing, api" in draft

    def test_optional_sections_omitted(self):
        draft = drafting.draft_forum_post("Image cropper", "v14")
        assert "## Error Message" not in draft
        assert "## Relevant Code" not in draft
        assert "## What I've Tried" not in draft


class TestShouldCreatePost:
    @pytest.mark.parametrize(
        "found,helpful,recommendation,confidence",
        [
            (0, "yes", "YES, CREATE A POST", "HIGH"),
            (3, "no", "YES, CREATE A POST", "HIGH"),
            (3, "NO", "YES, CREATE A POST", "HIGH"),
            (3, "somewhat", "TRY EXISTING SOLUTIONS FIRST", "MEDIUM"),
            (3, "yes", "TRY EXISTING SOLUTIONS FIRST", "LOW"),
        ],
    )
    def test_decision_table(self, found, helpful, recommendation, confidence):
        reply = drafting.should_create_post("issue", found, helpful)
        assert f"**RECOMMENDATION:** {recommendation}" in reply
        assert f"**CONFIDENCE:** {confidence}" in reply


class TestOptimizeTitle:
    def test_strips_prefix_and_adds_version(self):
        assert drafting.optimize_title_string("help: api broken", "v13") == "Api broken - v13"

    def test_please_prefix(self):
        assert drafting.optimize_title_string("please fix my 404", "v14") == "Fix my 404 - v14"

    def test_capped_at_100(self):
        optimized = drafting.optimize_title_string("a" * 150, "v13")
        assert len(optimized) == 100
        assert optimized.endswith("...")

    def test_report(self):
        report = drafting.optimize_post_title("help", "v13")
        assert "❌ Missing Umbraco version" in report
        assert "⚠️ Title might be too short" in report
        assert "⚠️ Starts with generic word" in report
        assert "**OPTIMIZED TITLE:**" in report

    def test_good_title(self):
        report = drafting.optimize_post_title("Custom API controller returns 404 in v13", "v13")
        assert "✅ Title looks good!" in report
        assert "SUGGESTED IMPROVEMENTS" not in report
