"""HTML-to-text conversion and code snippet extraction for cooked forum posts."""

from dataclasses import dataclass

from bs4 import BeautifulSoup

__all__ = ["CodeSnippet", "extract_code_blocks", "truncate", "CODE_PLACEHOLDER"]

CODE_PLACEHOLDER = "[CODE BLOCK EXTRACTED]"
MIN_UNLABELLED_CODE_LENGTH = 20


@dataclass(frozen=True)
class CodeSnippet:
    code: str
    language: str


def _language_of(classes: list[str]) -> str | None:
    for css_class in classes:
        if css_class.startswith("lang-"):
            return css_class[len("lang-"):] or None
    return None


def extract_code_blocks(html: str) -> tuple[str, list[CodeSnippet]]:
    """
    Split cooked post HTML into plain text and code snippets.

    `<pre><code class="lang-x">` blocks are always extracted; unlabelled
    `<pre><code>` blocks only when longer than 20 characters. Extracted blocks
    are replaced with a placeholder in the returned text.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    snippets: list[CodeSnippet] = []

    for pre in soup.find_all("pre"):
        code = pre.find("code")
        if code is None:
            continue
        text = code.get_text().strip()
        language = _language_of(code.get("class") or [])
        if language is None:
            if len(text) <= MIN_UNLABELLED_CODE_LENGTH:
                continue
            language = "text"
        snippets.append(CodeSnippet(code=text, language=language))
        pre.replace_with(CODE_PLACEHOLDER)

    clean = " ".join(soup.get_text(" ").split())
    return clean, snippets


def truncate(text: str, limit: int) -> str:
    """Cut text to `limit` characters, adding an ellipsis when cut."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text
