"""Text shaping applied to scraped values before they are stored.

- Doc blocks lose the indentation authors give them inside string literals
- Names become URL-friendly slugs
- Argument lists collapse into one ``|``-delimited column
"""

from __future__ import annotations

import re

SHORTDOC_LENGTH = 70
ARGLIST_DELIMITER = "|"

_WHITESPACE = re.compile(r"\s")


def clean_doc(text: str | None) -> str:
    """Remove the indentation a doc block inherits from its source file.

    The first line is stripped of leading spaces and the smallest run of
    leading spaces shared by the remaining non-empty lines is removed from
    each of them. Tabs and blank lines are kept as written.

    Examples:
        "  hello\\n    world" -> "hello\\nworld"
        "Example:\\n\\t(foo 1)" -> unchanged
        None -> ""
    """
    if not text:
        return ""
    first, *rest = text.split("\n")
    margin = min((_indent(line) for line in rest if line), default=0)
    body = [line[min(margin, _indent(line)) :] for line in rest]
    return "\n".join([first.lstrip(" "), *body])


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def url_friendly(name: str) -> str:
    """Lower-case a name and replace each whitespace character with ``_``."""
    return _WHITESPACE.sub("_", name.lower())


def join_arglists(arglists: list[str] | tuple[str, ...] | None) -> str:
    return ARGLIST_DELIMITER.join(arglists or ())


def short_doc(text: str | None) -> str:
    """First ``SHORTDOC_LENGTH`` characters of a doc string; ``""`` when absent."""
    if text is None:
        return ""
    return text[:SHORTDOC_LENGTH]
