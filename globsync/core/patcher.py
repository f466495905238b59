"""
Config Patcher
==============

Rewrites the managed ``<key>: [...]`` region of a configuration file. The file
is treated as plain text: only the bracketed list after the key is replaced and
every other byte of the document is kept as it was.
"""

import re
from dataclasses import dataclass

from globsync.core.errors import AmbiguousRegionError, RegionNotFoundError, RenderError

DEFAULT_KEY = "content"
INDENT_UNIT = "  "
DEFAULT_QUOTE = "'"

_STRING_PATTERN = re.compile(
    r"(?P<quote>['\"`])(?P<value>(?:(?!(?P=quote))[^\\]|\\.)*)(?P=quote)"
)
_SEPARATOR_PATTERN = re.compile(r"[\s,]*")
_ESCAPE_PATTERN = re.compile(r"\\(.)")


@dataclass
class PatchResult:
    """
    Outcome of a patch.

    Attributes:
        document (str): The full document after patching
        changed (bool): True if ``document`` differs from the input
    """
    document: str
    changed: bool


def region_pattern(key: str = DEFAULT_KEY) -> re.Pattern:
    """Regex matching ``key: [ ... ]`` up to the first closing bracket.

    The key may be quoted (``"content": [...]``) so JSON files work too.
    """
    return re.compile(
        r"(?<![\w$])(?P<quote>[\"']?)" + re.escape(key) + r"(?P=quote)\s*:\s*(?P<list>\[[\s\S]*?\])"
    )


def find_region(document: str, key: str = DEFAULT_KEY) -> re.Match:
    """Locate the single managed region of ``document``.

    Raises:
        RegionNotFoundError: If there is no region
        AmbiguousRegionError: If there is more than one
    """
    matches = list(region_pattern(key).finditer(document))
    if not matches:
        raise RegionNotFoundError(key)
    if len(matches) > 1:
        raise AmbiguousRegionError(key, len(matches))
    return matches[0]


def _line_indent(document: str, position: int) -> str:
    line_start = document.rfind("\n", 0, position) + 1
    line = document[line_start:position]
    return line[: len(line) - len(line.lstrip(" \t"))]


def _entries(body: str) -> tuple[list[str], list[str]] | None:
    """Split a list body into (values, quote characters).

    Returns None when the body holds anything besides string literals,
    commas and whitespace.
    """
    values, quotes = [], []
    position = 0
    for match in _STRING_PATTERN.finditer(body):
        if not _SEPARATOR_PATTERN.fullmatch(body, position, match.start()):
            return None
        values.append(_ESCAPE_PATTERN.sub(r"\1", match.group("value")))
        quotes.append(match.group("quote"))
        position = match.end()
    if not _SEPARATOR_PATTERN.fullmatch(body, position):
        return None
    return values, quotes


def _region_quote(match: re.Match) -> str:
    """Quote character for rendered entries.

    A quoted key means a JSON-like document, which only accepts double
    quotes. Otherwise the style of the entries already listed wins.
    """
    if match.group("quote") == '"':
        return '"'
    entries = _entries(match.group("list")[1:-1])
    if entries and entries[1]:
        return entries[1][0]
    return DEFAULT_QUOTE


def _quote(pattern: str, quote: str = DEFAULT_QUOTE) -> str:
    if "\n" in pattern or "\r" in pattern or "]" in pattern:
        raise RenderError(pattern)
    escaped = pattern.replace("\\", "\\\\").replace(quote, "\\" + quote)
    return f"{quote}{escaped}{quote}"


def render_list(patterns: list[str], indent: str = "", newline: str = "\n", quote: str = DEFAULT_QUOTE) -> str:
    """Render ``patterns`` as a bracketed list, one entry per line.

    Raises:
        RenderError: If a pattern contains ``]`` or a line break
    """
    if not patterns:
        return "[]"
    lines = [f"{indent}{INDENT_UNIT}{_quote(pattern, quote)}" for pattern in patterns]
    return "[" + newline + ("," + newline).join(lines) + newline + indent + "]"


def patch(document: str, patterns: list[str], key: str = DEFAULT_KEY) -> PatchResult:
    """Replace the managed region of ``document`` with ``patterns``.

    A region that already lists exactly ``patterns`` in the same order is left
    alone whatever its formatting, so formatters and globsync do not fight
    over quote style or line breaks.

    Args:
        document: Current text of the configuration file
        patterns: Glob patterns in the order they should be written
        key: Key token that introduces the managed list

    Returns:
        PatchResult: New document and whether it differs from the input

    Raises:
        RegionNotFoundError: If the document has no managed region
        AmbiguousRegionError: If the document has several managed regions
        RenderError: If a pattern cannot be written into the region
    """
    match = find_region(document, key)
    current = _entries(match.group("list")[1:-1])
    if current is not None and current[0] == list(patterns):
        return PatchResult(document=document, changed=False)

    newline = "\r\n" if "\r\n" in document else "\n"
    indent = _line_indent(document, match.start())
    rendered = render_list(patterns, indent, newline, _region_quote(match))

    start, end = match.span("list")
    updated = document[:start] + rendered + document[end:]
    return PatchResult(document=updated, changed=updated != document)


def read_patterns(document: str, key: str = DEFAULT_KEY) -> list[str]:
    """Return the quoted entries currently listed in the managed region."""
    body = find_region(document, key).group("list")[1:-1]
    return [_ESCAPE_PATTERN.sub(r"\1", match.group("value")) for match in _STRING_PATTERN.finditer(body)]
