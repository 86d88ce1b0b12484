"""Lightweight frontmatter parser.

Reads a flat block of ``key: value`` lines between ``---`` delimiters without
a YAML parser, so descriptions with unquoted colons and similar near-YAML
still parse. Folded scalars (``>``, ``>-``, ``|``, ``|-``) are joined into a
single line. Nested mappings are not interpreted; use the YAML loader in
:mod:`txnlab_skills.skills.scanner` when those are needed.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

_BLOCK_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(?P<block>.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)
_KEY_RE = re.compile(r"^(?P<key>[\w-]+):\s*(?P<value>.*)$")
_MULTILINE_MARKERS = frozenset({">", ">-", "|", "|-"})


@dataclass(frozen=True)
class Frontmatter:
    """Parsed frontmatter fields and the document text that follows them."""

    fields: dict[str, str]
    body: str


class _State(Enum):
    SCANNING_KEYS = auto()
    ACCUMULATING_MULTILINE = auto()


def starts_new_key(line: str) -> bool:
    """Return True if ``line`` ends a folded scalar by starting a new key."""
    return bool(line[:1]) and not line[0].isspace() and bool(_KEY_RE.match(line))


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":  # noqa: PLR2004
        return value[1:-1]
    return value


def _parse_block(block: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    state = _State.SCANNING_KEYS
    key = ""
    parts: list[str] = []

    for line in block.splitlines():
        if state is _State.ACCUMULATING_MULTILINE:
            if not starts_new_key(line):
                if stripped := line.strip():
                    parts.append(stripped)
                continue
            fields[key] = " ".join(parts)
            state = _State.SCANNING_KEYS

        match = _KEY_RE.match(line)
        if match is None:
            continue

        key = match["key"]
        value = match["value"].rstrip()
        if value in _MULTILINE_MARKERS:
            state = _State.ACCUMULATING_MULTILINE
            parts = []
        else:
            fields[key] = _unquote(value)

    if state is _State.ACCUMULATING_MULTILINE:
        fields[key] = " ".join(parts)

    return fields


def parse_frontmatter(text: str) -> Frontmatter | None:
    """Parse the frontmatter block at the top of ``text``.

    Returns:
        The parsed fields and the untrimmed body, or None if the document
        does not start with a ``---`` delimited block.
    """
    match = _BLOCK_RE.match(text)
    if match is None:
        return None
    return Frontmatter(
        fields=_parse_block(match["block"] or ""),
        body=text[match.end() :],
    )
