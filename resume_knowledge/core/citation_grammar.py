"""
Citation marker grammar.

Single definition of the marker syntax the answer generator is asked to
emit and the resolver parses:

    [Project:"quoted text"]{P1}
    [Bullet:"quoted text"]{B3}
    [Branch:"quoted text"]{BR2}
    [Page:"quoted text" L12]{PG1}
    [Architecture Notes L12]{PG1}

The last form is the page shape the answer generator is prompted with:
the page title, unquoted, followed by a mandatory line reference. The
optional ` L<n>` (or ` L<n>-L<m>`) line reference is only meaningful
for pages. Aliases are a kind prefix plus a positive counter.

Dependencies: re
System role: Parser and formatter for citation markers
"""

import re
from dataclasses import dataclass
from typing import Iterator

from resume_knowledge.models.citation import CitationType

MARKER_TYPES: dict[str, CitationType] = {
    "Project": "project",
    "Bullet": "bullet",
    "Branch": "branch",
    "Page": "page",
}
TYPE_LABELS: dict[CitationType, str] = {kind: label for label, kind in MARKER_TYPES.items()}
ALIAS_PREFIXES: dict[CitationType, str] = {
    "project": "P",
    "bullet": "B",
    "branch": "BR",
    "page": "PG",
}

MARKER_PATTERN = re.compile(
    r'\[(?:'
    r'(?P<label>Project|Bullet|Branch|Page):\s*"(?P<text>[^"]*)"(?:\s+L(?P<line>\d+)(?:-L\d+)?)?'
    r'|(?P<title>[^\[\]{}"]+?)\s+L(?P<page_line>\d+)(?:-L\d+)?'
    r')\s*\]\{(?P<alias>[^}\s]+)\}'
)
# Anything shaped like [...]{...}; used to report markers the strict grammar rejects
LOOSE_MARKER_PATTERN = re.compile(r"\[([^\]]*)\]\{([^}]*)\}")
ALIAS_PATTERN = re.compile(r"^(PG|BR|P|B)([1-9]\d*)$")
_TITLE_UNSAFE = re.compile(r'[\[\]{}"]')

_PREFIX_KINDS: dict[str, CitationType] = {prefix: kind for kind, prefix in ALIAS_PREFIXES.items()}


@dataclass(frozen=True)
class ParsedMarker:
    """A marker found in text, before alias resolution."""

    type: CitationType
    text: str
    alias: str
    line_number: int | None
    start: int
    end: int


def marker_text(match: re.Match) -> str:
    """Quoted text of a labelled marker, or the title of a page-title marker."""
    if match.group("label") is None:
        return match.group("title").strip()
    return match.group("text")


def iter_markers(text: str) -> Iterator[ParsedMarker]:
    """Yield well-formed markers left to right."""
    for match in MARKER_PATTERN.finditer(text):
        label = match.group("label")
        line = match.group("line") if label is not None else match.group("page_line")
        yield ParsedMarker(
            type=MARKER_TYPES[label] if label is not None else "page",
            text=marker_text(match),
            alias=match.group("alias"),
            line_number=int(line) if line is not None else None,
            start=match.start(),
            end=match.end(),
        )


def alias_kind(alias: str) -> CitationType | None:
    """Entity kind an alias names, None if the alias is malformed."""
    match = ALIAS_PATTERN.match(alias)
    return _PREFIX_KINDS[match.group(1)] if match else None


def make_alias(kind: CitationType, counter: int) -> str:
    if counter < 1:
        raise ValueError(f"Alias counters start at 1, got {counter}")
    return f"{ALIAS_PREFIXES[kind]}{counter}"


def format_citation_marker(
    kind: CitationType,
    text: str,
    alias: str,
    line_number: int | None = None,
) -> str:
    """
    Render a marker the parser reads back unchanged.

    Double quotes in `text` become single quotes since the grammar has no
    escape sequence. A page cited at a line uses the page-title shape
    `[Title L<n>]{PG<n>}`; characters that would end the title early are
    dropped.

    Raises:
        ValueError: If a line number is given for a non-page marker
    """
    if line_number is not None and kind != "page":
        raise ValueError("Line references are only valid on page citations")
    if line_number is not None:
        title = _TITLE_UNSAFE.sub("", text).strip()
        if title:
            return f"[{title} L{line_number}]{{{alias}}}"
    quoted = text.replace('"', "'")
    line = f" L{line_number}" if line_number is not None else ""
    return f'[{TYPE_LABELS[kind]}:"{quoted}"{line}]{{{alias}}}'
