"""
Citation resolver and validator.

Resolves alias citation markers in generated answers back to entity ids
using the IdMap of the turn that produced the answer. Markers whose alias
is unknown, or whose alias names a different kind than the marker label,
are dropped from the references. The answer text itself is never
rewritten.

Dependencies: pydantic, resume_knowledge.core.citation_grammar
System role: Last stage of the citation round-trip
"""

import logging
from collections import Counter

from pydantic import BaseModel, Field

from resume_knowledge.core.citation_grammar import (
    LOOSE_MARKER_PATTERN,
    MARKER_PATTERN,
    alias_kind,
    iter_markers,
    marker_text,
)
from resume_knowledge.core.exceptions import UnresolvableCitationWarning
from resume_knowledge.models.citation import CitationReference, CitationResolution, IdMap
from resume_knowledge.observability import log_with_context

logger = logging.getLogger(__name__)


def resolve_citations(answer_text: str, id_map: IdMap) -> CitationResolution:
    """
    Extract and resolve citation markers, left to right.

    Args:
        answer_text: Generated answer containing markers
        id_map: Alias map of the turn that produced the answer

    Returns:
        CitationResolution: Unchanged text plus resolved references
    """
    references: list[CitationReference] = []
    for marker in iter_markers(answer_text):
        entity_id = id_map.entity_for(marker.alias)
        if entity_id is None or alias_kind(marker.alias) != marker.type:
            warning = UnresolvableCitationWarning(marker.alias, marker.type)
            log_with_context(logger, logging.DEBUG, warning.message, **warning.details)
            continue
        references.append(
            CitationReference(
                type=marker.type,
                text=marker.text,
                simple_id=marker.alias,
                entity_id=entity_id,
                line_number=marker.line_number,
            )
        )
    return CitationResolution(text=answer_text, references=references)


class CitationProblem(BaseModel):
    """One defect found in a citation marker."""

    kind: str = Field(description="empty_text, malformed, invalid_id, type_mismatch or missing_mapping")
    marker: str = Field(description="Marker text as it appears in the answer")
    alias: str | None = None


def validate_citations(text: str, id_map: IdMap | None = None) -> list[CitationProblem]:
    """
    Report defects in every [..]{..} marker of `text`.

    Without an id_map, only syntax and alias shape are checked.

    Returns:
        Problems in order of appearance; empty when every marker is valid
    """
    problems: list[CitationProblem] = []
    for loose in LOOSE_MARKER_PATTERN.finditer(text):
        raw_marker = loose.group(0)
        body, alias = loose.group(1), loose.group(2).strip()

        if not body.strip():
            problems.append(CitationProblem(kind="empty_text", marker=raw_marker, alias=alias))
            continue

        strict = MARKER_PATTERN.fullmatch(raw_marker)
        if strict is None:
            problems.append(CitationProblem(kind="malformed", marker=raw_marker, alias=alias))
            continue
        if not marker_text(strict).strip():
            problems.append(CitationProblem(kind="empty_text", marker=raw_marker, alias=alias))
            continue

        kind = alias_kind(alias)
        if kind is None:
            problems.append(CitationProblem(kind="invalid_id", marker=raw_marker, alias=alias))
            continue

        marker = next(iter_markers(raw_marker))
        if kind != marker.type:
            problems.append(CitationProblem(kind="type_mismatch", marker=raw_marker, alias=alias))
            continue

        if id_map is not None and id_map.entity_for(alias) is None:
            problems.append(CitationProblem(kind="missing_mapping", marker=raw_marker, alias=alias))

    return problems


class CitationMetrics(BaseModel):
    total_citations: int
    valid_citations: int
    invalid_citations: int
    accuracy: float = Field(description="Percentage of valid citations, 100 when none seen")
    invalid_patterns: dict[str, int]


class CitationMonitor:
    """
    Accumulates citation quality across streamed answer chunks.

    Markers split across chunk boundaries are not counted.
    """

    def __init__(self) -> None:
        self._total = 0
        self._invalid = 0
        self._patterns: Counter[str] = Counter()

    def process_chunk(self, chunk: str, id_map: IdMap | None = None) -> None:
        problems = validate_citations(chunk, id_map)
        self._total += sum(1 for _ in LOOSE_MARKER_PATTERN.finditer(chunk))
        self._invalid += len(problems)
        self._patterns.update(problem.kind for problem in problems)

    def metrics(self) -> CitationMetrics:
        valid = self._total - self._invalid
        return CitationMetrics(
            total_citations=self._total,
            valid_citations=valid,
            invalid_citations=self._invalid,
            accuracy=round(valid / self._total * 100, 2) if self._total else 100.0,
            invalid_patterns=dict(self._patterns),
        )

    def reset(self) -> None:
        self._total = 0
        self._invalid = 0
        self._patterns.clear()
