"""Match resolver: picks the canonical field a CSV header most likely means.

Resolution runs in three tiers, in order:

1. exact      - the folded header equals the folded name or an alias of a
                field; returned immediately with score 1.0.
2. high       - best edit-distance similarity of at least 0.8 across every
                name and alias of every field.
3. contextual - only while tier 2 found nothing scoring 0.7 or more: names
                sharing a word with the header (substring either way) whose
                similarity still reaches the caller's threshold.

Comparisons are strictly-greater, so the first field/name pair in input
order wins ties.
"""
import logging
from typing import Any, Literal, Mapping, Optional, Sequence, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.matching.rules import (
    CONTEXTUAL_GATE,
    DEFAULT_THRESHOLD,
    EXACT_SCORE,
    HIGH_SIMILARITY_MIN,
    MATCH_CONTEXTUAL,
    MATCH_EXACT,
    MATCH_HIGH,
    MAX_NAME_LENGTH,
)
from src.utils.fuzzy import calculate_similarity, has_contextual_match
from src.utils.text import fold

logger = logging.getLogger(__name__)

MatchType = Literal["exact", "high", "contextual"]


class CandidateField(BaseModel):
    """A canonical field a header may resolve to."""

    model_config = ConfigDict(frozen=True)

    name: str
    aliases: Tuple[str, ...] = ()

    @field_validator("aliases", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value

    def all_names(self) -> Tuple[str, ...]:
        """Canonical name followed by the aliases."""
        return (self.name,) + self.aliases


class MatchResult(BaseModel):
    """Outcome of a successful resolution."""

    model_config = ConfigDict(frozen=True)

    field: str
    score: float = Field(ge=0.0, le=1.0)
    match_type: MatchType


CandidateLike = Union[CandidateField, Mapping[str, Any]]


def as_candidate(candidate: CandidateLike) -> CandidateField:
    """
    Coerce a plain {"name": ..., "aliases": [...]} mapping to a CandidateField.

    Args:
        candidate: CandidateField or mapping

    Returns:
        CandidateField
    """
    if isinstance(candidate, CandidateField):
        return candidate
    return CandidateField.model_validate(candidate)


def _improves(score: float, best: Optional[MatchResult]) -> bool:
    return best is None or score > best.score


def find_best_match(
    header: str,
    candidates: Sequence[CandidateLike],
    threshold: float = DEFAULT_THRESHOLD
) -> Optional[MatchResult]:
    """
    Resolve a CSV header against candidate fields.

    Args:
        header: Raw column header
        candidates: Candidate fields, with optional aliases
        threshold: Minimum score a high or contextual match must reach

    Returns:
        Best MatchResult, or None when nothing reaches the threshold
    """
    fields = [as_candidate(c) for c in candidates]
    folded_header = fold(header, MAX_NAME_LENGTH)

    # Tier 1: exact
    for field in fields:
        for name in field.all_names():
            if fold(name, MAX_NAME_LENGTH) == folded_header:
                logger.debug(f"Header {header!r} -> {field.name} (exact via {name!r})")
                return MatchResult(field=field.name, score=EXACT_SCORE, match_type=MATCH_EXACT)

    best: Optional[MatchResult] = None

    # Tier 2: high similarity, global best across all fields
    for field in fields:
        for name in field.all_names():
            similarity = calculate_similarity(header, name)
            if similarity >= HIGH_SIMILARITY_MIN and _improves(similarity, best):
                best = MatchResult(field=field.name, score=similarity, match_type=MATCH_HIGH)

    # Tier 3: contextual
    if best is None or best.score < CONTEXTUAL_GATE:
        for field in fields:
            for name in field.all_names():
                if not has_contextual_match(header, name):
                    continue
                similarity = calculate_similarity(header, name)
                if similarity >= threshold and _improves(similarity, best):
                    best = MatchResult(field=field.name, score=similarity, match_type=MATCH_CONTEXTUAL)

    if best is None or best.score < threshold:
        logger.debug(f"Header {header!r} unmatched (threshold {threshold})")
        return None

    logger.debug(f"Header {header!r} -> {best.field} ({best.match_type}, {best.score:.2f})")
    return best
