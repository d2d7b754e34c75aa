"""Header auto-mapping and row mapping for lead imports."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import pandas as pd
from pydantic import BaseModel, Field

from src.matching.fields import DEFAULT_LEAD_FIELDS, FieldMapping, to_candidates
from src.matching.resolver import MatchResult, find_best_match
from src.matching.rules import DEFAULT_THRESHOLD, MATCH_TYPES

logger = logging.getLogger(__name__)

# Column slots per target field, in the order values are looked up
PRIORITY_SLOTS = ("primary", "secondary", "tertiary")

# target field -> {"primary": header, "secondary": header, ...}
ColumnMapping = Dict[str, Dict[str, str]]


class AutoMapResult(BaseModel):
    """Outcome of auto-mapping a header row."""

    mapping: ColumnMapping = Field(default_factory=dict)
    matches: List[Tuple[str, Optional[MatchResult]]] = Field(default_factory=list)
    unmapped_headers: List[str] = Field(default_factory=list)
    overflow_headers: List[str] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=lambda: {t: 0 for t in MATCH_TYPES})

    @property
    def mapped_count(self) -> int:
        return len(self.mapping)


def auto_map_headers(
    headers: Sequence[str],
    fields: Sequence[FieldMapping] = DEFAULT_LEAD_FIELDS,
    threshold: float = DEFAULT_THRESHOLD
) -> AutoMapResult:
    """
    Suggest a column mapping for a header row.

    Headers are resolved in order. The first header landing on a field
    fills its primary slot, the next ones its secondary and tertiary slots.

    Args:
        headers: CSV header row
        fields: Field catalog to map onto
        threshold: Acceptance threshold for high/contextual matches

    Returns:
        AutoMapResult
    """
    candidates = to_candidates(fields)
    result = AutoMapResult()

    for header in headers:
        match = find_best_match(header, candidates, threshold)
        result.matches.append((header, match))

        if match is None:
            result.unmapped_headers.append(header)
            continue

        slots = result.mapping.setdefault(match.field, {})
        free = [s for s in PRIORITY_SLOTS if s not in slots]
        if not free:
            logger.warning(f"Header {header!r} also maps to {match.field}, all slots taken")
            result.overflow_headers.append(header)
            continue

        slots[free[0]] = header
        result.counts[match.match_type] += 1

    logger.info(summarize(result))
    return result


def summarize(result: AutoMapResult) -> str:
    """
    Human-readable summary, e.g. "5 fields mapped (3 exact, 1 high, 1 contextual)".

    Args:
        result: Auto-mapping result

    Returns:
        Summary string
    """
    total = result.mapped_count
    noun = "field" if total == 1 else "fields"
    details = ", ".join(
        f"{result.counts[t]} {t}" for t in MATCH_TYPES if result.counts.get(t)
    )
    if details:
        return f"{total} {noun} mapped ({details})"
    return f"{total} {noun} mapped"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def map_row_to_lead(row: Mapping[str, Any], mapping: ColumnMapping) -> Dict[str, Any]:
    """
    Build a lead record from a CSV row.

    Each target field takes the first non-blank value among its primary,
    secondary and tertiary columns; fields with no value are left out.

    Args:
        row: CSV row keyed by header
        mapping: Column mapping

    Returns:
        Lead record keyed by canonical field name
    """
    lead = {}

    for target, slots in mapping.items():
        for slot in PRIORITY_SLOTS:
            column = slots.get(slot)
            if not column:
                continue
            value = row.get(column)
            if not _is_blank(value):
                lead[target] = value
                break

    return lead


def validate_mapping(mapping: Any) -> ColumnMapping:
    """
    Check the shape of a column mapping.

    Args:
        mapping: Decoded mapping

    Returns:
        The mapping

    Raises:
        ValueError: If the mapping is malformed
    """
    if not isinstance(mapping, dict):
        raise ValueError("Column mapping must be an object")

    for target, slots in mapping.items():
        if not isinstance(slots, dict):
            raise ValueError(f"Mapping for {target!r} must be an object")
        unknown = set(slots) - set(PRIORITY_SLOTS)
        if unknown:
            raise ValueError(f"Unknown priority keys for {target!r}: {sorted(unknown)}")
        for slot, header in slots.items():
            if not isinstance(header, str):
                raise ValueError(f"Header for {target!r}.{slot} must be a string")

    return mapping


def save_mapping(mapping: ColumnMapping, output_path: Union[str, Path]) -> Path:
    """
    Write a column mapping as JSON.

    Args:
        mapping: Column mapping
        output_path: Destination file

    Returns:
        Path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(validate_mapping(mapping), f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote column mapping for {len(mapping)} fields to {output_path}")
    return output_path


def load_mapping(mapping_path: Union[str, Path]) -> ColumnMapping:
    """
    Read a column mapping written by save_mapping (or edited by hand).

    Args:
        mapping_path: JSON file

    Returns:
        Column mapping

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON is not a valid mapping
    """
    mapping_path = Path(mapping_path)
    if not mapping_path.exists():
        raise FileNotFoundError(f"Mapping file not found: {mapping_path}")

    with open(mapping_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid mapping JSON in {mapping_path}: {e}") from e

    return validate_mapping(data)
