"""
ProposalGen Fee Engine
Computes fee lines (hours x rate) and aggregates them into a fee summary.

All operations are pure: collections come back as new tuples and the inputs
are never mutated.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from core.models import MANDATES, FeeLine, FeeSummary, Mandate, get_mandate, round2

__all__ = [
    "FeeLinePatch",
    "add_line",
    "compute_line",
    "rebuild_summary",
    "remove_line",
    "round2",
    "seed_lines",
    "summarize",
    "update_line",
]


@dataclass(frozen=True)
class FeeLinePatch:
    """Partial update of a fee line; None keeps the existing value."""
    staff_id: Optional[str] = None
    hours: Optional[float] = None
    rate: Optional[float] = None


def compute_line(mandate: Mandate, hours: float = 0, rate: Optional[float] = None) -> FeeLine:
    """
    Build a fee line for a mandate.

    Args:
        mandate: Mandate the line bills against
        hours: Billable hours (defaults to 0)
        rate: Hourly rate (defaults to the mandate's default rate)

    Returns:
        FeeLine with line_total rounded half-up to cents
    """
    effective_rate = mandate.default_rate if rate is None else rate
    return FeeLine(
        staff_id=mandate.id,
        staff_name=mandate.name,
        hours=hours,
        rate=effective_rate,
    )


def summarize(lines: Iterable[FeeLine]) -> FeeSummary:
    """Aggregate lines; the total is the rounded sum of the rounded line totals."""
    return FeeSummary(tuple(lines))


def seed_lines(
    mandate_names: Sequence[str],
    mandates: Sequence[Mandate] = MANDATES,
) -> Tuple[FeeLine, ...]:
    """One default line per selected mandate, in selection order."""
    return tuple(compute_line(get_mandate(name, tuple(mandates))) for name in mandate_names)


def add_line(lines: Sequence[FeeLine], mandates: Sequence[Mandate]) -> Tuple[FeeLine, ...]:
    """Append a default line for the first available mandate."""
    if not mandates:
        return tuple(lines)
    return tuple(lines) + (compute_line(mandates[0]),)


def remove_line(lines: Sequence[FeeLine], index: int) -> Tuple[FeeLine, ...]:
    if not 0 <= index < len(lines):
        raise IndexError(f"Fee line index out of range: {index}")
    return tuple(line for i, line in enumerate(lines) if i != index)


def update_line(
    lines: Sequence[FeeLine],
    index: int,
    patch: FeeLinePatch,
    mandates: Sequence[Mandate] = MANDATES,
) -> Tuple[FeeLine, ...]:
    """
    Recompute the line at index from the patch merged over its current values.

    The mandate is looked up by the patched (or current) staff id and falls
    back to the first mandate when it is no longer available.
    """
    if not 0 <= index < len(lines):
        raise IndexError(f"Fee line index out of range: {index}")
    if not mandates:
        raise ValueError("At least one mandate is required to update a fee line")

    current = lines[index]
    staff_id = patch.staff_id if patch.staff_id is not None else current.staff_id
    mandate = next((m for m in mandates if m.id == staff_id), mandates[0])
    hours = patch.hours if patch.hours is not None else current.hours
    rate = patch.rate if patch.rate is not None else current.rate

    updated = list(lines)
    updated[index] = compute_line(mandate, hours, rate)
    return tuple(updated)


def rebuild_summary(raw: Dict[str, Any]) -> FeeSummary:
    """Re-derive a summary from untrusted wire data; sent totals are discarded."""
    return FeeSummary.from_dict(raw)
