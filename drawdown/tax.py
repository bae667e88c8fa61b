"""Progressive federal income tax helpers."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

from .schema import FilingStatus
from .tax_data import (
    BASE_TAX_YEAR,
    FEDERAL_BRACKETS,
    FILING_STATUSES,
    STANDARD_DEDUCTIONS,
    TARGET_BRACKET_RATE,
)


class TaxTableError(ValueError):
    """Raised when static bracket or deduction data is malformed."""


@dataclass(frozen=True, slots=True)
class TaxBracket:
    lower_bound: float
    upper_bound: float | None
    rate: float

    @property
    def span(self) -> float | None:
        if self.upper_bound is None:
            return None
        return max(0.0, self.upper_bound - self.lower_bound)


@dataclass(frozen=True, slots=True)
class BracketSummary:
    rate: float
    lower_bound: float
    upper_bound: float | None
    tax_on_bracket: float


def check_bracket_table(brackets: Sequence[TaxBracket], label: str = "brackets") -> None:
    """Raise TaxTableError unless bands are contiguous, ascending and open-ended."""
    if not brackets:
        raise TaxTableError(f"{label}: at least one bracket is required")
    if brackets[0].lower_bound != 0.0:
        raise TaxTableError(f"{label}[0].lower_bound: must start at 0")

    previous: TaxBracket | None = None
    for idx, bracket in enumerate(brackets):
        path = f"{label}[{idx}]"
        if not 0.0 <= bracket.rate <= 1.0:
            raise TaxTableError(f"{path}.rate: must be between 0 and 1")
        if previous is not None:
            if previous.upper_bound is None:
                raise TaxTableError(f"{label}[{idx - 1}].upper_bound: only the last bracket may be unbounded")
            if bracket.lower_bound != previous.upper_bound:
                raise TaxTableError(f"{path}.lower_bound: must equal the previous upper_bound ({previous.upper_bound})")
            if bracket.rate < previous.rate:
                raise TaxTableError(f"{path}.rate: rates must be non-decreasing")
        if bracket.upper_bound is not None and bracket.upper_bound <= bracket.lower_bound:
            raise TaxTableError(f"{path}.upper_bound: must be greater than lower_bound")
        previous = bracket

    if brackets[-1].upper_bound is not None:
        raise TaxTableError(f"{label}[{len(brackets) - 1}].upper_bound: last bracket must be unbounded")


def _load_brackets(year: int) -> dict[FilingStatus, tuple[TaxBracket, ...]]:
    by_status = FEDERAL_BRACKETS.get(year)
    if by_status is None:
        raise TaxTableError(f"FEDERAL_BRACKETS: no data for {year}")

    loaded: dict[FilingStatus, tuple[TaxBracket, ...]] = {}
    for status in FilingStatus:
        raw = by_status.get(status.value)
        if raw is None:
            raise TaxTableError(f"FEDERAL_BRACKETS[{year}]: missing filing status '{status.value}'")
        brackets = tuple(TaxBracket(lower, upper, rate) for lower, upper, rate in raw)
        check_bracket_table(brackets, f"FEDERAL_BRACKETS[{year}][{status.value}]")
        loaded[status] = brackets
    return loaded


def _load_deductions(year: int) -> dict[FilingStatus, dict[bool, float]]:
    by_status = STANDARD_DEDUCTIONS.get(year)
    if by_status is None:
        raise TaxTableError(f"STANDARD_DEDUCTIONS: no data for {year}")

    loaded: dict[FilingStatus, dict[bool, float]] = {}
    for status in FilingStatus:
        entry = by_status.get(status.value)
        if entry is None or False not in entry or True not in entry:
            raise TaxTableError(f"STANDARD_DEDUCTIONS[{year}]: missing entry for '{status.value}'")
        loaded[status] = {flag: float(entry[flag]) for flag in (False, True)}
    return loaded


def check_tax_tables(year: int = BASE_TAX_YEAR) -> None:
    if set(FILING_STATUSES) != {status.value for status in FilingStatus}:
        raise TaxTableError("FILING_STATUSES: does not match the supported filing statuses")
    _load_brackets(year)
    _load_deductions(year)


check_tax_tables()
_BRACKETS = _load_brackets(BASE_TAX_YEAR)
_DEDUCTIONS = _load_deductions(BASE_TAX_YEAR)


def brackets_for(filing_status: FilingStatus | str) -> tuple[TaxBracket, ...]:
    return _BRACKETS[FilingStatus.parse(filing_status)]


def standard_deduction(filing_status: FilingStatus | str, is_65_or_older: bool) -> float:
    return _DEDUCTIONS[FilingStatus.parse(filing_status)][bool(is_65_or_older)]


def bracket_ceiling(filing_status: FilingStatus | str, rate: float = TARGET_BRACKET_RATE) -> float:
    """Upper edge of the bracket taxed at ``rate`` for the filing status."""
    for bracket in brackets_for(filing_status):
        if math.isclose(bracket.rate, rate) and bracket.upper_bound is not None:
            return bracket.upper_bound
    raise ValueError(f"no bounded {rate:.0%} bracket for filing status '{FilingStatus.parse(filing_status).value}'")


def tax_owed(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    remaining = max(0.0, taxable_income)
    tax = 0.0
    for bracket in brackets:
        if remaining <= 0:
            break
        span = bracket.span
        taxable_at_rate = remaining if span is None else min(remaining, span)
        tax += taxable_at_rate * bracket.rate
        remaining -= taxable_at_rate
    return max(0.0, tax)


def marginal_rate(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    for bracket in brackets:
        if bracket.upper_bound is None or bracket.upper_bound >= taxable_income:
            return bracket.rate
    return brackets[-1].rate


def bracket_breakdown(filing_status: FilingStatus | str, cap: float = 500_000.0) -> list[BracketSummary]:
    """Tax due on each full bracket, with income capped at ``cap``."""
    rows: list[BracketSummary] = []
    for bracket in brackets_for(filing_status):
        upper = cap if bracket.upper_bound is None else min(bracket.upper_bound, cap)
        filled = max(0.0, upper - bracket.lower_bound)
        rows.append(
            BracketSummary(
                rate=bracket.rate,
                lower_bound=bracket.lower_bound,
                upper_bound=bracket.upper_bound,
                tax_on_bracket=filled * bracket.rate,
            )
        )
    return rows
