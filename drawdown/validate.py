"""Semantic validation for scenarios."""

from __future__ import annotations

from dataclasses import dataclass, field
import math

from .schema import Scenario
from .tax import bracket_ceiling


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_non_negative(result: ValidationResult, path: str, value: float) -> None:
    if not math.isfinite(value):
        result.errors.append(f"{path}: must be a finite number")
    elif value < 0:
        result.errors.append(f"{path}: must be >= 0")


def _check_fraction(result: ValidationResult, path: str, value: float) -> None:
    if not math.isfinite(value):
        result.errors.append(f"{path}: must be a finite number")
    elif value < 0:
        result.errors.append(f"{path}: must be >= 0")
    elif value > 1:
        result.errors.append(f"{path}: must be <= 1")


def validate_scenario(scenario: Scenario) -> ValidationResult:
    result = ValidationResult()
    profile = scenario.profile
    balances = scenario.balances
    assumptions = scenario.assumptions

    if profile.current_age < 0:
        result.errors.append("profile.current_age: must be >= 0")
    if profile.life_expectancy <= profile.current_age:
        result.errors.append("profile.life_expectancy: must be greater than current_age")

    for name in ("annual_spending_need", "social_security", "pension", "healthcare_cost_base"):
        _check_non_negative(result, f"profile.{name}", getattr(profile, name))

    if not -1.0 < profile.expected_return <= 1.0:
        result.errors.append("profile.expected_return: must be a fraction in (-1, 1]")
    _check_non_negative(result, "profile.healthcare_inflation", profile.healthcare_inflation)

    for name in ("taxable", "traditional", "roth", "hsa"):
        _check_non_negative(result, f"balances.{name}", getattr(balances, name))

    _check_fraction(result, "assumptions.social_security_taxable_fraction", assumptions.social_security_taxable_fraction)
    _check_fraction(result, "assumptions.taxable_gains_fraction", assumptions.taxable_gains_fraction)
    try:
        bracket_ceiling(profile.filing_status, assumptions.target_bracket_rate)
    except ValueError:
        result.errors.append(
            f"assumptions.target_bracket_rate: no bounded {assumptions.target_bracket_rate:.0%} bracket "
            f"for '{profile.filing_status.value}'"
        )

    if profile.annual_spending_need <= profile.guaranteed_income:
        result.warnings.append("profile.annual_spending_need: fully covered by social_security and pension")
    if balances.invested_total <= 0:
        result.warnings.append("balances: taxable, traditional and roth are all empty")
    if profile.expected_return > 0.15:
        result.warnings.append(f"profile.expected_return: {profile.expected_return:.1%} is unusually high")

    return result
