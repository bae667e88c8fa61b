"""Scenario dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import json
import math
from pathlib import Path
from typing import Any

from .tax_data import (
    HEALTHCARE_INFLATION,
    SOCIAL_SECURITY_TAXABLE_FRACTION,
    TARGET_BRACKET_RATE,
    TAXABLE_GAINS_FRACTION,
)


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into schema objects."""


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise SchemaError(f"{path}.{key}: missing required field")
    return data[key]


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"{path}: expected number")
    if not math.isfinite(value):
        raise SchemaError(f"{path}: must be a finite number")
    return float(value)


def _integer(value: Any, path: str) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or int(value) != value
    ):
        raise SchemaError(f"{path}: expected integer")
    return int(value)


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"

    @classmethod
    def parse(cls, value: Any, path: str = "filing_status") -> "FilingStatus":
        if isinstance(value, cls):
            return value
        token = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        if token == "married":
            token = cls.MARRIED_FILING_JOINTLY.value
        try:
            return cls(token)
        except ValueError:
            expected = ", ".join(status.value for status in cls)
            raise SchemaError(f"{path}: '{value}' is not valid; expected one of [{expected}]") from None


@dataclass(frozen=True, slots=True)
class AccountBalances:
    taxable: float = 0.0
    traditional: float = 0.0
    roth: float = 0.0
    hsa: float = 0.0

    @property
    def invested_total(self) -> float:
        """Combined balance of the accounts a withdrawal policy draws from."""
        return self.taxable + self.traditional + self.roth

    @property
    def total(self) -> float:
        return self.invested_total + self.hsa

    def clamped(self) -> "AccountBalances":
        return AccountBalances(
            taxable=max(0.0, self.taxable),
            traditional=max(0.0, self.traditional),
            roth=max(0.0, self.roth),
            hsa=max(0.0, self.hsa),
        )

    def grown(self, annual_return: float) -> "AccountBalances":
        factor = 1.0 + annual_return
        return AccountBalances(
            taxable=self.taxable * factor,
            traditional=self.traditional * factor,
            roth=self.roth * factor,
            hsa=self.hsa * factor,
        ).clamped()

    def with_hsa(self, hsa: float) -> "AccountBalances":
        return replace(self, hsa=max(0.0, hsa))

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "balances") -> "AccountBalances":
        return cls(
            taxable=_number(_require(data, "taxable", path), f"{path}.taxable"),
            traditional=_number(_require(data, "traditional", path), f"{path}.traditional"),
            roth=_number(_require(data, "roth", path), f"{path}.roth"),
            hsa=_number(_optional(data, "hsa", 0.0), f"{path}.hsa"),
        )


@dataclass(frozen=True, slots=True)
class RetirementProfile:
    current_age: int
    life_expectancy: int
    annual_spending_need: float
    filing_status: FilingStatus
    expected_return: float
    social_security: float = 0.0
    pension: float = 0.0
    healthcare_cost_base: float = 0.0
    healthcare_inflation: float = HEALTHCARE_INFLATION

    @property
    def horizon_years(self) -> int:
        return max(0, self.life_expectancy - self.current_age)

    @property
    def is_65_or_older(self) -> bool:
        return self.current_age >= 65

    @property
    def guaranteed_income(self) -> float:
        return self.social_security + self.pension

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "profile") -> "RetirementProfile":
        return cls(
            current_age=_integer(_require(data, "current_age", path), f"{path}.current_age"),
            life_expectancy=_integer(_require(data, "life_expectancy", path), f"{path}.life_expectancy"),
            annual_spending_need=_number(_require(data, "annual_spending_need", path), f"{path}.annual_spending_need"),
            filing_status=FilingStatus.parse(_require(data, "filing_status", path), f"{path}.filing_status"),
            expected_return=_number(_require(data, "expected_return", path), f"{path}.expected_return"),
            social_security=_number(_optional(data, "social_security", 0.0), f"{path}.social_security"),
            pension=_number(_optional(data, "pension", 0.0), f"{path}.pension"),
            healthcare_cost_base=_number(_optional(data, "healthcare_cost_base", 0.0), f"{path}.healthcare_cost_base"),
            healthcare_inflation=_number(
                _optional(data, "healthcare_inflation", HEALTHCARE_INFLATION), f"{path}.healthcare_inflation"
            ),
        )


@dataclass(frozen=True, slots=True)
class Assumptions:
    social_security_taxable_fraction: float = SOCIAL_SECURITY_TAXABLE_FRACTION
    taxable_gains_fraction: float = TAXABLE_GAINS_FRACTION
    target_bracket_rate: float = TARGET_BRACKET_RATE

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "assumptions") -> "Assumptions":
        return cls(
            social_security_taxable_fraction=_number(
                _optional(data, "social_security_taxable_fraction", SOCIAL_SECURITY_TAXABLE_FRACTION),
                f"{path}.social_security_taxable_fraction",
            ),
            taxable_gains_fraction=_number(
                _optional(data, "taxable_gains_fraction", TAXABLE_GAINS_FRACTION),
                f"{path}.taxable_gains_fraction",
            ),
            target_bracket_rate=_number(
                _optional(data, "target_bracket_rate", TARGET_BRACKET_RATE),
                f"{path}.target_bracket_rate",
            ),
        )


@dataclass(frozen=True, slots=True)
class Scenario:
    profile: RetirementProfile
    balances: AccountBalances
    assumptions: Assumptions = field(default_factory=Assumptions)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scenario":
        return cls(
            profile=RetirementProfile.from_dict(_expect_dict(_require(data, "profile", "scenario"), "profile")),
            balances=AccountBalances.from_dict(_expect_dict(_require(data, "balances", "scenario"), "balances")),
            assumptions=Assumptions.from_dict(_expect_dict(_optional(data, "assumptions", {}), "assumptions")),
        )


def load_scenario(path: str | Path) -> Scenario:
    """Load scenario JSON into strongly-typed dataclasses."""
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError("scenario: root must be a JSON object")
    return Scenario.from_dict(raw)
