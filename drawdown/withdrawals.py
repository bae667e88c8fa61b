"""Withdrawal policy logic."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .schema import AccountBalances, Assumptions, FilingStatus, RetirementProfile
from .tax import bracket_ceiling, standard_deduction

ACCOUNT_FIELDS: tuple[str, ...] = ("taxable", "traditional", "roth")


@dataclass(frozen=True, slots=True)
class WithdrawalRequest:
    taxable: float = 0.0
    traditional: float = 0.0
    roth: float = 0.0
    hsa: float = 0.0

    @property
    def total(self) -> float:
        return self.taxable + self.traditional + self.roth + self.hsa


@dataclass(frozen=True, slots=True)
class PolicyContext:
    """Per-run inputs some policies need beyond balances and the amount needed."""

    filing_status: FilingStatus
    social_security: float
    pension: float
    standard_deduction: float
    assumptions: Assumptions

    @classmethod
    def for_profile(cls, profile: RetirementProfile, assumptions: Assumptions | None = None) -> "PolicyContext":
        return cls(
            filing_status=profile.filing_status,
            social_security=profile.social_security,
            pension=profile.pension,
            standard_deduction=standard_deduction(profile.filing_status, profile.is_65_or_older),
            assumptions=assumptions or Assumptions(),
        )


def guaranteed_taxable_income(context: PolicyContext) -> float:
    return max(0.0, context.social_security) * context.assumptions.social_security_taxable_fraction + max(
        0.0, context.pension
    )


def bracket_room(context: PolicyContext) -> float:
    """Traditional dollars that fit under the target bracket ceiling this year."""
    ceiling = bracket_ceiling(context.filing_status, context.assumptions.target_bracket_rate)
    return max(0.0, ceiling - guaranteed_taxable_income(context) + context.standard_deduction)


def _draw_in_order(
    order: tuple[str, ...],
    available: dict[str, float],
    drawn: dict[str, float],
    remaining: float,
) -> float:
    """Withdraw from accounts in order. Returns the remaining need."""
    for name in order:
        if remaining <= 0:
            break
        amount = min(max(0.0, available[name]), remaining)
        if amount <= 0:
            continue
        available[name] -= amount
        drawn[name] += amount
        remaining -= amount
    return max(0.0, remaining)


def _ordered(order: tuple[str, ...]) -> Callable[[AccountBalances, float, PolicyContext | None], WithdrawalRequest]:
    def decide(balances: AccountBalances, amount_needed: float, context: PolicyContext | None = None) -> WithdrawalRequest:
        available = {name: getattr(balances, name) for name in ACCOUNT_FIELDS}
        drawn = dict.fromkeys(ACCOUNT_FIELDS, 0.0)
        _draw_in_order(order, available, drawn, amount_needed)
        return WithdrawalRequest(**drawn)

    return decide


def _tax_optimized(balances: AccountBalances, amount_needed: float, context: PolicyContext | None = None) -> WithdrawalRequest:
    if context is None:
        raise ValueError("tax_optimized policy requires a PolicyContext")

    available = {name: getattr(balances, name) for name in ACCOUNT_FIELDS}
    drawn = dict.fromkeys(ACCOUNT_FIELDS, 0.0)
    remaining = max(0.0, amount_needed)

    # Fill the target bracket with traditional money first.
    fill = min(max(0.0, available["traditional"]), bracket_room(context), remaining)
    if fill > 0:
        available["traditional"] -= fill
        drawn["traditional"] += fill
        remaining -= fill

    remaining = _draw_in_order(("taxable", "roth"), available, drawn, remaining)

    # Unmet need is never acceptable, even above the target bracket.
    _draw_in_order(("traditional",), available, drawn, remaining)
    return WithdrawalRequest(**drawn)


def _proportional(balances: AccountBalances, amount_needed: float, context: PolicyContext | None = None) -> WithdrawalRequest:
    total = balances.invested_total
    if amount_needed <= 0 or total <= 0:
        return WithdrawalRequest()

    drawn: dict[str, float] = {}
    for name in ACCOUNT_FIELDS:
        balance = max(0.0, getattr(balances, name))
        drawn[name] = min(balance, amount_needed * (balance / total))
    return WithdrawalRequest(**drawn)


class WithdrawalPolicy(str, Enum):
    TAX_OPTIMIZED = "tax_optimized"
    TRADITIONAL_FIRST = "traditional_first"
    ROTH_FIRST = "roth_first"
    PROPORTIONAL = "proportional"

    @property
    def display_name(self) -> str:
        return POLICY_NAMES[self]

    @property
    def description(self) -> str:
        return POLICY_DESCRIPTIONS[self]

    def decide(
        self,
        balances: AccountBalances,
        amount_needed: float,
        context: PolicyContext | None = None,
    ) -> WithdrawalRequest:
        """Split ``amount_needed`` across taxable, traditional and roth balances.

        TAX_OPTIMIZED sizes its bracket fill from ``context`` and raises
        ValueError without one. The other policies ignore it.
        """
        if amount_needed <= 0:
            return WithdrawalRequest()
        return _DECIDERS[self](balances.clamped(), amount_needed, context)


_DECIDERS: dict[WithdrawalPolicy, Callable[[AccountBalances, float, PolicyContext | None], WithdrawalRequest]] = {
    WithdrawalPolicy.TAX_OPTIMIZED: _tax_optimized,
    WithdrawalPolicy.TRADITIONAL_FIRST: _ordered(("traditional", "taxable", "roth")),
    WithdrawalPolicy.ROTH_FIRST: _ordered(("roth", "taxable", "traditional")),
    WithdrawalPolicy.PROPORTIONAL: _proportional,
}

POLICY_NAMES: dict[WithdrawalPolicy, str] = {
    WithdrawalPolicy.TAX_OPTIMIZED: "Tax-Optimized",
    WithdrawalPolicy.TRADITIONAL_FIRST: "Traditional First",
    WithdrawalPolicy.ROTH_FIRST: "Roth First",
    WithdrawalPolicy.PROPORTIONAL: "Proportional",
}

POLICY_DESCRIPTIONS: dict[WithdrawalPolicy, str] = {
    WithdrawalPolicy.TAX_OPTIMIZED: (
        "Fill lower tax brackets with traditional withdrawals, use taxable for moderate needs, "
        "and preserve Roth for later years."
    ),
    WithdrawalPolicy.TRADITIONAL_FIRST: (
        "Deplete traditional accounts first. Higher early-year taxes, but tax-free Roth assets last longest."
    ),
    WithdrawalPolicy.ROTH_FIRST: (
        "Use Roth first to minimize current taxes, giving up the Roth's tax-free growth."
    ),
    WithdrawalPolicy.PROPORTIONAL: (
        "Withdraw proportionally from all accounts. Balanced, but not tuned for tax efficiency."
    ),
}

# Ties in lifetime tax go to the earliest policy in this order.
POLICY_EVALUATION_ORDER: tuple[WithdrawalPolicy, ...] = (
    WithdrawalPolicy.TAX_OPTIMIZED,
    WithdrawalPolicy.TRADITIONAL_FIRST,
    WithdrawalPolicy.ROTH_FIRST,
    WithdrawalPolicy.PROPORTIONAL,
)


def parse_policy(value: str | WithdrawalPolicy) -> WithdrawalPolicy:
    if isinstance(value, WithdrawalPolicy):
        return value
    token = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    for policy in WithdrawalPolicy:
        if token in (policy.value, policy.display_name.lower().replace("-", "_").replace(" ", "_")):
            return policy
    expected = ", ".join(policy.value for policy in WithdrawalPolicy)
    raise ValueError(f"unknown withdrawal policy '{value}'; expected one of [{expected}]")


def apply_withdrawal(balances: AccountBalances, request: WithdrawalRequest) -> AccountBalances:
    return AccountBalances(
        taxable=balances.taxable - request.taxable,
        traditional=balances.traditional - request.traditional,
        roth=balances.roth - request.roth,
        hsa=balances.hsa - request.hsa,
    ).clamped()
