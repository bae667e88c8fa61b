"""Year-by-year drawdown simulation for a single withdrawal policy."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging

from .healthcare import draw_hsa, healthcare_need
from .schema import AccountBalances, Assumptions, RetirementProfile
from .tax import TaxBracket, brackets_for, marginal_rate, tax_owed
from .withdrawals import PolicyContext, WithdrawalPolicy, WithdrawalRequest, apply_withdrawal

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class YearRecord:
    year_index: int
    age: int
    ending_balances: AccountBalances
    withdrawals: WithdrawalRequest
    tax_paid: float
    marginal_rate: float
    healthcare_need: float = 0.0
    amount_needed: float = 0.0
    taxable_income: float = 0.0
    shortfall: float = 0.0


@dataclass(frozen=True, slots=True)
class StrategyResult:
    policy: WithdrawalPolicy
    year_records: tuple[YearRecord, ...]
    total_taxes_paid: float
    ending_balance: float

    @property
    def policy_name(self) -> str:
        return self.policy.display_name

    @property
    def average_tax_per_year(self) -> float:
        if not self.year_records:
            return 0.0
        return self.total_taxes_paid / len(self.year_records)


def _shortfall(need: float, decided: WithdrawalRequest) -> float:
    gap = need - decided.total
    # Ignore float residue from proportional splits.
    return gap if gap > 1e-6 else 0.0


def amount_needed(profile: RetirementProfile) -> float:
    """Spending left after guaranteed income."""
    return max(0.0, profile.annual_spending_need - profile.social_security - profile.pension)


def taxable_income(withdrawal: WithdrawalRequest, context: PolicyContext) -> float:
    gains = max(0.0, withdrawal.taxable) * context.assumptions.taxable_gains_fraction
    gross = (
        max(0.0, context.social_security) * context.assumptions.social_security_taxable_fraction
        + max(0.0, context.pension)
        + max(0.0, withdrawal.traditional)
        + gains
    )
    return max(0.0, gross - context.standard_deduction)


def simulate_year(
    year_index: int,
    balances: AccountBalances,
    policy: WithdrawalPolicy,
    profile: RetirementProfile,
    context: PolicyContext,
    brackets: tuple[TaxBracket, ...],
) -> YearRecord:
    """Advance one retirement year from ``balances`` and return its record."""
    need_for_care = healthcare_need(profile.healthcare_cost_base, profile.healthcare_inflation, year_index)
    after_hsa, hsa_withdrawal = draw_hsa(balances, need_for_care)

    need = amount_needed(profile)
    decided = policy.decide(after_hsa, need, context)
    withdrawal = replace(decided, hsa=hsa_withdrawal)
    remaining = apply_withdrawal(after_hsa, decided)

    income = taxable_income(withdrawal, context)
    tax = tax_owed(income, brackets)

    return YearRecord(
        year_index=year_index,
        age=profile.current_age + year_index,
        ending_balances=remaining.grown(profile.expected_return),
        withdrawals=withdrawal,
        tax_paid=tax,
        marginal_rate=marginal_rate(income, brackets),
        healthcare_need=need_for_care,
        amount_needed=need,
        taxable_income=income,
        shortfall=_shortfall(need, decided),
    )


def run_policy(
    policy: WithdrawalPolicy,
    profile: RetirementProfile,
    balances: AccountBalances,
    assumptions: Assumptions | None = None,
) -> StrategyResult:
    context = PolicyContext.for_profile(profile, assumptions)
    brackets = brackets_for(profile.filing_status)

    current = balances.clamped()
    records: list[YearRecord] = []
    total_tax = 0.0
    for year_index in range(profile.horizon_years):
        record = simulate_year(year_index, current, policy, profile, context, brackets)
        records.append(record)
        total_tax += record.tax_paid
        current = record.ending_balances

    shortfall_years = sum(1 for record in records if record.shortfall > 0)
    logger.debug(
        "policy=%s years=%d total_tax=%.2f ending_balance=%.2f shortfall_years=%d",
        policy.value,
        len(records),
        total_tax,
        current.total,
        shortfall_years,
    )
    return StrategyResult(
        policy=policy,
        year_records=tuple(records),
        total_taxes_paid=total_tax,
        ending_balance=current.total,
    )
