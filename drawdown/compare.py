"""Run every withdrawal policy and rank them by lifetime tax."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable

from .schema import AccountBalances, Assumptions, RetirementProfile, Scenario
from .simulation import StrategyResult, run_policy
from .withdrawals import POLICY_EVALUATION_ORDER, WithdrawalPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ComparisonOutcome:
    results: tuple[StrategyResult, ...]
    best: StrategyResult
    baseline: StrategyResult | None = None

    def result_for(self, policy: WithdrawalPolicy) -> StrategyResult:
        for result in self.results:
            if result.policy is policy:
                return result
        raise KeyError(policy.value)

    def savings_vs_baseline(self, result: StrategyResult | None = None) -> float:
        """Lifetime tax saved relative to the baseline policy (best policy by default)."""
        if self.baseline is None:
            return 0.0
        target = result or self.best
        return self.baseline.total_taxes_paid - target.total_taxes_paid


def select_best(results: Iterable[StrategyResult]) -> StrategyResult:
    best: StrategyResult | None = None
    for result in results:
        # Strict comparison keeps the earliest policy on ties.
        if best is None or result.total_taxes_paid < best.total_taxes_paid:
            best = result
    if best is None:
        raise ValueError("at least one withdrawal policy is required")
    return best


def compare_policies(
    profile: RetirementProfile,
    balances: AccountBalances,
    policies: Iterable[WithdrawalPolicy] = POLICY_EVALUATION_ORDER,
    baseline: WithdrawalPolicy | None = WithdrawalPolicy.ROTH_FIRST,
    assumptions: Assumptions | None = None,
) -> ComparisonOutcome:
    # Balances are immutable, so every run starts from the same values.
    results = tuple(run_policy(policy, profile, balances, assumptions) for policy in policies)
    best = select_best(results)

    baseline_result = None
    if baseline is not None:
        baseline_result = next((r for r in results if r.policy is baseline), None)
        if baseline_result is None:
            baseline_result = run_policy(baseline, profile, balances, assumptions)

    logger.debug("best policy=%s total_tax=%.2f", best.policy.value, best.total_taxes_paid)
    return ComparisonOutcome(results=results, best=best, baseline=baseline_result)


def compare_scenario(scenario: Scenario, baseline: WithdrawalPolicy | None = WithdrawalPolicy.ROTH_FIRST) -> ComparisonOutcome:
    return compare_policies(
        scenario.profile,
        scenario.balances,
        baseline=baseline,
        assumptions=scenario.assumptions,
    )
