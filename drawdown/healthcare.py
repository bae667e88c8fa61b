"""Healthcare cost growth and HSA draws."""

from __future__ import annotations

from .schema import AccountBalances


def healthcare_need(base_cost: float, inflation_rate: float, years_elapsed: int) -> float:
    if base_cost <= 0:
        return 0.0
    if years_elapsed <= 0:
        return base_cost
    return base_cost * (1.0 + inflation_rate) ** years_elapsed


def draw_hsa(balances: AccountBalances, need: float) -> tuple[AccountBalances, float]:
    """Cover healthcare from the HSA first. Returns (balances_after, hsa_withdrawal)."""
    withdrawal = min(max(0.0, balances.hsa), max(0.0, need))
    return balances.with_hsa(balances.hsa - withdrawal), withdrawal
