"""Federal bracket and standard deduction reference data."""

from __future__ import annotations

from typing import Final

BASE_TAX_YEAR: Final[int] = 2024

FILING_STATUSES: Final[set[str]] = {
    "single",
    "married_filing_jointly",
}

# Brackets are (lower_bound, upper_bound, marginal_rate). Upper bound None means infinity.
FEDERAL_BRACKETS: Final[dict[int, dict[str, list[tuple[float, float | None, float]]]]] = {
    2024: {
        "single": [
            (0.0, 11_600.0, 0.10),
            (11_600.0, 47_150.0, 0.12),
            (47_150.0, 100_525.0, 0.22),
            (100_525.0, 191_950.0, 0.24),
            (191_950.0, 243_725.0, 0.32),
            (243_725.0, 609_350.0, 0.35),
            (609_350.0, None, 0.37),
        ],
        "married_filing_jointly": [
            (0.0, 23_200.0, 0.10),
            (23_200.0, 94_300.0, 0.12),
            (94_300.0, 201_050.0, 0.22),
            (201_050.0, 383_900.0, 0.24),
            (383_900.0, 487_450.0, 0.32),
            (487_450.0, 731_200.0, 0.35),
            (731_200.0, None, 0.37),
        ],
    }
}

# Keyed by filing status, then by the 65-or-older flag.
STANDARD_DEDUCTIONS: Final[dict[int, dict[str, dict[bool, float]]]] = {
    2024: {
        "single": {False: 14_600.0, True: 16_550.0},
        "married_filing_jointly": {False: 29_200.0, True: 32_600.0},
    }
}

# Up to 85% of Social Security benefits are treated as taxable income.
SOCIAL_SECURITY_TAXABLE_FRACTION: Final[float] = 0.85
# Share of a taxable-account withdrawal assumed to be realized gains.
TAXABLE_GAINS_FRACTION: Final[float] = 0.15
# The tax-optimized policy fills ordinary income up to the top of this band.
TARGET_BRACKET_RATE: Final[float] = 0.22
HEALTHCARE_INFLATION: Final[float] = 0.055
