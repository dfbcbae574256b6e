"""
2024 federal reference tables (simplified).

All tables are read-only and shared by every request.
"""

from types import MappingProxyType

from tax_estimator.models.tax import FilingStatus, TaxBracket


TAX_YEAR = 2024


def _brackets(*limits):
    """Build contiguous brackets from (upper_bound, rate) pairs."""
    brackets = []
    lower = 0.0
    for upper, rate in limits:
        brackets.append(TaxBracket(lower_bound=lower, upper_bound=upper, rate=rate))
        lower = upper
    return tuple(brackets)


TAX_BRACKETS = MappingProxyType({
    FilingStatus.SINGLE: _brackets(
        (11000, 0.10),
        (44725, 0.12),
        (95375, 0.22),
        (182050, 0.24),
        (231250, 0.32),
        (578125, 0.35),
        (None, 0.37),
    ),
    FilingStatus.MARRIED: _brackets(
        (22000, 0.10),
        (89450, 0.12),
        (190750, 0.22),
        (364200, 0.24),
        (462500, 0.32),
        (693750, 0.35),
        (None, 0.37),
    ),
})

# Statuses without their own bracket table are taxed on this one.
# marriedSeparate and headOfHousehold currently land here.
BRACKET_FALLBACK_STATUS = FilingStatus.SINGLE

STANDARD_DEDUCTIONS = MappingProxyType({
    FilingStatus.SINGLE: 13850.0,
    FilingStatus.MARRIED: 27700.0,
    FilingStatus.MARRIED_SEPARATE: 13850.0,
    FilingStatus.HEAD_OF_HOUSEHOLD: 20800.0,
})

SENIOR_AGE = 65
SENIOR_SUPPLEMENT_MARRIED = 1500.0
SENIOR_SUPPLEMENT_OTHER = 1850.0

# children -> (single ceiling, married ceiling, credit)
EITC_LIMITS = MappingProxyType({
    0: (17640.0, 23260.0, 600.0),
    1: (46560.0, 52918.0, 3995.0),
    2: (51567.0, 58250.0, 6604.0),
    3: (55529.0, 62044.0, 7430.0),
})
EITC_MAX_CHILDREN = 3

SELF_EMPLOYMENT_TAX_RATE = 0.1413
W2_WITHHOLDING_RATE = 0.20

DISCLAIMER = (
    "This is a simplified tax calculation for estimation purposes only. "
    "Consult a tax professional for accurate filing."
)
