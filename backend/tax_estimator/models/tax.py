"""
Tax calculation data models and schemas.
"""

from enum import Enum
from typing import Any, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from tax_estimator.models.document import UploadedDocumentDescriptor


class FilingStatus(str, Enum):
    """
    Enumeration of supported filing statuses.
    """
    SINGLE = "single"
    MARRIED = "married"
    MARRIED_SEPARATE = "marriedSeparate"
    HEAD_OF_HOUSEHOLD = "headOfHousehold"

    @classmethod
    def parse(cls, value: Any) -> "FilingStatus":
        """
        Normalize raw request input to a filing status.

        Args:
            value: Raw filing status from the request

        Returns:
            Matching filing status, or SINGLE when the value is not recognized
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.SINGLE


class DeductionType(str, Enum):
    """
    Deduction election made by the filer.
    """
    STANDARD = "standard"
    ITEMIZED = "itemized"


class RefundType(str, Enum):
    """
    Sign of the reconciled balance.
    """
    REFUND = "refund"
    OWED = "owed"


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=True
    )


class TaxBracket(CamelModel):
    """
    One marginal-rate bracket.

    Income above lower_bound and up to upper_bound is taxed at rate.
    An upper_bound of None marks the top, unbounded bracket.
    """
    lower_bound: float = Field(..., ge=0)
    upper_bound: Optional[float] = None
    rate: float = Field(..., ge=0, le=1)

    @property
    def width(self) -> Optional[float]:
        if self.upper_bound is None:
            return None
        return self.upper_bound - self.lower_bound


class IncomeProfile(CamelModel):
    """
    Gross income split by source.

    Attributes:
        primary: Primary income reported in the required income field
        w2: W-2 wages
        self_employment: Net self-employment income
        interest: Interest income
        dividends: Dividend income
        capital_gains: Capital gains
        other: Any other income
    """
    primary: float = Field(0.0, ge=0)
    w2: float = Field(0.0, ge=0)
    self_employment: float = Field(0.0, ge=0)
    interest: float = Field(0.0, ge=0)
    dividends: float = Field(0.0, ge=0)
    capital_gains: float = Field(0.0, ge=0)
    other: float = Field(0.0, ge=0)

    @property
    def total_gross_income(self) -> float:
        return (
            self.primary
            + self.w2
            + self.self_employment
            + self.interest
            + self.dividends
            + self.capital_gains
            + self.other
        )


class TaxCalculationRequest(CamelModel):
    """
    Raw tax calculation request as submitted by the form.

    Values are kept as received (usually strings) and coerced by the engine,
    so that malformed optional numbers default to zero instead of failing.
    """
    filing_status: Optional[Any] = None
    income: Optional[Any] = None
    age: Optional[Any] = None
    dependents: Optional[Any] = None
    itemized_deductions: Optional[Any] = None
    use_standard_deduction: Optional[Any] = None
    w2_income: Optional[Any] = None
    self_employment_income: Optional[Any] = None
    interest_income: Optional[Any] = None
    dividend_income: Optional[Any] = None
    capital_gains: Optional[Any] = None
    other_income: Optional[Any] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "filingStatus": "single",
                "income": "50000",
                "age": "30",
                "dependents": "0",
                "useStandardDeduction": "true"
            }
        }
    )


class TaxpayerInfo(CamelModel):
    age: int
    dependents: int


class IncomeSummary(CamelModel):
    total_gross_income: float
    breakdown: IncomeProfile


class DeductionSummary(CamelModel):
    standard_deduction: float
    itemized_deductions: float
    deduction_used: float
    deduction_type: DeductionType


class TaxCalculation(CamelModel):
    taxable_income: float
    federal_income_tax: float
    self_employment_tax: float
    earned_income_credit: float
    total_tax_liability: float


class RefundOrOwed(CamelModel):
    """
    Reconciled balance.

    Attributes:
        estimated_withholding: Tax assumed already withheld from W-2 wages
        amount: Signed balance; positive is a refund, negative is owed
        type: REFUND when amount >= 0, OWED otherwise
    """
    estimated_withholding: float
    amount: float
    type: RefundType

    @computed_field
    @property
    def magnitude(self) -> float:
        return abs(self.amount)


class TaxResult(CamelModel):
    """
    Complete tax estimate returned to the caller.

    Created fresh for every request and never mutated.
    """
    tax_year: int
    filing_status: FilingStatus
    taxpayer_info: TaxpayerInfo
    income: IncomeSummary
    deductions: DeductionSummary
    tax_calculation: TaxCalculation
    refund_or_owed: RefundOrOwed
    uploaded_documents: Tuple[UploadedDocumentDescriptor, ...] = ()
    calculation_date: str
    disclaimer: str
