"""
Federal tax estimation engine.

Combines the standard deduction, progressive bracket tax, a simplified
Earned Income Tax Credit and flat self-employment/withholding rates into a
refund or amount owed.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Tuple

from tax_estimator.exceptions import ComputationError, TaxEngineError, ValidationError
from tax_estimator.models.document import UploadedDocumentDescriptor
from tax_estimator.models.tax import (
    DeductionSummary,
    DeductionType,
    FilingStatus,
    IncomeProfile,
    IncomeSummary,
    RefundOrOwed,
    RefundType,
    TaxCalculation,
    TaxCalculationRequest,
    TaxpayerInfo,
    TaxResult,
)
from tax_estimator.services import tax_tables
from tax_estimator.utils.parsing import parse_int, parse_non_negative, round_currency


logger = logging.getLogger(__name__)


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a moment as an ISO-8601 UTC string with millisecond precision."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_itemizing(use_standard_deduction: Any) -> bool:
    """
    Interpret the standard deduction flag.

    Only an explicit "false" (or JSON false) opts out of the standard
    deduction; anything else, including a missing flag, keeps it.
    """
    return use_standard_deduction is False or use_standard_deduction == "false"


class TaxEstimationService:
    """
    Stateless tax estimation engine.

    Attributes:
        tax_year: Tax year reported on every result
    """

    def __init__(self, tax_year: int = tax_tables.TAX_YEAR):
        """
        Initialize the engine.

        Args:
            tax_year: Tax year reported on results
        """
        self.tax_year = tax_year

    def calculate_standard_deduction(self, filing_status: Any, age: int = 0) -> float:
        """
        Look up the standard deduction for a filer.

        Args:
            filing_status: Filing status (unrecognized values count as single)
            age: Filer age in years

        Returns:
            Standard deduction including the senior supplement at 65 and over
        """
        status = FilingStatus.parse(filing_status)
        deduction = tax_tables.STANDARD_DEDUCTIONS[status]

        if age >= tax_tables.SENIOR_AGE:
            if status == FilingStatus.MARRIED:
                deduction += tax_tables.SENIOR_SUPPLEMENT_MARRIED
            else:
                deduction += tax_tables.SENIOR_SUPPLEMENT_OTHER

        return deduction

    def get_brackets(self, filing_status: Any):
        """Return the bracket table used for a filing status."""
        status = FilingStatus.parse(filing_status)
        return tax_tables.TAX_BRACKETS.get(
            status,
            tax_tables.TAX_BRACKETS[tax_tables.BRACKET_FALLBACK_STATUS]
        )

    def calculate_tax(self, income: float, filing_status: Any, deductions: float = 0.0) -> float:
        """
        Compute progressive federal income tax.

        Args:
            income: Gross income before deductions
            filing_status: Filing status selecting the bracket table
            deductions: Deduction subtracted from income before taxing

        Returns:
            Tax rounded to cents
        """
        taxable_income = max(0.0, income - deductions)

        total_tax = 0.0
        remaining = taxable_income

        for bracket in self.get_brackets(filing_status):
            if remaining <= 0:
                break

            width = bracket.width
            taxed_here = remaining if width is None else min(remaining, width)
            total_tax += taxed_here * bracket.rate
            remaining -= taxed_here

        return round_currency(total_tax)

    def calculate_eitc(self, income: float, filing_status: Any, children: int) -> float:
        """
        Look up the simplified Earned Income Tax Credit.

        Args:
            income: Total gross income
            filing_status: Filing status; only married uses the married ceiling
            children: Qualifying children, clamped to 0..3

        Returns:
            Full credit for the bucket when income is within its ceiling, else 0
        """
        child_count = min(max(children, 0), tax_tables.EITC_MAX_CHILDREN)
        single_ceiling, married_ceiling, credit = tax_tables.EITC_LIMITS[child_count]

        status = FilingStatus.parse(filing_status)
        ceiling = married_ceiling if status == FilingStatus.MARRIED else single_ceiling

        if income > ceiling:
            return 0.0
        return credit

    def validate(self, request: TaxCalculationRequest) -> None:
        """
        Check the mandatory fields of a request.

        Raises:
            ValidationError: If filingStatus or income is absent
        """
        missing = [
            name for name, value in (
                ("filingStatus", request.filing_status),
                ("income", request.income),
            )
            if value is None or value == ""
        ]
        if missing:
            raise ValidationError(missing)

    def build_income_profile(self, request: TaxCalculationRequest) -> IncomeProfile:
        """Coerce the income fields of a request into an IncomeProfile."""
        return IncomeProfile(
            primary=parse_non_negative(request.income),
            w2=parse_non_negative(request.w2_income),
            self_employment=parse_non_negative(request.self_employment_income),
            interest=parse_non_negative(request.interest_income),
            dividends=parse_non_negative(request.dividend_income),
            capital_gains=parse_non_negative(request.capital_gains),
            other=parse_non_negative(request.other_income),
        )

    def estimate(
        self,
        request: TaxCalculationRequest,
        documents: Optional[Iterable[UploadedDocumentDescriptor]] = None,
        calculation_date: Optional[datetime] = None
    ) -> TaxResult:
        """
        Produce a full tax estimate for a request.

        Args:
            request: Raw calculation request
            documents: Descriptors of documents attached to the request
            calculation_date: Timestamp to report; defaults to now

        Returns:
            Immutable TaxResult

        Raises:
            ValidationError: If filingStatus or income is absent
            ComputationError: If the calculation fails unexpectedly
        """
        self.validate(request)

        try:
            return self._reconcile(request, tuple(documents or ()), calculation_date)
        except TaxEngineError:
            raise
        except Exception as e:
            logger.exception(f"Tax calculation failed: {str(e)}")
            raise ComputationError(str(e)) from e

    def _reconcile(
        self,
        request: TaxCalculationRequest,
        documents: Tuple[UploadedDocumentDescriptor, ...],
        calculation_date: Optional[datetime]
    ) -> TaxResult:
        filing_status = FilingStatus.parse(request.filing_status)
        age = max(0, parse_int(request.age))
        dependents = max(0, parse_int(request.dependents))
        itemized_amount = parse_non_negative(request.itemized_deductions)

        income = self.build_income_profile(request)
        total_gross_income = income.total_gross_income

        standard_deduction = self.calculate_standard_deduction(filing_status, age)
        itemizing = is_itemizing(request.use_standard_deduction)
        if itemizing:
            # Never drops below the standard amount, even when itemizing
            deduction_amount = max(itemized_amount, standard_deduction)
        else:
            deduction_amount = standard_deduction

        federal_tax = self.calculate_tax(total_gross_income, filing_status, deduction_amount)
        eitc = self.calculate_eitc(total_gross_income, filing_status, dependents)
        self_employment_tax = income.self_employment * tax_tables.SELF_EMPLOYMENT_TAX_RATE

        # Liability uses the unrounded self-employment tax
        total_tax_liability = round_currency(
            max(0.0, federal_tax + self_employment_tax - eitc)
        )
        estimated_withholding = round_currency(income.w2 * tax_tables.W2_WITHHOLDING_RATE)
        balance = round_currency(estimated_withholding - total_tax_liability)

        logger.debug(
            f"Estimated {filing_status.value} return: gross={total_gross_income} "
            f"tax={federal_tax} eitc={eitc} balance={balance}"
        )

        return TaxResult(
            tax_year=self.tax_year,
            filing_status=filing_status,
            taxpayer_info=TaxpayerInfo(age=age, dependents=dependents),
            income=IncomeSummary(
                total_gross_income=round_currency(total_gross_income),
                breakdown=income
            ),
            deductions=DeductionSummary(
                standard_deduction=standard_deduction,
                itemized_deductions=itemized_amount,
                deduction_used=deduction_amount,
                deduction_type=DeductionType.ITEMIZED if itemizing else DeductionType.STANDARD
            ),
            tax_calculation=TaxCalculation(
                taxable_income=round_currency(max(0.0, total_gross_income - deduction_amount)),
                federal_income_tax=federal_tax,
                self_employment_tax=round_currency(self_employment_tax),
                earned_income_credit=eitc,
                total_tax_liability=total_tax_liability
            ),
            refund_or_owed=RefundOrOwed(
                estimated_withholding=estimated_withholding,
                amount=balance,
                type=RefundType.REFUND if balance >= 0 else RefundType.OWED
            ),
            uploaded_documents=documents,
            calculation_date=utc_timestamp(calculation_date),
            disclaimer=tax_tables.DISCLAIMER
        )
