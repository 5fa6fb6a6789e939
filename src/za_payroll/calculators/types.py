"""Type definitions for calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")


def to_decimal(value: Number | None) -> Decimal:
    """Coerce a number to Decimal. Floats go through str() to keep 0.1 as 0.1."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class RateType(str, Enum):
    """How an employee's rate is expressed."""

    SALARY = "Salary"
    HOURLY = "Hourly"


class PayFrequency(str, Enum):
    """Pay period frequencies."""

    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-weekly"
    MONTHLY = "Monthly"


class LineType(str, Enum):
    """Payslip line item types."""

    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"
    TAX = "TAX"
    EMPLOYER_TAX = "EMPLOYER_TAX"
    ROUNDING = "ROUNDING"


@dataclass(frozen=True)
class RateProfile:
    """Employee-side rate configuration."""

    rate: Decimal
    rate_type: RateType | str = RateType.SALARY
    pay_frequency: PayFrequency | str = PayFrequency.MONTHLY


@dataclass(frozen=True)
class CompanyRatePolicy:
    """Company-side rate and compliance configuration.

    Attributes:
        overtime_rate: Overtime multiplier. None means 1.5.
        doubletime_rate: Double-time multiplier. None means 2.0.
        sdl_contribution: Company is liable for the Skills Development Levy
            (annual payroll above R500k).
        eligible_for_eti: Company may claim the Employment Tax Incentive.
    """

    overtime_rate: Decimal | None = None
    doubletime_rate: Decimal | None = None
    sdl_contribution: bool = False
    eligible_for_eti: bool = False


@dataclass(frozen=True)
class PayrollInput:
    """Everything needed to calculate one employee's payslip for one period.

    Period dates are opaque strings passed through to the caller; the engine
    never parses them.
    """

    employee: RateProfile
    company: CompanyRatePolicy = field(default_factory=CompanyRatePolicy)
    pay_period_start: str = ""
    pay_period_end: str = ""
    pay_date: str = ""

    # Hours worked
    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    doubletime_hours: Decimal = ZERO

    # Earnings adjustments
    allowances: Decimal = ZERO
    bonus: Decimal = ZERO

    # Pre-tax deductions (reduce taxable income)
    medical_aid_contribution: Decimal = ZERO
    pension_fund_contribution: Decimal = ZERO
    retirement_annuity_contribution: Decimal = ZERO

    # Post-tax deductions
    medical_aid_post_tax: Decimal = ZERO
    other_deductions: Decimal = ZERO

    # Tax context
    employee_age: int | None = None
    has_medical_aid: bool = False
    medical_aid_dependants: int = 0
    employment_month: int = 1  # month of qualifying employment, for ETI

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "rate": _canonical_decimal(self.employee.rate),
            "rate_type": _enum_value(self.employee.rate_type),
            "pay_frequency": _enum_value(self.employee.pay_frequency),
            "overtime_rate": _canonical_decimal(self.company.overtime_rate),
            "doubletime_rate": _canonical_decimal(self.company.doubletime_rate),
            "sdl_contribution": self.company.sdl_contribution,
            "eligible_for_eti": self.company.eligible_for_eti,
            "pay_period_start": self.pay_period_start,
            "pay_period_end": self.pay_period_end,
            "pay_date": self.pay_date,
            "regular_hours": _canonical_decimal(self.regular_hours),
            "overtime_hours": _canonical_decimal(self.overtime_hours),
            "doubletime_hours": _canonical_decimal(self.doubletime_hours),
            "allowances": _canonical_decimal(self.allowances),
            "bonus": _canonical_decimal(self.bonus),
            "medical_aid_contribution": _canonical_decimal(self.medical_aid_contribution),
            "pension_fund_contribution": _canonical_decimal(self.pension_fund_contribution),
            "retirement_annuity_contribution": _canonical_decimal(
                self.retirement_annuity_contribution
            ),
            "medical_aid_post_tax": _canonical_decimal(self.medical_aid_post_tax),
            "other_deductions": _canonical_decimal(self.other_deductions),
            "employee_age": self.employee_age,
            "has_medical_aid": self.has_medical_aid,
            "medical_aid_dependants": self.medical_aid_dependants,
            "employment_month": self.employment_month,
        }


@dataclass(frozen=True)
class EmployerContributions:
    """Employer-side amounts. Informational, never deducted from the employee."""

    uif: Decimal
    sdl: Decimal
    eti: Decimal


@dataclass(frozen=True)
class PayrollBreakdown:
    """Derived values kept for display and audit."""

    annualized_gross_income: Decimal
    annualized_taxable_income: Decimal
    annual_paye_before_rebates: Decimal
    tax_rebates: Decimal
    medical_tax_credits: Decimal
    uif_employee_contribution: Decimal
    uif_employer_contribution: Decimal

    # Only set when they apply
    hourly_rate: Decimal | None = None
    regular_hours: Decimal | None = None
    overtime_hours: Decimal | None = None
    overtime_rate: Decimal | None = None
    doubletime_hours: Decimal | None = None
    doubletime_rate: Decimal | None = None


@dataclass(frozen=True)
class PayrollCalculation:
    """Fully itemized result of one payroll calculation."""

    # Earnings
    basic_salary: Decimal
    overtime: Decimal
    allowances: Decimal
    bonus: Decimal
    gross_pay: Decimal

    # Pre-tax deductions
    medical_aid_contribution: Decimal
    pension_fund_contribution: Decimal
    retirement_annuity_contribution: Decimal
    total_pre_tax_deductions: Decimal

    taxable_income: Decimal

    # Statutory deductions
    paye_tax: Decimal
    uif_employee: Decimal

    # Post-tax deductions
    medical_aid_post_tax: Decimal
    other_deductions: Decimal
    total_post_tax_deductions: Decimal

    total_deductions: Decimal
    net_pay: Decimal

    employer_contributions: EmployerContributions
    breakdown: PayrollBreakdown


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation.

    threshold is the cumulative tax owed on all income below this bracket.
    min_amount is the published lower bound (R237 101) and is informational:
    the bracket applies above the previous bracket's max_amount (R237 100).
    """

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.18 for 18%
    threshold: Decimal = ZERO


@dataclass(frozen=True)
class TaxRebates:
    """Annual rebates, cumulative by age."""

    primary: Decimal
    secondary: Decimal  # 65 and older
    tertiary: Decimal  # 75 and older


@dataclass(frozen=True)
class MedicalTaxCredits:
    """Monthly medical scheme fees tax credits."""

    main_member: Decimal  # also applies to the first dependant
    dependant: Decimal  # each additional dependant


@dataclass(frozen=True)
class TaxTables:
    """Income tax tables for one tax year."""

    tax_year: str
    brackets: tuple[TaxBracket, ...]
    rebates: TaxRebates
    medical_credits: MedicalTaxCredits


@dataclass(frozen=True)
class PayeBreakdown:
    """Intermediate PAYE values. Annual amounts unless noted."""

    annual_taxable_income: Decimal
    tax_before_rebates: Decimal
    rebates: Decimal
    medical_credits: Decimal
    tax_after_credits: Decimal
    period_tax: Decimal  # per pay period


@dataclass
class LineCandidate:
    """A payslip line item before persistence."""

    line_type: LineType
    code: str
    amount: Decimal  # Final amount (signed per conventions)
    description: str | None = None

    # Quantity/rate (for hourly earnings)
    quantity: Decimal | None = None
    rate: Decimal | None = None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "line_type": self.line_type.value,
            "code": self.code,
            "quantity": str(self.quantity) if self.quantity is not None else None,
            "rate": str(self.rate) if self.rate is not None else None,
            "amount": str(self.amount),
        }


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


def _canonical_decimal(value: Number | None) -> str | None:
    """Numerically equal values (160, 160.0, Decimal("160.00")) hash the same."""
    if value is None:
        return None
    return str(to_decimal(value).normalize())
