"""Statutory calculations: PAYE, UIF, SDL and ETI.

PAYE follows the SARS annual tables: tax is worked out on annualized taxable
income, reduced by age rebates and medical scheme fees tax credits, floored
at zero and then spread back over the pay periods in a year.

Tax tables are passed in (defaulting to 2024/2025) and never mutated.
"""

from __future__ import annotations

from bisect import bisect_left
from decimal import Decimal

from za_payroll.calculators.rate_resolver import periods_per_year
from za_payroll.calculators.tax_tables import (
    ETI_FIRST_YEAR_PERCENTAGE,
    ETI_FULL_INCENTIVE_FROM,
    ETI_MAX_AGE,
    ETI_MAX_MONTHLY,
    ETI_MAX_QUALIFYING_MONTHS,
    ETI_MAX_SALARY,
    ETI_MIN_AGE,
    ETI_SECOND_YEAR_FACTOR,
    ETI_TAPER_FROM,
    ETI_TAPER_RATE,
    SA_TAX_TABLES_2024,
    SDL_RATE,
    SECONDARY_REBATE_AGE,
    TERTIARY_REBATE_AGE,
    UIF_BI_WEEKS_PER_MONTH,
    UIF_EMPLOYEE_RATE,
    UIF_MAX_MONTHLY_CONTRIBUTION,
    UIF_WEEKS_PER_MONTH,
)
from za_payroll.calculators.types import (
    ZERO,
    Number,
    PayeBreakdown,
    PayFrequency,
    TaxBracket,
    TaxTables,
    to_decimal,
)


def calculate_bracket_tax(
    annual_taxable_income: Number,
    brackets: tuple[TaxBracket, ...] = SA_TAX_TABLES_2024.brackets,
) -> Decimal:
    """Annual tax before rebates using progressive brackets.

    Only the highest bracket the income reaches is evaluated: its threshold
    already holds the tax on everything below it. A bracket's lower edge is
    the previous bracket's upper limit, so R300 000 is taxed as
    42 678 + 26% of the amount above R237 100.
    """
    income = to_decimal(annual_taxable_income)
    if not brackets:
        return ZERO

    lower_edges = [ZERO] + [b.max_amount for b in brackets[:-1]]
    index = bisect_left(lower_edges, income) - 1
    if index < 0:
        return ZERO

    bracket = brackets[index]
    lower = lower_edges[index]
    taxable_in_bracket = income - lower
    if bracket.max_amount is not None:
        taxable_in_bracket = min(taxable_in_bracket, bracket.max_amount - lower)

    return bracket.threshold + taxable_in_bracket * bracket.rate


def calculate_tax_rebates(
    employee_age: int | None = None,
    tables: TaxTables = SA_TAX_TABLES_2024,
) -> Decimal:
    """Annual rebates. Primary always, secondary at 65+, tertiary at 75+."""
    rebates = tables.rebates
    total = rebates.primary
    if employee_age is not None and employee_age >= SECONDARY_REBATE_AGE:
        total += rebates.secondary
    if employee_age is not None and employee_age >= TERTIARY_REBATE_AGE:
        total += rebates.tertiary
    return total


def calculate_medical_tax_credits(
    has_medical_aid: bool = False,
    medical_aid_dependants: int = 0,
    tables: TaxTables = SA_TAX_TABLES_2024,
) -> Decimal:
    """Monthly medical scheme fees tax credit.

    The main member and the first dependant each get the main member credit;
    every further dependant gets the lower dependant credit.
    """
    if not has_medical_aid:
        return ZERO

    credits = tables.medical_credits
    monthly = credits.main_member
    if medical_aid_dependants > 0:
        monthly += credits.main_member
        if medical_aid_dependants > 1:
            monthly += (medical_aid_dependants - 1) * credits.dependant
    return monthly


def calculate_paye_breakdown(
    annual_taxable_income: Number,
    pay_frequency: PayFrequency | str = PayFrequency.MONTHLY,
    employee_age: int | None = None,
    has_medical_aid: bool = False,
    medical_aid_dependants: int = 0,
    tables: TaxTables = SA_TAX_TABLES_2024,
) -> PayeBreakdown:
    """Calculate PAYE and keep every intermediate value."""
    income = to_decimal(annual_taxable_income)

    tax_before_rebates = calculate_bracket_tax(income, tables.brackets)
    rebates = calculate_tax_rebates(employee_age, tables)
    annual_medical_credits = (
        calculate_medical_tax_credits(has_medical_aid, medical_aid_dependants, tables) * 12
    )

    # Never negative, even when rebates and credits exceed the bracket tax
    tax_after_credits = max(ZERO, tax_before_rebates - rebates - annual_medical_credits)

    return PayeBreakdown(
        annual_taxable_income=income,
        tax_before_rebates=tax_before_rebates,
        rebates=rebates,
        medical_credits=annual_medical_credits,
        tax_after_credits=tax_after_credits,
        period_tax=tax_after_credits / periods_per_year(pay_frequency),
    )


def calculate_paye(
    annual_taxable_income: Number,
    pay_frequency: PayFrequency | str = PayFrequency.MONTHLY,
    employee_age: int | None = None,
    has_medical_aid: bool = False,
    medical_aid_dependants: int = 0,
    tables: TaxTables = SA_TAX_TABLES_2024,
) -> Decimal:
    """Calculate PAYE for one pay period.

    Args:
        annual_taxable_income: Taxable income annualized from the period amount
        pay_frequency: Frequency the annual liability is spread over
        employee_age: Age for the secondary/tertiary rebates, if known
        has_medical_aid: Whether the employee belongs to a medical scheme
        medical_aid_dependants: Dependants on the scheme

    Returns:
        The per-period PAYE liability, never negative
    """
    return calculate_paye_breakdown(
        annual_taxable_income,
        pay_frequency,
        employee_age,
        has_medical_aid,
        medical_aid_dependants,
        tables,
    ).period_tax


def calculate_uif(
    gross_pay: Number,
    pay_frequency: PayFrequency | str = PayFrequency.MONTHLY,
    rate: Number = UIF_EMPLOYEE_RATE,
) -> Decimal:
    """Calculate one party's UIF contribution (1% of gross, capped).

    The monthly cap is scaled down pro rata for weekly and bi-weekly pay.
    Pass UIF_EMPLOYER_RATE for the employer's share.
    """
    contribution = to_decimal(gross_pay) * to_decimal(rate)

    max_contribution = UIF_MAX_MONTHLY_CONTRIBUTION
    if pay_frequency == PayFrequency.WEEKLY:
        max_contribution = UIF_MAX_MONTHLY_CONTRIBUTION / UIF_WEEKS_PER_MONTH
    elif pay_frequency == PayFrequency.BI_WEEKLY:
        max_contribution = UIF_MAX_MONTHLY_CONTRIBUTION / UIF_BI_WEEKS_PER_MONTH

    return min(contribution, max_contribution)


def calculate_sdl(gross_pay: Number, subject_to_sdl: bool) -> Decimal:
    """Skills Development Levy. The flag already encodes the R500k payroll test."""
    gross = to_decimal(gross_pay)
    if not subject_to_sdl or gross <= 0:
        return ZERO
    return gross * SDL_RATE


def calculate_eti(
    gross_pay: Number,
    employee_age: int | None,
    pay_frequency: PayFrequency | str = PayFrequency.MONTHLY,
    employment_month: int = 1,
) -> Decimal:
    """Employment Tax Incentive for one pay period.

    Uses the SARS schedule on monthly-equivalent remuneration:

        under R2 000         50% of remuneration
        R2 000 - R4 500      R1 000
        R4 500 - R6 500      R1 000 - 0.5 x (remuneration - R4 500)
        above R6 500         nil

    Months 13-24 of qualifying employment get half. Employees outside the
    18-29 age window, or past month 24, get nothing.
    """
    if employee_age is None or not ETI_MIN_AGE <= employee_age <= ETI_MAX_AGE:
        return ZERO
    if employment_month > ETI_MAX_QUALIFYING_MONTHS:
        return ZERO

    periods = periods_per_year(pay_frequency)
    monthly_remuneration = to_decimal(gross_pay) * periods / 12

    if monthly_remuneration <= 0 or monthly_remuneration > ETI_MAX_SALARY:
        return ZERO

    if monthly_remuneration < ETI_FULL_INCENTIVE_FROM:
        monthly_eti = monthly_remuneration * ETI_FIRST_YEAR_PERCENTAGE
    elif monthly_remuneration <= ETI_TAPER_FROM:
        monthly_eti = ETI_MAX_MONTHLY
    else:
        monthly_eti = ETI_MAX_MONTHLY - ETI_TAPER_RATE * (monthly_remuneration - ETI_TAPER_FROM)

    if employment_month > 12:
        monthly_eti *= ETI_SECOND_YEAR_FACTOR

    monthly_eti = min(monthly_eti, ETI_MAX_MONTHLY)
    return monthly_eti * 12 / periods
