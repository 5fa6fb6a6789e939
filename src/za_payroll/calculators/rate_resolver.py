"""Pay rate resolution: hourly rates, overtime, gross pay and annualization."""

from __future__ import annotations

from decimal import Decimal

from za_payroll.calculators.tax_tables import (
    DEFAULT_DOUBLETIME_RATE,
    DEFAULT_OVERTIME_RATE,
    HOURS_PER_YEAR,
)
from za_payroll.calculators.types import Number, PayFrequency, RateType, to_decimal


def periods_per_year(pay_frequency: PayFrequency | str) -> int:
    """Number of pay periods in a year. Unknown frequencies count as monthly."""
    if pay_frequency == PayFrequency.WEEKLY:
        return 52
    if pay_frequency == PayFrequency.BI_WEEKLY:
        return 26
    return 12


def calculate_hourly_rate(
    rate: Number,
    rate_type: RateType | str,
    pay_frequency: PayFrequency | str,
) -> Decimal:
    """Calculate the hourly rate for an employee.

    Hourly rates are returned unchanged. Salaries are annualized by pay
    frequency and spread over a 2080 hour work year (8h x 5d x 52w).
    """
    rate = to_decimal(rate)
    if rate_type == RateType.HOURLY:
        return rate

    annual_salary = rate * periods_per_year(pay_frequency)
    return annual_salary / HOURS_PER_YEAR


def calculate_overtime_pay(
    hourly_rate: Number,
    overtime_hours: Number = 0,
    doubletime_hours: Number = 0,
    overtime_rate: Number = DEFAULT_OVERTIME_RATE,
    doubletime_rate: Number = DEFAULT_DOUBLETIME_RATE,
) -> Decimal:
    """Calculate overtime plus double-time pay."""
    hourly_rate = to_decimal(hourly_rate)
    overtime_pay = hourly_rate * to_decimal(overtime_hours) * to_decimal(overtime_rate)
    doubletime_pay = hourly_rate * to_decimal(doubletime_hours) * to_decimal(doubletime_rate)
    return overtime_pay + doubletime_pay


def calculate_gross_pay(
    basic_salary: Number,
    overtime: Number,
    allowances: Number = 0,
    bonus: Number = 0,
) -> Decimal:
    """Calculate gross pay. No tax or deduction logic here."""
    return (
        to_decimal(basic_salary)
        + to_decimal(overtime)
        + to_decimal(allowances)
        + to_decimal(bonus)
    )


def calculate_annual_taxable_income(
    period_amount: Number,
    pay_frequency: PayFrequency | str,
) -> Decimal:
    """Annualize a single pay period's amount."""
    return to_decimal(period_amount) * periods_per_year(pay_frequency)
