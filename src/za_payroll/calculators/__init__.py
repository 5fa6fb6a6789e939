"""Payroll calculation engine."""

from za_payroll.calculators.engine import (
    CalculationResult,
    PayrollEngine,
    calculate_payroll,
    calculate_total_deductions,
)
from za_payroll.calculators.line_builder import LineItemBuilder
from za_payroll.calculators.rate_resolver import (
    calculate_annual_taxable_income,
    calculate_gross_pay,
    calculate_hourly_rate,
    calculate_overtime_pay,
    periods_per_year,
)
from za_payroll.calculators.tax_calculator import (
    calculate_eti,
    calculate_medical_tax_credits,
    calculate_paye,
    calculate_paye_breakdown,
    calculate_sdl,
    calculate_tax_rebates,
    calculate_uif,
)
from za_payroll.calculators.tax_tables import TaxYearNotFoundError, get_tax_tables

__all__ = [
    "CalculationResult",
    "LineItemBuilder",
    "PayrollEngine",
    "TaxYearNotFoundError",
    "calculate_annual_taxable_income",
    "calculate_eti",
    "calculate_gross_pay",
    "calculate_hourly_rate",
    "calculate_medical_tax_credits",
    "calculate_overtime_pay",
    "calculate_paye",
    "calculate_paye_breakdown",
    "calculate_payroll",
    "calculate_sdl",
    "calculate_tax_rebates",
    "calculate_total_deductions",
    "calculate_uif",
    "get_tax_tables",
    "periods_per_year",
]
