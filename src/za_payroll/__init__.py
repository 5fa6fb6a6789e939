"""South African payroll calculation engine."""

from za_payroll.calculators import PayrollEngine, calculate_payroll
from za_payroll.calculators.types import (
    CompanyRatePolicy,
    PayFrequency,
    PayrollCalculation,
    PayrollInput,
    RateProfile,
    RateType,
)

__all__ = [
    "CompanyRatePolicy",
    "PayFrequency",
    "PayrollCalculation",
    "PayrollEngine",
    "PayrollInput",
    "RateProfile",
    "RateType",
    "calculate_payroll",
]
