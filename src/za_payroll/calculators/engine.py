"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from za_payroll.calculators.rate_resolver import (
    calculate_annual_taxable_income,
    calculate_gross_pay,
    calculate_hourly_rate,
    calculate_overtime_pay,
)
from za_payroll.calculators.tax_calculator import (
    calculate_eti,
    calculate_paye_breakdown,
    calculate_sdl,
    calculate_uif,
)
from za_payroll.calculators.tax_tables import (
    DEFAULT_DOUBLETIME_RATE,
    DEFAULT_OVERTIME_RATE,
    SA_TAX_TABLES_2024,
    UIF_EMPLOYER_RATE,
    get_tax_tables,
)
from za_payroll.calculators.types import (
    EmployerContributions,
    Number,
    PayrollBreakdown,
    PayrollCalculation,
    PayrollInput,
    RateType,
    TaxTables,
    to_decimal,
)
from za_payroll.config import Settings, get_settings

logger = logging.getLogger(__name__)


def calculate_total_deductions(
    paye_tax: Number,
    uif: Number,
    medical_aid: Number = 0,
    pension_fund: Number = 0,
    other_deductions: Number = 0,
) -> Decimal:
    """Sum employee deductions."""
    return (
        to_decimal(paye_tax)
        + to_decimal(uif)
        + to_decimal(medical_aid)
        + to_decimal(pension_fund)
        + to_decimal(other_deductions)
    )


def calculate_payroll(
    payroll_input: PayrollInput,
    tables: TaxTables = SA_TAX_TABLES_2024,
) -> PayrollCalculation:
    """Calculate a complete payslip for one employee and one pay period.

    Calculation pipeline (stable order):
    1) Hourly rate from the employee's rate profile
    2) Basic salary (salary as configured, otherwise hourly rate x regular hours)
    3) Overtime at the company's multipliers
    4) Gross pay
    5) Pre-tax deductions and taxable income
    6) PAYE on annualized taxable income
    7) Employee UIF on gross pay
    8) Post-tax deductions and total deductions
    9) Net pay
    10) Employer UIF, SDL and ETI (informational)
    11) Breakdown diagnostics

    Nothing is rounded here and no input is validated; amounts are exact
    Decimal arithmetic so the gross/net identities hold without tolerance.
    """
    employee = payroll_input.employee
    company = payroll_input.company
    pay_frequency = employee.pay_frequency
    is_salary = employee.rate_type == RateType.SALARY
    is_hourly = employee.rate_type == RateType.HOURLY

    # 0) Normalize inputs
    rate = to_decimal(employee.rate)
    regular_hours = to_decimal(payroll_input.regular_hours)
    overtime_hours = to_decimal(payroll_input.overtime_hours)
    doubletime_hours = to_decimal(payroll_input.doubletime_hours)
    allowances = to_decimal(payroll_input.allowances)
    bonus = to_decimal(payroll_input.bonus)
    medical_aid_contribution = to_decimal(payroll_input.medical_aid_contribution)
    pension_fund_contribution = to_decimal(payroll_input.pension_fund_contribution)
    retirement_annuity_contribution = to_decimal(payroll_input.retirement_annuity_contribution)
    medical_aid_post_tax = to_decimal(payroll_input.medical_aid_post_tax)
    other_deductions = to_decimal(payroll_input.other_deductions)
    overtime_rate = (
        to_decimal(company.overtime_rate)
        if company.overtime_rate is not None
        else DEFAULT_OVERTIME_RATE
    )
    doubletime_rate = (
        to_decimal(company.doubletime_rate)
        if company.doubletime_rate is not None
        else DEFAULT_DOUBLETIME_RATE
    )

    # 1-4) Earnings
    hourly_rate = calculate_hourly_rate(rate, employee.rate_type, pay_frequency)
    # Anything that is not a salary is paid by the hour
    basic_salary = rate if is_salary else hourly_rate * regular_hours
    overtime = calculate_overtime_pay(
        hourly_rate, overtime_hours, doubletime_hours, overtime_rate, doubletime_rate
    )
    gross_pay = calculate_gross_pay(basic_salary, overtime, allowances, bonus)

    # 5) Pre-tax deductions
    total_pre_tax_deductions = (
        medical_aid_contribution + pension_fund_contribution + retirement_annuity_contribution
    )
    taxable_income = gross_pay - total_pre_tax_deductions

    # 6) PAYE
    annualized_taxable_income = calculate_annual_taxable_income(taxable_income, pay_frequency)
    paye = calculate_paye_breakdown(
        annualized_taxable_income,
        pay_frequency,
        payroll_input.employee_age,
        payroll_input.has_medical_aid,
        payroll_input.medical_aid_dependants,
        tables,
    )
    paye_tax = paye.period_tax

    # 7) UIF is gross-based, not taxable-income based
    uif_employee = calculate_uif(gross_pay, pay_frequency)

    # 8-9) Post-tax deductions and net
    total_post_tax_deductions = medical_aid_post_tax + other_deductions
    total_deductions = (
        total_pre_tax_deductions + paye_tax + uif_employee + total_post_tax_deductions
    )
    net_pay = gross_pay - total_deductions

    # 10) Employer contributions
    uif_employer = calculate_uif(gross_pay, pay_frequency, UIF_EMPLOYER_RATE)
    sdl = calculate_sdl(gross_pay, company.sdl_contribution)
    eti = (
        calculate_eti(
            gross_pay,
            payroll_input.employee_age,
            pay_frequency,
            payroll_input.employment_month,
        )
        if company.eligible_for_eti
        else Decimal("0")
    )

    # 11) Breakdown
    breakdown = PayrollBreakdown(
        annualized_gross_income=calculate_annual_taxable_income(gross_pay, pay_frequency),
        annualized_taxable_income=annualized_taxable_income,
        annual_paye_before_rebates=paye.tax_before_rebates,
        tax_rebates=paye.rebates,
        medical_tax_credits=paye.medical_credits,
        uif_employee_contribution=uif_employee,
        uif_employer_contribution=uif_employer,
        hourly_rate=hourly_rate if is_hourly else None,
        regular_hours=regular_hours if is_hourly else None,
        overtime_hours=overtime_hours if overtime_hours > 0 else None,
        overtime_rate=overtime_rate if overtime_hours > 0 else None,
        doubletime_hours=doubletime_hours if doubletime_hours > 0 else None,
        doubletime_rate=doubletime_rate if doubletime_hours > 0 else None,
    )

    logger.debug(
        "Calculated payroll for period %s-%s: gross=%s paye=%s uif=%s net=%s",
        payroll_input.pay_period_start,
        payroll_input.pay_period_end,
        gross_pay,
        paye_tax,
        uif_employee,
        net_pay,
    )

    return PayrollCalculation(
        basic_salary=basic_salary,
        overtime=overtime,
        allowances=allowances,
        bonus=bonus,
        gross_pay=gross_pay,
        medical_aid_contribution=medical_aid_contribution,
        pension_fund_contribution=pension_fund_contribution,
        retirement_annuity_contribution=retirement_annuity_contribution,
        total_pre_tax_deductions=total_pre_tax_deductions,
        taxable_income=taxable_income,
        paye_tax=paye_tax,
        uif_employee=uif_employee,
        medical_aid_post_tax=medical_aid_post_tax,
        other_deductions=other_deductions,
        total_post_tax_deductions=total_post_tax_deductions,
        total_deductions=total_deductions,
        net_pay=net_pay,
        employer_contributions=EmployerContributions(uif=uif_employer, sdl=sdl, eti=eti),
        breakdown=breakdown,
    )


@dataclass(frozen=True)
class CalculationResult:
    """A payroll calculation stamped for storage."""

    calculation_id: UUID
    calculation: PayrollCalculation
    inputs_fingerprint: str
    engine_version: str
    tax_year: str


class PayrollEngine:
    """Payroll engine bound to one tax year's tables.

    The calculation itself is the pure calculate_payroll function; the engine
    adds a deterministic calculation ID so the payslip store can detect a
    repeated calculation of the same inputs.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.tables = get_tax_tables(self.settings.tax_year)

    def calculate(self, payroll_input: PayrollInput) -> CalculationResult:
        """Calculate one payslip and stamp it with its calculation ID."""
        calculation = calculate_payroll(payroll_input, self.tables)
        inputs_fingerprint = self._compute_inputs_fingerprint(payroll_input)
        return CalculationResult(
            calculation_id=self._generate_calculation_id(inputs_fingerprint),
            calculation=calculation,
            inputs_fingerprint=inputs_fingerprint,
            engine_version=self.settings.engine_version,
            tax_year=self.tables.tax_year,
        )

    def _generate_calculation_id(self, inputs_fingerprint: str) -> UUID:
        """Generate deterministic calculation ID."""
        data = {
            "engine_version": self.settings.engine_version,
            "tax_year": self.tables.tax_year,
            "inputs_fingerprint": inputs_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])

    def _compute_inputs_fingerprint(self, payroll_input: PayrollInput) -> str:
        """Compute fingerprint of all inputs used in calculation."""
        json_str = json.dumps(payroll_input.to_canonical_dict(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]
