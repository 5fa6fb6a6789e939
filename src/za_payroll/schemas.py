"""Pydantic schemas for the payroll engine's input and output contracts.

The engine itself never validates. Callers feed raw payroll data (camelCase,
as stored by the company and employee directories) through
parse_payroll_request, and persist results with PayslipRecord.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from za_payroll.calculators.types import (
    CompanyRatePolicy,
    PayFrequency,
    PayrollCalculation,
    PayrollInput,
    RateProfile,
    RateType,
)

CENTS = Decimal("0.01")


class InvalidPayrollInputError(ValueError):
    """Raised when raw payroll data fails validation."""

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        fields = sorted({".".join(str(part) for part in e.get("loc", ())) for e in errors})
        super().__init__(f"Invalid payroll input: {', '.join(fields) or 'unknown field'}")


# ============================================================================
# Input schemas
# ============================================================================


class EmployeeRateSchema(BaseModel):
    """Rate fields from the employee directory."""

    model_config = ConfigDict(populate_by_name=True)

    rate: Decimal = Field(ge=0)
    rate_type: RateType = Field(RateType.SALARY, alias="rateType")
    pay_frequency: PayFrequency = Field(PayFrequency.MONTHLY, alias="payFrequency")


class CompanyPolicySchema(BaseModel):
    """Rate and compliance fields from the company directory."""

    model_config = ConfigDict(populate_by_name=True)

    overtime_rate: Decimal | None = Field(None, ge=0, alias="overtimeRate")
    doubletime_rate: Decimal | None = Field(None, ge=0, alias="doubletimeRate")
    sdl_contribution: bool = Field(False, alias="sdlContribution")
    eligible_for_eti: bool = Field(False, alias="eligibleForETI")


class PayrollRequest(BaseModel):
    """Schema for one payroll calculation request."""

    model_config = ConfigDict(populate_by_name=True)

    employee: EmployeeRateSchema
    company: CompanyPolicySchema = Field(default_factory=CompanyPolicySchema)

    pay_period_start: str = Field("", alias="payPeriodStart")
    pay_period_end: str = Field("", alias="payPeriodEnd")
    pay_date: str = Field("", alias="payDate")

    regular_hours: Decimal = Field(Decimal("0"), ge=0, alias="regularHours")
    overtime_hours: Decimal = Field(Decimal("0"), ge=0, alias="overtimeHours")
    doubletime_hours: Decimal = Field(Decimal("0"), ge=0, alias="doubletimeHours")
    allowances: Decimal = Field(Decimal("0"), ge=0)
    bonus: Decimal = Field(Decimal("0"), ge=0)

    medical_aid_contribution: Decimal = Field(Decimal("0"), ge=0, alias="medicalAidContribution")
    pension_fund_contribution: Decimal = Field(Decimal("0"), ge=0, alias="pensionFundContribution")
    retirement_annuity_contribution: Decimal = Field(
        Decimal("0"), ge=0, alias="retirementAnnuityContribution"
    )

    medical_aid_post_tax: Decimal = Field(Decimal("0"), ge=0, alias="medicalAidPostTax")
    other_deductions: Decimal = Field(Decimal("0"), ge=0, alias="otherDeductions")

    employee_age: int | None = Field(None, ge=0, alias="employeeAge")
    has_medical_aid: bool = Field(False, alias="hasMedicalAid")
    medical_aid_dependants: int = Field(0, ge=0, alias="medicalAidDependants")
    employment_month: int = Field(1, ge=1, alias="employmentMonth")

    def to_payroll_input(self) -> PayrollInput:
        """Convert to the engine's input value object."""
        return PayrollInput(
            employee=RateProfile(
                rate=self.employee.rate,
                rate_type=self.employee.rate_type,
                pay_frequency=self.employee.pay_frequency,
            ),
            company=CompanyRatePolicy(
                overtime_rate=self.company.overtime_rate,
                doubletime_rate=self.company.doubletime_rate,
                sdl_contribution=self.company.sdl_contribution,
                eligible_for_eti=self.company.eligible_for_eti,
            ),
            pay_period_start=self.pay_period_start,
            pay_period_end=self.pay_period_end,
            pay_date=self.pay_date,
            regular_hours=self.regular_hours,
            overtime_hours=self.overtime_hours,
            doubletime_hours=self.doubletime_hours,
            allowances=self.allowances,
            bonus=self.bonus,
            medical_aid_contribution=self.medical_aid_contribution,
            pension_fund_contribution=self.pension_fund_contribution,
            retirement_annuity_contribution=self.retirement_annuity_contribution,
            medical_aid_post_tax=self.medical_aid_post_tax,
            other_deductions=self.other_deductions,
            employee_age=self.employee_age,
            has_medical_aid=self.has_medical_aid,
            medical_aid_dependants=self.medical_aid_dependants,
            employment_month=self.employment_month,
        )


def parse_payroll_request(data: dict[str, Any]) -> PayrollInput:
    """Validate raw payroll data and build a PayrollInput.

    Raises:
        InvalidPayrollInputError: If any field is missing, negative or has an
            unknown rate type or pay frequency
    """
    try:
        request = PayrollRequest.model_validate(data)
    except ValidationError as exc:
        raise InvalidPayrollInputError(exc.errors()) from exc
    return request.to_payroll_input()


# ============================================================================
# Output schemas
# ============================================================================


class PayslipRecord(BaseModel):
    """Schema for a persisted payslip row.

    Amounts are rounded to cents. Totals are summed from the rounded amounts
    so the stored row always balances.
    """

    model_config = ConfigDict(populate_by_name=True)

    employee_id: str | None = Field(None, alias="employeeId")
    company_id: str | None = Field(None, alias="companyId")
    pay_period_start: str = Field(alias="payPeriodStart")
    pay_period_end: str = Field(alias="payPeriodEnd")
    pay_date: str = Field(alias="payDate")

    # Earnings
    basic_salary: Decimal = Field(alias="basicSalary")
    overtime: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    bonus: Decimal = Decimal("0")
    gross_pay: Decimal = Field(alias="grossPay")

    # Deductions
    paye_tax: Decimal = Field(Decimal("0"), alias="payeTax")
    uif: Decimal = Decimal("0")
    medical_aid: Decimal = Field(Decimal("0"), alias="medicalAid")
    pension_fund: Decimal = Field(Decimal("0"), alias="pensionFund")
    other_deductions: Decimal = Field(Decimal("0"), alias="otherDeductions")
    total_deductions: Decimal = Field(alias="totalDeductions")

    net_pay: Decimal = Field(alias="netPay")
    status: str = "DRAFT"

    @classmethod
    def from_calculation(
        cls,
        calculation: PayrollCalculation,
        payroll_input: PayrollInput,
        employee_id: str | None = None,
        company_id: str | None = None,
    ) -> PayslipRecord:
        """Build the row for a calculation.

        Pre- and post-tax medical aid share the medicalAid column; pension
        fund and retirement annuity share pensionFund.
        """
        earnings = {
            "basic_salary": _round(calculation.basic_salary),
            "overtime": _round(calculation.overtime),
            "allowances": _round(calculation.allowances),
            "bonus": _round(calculation.bonus),
        }
        deductions = {
            "paye_tax": _round(calculation.paye_tax),
            "uif": _round(calculation.uif_employee),
            "medical_aid": _round(
                calculation.medical_aid_contribution + calculation.medical_aid_post_tax
            ),
            "pension_fund": _round(
                calculation.pension_fund_contribution
                + calculation.retirement_annuity_contribution
            ),
            "other_deductions": _round(calculation.other_deductions),
        }
        gross_pay = sum(earnings.values(), Decimal("0"))
        total_deductions = sum(deductions.values(), Decimal("0"))

        return cls(
            employee_id=employee_id,
            company_id=company_id,
            pay_period_start=payroll_input.pay_period_start,
            pay_period_end=payroll_input.pay_period_end,
            pay_date=payroll_input.pay_date,
            gross_pay=gross_pay,
            total_deductions=total_deductions,
            net_pay=gross_pay - total_deductions,
            **earnings,
            **deductions,
        )


def _round(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
