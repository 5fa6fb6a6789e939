"""Payslip line item builder with idempotent hashing."""

from __future__ import annotations

import hashlib
import json
from decimal import ROUND_HALF_UP, Decimal

from za_payroll.calculators.types import LineCandidate, LineType, PayrollCalculation


class LineItemBuilder:
    """Builds itemized payslip lines from a payroll calculation.

    Sign conventions:
    - EARNING: positive (negative only for negative adjustments)
    - DEDUCTION (employee): negative
    - TAX (employee): negative
    - EMPLOYER_TAX: positive, not part of net pay
    - ROUNDING: can be positive or negative

    Rounding:
    - Calculations are exact; lines are rounded to cents
    - Explicit rounding line if the rounded lines drift from rounded net pay
    """

    OUTPUT_PRECISION = Decimal("0.01")

    EMPLOYEE_LINE_TYPES = frozenset(
        {LineType.EARNING, LineType.DEDUCTION, LineType.TAX, LineType.ROUNDING}
    )

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def compute_line_hash(line: LineCandidate) -> str:
        """Compute deterministic hash for a line item."""
        canonical = line.to_canonical_dict()
        json_str = json.dumps(canonical, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    @staticmethod
    def create_earning_line(
        code: str,
        amount: Decimal,
        description: str | None = None,
        quantity: Decimal | None = None,
        rate: Decimal | None = None,
    ) -> LineCandidate:
        """Create an earning line. Negative adjustments keep their sign."""
        return LineCandidate(
            line_type=LineType.EARNING,
            code=code,
            amount=LineItemBuilder.round_to_cents(amount),
            description=description,
            quantity=quantity,
            rate=LineItemBuilder.round_to_cents(rate) if rate is not None else None,
        )

    @staticmethod
    def create_deduction_line(
        code: str,
        amount: Decimal,
        description: str | None = None,
    ) -> LineCandidate:
        """Create an employee deduction line (amount negated)."""
        return LineCandidate(
            line_type=LineType.DEDUCTION,
            code=code,
            amount=-LineItemBuilder.round_to_cents(amount),
            description=description,
        )

    @staticmethod
    def create_tax_line(
        code: str,
        amount: Decimal,
        description: str | None = None,
    ) -> LineCandidate:
        """Create an employee tax line (amount negated)."""
        return LineCandidate(
            line_type=LineType.TAX,
            code=code,
            amount=-LineItemBuilder.round_to_cents(amount),
            description=description,
        )

    @staticmethod
    def create_employer_tax_line(
        code: str,
        amount: Decimal,
        description: str | None = None,
    ) -> LineCandidate:
        """Create an employer contribution line (positive amount).

        ETI is an incentive the employer claims back, reported here as a
        positive amount like the other employer lines.
        """
        return LineCandidate(
            line_type=LineType.EMPLOYER_TAX,
            code=code,
            amount=LineItemBuilder.round_to_cents(amount),
            description=description,
        )

    @staticmethod
    def create_rounding_line(amount: Decimal) -> LineCandidate:
        """Create a rounding adjustment line."""
        return LineCandidate(
            line_type=LineType.ROUNDING,
            code="ROUNDING",
            amount=LineItemBuilder.round_to_cents(amount),
            description="Rounding adjustment",
        )

    @staticmethod
    def calculate_net_from_lines(lines: list[LineCandidate]) -> Decimal:
        """Net pay from line items. Employer lines are excluded."""
        return sum(
            (line.amount for line in lines if line.line_type in LineItemBuilder.EMPLOYEE_LINE_TYPES),
            Decimal("0"),
        )

    @classmethod
    def build_payslip_lines(cls, calculation: PayrollCalculation) -> list[LineCandidate]:
        """Itemize a calculation into payslip lines.

        Zero amounts are left off, except basic salary and PAYE which always
        appear on a payslip.
        """
        breakdown = calculation.breakdown
        lines: list[LineCandidate] = [
            cls.create_earning_line(
                "BASIC",
                calculation.basic_salary,
                "Basic salary",
                quantity=breakdown.regular_hours,
                rate=breakdown.hourly_rate,
            )
        ]

        if calculation.overtime:
            lines.append(cls.create_earning_line("OVERTIME", calculation.overtime, "Overtime"))
        if calculation.allowances:
            lines.append(cls.create_earning_line("ALLOWANCES", calculation.allowances, "Allowances"))
        if calculation.bonus:
            lines.append(cls.create_earning_line("BONUS", calculation.bonus, "Bonus"))

        pre_tax = (
            ("MEDICAL_AID", calculation.medical_aid_contribution, "Medical aid"),
            ("PENSION_FUND", calculation.pension_fund_contribution, "Pension fund"),
            (
                "RETIREMENT_ANNUITY",
                calculation.retirement_annuity_contribution,
                "Retirement annuity",
            ),
        )
        for code, amount, description in pre_tax:
            if amount:
                lines.append(cls.create_deduction_line(code, amount, description))

        lines.append(cls.create_tax_line("PAYE", calculation.paye_tax, "PAYE"))
        if calculation.uif_employee:
            lines.append(cls.create_tax_line("UIF", calculation.uif_employee, "UIF (employee)"))

        post_tax = (
            ("MEDICAL_AID_POST_TAX", calculation.medical_aid_post_tax, "Medical aid (post-tax)"),
            ("OTHER", calculation.other_deductions, "Other deductions"),
        )
        for code, amount, description in post_tax:
            if amount:
                lines.append(cls.create_deduction_line(code, amount, description))

        # Penny drift between the rounded lines and the rounded net pay
        drift = cls.round_to_cents(calculation.net_pay) - cls.calculate_net_from_lines(lines)
        if drift:
            lines.append(cls.create_rounding_line(drift))

        employer = calculation.employer_contributions
        employer_lines = (
            ("UIF_EMPLOYER", employer.uif, "UIF (employer)"),
            ("SDL", employer.sdl, "Skills Development Levy"),
            ("ETI", employer.eti, "Employment Tax Incentive"),
        )
        for code, amount, description in employer_lines:
            if amount:
                lines.append(cls.create_employer_tax_line(code, amount, description))

        return lines
