"""Pytest fixtures for payroll engine tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from za_payroll.calculators.types import (
    CompanyRatePolicy,
    PayFrequency,
    PayrollInput,
    RateProfile,
    RateType,
)
from za_payroll.config import Settings


@pytest.fixture
def test_company() -> CompanyRatePolicy:
    """Company with standard overtime multipliers and no SDL/ETI."""
    return CompanyRatePolicy(
        overtime_rate=Decimal("1.5"),
        doubletime_rate=Decimal("2.0"),
        sdl_contribution=False,
        eligible_for_eti=False,
    )


@pytest.fixture
def salaried_employee() -> RateProfile:
    """R25,000 per month salaried employee."""
    return RateProfile(
        rate=Decimal("25000"),
        rate_type=RateType.SALARY,
        pay_frequency=PayFrequency.MONTHLY,
    )


@pytest.fixture
def hourly_employee() -> RateProfile:
    """R150 per hour employee paid monthly."""
    return RateProfile(
        rate=Decimal("150"),
        rate_type=RateType.HOURLY,
        pay_frequency=PayFrequency.MONTHLY,
    )


@pytest.fixture
def salaried_input(salaried_employee, test_company) -> PayrollInput:
    """January payroll for the salaried employee with overtime, allowances and a bonus."""
    return PayrollInput(
        employee=salaried_employee,
        company=test_company,
        pay_period_start="2024-01-01",
        pay_period_end="2024-01-31",
        pay_date="2024-01-31",
        regular_hours=Decimal("160"),  # not used for salaried employees
        overtime_hours=Decimal("10"),
        allowances=Decimal("1000"),
        bonus=Decimal("2000"),
    )


@pytest.fixture
def hourly_input(hourly_employee, test_company) -> PayrollInput:
    """January payroll for the hourly employee: 160 regular hours, 8 overtime."""
    return PayrollInput(
        employee=hourly_employee,
        company=test_company,
        pay_period_start="2024-01-01",
        pay_period_end="2024-01-31",
        pay_date="2024-01-31",
        regular_hours=Decimal("160"),
        overtime_hours=Decimal("8"),
        allowances=Decimal("500"),
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings for the 2024/2025 tax year."""
    return Settings(engine_version="1.0.0", tax_year="2024/2025")
