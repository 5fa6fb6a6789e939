"""South African statutory rate tables.

All tables are module-level constants built from frozen dataclasses and
tuples; nothing here is mutated at runtime.
"""

from __future__ import annotations

from decimal import Decimal

from za_payroll.calculators.types import (
    MedicalTaxCredits,
    TaxBracket,
    TaxRebates,
    TaxTables,
)


class TaxYearNotFoundError(Exception):
    """Raised when no tax tables are configured for a tax year."""

    def __init__(self, tax_year: str):
        self.tax_year = tax_year
        super().__init__(f"No tax tables configured for tax year '{tax_year}'")


# PAYE brackets for 2024/2025 (annual, ZAR)
SA_TAX_BRACKETS_2024: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("237100"), Decimal("0.18"), Decimal("0")),
    TaxBracket(Decimal("237101"), Decimal("370500"), Decimal("0.26"), Decimal("42678")),
    TaxBracket(Decimal("370501"), Decimal("512800"), Decimal("0.31"), Decimal("77362")),
    TaxBracket(Decimal("512801"), Decimal("673000"), Decimal("0.36"), Decimal("121475")),
    TaxBracket(Decimal("673001"), Decimal("857900"), Decimal("0.39"), Decimal("179147")),
    TaxBracket(Decimal("857901"), Decimal("1817000"), Decimal("0.41"), Decimal("251258")),
    TaxBracket(Decimal("1817001"), None, Decimal("0.45"), Decimal("644489")),
)

# Annual rebates for 2024/2025
SA_TAX_REBATES_2024 = TaxRebates(
    primary=Decimal("17235"),
    secondary=Decimal("9444"),
    tertiary=Decimal("3145"),
)

# Monthly medical scheme fees tax credits for 2024/2025
SA_MEDICAL_TAX_CREDITS_2024 = MedicalTaxCredits(
    main_member=Decimal("364"),
    dependant=Decimal("246"),
)

SA_TAX_TABLES_2024 = TaxTables(
    tax_year="2024/2025",
    brackets=SA_TAX_BRACKETS_2024,
    rebates=SA_TAX_REBATES_2024,
    medical_credits=SA_MEDICAL_TAX_CREDITS_2024,
)

TAX_TABLES_BY_YEAR: dict[str, TaxTables] = {
    SA_TAX_TABLES_2024.tax_year: SA_TAX_TABLES_2024,
}

# Age thresholds for the secondary and tertiary rebates
SECONDARY_REBATE_AGE = 65
TERTIARY_REBATE_AGE = 75

# UIF: 1% employee + 1% employer
UIF_EMPLOYEE_RATE = Decimal("0.01")
UIF_EMPLOYER_RATE = Decimal("0.01")
UIF_MAX_MONTHLY_CONTRIBUTION = Decimal("177.12")  # per party
UIF_WEEKS_PER_MONTH = Decimal("4.33")
UIF_BI_WEEKS_PER_MONTH = Decimal("2.17")

# SDL: 1% of gross, employer only. Liability (payroll above R500k a year)
# is decided by the company and passed in as a flag
SDL_RATE = Decimal("0.01")

# Employment Tax Incentive (from 1 March 2022, monthly amounts)
ETI_MAX_MONTHLY = Decimal("1000")
ETI_MIN_AGE = 18
ETI_MAX_AGE = 29
ETI_FULL_INCENTIVE_FROM = Decimal("2000")  # flat incentive starts here
ETI_TAPER_FROM = Decimal("4500")  # incentive starts declining here
ETI_MAX_SALARY = Decimal("6500")  # no incentive above this
ETI_FIRST_YEAR_PERCENTAGE = Decimal("0.5")
ETI_TAPER_RATE = Decimal("0.5")
ETI_SECOND_YEAR_FACTOR = Decimal("0.5")  # months 13-24 get half
ETI_MAX_QUALIFYING_MONTHS = 24

# Working time used to derive an hourly rate from a salary
HOURS_PER_DAY = 8
DAYS_PER_WEEK = 5
WEEKS_PER_YEAR = 52
HOURS_PER_YEAR = HOURS_PER_DAY * DAYS_PER_WEEK * WEEKS_PER_YEAR

DEFAULT_OVERTIME_RATE = Decimal("1.5")
DEFAULT_DOUBLETIME_RATE = Decimal("2.0")


def get_tax_tables(tax_year: str) -> TaxTables:
    """Get the tax tables for a tax year such as "2024/2025".

    Raises:
        TaxYearNotFoundError: If the year has no tables
    """
    try:
        return TAX_TABLES_BY_YEAR[tax_year]
    except KeyError:
        raise TaxYearNotFoundError(tax_year) from None
