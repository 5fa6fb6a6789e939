"""Unit tests for PAYE, UIF, SDL and ETI."""

from decimal import Decimal

import pytest

from za_payroll.calculators.tax_calculator import (
    calculate_bracket_tax,
    calculate_eti,
    calculate_medical_tax_credits,
    calculate_paye,
    calculate_paye_breakdown,
    calculate_sdl,
    calculate_tax_rebates,
    calculate_uif,
)
from za_payroll.calculators.tax_tables import (
    SA_TAX_BRACKETS_2024,
    SA_TAX_TABLES_2024,
    TaxYearNotFoundError,
    UIF_EMPLOYER_RATE,
    UIF_MAX_MONTHLY_CONTRIBUTION,
    get_tax_tables,
)
from za_payroll.calculators.types import PayFrequency, TaxBracket


class TestBracketTax:
    """Test progressive bracket tax before rebates."""

    def test_first_bracket(self):
        """18% of income in the first bracket."""
        assert calculate_bracket_tax(Decimal("100000")) == Decimal("18000")

    def test_second_bracket(self):
        """42 678 + 26% of the amount above R237 100."""
        assert calculate_bracket_tax(Decimal("300000")) == Decimal("59032")

    def test_top_bracket_has_no_upper_limit(self):
        """644 489 + 45% of the amount above R1 817 000."""
        assert calculate_bracket_tax(Decimal("2000000")) == Decimal("726839")

    @pytest.mark.parametrize(
        "income,expected",
        [
            (Decimal("237100"), Decimal("42678")),
            (Decimal("370500"), Decimal("77362")),
            (Decimal("512800"), Decimal("121475")),
            (Decimal("673000"), Decimal("179147")),
            (Decimal("857900"), Decimal("251258")),
            (Decimal("1817000"), Decimal("644489")),
        ],
    )
    def test_bracket_edges_match_next_threshold(self, income, expected):
        """Tax at each bracket's top equals the next bracket's threshold."""
        assert calculate_bracket_tax(income) == expected

    def test_zero_and_negative_income(self):
        assert calculate_bracket_tax(Decimal("0")) == 0
        assert calculate_bracket_tax(Decimal("-5000")) == 0

    def test_custom_brackets(self):
        brackets = (
            TaxBracket(Decimal("0"), Decimal("10000"), Decimal("0.10")),
            TaxBracket(Decimal("10001"), None, Decimal("0.20"), Decimal("1000")),
        )
        assert calculate_bracket_tax(Decimal("5000"), brackets) == Decimal("500")
        assert calculate_bracket_tax(Decimal("15000"), brackets) == Decimal("2000")

    def test_table_is_sorted(self):
        mins = [b.min_amount for b in SA_TAX_BRACKETS_2024]
        assert mins == sorted(mins)
        assert SA_TAX_BRACKETS_2024[-1].max_amount is None

    def test_published_lower_bounds_follow_previous_upper_limit(self):
        """R237 101 is the first rand above R237 100, taxed at the new rate."""
        for previous, bracket in zip(SA_TAX_BRACKETS_2024, SA_TAX_BRACKETS_2024[1:]):
            assert bracket.min_amount == previous.max_amount + 1

        assert calculate_bracket_tax(Decimal("237101")) == Decimal("42678.26")


class TestRebates:
    """Test age-based rebates."""

    @pytest.mark.parametrize(
        "age,expected",
        [
            (None, Decimal("17235")),
            (30, Decimal("17235")),
            (64, Decimal("17235")),
            (65, Decimal("26679")),
            (66, Decimal("26679")),
            (75, Decimal("29824")),
            (76, Decimal("29824")),
        ],
    )
    def test_rebate_tiers(self, age, expected):
        assert calculate_tax_rebates(age) == expected


class TestMedicalTaxCredits:
    """Test monthly medical scheme fees tax credits."""

    def test_no_medical_aid(self):
        """No credit without medical aid, regardless of dependants."""
        assert calculate_medical_tax_credits(False, 0) == 0
        assert calculate_medical_tax_credits(False, 3) == 0

    @pytest.mark.parametrize(
        "dependants,expected",
        [
            (0, Decimal("364")),
            (1, Decimal("728")),
            (2, Decimal("974")),
            (3, Decimal("1220")),
        ],
    )
    def test_credit_tiers(self, dependants, expected):
        assert calculate_medical_tax_credits(True, dependants) == expected


class TestPAYE:
    """Test per-period PAYE."""

    def test_salaried_scenario(self):
        """R300 000 a year with no age context gets the primary rebate only.

        (42 678 + 62 900 x 26% - 17 235) / 12
        """
        result = calculate_paye(Decimal("300000"), PayFrequency.MONTHLY)
        assert result == Decimal("41797") / 12

    def test_bracket_tax_before_rebates_scenario(self):
        """Bracket tax on R300 000 spread monthly is about R4 919.33."""
        breakdown = calculate_paye_breakdown(Decimal("300000"), "Monthly")
        assert abs(breakdown.tax_before_rebates / 12 - Decimal("4919.33")) <= Decimal("0.01")

    def test_weekly(self):
        result = calculate_paye(300000, "Weekly")
        assert result == Decimal("41797") / 52

    def test_bi_weekly(self):
        result = calculate_paye(300000, "Bi-weekly")
        assert result == Decimal("41797") / 26

    def test_unknown_frequency_defaults_to_monthly(self):
        assert calculate_paye(300000, "Daily") == calculate_paye(300000, "Monthly")

    def test_below_tax_threshold_is_zero(self):
        """R95 750 a year is fully covered by the primary rebate."""
        assert calculate_paye(Decimal("95750")) == 0
        assert calculate_paye(Decimal("50000")) == 0

    def test_never_negative(self):
        """Rebates and credits above the bracket tax floor at zero."""
        result = calculate_paye(
            Decimal("120000"),
            employee_age=80,
            has_medical_aid=True,
            medical_aid_dependants=4,
        )
        assert result == 0

        assert calculate_paye(Decimal("-10000")) == 0

    def test_age_rebates_reduce_tax(self):
        assert calculate_paye(300000, employee_age=66) == Decimal("32353") / 12
        assert calculate_paye(300000, employee_age=76) == Decimal("29208") / 12

    def test_medical_credits_reduce_tax(self):
        """One dependant: 728 x 12 = 8 736 annual credit."""
        result = calculate_paye(
            300000, "Monthly", has_medical_aid=True, medical_aid_dependants=1
        )
        assert result == Decimal("33061") / 12

    def test_dependants_ignored_without_medical_aid(self):
        assert calculate_paye(300000, medical_aid_dependants=3) == calculate_paye(300000)

    def test_monotonic_in_income(self):
        """More taxable income never means less PAYE."""
        previous = Decimal("0")
        for income in range(0, 2_500_000, 12_345):
            current = calculate_paye(income)
            assert current >= previous
            previous = current

    def test_breakdown_values(self):
        breakdown = calculate_paye_breakdown(
            Decimal("300000"),
            "Monthly",
            employee_age=70,
            has_medical_aid=True,
        )

        assert breakdown.annual_taxable_income == Decimal("300000")
        assert breakdown.tax_before_rebates == Decimal("59032")
        assert breakdown.rebates == Decimal("26679")
        assert breakdown.medical_credits == Decimal("4368")
        assert breakdown.tax_after_credits == Decimal("27985")
        assert breakdown.period_tax == Decimal("27985") / 12


class TestUIF:
    """Test UIF contributions."""

    def test_one_percent_under_cap(self):
        assert calculate_uif(15000) == Decimal("150")
        assert calculate_uif(Decimal("17712")) == Decimal("177.12")

    def test_monthly_cap(self):
        """R25 000 x 1% = R250, capped at R177.12."""
        assert calculate_uif(25000) == UIF_MAX_MONTHLY_CONTRIBUTION
        assert calculate_uif(1_000_000) == Decimal("177.12")

    @pytest.mark.parametrize("gross", [0, 1000, 17712, 17713, 25000, 100000, 5_000_000])
    def test_monthly_never_exceeds_cap(self, gross):
        assert calculate_uif(gross, "Monthly") <= Decimal("177.12")

    def test_weekly_cap(self):
        assert calculate_uif(3000, "Weekly") == Decimal("30")
        assert calculate_uif(10000, "Weekly") == Decimal("177.12") / Decimal("4.33")

    def test_bi_weekly_cap(self):
        assert calculate_uif(5000, "Bi-weekly") == Decimal("50")
        assert calculate_uif(10000, "Bi-weekly") == Decimal("177.12") / Decimal("2.17")

    def test_unknown_frequency_uses_monthly_cap(self):
        assert calculate_uif(25000, "Daily") == Decimal("177.12")

    def test_custom_rate(self):
        assert calculate_uif(10000, "Monthly", Decimal("0.005")) == Decimal("50")
        assert calculate_uif(10000, "Monthly", UIF_EMPLOYER_RATE) == Decimal("100")
        assert calculate_uif(50000, "Monthly", Decimal("0.02")) == Decimal("177.12")


class TestSDL:
    """Test Skills Development Levy."""

    def test_levied_when_subject(self):
        assert calculate_sdl(Decimal("10000"), True) == Decimal("100")

    def test_not_levied_when_not_subject(self):
        assert calculate_sdl(Decimal("10000"), False) == 0

    def test_zero_gross(self):
        assert calculate_sdl(Decimal("0"), True) == 0


class TestETI:
    """Test Employment Tax Incentive schedule."""

    @pytest.mark.parametrize(
        "gross,expected",
        [
            (Decimal("1500"), Decimal("750")),
            (Decimal("2000"), Decimal("1000")),
            (Decimal("3000"), Decimal("1000")),
            (Decimal("4500"), Decimal("1000")),
            (Decimal("5500"), Decimal("500")),
            (Decimal("6500"), Decimal("0")),
            (Decimal("7000"), Decimal("0")),
            (Decimal("0"), Decimal("0")),
        ],
    )
    def test_first_year_schedule(self, gross, expected):
        assert calculate_eti(gross, 25) == expected

    @pytest.mark.parametrize(
        "gross,expected",
        [
            (Decimal("1500"), Decimal("375")),
            (Decimal("3000"), Decimal("500")),
            (Decimal("5500"), Decimal("250")),
        ],
    )
    def test_second_year_is_halved(self, gross, expected):
        assert calculate_eti(gross, 25, "Monthly", employment_month=13) == expected

    def test_no_incentive_after_24_months(self):
        assert calculate_eti(Decimal("3000"), 25, "Monthly", employment_month=25) == 0

    @pytest.mark.parametrize("age", [None, 17, 30, 45])
    def test_outside_qualifying_age(self, age):
        assert calculate_eti(Decimal("3000"), age) == 0

    @pytest.mark.parametrize("age", [18, 29])
    def test_qualifying_age_bounds(self, age):
        assert calculate_eti(Decimal("3000"), age) == Decimal("1000")

    def test_weekly_pay_uses_monthly_equivalent(self):
        """R700/week is about R3 033/month: full R1 000, spread weekly."""
        result = calculate_eti(Decimal("700"), 22, "Weekly")
        assert result == Decimal("12000") / 52

    def test_never_exceeds_monthly_maximum(self):
        for gross in range(0, 8000, 250):
            assert calculate_eti(gross, 22) <= Decimal("1000")


class TestTaxTables:
    """Test tax table lookup."""

    def test_known_year(self):
        assert get_tax_tables("2024/2025") is SA_TAX_TABLES_2024

    def test_unknown_year(self):
        with pytest.raises(TaxYearNotFoundError) as exc_info:
            get_tax_tables("1999/2000")

        assert exc_info.value.tax_year == "1999/2000"
