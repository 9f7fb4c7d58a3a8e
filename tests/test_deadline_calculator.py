"""Tests for the lien rule table, deadline calculator and auto-generator."""

from datetime import date

import pytest

from payforeman.calculators.auto_generator import DeadlineAutoGenerator
from payforeman.calculators.deadline_calculator import DeadlineCalculator, LienRuleNotFoundError
from payforeman.calculators.lien_rules import COLORADO_LIEN_RULES, LienRuleTable
from payforeman.calculators.types import DeadlineType, LienRuleSpec, Priority, ProjectType
from payforeman.errors import NotFoundError
from payforeman.services.lien_rule_seeder import seed_lien_rules


@pytest.fixture
def calculator() -> DeadlineCalculator:
    return DeadlineCalculator(LienRuleTable.colorado())


class TestLienRuleTable:
    """Test rule lookup and seeding."""

    def test_colorado_rules(self):
        """The seeded table covers the five Colorado rules."""
        table = LienRuleTable.colorado()
        assert len(table) == 5

        assert table.get("preliminary_notice", "private").deadline_days == 10
        assert table.get("mechanics_lien", "private").deadline_days == 120
        assert table.get("mechanics_lien", "public").deadline_days == 120
        assert table.get("payment_bond_claim", "public").deadline_days == 120
        assert table.get("retainage_release", "private").deadline_days == 60

    def test_missing_pair_returns_none(self):
        table = LienRuleTable.colorado()
        assert table.get("preliminary_notice", "public") is None
        assert table.get("retainage_release", "public") is None
        assert table.get("payment_bond_claim", "private") is None

    def test_duplicate_rules_rejected(self):
        rule = COLORADO_LIEN_RULES[0]
        with pytest.raises(ValueError, match="Duplicate"):
            LienRuleTable([rule, rule])

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            LienRuleSpec(
                rule_type="custom",
                project_type="private",
                deadline_days=-1,
                description="bad",
                trigger_event="never",
            )

    async def test_load_reads_seeded_rows(self, session):
        """Rules loaded from the database match the built-in table."""
        table = await LienRuleTable.load(session)
        assert {r.key for r in table} == {r.key for r in COLORADO_LIEN_RULES}

    async def test_seeding_is_idempotent(self, session):
        """Re-running the seeder adds nothing."""
        added = await seed_lien_rules(session)
        await session.commit()
        assert added == 0

        table = await LienRuleTable.load(session)
        assert len(table) == len(COLORADO_LIEN_RULES)


class TestDeadlineCalculator:
    """Test deadline arithmetic."""

    def test_preliminary_notice(self, calculator):
        calc = calculator.calculate("preliminary_notice", date(2026, 3, 1), "private")

        assert calc.deadline_date == date(2026, 3, 11)
        assert calc.deadline_days == 10
        assert calc.trigger_event == "first_work_date"
        assert calc.statutory_reference == "C.R.S. § 38-22-109"

    def test_mechanics_lien_crosses_months(self, calculator):
        calc = calculator.calculate(DeadlineType.MECHANICS_LIEN, date(2026, 6, 30))
        assert calc.deadline_date == date(2026, 10, 28)

    def test_crosses_leap_day(self, calculator):
        """Plain calendar arithmetic, including Feb 29."""
        calc = calculator.calculate("preliminary_notice", date(2028, 2, 25))
        assert calc.deadline_date == date(2028, 3, 6)

    def test_crosses_year_end(self, calculator):
        calc = calculator.calculate("retainage_release", date(2026, 12, 1))
        assert calc.deadline_date == date(2027, 1, 30)

    def test_public_bond_claim(self, calculator):
        calc = calculator.calculate(
            DeadlineType.PAYMENT_BOND_CLAIM, date(2026, 1, 15), ProjectType.PUBLIC
        )
        assert calc.deadline_date == date(2026, 5, 15)

    def test_zero_day_rule_returns_trigger(self):
        table = LienRuleTable(
            [
                LienRuleSpec(
                    rule_type="custom",
                    project_type="private",
                    deadline_days=0,
                    description="same day",
                    trigger_event="event",
                )
            ]
        )
        calc = DeadlineCalculator(table).calculate("custom", date(2026, 5, 5))
        assert calc.deadline_date == date(2026, 5, 5)

    def test_unknown_pair_raises(self, calculator):
        """A pair with no rule raises a not-found error carrying both keys."""
        with pytest.raises(LienRuleNotFoundError) as exc_info:
            calculator.calculate("preliminary_notice", date(2026, 3, 1), "public")

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.deadline_type == "preliminary_notice"
        assert exc_info.value.project_type == "public"
        assert exc_info.value.status_code == 404


class TestDeadlineAutoGenerator:
    """Test the standard deadline set for a project."""

    def test_private_with_both_dates(self, calculator):
        drafts = DeadlineAutoGenerator(calculator).plan(
            date(2026, 3, 1), date(2026, 6, 30), "private", "Riverside Lofts"
        )

        assert [d.deadline_type for d in drafts] == [
            DeadlineType.PRELIMINARY_NOTICE,
            DeadlineType.MECHANICS_LIEN,
        ]
        notice, lien = drafts
        assert notice.deadline_date == date(2026, 3, 11)
        assert notice.trigger_date == date(2026, 3, 1)
        assert notice.priority == Priority.HIGH
        assert notice.title == "Preliminary Notice - Riverside Lofts"

        assert lien.deadline_date == date(2026, 10, 28)
        assert lien.priority == Priority.CRITICAL
        assert lien.title == "Mechanics Lien Filing - Riverside Lofts"

    def test_public_gets_bond_claim_only(self, calculator):
        """Public projects have no preliminary notice and file a bond claim."""
        drafts = DeadlineAutoGenerator(calculator).plan(
            date(2026, 3, 1), date(2026, 6, 30), ProjectType.PUBLIC
        )

        assert len(drafts) == 1
        assert drafts[0].deadline_type == DeadlineType.PAYMENT_BOND_CLAIM
        assert drafts[0].deadline_date == date(2026, 10, 28)
        assert drafts[0].title == "Payment Bond Claim Filing"

    def test_start_date_only(self, calculator):
        drafts = DeadlineAutoGenerator(calculator).plan(date(2026, 3, 1), None)
        assert [d.deadline_type for d in drafts] == [DeadlineType.PRELIMINARY_NOTICE]

    def test_no_dates(self, calculator):
        assert DeadlineAutoGenerator(calculator).plan(None, None) == []

    def test_offsets_follow_rule_table(self):
        """Changing a rule's days changes the generated deadline."""
        table = LienRuleTable(
            [
                LienRuleSpec("preliminary_notice", "private", 15, "n", "first_work_date"),
                LienRuleSpec("mechanics_lien", "private", 90, "l", "last_work_date"),
            ]
        )
        drafts = DeadlineAutoGenerator(DeadlineCalculator(table)).plan(
            date(2026, 3, 1), date(2026, 6, 30)
        )
        assert [d.deadline_date for d in drafts] == [date(2026, 3, 16), date(2026, 9, 28)]
