"""Deadline and invoice calculations."""

from payforeman.calculators.auto_generator import DeadlineAutoGenerator
from payforeman.calculators.clock import Clock, FixedClock, SystemClock
from payforeman.calculators.deadline_calculator import DeadlineCalculator, LienRuleNotFoundError
from payforeman.calculators.lien_rules import COLORADO_LIEN_RULES, LienRuleTable
from payforeman.calculators.priority import auto_priority, derive_priority

__all__ = [
    "DeadlineAutoGenerator",
    "Clock",
    "FixedClock",
    "SystemClock",
    "DeadlineCalculator",
    "LienRuleNotFoundError",
    "COLORADO_LIEN_RULES",
    "LienRuleTable",
    "auto_priority",
    "derive_priority",
]
