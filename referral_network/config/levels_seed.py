"""
Default level configuration.

Hierarchy is the 1-based position in LEVELS_DATA.
"""

from decimal import Decimal
from typing import Any

from referral_network.models.enums import LevelConditionScope, LevelConditionType

BUSINESS = LevelConditionType.BUSINESS.value
LEVELS = LevelConditionType.LEVELS.value
DIRECT = LevelConditionScope.DIRECT.value
NETWORK = LevelConditionScope.NETWORK.value


def _network_level(business: int | None, target: int) -> list[dict[str, Any]]:
    """NETWORK business volume plus two branches at the target level."""
    conditions: list[dict[str, Any]] = []
    if business is not None:
        conditions.append(
            {"type": BUSINESS, "scope": NETWORK, "value": business}
        )
    conditions.append(
        {"type": LEVELS, "scope": NETWORK, "value": 2, "level": target}
    )
    return conditions


LEVELS_DATA: list[dict[str, Any]] = [
    {
        "title": "Executive",
        "appraisal_bonus": Decimal("0"),
        "passive_income_percentage": Decimal("5"),
        "conditions": [],
    },
    {
        "title": "Sales Executive",
        "appraisal_bonus": Decimal("0"),
        "passive_income_percentage": Decimal("3"),
        "conditions": [
            {"type": BUSINESS, "scope": DIRECT, "value": 1_500},
        ],
    },
    {
        "title": "Sales Manager",
        "appraisal_bonus": Decimal("0"),
        "passive_income_percentage": Decimal("2"),
        "conditions": _network_level(10_000, 2),
    },
    {
        "title": "Branch Manager",
        "appraisal_bonus": Decimal("200"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(30_000, 3),
    },
    {
        "title": "Zonal Manager",
        "appraisal_bonus": Decimal("500"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(70_000, 4),
    },
    {
        "title": "Regional Manager",
        "appraisal_bonus": Decimal("1000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(170_000, 5),
    },
    {
        "title": "Country Head",
        "appraisal_bonus": Decimal("2000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(370_000, 6),
    },
    {
        "title": "Global Head",
        "appraisal_bonus": Decimal("3000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(770_000, 7),
    },
    {
        "title": "Global Director",
        "appraisal_bonus": Decimal("4000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(1_370_000, 8),
    },
    {
        "title": "Global President",
        "appraisal_bonus": Decimal("5000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(2_120_000, 9),
    },
    {
        "title": "Global Community",
        "appraisal_bonus": Decimal("8000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(None, 10),
    },
    {
        "title": "Global Trust",
        "appraisal_bonus": Decimal("10000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(None, 11),
    },
    {
        "title": "Global Management",
        "appraisal_bonus": Decimal("15000"),
        "passive_income_percentage": Decimal("1"),
        "conditions": _network_level(None, 12),
    },
]
