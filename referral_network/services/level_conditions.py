"""
Level condition parsing.

Turns the raw conditions stored on a level into validated items.
"""

import json
import math
from decimal import Decimal
from typing import Any

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)


class LevelCondition(BaseModel):
    """Single eligibility predicate of a level."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: StrictStr
    scope: StrictStr
    value: StrictInt | StrictFloat
    level: StrictInt | None = None  # Target hierarchy for LEVELS conditions

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: int | float) -> int | float:
        """Required amount/count must be finite and not negative."""
        if not math.isfinite(v):
            raise ValueError("value must be a finite number")
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: int | None) -> int | None:
        """Target hierarchy must be positive when given."""
        if v is not None and v <= 0:
            raise ValueError("level must be > 0")
        return v

    @property
    def required_value(self) -> Decimal:
        """Value as Decimal for exact comparisons."""
        return Decimal(str(self.value))


def _validate(item: Any) -> LevelCondition | None:
    """Validate one raw condition, None if malformed."""
    if not isinstance(item, dict):
        return None
    try:
        return LevelCondition.model_validate(item)
    except ValidationError:
        logger.debug("Dropping malformed level condition", extra={"raw": item})
        return None


def parse_conditions(raw: Any) -> list[LevelCondition]:
    """
    Parse level conditions.

    Accepts a JSON string, a list of mappings or a single mapping.
    Malformed entries are dropped; unknown condition types are kept so the
    evaluator can fail them.

    Args:
        raw: Stored conditions

    Returns:
        Validated conditions (empty list if none/invalid)
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []

    if isinstance(raw, dict):
        condition = _validate(raw)
        return [condition] if condition else []

    if isinstance(raw, (list, tuple)):
        return [c for c in (_validate(item) for item in raw) if c is not None]

    return []
