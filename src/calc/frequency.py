"""Frequency normalization.

Every periodic amount in a profile is stored as (amount, repeat count, unit),
e.g. "$85.96 every 3 years". These helpers convert such triples to a
canonical annual or weekly rate and back to a display period.
"""

import logging
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 52


class FrequencyUnit(str, Enum):
    WEEK = 'week'
    FORTNIGHT = 'fortnight'
    MONTH = 'month'
    QUARTER = 'quarter'
    YEAR = 'year'

    @property
    def multiplier(self) -> int:
        """Occurrences per year."""
        return FREQ_MULTIPLIERS[self]

    @property
    def label(self) -> str:
        return FREQ_LABELS[self]


FREQ_MULTIPLIERS = {
    FrequencyUnit.WEEK: 52,
    FrequencyUnit.FORTNIGHT: 26,
    FrequencyUnit.MONTH: 12,
    FrequencyUnit.QUARTER: 4,
    FrequencyUnit.YEAR: 1,
}

FREQ_LABELS = {
    FrequencyUnit.WEEK: 'Week',
    FrequencyUnit.FORTNIGHT: 'Fortnight',
    FrequencyUnit.MONTH: 'Month',
    FrequencyUnit.QUARTER: 'Quarter',
    FrequencyUnit.YEAR: 'Year',
}

UnitLike = Union[FrequencyUnit, str]


def multiplier(unit: UnitLike) -> int:
    """Occurrences per year for a unit.

    Unknown unit strings (e.g. from hand-edited profiles) are treated as
    annual, multiplier 1.
    """
    try:
        return FREQ_MULTIPLIERS[FrequencyUnit(unit)]
    except ValueError:
        logger.warning("Unknown frequency unit %r; treating as annual", unit)
        return 1


def to_annual(amount: float, repeat_count: float, unit: UnitLike) -> float:
    """Annual rate of `amount` paid once every `repeat_count` units.

    repeat_count must be >= 1.
    """
    return amount * multiplier(unit) / repeat_count


def to_weekly(amount: float, repeat_count: float, unit: UnitLike) -> float:
    return to_annual(amount, repeat_count, unit) / WEEKS_PER_YEAR


def from_weekly(weekly_amount: float, target_unit: UnitLike) -> float:
    """Convert a weekly amount to the amount per one `target_unit`."""
    return weekly_amount * WEEKS_PER_YEAR / multiplier(target_unit)


def from_annual(annual_amount: float, target_unit: UnitLike) -> float:
    """Convert an annual amount to the amount per one `target_unit`."""
    return annual_amount / multiplier(target_unit)
