"""Mission-derived requirements looked up in the standards table."""

from typing import NamedTuple

from ..errors import UnknownDurationCategory
from ..standards.schema import DurationCategory, StandardsConfig


class RequiredVolume(NamedTuple):
    minimum: float
    optimal: float
    multiplier: float


def duration_category(duration_days: int, standards: StandardsConfig) -> DurationCategory:
    """First duration range containing ``duration_days``.

    Raises:
        UnknownDurationCategory: if no range contains the duration
    """
    for category in standards.mission_durations:
        if category.contains(duration_days):
            return category
    raise UnknownDurationCategory(duration_days)


def categorize_duration(duration_days: int, standards: StandardsConfig) -> str:
    """Name of the mission duration category, e.g. ``"LONG_TERM"``."""
    return duration_category(duration_days, standards).name


def required_nhv(crew_size: int, duration_days: int, standards: StandardsConfig) -> RequiredVolume:
    """Minimum and optimal Net Habitable Volume for a crew and mission length.

    The per-crew figures are scaled by the duration multiplier, which steps up
    only once the duration is strictly above a threshold (180 days -> 1.0,
    181 days -> 1.2).
    """
    multiplier = standards.duration_multiplier(duration_days)
    return RequiredVolume(
        minimum=crew_size * standards.volume.nhv_per_crew_minimum * multiplier,
        optimal=crew_size * standards.volume.nhv_per_crew_optimal * multiplier,
        multiplier=multiplier,
    )
