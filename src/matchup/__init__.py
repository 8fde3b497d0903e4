"""Type-effectiveness aggregation exported for convenience."""

from .aggregator import (
    MatchupGroup,
    TypeMatchup,
    format_multiplier,
    group_by_multiplier,
)

__all__ = [
    "MatchupGroup",
    "TypeMatchup",
    "format_multiplier",
    "group_by_multiplier",
]
