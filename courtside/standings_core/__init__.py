from courtside.standings_core.ranking import calculate_pool_standings
from courtside.standings_core.structure import Competitor, StandingRow
from courtside.standings_core.tiebreaks import (
    DEFAULT_TIEBREAKERS,
    InvalidTiebreakerError,
    Tiebreaker,
    parse_tiebreakers,
)

__all__ = [
    "calculate_pool_standings",
    "Competitor",
    "StandingRow",
    "DEFAULT_TIEBREAKERS",
    "InvalidTiebreakerError",
    "Tiebreaker",
    "parse_tiebreakers",
]
