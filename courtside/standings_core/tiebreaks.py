"""
Tiebreak rules for pool standings.

Competitors are ordered by an ordered chain of tiebreakers. The first rule
in the chain that separates two competitors decides their order. When
every rule is level, the competitor id decides, so the result is always
a strict total order.

Head-to-head uses mini-standings. These are standings computed only from
the matches played among the competitors tied on wins. With three or more
tied competitors a plain "did A beat B" check can be cyclic, while the
mini-standings table always gives a consistent answer.
Mini-standings are computed once per tie-group, before sorting starts.
The comparator only reads them.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

from courtside.standings_core.aggregation import counts_for_standings
from courtside.standings_core.structure import ExtractedMatch, MiniStanding, StandingRow


class Tiebreaker(Enum):
    """Criteria that can appear in a tiebreaker chain."""

    WINS = "wins"
    HEAD_TO_HEAD = "head_to_head"
    POINT_DIFFERENTIAL = "point_differential"
    POINTS_SCORED = "points_scored"


DEFAULT_TIEBREAKERS: Tuple[Tiebreaker, ...] = (
    Tiebreaker.WINS,
    Tiebreaker.HEAD_TO_HEAD,
    Tiebreaker.POINT_DIFFERENTIAL,
    Tiebreaker.POINTS_SCORED,
)

# Alternate spellings found in stored pool settings
TIEBREAKER_ALIASES = {
    "point_diff": Tiebreaker.POINT_DIFFERENTIAL,
}


class InvalidTiebreakerError(ValueError):
    """Raised when a tiebreaker chain contains an unrecognized entry."""


def parse_tiebreaker(value: Union[str, Tiebreaker]) -> Tiebreaker:
    """Convert a single chain entry to a Tiebreaker."""
    if isinstance(value, Tiebreaker):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in TIEBREAKER_ALIASES:
            return TIEBREAKER_ALIASES[key]
        try:
            return Tiebreaker(key)
        except ValueError:
            pass

    valid = ", ".join(t.value for t in Tiebreaker)
    raise InvalidTiebreakerError(
        f"Unknown tiebreaker {value!r}; expected one of: {valid}"
    )


def parse_tiebreakers(
    chain: Optional[Iterable[Union[str, Tiebreaker]]],
) -> Tuple[Tiebreaker, ...]:
    """
    Validate a caller-supplied tiebreaker chain.

    Args:
        chain: Ordered tiebreaker names or Tiebreaker members, or None for the default

    Returns:
        The chain as a tuple of Tiebreaker members, duplicates removed

    Raises:
        InvalidTiebreakerError: If any entry is not a recognized tiebreaker
    """
    if chain is None:
        return DEFAULT_TIEBREAKERS
    if isinstance(chain, (str, Tiebreaker)):
        raise InvalidTiebreakerError(
            f"Tiebreaker chain must be a sequence of tiebreakers, got {chain!r}"
        )

    parsed: List[Tiebreaker] = []
    for value in chain:
        tiebreaker = parse_tiebreaker(value)
        if tiebreaker not in parsed:
            parsed.append(tiebreaker)
    return tuple(parsed)


def group_by_wins(rows: Iterable[StandingRow]) -> Dict[int, List[str]]:
    """Partition competitor IDs into tie-groups keyed by their win count."""
    groups: Dict[int, List[str]] = {}
    for row in rows:
        groups.setdefault(row.wins, []).append(row.team_id)
    return groups


def compute_mini_standings(
    group_ids: Iterable[str], matches: Iterable[ExtractedMatch]
) -> Dict[str, MiniStanding]:
    """
    Calculate mini-standings for a tie-group.

    Only completed matches where both sides belong to the group are counted.

    Args:
        group_ids: IDs of the competitors sharing the same win count
        matches: All normalized matches of the pool

    Returns:
        Dictionary mapping each group member's ID to its MiniStanding
    """
    members = list(group_ids)
    mini_wins = {team_id: 0 for team_id in members}
    mini_diff = {team_id: 0 for team_id in members}

    for match in matches:
        if not counts_for_standings(match, mini_wins):
            continue

        a, b = match.side_a_id, match.side_b_id
        if match.winner_id == a:
            mini_wins[a] += 1
        elif match.winner_id == b:
            mini_wins[b] += 1

        for game in match.games:
            mini_diff[a] += game.score_a - game.score_b
            mini_diff[b] += game.score_b - game.score_a

    return {
        team_id: MiniStanding(
            mini_wins=mini_wins[team_id], mini_point_differential=mini_diff[team_id]
        )
        for team_id in members
    }


def build_mini_standings_cache(
    rows: Iterable[StandingRow], matches: Sequence[ExtractedMatch]
) -> Dict[int, Dict[str, MiniStanding]]:
    """Compute mini-standings for every tie-group with at least two members."""
    cache = {}
    for wins, team_ids in group_by_wins(rows).items():
        if len(team_ids) >= 2:
            cache[wins] = compute_mini_standings(team_ids, matches)
    return cache


@dataclass(frozen=True)
class RankingContext:
    """Precomputed data shared by every comparison within one ranking."""

    mini_standings: Dict[int, Dict[str, MiniStanding]] = field(default_factory=dict)

    def mini_standing(self, row: StandingRow) -> Optional[MiniStanding]:
        return self.mini_standings.get(row.wins, {}).get(row.team_id)


def _higher_first(a, b) -> int:
    """Order so that larger values rank better (-1 if a is better)."""
    if a > b:
        return -1
    if a < b:
        return 1
    return 0


def compare_head_to_head(
    row_a: StandingRow, row_b: StandingRow, context: RankingContext
) -> int:
    """Compare two competitors on mini-wins, then mini point differential."""
    # Only meaningful inside a tie-group
    if row_a.wins != row_b.wins:
        return 0

    mini_a = context.mini_standing(row_a)
    mini_b = context.mini_standing(row_b)
    if mini_a is None or mini_b is None:
        return 0

    return _higher_first(mini_a.mini_wins, mini_b.mini_wins) or _higher_first(
        mini_a.mini_point_differential, mini_b.mini_point_differential
    )


def compare_by(
    tiebreaker: Tiebreaker,
    row_a: StandingRow,
    row_b: StandingRow,
    context: RankingContext,
) -> int:
    """
    Compare two rows on a single tiebreaker.

    Returns:
        Negative if row_a ranks better, positive if row_b does, 0 if level
    """
    if tiebreaker == Tiebreaker.WINS:
        return _higher_first(row_a.wins, row_b.wins)
    elif tiebreaker == Tiebreaker.HEAD_TO_HEAD:
        return compare_head_to_head(row_a, row_b, context)
    elif tiebreaker == Tiebreaker.POINT_DIFFERENTIAL:
        return _higher_first(row_a.point_differential, row_b.point_differential)
    elif tiebreaker == Tiebreaker.POINTS_SCORED:
        return _higher_first(row_a.points_for, row_b.points_for)
    raise InvalidTiebreakerError(f"Unknown tiebreaker {tiebreaker!r}")


def compare_rows(
    row_a: StandingRow,
    row_b: StandingRow,
    chain: Sequence[Tiebreaker],
    context: RankingContext,
) -> int:
    """Compare two rows over the whole chain, falling back to competitor id."""
    for tiebreaker in chain:
        comparison = compare_by(tiebreaker, row_a, row_b, context)
        if comparison != 0:
            return comparison

    if row_a.team_id < row_b.team_id:
        return -1
    if row_a.team_id > row_b.team_id:
        return 1
    return 0
