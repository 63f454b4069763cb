"""
Data structures for pool standings.

This module provides the immutable records the standings engine works with:
- Competitors (teams or players) supplied by the caller
- Matches normalized from upstream records
- Standing rows produced for each competitor
- Mini-standings used to separate competitors tied on wins
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class Competitor:
    """A team or player taking part in a pool."""

    id: str
    name: str


@dataclass(frozen=True)
class GameScore:
    """Score of a single game, from side A's and side B's point of view."""

    score_a: float = 0
    score_b: float = 0


@dataclass(frozen=True)
class ExtractedMatch:
    """A match record normalized to one canonical shape."""

    side_a_id: str
    side_b_id: str
    completed: bool = False
    winner_id: Optional[str] = None
    games: Tuple[GameScore, ...] = ()

    def involves(self, team_ids) -> bool:
        """Return True if both sides belong to the given collection of ids."""
        return self.side_a_id in team_ids and self.side_b_id in team_ids


@dataclass(frozen=True)
class MatchHistoryEntry:
    """One decided match from a competitor's point of view."""

    opponent_id: str
    won: bool


@dataclass(frozen=True)
class StandingRow:
    """Aggregated results for a competitor within a pool."""

    team_id: str
    name: str
    wins: int = 0
    losses: int = 0
    points_for: float = 0
    points_against: float = 0
    games_played: int = 0
    match_history: Tuple[MatchHistoryEntry, ...] = field(default_factory=tuple)
    rank: Optional[int] = None
    is_advancing: Optional[bool] = None

    @property
    def point_differential(self) -> float:
        return self.points_for - self.points_against

    def with_rank(self, rank: int) -> "StandingRow":
        """Return a new row with the rank assigned (immutable pattern)."""
        return replace(self, rank=rank)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for rendering or snapshotting.

        Field names follow the consumers' camelCase convention. The short
        ``pf``/``pa``/``diff`` and ``pointDifference`` names are kept for
        older readers of stored standings.
        """
        data = {
            "teamId": self.team_id,
            "name": self.name,
            "wins": self.wins,
            "losses": self.losses,
            "pointsFor": self.points_for,
            "pointsAgainst": self.points_against,
            "pointDifferential": self.point_differential,
            "gamesPlayed": self.games_played,
            "matchHistory": [
                {"opponentId": entry.opponent_id, "won": entry.won}
                for entry in self.match_history
            ],
            "rank": self.rank,
            # Legacy aliases
            "pf": self.points_for,
            "pa": self.points_against,
            "diff": self.point_differential,
            "pointDifference": self.point_differential,
        }
        if self.is_advancing is not None:
            data["isAdvancing"] = self.is_advancing
        return data


@dataclass(frozen=True)
class MiniStanding:
    """Results restricted to matches among the members of one tie-group."""

    mini_wins: int = 0
    mini_point_differential: float = 0


def default_competitor_name(competitor_id: str) -> str:
    return f"Team {competitor_id[:4]}"


def competitors_from_records(
    records: Optional[Iterable[Union[Competitor, Mapping[str, Any]]]],
) -> List[Competitor]:
    """Build Competitor objects from caller-supplied records.

    Records without an id are skipped. When the same id appears twice the
    first record wins.
    """
    competitors = []
    seen = set()

    for record in records or []:
        if isinstance(record, Competitor):
            competitor_id, name = record.id, record.name
        elif isinstance(record, Mapping):
            competitor_id, name = record.get("id"), record.get("name")
        else:
            continue

        if competitor_id is None or competitor_id == "":
            continue
        competitor_id = str(competitor_id)
        if competitor_id in seen:
            continue
        seen.add(competitor_id)

        competitors.append(
            Competitor(
                id=competitor_id,
                name=str(name) if name else default_competitor_name(competitor_id),
            )
        )

    return competitors
