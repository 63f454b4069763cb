"""
Builder for creating pool data with a fluent API.

The builder produces plain competitor records and raw match documents, in
the same shapes the upstream match-tracking code writes. That way tests
exercise the full extraction path without hand-writing nested dicts.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from courtside.standings_core.ranking import calculate_pool_standings
from courtside.standings_core.structure import StandingRow


def parse_score(score: str) -> Tuple[int, int]:
    """Parse a game score such as "11-5"."""
    left, right = score.split("-")
    return int(left), int(right)


class PoolBuilder:
    """Builder for pools of competitors and their match records."""

    def __init__(self, pool_name: Optional[str] = None):
        self.pool_name = pool_name
        self.competitors: List[Dict[str, Any]] = []
        self.matches: List[Dict[str, Any]] = []
        self._ids: Dict[str, str] = {}

    def team(self, name: str, team_id: Optional[str] = None) -> "PoolBuilder":
        """Add a competitor. The id defaults to the name."""
        team_id = team_id or name
        self._ids[name] = team_id
        self.competitors.append({"id": team_id, "name": name})
        return self

    def teams(self, *names: str) -> "PoolBuilder":
        for name in names:
            self.team(name)
        return self

    def _id(self, name: str) -> str:
        return self._ids.get(name, name)

    def _games(self, scores: Sequence[str]) -> List[Dict[str, int]]:
        games = []
        for number, score in enumerate(scores, start=1):
            score_a, score_b = parse_score(score)
            games.append({"gameNumber": number, "scoreA": score_a, "scoreB": score_b})
        return games

    def _winner(self, side_a: str, side_b: str, games: List[Dict[str, int]]) -> Optional[str]:
        games_a = sum(1 for g in games if g["scoreA"] > g["scoreB"])
        games_b = sum(1 for g in games if g["scoreB"] > g["scoreA"])
        if games_a > games_b:
            return self._id(side_a)
        if games_b > games_a:
            return self._id(side_b)
        return None

    def _tag(self, record: Dict[str, Any]) -> Dict[str, Any]:
        if self.pool_name:
            record["poolGroup"] = self.pool_name
        return record

    def match(
        self,
        side_a: str,
        side_b: str,
        *scores: str,
        winner: Optional[str] = None,
        status: str = "completed",
    ) -> "PoolBuilder":
        """
        Add a match with an official result.

        The winner is taken from the games won unless given explicitly.
        """
        games = self._games(scores)
        winner_id = self._id(winner) if winner else self._winner(side_a, side_b, games)
        record = {
            "sideA": {"id": self._id(side_a), "name": side_a},
            "sideB": {"id": self._id(side_b), "name": side_b},
            "status": status,
        }
        if status == "completed":
            record["officialResult"] = {"winnerId": winner_id, "scores": games}
        self.matches.append(self._tag(record))
        return self

    def legacy_match(
        self,
        side_a: str,
        side_b: str,
        *scores: str,
        winner: Optional[str] = None,
        status: str = "completed",
    ) -> "PoolBuilder":
        """Add a match in the legacy teamAId/winnerTeamId/scores shape."""
        games = self._games(scores)
        winner_id = self._id(winner) if winner else self._winner(side_a, side_b, games)
        record = {
            "teamAId": self._id(side_a),
            "teamBId": self._id(side_b),
            "winnerTeamId": winner_id,
            "scores": games,
            "status": status,
        }
        self.matches.append(self._tag(record))
        return self

    def void_match(self, side_a: str, side_b: str, *scores: str) -> "PoolBuilder":
        """Add a completed match without a recorded winner."""
        record = {
            "sideA": {"id": self._id(side_a)},
            "sideB": {"id": self._id(side_b)},
            "status": "completed",
            "scores": self._games(scores),
        }
        self.matches.append(self._tag(record))
        return self

    def raw(self, record: Any) -> "PoolBuilder":
        """Add a raw record as-is."""
        self.matches.append(record)
        return self

    def build(self) -> Tuple[List[Dict[str, Any]], List[Any]]:
        return list(self.competitors), list(self.matches)

    def standings(self, tiebreakers=None) -> List[StandingRow]:
        competitors, matches = self.build()
        return calculate_pool_standings(competitors, matches, tiebreakers)
