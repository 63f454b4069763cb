"""
Fluent assertion interface for testing pool standings.
"""

from typing import Dict, Optional, Sequence
from dataclasses import dataclass

from courtside.standings_core.structure import StandingRow


# Use the built-in AssertionError for proper test framework integration


@dataclass
class StandingsAssertion:
    """Fluent interface for asserting ranked standings."""

    rows: Sequence[StandingRow]
    _by_key: Optional[Dict[str, StandingRow]] = None

    def __post_init__(self):
        """Index rows by id and by name once."""
        if self._by_key is None:
            self._by_key = {}
            for row in self.rows:
                self._by_key.setdefault(row.name, row)
                self._by_key[row.team_id] = row

    def team(self, key: str) -> "TeamAssertion":
        """Select a competitor by id or name."""
        if key not in self._by_key:
            raise AssertionError(f"Competitor '{key}' not found in standings")
        return TeamAssertion(self.rows, self._by_key, row=self._by_key[key])

    def order(self, *keys: str) -> "StandingsAssertion":
        """Assert the full ranking order, by id or name."""
        actual = [row.team_id for row in self.rows]
        expected = [self.team(key).row.team_id for key in keys]
        if actual != expected:
            raise AssertionError(f"Expected order {expected}, got {actual}")
        return self


@dataclass
class TeamAssertion(StandingsAssertion):
    """Assertions for a single competitor's row."""

    row: Optional[StandingRow] = None

    def _check(self, field_name: str, expected, actual) -> "TeamAssertion":
        if actual != expected:
            raise AssertionError(
                f"{self.row.name} expected {field_name} {expected}, got {actual}"
            )
        return self

    def wins(self, expected: int) -> "TeamAssertion":
        return self._check("wins", expected, self.row.wins)

    def losses(self, expected: int) -> "TeamAssertion":
        return self._check("losses", expected, self.row.losses)

    def points_for(self, expected: float) -> "TeamAssertion":
        return self._check("points for", expected, self.row.points_for)

    def points_against(self, expected: float) -> "TeamAssertion":
        return self._check("points against", expected, self.row.points_against)

    def point_differential(self, expected: float) -> "TeamAssertion":
        return self._check("point differential", expected, self.row.point_differential)

    def games_played(self, expected: int) -> "TeamAssertion":
        return self._check("games played", expected, self.row.games_played)

    def rank(self, expected: int) -> "TeamAssertion":
        return self._check("rank", expected, self.row.rank)

    def advancing(self, expected: bool = True) -> "TeamAssertion":
        return self._check("advancing", expected, self.row.is_advancing)


def assert_standings(rows: Sequence[StandingRow]) -> StandingsAssertion:
    """Entry point: ``assert_standings(rows).team("A").wins(2).rank(1)``."""
    return StandingsAssertion(list(rows))
