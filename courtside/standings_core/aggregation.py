"""
Aggregation of completed matches into per-competitor standing rows.
"""

from typing import Dict, Iterable, List
from dataclasses import dataclass, field

from courtside.standings_core.structure import (
    Competitor,
    ExtractedMatch,
    MatchHistoryEntry,
    StandingRow,
)


@dataclass
class _Tally:
    """Running totals for one competitor while matches are folded in."""

    wins: int = 0
    losses: int = 0
    points_for: float = 0
    points_against: float = 0
    games_played: int = 0
    match_history: List[MatchHistoryEntry] = field(default_factory=list)


def counts_for_standings(match: ExtractedMatch, team_ids) -> bool:
    """A match counts if it is completed and played between two known, distinct competitors."""
    return (
        match.completed
        and match.side_a_id != match.side_b_id
        and match.involves(team_ids)
    )


def aggregate_standings(
    competitors: List[Competitor], matches: Iterable[ExtractedMatch]
) -> Dict[str, StandingRow]:
    """
    Fold completed matches into one StandingRow per competitor.

    Competitors without any completed match get an all-zero row. Matches that
    are incomplete or reference an unknown competitor are ignored.

    Args:
        competitors: The pool's competitors, in caller order
        matches: Normalized matches (any completion state)

    Returns:
        Dictionary mapping competitor IDs to StandingRow objects, in competitor order
    """
    tallies: Dict[str, _Tally] = {c.id: _Tally() for c in competitors}

    for match in matches:
        if not counts_for_standings(match, tallies):
            continue

        a = tallies[match.side_a_id]
        b = tallies[match.side_b_id]

        for game in match.games:
            a.points_for += game.score_a
            a.points_against += game.score_b
            b.points_for += game.score_b
            b.points_against += game.score_a

        # A winner that is neither side is treated like no recorded winner
        if match.winner_id == match.side_a_id:
            a.wins += 1
            b.losses += 1
            a.match_history.append(MatchHistoryEntry(match.side_b_id, True))
            b.match_history.append(MatchHistoryEntry(match.side_a_id, False))
        elif match.winner_id == match.side_b_id:
            b.wins += 1
            a.losses += 1
            a.match_history.append(MatchHistoryEntry(match.side_b_id, False))
            b.match_history.append(MatchHistoryEntry(match.side_a_id, True))

        # One per match, not per game
        a.games_played += 1
        b.games_played += 1

    rows = {}
    for competitor in competitors:
        tally = tallies[competitor.id]
        rows[competitor.id] = StandingRow(
            team_id=competitor.id,
            name=competitor.name,
            wins=tally.wins,
            losses=tally.losses,
            points_for=tally.points_for,
            points_against=tally.points_against,
            games_played=tally.games_played,
            match_history=tuple(tally.match_history),
        )

    return rows
