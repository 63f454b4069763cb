"""
Normalization of match records produced by upstream match-tracking code.

Match documents arrive in several shapes depending on which writer produced
them (current ``sideA``/``sideB``/``officialResult`` documents, or legacy
``teamAId``/``winnerTeamId``/``scores`` documents). Everything here reduces
them to ExtractedMatch so that aggregation only ever sees one shape.

Missing or malformed numbers are read as zero and records without both side
ids are reported as unusable (None). Nothing in this module raises on bad data.
"""

import math
from numbers import Real
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from courtside.standings_core.structure import ExtractedMatch, GameScore


COMPLETED_STATUS = "completed"


def coerce_score(value: Any) -> float:
    """Return value if it is a finite real number, otherwise 0."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return 0
    if not math.isfinite(value):
        return 0
    return value


def _get(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return None


def _as_id(value: Any) -> Optional[str]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    return str(value)


def _side_id(record: Mapping, side_key: str, legacy_key: str) -> Optional[str]:
    return _as_id(_get(_get(record, side_key), "id")) or _as_id(
        _get(record, legacy_key)
    )


def get_side_a_id(record: Mapping) -> Optional[str]:
    """Side A id: sideA.id, falling back to the legacy teamAId."""
    return _side_id(record, "sideA", "teamAId")


def get_side_b_id(record: Mapping) -> Optional[str]:
    """Side B id: sideB.id, falling back to the legacy teamBId."""
    return _side_id(record, "sideB", "teamBId")


def get_winner_id(record: Mapping) -> Optional[str]:
    """Winner id with precedence officialResult.winnerId > winnerTeamId > winnerId."""
    return (
        _as_id(_get(_get(record, "officialResult"), "winnerId"))
        or _as_id(_get(record, "winnerTeamId"))
        or _as_id(_get(record, "winnerId"))
    )


def _game_score(game: Any) -> Optional[GameScore]:
    if isinstance(game, Mapping):
        return GameScore(coerce_score(game.get("scoreA")), coerce_score(game.get("scoreB")))
    if isinstance(game, (list, tuple)) and len(game) == 2:
        return GameScore(coerce_score(game[0]), coerce_score(game[1]))
    return None


def get_game_scores(record: Mapping) -> Tuple[GameScore, ...]:
    """Per-game scores from officialResult.scores, falling back to scores.

    An official result with an empty score list keeps it empty.
    """
    raw = _get(_get(record, "officialResult"), "scores")
    if raw is None:
        raw = _get(record, "scores")
    if not isinstance(raw, (list, tuple)):
        return ()

    games = []
    for game in raw:
        score = _game_score(game)
        if score is not None:
            games.append(score)
    return tuple(games)


def is_completed(record: Mapping) -> bool:
    return _get(record, "status") == COMPLETED_STATUS or _get(record, "completed") is True


def extract_match(record: Any) -> Optional[ExtractedMatch]:
    """
    Normalize one raw match record.

    Args:
        record: A match document in any of the supported shapes

    Returns:
        The ExtractedMatch, or None if either side id is missing
    """
    if not isinstance(record, Mapping):
        return None

    side_a_id = get_side_a_id(record)
    side_b_id = get_side_b_id(record)
    if side_a_id is None or side_b_id is None:
        return None

    return ExtractedMatch(
        side_a_id=side_a_id,
        side_b_id=side_b_id,
        completed=is_completed(record),
        winner_id=get_winner_id(record),
        games=get_game_scores(record),
    )


def match_sort_key(match: ExtractedMatch):
    return (
        match.side_a_id,
        match.side_b_id,
        match.winner_id or "",
        match.completed,
        tuple((game.score_a, game.score_b) for game in match.games),
    )


def extract_matches(records: Optional[Iterable[Any]]) -> List[ExtractedMatch]:
    """Normalize a batch of raw records, dropping the unusable ones.

    The result is in canonical order (by sides, winner and scores) so that
    totals and match history never depend on the order records arrive in.
    """
    matches = []
    for record in records or []:
        match = extract_match(record)
        if match is not None:
            matches.append(match)
    matches.sort(key=match_sort_key)
    return matches
