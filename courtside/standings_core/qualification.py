"""
Advancement of pool finishers to the knockout stage.

After pool play, the top finishers of each pool advance to the main
(medal) bracket. Optionally, the next finishers go to a plate bracket.
Under the "top N plus best" rule, the remaining main-bracket slots go to
the best non-qualified finishers across all pools.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, replace

from courtside.standings_core.ranking import calculate_pool_standings
from courtside.standings_core.structure import StandingRow
from courtside.standings_core.tiebreaks import Tiebreaker, parse_tiebreakers


class AdvancementRule(Enum):
    TOP_1 = "top_1"
    TOP_2 = "top_2"
    TOP_N_PLUS_BEST = "top_n_plus_best"


class InvalidAdvancementRuleError(ValueError):
    """Raised when an advancement rule is not recognized."""


QUALIFIED_TOP = "top"
QUALIFIED_BEST_REMAINING = "best_remaining"


@dataclass(frozen=True)
class Qualifier:
    """A competitor advancing out of a pool."""

    pool: str
    team_id: str
    qualified_as: str


@dataclass(frozen=True)
class QualificationResult:
    main_bracket: Tuple[Qualifier, ...] = ()
    plate_bracket: Tuple[Qualifier, ...] = ()

    def main_bracket_ids(self) -> List[str]:
        return [q.team_id for q in self.main_bracket]

    def plate_bracket_ids(self) -> List[str]:
        return [q.team_id for q in self.plate_bracket]


def parse_advancement_rule(value: Union[str, AdvancementRule]) -> AdvancementRule:
    if isinstance(value, AdvancementRule):
        return value
    try:
        return AdvancementRule(value)
    except ValueError:
        valid = ", ".join(r.value for r in AdvancementRule)
        raise InvalidAdvancementRuleError(
            f"Unknown advancement rule {value!r}; expected one of: {valid}"
        )


def qualifiers_per_pool(rule: Union[str, AdvancementRule]) -> int:
    """Number of guaranteed qualifiers from each pool for a rule."""
    rule = parse_advancement_rule(rule)
    if rule == AdvancementRule.TOP_2:
        return 2
    # TOP_1, and TOP_N_PLUS_BEST where only the pool winner is guaranteed
    return 1


def advancement_count_for(
    rule: Union[str, AdvancementRule], advancement_count: Optional[int] = None
) -> int:
    """How many competitors per pool are flagged as advancing in a standings table."""
    rule = parse_advancement_rule(rule)
    if rule == AdvancementRule.TOP_N_PLUS_BEST:
        return advancement_count or 2
    return qualifiers_per_pool(rule)


def mark_advancing(rows: Iterable[StandingRow], count: int) -> List[StandingRow]:
    """Return new rows with is_advancing set for the first ``count`` rows."""
    return [
        replace(row, is_advancing=index < count) for index, row in enumerate(rows)
    ]


def _record_key(row: StandingRow):
    return (-row.wins, -row.point_differential, -row.points_for, row.team_id)


def determine_qualifiers(
    pool_standings: Mapping[str, List[StandingRow]],
    rule: Union[str, AdvancementRule],
    advancement_count: Optional[int] = None,
    plate_enabled: bool = False,
    advance_to_plate_per_pool: Optional[int] = None,
) -> QualificationResult:
    """
    Decide who advances from each pool.

    Args:
        pool_standings: Ranked standings per pool name, best first
        rule: Advancement rule
        advancement_count: Total main-bracket size for top_n_plus_best
        plate_enabled: Whether non-qualifiers feed a plate bracket
        advance_to_plate_per_pool: Plate qualifiers per pool; defaults to
            the main-bracket qualifiers per pool, capped at the rest of the pool

    Returns:
        QualificationResult with main- and plate-bracket qualifiers
    """
    rule = parse_advancement_rule(rule)
    per_pool = qualifiers_per_pool(rule)

    pools = list(pool_standings.items())
    teams_per_pool = len(pools[0][1]) if pools and pools[0][1] else 4

    if advance_to_plate_per_pool is not None and advance_to_plate_per_pool > 0:
        plate_per_pool = advance_to_plate_per_pool
    else:
        plate_per_pool = max(0, min(per_pool, teams_per_pool - per_pool))

    main: List[Qualifier] = []
    plate: List[Qualifier] = []
    leftovers: List[Tuple[str, StandingRow]] = []

    for pool_name, rows in pools:
        rows = list(rows)
        for row in rows[:per_pool]:
            main.append(Qualifier(pool_name, row.team_id, QUALIFIED_TOP))

        plate_rows = rows[per_pool:per_pool + plate_per_pool] if plate_enabled else []
        for row in plate_rows:
            plate.append(Qualifier(pool_name, row.team_id, QUALIFIED_TOP))

        leftovers.extend(
            (pool_name, row) for row in rows[per_pool + len(plate_rows):]
        )

    if rule == AdvancementRule.TOP_N_PLUS_BEST and advancement_count:
        remaining_slots = advancement_count - len(main)
        if remaining_slots > 0:
            leftovers.sort(key=lambda item: _record_key(item[1]))
            for pool_name, row in leftovers[:remaining_slots]:
                main.append(Qualifier(pool_name, row.team_id, QUALIFIED_BEST_REMAINING))

    return QualificationResult(main_bracket=tuple(main), plate_bracket=tuple(plate))


def pool_of(record: Any) -> Optional[str]:
    """Pool a raw match record belongs to (poolGroup, falling back to poolName)."""
    if not isinstance(record, Mapping):
        return None
    pool = record.get("poolGroup") or record.get("poolName")
    return str(pool) if pool else None


def calculate_all_pool_standings(
    pools: Mapping[str, Iterable[Any]],
    matches: Optional[Iterable[Any]],
    tiebreakers: Optional[Iterable[Union[str, Tiebreaker]]] = None,
) -> Dict[str, List[StandingRow]]:
    """
    Rank every pool independently.

    Args:
        pools: Competitor records per pool name
        matches: Raw match records for all pools, tagged with poolGroup
        tiebreakers: Tiebreaker chain applied to every pool

    Returns:
        Dictionary mapping pool names to ranked standings
    """
    chain = parse_tiebreakers(tiebreakers)

    matches_by_pool: Dict[str, List[Any]] = {name: [] for name in pools}
    for record in matches or []:
        pool = pool_of(record)
        if pool in matches_by_pool:
            matches_by_pool[pool].append(record)

    return {
        name: calculate_pool_standings(competitors, matches_by_pool[name], chain)
        for name, competitors in pools.items()
    }


def mark_qualified(
    pool_standings: Mapping[str, List[StandingRow]], result: QualificationResult
) -> Dict[str, List[StandingRow]]:
    """Return new standings with is_advancing set from a qualification result."""
    advancing = set(result.main_bracket_ids())
    return {
        name: [replace(row, is_advancing=row.team_id in advancing) for row in rows]
        for name, rows in pool_standings.items()
    }
