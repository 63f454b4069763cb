"""
Pool standings calculation.

calculate_pool_standings is the entry point of the engine. It runs the
stages in order:

1. Normalize raw match records (extraction)
2. Fold completed matches into standing rows (aggregation)
3. Cache mini-standings for every tie-group (tiebreaks)
4. Sort with the tiebreaker chain and assign ranks

Every call works on fresh structures, so independent pools can be ranked
concurrently by the caller.
"""

import logging
from functools import cmp_to_key
from typing import Any, Iterable, List, Mapping, Optional, Union

from courtside.standings_core.aggregation import aggregate_standings, counts_for_standings
from courtside.standings_core.extraction import extract_matches
from courtside.standings_core.structure import (
    Competitor,
    StandingRow,
    competitors_from_records,
)
from courtside.standings_core.tiebreaks import (
    RankingContext,
    Tiebreaker,
    build_mini_standings_cache,
    compare_rows,
    parse_tiebreakers,
)

logger = logging.getLogger(__name__)


def calculate_pool_standings(
    competitors: Iterable[Union[Competitor, Mapping[str, Any]]],
    matches: Optional[Iterable[Any]],
    tiebreakers: Optional[Iterable[Union[str, Tiebreaker]]] = None,
) -> List[StandingRow]:
    """
    Calculate ranked standings for one pool.

    Args:
        competitors: Competitor objects or ``{"id", "name"}`` records
        matches: Raw match records in any supported shape, any status
        tiebreakers: Ordered tiebreaker chain; defaults to
            wins, head_to_head, point_differential, points_scored

    Returns:
        Standing rows sorted best first, each with its 1-based rank

    Raises:
        InvalidTiebreakerError: If the tiebreaker chain is invalid
    """
    # Validate configuration before touching any data
    chain = parse_tiebreakers(tiebreakers)

    pool = competitors_from_records(competitors)
    if not pool:
        return []

    raw_matches = list(matches or [])
    extracted = extract_matches(raw_matches)
    rows = aggregate_standings(pool, extracted)

    if logger.isEnabledFor(logging.DEBUG):
        counted = sum(1 for m in extracted if counts_for_standings(m, rows))
        logger.debug(
            "Pool of %d: %d match records, %d unusable, %d counted",
            len(pool),
            len(raw_matches),
            len(raw_matches) - len(extracted),
            counted,
        )

    context = RankingContext(
        mini_standings=build_mini_standings_cache(rows.values(), extracted)
    )

    # Start from id order so the result never depends on input order
    ordered = sorted(rows.values(), key=lambda row: row.team_id)
    ordered.sort(key=cmp_to_key(lambda a, b: compare_rows(a, b, chain, context)))

    return [row.with_rank(index + 1) for index, row in enumerate(ordered)]
