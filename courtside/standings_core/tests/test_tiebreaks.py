"""
Simple unit tests for tiebreak rules and mini-standings.
No database, no Django models - just pure function tests.
"""

import unittest

from courtside.standings_core.structure import ExtractedMatch, GameScore, MiniStanding, StandingRow
from courtside.standings_core.tiebreaks import (
    DEFAULT_TIEBREAKERS,
    InvalidTiebreakerError,
    RankingContext,
    Tiebreaker,
    build_mini_standings_cache,
    compare_by,
    compare_rows,
    compute_mini_standings,
    group_by_wins,
    parse_tiebreakers,
)


def played(a, b, winner, score_a, score_b, completed=True):
    return ExtractedMatch(a, b, completed, winner, (GameScore(score_a, score_b),))


class ParseTiebreakersTests(unittest.TestCase):
    def test_default_chain(self):
        self.assertEqual(
            parse_tiebreakers(None),
            (
                Tiebreaker.WINS,
                Tiebreaker.HEAD_TO_HEAD,
                Tiebreaker.POINT_DIFFERENTIAL,
                Tiebreaker.POINTS_SCORED,
            ),
        )
        self.assertEqual(parse_tiebreakers(None), DEFAULT_TIEBREAKERS)

    def test_names_members_and_aliases(self):
        self.assertEqual(
            parse_tiebreakers(["points_scored", Tiebreaker.WINS, "point_diff", " Head_To_Head "]),
            (
                Tiebreaker.POINTS_SCORED,
                Tiebreaker.WINS,
                Tiebreaker.POINT_DIFFERENTIAL,
                Tiebreaker.HEAD_TO_HEAD,
            ),
        )

    def test_duplicates_keep_first_position(self):
        self.assertEqual(
            parse_tiebreakers(["wins", "points_scored", "wins"]),
            (Tiebreaker.WINS, Tiebreaker.POINTS_SCORED),
        )

    def test_empty_chain_is_allowed(self):
        self.assertEqual(parse_tiebreakers([]), ())

    def test_unknown_entry_is_rejected(self):
        with self.assertRaises(InvalidTiebreakerError) as ctx:
            parse_tiebreakers(["wins", "buchholz"])
        self.assertIn("buchholz", str(ctx.exception))
        self.assertIn("head_to_head", str(ctx.exception))

    def test_non_string_entry_is_rejected(self):
        with self.assertRaises(InvalidTiebreakerError):
            parse_tiebreakers(["wins", 3])

    def test_bare_string_is_rejected(self):
        with self.assertRaises(InvalidTiebreakerError):
            parse_tiebreakers("wins")

    def test_error_is_a_value_error(self):
        self.assertTrue(issubclass(InvalidTiebreakerError, ValueError))


class MiniStandingsTests(unittest.TestCase):
    """Head-to-head results restricted to a tie-group."""

    def test_only_intra_group_matches_count(self):
        matches = [
            played("a", "b", "a", 11, 7),
            played("b", "c", "b", 11, 9),
            played("c", "a", "c", 11, 10),
            # Outside the group
            played("a", "d", "a", 11, 0),
            played("d", "b", "d", 11, 0),
            # Not completed
            played("a", "b", "b", 0, 11, completed=False),
        ]
        mini = compute_mini_standings(["a", "b", "c"], matches)

        self.assertEqual(mini["a"], MiniStanding(mini_wins=1, mini_point_differential=4 - 1))
        self.assertEqual(mini["b"], MiniStanding(mini_wins=1, mini_point_differential=-4 + 2))
        self.assertEqual(mini["c"], MiniStanding(mini_wins=1, mini_point_differential=-2 + 1))
        self.assertNotIn("d", mini)

    def test_member_without_intra_group_matches(self):
        mini = compute_mini_standings(["a", "b"], [played("a", "c", "a", 11, 0)])
        self.assertEqual(mini["a"], MiniStanding())
        self.assertEqual(mini["b"], MiniStanding())

    def test_cache_only_holds_real_tie_groups(self):
        rows = [
            StandingRow("a", "A", wins=2),
            StandingRow("b", "B", wins=1),
            StandingRow("c", "C", wins=1),
            StandingRow("d", "D", wins=0),
        ]
        self.assertEqual(group_by_wins(rows), {2: ["a"], 1: ["b", "c"], 0: ["d"]})

        cache = build_mini_standings_cache(rows, [played("c", "b", "c", 11, 3)])
        self.assertEqual(list(cache), [1])
        self.assertEqual(cache[1]["c"], MiniStanding(1, 8))
        self.assertEqual(cache[1]["b"], MiniStanding(0, -8))


class CompareTests(unittest.TestCase):
    def setUp(self):
        self.a = StandingRow("a", "A", wins=2, points_for=30, points_against=20)
        self.b = StandingRow("b", "B", wins=2, points_for=40, points_against=25)
        self.c = StandingRow("c", "C", wins=1, points_for=50, points_against=10)
        self.context = RankingContext(
            mini_standings={2: {"a": MiniStanding(1, 4), "b": MiniStanding(0, -4)}}
        )

    def test_wins(self):
        self.assertLess(compare_by(Tiebreaker.WINS, self.a, self.c, self.context), 0)
        self.assertGreater(compare_by(Tiebreaker.WINS, self.c, self.a, self.context), 0)
        self.assertEqual(compare_by(Tiebreaker.WINS, self.a, self.b, self.context), 0)

    def test_head_to_head_uses_mini_standings(self):
        self.assertLess(compare_by(Tiebreaker.HEAD_TO_HEAD, self.a, self.b, self.context), 0)
        self.assertGreater(compare_by(Tiebreaker.HEAD_TO_HEAD, self.b, self.a, self.context), 0)

    def test_head_to_head_falls_back_to_mini_differential(self):
        context = RankingContext(
            mini_standings={2: {"a": MiniStanding(1, -3), "b": MiniStanding(1, 3)}}
        )
        self.assertGreater(compare_by(Tiebreaker.HEAD_TO_HEAD, self.a, self.b, context), 0)

    def test_head_to_head_skipped_when_wins_differ(self):
        self.assertEqual(compare_by(Tiebreaker.HEAD_TO_HEAD, self.a, self.c, self.context), 0)

    def test_head_to_head_without_cache_entry(self):
        self.assertEqual(compare_by(Tiebreaker.HEAD_TO_HEAD, self.a, self.b, RankingContext()), 0)

    def test_point_differential_and_points_scored(self):
        self.assertLess(compare_by(Tiebreaker.POINT_DIFFERENTIAL, self.b, self.a, self.context), 0)
        self.assertLess(compare_by(Tiebreaker.POINTS_SCORED, self.c, self.b, self.context), 0)

    def test_chain_order_decides(self):
        chain = (Tiebreaker.WINS, Tiebreaker.HEAD_TO_HEAD, Tiebreaker.POINT_DIFFERENTIAL)
        self.assertLess(compare_rows(self.a, self.b, chain, self.context), 0)

        chain = (Tiebreaker.WINS, Tiebreaker.POINT_DIFFERENTIAL, Tiebreaker.HEAD_TO_HEAD)
        self.assertGreater(compare_rows(self.a, self.b, chain, self.context), 0)

    def test_id_fallback(self):
        twin = StandingRow("z", "Z", wins=2, points_for=30, points_against=20)
        self.assertLess(compare_rows(self.a, twin, DEFAULT_TIEBREAKERS, RankingContext()), 0)
        self.assertGreater(compare_rows(twin, self.a, DEFAULT_TIEBREAKERS, RankingContext()), 0)
        self.assertEqual(compare_rows(self.a, self.a, (), RankingContext()), 0)


if __name__ == "__main__":
    unittest.main()
