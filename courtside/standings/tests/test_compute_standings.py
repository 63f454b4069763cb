"""
Tests for the compute_standings management command and standings settings.
"""

import json
import os
import tempfile
from io import StringIO

from django.core.exceptions import ImproperlyConfigured
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, override_settings

from courtside.standings import conf
from courtside.standings_core.builder import PoolBuilder
from courtside.standings_core.qualification import AdvancementRule
from courtside.standings_core.tiebreaks import DEFAULT_TIEBREAKERS, Tiebreaker


def head_to_head_pool():
    """X and Y finish 1-1; X won the meeting, Y has the better differential."""
    return (
        PoolBuilder()
        .teams("X", "Y", "Z", "W")
        .match("X", "Y", "11-9")
        .match("Z", "X", "11-9")
        .match("Y", "W", "11-0")
        .match("Z", "W", "11-5")
    )


class ComputeStandingsCommandTests(SimpleTestCase):
    def setUp(self):
        self._paths = []

    def tearDown(self):
        for path in self._paths:
            os.remove(path)

    def write_input(self, data):
        with tempfile.NamedTemporaryFile(
            "w", suffix=".json", delete=False, encoding="utf-8"
        ) as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        self._paths.append(f.name)
        return f.name

    def single_pool_input(self):
        competitors, matches = head_to_head_pool().build()
        return self.write_input({"competitors": competitors, "matches": matches})

    def run_command(self, *args, **options):
        out = StringIO()
        call_command("compute_standings", *args, stdout=out, **options)
        return out.getvalue()

    def test_json_output(self):
        output = self.run_command(self.single_pool_input(), format="json")
        standings = json.loads(output)["standings"]

        self.assertEqual([row["teamId"] for row in standings], ["Z", "X", "Y", "W"])
        self.assertEqual([row["rank"] for row in standings], [1, 2, 3, 4])
        # top_2 by default
        self.assertEqual([row["isAdvancing"] for row in standings], [True, True, False, False])

    def test_tiebreakers_option(self):
        output = self.run_command(
            self.single_pool_input(),
            format="json",
            tiebreakers="wins,point_differential,points_scored",
        )
        standings = json.loads(output)["standings"]
        self.assertEqual([row["teamId"] for row in standings], ["Z", "Y", "X", "W"])

    @override_settings(STANDINGS_TIEBREAKERS=["wins", "point_diff"])
    def test_tiebreakers_from_settings(self):
        output = self.run_command(self.single_pool_input(), format="json")
        standings = json.loads(output)["standings"]
        self.assertEqual([row["teamId"] for row in standings], ["Z", "Y", "X", "W"])

    def test_table_output(self):
        output = self.run_command(self.single_pool_input(), advancement_rule="top_1")
        lines = output.splitlines()

        self.assertIn("Team", lines[0])
        self.assertTrue(lines[1].strip().startswith("1  Z"))
        self.assertTrue(lines[1].endswith("*"))
        self.assertFalse(lines[2].endswith("*"))
        self.assertIn("Ranked 4 competitors", output)

    def test_invalid_tiebreaker(self):
        with self.assertRaises(CommandError) as ctx:
            self.run_command(self.single_pool_input(), tiebreakers="wins,coin_flip")
        self.assertIn("coin_flip", str(ctx.exception))

    def test_invalid_advancement_rule(self):
        with self.assertRaises(CommandError):
            self.run_command(self.single_pool_input(), advancement_rule="top_3")

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            self.run_command("/nonexistent/standings.json")

    def test_invalid_json(self):
        with self.assertRaises(CommandError):
            self.run_command(self.write_input("{not json"))

    def test_non_object_json(self):
        with self.assertRaises(CommandError):
            self.run_command(self.write_input([1, 2, 3]))

    def test_empty_pool(self):
        output = self.run_command(self.write_input({}), format="json")
        self.assertEqual(json.loads(output), {"standings": []})

    def multi_pool_input(self):
        east = PoolBuilder("East").teams("E1", "E2").match("E2", "E1", "11-4")
        west = PoolBuilder("West").teams("W1", "W2").match("W1", "W2", "11-8")
        return self.write_input(
            {
                "pools": {"East": east.competitors, "West": west.competitors},
                "matches": east.matches + west.matches,
            }
        )

    def test_multi_pool_json(self):
        output = self.run_command(
            self.multi_pool_input(), format="json", advancement_rule="top_1", plate=True
        )
        data = json.loads(output)

        self.assertEqual([row["teamId"] for row in data["pools"]["East"]], ["E2", "E1"])
        self.assertEqual([row["teamId"] for row in data["pools"]["West"]], ["W1", "W2"])
        self.assertEqual(data["mainBracket"], ["E2", "W1"])
        self.assertEqual(data["plateBracket"], ["E1", "W2"])
        self.assertTrue(data["pools"]["East"][0]["isAdvancing"])
        self.assertFalse(data["pools"]["East"][1]["isAdvancing"])

    def test_multi_pool_filter(self):
        output = self.run_command(self.multi_pool_input(), format="json", pool="West")
        self.assertEqual(list(json.loads(output)["pools"]), ["West"])

    def test_multi_pool_table(self):
        output = self.run_command(self.multi_pool_input())
        self.assertIn("East", output)
        self.assertIn("West", output)
        self.assertIn("Ranked 2 pools", output)

    def test_unknown_pool(self):
        with self.assertRaises(CommandError):
            self.run_command(self.multi_pool_input(), pool="North")

    def test_pool_value_must_be_a_list(self):
        with self.assertRaises(CommandError) as ctx:
            self.run_command(self.write_input({"pools": {"A": 5}}))
        self.assertIn("pools.A", str(ctx.exception))

    def test_matches_must_be_a_list(self):
        with self.assertRaises(CommandError):
            self.run_command(self.write_input({"competitors": [], "matches": 5}))
        with self.assertRaises(CommandError):
            self.run_command(self.write_input({"pools": {"A": []}, "matches": "none"}))

    def test_pool_option_needs_multi_pool_input(self):
        with self.assertRaises(CommandError):
            self.run_command(self.single_pool_input(), pool="East")


class StandingsSettingsTests(SimpleTestCase):
    @override_settings(STANDINGS_TIEBREAKERS=None)
    def test_default_tiebreakers(self):
        self.assertEqual(conf.get_default_tiebreakers(), DEFAULT_TIEBREAKERS)

    @override_settings(STANDINGS_TIEBREAKERS=["points_scored", "wins"])
    def test_configured_tiebreakers(self):
        self.assertEqual(
            conf.get_default_tiebreakers(), (Tiebreaker.POINTS_SCORED, Tiebreaker.WINS)
        )

    @override_settings(STANDINGS_TIEBREAKERS=["wins", "sonneborn_berger"])
    def test_invalid_tiebreakers(self):
        with self.assertRaises(ImproperlyConfigured):
            conf.get_default_tiebreakers()

    @override_settings(STANDINGS_ADVANCEMENT_RULE="top_1")
    def test_advancement_rule(self):
        self.assertEqual(conf.get_advancement_rule(), AdvancementRule.TOP_1)

    @override_settings(STANDINGS_ADVANCEMENT_RULE="everyone")
    def test_invalid_advancement_rule(self):
        with self.assertRaises(ImproperlyConfigured):
            conf.get_advancement_rule()

    @override_settings(STANDINGS_ADVANCEMENT_COUNT=0)
    def test_invalid_advancement_count(self):
        with self.assertRaises(ImproperlyConfigured):
            conf.get_advancement_count()
