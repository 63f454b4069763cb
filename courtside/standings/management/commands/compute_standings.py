"""
Django management command to compute pool standings from a JSON export.

The input file holds either a single pool:

    {"competitors": [{"id": ..., "name": ...}], "matches": [...]}

or several pools, with matches tagged by poolGroup:

    {"pools": {"Pool A": [{"id": ..., "name": ...}]}, "matches": [...]}
"""

import json
import logging
import os

from django.core.management.base import BaseCommand, CommandError

from courtside.standings import conf
from courtside.standings_core.qualification import (
    InvalidAdvancementRuleError,
    advancement_count_for,
    calculate_all_pool_standings,
    determine_qualifiers,
    mark_advancing,
    mark_qualified,
    parse_advancement_rule,
)
from courtside.standings_core.ranking import calculate_pool_standings
from courtside.standings_core.tiebreaks import InvalidTiebreakerError, parse_tiebreakers

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Compute ranked pool standings from a JSON file of competitors and matches"

    def add_arguments(self, parser):
        parser.add_argument("input_file", type=str, help="Path to the JSON input file")
        parser.add_argument(
            "--tiebreakers",
            type=str,
            help="Comma-separated tiebreaker chain (default: STANDINGS_TIEBREAKERS)",
        )
        parser.add_argument(
            "--pool",
            type=str,
            help="Only report this pool (multi-pool input only)",
        )
        parser.add_argument(
            "--format",
            choices=["table", "json"],
            default="table",
            help="Output format (default: table)",
        )
        parser.add_argument(
            "--advancement-rule",
            type=str,
            help="top_1, top_2 or top_n_plus_best (default: STANDINGS_ADVANCEMENT_RULE)",
        )
        parser.add_argument(
            "--advancement-count",
            type=int,
            help="Main-bracket size for top_n_plus_best",
        )
        parser.add_argument(
            "--plate",
            action="store_true",
            help="Also report plate-bracket qualifiers (multi-pool input only)",
        )

    def handle(self, *args, **options):
        data = self._load(options["input_file"])

        try:
            if options["tiebreakers"]:
                chain = parse_tiebreakers(
                    [t for t in options["tiebreakers"].split(",") if t.strip()]
                )
            else:
                chain = conf.get_default_tiebreakers()
            if options["advancement_rule"]:
                rule = parse_advancement_rule(options["advancement_rule"])
            else:
                rule = conf.get_advancement_rule()
        except (InvalidTiebreakerError, InvalidAdvancementRuleError) as e:
            raise CommandError(str(e))

        advancement_count = options["advancement_count"] or conf.get_advancement_count()

        if "pools" in data:
            self._handle_pools(data, chain, rule, advancement_count, options)
        else:
            if options["pool"]:
                raise CommandError("--pool requires multi-pool input")
            self._require_list(data.get("competitors"), "competitors")
            self._require_list(data.get("matches"), "matches")
            rows = calculate_pool_standings(
                data.get("competitors") or [], data.get("matches") or [], chain
            )
            rows = mark_advancing(rows, advancement_count_for(rule, advancement_count))
            if options["format"] == "json":
                self.stdout.write(
                    json.dumps({"standings": [row.to_dict() for row in rows]}, indent=2)
                )
            else:
                self._write_table(rows)
                self.stdout.write(self.style.SUCCESS(f"Ranked {len(rows)} competitors"))

    def _load(self, path):
        if not os.path.exists(path):
            raise CommandError(f"Input file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error reading input file: {e}")

        if not isinstance(data, dict):
            raise CommandError("Input file must contain a JSON object")
        return data

    def _require_list(self, value, field):
        if value is not None and not isinstance(value, list):
            raise CommandError(f'"{field}" must be a list, got {type(value).__name__}')

    def _handle_pools(self, data, chain, rule, advancement_count, options):
        pools = data.get("pools")
        if not isinstance(pools, dict):
            raise CommandError('"pools" must map pool names to competitor lists')
        for name, competitors in pools.items():
            self._require_list(competitors, f"pools.{name}")
        self._require_list(data.get("matches"), "matches")

        all_standings = calculate_all_pool_standings(pools, data.get("matches") or [], chain)
        qualification = determine_qualifiers(
            all_standings,
            rule,
            advancement_count=advancement_count,
            plate_enabled=options["plate"],
        )
        all_standings = mark_qualified(all_standings, qualification)

        if options["pool"]:
            if options["pool"] not in all_standings:
                raise CommandError(f"Unknown pool: {options['pool']}")
            all_standings = {options["pool"]: all_standings[options["pool"]]}

        logger.debug("Computed standings for %d pools", len(all_standings))

        if options["format"] == "json":
            payload = {
                "pools": {
                    name: [row.to_dict() for row in rows]
                    for name, rows in all_standings.items()
                },
                "mainBracket": qualification.main_bracket_ids(),
                "plateBracket": qualification.plate_bracket_ids(),
            }
            self.stdout.write(json.dumps(payload, indent=2))
            return

        for name, rows in all_standings.items():
            self.stdout.write(name)
            self._write_table(rows)
            self.stdout.write("")
        if options["plate"]:
            self.stdout.write(f"Plate: {', '.join(qualification.plate_bracket_ids())}")
        self.stdout.write(
            self.style.SUCCESS(f"Ranked {len(all_standings)} pools")
        )

    def _write_table(self, rows):
        self.stdout.write(
            f"{'#':>3}  {'Team':<24} {'W':>3} {'L':>3} {'PF':>5} {'PA':>5} {'Diff':>5}"
        )
        for row in rows:
            marker = " *" if row.is_advancing else ""
            self.stdout.write(
                f"{row.rank:>3}  {row.name:<24} {row.wins:>3} {row.losses:>3} "
                f"{row.points_for:>5g} {row.points_against:>5g} "
                f"{row.point_differential:>+5g}{marker}"
            )
