"""
Standings settings, read lazily from Django settings.

STANDINGS_TIEBREAKERS       default tiebreaker chain
STANDINGS_ADVANCEMENT_RULE  top_1, top_2 or top_n_plus_best (default top_2)
STANDINGS_ADVANCEMENT_COUNT main-bracket size for top_n_plus_best
"""

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from courtside.standings_core.qualification import (
    AdvancementRule,
    InvalidAdvancementRuleError,
    parse_advancement_rule,
)
from courtside.standings_core.tiebreaks import (
    DEFAULT_TIEBREAKERS,
    InvalidTiebreakerError,
    parse_tiebreakers,
)


def get_default_tiebreakers():
    chain = getattr(settings, "STANDINGS_TIEBREAKERS", None)
    if chain is None:
        return DEFAULT_TIEBREAKERS
    try:
        return parse_tiebreakers(chain)
    except InvalidTiebreakerError as e:
        raise ImproperlyConfigured(f"STANDINGS_TIEBREAKERS: {e}")


def get_advancement_rule():
    rule = getattr(settings, "STANDINGS_ADVANCEMENT_RULE", AdvancementRule.TOP_2.value)
    try:
        return parse_advancement_rule(rule)
    except InvalidAdvancementRuleError as e:
        raise ImproperlyConfigured(f"STANDINGS_ADVANCEMENT_RULE: {e}")


def get_advancement_count():
    count = getattr(settings, "STANDINGS_ADVANCEMENT_COUNT", None)
    if count is not None and (not isinstance(count, int) or count < 1):
        raise ImproperlyConfigured(
            f"STANDINGS_ADVANCEMENT_COUNT must be a positive integer, got {count!r}"
        )
    return count
