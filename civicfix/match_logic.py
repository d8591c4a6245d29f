"""
Official matcher.

Scores every candidate official's jurisdiction against an issue location,
ranks them and picks a best match plus a few alternates. Pure functions:
the caller fetches candidates and acts on the result.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from .config import ALTERNATIVE_THRESHOLD, BEST_MATCH_THRESHOLD, MAX_ALTERNATIVES, Settings
from .logging_config import get_logger
from .match_record import LocationQuery, MatchResult, OfficialCandidate, ScoredCandidate
from .match_score import (
    CITY_POINTS,
    COVERAGE_AREA_POINTS,
    DISTRICT_POINTS,
    EXACT_AREA_POINTS,
    EXACT_PINCODE_POINTS,
    EXACT_WARD_POINTS,
    STATE_POINTS,
    nearby_pincode_points,
    pincode_equals,
    text_equals,
    within_bounds,
)

logger = get_logger(__name__)

Rule = Callable[[LocationQuery, OfficialCandidate], int]

def _fixed(points: int, test: Callable[[LocationQuery, OfficialCandidate], bool]) -> Rule:
    return lambda q, c: points if test(q, c) else 0

#evaluation order is the order of match_reasons
SCORING_RULES: Tuple[Tuple[str, Rule], ...] = (
    ("Exact pincode match",
     _fixed(EXACT_PINCODE_POINTS, lambda q, c: pincode_equals(c.pincode, q.pincode))),
    ("Exact ward match",
     _fixed(EXACT_WARD_POINTS, lambda q, c: text_equals(c.ward, q.ward))),
    ("Exact area match",
     _fixed(EXACT_AREA_POINTS, lambda q, c: text_equals(c.area, q.area))),
    ("Within coverage area",
     _fixed(COVERAGE_AREA_POINTS, lambda q, c: within_bounds(c.geo_bounds, q.latitude, q.longitude))),
    ("City match",
     _fixed(CITY_POINTS, lambda q, c: text_equals(c.city, q.city))),
    ("District match",
     _fixed(DISTRICT_POINTS, lambda q, c: text_equals(c.district, q.district))),
    ("State match",
     _fixed(STATE_POINTS, lambda q, c: text_equals(c.state, q.state))),
    #independent of the exact rule, identical pincodes collect both
    ("Nearby pincode",
     lambda q, c: nearby_pincode_points(c.pincode, q.pincode)),
)

def score_candidate(query: LocationQuery, candidate: OfficialCandidate) -> ScoredCandidate:
    score = 0
    reasons: List[str] = []

    for reason, rule in SCORING_RULES:
        points = rule(query, candidate)
        if points:
            score += points
            reasons.append(reason)

    return ScoredCandidate(candidate=candidate, score=score, match_reasons=tuple(reasons))

#stable sort, so equal scores keep input order
def rank_candidates(query: LocationQuery,
                    candidates: Sequence[OfficialCandidate]) -> List[ScoredCandidate]:
    scored = [score_candidate(query, c) for c in candidates]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored

def select_matches(ranking: Sequence[ScoredCandidate],
                   best_threshold: int = BEST_MATCH_THRESHOLD,
                   alt_threshold: int = ALTERNATIVE_THRESHOLD,
                   max_alternatives: int = MAX_ALTERNATIVES) -> MatchResult:
    """
    Pick the best match and alternates from an already ranked list.

    The top-ranked candidate is the best match only when it reaches
    best_threshold. The next max_alternatives ranks are each kept when they
    reach alt_threshold; dropped slots are not backfilled from lower ranks.
    """
    if not ranking:
        return MatchResult()

    top = ranking[0]
    best = top if top.score >= best_threshold else None

    alternatives = tuple(
        s for s in ranking[1:1 + max_alternatives]
        if s.score >= alt_threshold
    )

    return MatchResult(
        best_match=best,
        alternatives=alternatives,
        total_checked=len(ranking),
        ranking=tuple(ranking),
    )

def match_official(query: LocationQuery,
                   candidates: Sequence[OfficialCandidate],
                   settings: Optional[Settings] = None) -> MatchResult:
    """Score, rank and select officials for one location."""
    ranking = rank_candidates(query, candidates)
    if not ranking:
        logger.debug("No candidates to match against")
        return MatchResult()

    top = ranking[0]
    logger.debug(
        f"Scored {len(ranking)} officials, top {top.official_id} "
        f"({top.score}: {', '.join(top.match_reasons) or 'no reasons'})"
    )

    if settings is None:
        return select_matches(ranking)

    return select_matches(
        ranking,
        best_threshold=settings.best_match_threshold,
        alt_threshold=settings.alternative_threshold,
        max_alternatives=settings.max_alternatives,
    )
