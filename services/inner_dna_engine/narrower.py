# services/inner_dna_engine/narrower.py
# Adaptive scenario narrower: picks between the screener's top 3 candidates
# by presenting scenarios and stopping once a dominance rule fires.

import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from services.inner_dna_engine.assessment import (
    ExitReason,
    NarrowingResult,
    ScenarioResponse,
    ScreenerResult,
)
from services.inner_dna_engine.models import PersonalityType, ReferenceBank, Scenario

logger = logging.getLogger(__name__)

# --- Constants ---
# Empirical thresholds, not derived from a probabilistic model.

MIN_SCENARIOS = 3
EXTENDED_SCENARIOS = 5
FORCED_EXIT_SCENARIOS = 8
# Hard cap only. The forced exit at FORCED_EXIT_SCENARIOS always fires first, so
# MAX_REACHED never ends a run under the current rules.
MAX_SCENARIOS = 12

DECISIVE_SCREENER_GAP = 3
ADAPTIVE_THRESHOLD = 0.6
CONTENDER_FLOOR = 0.15

BASE_RESPONSE_WEIGHT = 0.15
CONFIDENCE_DECAY_FACTOR = 0.95
CONFIDENCE_FLOOR = 0.01
CONFIDENCE_CEILING = 0.99

EXIT_CONFIDENCE = {
    ExitReason.SCREENER_AGREEMENT: 0.92,
    ExitReason.CLEAR_LEAD: 0.93,
    ExitReason.NARROW_LEAD: 0.91,
    ExitReason.EXTENDED_LEAD: 0.90,
    ExitReason.FORCED: 0.85,
    ExitReason.MAX_REACHED: 0.85,
    ExitReason.POOL_EXHAUSTED: 0.85,
}


# --- Confidence bookkeeping ---

def _normalize(distribution: Dict[PersonalityType, float]) -> Dict[PersonalityType, float]:
    total = sum(distribution.values())
    return {t: value / total for t, value in distribution.items()}


def initial_distribution(screener: ScreenerResult) -> Dict[PersonalityType, float]:
    """Prior over the candidates, seeded from their screener tallies when there are any."""
    candidates = screener.top_candidate_types
    tallies = {t: screener.scores.get(t, 0) for t in candidates}
    if sum(tallies.values()) <= 0:
        return {t: 1.0 / len(candidates) for t in candidates}
    return _normalize({t: float(v) for t, v in tallies.items()})


def update_distribution(
    distribution: Dict[PersonalityType, float],
    selected_type: PersonalityType,
    option_confidence: float,
) -> Dict[PersonalityType, float]:
    updated = {}
    for t, value in distribution.items():
        if t == selected_type:
            value = value + BASE_RESPONSE_WEIGHT * option_confidence
        else:
            value = value * CONFIDENCE_DECAY_FACTOR
        updated[t] = min(CONFIDENCE_CEILING, max(CONFIDENCE_FLOOR, value))
    return _normalize(updated)


def confidence_distribution(
    screener: ScreenerResult, responses: Sequence[ScenarioResponse]
) -> Dict[PersonalityType, float]:
    distribution = initial_distribution(screener)
    for response in responses:
        distribution = update_distribution(distribution, response.selected_type, response.option_confidence)
    return distribution


def leading_type(screener: ScreenerResult, distribution: Dict[PersonalityType, float]) -> PersonalityType:
    candidates = screener.top_candidate_types
    return max(candidates, key=lambda t: (distribution[t], -candidates.index(t)))


def pick_counts(screener: ScreenerResult, responses: Sequence[ScenarioResponse]) -> Dict[PersonalityType, int]:
    counts = {t: 0 for t in screener.top_candidate_types}
    for response in responses:
        counts[response.selected_type] += 1
    return counts


def dominance(
    screener: ScreenerResult,
    counts: Dict[PersonalityType, int],
    distribution: Dict[PersonalityType, float],
) -> Tuple[PersonalityType, int]:
    """Type with the most picks and its lead over the runner-up.

    Equal pick counts go to the higher confidence, then to screener order.
    """
    candidates = screener.top_candidate_types
    ranked = sorted(candidates, key=lambda t: (-counts[t], -distribution[t], candidates.index(t)))
    runner_up = counts[ranked[1]] if len(ranked) > 1 else 0
    return ranked[0], counts[ranked[0]] - runner_up


# --- Termination ---

def check_termination(
    screener: ScreenerResult,
    responses: Sequence[ScenarioResponse],
) -> Optional[Tuple[ExitReason, PersonalityType]]:
    count = len(responses)
    if count < MIN_SCENARIOS:
        return None

    distribution = confidence_distribution(screener, responses)
    counts = pick_counts(screener, responses)
    dominant, gap = dominance(screener, counts, distribution)
    dominant_count = counts[dominant]

    if (
        screener.gap >= DECISIVE_SCREENER_GAP
        and dominant == screener.top_candidate_types[0]
        and dominant_count >= 2
        and gap >= 1
    ):
        return ExitReason.SCREENER_AGREEMENT, dominant
    if dominant_count >= 3 and gap >= 2:
        return ExitReason.CLEAR_LEAD, dominant
    if dominant_count >= 3 and gap >= 1:
        return ExitReason.NARROW_LEAD, dominant
    if count >= EXTENDED_SCENARIOS and gap >= 2:
        return ExitReason.EXTENDED_LEAD, dominant
    if count >= FORCED_EXIT_SCENARIOS:
        return ExitReason.FORCED, dominant
    if count >= MAX_SCENARIOS:
        return ExitReason.MAX_REACHED, dominant
    return None


def hero_scores(
    candidates: Sequence[PersonalityType], winner: PersonalityType, confidence: float
) -> Dict[PersonalityType, float]:
    # Reporting only: not a calibrated posterior.
    losers = [t for t in candidates if t != winner]
    share = (1.0 - confidence) / len(losers) if losers else 0.0
    return {t: (confidence if t == winner else share) for t in candidates}


def build_result(
    screener: ScreenerResult,
    responses: Sequence[ScenarioResponse],
    exit_reason: ExitReason,
    winner: PersonalityType,
) -> NarrowingResult:
    confidence = EXIT_CONFIDENCE[exit_reason]
    return NarrowingResult(
        resolved_type=winner,
        confidence=confidence,
        exit_reason=exit_reason,
        scenario_count=len(responses),
        pick_counts=pick_counts(screener, responses),
        hero_scores=hero_scores(screener.top_candidate_types, winner, confidence),
    )


# --- Adaptive selection ---

def selection_rng(salt: str, assessment_id: str, scenario_number: int) -> random.Random:
    return random.Random(f"{salt}:{assessment_id}:{scenario_number}")


def select_scenario(
    bank: ReferenceBank,
    screener: ScreenerResult,
    responses: Sequence[ScenarioResponse],
    rng: random.Random,
) -> Optional[Scenario]:
    """
    Chooses the next scenario. Once the leader's confidence passes the adaptive
    threshold with at least two contenders left, unused targeted scenarios
    that discriminate between those contenders are preferred; otherwise an
    unused general scenario is drawn.
    """
    used = {r.scenario_id for r in responses}
    distribution = confidence_distribution(screener, responses)
    contenders = {t for t, value in distribution.items() if value >= CONTENDER_FLOOR}

    pool: List[Scenario] = []
    if max(distribution.values()) >= ADAPTIVE_THRESHOLD and len(contenders) >= 2:
        pool = [
            s for s in bank.targeted_scenarios
            if s.id not in used and len(contenders & set(s.target_types)) >= 2
        ]
        if pool:
            logger.debug(f"Adaptive selection: {len(pool)} targeted scenario(s) for contenders {sorted(int(t) for t in contenders)}")
    if not pool:
        pool = [s for s in bank.general_scenarios if s.id not in used]
    if not pool:
        return None
    return rng.choice(pool)


def presented_options(scenario: Scenario, screener: ScreenerResult):
    """The options shown to the respondent: one per remaining candidate."""
    return scenario.options_for(screener.top_candidate_types)
