# services/inner_dna_engine/states.py
# Ranked-triad scorer over the 5 behavioural states.

import logging
import math
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError

from services.inner_dna_engine.assessment import StateRanking, StateResult
from services.inner_dna_engine.models import (
    IncompleteAnswerSetError,
    InvalidInputError,
    NotFoundError,
    PersonalityType,
    ReferenceBank,
    StateCode,
)

logger = logging.getLogger(__name__)

# Points for most, middle and least.
RANK_POINTS = (2, 1, 0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_rankings(bank: ReferenceBank, rankings: Sequence[Any]) -> List[StateRanking]:
    """
    Validates submitted rankings: each must be a strict ordering of its triad's
    three states, each triad at most once, and all triads present.
    """
    parsed: Dict[int, StateRanking] = {}
    for raw in rankings:
        try:
            ranking = raw if isinstance(raw, StateRanking) else StateRanking.model_validate(raw)
        except ValidationError as e:
            raise InvalidInputError(f"Malformed state ranking: {e.errors()[0].get('msg')}")

        triad = bank.triad(ranking.triad_id)
        if triad is None:
            raise NotFoundError(f"Unknown triad id: {ranking.triad_id}")
        if ranking.triad_id in parsed:
            raise InvalidInputError(f"Triad {ranking.triad_id} ranked more than once")
        if sorted(ranking.order) != sorted(triad.states):
            raise InvalidInputError(
                f"Ranking for triad {ranking.triad_id} must order exactly "
                f"{', '.join(s.value for s in triad.states)}"
            )
        parsed[ranking.triad_id] = ranking

    missing = [t.id for t in bank.triads if t.id not in parsed]
    if missing:
        raise IncompleteAnswerSetError(f"State rankings missing for triad(s): {', '.join(str(m) for m in missing)}")
    return [parsed[t.id] for t in bank.triads]


def tally_points(bank: ReferenceBank, rankings: Sequence[StateRanking]) -> Dict[StateCode, int]:
    scores = {state.code: 0 for state in bank.states}
    for ranking in rankings:
        for code, points in zip(ranking.order, RANK_POINTS):
            scores[code] += points
    return scores


def state_code(primary: StateCode, secondary: StateCode, primary_percent: int, secondary_percent: int) -> str:
    return f"{primary.value}{secondary.value}-{primary_percent:02d}{secondary_percent:02d}"


def score_states(bank: ReferenceBank, rankings: Sequence[StateRanking]) -> StateResult:
    if len(rankings) != len(bank.triads):
        raise IncompleteAnswerSetError(
            f"State scoring needs {len(bank.triads)} rankings, got {len(rankings)}"
        )

    scores = tally_points(bank, rankings)
    levels = {state.code: state.level for state in bank.states}
    # Equal scores go to the healthier (lower level) state.
    ranked = sorted(scores, key=lambda code: (-scores[code], levels[code]))
    primary, secondary = ranked[0], ranked[1]

    pair_total = scores[primary] + scores[secondary]
    primary_percent = _round_half_up(scores[primary] / pair_total * 100) if pair_total else 50
    secondary_percent = 100 - primary_percent

    logger.debug(f"State scores: {dict((c.value, s) for c, s in scores.items())}")
    return StateResult(
        scores=scores,
        primary_state=primary,
        primary_percent=primary_percent,
        secondary_state=secondary,
        secondary_percent=secondary_percent,
        state_code=state_code(primary, secondary, primary_percent, secondary_percent),
    )


def triad_prompts(bank: ReferenceBank, personality_type: PersonalityType) -> List[Dict[str, Any]]:
    """Each triad with one behaviour statement per member state, rotating through the statements."""
    behaviors = bank.state_behaviors[personality_type]
    seen: Dict[StateCode, int] = {}
    prompts = []
    for triad in bank.triads:
        members = []
        for code in triad.states:
            statements = behaviors[code]
            index = seen.get(code, 0)
            seen[code] = index + 1
            state = bank.state(code)
            members.append({
                "state": code.value,
                "color": state.color,
                "statement": statements[index % len(statements)],
            })
        prompts.append({"triad_id": triad.id, "states": members})
    return prompts
