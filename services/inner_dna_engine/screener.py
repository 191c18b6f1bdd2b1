# services/inner_dna_engine/screener.py
# Forced-choice screener: 36 binary questions tallied into 9 type buckets.

import logging
from typing import Dict, List, Optional, Sequence

from services.inner_dna_engine.assessment import ScreenerResponse, ScreenerResult
from services.inner_dna_engine.models import (
    AnswerOption,
    IncompleteAnswerSetError,
    PersonalityType,
    ReferenceBank,
)

logger = logging.getLogger(__name__)

TOP_CANDIDATE_COUNT = 3


def build_response(bank: ReferenceBank, question_number: int, option: AnswerOption) -> ScreenerResponse:
    question = bank.screener_question(question_number)
    return ScreenerResponse(
        question_number=question_number,
        selected_option=option,
        resolved_category=question.category_for(option),
    )


def upsert_response(responses: Sequence[ScreenerResponse], response: ScreenerResponse) -> List[ScreenerResponse]:
    """Returns a new list where ``response`` replaces any earlier answer to the same question."""
    updated = [r for r in responses if r.question_number != response.question_number]
    updated.append(response)
    updated.sort(key=lambda r: r.question_number)
    return updated


def tally(bank: ReferenceBank, responses: Sequence[ScreenerResponse]) -> Dict[PersonalityType, int]:
    # Always a full recount, so revisions never leave stale contributions behind.
    scores = {t: 0 for t in PersonalityType}
    for response in responses:
        scores[bank.category_to_type[response.resolved_category]] += 1
    return scores


def rank_types(scores: Dict[PersonalityType, int]) -> List[PersonalityType]:
    """Types by tally, highest first; equal tallies go to the lowest type id."""
    return sorted(PersonalityType, key=lambda t: (-scores[t], int(t)))


def next_question_number(bank: ReferenceBank, responses: Sequence[ScreenerResponse]) -> Optional[int]:
    answered = {r.question_number for r in responses}
    for question in sorted(bank.screener_questions, key=lambda q: q.id):
        if question.id not in answered:
            return question.id
    return None


def is_complete(bank: ReferenceBank, responses: Sequence[ScreenerResponse]) -> bool:
    return next_question_number(bank, responses) is None


def score_screener(bank: ReferenceBank, responses: Sequence[ScreenerResponse]) -> ScreenerResult:
    missing = len(bank.screener_questions) - len({r.question_number for r in responses})
    if missing > 0:
        raise IncompleteAnswerSetError(f"Screener scoring needs all answers; {missing} question(s) unanswered")

    scores = tally(bank, responses)
    ranked = rank_types(scores)
    top = ranked[:TOP_CANDIDATE_COUNT]
    gap = scores[ranked[0]] - scores[ranked[1]]
    logger.debug(f"Screener scored: top={[int(t) for t in top]} gap={gap}")
    return ScreenerResult(scores=scores, top_candidate_types=top, gap=gap)
