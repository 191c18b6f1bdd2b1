# services/inner_dna_engine/wing.py
# Paired-preference resolver: 5 A/B statements decide between the two
# neighbouring wing types.

import logging
from typing import Dict, List

from services.inner_dna_engine.assessment import WingResponse, WingResult
from services.inner_dna_engine.models import (
    AnswerOption,
    IncompleteAnswerSetError,
    InvalidInputError,
    NotFoundError,
    PersonalityType,
    ReferenceBank,
    WingQuestionSet,
)

logger = logging.getLogger(__name__)

BALANCED_MARGIN = 1


def wing_set_for(bank: ReferenceBank, resolved_type: PersonalityType) -> WingQuestionSet:
    wing_set = bank.wing_set(resolved_type)
    if wing_set is None:
        raise NotFoundError(f"No wing questions for type {int(resolved_type)}")
    return wing_set


def determine_wing(
    bank: ReferenceBank, resolved_type: PersonalityType, count_a: int, count_b: int
) -> WingResult:
    """Majority vote between the two wings; a tie goes to wing A."""
    wing_set = wing_set_for(bank, resolved_type)
    wing = wing_set.wing_a if count_a >= count_b else wing_set.wing_b
    margin = abs(count_a - count_b)
    return WingResult(
        wing=wing,
        count_a=count_a,
        count_b=count_b,
        margin=margin,
        is_balanced=margin <= BALANCED_MARGIN,
    )


def parse_wing_answers(
    bank: ReferenceBank, resolved_type: PersonalityType, answers: Dict[str, str]
) -> List[WingResponse]:
    """Validates one A/B pick per statement of the resolved type's wing set."""
    wing_set = wing_set_for(bank, resolved_type)
    known_ids = [q.id for q in wing_set.questions]

    unknown = sorted(set(answers) - set(known_ids))
    if unknown:
        raise InvalidInputError(f"Unknown wing question id(s) for type {int(resolved_type)}: {', '.join(unknown)}")
    missing = [qid for qid in known_ids if qid not in answers]
    if missing:
        raise IncompleteAnswerSetError(f"Wing answers missing for: {', '.join(missing)}")

    responses = []
    for question_id in known_ids:
        raw = answers[question_id]
        try:
            selected = raw if isinstance(raw, AnswerOption) else AnswerOption(str(raw).upper())
        except ValueError:
            raise InvalidInputError(f"Wing answer for '{question_id}' must be A or B, got '{raw}'")
        responses.append(WingResponse(question_id=question_id, selected=selected))
    return responses


def score_wing_answers(
    bank: ReferenceBank, resolved_type: PersonalityType, responses: List[WingResponse]
) -> WingResult:
    count_a = sum(1 for r in responses if r.selected == AnswerOption.A)
    count_b = len(responses) - count_a
    result = determine_wing(bank, resolved_type, count_a, count_b)
    logger.debug(f"Wing for type {int(resolved_type)}: {int(result.wing)} (A={count_a}, B={count_b})")
    return result
