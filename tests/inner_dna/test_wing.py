import pytest

from services.inner_dna_engine import wing
from services.inner_dna_engine.models import (
    AnswerOption,
    IncompleteAnswerSetError,
    InvalidInputError,
    NotFoundError,
    PersonalityType,
)


def all_answers(bank, resolved_type, picks):
    questions = bank.wing_set(resolved_type).questions
    return {q.id: pick for q, pick in zip(questions, picks)}


def test_unanimous_b_picks_choose_upper_wing(bank):
    answers = all_answers(bank, 1, "BBBBB")
    result = wing.score_wing_answers(bank, 1, wing.parse_wing_answers(bank, 1, answers))
    assert result.wing == PersonalityType.HELPER
    assert (result.count_a, result.count_b, result.margin) == (0, 5, 5)
    assert not result.is_balanced


def test_unanimous_a_picks_choose_lower_wing(bank):
    answers = all_answers(bank, 1, "AAAAA")
    result = wing.score_wing_answers(bank, 1, wing.parse_wing_answers(bank, 1, answers))
    assert result.wing == 9


def test_narrow_majority_is_balanced(bank):
    answers = all_answers(bank, 5, "ABABA")
    result = wing.score_wing_answers(bank, 5, wing.parse_wing_answers(bank, 5, answers))
    assert result.wing == 4
    assert result.margin == 1
    assert result.is_balanced


def test_tie_goes_to_wing_a(bank):
    result = wing.determine_wing(bank, PersonalityType(9), 2, 2)
    assert result.wing == 8
    assert result.margin == 0


def test_answers_are_case_insensitive(bank):
    answers = all_answers(bank, 3, ["a", "b", "A", AnswerOption.B, "b"])
    responses = wing.parse_wing_answers(bank, 3, answers)
    assert [r.selected for r in responses] == [AnswerOption.A, AnswerOption.B, AnswerOption.A, AnswerOption.B, AnswerOption.B]


def test_unknown_question_id_is_rejected(bank):
    answers = all_answers(bank, 1, "AAAAA")
    answers["2_q1"] = "A"
    with pytest.raises(InvalidInputError, match="Unknown wing question"):
        wing.parse_wing_answers(bank, 1, answers)


def test_missing_answer_is_rejected(bank):
    answers = all_answers(bank, 1, "AAAA")
    with pytest.raises(IncompleteAnswerSetError, match="1_q5"):
        wing.parse_wing_answers(bank, 1, answers)


def test_bad_value_is_rejected(bank):
    answers = all_answers(bank, 1, ["A", "A", "C", "A", "A"])
    with pytest.raises(InvalidInputError, match="must be A or B"):
        wing.parse_wing_answers(bank, 1, answers)


def test_missing_wing_set_raises_not_found(bank):
    trimmed = bank.model_copy(update={"wing_sets": [s for s in bank.wing_sets if s.core_type != 6]})
    with pytest.raises(NotFoundError):
        wing.wing_set_for(trimmed, PersonalityType(6))
