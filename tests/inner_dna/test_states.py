import itertools

import pytest

from services.inner_dna_engine import states
from services.inner_dna_engine.models import (
    IncompleteAnswerSetError,
    InvalidInputError,
    NotFoundError,
    PersonalityType,
    StateCode,
)

LEVEL_ORDER = list(StateCode)


def rank_by(bank, key):
    return [
        {"triad_id": triad.id, "order": [c.value for c in sorted(triad.states, key=key)]}
        for triad in bank.triads
    ]


def test_level_ordered_ranking(bank):
    rankings = states.parse_rankings(bank, rank_by(bank, LEVEL_ORDER.index))
    result = states.score_states(bank, rankings)

    assert result.scores == {
        StateCode.GRN: 12, StateCode.BLU: 9, StateCode.YLW: 6, StateCode.ORG: 3, StateCode.RED: 0,
    }
    assert result.primary_state == StateCode.GRN
    assert result.secondary_state == StateCode.BLU
    assert (result.primary_percent, result.secondary_percent) == (57, 43)
    assert result.state_code == "GRNBLU-5743"


def test_reverse_ranking_puts_red_first(bank):
    rankings = states.parse_rankings(bank, rank_by(bank, lambda c: -LEVEL_ORDER.index(c)))
    result = states.score_states(bank, rankings)
    assert result.state_code == "REDORG-5743"


def test_points_are_conserved_for_any_ranking(bank):
    permutations = list(itertools.permutations(range(3)))
    for offset in range(len(permutations)):
        raw = []
        for i, triad in enumerate(bank.triads):
            perm = permutations[(i + offset) % len(permutations)]
            raw.append({"triad_id": triad.id, "order": [triad.states[p] for p in perm]})
        result = states.score_states(bank, states.parse_rankings(bank, raw))
        assert sum(result.scores.values()) == 30
        assert result.primary_percent + result.secondary_percent == 100


def test_equal_scores_go_to_the_healthier_state(bank):
    scores = {StateCode.GRN: 0, StateCode.BLU: 0, StateCode.YLW: 0, StateCode.ORG: 0, StateCode.RED: 0}
    for triad in bank.triads:
        for code, points in zip(triad.states, states.RANK_POINTS):
            scores[code] += points
    rankings = states.parse_rankings(bank, [
        {"triad_id": t.id, "order": list(t.states)} for t in bank.triads
    ])
    result = states.score_states(bank, rankings)
    top = max(scores.values())
    leaders = [code for code in LEVEL_ORDER if scores[code] == top]
    assert result.primary_state == leaders[0]


def test_state_code_format():
    assert states.state_code(StateCode.YLW, StateCode.GRN, 60, 40) == "YLWGRN-6040"
    assert states.state_code(StateCode.BLU, StateCode.RED, 100, 0) == "BLURED-10000"


def test_rankings_are_returned_in_triad_order(bank):
    raw = list(reversed(rank_by(bank, LEVEL_ORDER.index)))
    parsed = states.parse_rankings(bank, raw)
    assert [r.triad_id for r in parsed] == [t.id for t in bank.triads]


def test_unknown_triad_is_not_found(bank):
    raw = rank_by(bank, LEVEL_ORDER.index)
    raw[0]["triad_id"] = 42
    with pytest.raises(NotFoundError, match="42"):
        states.parse_rankings(bank, raw)


def test_duplicate_state_in_ranking_is_rejected(bank):
    raw = rank_by(bank, LEVEL_ORDER.index)
    raw[0]["order"] = [raw[0]["order"][0]] * 3
    with pytest.raises(InvalidInputError, match="must order exactly"):
        states.parse_rankings(bank, raw)


def test_state_from_another_triad_is_rejected(bank):
    raw = rank_by(bank, LEVEL_ORDER.index)
    outsider = next(c for c in StateCode if c.value not in raw[0]["order"])
    raw[0]["order"][2] = outsider.value
    with pytest.raises(InvalidInputError):
        states.parse_rankings(bank, raw)


def test_triad_ranked_twice_is_rejected(bank):
    raw = rank_by(bank, LEVEL_ORDER.index)
    raw.append(dict(raw[0]))
    with pytest.raises(InvalidInputError, match="more than once"):
        states.parse_rankings(bank, raw)


def test_missing_triad_is_incomplete(bank):
    raw = rank_by(bank, LEVEL_ORDER.index)[:-1]
    with pytest.raises(IncompleteAnswerSetError, match="10"):
        states.parse_rankings(bank, raw)


def test_malformed_ranking_is_invalid(bank):
    with pytest.raises(InvalidInputError, match="Malformed"):
        states.parse_rankings(bank, [{"triad_id": 1, "order": ["GRN", "BLU"]}])


def test_triad_prompts_rotate_statements(bank):
    prompts = states.triad_prompts(bank, PersonalityType.REFORMER)
    assert len(prompts) == 10
    grn_statements = [
        member["statement"]
        for prompt in prompts
        for member in prompt["states"]
        if member["state"] == "GRN"
    ]
    assert len(grn_statements) == 6
    behaviors = bank.state_behaviors[PersonalityType.REFORMER][StateCode.GRN]
    assert grn_statements[:3] == behaviors
    assert grn_statements[3:] == behaviors
