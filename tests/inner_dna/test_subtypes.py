import itertools

import pytest

from services.inner_dna_engine import subtypes
from services.inner_dna_engine.models import (
    IncompleteAnswerSetError,
    Instinct,
    InvalidInputError,
    NotFoundError,
)

SP = Instinct.SELF_PRESERVATION
SX = Instinct.ONE_TO_ONE
SO = Instinct.SOCIAL

# sp beats sx, so beats sp, sx beats so
CIRCULAR = {1: "sp", 2: "so", 3: "sx"}


def all_outcome_sets(bank):
    choices = [(b.id, (b.left.value, b.right.value)) for b in bank.battles]
    for winners in itertools.product(*(pair for _, pair in choices)):
        yield {battle_id: winner for (battle_id, _), winner in zip(choices, winners)}


def test_exactly_two_outcome_sets_are_circular(bank):
    circular = 0
    for raw in all_outcome_sets(bank):
        outcomes = subtypes.parse_battles(bank, raw)
        wins = subtypes.tally_wins(bank, outcomes)
        assert sum(wins.values()) == 3
        if subtypes.is_circular(wins):
            circular += 1
            assert subtypes.resolve_stack(bank, outcomes) is None
        else:
            order = subtypes.resolve_stack(bank, outcomes)
            assert [wins[i] for i in order] == [2, 1, 0]
    assert circular == 2


def test_strict_order_from_clean_sweep(bank):
    outcomes = subtypes.parse_battles(bank, {1: "sx", 2: "so", 3: "sx"})
    order = subtypes.resolve_stack(bank, outcomes)
    assert order == [SX, SO, SP]
    result = subtypes.build_result(order)
    assert result.tokens == {SX: 7, SO: 2, SP: 1}
    assert result.subtype_code == "SX07-SO02-SP01"
    assert not result.resolved_by_tiebreak


def test_circular_tiebreak_orders_by_dominant(bank):
    outcomes = subtypes.parse_battles(bank, CIRCULAR)
    order = subtypes.resolve_stack(bank, outcomes, dominant=SP)
    assert order == [SP, SX, SO]
    result = subtypes.build_result(order, resolved_by_tiebreak=True)
    assert result.tokens == {SP: 7, SX: 2, SO: 1}
    assert result.subtype_code == "SP07-SX02-SO01"
    assert result.resolved_by_tiebreak


def test_every_dominant_gives_a_full_stack(bank):
    outcomes = subtypes.parse_battles(bank, CIRCULAR)
    for dominant in Instinct:
        order = subtypes.resolve_stack(bank, outcomes, dominant=dominant)
        assert order[0] == dominant
        assert sorted(order) == sorted(Instinct)


def test_tiebreak_refused_for_strict_order(bank):
    outcomes = subtypes.parse_battles(bank, {1: "sp", 2: "sp", 3: "sx"})
    with pytest.raises(InvalidInputError, match="no tiebreak"):
        subtypes.resolve_stack(bank, outcomes, dominant=SX)


def test_tokens_always_sum_to_ten():
    for order in itertools.permutations(Instinct):
        assert sum(subtypes.assign_tokens(order).values()) == 10


def test_winner_is_case_insensitive(bank):
    outcomes = subtypes.parse_battles(bank, {"3": "SO", 1: SP, 2: "sP"})
    assert [o.battle_id for o in outcomes] == [1, 2, 3]
    assert [o.winner for o in outcomes] == [SP, SP, SO]


def test_unknown_battle_is_not_found(bank):
    with pytest.raises(NotFoundError, match="4"):
        subtypes.parse_battles(bank, {1: "sp", 2: "sp", 4: "sx"})


@pytest.mark.parametrize("battle_id", ["abc", None, "1.5"])
def test_non_numeric_battle_id_is_invalid_input(bank, battle_id):
    with pytest.raises(InvalidInputError, match="must be a number"):
        subtypes.parse_battles(bank, {battle_id: "sp", 2: "sx", 3: "so"})


def test_winner_outside_battle_is_rejected(bank):
    with pytest.raises(InvalidInputError, match="not in it"):
        subtypes.parse_battles(bank, {1: "so", 2: "sp", 3: "sx"})


def test_non_instinct_winner_is_rejected(bank):
    with pytest.raises(InvalidInputError, match="not an instinct"):
        subtypes.parse_battles(bank, {1: "xx", 2: "sp", 3: "sx"})


def test_duplicate_battle_is_rejected(bank):
    with pytest.raises(InvalidInputError, match="more than once"):
        subtypes.parse_battles(bank, {1: "sp", "1": "sx", 2: "sp", 3: "sx"})


def test_missing_battle_is_incomplete(bank):
    with pytest.raises(IncompleteAnswerSetError, match="3"):
        subtypes.parse_battles(bank, {1: "sp", 2: "sp"})
