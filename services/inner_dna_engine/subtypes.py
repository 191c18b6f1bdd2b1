# services/inner_dna_engine/subtypes.py
# Round-robin tiebreak resolver for the instinct stack.

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from services.inner_dna_engine.assessment import SubtypeBattleOutcome, SubtypeResult
from services.inner_dna_engine.models import (
    IncompleteAnswerSetError,
    Instinct,
    InvalidInputError,
    NotFoundError,
    ReferenceBank,
)

logger = logging.getLogger(__name__)

# Tokens by rank position, never by margin.
TOKEN_DISTRIBUTION = (7, 2, 1)


def parse_battles(bank: ReferenceBank, outcomes: Mapping[int, str]) -> List[SubtypeBattleOutcome]:
    """One winner per battle; the winner has to be one of the battle's two instincts."""
    parsed = []
    for battle_id, raw_winner in outcomes.items():
        try:
            battle = bank.battle(int(battle_id))
        except (TypeError, ValueError):
            raise InvalidInputError(f"Battle id must be a number, got '{battle_id}'")
        if battle is None:
            raise NotFoundError(f"Unknown battle id: {battle_id}")
        if any(o.battle_id == battle.id for o in parsed):
            raise InvalidInputError(f"Battle {battle.id} submitted more than once")
        try:
            winner = raw_winner if isinstance(raw_winner, Instinct) else Instinct(str(raw_winner).lower())
        except ValueError:
            raise InvalidInputError(f"Battle {battle_id}: '{raw_winner}' is not an instinct")
        if not battle.involves(winner):
            raise InvalidInputError(
                f"Battle {battle_id} is {battle.left.value} vs {battle.right.value}; '{winner.value}' is not in it"
            )
        parsed.append(SubtypeBattleOutcome(battle_id=battle.id, winner=winner))

    answered = {o.battle_id for o in parsed}
    missing = [b.id for b in bank.battles if b.id not in answered]
    if missing:
        raise IncompleteAnswerSetError(f"Battle outcome(s) missing for: {', '.join(str(m) for m in missing)}")
    return sorted(parsed, key=lambda o: o.battle_id)


def tally_wins(bank: ReferenceBank, outcomes: Sequence[SubtypeBattleOutcome]) -> Dict[Instinct, int]:
    wins = {instinct.code: 0 for instinct in bank.instincts}
    for outcome in outcomes:
        wins[outcome.winner] += 1
    return wins


def is_circular(wins: Dict[Instinct, int]) -> bool:
    return all(count == 1 for count in wins.values())


def resolve_stack(
    bank: ReferenceBank,
    outcomes: Sequence[SubtypeBattleOutcome],
    dominant: Optional[Instinct] = None,
) -> Optional[List[Instinct]]:
    """
    Strict instinct order from the battle outcomes. A 2-1-0 tally sorts
    directly. A circular 1-1-1 tally needs ``dominant``; without it this
    returns None. With it, second place is the instinct the dominant beat
    and third the one it lost to.
    """
    wins = tally_wins(bank, outcomes)
    if not is_circular(wins):
        if dominant is not None:
            raise InvalidInputError("Battles already give a strict order; no tiebreak is needed")
        return sorted(wins, key=lambda code: -wins[code])

    if dominant is None:
        return None

    beaten = None
    lost_to = None
    for outcome in outcomes:
        battle = bank.battle(outcome.battle_id)
        if not battle.involves(dominant):
            continue
        if outcome.winner == dominant:
            beaten = battle.opponent_of(dominant)
        else:
            lost_to = outcome.winner
    return [dominant, beaten, lost_to]


def assign_tokens(order: Sequence[Instinct]) -> Dict[Instinct, int]:
    return {instinct: tokens for instinct, tokens in zip(order, TOKEN_DISTRIBUTION)}


def subtype_code(order: Sequence[Instinct], tokens: Dict[Instinct, int]) -> str:
    return "-".join(f"{instinct.value.upper()}{tokens[instinct]:02d}" for instinct in order)


def build_result(order: Sequence[Instinct], resolved_by_tiebreak: bool = False) -> SubtypeResult:
    tokens = assign_tokens(order)
    logger.debug(f"Instinct stack resolved: {[i.value for i in order]}")
    return SubtypeResult(
        order=list(order),
        tokens=tokens,
        subtype_code=subtype_code(order, tokens),
        resolved_by_tiebreak=resolved_by_tiebreak,
    )
