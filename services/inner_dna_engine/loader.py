import logging
from collections import Counter
from functools import lru_cache
from itertools import combinations
from typing import Any, Dict

import yaml

from services.inner_dna_engine import definitions, scenarios
from services.inner_dna_engine.models import PersonalityType, ReferenceBank
from services.inner_dna_engine.narrower import MIN_SCENARIOS

logger = logging.getLogger(__name__)

SCREENER_QUESTION_COUNT = 36
TRIAD_COUNT = 10
TRIADS_PER_STATE = 6
WING_QUESTIONS_PER_TYPE = 5


class ReferenceDataError(ValueError):
    """Raised for structural problems in the reference bank that Pydantic does not catch."""
    pass


def _neighbours(core_type: int):
    lower = 9 if core_type == 1 else core_type - 1
    higher = 1 if core_type == 9 else core_type + 1
    return lower, higher


def load_reference_bank(data: Dict[str, Any]) -> ReferenceBank:
    """
    Validates raw reference data against the ReferenceBank model and performs
    the structural checks the scoring algorithms rely on.
    """
    # Schema problems surface as pydantic ValidationError
    bank = ReferenceBank.model_validate(data)

    all_types = set(PersonalityType)

    if set(bank.type_names) != all_types:
        raise ReferenceDataError("type_names must name all 9 types")
    if set(bank.category_to_type.values()) != all_types:
        raise ReferenceDataError("category_to_type must map the 9 categories onto the 9 types one-to-one")

    # --- Screener ---
    numbers = [q.id for q in bank.screener_questions]
    if sorted(numbers) != list(range(1, SCREENER_QUESTION_COUNT + 1)):
        raise ReferenceDataError(
            f"Screener questions must be numbered 1..{SCREENER_QUESTION_COUNT} exactly once, got {len(numbers)} questions"
        )
    for question in bank.screener_questions:
        if question.category_a == question.category_b:
            raise ReferenceDataError(f"Screener question {question.id} feeds the same category from both options")

    # --- Scenarios ---
    scenario_ids = set()
    for scenario in bank.general_scenarios + bank.targeted_scenarios:
        if scenario.id in scenario_ids:
            raise ReferenceDataError(f"Duplicate scenario ID found: {scenario.id}")
        scenario_ids.add(scenario.id)

        option_ids = set()
        for option in scenario.options:
            if option.id in option_ids:
                raise ReferenceDataError(f"Duplicate option ID '{option.id}' in scenario '{scenario.id}'")
            option_ids.add(option.id)

        option_types = [option.personality_type for option in scenario.options]
        if len(option_types) != len(set(option_types)):
            raise ReferenceDataError(f"Scenario '{scenario.id}' offers more than one option for a type")

    if len(bank.general_scenarios) < MIN_SCENARIOS:
        raise ReferenceDataError(f"At least {MIN_SCENARIOS} general scenarios are required")
    for scenario in bank.general_scenarios:
        if set(o.personality_type for o in scenario.options) != all_types:
            raise ReferenceDataError(f"General scenario '{scenario.id}' must offer one option per type")
    for scenario in bank.targeted_scenarios:
        if len(scenario.target_types) < 2:
            raise ReferenceDataError(f"Targeted scenario '{scenario.id}' needs at least 2 target types")
        if set(o.personality_type for o in scenario.options) != set(scenario.target_types):
            raise ReferenceDataError(f"Targeted scenario '{scenario.id}' options must match its target types")

    # --- Wing sets ---
    seen_cores = set()
    for wing_set in bank.wing_sets:
        if wing_set.core_type in seen_cores:
            raise ReferenceDataError(f"Duplicate wing set for type {int(wing_set.core_type)}")
        seen_cores.add(wing_set.core_type)
        if (int(wing_set.wing_a), int(wing_set.wing_b)) != _neighbours(int(wing_set.core_type)):
            raise ReferenceDataError(
                f"Wing pair for type {int(wing_set.core_type)} must be its neighbours {_neighbours(int(wing_set.core_type))}"
            )
        question_ids = [q.id for q in wing_set.questions]
        if len(question_ids) != WING_QUESTIONS_PER_TYPE or len(set(question_ids)) != WING_QUESTIONS_PER_TYPE:
            raise ReferenceDataError(
                f"Wing set for type {int(wing_set.core_type)} needs {WING_QUESTIONS_PER_TYPE} uniquely identified questions"
            )
    if seen_cores != all_types:
        raise ReferenceDataError("Every type needs a wing question set")

    # --- States and triads ---
    state_codes = [s.code for s in bank.states]
    if len(state_codes) != 5 or len(set(state_codes)) != 5:
        raise ReferenceDataError("Exactly 5 distinct states are required")
    if sorted(s.level for s in bank.states) != [1, 2, 3, 4, 5]:
        raise ReferenceDataError("State levels must be 1..5")

    if len(bank.triads) != TRIAD_COUNT:
        raise ReferenceDataError(f"Exactly {TRIAD_COUNT} triads are required, got {len(bank.triads)}")
    triad_sets = set()
    appearances = Counter()
    for triad in bank.triads:
        members = frozenset(triad.states)
        if len(members) != 3:
            raise ReferenceDataError(f"Triad {triad.id} repeats a state")
        if members in triad_sets:
            raise ReferenceDataError(f"Triad {triad.id} duplicates another triad")
        triad_sets.add(members)
        appearances.update(members)
    if len(set(t.id for t in bank.triads)) != TRIAD_COUNT:
        raise ReferenceDataError("Triad IDs must be unique")
    if any(appearances[code] != TRIADS_PER_STATE for code in state_codes):
        raise ReferenceDataError(f"Every state must appear in exactly {TRIADS_PER_STATE} triads")

    for personality_type in all_types:
        behaviors = bank.state_behaviors.get(personality_type)
        if not behaviors or set(behaviors) != set(state_codes):
            raise ReferenceDataError(f"Type {int(personality_type)} needs behaviour statements for every state")
        if any(not statements for statements in behaviors.values()):
            raise ReferenceDataError(f"Type {int(personality_type)} has a state without behaviour statements")

    # --- Instincts and battles ---
    instinct_codes = set(i.code for i in bank.instincts)
    if len(bank.instincts) != 3 or len(instinct_codes) != 3:
        raise ReferenceDataError("Exactly 3 distinct instincts are required")
    pairs = [frozenset((b.left, b.right)) for b in bank.battles]
    expected_pairs = set(frozenset(pair) for pair in combinations(instinct_codes, 2))
    if len(pairs) != 3 or set(pairs) != expected_pairs:
        raise ReferenceDataError("Battles must cover every pair of instincts exactly once")
    if len(set(b.id for b in bank.battles)) != 3:
        raise ReferenceDataError("Battle IDs must be unique")

    logger.debug(f"Reference bank {bank.version} validated: {len(bank.general_scenarios)} general, "
                 f"{len(bank.targeted_scenarios)} targeted scenarios")
    return bank


def load_reference_bank_from_file(file_path: str) -> ReferenceBank:
    """
    Loads a reference bank from a YAML file, validates it,
    and returns a ReferenceBank object.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ReferenceDataError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise ReferenceDataError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise ReferenceDataError(f"YAML file is empty or invalid: {file_path}")

    logger.info(f"Loading reference bank from {file_path}")
    return load_reference_bank(data)


def default_reference_bank_data() -> Dict[str, Any]:
    """The built-in bank as a plain dict, the same shape a YAML override uses."""
    return {
        "version": definitions.BANK_VERSION,
        "released_at": definitions.BANK_RELEASED_AT,
        "type_names": definitions.TYPE_NAMES,
        "category_to_type": definitions.CATEGORY_TO_TYPE,
        "screener_questions": definitions.SCREENER_QUESTIONS,
        "general_scenarios": scenarios.GENERAL_SCENARIOS,
        "targeted_scenarios": scenarios.TARGETED_SCENARIOS,
        "wing_sets": definitions.WING_QUESTION_SETS,
        "states": definitions.STATES,
        "state_behaviors": definitions.STATE_BEHAVIORS,
        "triads": definitions.TRIADS,
        "instincts": definitions.INSTINCTS,
        "battles": definitions.BATTLES,
    }


@lru_cache(maxsize=1)
def default_reference_bank() -> ReferenceBank:
    return load_reference_bank(default_reference_bank_data())
