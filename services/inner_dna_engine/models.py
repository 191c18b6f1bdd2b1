from enum import Enum, IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field


class PersonalityType(IntEnum):
    REFORMER = 1
    HELPER = 2
    ACHIEVER = 3
    INDIVIDUALIST = 4
    INVESTIGATOR = 5
    SENTINEL = 6
    ENTHUSIAST = 7
    CHALLENGER = 8
    PEACEMAKER = 9


class ScreenerCategory(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"


class AnswerOption(str, Enum):
    A = "A"
    B = "B"


class StateCode(str, Enum):
    GRN = "GRN"
    BLU = "BLU"
    YLW = "YLW"
    ORG = "ORG"
    RED = "RED"


class Instinct(str, Enum):
    SELF_PRESERVATION = "sp"
    ONE_TO_ONE = "sx"
    SOCIAL = "so"


# --- Screener (RHETI) ---

class ScreenerQuestion(BaseModel):
    id: int = Field(..., ge=1)
    option_a: str
    option_b: str
    category_a: ScreenerCategory
    category_b: ScreenerCategory

    def category_for(self, option: AnswerOption) -> ScreenerCategory:
        return self.category_a if option == AnswerOption.A else self.category_b


# --- Narrower (Hero Moments) ---

class ScenarioOption(BaseModel):
    id: str
    text: str
    personality_type: PersonalityType
    confidence: float = Field(..., ge=0.0, le=1.0)


class Scenario(BaseModel):
    id: str
    title: str
    context: str
    prompt: str
    difficulty: str = "medium"
    target_types: List[PersonalityType] = Field(default_factory=list)
    options: List[ScenarioOption]

    def option(self, option_id: str) -> Optional[ScenarioOption]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def options_for(self, types: Sequence[PersonalityType]) -> List[ScenarioOption]:
        """Options belonging to the given types, in the order of ``types``."""
        by_type = {option.personality_type: option for option in self.options}
        return [by_type[t] for t in types if t in by_type]


# --- Resolver (Building Blocks) ---

class WingQuestion(BaseModel):
    id: str
    option_a: str
    option_b: str


class WingQuestionSet(BaseModel):
    core_type: PersonalityType
    wing_a: PersonalityType  # lower neighbour
    wing_b: PersonalityType  # higher neighbour
    questions: List[WingQuestion]


# --- Scorer (Color States) ---

class StateDefinition(BaseModel):
    code: StateCode
    level: int = Field(..., ge=1, le=5)
    internal_name: str
    color: str


class Triad(BaseModel):
    id: int
    states: Tuple[StateCode, StateCode, StateCode]


# --- Tiebreak Resolver (Subtype Tokens) ---

class InstinctDefinition(BaseModel):
    code: Instinct
    name: str


class Battle(BaseModel):
    id: int
    left: Instinct
    right: Instinct
    left_text: str
    right_text: str

    def involves(self, instinct: Instinct) -> bool:
        return instinct in (self.left, self.right)

    def opponent_of(self, instinct: Instinct) -> Instinct:
        return self.right if instinct == self.left else self.left


class ReferenceBank(BaseModel):
    """Static question/scenario corpus. Loaded once, never mutated."""

    version: str
    released_at: str
    type_names: Dict[PersonalityType, str]
    category_to_type: Dict[ScreenerCategory, PersonalityType]
    screener_questions: List[ScreenerQuestion]
    general_scenarios: List[Scenario]
    targeted_scenarios: List[Scenario] = Field(default_factory=list)
    wing_sets: List[WingQuestionSet]
    states: List[StateDefinition]
    state_behaviors: Dict[PersonalityType, Dict[StateCode, List[str]]]
    triads: List[Triad]
    instincts: List[InstinctDefinition]
    battles: List[Battle]

    model_config = {"frozen": True}

    def type_name(self, personality_type: PersonalityType) -> str:
        return self.type_names.get(personality_type, "Unknown")

    def screener_question(self, number: int) -> Optional[ScreenerQuestion]:
        for question in self.screener_questions:
            if question.id == number:
                return question
        return None

    def scenario(self, scenario_id: str) -> Optional[Scenario]:
        for scenario in self.general_scenarios + self.targeted_scenarios:
            if scenario.id == scenario_id:
                return scenario
        return None

    def wing_set(self, core_type: PersonalityType) -> Optional[WingQuestionSet]:
        for wing_set in self.wing_sets:
            if wing_set.core_type == core_type:
                return wing_set
        return None

    def state(self, code: StateCode) -> Optional[StateDefinition]:
        for state in self.states:
            if state.code == code:
                return state
        return None

    def triad(self, triad_id: int) -> Optional[Triad]:
        for triad in self.triads:
            if triad.id == triad_id:
                return triad
        return None

    def battle(self, battle_id: int) -> Optional[Battle]:
        for battle in self.battles:
            if battle.id == battle_id:
                return battle
        return None


# Custom Error Classes
class InnerDnaError(ValueError):
    """Base class for caller-correctable precondition violations."""
    pass

class NotFoundError(InnerDnaError):
    """Unknown assessment, question, scenario, triad or battle."""
    pass

class InvalidStageTransitionError(InnerDnaError):
    """A stage operation was invoked while its gate is closed."""
    pass

class InvalidInputError(InnerDnaError):
    """Malformed submission (bad option, broken ranking, confidence out of range)."""
    pass

class IncompleteAnswerSetError(InnerDnaError):
    """Scoring was requested before the required responses exist."""
    pass
