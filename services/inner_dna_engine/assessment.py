import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

from services.inner_dna_engine.models import (
    AnswerOption,
    Instinct,
    InvalidStageTransitionError,
    PersonalityType,
    ScreenerCategory,
    StateCode,
)


class Stage(str, Enum):
    STARTED = "STARTED"
    SCREENING = "SCREENING"
    NARROWING = "NARROWING"
    RESOLVING_WING = "RESOLVING_WING"
    SCORING_STATE = "SCORING_STATE"
    RESOLVING_SUBTYPE = "RESOLVING_SUBTYPE"
    FINISHED = "FINISHED"

    @property
    def rank(self) -> int:
        return list(Stage).index(self)


class ExitReason(str, Enum):
    SCREENER_AGREEMENT = "screener_agreement"
    CLEAR_LEAD = "clear_lead"
    NARROW_LEAD = "narrow_lead"
    EXTENDED_LEAD = "extended_lead"
    FORCED = "forced"
    MAX_REACHED = "max_reached"
    POOL_EXHAUSTED = "pool_exhausted"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Stage results ---

class ScreenerResult(BaseModel):
    scores: Dict[PersonalityType, int]
    top_candidate_types: List[PersonalityType]
    gap: int


class NarrowingResult(BaseModel):
    resolved_type: PersonalityType
    confidence: float
    exit_reason: ExitReason
    scenario_count: int
    pick_counts: Dict[PersonalityType, int]
    # Reporting vector: winner gets the exit confidence, losers split the rest.
    hero_scores: Dict[PersonalityType, float]

    @property
    def max_reached(self) -> bool:
        return self.exit_reason == ExitReason.MAX_REACHED


class WingResult(BaseModel):
    wing: PersonalityType
    count_a: int
    count_b: int
    margin: int
    is_balanced: bool


class StateResult(BaseModel):
    scores: Dict[StateCode, int]
    primary_state: StateCode
    primary_percent: int
    secondary_state: StateCode
    secondary_percent: int
    state_code: str


class SubtypeResult(BaseModel):
    order: List[Instinct]
    tokens: Dict[Instinct, int]
    subtype_code: str
    resolved_by_tiebreak: bool = False


# --- Stage variants ---
# Each variant carries exactly the results that are legal at that stage.

class StartedStage(BaseModel):
    stage: Literal["STARTED"] = "STARTED"


class ScreeningStage(BaseModel):
    stage: Literal["SCREENING"] = "SCREENING"


class NarrowingStage(BaseModel):
    stage: Literal["NARROWING"] = "NARROWING"
    screener: ScreenerResult


class WingStage(BaseModel):
    stage: Literal["RESOLVING_WING"] = "RESOLVING_WING"
    screener: ScreenerResult
    narrowing: NarrowingResult


class StateScoringStage(BaseModel):
    stage: Literal["SCORING_STATE"] = "SCORING_STATE"
    screener: ScreenerResult
    narrowing: NarrowingResult
    wing: WingResult


class SubtypeStage(BaseModel):
    stage: Literal["RESOLVING_SUBTYPE"] = "RESOLVING_SUBTYPE"
    screener: ScreenerResult
    narrowing: NarrowingResult
    wing: WingResult
    states: StateResult


class FinishedStage(BaseModel):
    stage: Literal["FINISHED"] = "FINISHED"
    screener: ScreenerResult
    narrowing: NarrowingResult
    wing: WingResult
    states: StateResult
    subtypes: SubtypeResult


AssessmentStage = Annotated[
    Union[
        StartedStage,
        ScreeningStage,
        NarrowingStage,
        WingStage,
        StateScoringStage,
        SubtypeStage,
        FinishedStage,
    ],
    Field(discriminator="stage"),
]


# --- Response records ---

class ScreenerResponse(BaseModel):
    question_number: int = Field(..., ge=1)
    selected_option: AnswerOption
    resolved_category: ScreenerCategory
    answered_at: datetime = Field(default_factory=_utcnow)


class ScenarioResponse(BaseModel):
    scenario_number: int = Field(..., ge=1)
    scenario_id: str
    selected_option_id: str
    selected_type: PersonalityType
    option_confidence: float = Field(..., ge=0.0, le=1.0)
    answered_at: datetime = Field(default_factory=_utcnow)


class WingResponse(BaseModel):
    question_id: str
    selected: AnswerOption


class StateRanking(BaseModel):
    triad_id: int
    order: Tuple[StateCode, StateCode, StateCode]  # most, middle, least


class SubtypeBattleOutcome(BaseModel):
    battle_id: int
    winner: Instinct


class Assessment(BaseModel):
    """Root aggregate: one respondent's run through all five stages."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    respondent_id: str
    phase: AssessmentStage = Field(default_factory=StartedStage)
    screener_responses: List[ScreenerResponse] = Field(default_factory=list)
    scenario_responses: List[ScenarioResponse] = Field(default_factory=list)
    wing_responses: List[WingResponse] = Field(default_factory=list)
    state_rankings: List[StateRanking] = Field(default_factory=list)
    subtype_battles: List[SubtypeBattleOutcome] = Field(default_factory=list)
    subtype_tiebreak: Optional[Instinct] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def stage(self) -> Stage:
        return Stage(self.phase.stage)

    @property
    def is_finished(self) -> bool:
        return self.stage == Stage.FINISHED

    def at_least(self, stage: Stage) -> bool:
        return self.stage.rank >= stage.rank

    def advance(self, phase) -> None:
        """Moves to ``phase``; staying put is allowed, going back is not."""
        target = Stage(phase.stage)
        if target.rank < self.stage.rank:
            raise InvalidStageTransitionError(
                f"Assessment {self.id} cannot move back from {self.stage.value} to {target.value}"
            )
        self.phase = phase
        self.updated_at = _utcnow()

    # Flat projections of the data model; None until the producing stage completes.

    @property
    def screener_result(self) -> Optional[ScreenerResult]:
        return getattr(self.phase, "screener", None)

    @property
    def narrowing_result(self) -> Optional[NarrowingResult]:
        return getattr(self.phase, "narrowing", None)

    @property
    def wing_result(self) -> Optional[WingResult]:
        return getattr(self.phase, "wing", None)

    @property
    def state_result(self) -> Optional[StateResult]:
        return getattr(self.phase, "states", None)

    @property
    def subtype_result(self) -> Optional[SubtypeResult]:
        return getattr(self.phase, "subtypes", None)

    @property
    def top_candidate_types(self) -> Optional[List[PersonalityType]]:
        result = self.screener_result
        return list(result.top_candidate_types) if result else None

    @property
    def resolved_type(self) -> Optional[PersonalityType]:
        result = self.narrowing_result
        return result.resolved_type if result else None

    @property
    def resolved_wing(self) -> Optional[PersonalityType]:
        result = self.wing_result
        return result.wing if result else None

    @property
    def primary_state(self) -> Optional[StateCode]:
        result = self.state_result
        return result.primary_state if result else None

    @property
    def secondary_state(self) -> Optional[StateCode]:
        result = self.state_result
        return result.secondary_state if result else None

    @property
    def subtype_order(self) -> Optional[List[Instinct]]:
        result = self.subtype_result
        return list(result.order) if result else None
