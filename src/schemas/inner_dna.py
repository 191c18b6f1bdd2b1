from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# --- Requests ---

class StartAssessmentRequest(BaseModel):
    respondent_id: str = Field(..., min_length=1)


class ScreenerAnswerRequest(BaseModel):
    assessment_id: str
    question_number: int
    option: str  # "A" or "B"; validated by the engine


class ScenarioAnswerRequest(BaseModel):
    assessment_id: str
    scenario_id: str
    option_id: str


class WingAnswersRequest(BaseModel):
    assessment_id: str
    answers: Dict[str, str]  # question_id → "A" | "B"


class StateRankingItem(BaseModel):
    triad_id: int
    order: List[str]  # most, middle, least


class StateRankingsRequest(BaseModel):
    assessment_id: str
    rankings: List[StateRankingItem]


class SubtypeBattlesRequest(BaseModel):
    assessment_id: str
    outcomes: Dict[int, str]  # battle_id → winning instinct


class SubtypeTiebreakRequest(BaseModel):
    assessment_id: str
    dominant: str


# --- Responses ---

class ScreenerQuestion(BaseModel):
    question_number: int
    option_a: str
    option_b: str
    total_questions: int
    progress: int


class StartAssessmentResponse(BaseModel):
    assessment_id: str
    respondent_id: str
    stage: str
    is_resuming: bool
    next_prompt: Dict[str, Any]


class TypeWithName(BaseModel):
    type: int
    name: str
    score: int


class ScreenerAnswerResponse(BaseModel):
    completed: bool
    answered_count: int
    total_questions: int
    next_question_number: Optional[int] = None
    top_candidate_types: Optional[List[int]] = None
    top_types_with_names: Optional[List[TypeWithName]] = None
    scores: Optional[Dict[int, int]] = None
    gap: Optional[int] = None
    next_stage: Optional[str] = None


class ScenarioOptionView(BaseModel):
    id: str
    text: str


class ScenarioView(BaseModel):
    id: str
    title: str
    context: str
    prompt: str
    difficulty: str
    options: List[ScenarioOptionView]


class NextScenarioResponse(BaseModel):
    completed: bool
    scenario: Optional[ScenarioView] = None
    scenario_number: Optional[int] = None
    current_confidence: Optional[float] = None
    leading_type: Optional[int] = None
    candidate_types: Optional[List[int]] = None
    # Present once narrowing has finished
    top_type: Optional[int] = None
    top_type_name: Optional[str] = None
    confidence: Optional[float] = None
    exit_reason: Optional[str] = None
    max_reached: Optional[bool] = None
    scenario_count: Optional[int] = None
    hero_scores: Optional[Dict[int, float]] = None


class ScenarioAnswerResponse(BaseModel):
    completed: bool
    scenario_count: int
    top_type: int
    hero_scores: Dict[int, float]
    current_confidence: Optional[float] = None
    top_type_name: Optional[str] = None
    confidence: Optional[float] = None
    exit_reason: Optional[str] = None
    max_reached: Optional[bool] = None
    next_stage: Optional[str] = None


class NarrowingProgressResponse(BaseModel):
    completed: bool
    scenario_count: int
    min_scenarios: int
    max_scenarios: int
    pick_counts: Dict[int, int]
    confidence_distribution: Dict[int, float]
    leading_type: int
    current_confidence: float


class WingQuestionView(BaseModel):
    id: str
    option_a: str
    option_b: str


class WingQuestionsResponse(BaseModel):
    core_type: int
    core_type_name: str
    wing_a: int
    wing_a_name: str
    wing_b: int
    wing_b_name: str
    questions: List[WingQuestionView]


class WingResultResponse(BaseModel):
    wing: int
    wing_name: str
    count_a: int
    count_b: int
    margin: int
    is_balanced: bool
    next_stage: str


class TriadMember(BaseModel):
    state: str
    color: str
    statement: str


class TriadView(BaseModel):
    triad_id: int
    states: List[TriadMember]


class StateTriadsResponse(BaseModel):
    personality_type: int
    triads: List[TriadView]


class StateResultResponse(BaseModel):
    primary_state: str
    primary_state_name: str
    primary_percent: int
    secondary_state: str
    secondary_state_name: str
    secondary_percent: int
    state_code: str
    scores: Dict[str, int]
    next_stage: str


class SubtypeResultResponse(BaseModel):
    completed: bool
    needs_tiebreak: bool
    tiebreak_options: Optional[List[Literal["sp", "sx", "so"]]] = None
    order: Optional[List[str]] = None
    tokens: Optional[Dict[str, int]] = None
    subtype_code: Optional[str] = None
    resolved_by_tiebreak: Optional[bool] = None
    next_stage: Optional[str] = None


class AssessmentSnapshot(BaseModel):
    assessment_id: str
    respondent_id: str
    stage: str
    top_candidate_types: Optional[List[int]] = None
    resolved_type: Optional[int] = None
    resolved_type_name: Optional[str] = None
    resolved_wing: Optional[int] = None
    primary_state: Optional[str] = None
    secondary_state: Optional[str] = None
    subtype_order: Optional[List[str]] = None
    results: Dict[str, Any]
    response_counts: Dict[str, int]
    created_at: str
    updated_at: str


class ResetResponse(BaseModel):
    respondent_id: str
    deleted: int
