from functools import lru_cache
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException

from config.settings import get_settings
from services.inner_dna_engine.engine import InnerDnaEngine
from services.inner_dna_engine.loader import default_reference_bank, load_reference_bank_from_file
from services.inner_dna_engine.models import (
    IncompleteAnswerSetError,
    InnerDnaError,
    InvalidInputError,
    InvalidStageTransitionError,
    NotFoundError,
)
from src.db.database import SessionLocal
from src.schemas.inner_dna import (
    AssessmentSnapshot,
    NarrowingProgressResponse,
    NextScenarioResponse,
    ResetResponse,
    ScenarioAnswerRequest,
    ScenarioAnswerResponse,
    ScreenerAnswerRequest,
    ScreenerAnswerResponse,
    ScreenerQuestion,
    StartAssessmentRequest,
    StartAssessmentResponse,
    StateRankingsRequest,
    StateResultResponse,
    StateTriadsResponse,
    SubtypeBattlesRequest,
    SubtypeResultResponse,
    SubtypeTiebreakRequest,
    WingAnswersRequest,
    WingQuestionsResponse,
    WingResultResponse,
)
from src.services.storage import SqlAssessmentStore

router = APIRouter()
logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (InvalidStageTransitionError, 409),
    (InvalidInputError, 400),
    (IncompleteAnswerSetError, 422),
)


@lru_cache()
def get_engine() -> InnerDnaEngine:
    settings = get_settings()
    if settings.reference_bank_path:
        bank = load_reference_bank_from_file(settings.reference_bank_path)
    else:
        bank = default_reference_bank()
    logger.info(f"Inner DNA engine ready with reference bank {bank.version}")
    return InnerDnaEngine(
        store=SqlAssessmentStore(SessionLocal),
        bank=bank,
        selection_salt=settings.selection_salt,
    )


def _http_error(e: InnerDnaError) -> HTTPException:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(e, error_type):
            logger.warning(f"Rejected request ({error_type.__name__}): {e}")
            return HTTPException(status_code=status_code, detail=str(e))
    logger.error(f"Unclassified engine error: {e}")
    return HTTPException(status_code=500, detail="Internal Server Error")


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.exception(f"Unexpected error while trying to {action}: {e}")
    return HTTPException(status_code=500, detail="Internal Server Error")


# --- Lifecycle ---

@router.post("/start", response_model=StartAssessmentResponse)
def start_assessment(request: StartAssessmentRequest, engine: InnerDnaEngine = Depends(get_engine)):
    """Starts a new assessment for the respondent or resumes their unfinished one."""
    try:
        return engine.start_assessment(request.respondent_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("start an assessment", e)


@router.get("/assessment/{assessment_id}", response_model=AssessmentSnapshot)
def get_assessment(assessment_id: str, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.get_snapshot(assessment_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("read an assessment", e)


@router.get("/respondents/{respondent_id}/assessment", response_model=AssessmentSnapshot)
def get_respondent_assessment(respondent_id: str, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.get_latest_for_respondent(respondent_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("read a respondent's assessment", e)


@router.delete("/respondents/{respondent_id}", response_model=ResetResponse)
def reset_respondent(respondent_id: str, engine: InnerDnaEngine = Depends(get_engine)):
    """Administrative reset: removes every assessment of the respondent and all their answers."""
    try:
        deleted = engine.reset(respondent_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("reset a respondent", e)
    return ResetResponse(respondent_id=respondent_id, deleted=deleted)


# --- Screener ---

@router.get("/screener/questions", response_model=List[ScreenerQuestion])
def list_screener_questions(engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.list_screener_questions()
    except Exception as e:
        raise _internal_error("list screener questions", e)


@router.get("/screener/questions/{question_number}", response_model=ScreenerQuestion)
def get_screener_question(question_number: int, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.get_screener_question(question_number)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("read a screener question", e)


@router.post("/screener/answer", response_model=ScreenerAnswerResponse)
def submit_screener_answer(request: ScreenerAnswerRequest, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.submit_screener_answer(request.assessment_id, request.question_number, request.option)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("submit a screener answer", e)


# --- Narrowing ---

@router.get("/narrowing/{assessment_id}/scenario", response_model=NextScenarioResponse)
def get_next_scenario(assessment_id: str, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.get_next_scenario(assessment_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("select a scenario", e)


@router.post("/narrowing/answer", response_model=ScenarioAnswerResponse)
def submit_scenario_answer(request: ScenarioAnswerRequest, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.submit_scenario_answer(request.assessment_id, request.scenario_id, request.option_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("submit a scenario answer", e)


@router.get("/narrowing/{assessment_id}/progress", response_model=NarrowingProgressResponse)
def get_narrowing_progress(assessment_id: str, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.get_narrowing_progress(assessment_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("read narrowing progress", e)


# --- Wing ---

@router.get("/wing/{assessment_id}/questions", response_model=WingQuestionsResponse)
def get_wing_questions(assessment_id: str, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.get_wing_questions(assessment_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("read wing questions", e)


@router.post("/wing/answers", response_model=WingResultResponse)
def submit_wing_answers(request: WingAnswersRequest, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.submit_wing_answers(request.assessment_id, request.answers)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("submit wing answers", e)


# --- States ---

@router.get("/states/{assessment_id}/triads", response_model=StateTriadsResponse)
def get_state_triads(assessment_id: str, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.get_state_triads(assessment_id)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("read state triads", e)


@router.post("/states/rankings", response_model=StateResultResponse)
def submit_state_rankings(request: StateRankingsRequest, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        rankings = [item.model_dump() for item in request.rankings]
        return engine.submit_state_rankings(request.assessment_id, rankings)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("submit state rankings", e)


# --- Subtypes ---

@router.post("/subtypes/battles", response_model=SubtypeResultResponse)
def submit_subtype_battles(request: SubtypeBattlesRequest, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.submit_subtype_battles(request.assessment_id, request.outcomes)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("submit instinct battles", e)


@router.post("/subtypes/tiebreak", response_model=SubtypeResultResponse)
def submit_subtype_tiebreak(request: SubtypeTiebreakRequest, engine: InnerDnaEngine = Depends(get_engine)):
    try:
        return engine.submit_subtype_tiebreak(request.assessment_id, request.dominant)
    except InnerDnaError as e:
        raise _http_error(e)
    except Exception as e:
        raise _internal_error("submit an instinct tiebreak", e)
