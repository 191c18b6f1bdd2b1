import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from src.routers.inner_dna import router as inner_dna_router, get_engine
from services.inner_dna_engine.engine import InnerDnaEngine # For spec in MagicMock
from services.inner_dna_engine.models import (
    IncompleteAnswerSetError,
    InnerDnaError,
    InvalidInputError,
    InvalidStageTransitionError,
    NotFoundError,
)

# Create a FastAPI app instance and include the router for testing
app = FastAPI()
app.include_router(inner_dna_router, prefix="/api/v1/inner-dna")

client = TestClient(app)

PREFIX = "/api/v1/inner-dna"
ASSESSMENT_ID = "5f0c6a8e-1111-4d2b-9c1e-000000000001"

# Mock data
START_PAYLOAD = {
    "assessment_id": ASSESSMENT_ID,
    "respondent_id": "resp-1",
    "stage": "SCREENING",
    "is_resuming": False,
    "next_prompt": {"kind": "screener_question", "question_number": 1},
}
SCREENER_DONE_PAYLOAD = {
    "completed": True,
    "answered_count": 36,
    "total_questions": 36,
    "top_candidate_types": [8, 3, 7],
    "top_types_with_names": [
        {"type": 8, "name": "Challenger", "score": 7},
        {"type": 3, "name": "Achiever", "score": 6},
        {"type": 7, "name": "Enthusiast", "score": 5},
    ],
    "scores": {1: 3, 2: 3, 3: 6, 4: 3, 5: 3, 6: 3, 7: 5, 8: 7, 9: 3},
    "gap": 1,
    "next_stage": "NARROWING",
}
SUBTYPE_PAYLOAD = {
    "completed": True,
    "needs_tiebreak": False,
    "order": ["sp", "sx", "so"],
    "tokens": {"sp": 7, "sx": 2, "so": 1},
    "subtype_code": "SP07-SX02-SO01",
    "resolved_by_tiebreak": True,
    "next_stage": "FINISHED",
}


@pytest.fixture
def mock_engine():
    mock_engine_instance = MagicMock(spec=InnerDnaEngine)
    app.dependency_overrides[get_engine] = lambda: mock_engine_instance
    yield mock_engine_instance
    app.dependency_overrides.clear()


# --- Test Cases ---

def test_start_assessment(mock_engine):
    """Test valid start → 200 OK"""
    mock_engine.start_assessment.return_value = START_PAYLOAD
    response = client.post(f"{PREFIX}/start", json={"respondent_id": "resp-1"})

    assert response.status_code == 200
    assert response.json()["assessment_id"] == ASSESSMENT_ID
    mock_engine.start_assessment.assert_called_once_with("resp-1")


def test_start_assessment_requires_respondent(mock_engine):
    """Test empty respondent id → 422 from request validation"""
    response = client.post(f"{PREFIX}/start", json={"respondent_id": ""})
    assert response.status_code == 422
    mock_engine.start_assessment.assert_not_called()


def test_submit_screener_answer_completes(mock_engine):
    mock_engine.submit_screener_answer.return_value = SCREENER_DONE_PAYLOAD
    response = client.post(
        f"{PREFIX}/screener/answer",
        json={"assessment_id": ASSESSMENT_ID, "question_number": 36, "option": "B"},
    )

    assert response.status_code == 200
    result = response.json()
    assert result["top_candidate_types"] == [8, 3, 7]
    assert result["scores"]["8"] == 7
    mock_engine.submit_screener_answer.assert_called_once_with(ASSESSMENT_ID, 36, "B")


@pytest.mark.parametrize(
    "error, status_code",
    [
        (NotFoundError("Assessment not found: x"), 404),
        (InvalidStageTransitionError("Cannot answer a scenario while assessment x is in SCREENING"), 409),
        (InvalidInputError("Option o does not belong to scenario s"), 400),
        (IncompleteAnswerSetError("Wing answers missing for: 8_q5"), 422),
    ],
)
def test_engine_errors_map_to_status_codes(mock_engine, error, status_code):
    mock_engine.submit_scenario_answer.side_effect = error
    response = client.post(
        f"{PREFIX}/narrowing/answer",
        json={"assessment_id": ASSESSMENT_ID, "scenario_id": "gen-01", "option_id": "gen-01-t8"},
    )

    assert response.status_code == status_code
    assert str(error) in response.json()["detail"]


def test_unclassified_engine_error_is_internal(mock_engine):
    mock_engine.get_snapshot.side_effect = InnerDnaError("something odd")
    response = client.get(f"{PREFIX}/assessment/{ASSESSMENT_ID}")
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal Server Error"


def test_unexpected_error_is_internal(mock_engine):
    """Test unexpected error from the engine → 500 Internal Server Error"""
    mock_engine.get_next_scenario.side_effect = Exception("A critical engine failure occurred")
    response = client.get(f"{PREFIX}/narrowing/{ASSESSMENT_ID}/scenario")
    assert response.status_code == 500
    assert "critical" not in response.json()["detail"]


def test_submit_wing_answers_passes_answers(mock_engine):
    mock_engine.submit_wing_answers.return_value = {
        "wing": 9, "wing_name": "Peacemaker", "count_a": 1, "count_b": 4,
        "margin": 3, "is_balanced": False, "next_stage": "SCORING_STATE",
    }
    answers = {"8_q1": "B", "8_q2": "B", "8_q3": "A", "8_q4": "B", "8_q5": "B"}
    response = client.post(f"{PREFIX}/wing/answers", json={"assessment_id": ASSESSMENT_ID, "answers": answers})

    assert response.status_code == 200
    assert response.json()["wing"] == 9
    mock_engine.submit_wing_answers.assert_called_once_with(ASSESSMENT_ID, answers)


def test_submit_state_rankings_forwards_plain_dicts(mock_engine):
    mock_engine.submit_state_rankings.return_value = {
        "primary_state": "GRN", "primary_state_name": "Very Good State", "primary_percent": 57,
        "secondary_state": "BLU", "secondary_state_name": "Good State", "secondary_percent": 43,
        "state_code": "GRNBLU-5743", "scores": {"GRN": 12, "BLU": 9, "YLW": 6, "ORG": 3, "RED": 0},
        "next_stage": "RESOLVING_SUBTYPE",
    }
    rankings = [{"triad_id": 1, "order": ["GRN", "BLU", "YLW"]}]
    response = client.post(f"{PREFIX}/states/rankings", json={"assessment_id": ASSESSMENT_ID, "rankings": rankings})

    assert response.status_code == 200
    assert response.json()["state_code"] == "GRNBLU-5743"
    mock_engine.submit_state_rankings.assert_called_once_with(ASSESSMENT_ID, rankings)


def test_subtype_battles_converts_battle_ids(mock_engine):
    mock_engine.submit_subtype_battles.return_value = {
        "completed": False, "needs_tiebreak": True, "tiebreak_options": ["sp", "sx", "so"],
    }
    response = client.post(
        f"{PREFIX}/subtypes/battles",
        json={"assessment_id": ASSESSMENT_ID, "outcomes": {"1": "sp", "2": "so", "3": "sx"}},
    )

    assert response.status_code == 200
    assert response.json()["needs_tiebreak"] is True
    mock_engine.submit_subtype_battles.assert_called_once_with(ASSESSMENT_ID, {1: "sp", 2: "so", 3: "sx"})


def test_subtype_tiebreak(mock_engine):
    mock_engine.submit_subtype_tiebreak.return_value = SUBTYPE_PAYLOAD
    response = client.post(f"{PREFIX}/subtypes/tiebreak", json={"assessment_id": ASSESSMENT_ID, "dominant": "sp"})

    assert response.status_code == 200
    assert response.json()["subtype_code"] == "SP07-SX02-SO01"


def test_list_screener_questions(mock_engine):
    mock_engine.list_screener_questions.return_value = [
        {"question_number": 1, "option_a": "a", "option_b": "b", "total_questions": 36, "progress": 3},
    ]
    response = client.get(f"{PREFIX}/screener/questions")
    assert response.status_code == 200
    assert response.json()[0]["question_number"] == 1


def test_reset_respondent(mock_engine):
    mock_engine.reset.return_value = 2
    response = client.delete(f"{PREFIX}/respondents/resp-1")

    assert response.status_code == 200
    assert response.json() == {"respondent_id": "resp-1", "deleted": 2}
    mock_engine.reset.assert_called_once_with("resp-1")
