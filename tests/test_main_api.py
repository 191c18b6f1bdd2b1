# tests/test_main_api.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import the FastAPI app instance from main
from main import app, get_db
from services.inner_dna_engine.engine import InnerDnaEngine
from services.inner_dna_engine.store import InMemoryAssessmentStore
from src.routers.inner_dna import get_engine

# --- Test Client Setup ---
client = TestClient(app)

PREFIX = "/api/v1/inner-dna"


@pytest.fixture
def live_engine(bank):
    """Routes the app to a real engine backed by the in-memory store."""
    engine = InnerDnaEngine(store=InMemoryAssessmentStore(), bank=bank, selection_salt="api")
    app.dependency_overrides[get_engine] = lambda: engine
    yield engine
    app.dependency_overrides.clear()


# --- Test Cases ---

def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Inner DNA Assessment Engine is running."}


def test_health_check_db():
    test_engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    TestSession = sessionmaker(bind=test_engine)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    response = client.get("/health/db")
    app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "db_check": 1}


def test_assessment_walkthrough_over_http(live_engine):
    started = client.post(f"{PREFIX}/start", json={"respondent_id": "api-user"}).json()
    assessment_id = started["assessment_id"]
    assert started["next_prompt"]["kind"] == "screener_question"

    for number in range(1, 37):
        response = client.post(
            f"{PREFIX}/screener/answer",
            json={"assessment_id": assessment_id, "question_number": number, "option": "A"},
        )
        assert response.status_code == 200
    assert response.json()["completed"] is True

    outcome = {"completed": False}
    while not outcome["completed"]:
        view = client.get(f"{PREFIX}/narrowing/{assessment_id}/scenario").json()
        scenario = view["scenario"]
        outcome = client.post(
            f"{PREFIX}/narrowing/answer",
            json={"assessment_id": assessment_id, "scenario_id": scenario["id"], "option_id": scenario["options"][0]["id"]},
        ).json()
    assert outcome["next_stage"] == "RESOLVING_WING"

    # Stage gate: rankings are not accepted before the wing is resolved
    early = client.post(f"{PREFIX}/states/rankings", json={"assessment_id": assessment_id, "rankings": []})
    assert early.status_code == 409

    questions = client.get(f"{PREFIX}/wing/{assessment_id}/questions").json()["questions"]
    wing = client.post(
        f"{PREFIX}/wing/answers",
        json={"assessment_id": assessment_id, "answers": {q["id"]: "B" for q in questions}},
    )
    assert wing.status_code == 200

    triads = client.get(f"{PREFIX}/states/{assessment_id}/triads").json()["triads"]
    rankings = [{"triad_id": t["triad_id"], "order": [m["state"] for m in t["states"]]} for t in triads]
    incomplete = client.post(f"{PREFIX}/states/rankings", json={"assessment_id": assessment_id, "rankings": rankings[:9]})
    assert incomplete.status_code == 422
    states = client.post(f"{PREFIX}/states/rankings", json={"assessment_id": assessment_id, "rankings": rankings})
    assert states.status_code == 200

    battles = client.post(
        f"{PREFIX}/subtypes/battles",
        json={"assessment_id": assessment_id, "outcomes": {"1": "sp", "2": "sp", "3": "so"}},
    ).json()
    assert battles["subtype_code"] == "SP07-SO02-SX01"

    snapshot = client.get(f"{PREFIX}/assessment/{assessment_id}").json()
    assert snapshot["stage"] == "FINISHED"
    assert snapshot["subtype_order"] == ["sp", "so", "sx"]

    latest = client.get(f"{PREFIX}/respondents/api-user/assessment").json()
    assert latest["assessment_id"] == assessment_id

    reset = client.delete(f"{PREFIX}/respondents/api-user").json()
    assert reset == {"respondent_id": "api-user", "deleted": 1}
    assert client.get(f"{PREFIX}/assessment/{assessment_id}").status_code == 404
