import pytest

from services.inner_dna_engine.assessment import Assessment, NarrowingStage, ScreenerResult
from services.inner_dna_engine.engine import InnerDnaEngine
from services.inner_dna_engine.loader import default_reference_bank
from services.inner_dna_engine.models import PersonalityType
from services.inner_dna_engine.store import InMemoryAssessmentStore


@pytest.fixture(scope="session")
def bank():
    """The built-in reference bank (validated once per session)."""
    return default_reference_bank()


@pytest.fixture
def store():
    return InMemoryAssessmentStore()


@pytest.fixture
def engine(store, bank):
    return InnerDnaEngine(store=store, bank=bank, selection_salt="test-salt")


def make_screener_result(top, scores=None, gap=None) -> ScreenerResult:
    """Screener result with the given top-3 order; other types share the remaining tallies."""
    if scores is None:
        scores = {top[0]: 6, top[1]: 5, top[2]: 4}
    full = {t: 0 for t in PersonalityType}
    full.update({PersonalityType(t): v for t, v in scores.items()})
    if gap is None:
        gap = full[PersonalityType(top[0])] - full[PersonalityType(top[1])]
    return ScreenerResult(scores=full, top_candidate_types=list(top), gap=gap)


@pytest.fixture
def screener_result_factory():
    return make_screener_result


@pytest.fixture
def narrowing_assessment(store):
    """Factory that stores an assessment already sitting in NARROWING."""
    def _create(top=(8, 3, 7), scores=None, gap=None, respondent_id="respondent-narrowing"):
        assessment = Assessment(respondent_id=respondent_id)
        assessment.advance(NarrowingStage(screener=make_screener_result(top, scores, gap)))
        store.create(assessment)
        return assessment
    return _create
