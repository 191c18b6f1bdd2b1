import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from services.inner_dna_engine.assessment import Assessment

logger = logging.getLogger(__name__)


class AssessmentStore(ABC):
    """Persistence boundary for Assessment aggregates and their responses."""

    @abstractmethod
    def create(self, assessment: Assessment) -> Assessment:
        ...

    @abstractmethod
    def get(self, assessment_id: str) -> Optional[Assessment]:
        ...

    @abstractmethod
    def find_open_for_respondent(self, respondent_id: str) -> Optional[Assessment]:
        """Newest assessment of the respondent that has not finished."""

    @abstractmethod
    def find_latest_for_respondent(self, respondent_id: str) -> Optional[Assessment]:
        ...

    @abstractmethod
    def save(self, assessment: Assessment) -> Assessment:
        """Replaces the stored header and all response collections."""

    @abstractmethod
    def delete_for_respondent(self, respondent_id: str) -> int:
        """Deletes every assessment of the respondent with its responses; returns how many."""


class InMemoryAssessmentStore(AssessmentStore):
    """Dict-backed store; hands out deep copies so callers never alias stored state."""

    def __init__(self):
        self._assessments: Dict[str, Assessment] = {}

    def create(self, assessment: Assessment) -> Assessment:
        self._assessments[assessment.id] = assessment.model_copy(deep=True)
        return assessment

    def get(self, assessment_id: str) -> Optional[Assessment]:
        stored = self._assessments.get(assessment_id)
        return stored.model_copy(deep=True) if stored else None

    def _for_respondent(self, respondent_id: str):
        # dict order is creation order
        return [a for a in self._assessments.values() if a.respondent_id == respondent_id]

    def find_open_for_respondent(self, respondent_id: str) -> Optional[Assessment]:
        open_ones = [a for a in self._for_respondent(respondent_id) if not a.is_finished]
        return open_ones[-1].model_copy(deep=True) if open_ones else None

    def find_latest_for_respondent(self, respondent_id: str) -> Optional[Assessment]:
        owned = self._for_respondent(respondent_id)
        return owned[-1].model_copy(deep=True) if owned else None

    def save(self, assessment: Assessment) -> Assessment:
        if assessment.id not in self._assessments:
            raise KeyError(f"Assessment {assessment.id} was never created")
        self._assessments[assessment.id] = assessment.model_copy(deep=True)
        return assessment

    def delete_for_respondent(self, respondent_id: str) -> int:
        doomed = [a.id for a in self._for_respondent(respondent_id)]
        for assessment_id in doomed:
            del self._assessments[assessment_id]
        logger.info(f"Deleted {len(doomed)} assessment(s) for respondent {respondent_id}")
        return len(doomed)
