import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from services.inner_dna_engine.assessment import Assessment, Stage
from services.inner_dna_engine.store import AssessmentStore
from src.db.models import (
    AssessmentRecord,
    ScenarioResponseRecord,
    ScreenerResponseRecord,
    StateRankingRecord,
    SubtypeBattleRecord,
    WingResponseRecord,
)

logger = logging.getLogger(__name__)

RESPONSE_RECORDS = (
    ScreenerResponseRecord,
    ScenarioResponseRecord,
    WingResponseRecord,
    StateRankingRecord,
    SubtypeBattleRecord,
)


class SqlAssessmentStore(AssessmentStore):
    """
    Stores each Assessment as a header row plus one row per response.
    Saving rewrites the response rows of that assessment inside one transaction.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    # --- Mapping ---

    @staticmethod
    def _to_domain(record: AssessmentRecord) -> Assessment:
        return Assessment.model_validate({
            "id": record.id,
            "respondent_id": record.respondent_id,
            "phase": record.phase,
            "screener_responses": [
                {
                    "question_number": r.question_number,
                    "selected_option": r.selected_option,
                    "resolved_category": r.resolved_category,
                    "answered_at": r.answered_at,
                }
                for r in record.screener_responses
            ],
            "scenario_responses": [
                {
                    "scenario_number": r.scenario_number,
                    "scenario_id": r.scenario_id,
                    "selected_option_id": r.selected_option_id,
                    "selected_type": r.selected_type,
                    "option_confidence": r.option_confidence,
                    "answered_at": r.answered_at,
                }
                for r in record.scenario_responses
            ],
            "wing_responses": [
                {"question_id": r.question_id, "selected": r.selected} for r in record.wing_responses
            ],
            "state_rankings": [
                {"triad_id": r.triad_id, "order": [r.most, r.middle, r.least]} for r in record.state_rankings
            ],
            "subtype_battles": [
                {"battle_id": r.battle_id, "winner": r.winner} for r in record.subtype_battles
            ],
            "subtype_tiebreak": record.subtype_tiebreak,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        })

    @staticmethod
    def _apply_header(record: AssessmentRecord, assessment: Assessment) -> None:
        record.respondent_id = assessment.respondent_id
        record.stage = assessment.stage.value
        record.phase = assessment.phase.model_dump(mode="json")
        record.subtype_tiebreak = assessment.subtype_tiebreak.value if assessment.subtype_tiebreak else None
        record.updated_at = assessment.updated_at

    @staticmethod
    def _response_records(assessment: Assessment) -> List:
        records = []
        for r in assessment.screener_responses:
            records.append(ScreenerResponseRecord(
                assessment_id=assessment.id,
                question_number=r.question_number,
                selected_option=r.selected_option.value,
                resolved_category=r.resolved_category.value,
                answered_at=r.answered_at,
            ))
        for r in assessment.scenario_responses:
            records.append(ScenarioResponseRecord(
                assessment_id=assessment.id,
                scenario_number=r.scenario_number,
                scenario_id=r.scenario_id,
                selected_option_id=r.selected_option_id,
                selected_type=int(r.selected_type),
                option_confidence=r.option_confidence,
                answered_at=r.answered_at,
            ))
        for position, r in enumerate(assessment.wing_responses):
            records.append(WingResponseRecord(
                assessment_id=assessment.id,
                position=position,
                question_id=r.question_id,
                selected=r.selected.value,
            ))
        for r in assessment.state_rankings:
            most, middle, least = r.order
            records.append(StateRankingRecord(
                assessment_id=assessment.id,
                triad_id=r.triad_id,
                most=most.value,
                middle=middle.value,
                least=least.value,
            ))
        for r in assessment.subtype_battles:
            records.append(SubtypeBattleRecord(
                assessment_id=assessment.id,
                battle_id=r.battle_id,
                winner=r.winner.value,
            ))
        return records

    # --- AssessmentStore ---

    def create(self, assessment: Assessment) -> Assessment:
        with self._session_factory() as session:
            record = AssessmentRecord(id=assessment.id, created_at=assessment.created_at)
            self._apply_header(record, assessment)
            session.add(record)
            session.flush()
            session.add_all(self._response_records(assessment))
            session.commit()
        logger.debug(f"Stored new assessment {assessment.id}")
        return assessment

    def get(self, assessment_id: str) -> Optional[Assessment]:
        with self._session_factory() as session:
            record = session.get(AssessmentRecord, assessment_id)
            return self._to_domain(record) if record else None

    def _newest(self, respondent_id: str, open_only: bool) -> Optional[Assessment]:
        stmt = select(AssessmentRecord).where(AssessmentRecord.respondent_id == respondent_id)
        if open_only:
            stmt = stmt.where(AssessmentRecord.stage != Stage.FINISHED.value)
        stmt = stmt.order_by(AssessmentRecord.created_at.desc(), AssessmentRecord.id.desc()).limit(1)
        with self._session_factory() as session:
            record = session.scalars(stmt).first()
            return self._to_domain(record) if record else None

    def find_open_for_respondent(self, respondent_id: str) -> Optional[Assessment]:
        return self._newest(respondent_id, open_only=True)

    def find_latest_for_respondent(self, respondent_id: str) -> Optional[Assessment]:
        return self._newest(respondent_id, open_only=False)

    def save(self, assessment: Assessment) -> Assessment:
        with self._session_factory() as session:
            record = session.get(AssessmentRecord, assessment.id)
            if record is None:
                raise KeyError(f"Assessment {assessment.id} was never created")
            # Old rows go first so re-inserted keys never collide
            for model in RESPONSE_RECORDS:
                session.execute(delete(model).where(model.assessment_id == assessment.id))
            self._apply_header(record, assessment)
            session.add_all(self._response_records(assessment))
            session.commit()
        return assessment

    def delete_for_respondent(self, respondent_id: str) -> int:
        with self._session_factory() as session:
            records = session.scalars(
                select(AssessmentRecord).where(AssessmentRecord.respondent_id == respondent_id)
            ).all()
            for record in records:
                session.delete(record)
            session.commit()
        logger.info(f"Deleted {len(records)} assessment(s) for respondent {respondent_id}")
        return len(records)
