from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

# Define naming conventions for constraints and indexes
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


def _utcnow():
    return datetime.now(timezone.utc)


class AssessmentRecord(Base):
    __tablename__ = "assessments"

    id = Column(String(36), primary_key=True)
    respondent_id = Column(String(255), nullable=False)
    stage = Column(String(32), nullable=False)
    # The stage variant with every result computed so far
    phase = Column(JSON, nullable=False)
    subtype_tiebreak = Column(String(2), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    screener_responses = relationship(
        "ScreenerResponseRecord", back_populates="assessment", cascade="all, delete-orphan",
        order_by="ScreenerResponseRecord.question_number",
    )
    scenario_responses = relationship(
        "ScenarioResponseRecord", back_populates="assessment", cascade="all, delete-orphan",
        order_by="ScenarioResponseRecord.scenario_number",
    )
    wing_responses = relationship(
        "WingResponseRecord", back_populates="assessment", cascade="all, delete-orphan",
        order_by="WingResponseRecord.position",
    )
    state_rankings = relationship(
        "StateRankingRecord", back_populates="assessment", cascade="all, delete-orphan",
        order_by="StateRankingRecord.triad_id",
    )
    subtype_battles = relationship(
        "SubtypeBattleRecord", back_populates="assessment", cascade="all, delete-orphan",
        order_by="SubtypeBattleRecord.battle_id",
    )

    __table_args__ = (
        Index("ix_assessments_respondent_id_created_at", "respondent_id", "created_at"),
    )


class ScreenerResponseRecord(Base):
    __tablename__ = "screener_responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False)
    question_number = Column(Integer, nullable=False)
    selected_option = Column(String(1), nullable=False)
    resolved_category = Column(String(1), nullable=False)
    answered_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    assessment = relationship("AssessmentRecord", back_populates="screener_responses")

    __table_args__ = (
        UniqueConstraint("assessment_id", "question_number", name="uq_screener_responses_assessment_question"),
    )


class ScenarioResponseRecord(Base):
    __tablename__ = "scenario_responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False)
    scenario_number = Column(Integer, nullable=False)
    scenario_id = Column(String(64), nullable=False)
    selected_option_id = Column(String(64), nullable=False)
    selected_type = Column(Integer, nullable=False)
    option_confidence = Column(Float, nullable=False)
    answered_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    assessment = relationship("AssessmentRecord", back_populates="scenario_responses")

    __table_args__ = (
        UniqueConstraint("assessment_id", "scenario_id", name="uq_scenario_responses_assessment_scenario"),
    )


class WingResponseRecord(Base):
    __tablename__ = "wing_responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    question_id = Column(String(64), nullable=False)
    selected = Column(String(1), nullable=False)

    assessment = relationship("AssessmentRecord", back_populates="wing_responses")

    __table_args__ = (
        UniqueConstraint("assessment_id", "question_id", name="uq_wing_responses_assessment_question"),
    )


class StateRankingRecord(Base):
    __tablename__ = "state_rankings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False)
    triad_id = Column(Integer, nullable=False)
    most = Column(String(3), nullable=False)
    middle = Column(String(3), nullable=False)
    least = Column(String(3), nullable=False)

    assessment = relationship("AssessmentRecord", back_populates="state_rankings")

    __table_args__ = (
        UniqueConstraint("assessment_id", "triad_id", name="uq_state_rankings_assessment_triad"),
    )


class SubtypeBattleRecord(Base):
    __tablename__ = "subtype_battles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False)
    battle_id = Column(Integer, nullable=False)
    winner = Column(String(2), nullable=False)

    assessment = relationship("AssessmentRecord", back_populates="subtype_battles")

    __table_args__ = (
        UniqueConstraint("assessment_id", "battle_id", name="uq_subtype_battles_assessment_battle"),
    )
