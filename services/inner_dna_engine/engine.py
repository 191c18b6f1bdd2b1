import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from services.inner_dna_engine import narrower, screener, states, subtypes, wing
from services.inner_dna_engine.assessment import (
    Assessment,
    ExitReason,
    FinishedStage,
    NarrowingStage,
    ScenarioResponse,
    ScreeningStage,
    Stage,
    StateScoringStage,
    SubtypeResult,
    SubtypeStage,
    WingStage,
)
from services.inner_dna_engine.loader import default_reference_bank
from services.inner_dna_engine.models import (
    AnswerOption,
    IncompleteAnswerSetError,
    Instinct,
    InvalidInputError,
    InvalidStageTransitionError,
    NotFoundError,
    ReferenceBank,
)
from services.inner_dna_engine.store import AssessmentStore

logger = logging.getLogger(__name__)


class InnerDnaEngine:
    """
    Drives one Assessment per respondent through the five stages:
    screener, scenario narrower, wing resolver, state scorer and instinct
    stack resolver. Every call loads the aggregate, validates, and saves it
    once at the end, so a rejected call leaves storage untouched.
    """

    def __init__(self, store: AssessmentStore, bank: Optional[ReferenceBank] = None, selection_salt: str = ""):
        self.store = store
        self.bank = bank or default_reference_bank()
        self.selection_salt = selection_salt

    # --- Helpers ---

    def _load(self, assessment_id: str) -> Assessment:
        assessment = self.store.get(assessment_id)
        if assessment is None:
            raise NotFoundError(f"Assessment not found: {assessment_id}")
        return assessment

    def _require_stage(self, assessment: Assessment, stage: Stage, action: str) -> None:
        if assessment.stage != stage:
            raise InvalidStageTransitionError(
                f"Cannot {action} while assessment {assessment.id} is in {assessment.stage.value}; "
                f"it must be in {stage.value}"
            )

    def _require_reached(self, assessment: Assessment, stage: Stage, action: str) -> None:
        if not assessment.at_least(stage):
            raise InvalidStageTransitionError(
                f"Cannot {action} before assessment {assessment.id} reaches {stage.value} "
                f"(currently {assessment.stage.value})"
            )

    def _type_entry(self, personality_type) -> Dict[str, Any]:
        return {"type": int(personality_type), "name": self.bank.type_name(personality_type)}

    def _save(self, assessment: Assessment, previous_stage: Stage) -> None:
        self.store.save(assessment)
        if assessment.stage != previous_stage:
            logger.info(
                f"Assessment {assessment.id} moved from {previous_stage.value} to {assessment.stage.value}"
            )

    # --- Lifecycle ---

    def start_assessment(self, respondent_id: str) -> Dict[str, Any]:
        """Resumes the respondent's newest unfinished assessment, or starts a new one."""
        if not respondent_id or not str(respondent_id).strip():
            raise InvalidInputError("respondent_id is required")

        assessment = self.store.find_open_for_respondent(respondent_id)
        is_resuming = assessment is not None
        if assessment is None:
            assessment = Assessment(respondent_id=respondent_id)
            assessment.advance(ScreeningStage())
            self.store.create(assessment)
            logger.info(f"Started assessment {assessment.id} for respondent {respondent_id}")
        else:
            logger.info(f"Resuming assessment {assessment.id} at {assessment.stage.value}")

        return {
            "assessment_id": assessment.id,
            "respondent_id": assessment.respondent_id,
            "stage": assessment.stage.value,
            "is_resuming": is_resuming,
            "next_prompt": self._next_prompt(assessment),
        }

    def _next_prompt(self, assessment: Assessment) -> Dict[str, Any]:
        stage = assessment.stage
        if stage in (Stage.STARTED, Stage.SCREENING):
            number = screener.next_question_number(self.bank, assessment.screener_responses)
            return {"kind": "screener_question", **self.get_screener_question(number)}
        if stage == Stage.NARROWING:
            return {"kind": "scenario", **self._scenario_view(assessment)}
        if stage == Stage.RESOLVING_WING:
            return {"kind": "wing_questions", **self._wing_view(assessment)}
        if stage == Stage.SCORING_STATE:
            return {"kind": "state_triads", **self._triads_view(assessment)}
        if stage == Stage.RESOLVING_SUBTYPE:
            return {"kind": "subtype_battles", **self._battles_view(assessment)}
        return {"kind": "finished"}

    # --- Screener ---

    def get_screener_question(self, question_number: int) -> Dict[str, Any]:
        question = self.bank.screener_question(question_number)
        if question is None:
            raise NotFoundError(f"Screener question not found: {question_number}")
        total = len(self.bank.screener_questions)
        return {
            "question_number": question.id,
            "option_a": question.option_a,
            "option_b": question.option_b,
            "total_questions": total,
            "progress": round(question.id / total * 100),
        }

    def list_screener_questions(self) -> List[Dict[str, Any]]:
        return [self.get_screener_question(q.id) for q in sorted(self.bank.screener_questions, key=lambda q: q.id)]

    def submit_screener_answer(self, assessment_id: str, question_number: int, option: str) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        if self.bank.screener_question(question_number) is None:
            raise NotFoundError(f"Screener question not found: {question_number}")
        try:
            selected = option if isinstance(option, AnswerOption) else AnswerOption(str(option).upper())
        except ValueError:
            raise InvalidInputError(f"Screener option must be A or B, got '{option}'")

        previous_stage = assessment.stage
        if previous_stage == Stage.NARROWING and assessment.scenario_responses:
            raise InvalidStageTransitionError(
                f"Screener answers of assessment {assessment.id} are locked once scenarios have been answered"
            )
        if previous_stage not in (Stage.STARTED, Stage.SCREENING, Stage.NARROWING):
            raise InvalidStageTransitionError(
                f"Cannot answer screener questions while assessment {assessment.id} is in {previous_stage.value}"
            )

        response = screener.build_response(self.bank, question_number, selected)
        assessment.screener_responses = screener.upsert_response(assessment.screener_responses, response)
        total = len(self.bank.screener_questions)

        if not screener.is_complete(self.bank, assessment.screener_responses):
            assessment.advance(ScreeningStage())
            self._save(assessment, previous_stage)
            logger.debug(f"Assessment {assessment.id}: screener question {question_number} -> {selected.value}")
            return {
                "completed": False,
                "answered_count": len(assessment.screener_responses),
                "total_questions": total,
                "next_question_number": screener.next_question_number(self.bank, assessment.screener_responses),
            }

        result = screener.score_screener(self.bank, assessment.screener_responses)
        assessment.advance(NarrowingStage(screener=result))
        self._save(assessment, previous_stage)
        if previous_stage == Stage.NARROWING:
            logger.info(f"Assessment {assessment.id}: screener re-scored after revising question {question_number}")
        return {
            "completed": True,
            "answered_count": total,
            "total_questions": total,
            "top_candidate_types": [int(t) for t in result.top_candidate_types],
            "top_types_with_names": [
                {**self._type_entry(t), "score": result.scores[t]} for t in result.top_candidate_types
            ],
            "scores": {int(t): score for t, score in result.scores.items()},
            "gap": result.gap,
            "next_stage": Stage.NARROWING.value,
        }

    # --- Narrower ---

    def _scenario_view(self, assessment: Assessment) -> Dict[str, Any]:
        screener_result = assessment.screener_result
        responses = assessment.scenario_responses
        number = len(responses) + 1
        distribution = narrower.confidence_distribution(screener_result, responses)
        leader = narrower.leading_type(screener_result, distribution)
        rng = narrower.selection_rng(self.selection_salt, assessment.id, number)
        scenario = narrower.select_scenario(self.bank, screener_result, responses, rng)

        view = {
            "completed": False,
            "scenario_number": number,
            "current_confidence": round(distribution[leader], 4),
            "leading_type": int(leader),
            "candidate_types": [int(t) for t in screener_result.top_candidate_types],
            "scenario": None,
        }
        if scenario is not None:
            view["scenario"] = {
                "id": scenario.id,
                "title": scenario.title,
                "context": scenario.context,
                "prompt": scenario.prompt,
                "difficulty": scenario.difficulty,
                "options": [
                    {"id": o.id, "text": o.text}
                    for o in narrower.presented_options(scenario, screener_result)
                ],
            }
        return view

    def _narrowing_outcome(self, assessment: Assessment) -> Dict[str, Any]:
        result = assessment.narrowing_result
        return {
            "completed": True,
            "top_type": int(result.resolved_type),
            "top_type_name": self.bank.type_name(result.resolved_type),
            "confidence": result.confidence,
            "exit_reason": result.exit_reason.value,
            "max_reached": result.max_reached,
            "scenario_count": result.scenario_count,
            "hero_scores": {int(t): round(v, 4) for t, v in result.hero_scores.items()},
        }

    def get_next_scenario(self, assessment_id: str) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_reached(assessment, Stage.NARROWING, "request a scenario")
        if assessment.stage != Stage.NARROWING:
            return self._narrowing_outcome(assessment)
        return self._scenario_view(assessment)

    def submit_scenario_answer(self, assessment_id: str, scenario_id: str, option_id: str) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_stage(assessment, Stage.NARROWING, "answer a scenario")

        scenario = self.bank.scenario(scenario_id)
        if scenario is None:
            raise NotFoundError(f"Scenario not found: {scenario_id}")
        if any(r.scenario_id == scenario_id for r in assessment.scenario_responses):
            raise InvalidInputError(f"Scenario {scenario_id} was already answered in this assessment")
        screener_result = assessment.screener_result
        number = len(assessment.scenario_responses) + 1
        presented = narrower.select_scenario(
            self.bank,
            screener_result,
            assessment.scenario_responses,
            narrower.selection_rng(self.selection_salt, assessment.id, number),
        )
        if presented is None or presented.id != scenario.id:
            raise InvalidInputError(
                f"Scenario {scenario_id} is not the scenario currently presented for assessment {assessment.id}"
            )
        option = scenario.option(option_id)
        if option is None:
            raise InvalidInputError(f"Option {option_id} does not belong to scenario {scenario_id}")
        if option.personality_type not in screener_result.top_candidate_types:
            raise InvalidInputError(f"Option {option_id} is not one of the remaining candidates")

        responses = assessment.scenario_responses + [
            ScenarioResponse(
                scenario_number=number,
                scenario_id=scenario.id,
                selected_option_id=option.id,
                selected_type=option.personality_type,
                option_confidence=option.confidence,
            )
        ]
        termination = narrower.check_termination(screener_result, responses)
        if termination is None:
            rng = narrower.selection_rng(self.selection_salt, assessment.id, len(responses) + 1)
            if narrower.select_scenario(self.bank, screener_result, responses, rng) is None:
                distribution = narrower.confidence_distribution(screener_result, responses)
                counts = narrower.pick_counts(screener_result, responses)
                dominant, _ = narrower.dominance(screener_result, counts, distribution)
                termination = (ExitReason.POOL_EXHAUSTED, dominant)

        previous_stage = assessment.stage
        assessment.scenario_responses = responses
        logger.debug(f"Assessment {assessment.id}: scenario {scenario.id} -> type {int(option.personality_type)}")

        if termination is None:
            assessment.advance(NarrowingStage(screener=screener_result))
            self._save(assessment, previous_stage)
            distribution = narrower.confidence_distribution(screener_result, responses)
            leader = narrower.leading_type(screener_result, distribution)
            return {
                "completed": False,
                "scenario_count": len(responses),
                "top_type": int(leader),
                "current_confidence": round(distribution[leader], 4),
                "hero_scores": {int(t): round(v, 4) for t, v in distribution.items()},
            }

        exit_reason, winner = termination
        result = narrower.build_result(screener_result, responses, exit_reason, winner)
        assessment.advance(WingStage(screener=screener_result, narrowing=result))
        self._save(assessment, previous_stage)
        logger.info(
            f"Assessment {assessment.id}: narrowed to type {int(winner)} after {len(responses)} scenarios "
            f"({exit_reason.value}, confidence {result.confidence})"
        )
        return {**self._narrowing_outcome(assessment), "next_stage": Stage.RESOLVING_WING.value}

    def get_narrowing_progress(self, assessment_id: str) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_reached(assessment, Stage.NARROWING, "read narrowing progress")
        screener_result = assessment.screener_result
        responses = assessment.scenario_responses
        distribution = narrower.confidence_distribution(screener_result, responses)
        leader = narrower.leading_type(screener_result, distribution)
        return {
            "completed": assessment.stage != Stage.NARROWING,
            "scenario_count": len(responses),
            "min_scenarios": narrower.MIN_SCENARIOS,
            "max_scenarios": narrower.MAX_SCENARIOS,
            "pick_counts": {int(t): c for t, c in narrower.pick_counts(screener_result, responses).items()},
            "confidence_distribution": {int(t): round(v, 4) for t, v in distribution.items()},
            "leading_type": int(leader),
            "current_confidence": round(distribution[leader], 4),
        }

    # --- Wing ---

    def _wing_view(self, assessment: Assessment) -> Dict[str, Any]:
        wing_set = wing.wing_set_for(self.bank, assessment.resolved_type)
        return {
            "core_type": int(wing_set.core_type),
            "core_type_name": self.bank.type_name(wing_set.core_type),
            "wing_a": int(wing_set.wing_a),
            "wing_a_name": self.bank.type_name(wing_set.wing_a),
            "wing_b": int(wing_set.wing_b),
            "wing_b_name": self.bank.type_name(wing_set.wing_b),
            "questions": [q.model_dump() for q in wing_set.questions],
        }

    def get_wing_questions(self, assessment_id: str) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_reached(assessment, Stage.RESOLVING_WING, "request wing questions")
        return self._wing_view(assessment)

    def submit_wing_answers(self, assessment_id: str, answers: Mapping[str, str]) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_stage(assessment, Stage.RESOLVING_WING, "submit wing answers")

        resolved_type = assessment.resolved_type
        responses = wing.parse_wing_answers(self.bank, resolved_type, dict(answers))
        result = wing.score_wing_answers(self.bank, resolved_type, responses)

        previous_stage = assessment.stage
        assessment.wing_responses = responses
        assessment.advance(StateScoringStage(
            screener=assessment.screener_result,
            narrowing=assessment.narrowing_result,
            wing=result,
        ))
        self._save(assessment, previous_stage)
        return {
            "wing": int(result.wing),
            "wing_name": self.bank.type_name(result.wing),
            "count_a": result.count_a,
            "count_b": result.count_b,
            "margin": result.margin,
            "is_balanced": result.is_balanced,
            "next_stage": Stage.SCORING_STATE.value,
        }

    # --- States ---

    def _triads_view(self, assessment: Assessment) -> Dict[str, Any]:
        return {
            "personality_type": int(assessment.resolved_type),
            "triads": states.triad_prompts(self.bank, assessment.resolved_type),
        }

    def get_state_triads(self, assessment_id: str) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_reached(assessment, Stage.SCORING_STATE, "request state triads")
        return self._triads_view(assessment)

    def submit_state_rankings(self, assessment_id: str, rankings: Sequence[Any]) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_stage(assessment, Stage.SCORING_STATE, "submit state rankings")

        parsed = states.parse_rankings(self.bank, rankings)
        result = states.score_states(self.bank, parsed)

        previous_stage = assessment.stage
        assessment.state_rankings = parsed
        assessment.advance(SubtypeStage(
            screener=assessment.screener_result,
            narrowing=assessment.narrowing_result,
            wing=assessment.wing_result,
            states=result,
        ))
        self._save(assessment, previous_stage)
        return {
            "primary_state": result.primary_state.value,
            "primary_state_name": self.bank.state(result.primary_state).internal_name,
            "primary_percent": result.primary_percent,
            "secondary_state": result.secondary_state.value,
            "secondary_state_name": self.bank.state(result.secondary_state).internal_name,
            "secondary_percent": result.secondary_percent,
            "state_code": result.state_code,
            "scores": {code.value: score for code, score in result.scores.items()},
            "next_stage": Stage.RESOLVING_SUBTYPE.value,
        }

    # --- Subtypes ---

    def _battles_view(self, assessment: Assessment) -> Dict[str, Any]:
        needs_tiebreak = bool(assessment.subtype_battles) and subtypes.is_circular(
            subtypes.tally_wins(self.bank, assessment.subtype_battles)
        )
        return {
            "instincts": [i.model_dump(mode="json") for i in self.bank.instincts],
            "battles": [b.model_dump(mode="json") for b in self.bank.battles],
            "needs_tiebreak": needs_tiebreak,
        }

    def _subtype_outcome(self, result: SubtypeResult) -> Dict[str, Any]:
        return {
            "completed": True,
            "needs_tiebreak": False,
            "order": [i.value for i in result.order],
            "tokens": {i.value: t for i, t in result.tokens.items()},
            "subtype_code": result.subtype_code,
            "resolved_by_tiebreak": result.resolved_by_tiebreak,
            "next_stage": Stage.FINISHED.value,
        }

    def _finish(self, assessment: Assessment, result: SubtypeResult, previous_stage: Stage) -> None:
        assessment.advance(FinishedStage(
            screener=assessment.screener_result,
            narrowing=assessment.narrowing_result,
            wing=assessment.wing_result,
            states=assessment.state_result,
            subtypes=result,
        ))
        self._save(assessment, previous_stage)

    def submit_subtype_battles(self, assessment_id: str, outcomes: Mapping[int, str]) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_stage(assessment, Stage.RESOLVING_SUBTYPE, "submit instinct battles")

        parsed = subtypes.parse_battles(self.bank, outcomes)
        order = subtypes.resolve_stack(self.bank, parsed)

        previous_stage = assessment.stage
        assessment.subtype_battles = parsed
        assessment.subtype_tiebreak = None
        if order is None:
            assessment.advance(assessment.phase)
            self._save(assessment, previous_stage)
            logger.info(f"Assessment {assessment.id}: circular instinct battles, asking for a tiebreak")
            return {
                "completed": False,
                "needs_tiebreak": True,
                "tiebreak_options": [i.code.value for i in self.bank.instincts],
            }

        result = subtypes.build_result(order)
        self._finish(assessment, result, previous_stage)
        return self._subtype_outcome(result)

    def submit_subtype_tiebreak(self, assessment_id: str, dominant: str) -> Dict[str, Any]:
        assessment = self._load(assessment_id)
        self._require_stage(assessment, Stage.RESOLVING_SUBTYPE, "submit an instinct tiebreak")
        if not assessment.subtype_battles:
            raise IncompleteAnswerSetError("Instinct battles must be submitted before a tiebreak")
        try:
            pick = dominant if isinstance(dominant, Instinct) else Instinct(str(dominant).lower())
        except ValueError:
            raise InvalidInputError(f"Tiebreak pick '{dominant}' is not an instinct")

        order = subtypes.resolve_stack(self.bank, assessment.subtype_battles, pick)
        result = subtypes.build_result(order, resolved_by_tiebreak=True)

        previous_stage = assessment.stage
        assessment.subtype_tiebreak = pick
        self._finish(assessment, result, previous_stage)
        return self._subtype_outcome(result)

    # --- Read-only projections and reset ---

    def _snapshot(self, assessment: Assessment) -> Dict[str, Any]:
        resolved_type = assessment.resolved_type
        return {
            "assessment_id": assessment.id,
            "respondent_id": assessment.respondent_id,
            "stage": assessment.stage.value,
            "top_candidate_types": (
                [int(t) for t in assessment.top_candidate_types] if assessment.top_candidate_types else None
            ),
            "resolved_type": int(resolved_type) if resolved_type else None,
            "resolved_type_name": self.bank.type_name(resolved_type) if resolved_type else None,
            "resolved_wing": int(assessment.resolved_wing) if assessment.resolved_wing else None,
            "primary_state": assessment.primary_state.value if assessment.primary_state else None,
            "secondary_state": assessment.secondary_state.value if assessment.secondary_state else None,
            "subtype_order": [i.value for i in assessment.subtype_order] if assessment.subtype_order else None,
            "results": assessment.phase.model_dump(mode="json", exclude={"stage"}),
            "response_counts": {
                "screener": len(assessment.screener_responses),
                "scenarios": len(assessment.scenario_responses),
                "wing": len(assessment.wing_responses),
                "state_rankings": len(assessment.state_rankings),
                "subtype_battles": len(assessment.subtype_battles),
            },
            "created_at": assessment.created_at.isoformat(),
            "updated_at": assessment.updated_at.isoformat(),
        }

    def get_snapshot(self, assessment_id: str) -> Dict[str, Any]:
        return self._snapshot(self._load(assessment_id))

    def get_latest_for_respondent(self, respondent_id: str) -> Dict[str, Any]:
        assessment = self.store.find_latest_for_respondent(respondent_id)
        if assessment is None:
            raise NotFoundError(f"No assessment found for respondent {respondent_id}")
        return self._snapshot(assessment)

    def reset(self, respondent_id: str) -> int:
        deleted = self.store.delete_for_respondent(respondent_id)
        logger.info(f"Reset respondent {respondent_id}: {deleted} assessment(s) removed")
        return deleted
