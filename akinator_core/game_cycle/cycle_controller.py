"""
Akinator Core — Контролер циклу гри

Скінченний автомат однієї гри:

    ASKING ⇄ SOFT_CONFIRM ⇄ HARD_CONFIRM
        │
        ├─→ REVEAL ─→ REVEAL_SUCCESS
        │      └─(ні)→ штраф, miss += 1 ─→ ASKING
        │
        └─→ FAIL_LIST ─→ ALMOST_SUCCESS / NOT_IN_LIST

Кожен хід: завантажити сесію → оновити ваги → перерахувати розподіл →
вирішити перехід → зберегти сесію. Помилка протоколу на будь-якому кроці
не змінює збережений стан.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple
from dataclasses import dataclass, field

from akinator_core.config import EngineConfig
from akinator_core.errors import (
    SessionTerminatedError,
    UnexpectedAnswerError,
    UnknownCandidateError,
    UnknownFeatureError,
)
from akinator_core.schemas import (
    AiGateChoice,
    AnswerChoice,
    CatalogSnapshot,
    GamePhase,
    GameSession,
    HardConfirmQuestion,
    Outcome,
    PHASE_BY_KIND,
    Question,
    QuestionAnswerEntry,
    QuestionKind,
    RevealEntry,
    WeightSnapshot,
)
from akinator_core.scoring import (
    calculate_confidence,
    effective_candidates,
    initial_log_weights,
    normalize_log_weights,
)
from akinator_core.question_engine import (
    QuestionSelector,
    QuestionTextGenerator,
    answer_strength,
    apply_reveal_penalty,
    update_weights_bayesian,
    update_weights_for_tag_question,
)
from .transition_policy import TransitionDecision, TransitionPolicy
from .session_repository import InMemorySessionRepository, SessionRepository
from .play_history import InMemoryPlayHistory, PlayHistorySink, build_play_history_record
from .explanation import CandidateExplanation, explain_candidate, similar_candidates


logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Результат ходу: наступне питання, показ або підсумок"""
    session_id: str
    phase: GamePhase
    question_count: int

    # ASKING / SOFT_CONFIRM / HARD_CONFIRM
    question: Optional[Question] = None

    # REVEAL
    reveal_candidate_id: Optional[str] = None
    reveal_text: Optional[str] = None

    # Сигнали розподілу
    top_candidate_id: Optional[str] = None
    confidence: float = 0.0
    effective_candidates: float = 0.0

    # Завершення
    fail_list: List[str] = field(default_factory=list)
    outcome: Optional[Outcome] = None
    result_candidate_id: Optional[str] = None
    similar: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal

    def __repr__(self) -> str:
        return (
            f"TurnResult(session={self.session_id}, phase={self.phase.value}, "
            f"q={self.question_count}, confidence={self.confidence:.3f})"
        )


class GameCycleController:
    """
    Контролер гри.

    Приклад використання:
        controller = GameCycleController(catalog, config)

        turn = controller.start_session(AiGateChoice.DONT_CARE)
        while turn.phase.awaits_question_answer:
            print(turn.question.text)
            turn = controller.answer(turn.session_id, AnswerChoice.YES)

        if turn.phase == GamePhase.REVEAL:
            turn = controller.answer_reveal(turn.session_id, accepted=True)
    """

    def __init__(
        self,
        catalog: CatalogSnapshot,
        config: EngineConfig,
        session_repository: Optional[SessionRepository] = None,
        play_history: Optional[PlayHistorySink] = None,
        language: str = "ja",
        similar_top_n: int = 5
    ):
        """
        Args:
            catalog: Незмінний знімок каталогу
            config: Провалідована конфігурація
            session_repository: Сховище сесій (за замовчуванням у пам'яті)
            play_history: Приймач записів історії ігор
            language: Мова текстів питань
            similar_top_n: Скільки схожих творів повертати після гри
        """
        self.catalog = catalog
        self.config = config
        self.sessions = session_repository or InMemorySessionRepository()
        self.play_history = play_history or InMemoryPlayHistory()
        self.similar_top_n = similar_top_n

        self.selector = QuestionSelector(catalog, config)
        self.policy = TransitionPolicy(config)
        self.text_generator = QuestionTextGenerator(catalog, language=language)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def start_session(self, ai_gate_choice: AiGateChoice = AiGateChoice.DONT_CARE) -> TurnResult:
        """
        Почати нову гру.

        Args:
            ai_gate_choice: Відповідь на AI-гейт (фільтр кандидатів)

        Returns:
            TurnResult з першим питанням
        """
        candidates = self.catalog.filter_by_ai_gate(ai_gate_choice)
        if not candidates:
            raise ValueError(f"Немає кандидатів для AI-гейту {ai_gate_choice.value}")

        session = GameSession(
            ai_gate_choice=ai_gate_choice,
            log_weights=initial_log_weights(candidates, self.config.algo.alpha),
        )
        logger.info(
            f"Нова сесія {session.session_id}: {len(candidates)} кандидатів "
            f"(AI-гейт {ai_gate_choice.value})"
        )

        result = self._advance(session)
        self._save(session)
        return result

    def answer(self, session_id: str, answer: AnswerChoice) -> TurnResult:
        """
        Відповідь на поточне питання (EXPLORE_TAG / SOFT_CONFIRM / HARD_CONFIRM).

        Raises:
            SessionNotFoundError, SessionTerminatedError, UnexpectedAnswerError,
            UnknownFeatureError
        """
        session = self._load_active(session_id)
        question = session.pending_question
        if not session.phase.awaits_question_answer or question is None:
            raise UnexpectedAnswerError(
                f"Сесія {session_id} не чекає відповіді на питання (фаза {session.phase.value})"
            )

        holders = self._question_holders(question, session.log_weights.keys())
        strength = self._strength(question.kind, answer)

        session.weight_snapshots.append(
            WeightSnapshot(q_index=question.q_index, log_weights=dict(session.log_weights))
        )
        session.log_weights = self._update_weights(session.log_weights, holders, answer, strength)
        session.history.append(
            QuestionAnswerEntry(question=question, answer=answer, strength=strength)
        )
        session.question_count = question.q_index
        session.pending_question = None
        session.consecutive_no_count = session.consecutive_no_count + 1 if answer.is_negative else 0

        logger.debug(
            f"[{session_id}] Q{question.q_index} {question.kind.value} → {answer.value} (s={strength:+.2f})"
        )

        result = self._advance(session)
        self._save(session)
        return result

    def answer_reveal(self, session_id: str, accepted: bool) -> TurnResult:
        """
        Вердикт гравця щодо показаного кандидата.

        accepted=True → REVEAL_SUCCESS; False → штраф і повернення до питань
        (або FAIL_LIST при вичерпанні спроб).
        """
        session = self._load_active(session_id)
        if session.phase != GamePhase.REVEAL or session.reveal_candidate_id is None:
            raise UnexpectedAnswerError(f"Сесія {session_id} не показує кандидата")

        candidate_id = session.reveal_candidate_id
        probabilities = normalize_log_weights(session.log_weights)
        session.history.append(RevealEntry(
            candidate_id=candidate_id,
            confidence=probabilities[candidate_id],
            accepted=accepted,
            after_question=session.question_count,
        ))
        session.reveal_candidate_id = None

        if accepted:
            logger.info(f"[{session_id}] Вгадано: {candidate_id} за {session.question_count} питань")
            result = self._finish(session, GamePhase.REVEAL_SUCCESS, Outcome.SUCCESS, candidate_id)
            self._save(session)
            return result

        session.log_weights = apply_reveal_penalty(
            session.log_weights, candidate_id, self.config.algo.reveal_penalty
        )
        session.rejected_candidate_ids.append(candidate_id)
        session.reveal_miss_count += 1
        logger.info(f"[{session_id}] Показ відхилено: {candidate_id} (miss {session.reveal_miss_count})")

        probabilities = normalize_log_weights(session.log_weights)
        decision = self.policy.after_reveal_miss(
            probabilities, session.reveal_miss_count, session.question_count
        )
        if decision.should_continue:
            result = self._ask_next(session, probabilities, explore_first=True)
        else:
            result = self._enter_fail_list(session, probabilities, decision)

        self._save(session)
        return result

    def choose_from_fail_list(self, session_id: str, candidate_id: str) -> TurnResult:
        """Гравець обрав твір зі списку → ALMOST_SUCCESS"""
        session = self._load_fail_list(session_id)
        if candidate_id not in session.fail_list:
            raise UnknownCandidateError(candidate_id)

        result = self._finish(session, GamePhase.ALMOST_SUCCESS, Outcome.ALMOST_SUCCESS, candidate_id)
        self._save(session)
        return result

    def submit_not_in_list(self, session_id: str, title: str) -> TurnResult:
        """Твору немає у списку; гравець вводить назву → NOT_IN_LIST"""
        session = self._load_fail_list(session_id)
        title = (title or "").strip()
        if not title:
            raise UnexpectedAnswerError("Назва твору порожня")

        session.submitted_title = title
        result = self._finish(session, GamePhase.NOT_IN_LIST, Outcome.NOT_IN_LIST, None)
        self._save(session)
        return result

    def go_back(self, session_id: str) -> TurnResult:
        """
        Повернутися до попереднього питання.

        Відновлює ваги до відповіді, прибирає запис з історії та ставить
        те саме питання знову. Недоступно після показу кандидата.
        """
        session = self._load_active(session_id)
        if not session.phase.awaits_question_answer:
            raise UnexpectedAnswerError(f"Повернення недоступне у фазі {session.phase.value}")
        if not session.history or not isinstance(session.history[-1], QuestionAnswerEntry):
            raise UnexpectedAnswerError("Немає питання, до якого можна повернутися")

        entry = session.history.pop()
        snapshot = session.weight_snapshots.pop()
        if snapshot.q_index != entry.q_index:
            raise ValueError(
                f"Знімок ваг Q{snapshot.q_index} не відповідає питанню Q{entry.q_index}"
            )

        session.log_weights = snapshot.log_weights
        session.question_count = entry.q_index - 1
        session.pending_question = entry.question
        session.phase = PHASE_BY_KIND[entry.kind]
        session.consecutive_no_count = self._trailing_negative_answers(session)
        logger.debug(f"[{session_id}] Повернення до Q{entry.q_index}")

        result = self._turn_result(session, normalize_log_weights(session.log_weights))
        self._save(session)
        return result

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_session(self, session_id: str) -> GameSession:
        """Копія стану сесії"""
        return self.sessions.load(session_id)

    def get_probabilities(self, session_id: str) -> Dict[str, float]:
        return normalize_log_weights(self.sessions.load(session_id).log_weights)

    def explain(self, session_id: str, candidate_id: Optional[str] = None) -> CandidateExplanation:
        """
        Пояснення відповідності кандидата відповідям гравця.

        За замовчуванням: результат гри, показаний або топ-кандидат.
        """
        session = self.sessions.load(session_id)
        if candidate_id is None:
            candidate_id = session.result_candidate_id or session.reveal_candidate_id
        if candidate_id is None:
            candidate_id, _ = calculate_confidence(normalize_log_weights(session.log_weights))
        if candidate_id is None or self.catalog.get_candidate(candidate_id) is None:
            raise UnknownCandidateError(str(candidate_id))
        return explain_candidate(
            session, self.catalog, candidate_id, self.config.algo.derived_confidence_threshold
        )

    def run_full_game(
        self,
        answer_func: Callable[[object], AnswerChoice],
        reveal_func: Callable[[str], bool],
        ai_gate_choice: AiGateChoice = AiGateChoice.DONT_CARE,
        fail_list_func: Optional[Callable[[List[str]], Optional[str]]] = None
    ) -> TurnResult:
        """
        Зіграти гру до кінця (симуляція, тести).

        Args:
            answer_func: Відповідь на питання
            reveal_func: Вердикт на показ (True = вгадано)
            ai_gate_choice: Відповідь на AI-гейт
            fail_list_func: Вибір зі списку (None → NOT_IN_LIST)
        """
        turn = self.start_session(ai_gate_choice)

        while not turn.is_terminal:
            if turn.phase.awaits_question_answer:
                turn = self.answer(turn.session_id, answer_func(turn.question))
            elif turn.phase == GamePhase.REVEAL:
                turn = self.answer_reveal(turn.session_id, reveal_func(turn.reveal_candidate_id))
            elif turn.phase == GamePhase.FAIL_LIST:
                chosen = fail_list_func(turn.fail_list) if fail_list_func else None
                if chosen is not None:
                    turn = self.choose_from_fail_list(turn.session_id, chosen)
                else:
                    turn = self.submit_not_in_list(turn.session_id, "(unknown)")

        return turn

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _advance(self, session: GameSession) -> TurnResult:
        """Вирішити перехід після зміни ваг"""
        probabilities = normalize_log_weights(session.log_weights)
        decision = self.policy.after_answer(
            probabilities, session.question_count, session.rejected_candidate_ids,
            log_weights=session.log_weights,
        )

        if decision.is_reveal:
            return self._enter_reveal(session, probabilities, decision)
        if not decision.should_continue:
            return self._enter_fail_list(session, probabilities, decision)
        return self._ask_next(session, probabilities)

    def _ask_next(
        self,
        session: GameSession,
        probabilities: Dict[str, float],
        explore_first: bool = False
    ) -> TurnResult:
        question = self.selector.select_next_question(
            probabilities,
            question_index=session.question_count + 1,
            asked_tags=set(session.asked_tag_keys),
            used_probes=self._used_probes(session),
            exclude_ids=session.rejected_candidate_ids,
            last_kind=session.last_question_kind,
            consecutive_no=session.consecutive_no_count,
            explore_first=explore_first,
            log_weights=session.log_weights,
        )

        if question is None:
            decision = self.policy.when_no_question(
                probabilities, session.rejected_candidate_ids, log_weights=session.log_weights
            )
            if decision.is_reveal:
                return self._enter_reveal(session, probabilities, decision)
            return self._enter_fail_list(session, probabilities, decision)

        session.pending_question = self.text_generator.with_text(question)
        session.phase = PHASE_BY_KIND[question.kind]
        return self._turn_result(session, probabilities)

    def _enter_reveal(
        self,
        session: GameSession,
        probabilities: Dict[str, float],
        decision: TransitionDecision
    ) -> TurnResult:
        session.phase = GamePhase.REVEAL
        session.pending_question = None
        session.reveal_candidate_id = decision.reveal_candidate_id
        logger.info(f"[{session.session_id}] REVEAL {decision.reveal_candidate_id}: {decision.message}")
        return self._turn_result(session, probabilities)

    def _enter_fail_list(
        self,
        session: GameSession,
        probabilities: Dict[str, float],
        decision: TransitionDecision
    ) -> TurnResult:
        session.phase = GamePhase.FAIL_LIST
        session.pending_question = None
        session.fail_list = self.policy.fail_list(session.log_weights, session.rejected_candidate_ids)
        session.outcome = Outcome.FAIL_LIST
        session.updated_at = datetime.now()
        logger.info(f"[{session.session_id}] FAIL_LIST ({len(session.fail_list)}): {decision.message}")

        self.play_history.save(build_play_history_record(session, self.config))
        return self._turn_result(session, probabilities)

    def _finish(
        self,
        session: GameSession,
        phase: GamePhase,
        outcome: Outcome,
        result_candidate_id: Optional[str]
    ) -> TurnResult:
        session.phase = phase
        session.outcome = outcome
        session.result_candidate_id = result_candidate_id
        session.pending_question = None
        session.updated_at = datetime.now()
        logger.info(f"[{session.session_id}] Гру завершено: {outcome.value}")

        self.play_history.save(build_play_history_record(session, self.config))

        result = self._turn_result(session, normalize_log_weights(session.log_weights))
        if result_candidate_id is not None:
            result.similar = similar_candidates(
                self.catalog,
                result_candidate_id,
                self.config.algo.derived_confidence_threshold,
                top_n=self.similar_top_n,
            )
        return result

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _save(self, session: GameSession) -> None:
        session.updated_at = datetime.now()
        self.sessions.save(session)

    def _load_active(self, session_id: str) -> GameSession:
        session = self.sessions.load(session_id)
        if session.is_terminal:
            raise SessionTerminatedError(session_id, session.phase.value)
        return session

    def _load_fail_list(self, session_id: str) -> GameSession:
        session = self._load_active(session_id)
        if session.phase != GamePhase.FAIL_LIST:
            raise UnexpectedAnswerError(f"Сесія {session_id} не у фазі FAIL_LIST")
        return session

    def _question_holders(self, question: Question, candidate_ids: Iterable[str]) -> FrozenSet[str]:
        """Кандидати, для яких відповідь "так" підтверджує ознаку"""
        if isinstance(question, HardConfirmQuestion):
            return self.selector.hard_confirm_holders(
                question.confirm_type, question.value, candidate_ids
            )
        if not self.catalog.has_feature_key(question.tag_key):
            raise UnknownFeatureError(question.tag_key)
        return self.selector.holders(question.tag_key, candidate_ids)

    def _strength(self, kind: QuestionKind, answer: AnswerChoice) -> float:
        algo = self.config.algo
        if kind == QuestionKind.EXPLORE_TAG:
            return answer_strength(answer, algo.explore_tag_strength_scale)
        if kind == QuestionKind.SOFT_CONFIRM:
            return answer_strength(answer, algo.soft_confirm_strength_scale)
        return answer_strength(answer)

    def _update_weights(
        self,
        log_weights: Dict[str, float],
        holders: FrozenSet[str],
        answer: AnswerChoice,
        strength: float
    ) -> Dict[str, float]:
        """exp(±β·s) за замовчуванням; правдоподібність відповіді при use_bayesian_update"""
        algo = self.config.algo
        if algo.use_bayesian_update:
            return update_weights_bayesian(log_weights, holders, answer, algo.bayesian_epsilon)
        return update_weights_for_tag_question(log_weights, holders, strength, algo.beta)

    def _used_probes(self, session: GameSession):
        probes = set()
        for entry in session.question_entries:
            if isinstance(entry.question, HardConfirmQuestion):
                probes.add((entry.question.confirm_type, entry.question.value))
        return probes

    def _trailing_negative_answers(self, session: GameSession) -> int:
        count = 0
        for entry in reversed(session.question_entries):
            if not entry.answer.is_negative:
                break
            count += 1
        return count

    def _turn_result(self, session: GameSession, probabilities: Dict[str, float]) -> TurnResult:
        top_id, confidence = calculate_confidence(probabilities)
        reveal_text = None
        if session.reveal_candidate_id is not None:
            reveal_text = self.text_generator.reveal_text(
                self.catalog.get_candidate(session.reveal_candidate_id)
            )
        return TurnResult(
            session_id=session.session_id,
            phase=session.phase,
            question_count=session.question_count,
            question=session.pending_question,
            reveal_candidate_id=session.reveal_candidate_id,
            reveal_text=reveal_text,
            top_candidate_id=top_id,
            confidence=confidence,
            effective_candidates=effective_candidates(probabilities),
            fail_list=list(session.fail_list),
            outcome=session.outcome,
            result_candidate_id=session.result_candidate_id,
        )

    def __repr__(self) -> str:
        return (
            f"GameCycleController(candidates={len(self.catalog.candidates)}, "
            f"features={len(self.catalog.features)}, sessions={type(self.sessions).__name__})"
        )
