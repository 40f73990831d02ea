"""
Akinator Core — Політика переходів

Рішення після кожного оновлення ваг (в порядку пріоритету):
- REVEAL: впевненість топ-кандидата (серед не відхилених) ≥ reveal_threshold
- MAX_REVEAL_MISSES: накопичено max_reveal_misses відхилених показів
- MAX_QUESTIONS: question_count досяг max_questions
- CONTINUE: ставимо наступне питання

Якщо питань більше немає: примусовий показ або FAIL_LIST.
"""

from typing import Dict, Iterable, List, Optional
from dataclasses import dataclass
from enum import Enum

from akinator_core.config import EngineConfig
from akinator_core.schemas import GamePhase
from akinator_core.scoring import calculate_confidence, effective_candidates, top_candidates


class TransitionReason(Enum):
    """Причина переходу"""
    CONTINUE = "continue"                     # наступне питання
    REVEAL = "reveal"                         # впевненість досягла порогу
    FORCED_REVEAL = "forced_reveal"           # питань немає, показуємо топ
    MAX_QUESTIONS = "max_questions"           # ліміт питань
    MAX_REVEAL_MISSES = "max_reveal_misses"   # ліміт відхилених показів
    NO_CANDIDATES = "no_candidates"           # всі кандидати відхилені


@dataclass
class TransitionDecision:
    """Результат перевірки переходу"""
    reason: TransitionReason
    next_phase: GamePhase
    message: str = ""

    reveal_candidate_id: Optional[str] = None
    confidence: float = 0.0
    effective_candidates: float = 0.0

    @property
    def should_continue(self) -> bool:
        return self.reason == TransitionReason.CONTINUE

    @property
    def is_reveal(self) -> bool:
        return self.reason in (TransitionReason.REVEAL, TransitionReason.FORCED_REVEAL)


class TransitionPolicy:
    """
    Рішення про наступну фазу гри.

    Приклад:
        policy = TransitionPolicy(config)

        decision = policy.after_answer(probs, question_count=5, rejected_ids=[])
        if decision.is_reveal:
            print(f"Показуємо: {decision.reveal_candidate_id}")
    """

    def __init__(self, config: EngineConfig):
        self.config = config

    def reveal_target(
        self,
        scores: Dict[str, float],
        rejected_ids: Iterable[str]
    ) -> Optional[str]:
        """Топ-кандидат серед не відхилених (scores: ймовірності або лог-ваги)"""
        top = top_candidates(scores, 1, exclude=rejected_ids)
        return top[0] if top else None

    def fail_list(
        self,
        scores: Dict[str, float],
        rejected_ids: Iterable[str]
    ) -> List[str]:
        """Перші fail_list_n кандидатів без відхилених (scores: ймовірності або лог-ваги)"""
        return top_candidates(scores, self.config.flow.fail_list_n, exclude=rejected_ids)

    def after_answer(
        self,
        probabilities: Dict[str, float],
        question_count: int,
        rejected_ids: Iterable[str] = (),
        log_weights: Optional[Dict[str, float]] = None
    ) -> TransitionDecision:
        """
        Перевірити переходи після відповіді на питання.

        Args:
            probabilities: Розподіл після оновлення
            question_count: Кількість відповідей
            rejected_ids: Відхилені при показі кандидати
            log_weights: Лог-ваги для порядку кандидатів (за замовчуванням probabilities)
        """
        rejected = set(rejected_ids)
        effective = effective_candidates(probabilities)
        _, top_confidence = calculate_confidence(probabilities)

        # 1. REVEAL
        target = self.reveal_target(_ranking(probabilities, log_weights), rejected)
        if target is not None:
            confidence = probabilities[target]
            if confidence >= self.config.confirm.reveal_threshold:
                return TransitionDecision(
                    reason=TransitionReason.REVEAL,
                    next_phase=GamePhase.REVEAL,
                    message=f"Впевненість {confidence:.1%} ≥ порогу показу",
                    reveal_candidate_id=target,
                    confidence=confidence,
                    effective_candidates=effective,
                )

        # 2. MAX_QUESTIONS
        limit = self._check_question_limit(question_count, top_confidence, effective)
        if limit is not None:
            return limit

        return TransitionDecision(
            reason=TransitionReason.CONTINUE,
            next_phase=GamePhase.ASKING,
            message="Продовжуємо",
            confidence=top_confidence,
            effective_candidates=effective,
        )

    def after_reveal_miss(
        self,
        probabilities: Dict[str, float],
        reveal_miss_count: int,
        question_count: int
    ) -> TransitionDecision:
        """Перевірити переходи після відхиленого показу"""
        effective = effective_candidates(probabilities)
        _, top_confidence = calculate_confidence(probabilities)

        if reveal_miss_count >= self.config.flow.max_reveal_misses:
            return TransitionDecision(
                reason=TransitionReason.MAX_REVEAL_MISSES,
                next_phase=GamePhase.FAIL_LIST,
                message=f"Відхилено показів: {reveal_miss_count}",
                confidence=top_confidence,
                effective_candidates=effective,
            )

        limit = self._check_question_limit(question_count, top_confidence, effective)
        if limit is not None:
            return limit

        return TransitionDecision(
            reason=TransitionReason.CONTINUE,
            next_phase=GamePhase.ASKING,
            message="Показ відхилено, продовжуємо",
            confidence=top_confidence,
            effective_candidates=effective,
        )

    def when_no_question(
        self,
        probabilities: Dict[str, float],
        rejected_ids: Iterable[str] = (),
        log_weights: Optional[Dict[str, float]] = None
    ) -> TransitionDecision:
        """Питань не лишилось: показати топ-кандидата або FAIL_LIST"""
        target = self.reveal_target(_ranking(probabilities, log_weights), rejected_ids)
        if target is None:
            return TransitionDecision(
                reason=TransitionReason.NO_CANDIDATES,
                next_phase=GamePhase.FAIL_LIST,
                message="Всі кандидати відхилені",
            )
        return TransitionDecision(
            reason=TransitionReason.FORCED_REVEAL,
            next_phase=GamePhase.REVEAL,
            message="Питань більше немає",
            reveal_candidate_id=target,
            confidence=probabilities[target],
            effective_candidates=effective_candidates(probabilities),
        )

    def _check_question_limit(
        self,
        question_count: int,
        confidence: float,
        effective: float
    ) -> Optional[TransitionDecision]:
        if question_count >= self.config.flow.max_questions:
            return TransitionDecision(
                reason=TransitionReason.MAX_QUESTIONS,
                next_phase=GamePhase.FAIL_LIST,
                message=f"Досягнуто ліміту питань ({self.config.flow.max_questions})",
                confidence=confidence,
                effective_candidates=effective,
            )
        return None


def _ranking(probabilities: Dict[str, float], log_weights: Optional[Dict[str, float]]) -> Dict[str, float]:
    return log_weights if log_weights is not None else probabilities
