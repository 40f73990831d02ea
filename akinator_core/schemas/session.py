"""
Akinator Core — Схеми стану сесії

Pydantic моделі для:
- GamePhase: фаза скінченного автомата гри
- GameSession: повний стан однієї гри (звичайне значення, без поведінки)
- PlayHistoryRecord: підсумковий запис гри для зовнішнього сховища
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, Field

from .questions import AiGateChoice, HistoryEntry, Question, QuestionAnswerEntry, QuestionKind


class GamePhase(str, Enum):
    """Фаза гри"""
    ASKING = "ASKING"                   # питання EXPLORE_TAG
    SOFT_CONFIRM = "SOFT_CONFIRM"       # підтвердження тегу топ-кандидата
    HARD_CONFIRM = "HARD_CONFIRM"       # ініціал назви / автор
    REVEAL = "REVEAL"                   # показ кандидата, чекаємо вердикт
    REVEAL_SUCCESS = "REVEAL_SUCCESS"   # вгадали
    FAIL_LIST = "FAIL_LIST"             # список кандидатів, чекаємо вибір
    ALMOST_SUCCESS = "ALMOST_SUCCESS"   # гравець обрав зі списку
    NOT_IN_LIST = "NOT_IN_LIST"         # твору немає в списку

    @property
    def is_terminal(self) -> bool:
        return self in (GamePhase.REVEAL_SUCCESS, GamePhase.ALMOST_SUCCESS, GamePhase.NOT_IN_LIST)

    @property
    def awaits_question_answer(self) -> bool:
        return self in (GamePhase.ASKING, GamePhase.SOFT_CONFIRM, GamePhase.HARD_CONFIRM)


# Фаза, в якій чекаємо відповідь на питання певного типу
PHASE_BY_KIND = {
    QuestionKind.EXPLORE_TAG: GamePhase.ASKING,
    QuestionKind.SOFT_CONFIRM: GamePhase.SOFT_CONFIRM,
    QuestionKind.HARD_CONFIRM: GamePhase.HARD_CONFIRM,
}


class Outcome(str, Enum):
    """Підсумок гри"""
    SUCCESS = "SUCCESS"
    FAIL_LIST = "FAIL_LIST"
    ALMOST_SUCCESS = "ALMOST_SUCCESS"
    NOT_IN_LIST = "NOT_IN_LIST"


class WeightSnapshot(BaseModel):
    """Лог-ваги перед відповіддю на питання q_index"""
    q_index: int
    log_weights: Dict[str, float]


class GameSession(BaseModel):
    """
    Стан однієї гри.

    Змінюється лише контролером циклу гри; зберігається репозиторієм
    між ходами.
    """
    # Ідентифікатор
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])

    phase: GamePhase = GamePhase.ASKING
    ai_gate_choice: AiGateChoice = AiGateChoice.DONT_CARE

    # Питання
    question_count: int = 0
    history: List[HistoryEntry] = Field(default_factory=list)
    pending_question: Optional[Question] = None
    consecutive_no_count: int = 0

    # Ваги кандидатів у лог-просторі (log w)
    log_weights: Dict[str, float] = Field(default_factory=dict)
    weight_snapshots: List[WeightSnapshot] = Field(default_factory=list)

    # Показ кандидата
    reveal_candidate_id: Optional[str] = None
    reveal_miss_count: int = 0
    rejected_candidate_ids: List[str] = Field(default_factory=list)

    # Завершення
    fail_list: List[str] = Field(default_factory=list)
    outcome: Optional[Outcome] = None
    result_candidate_id: Optional[str] = None
    submitted_title: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal

    @property
    def question_entries(self) -> List[QuestionAnswerEntry]:
        return [e for e in self.history if isinstance(e, QuestionAnswerEntry)]

    @property
    def asked_tag_keys(self) -> List[str]:
        """Теги, про які вже питали (включно з поточним питанням)"""
        keys = [
            e.question.tag_key for e in self.question_entries
            if e.question.kind != QuestionKind.HARD_CONFIRM
        ]
        pending = self.pending_question
        if pending is not None and pending.kind != QuestionKind.HARD_CONFIRM:
            keys.append(pending.tag_key)
        return keys

    @property
    def last_question_kind(self) -> Optional[QuestionKind]:
        entries = self.question_entries
        return entries[-1].kind if entries else None

    def get_summary(self) -> Dict[str, Any]:
        """Короткий підсумок сесії"""
        return {
            "session_id": self.session_id,
            "phase": self.phase.value,
            "ai_gate_choice": self.ai_gate_choice.value,
            "question_count": self.question_count,
            "reveal_miss_count": self.reveal_miss_count,
            "candidates": len(self.log_weights),
            "outcome": self.outcome.value if self.outcome else None,
            "result_candidate_id": self.result_candidate_id,
        }

    def __repr__(self) -> str:
        return (
            f"GameSession(id={self.session_id}, phase={self.phase.value}, "
            f"questions={self.question_count}, misses={self.reveal_miss_count})"
        )


class PlayHistoryRecord(BaseModel):
    """Підсумковий запис гри (один на сесію)"""
    session_id: str
    outcome: Outcome
    question_count: int
    history: List[HistoryEntry] = Field(default_factory=list)
    ai_gate_choice: AiGateChoice
    result_candidate_id: Optional[str] = None
    submitted_title: Optional[str] = None
    play_bonus: float = Field(default=0.0, description="Приріст популярності для result_candidate_id")
    created_at: datetime = Field(default_factory=datetime.now)

    def serialized_history(self) -> str:
        """Історія питань у JSON"""
        return self.model_dump_json(include={"history"})
