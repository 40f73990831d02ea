"""
Akinator Core — Історія ігор

Один запис на сесію. Запис створюється при переході у FAIL_LIST або
завершенні гри і замінюється, коли гравець обирає твір зі списку.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from akinator_core.config import EngineConfig
from akinator_core.schemas import GameSession, Outcome, PlayHistoryRecord


def build_play_history_record(session: GameSession, config: EngineConfig) -> PlayHistoryRecord:
    """Підсумковий запис для сесії з встановленим outcome"""
    if session.outcome is None:
        raise ValueError(f"Сесія {session.session_id} ще не має підсумку")

    play_bonus = 0.0
    if session.outcome == Outcome.SUCCESS:
        play_bonus = config.popularity.play_bonus_on_success

    return PlayHistoryRecord(
        session_id=session.session_id,
        outcome=session.outcome,
        question_count=session.question_count,
        history=list(session.history),
        ai_gate_choice=session.ai_gate_choice,
        result_candidate_id=session.result_candidate_id,
        submitted_title=session.submitted_title,
        play_bonus=play_bonus,
    )


class PlayHistorySink(ABC):
    """Приймач записів історії ігор"""

    @abstractmethod
    def save(self, record: PlayHistoryRecord) -> None:
        """Зберегти запис (заміна за session_id)"""


class InMemoryPlayHistory(PlayHistorySink):
    """Історія ігор у пам'яті"""

    def __init__(self):
        self._records: Dict[str, PlayHistoryRecord] = {}

    def save(self, record: PlayHistoryRecord) -> None:
        self._records[record.session_id] = record

    def get(self, session_id: str) -> Optional[PlayHistoryRecord]:
        return self._records.get(session_id)

    def records(self) -> List[PlayHistoryRecord]:
        return list(self._records.values())

    def outcome_counts(self) -> Dict[str, int]:
        """Кількість ігор за підсумком"""
        counts = {outcome.value: 0 for outcome in Outcome}
        for record in self._records.values():
            counts[record.outcome.value] += 1
        return counts

    def __len__(self) -> int:
        return len(self._records)
