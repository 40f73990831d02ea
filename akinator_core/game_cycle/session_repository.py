"""
Akinator Core — Репозиторій сесій

Контролер гри завантажує сесію на початку ходу і зберігає в кінці.
Сесія є звичайним значенням; її життям володіє репозиторій.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from akinator_core.errors import SessionNotFoundError
from akinator_core.schemas import GameSession


class SessionRepository(ABC):
    """Інтерфейс сховища сесій"""

    @abstractmethod
    def load(self, session_id: str) -> GameSession:
        """
        Завантажити сесію.

        Raises:
            SessionNotFoundError: якщо сесії немає
        """

    @abstractmethod
    def save(self, session: GameSession) -> None:
        """Зберегти (створити або замінити) сесію"""

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Видалити сесію (відсутня сесія: не помилка)"""

    def exists(self, session_id: str) -> bool:
        try:
            self.load(session_id)
        except SessionNotFoundError:
            return False
        return True


class InMemorySessionRepository(SessionRepository):
    """
    Сховище в пам'яті процесу.

    Зберігає JSON-знімки, тому кожен load повертає незалежну копію:
    зміни, не збережені через save, не потрапляють у сховище.
    """

    def __init__(self):
        self._sessions: Dict[str, str] = {}

    def load(self, session_id: str) -> GameSession:
        raw = self._sessions.get(session_id)
        if raw is None:
            raise SessionNotFoundError(session_id)
        return GameSession.model_validate_json(raw)

    def save(self, session: GameSession) -> None:
        self._sessions[session.session_id] = session.model_dump_json()

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def list_ids(self) -> List[str]:
        return sorted(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)
