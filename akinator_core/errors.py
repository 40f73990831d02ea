"""
Akinator Core — Помилки

Дві незалежні гілки:
- ConfigError: невалідна конфігурація, фатальна при старті
- ProtocolError: помилка клієнта/протоколу під час гри; стан сесії не змінюється
"""

from typing import Optional


class AkinatorError(Exception):
    """Базова помилка пакета"""


# =============================================================================
# CONFIGURATION
# =============================================================================

class ConfigError(AkinatorError):
    """Конфігурація не пройшла валідацію"""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{message}")


# =============================================================================
# PROTOCOL
# =============================================================================

class ProtocolError(AkinatorError):
    """Некоректний виклик з боку клієнта"""


class SessionNotFoundError(ProtocolError):
    """Сесію не знайдено в репозиторії"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Сесію не знайдено: {session_id}")


class SessionTerminatedError(ProtocolError):
    """Сесія вже завершена"""

    def __init__(self, session_id: str, phase: str):
        self.session_id = session_id
        self.phase = phase
        super().__init__(f"Сесія {session_id} вже завершена (фаза {phase})")


class UnexpectedAnswerError(ProtocolError):
    """Відповідь не відповідає поточній фазі сесії"""


class UnknownFeatureError(ProtocolError):
    """Тег відсутній у каталозі"""

    def __init__(self, tag_key: str):
        self.tag_key = tag_key
        super().__init__(f"Невідомий тег: {tag_key}")


class UnknownCandidateError(ProtocolError):
    """Кандидат відсутній у сесії"""

    def __init__(self, candidate_id: str):
        self.candidate_id = candidate_id
        super().__init__(f"Невідомий кандидат: {candidate_id}")
