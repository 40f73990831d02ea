"""
Akinator Core — Схеми даних

Pydantic моделі каталогу, питань та стану сесії.
"""

from .questions import (
    AnswerChoice,
    AiGateChoice,
    QuestionKind,
    HardConfirmType,
    HARD_CONFIRM_ORDER,
    TagQuestion,
    HardConfirmQuestion,
    Question,
    QuestionAnswerEntry,
    RevealEntry,
    HistoryEntry,
)
from .catalog import (
    AiFlag,
    FeatureSource,
    Candidate,
    Feature,
    Incidence,
    CatalogSnapshot,
    incidence_present,
)
from .session import (
    GamePhase,
    PHASE_BY_KIND,
    Outcome,
    WeightSnapshot,
    GameSession,
    PlayHistoryRecord,
)

__all__ = [
    # Questions
    "AnswerChoice",
    "AiGateChoice",
    "QuestionKind",
    "HardConfirmType",
    "HARD_CONFIRM_ORDER",
    "TagQuestion",
    "HardConfirmQuestion",
    "Question",
    "QuestionAnswerEntry",
    "RevealEntry",
    "HistoryEntry",

    # Catalog
    "AiFlag",
    "FeatureSource",
    "Candidate",
    "Feature",
    "Incidence",
    "CatalogSnapshot",
    "incidence_present",

    # Session
    "GamePhase",
    "PHASE_BY_KIND",
    "Outcome",
    "WeightSnapshot",
    "GameSession",
    "PlayHistoryRecord",
]
