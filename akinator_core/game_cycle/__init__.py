"""
Akinator Core — Модуль циклу гри

Скінченний автомат гри та його колаборатори:
- GameCycleController: хід за ходом до підсумку
- TransitionPolicy: REVEAL / FAIL_LIST / продовження
- SessionRepository: сховище стану сесій
- PlayHistorySink: підсумкові записи ігор
- explain_candidate / tag_match_rate: пояснення результату

Приклад використання:
    from akinator_core.game_cycle import GameCycleController

    controller = GameCycleController(catalog, config)
    turn = controller.start_session()
    turn = controller.answer(turn.session_id, AnswerChoice.NO)
"""

from .transition_policy import (
    TransitionPolicy,
    TransitionDecision,
    TransitionReason,
)
from .session_repository import (
    SessionRepository,
    InMemorySessionRepository,
)
from .play_history import (
    PlayHistorySink,
    InMemoryPlayHistory,
    build_play_history_record,
)
from .explanation import (
    FeatureMatch,
    CandidateExplanation,
    explain_candidate,
    tag_match_rate,
    similar_candidates,
)
from .cycle_controller import (
    GameCycleController,
    TurnResult,
)

__all__ = [
    # Policy
    "TransitionPolicy",
    "TransitionDecision",
    "TransitionReason",

    # Repositories
    "SessionRepository",
    "InMemorySessionRepository",
    "PlayHistorySink",
    "InMemoryPlayHistory",
    "build_play_history_record",

    # Explanation
    "FeatureMatch",
    "CandidateExplanation",
    "explain_candidate",
    "tag_match_rate",
    "similar_candidates",

    # Controller
    "GameCycleController",
    "TurnResult",
]
