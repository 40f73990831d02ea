"""
Akinator Core — Scoring Engine

Перетворення ваг кандидатів на розподіл ймовірностей та похідні сигнали.

Приклад використання:
    from akinator_core.scoring import normalize_log_weights, calculate_confidence

    probs = normalize_log_weights({"work_001": 0.0, "work_002": -0.7})
    top_id, confidence = calculate_confidence(probs)
"""

from .probability import (
    base_prior,
    initial_log_weights,
    normalize_weights,
    normalize_log_weights,
    rank_candidates,
    top_candidates,
    calculate_confidence,
    effective_candidates,
    effective_confirm_threshold,
    shift_log_weights,
)

__all__ = [
    "base_prior",
    "initial_log_weights",
    "normalize_weights",
    "normalize_log_weights",
    "rank_candidates",
    "top_candidates",
    "calculate_confidence",
    "effective_candidates",
    "effective_confirm_threshold",
    "shift_log_weights",
]
