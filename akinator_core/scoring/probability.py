"""
Akinator Core — Scoring Engine

Чисті функції над вектором ваг. Ваги сесії зберігаються в лог-просторі
(log w), тому множення ваги стає додаванням і нічого не переповнюється.

- base_prior: початкова вага з популярності
- initial_log_weights: початкові лог-ваги
- normalize_weights: ваги → ймовірності (рівномірно, якщо Σw = 0)
- normalize_log_weights: лог-ваги → ймовірності (log-sum-exp)
- rank_candidates: порядок p ↓, id ↑ (єдиний для всього рушія)
- calculate_confidence: max p з детермінованим tie-break
- effective_candidates: 1 / Σp² (participation ratio)
- effective_confirm_threshold: clamp(round(total / divisor), min, max)
- shift_log_weights: зсув лог-ваг так, щоб max = 0, без зміни порядку
"""

import math
import numpy as np
from typing import Dict, Iterable, List, Optional, Tuple

from akinator_core.schemas import Candidate


# =============================================================================
# PRIOR
# =============================================================================

def base_prior(candidate: Candidate, alpha: float) -> float:
    """
    Початкова вага кандидата.

    prior = exp(alpha * (popularity_base + popularity_play_bonus))

    alpha = 0 дає рівномірний prior.
    """
    return math.exp(alpha * (candidate.popularity_base + candidate.popularity_play_bonus))


def initial_log_weights(candidates: Iterable[Candidate], alpha: float) -> Dict[str, float]:
    """Початкові лог-ваги: log(base_prior) без обчислення exp"""
    return {
        c.id: alpha * (c.popularity_base + c.popularity_play_bonus)
        for c in candidates
    }


# =============================================================================
# PROBABILITIES
# =============================================================================

def normalize_weights(weights: Dict[str, float]) -> Dict[str, float]:
    """
    Нормалізувати ваги в ймовірності.

    Args:
        weights: {candidate_id: weight}

    Returns:
        {candidate_id: probability}, Σ = 1; рівномірний розподіл якщо Σw = 0
    """
    if not weights:
        return {}
    ids = list(weights.keys())
    values = np.fromiter(weights.values(), dtype=np.float64, count=len(ids))
    total = values.sum()
    if total <= 0:
        probs = np.full(len(ids), 1.0 / len(ids))
    else:
        probs = values / total
    return {cid: float(p) for cid, p in zip(ids, probs)}


def normalize_log_weights(log_weights: Dict[str, float]) -> Dict[str, float]:
    """
    Лог-ваги → ймовірності: p = exp(log w - max) / Σ exp(log w - max).

    Кандидати, дуже далекі від лідера, отримують p = 0.0, але їхній
    порядок лишається в лог-вагах (див. rank_candidates).

    Raises:
        ValueError: Нескінченна або NaN лог-вага
    """
    if not log_weights:
        return {}
    ids = list(log_weights.keys())
    values = np.fromiter(log_weights.values(), dtype=np.float64, count=len(ids))
    if not np.all(np.isfinite(values)):
        raise ValueError(f"Некоректні лог-ваги: {values[~np.isfinite(values)]}")
    exp_values = np.exp(values - values.max())
    probs = exp_values / exp_values.sum()
    return {cid: float(p) for cid, p in zip(ids, probs)}


def rank_candidates(scores: Dict[str, float]) -> List[Tuple[str, float]]:
    """
    Кандидати за score спаданням, при рівності за id зростанням.

    scores: ймовірності або лог-ваги (порядок однаковий, але лог-ваги
    розрізняють кандидатів, чия p вже дорівнює 0.0).
    """
    return sorted(scores.items(), key=lambda x: (-x[1], x[0]))


def top_candidates(
    scores: Dict[str, float],
    n: int,
    exclude: Optional[Iterable[str]] = None
) -> List[str]:
    """Перші n id у порядку rank_candidates, без виключених"""
    excluded = set(exclude or ())
    ranked = [cid for cid, _ in rank_candidates(scores) if cid not in excluded]
    return ranked[:n]


def calculate_confidence(probabilities: Dict[str, float]) -> Tuple[Optional[str], float]:
    """
    Впевненість = максимальна ймовірність.

    При кількох рівних максимумах перемагає лексикографічно найменший id.

    Returns:
        (top_id, confidence); (None, 0.0) для порожнього розподілу
    """
    if not probabilities:
        return None, 0.0
    top_id, top_p = rank_candidates(probabilities)[0]
    return top_id, top_p


def effective_candidates(probabilities: Dict[str, float]) -> float:
    """
    Ефективна кількість кандидатів: 1 / Σp².

    n для рівномірного розподілу на n, → 1 при колапсі на одного кандидата,
    0 для порожнього розподілу.
    """
    if not probabilities:
        return 0.0
    p = np.fromiter(probabilities.values(), dtype=np.float64, count=len(probabilities))
    sum_sq = float(np.sum(p * p))
    if sum_sq <= 0:
        return 0.0
    return 1.0 / sum_sq


def effective_confirm_threshold(total_candidates: int, min_value: int, max_value: int, divisor: int) -> int:
    """
    Поріг ефективних кандидатів для вставки підтвердження.

    clamp(round(total / divisor), min, max); округлення half-up.
    """
    raw = math.floor(total_candidates / divisor + 0.5)
    return max(min_value, min(max_value, raw))


# =============================================================================
# NUMERIC GUARD
# =============================================================================

def shift_log_weights(log_weights: Dict[str, float]) -> Dict[str, float]:
    """
    Зсунути лог-ваги так, щоб max = 0.

    Відношення ваг (різниці лог-ваг) і порядок не змінюються; значення
    лишаються скінченними, скільки б оновлень не накопичилось.

    Raises:
        ValueError: Нескінченна або NaN лог-вага
    """
    if not log_weights:
        return {}
    ids = list(log_weights.keys())
    values = np.fromiter(log_weights.values(), dtype=np.float64, count=len(ids))
    if not np.all(np.isfinite(values)):
        raise ValueError(f"Некоректні лог-ваги: {values[~np.isfinite(values)]}")
    values = values - values.max()
    return {cid: float(v) for cid, v in zip(ids, values)}
