"""
Akinator Core — Оновлення ваг

Ваги зберігаються в лог-просторі (log w), тому мультиплікативне оновлення
після відповіді на питання про ознаку стає додаванням:
- кандидат має ознаку:  log w += β·s   (w *= exp(+β·s))
- кандидат не має:      log w -= β·s   (w *= exp(-β·s))

s: сила відповіді (YES 1.0 ... NO -1.0); s = 0 нічого не змінює.

Альтернатива (algo.use_bayesian_update): w *= P(відповідь | ознака),
log w += log P.

Штраф за відхилений показ: log w(top) += log(reveal_penalty).

Всі функції чисті: повертають новий словник лог-ваг.
"""

import math
import numpy as np
from typing import Collection, Dict

from akinator_core.schemas import AnswerChoice
from akinator_core.scoring import shift_log_weights


# Сила відповіді (дві нейтральні відповіді мають однакову силу 0)
ANSWER_STRENGTH: Dict[AnswerChoice, float] = {
    AnswerChoice.YES: 1.0,
    AnswerChoice.PROBABLY_YES: 0.6,
    AnswerChoice.UNKNOWN: 0.0,
    AnswerChoice.PROBABLY_NO: -0.6,
    AnswerChoice.NO: -1.0,
    AnswerChoice.DONT_CARE: 0.0,
}

# Правдоподібність "можливо" для кандидата з ознакою (без ознаки: 1 - значення)
PROBABLY_LIKELIHOOD = 0.7


def answer_strength(answer: AnswerChoice, scale: float = 1.0) -> float:
    """Числова сила відповіді з масштабом типу питання"""
    return ANSWER_STRENGTH[answer] * scale


def update_weights_for_tag_question(
    log_weights: Dict[str, float],
    holders: Collection[str],
    strength: float,
    beta: float
) -> Dict[str, float]:
    """
    Оновити лог-ваги після відповіді на питання про ознаку.

    Args:
        log_weights: {candidate_id: log w}
        holders: Кандидати, що мають ознаку
        strength: Сила відповіді s
        beta: Крутизна оновлення

    Returns:
        Нові лог-ваги, зсунуті так, що max = 0
    """
    if strength == 0:
        return dict(log_weights)

    ids = list(log_weights.keys())
    values = np.fromiter(log_weights.values(), dtype=np.float64, count=len(ids))
    has = np.fromiter((cid in holders for cid in ids), dtype=bool, count=len(ids))

    step = beta * strength
    updated = values + np.where(has, step, -step)
    return shift_log_weights({cid: float(v) for cid, v in zip(ids, updated)})


def answer_likelihood(has_feature: bool, answer: AnswerChoice, epsilon: float) -> float:
    """
    P(відповідь | кандидат має / не має ознаку).

    YES / NO: 1 - ε або ε; PROBABLY_*: 0.7 або 0.3, обмежені [ε, 1 - ε];
    UNKNOWN / DONT_CARE: 1 (нейтрально).
    """
    eps = max(0.0, min(0.5, epsilon))
    high, low = 1.0 - eps, eps

    if answer == AnswerChoice.YES:
        return high if has_feature else low
    if answer == AnswerChoice.NO:
        return low if has_feature else high
    if answer == AnswerChoice.PROBABLY_YES:
        value = PROBABLY_LIKELIHOOD if has_feature else 1.0 - PROBABLY_LIKELIHOOD
        return max(low, min(high, value))
    if answer == AnswerChoice.PROBABLY_NO:
        value = 1.0 - PROBABLY_LIKELIHOOD if has_feature else PROBABLY_LIKELIHOOD
        return max(low, min(high, value))
    return 1.0


def update_weights_bayesian(
    log_weights: Dict[str, float],
    holders: Collection[str],
    answer: AnswerChoice,
    epsilon: float
) -> Dict[str, float]:
    """
    Байєсове оновлення: log w += log P(відповідь | ознака).

    Args:
        log_weights: {candidate_id: log w}
        holders: Кандидати, що мають ознаку
        answer: Відповідь гравця
        epsilon: Ймовірність помилки гравця для YES / NO (0 < ε ≤ 0.5)

    Returns:
        Нові лог-ваги, зсунуті так, що max = 0; без змін для нейтральної відповіді
    """
    if not 0.0 < epsilon <= 0.5:
        raise ValueError(f"epsilon має бути в (0, 0.5]: {epsilon}")

    log_yes = math.log(answer_likelihood(True, answer, epsilon))
    log_no = math.log(answer_likelihood(False, answer, epsilon))
    if log_yes == 0.0 and log_no == 0.0:
        return dict(log_weights)

    updated = {
        cid: value + (log_yes if cid in holders else log_no)
        for cid, value in log_weights.items()
    }
    return shift_log_weights(updated)


def apply_reveal_penalty(
    log_weights: Dict[str, float],
    candidate_id: str,
    penalty: float
) -> Dict[str, float]:
    """Помножити вагу лише відхиленого кандидата на penalty (0 < penalty ≤ 1)"""
    if not 0.0 < penalty <= 1.0:
        raise ValueError(f"penalty має бути в (0, 1]: {penalty}")

    updated = dict(log_weights)
    if candidate_id in updated:
        updated[candidate_id] = updated[candidate_id] + math.log(penalty)
    return shift_log_weights(updated)
