"""
Akinator Core — Модуль Question Engine

Обирає наступне питання та застосовує відповідь до ваг кандидатів.

Компоненти:
- passes_coverage_gate: фільтр покриття тегу
- update_weights_for_tag_question / update_weights_bayesian / apply_reveal_penalty:
  оновлення лог-ваг
- normalize_title_for_initial: ініціал назви для HARD_CONFIRM
- QuestionSelector: EXPLORE_TAG / SOFT_CONFIRM / HARD_CONFIRM
- QuestionTextGenerator: текст питання для показу

Приклад використання:
    from akinator_core.question_engine import QuestionSelector, update_weights_for_tag_question

    selector = QuestionSelector(catalog, config)
    question = selector.select_next_question(probs, question_index=1)

    holders = selector.holders(question.tag_key, log_weights.keys())
    log_weights = update_weights_for_tag_question(log_weights, holders, strength=1.0, beta=config.algo.beta)
"""

from .coverage import (
    calculate_coverage,
    derived_min_ratio,
    passes_coverage_gate,
)
from .weight_update import (
    ANSWER_STRENGTH,
    answer_strength,
    answer_likelihood,
    update_weights_for_tag_question,
    update_weights_bayesian,
    apply_reveal_penalty,
)
from .title_normalizer import (
    normalize_title_for_initial,
    normalize_author,
    UNKNOWN_INITIAL,
    UNKNOWN_AUTHOR,
)
from .question_selector import (
    QuestionSelector,
    TagScore,
    binary_entropy,
    select_explore_tag,
    should_insert_confirm,
    select_confirm_type,
    next_hard_confirm_type,
)
from .question_text import QuestionTextGenerator

__all__ = [
    # Coverage
    "calculate_coverage",
    "derived_min_ratio",
    "passes_coverage_gate",

    # Weights
    "ANSWER_STRENGTH",
    "answer_strength",
    "answer_likelihood",
    "update_weights_for_tag_question",
    "update_weights_bayesian",
    "apply_reveal_penalty",

    # Title
    "normalize_title_for_initial",
    "normalize_author",
    "UNKNOWN_INITIAL",
    "UNKNOWN_AUTHOR",

    # Selector
    "QuestionSelector",
    "TagScore",
    "binary_entropy",
    "select_explore_tag",
    "should_insert_confirm",
    "select_confirm_type",
    "next_hard_confirm_type",

    # Text
    "QuestionTextGenerator",
]
