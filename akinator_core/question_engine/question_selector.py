"""
Akinator Core — Question Selector

Вибір наступного питання.

EXPLORE_TAG: тег, що ділить поточний розподіл найрівніше
    p(tag) = Σ p(c) для кандидатів з тегом
    score  = |p - 0.5|  (або ентропія розбиття H(p), якщо use_information_gain)
    При рівності: лексикографічно найменший ключ тегу.

SOFT_CONFIRM: DERIVED тег топ-кандидата з p у смузі, найближчий до 0.5.
HARD_CONFIRM: ініціал назви / автор топ-кандидата (не двічі поспіль).
"""

import logging
import math
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple
from dataclasses import dataclass

from akinator_core.config import EngineConfig
from akinator_core.schemas import (
    CatalogSnapshot,
    FeatureSource,
    HARD_CONFIRM_ORDER,
    HardConfirmQuestion,
    HardConfirmType,
    QuestionKind,
    TagQuestion,
)
from akinator_core.scoring import (
    effective_candidates,
    effective_confirm_threshold,
    top_candidates,
)
from .coverage import passes_coverage_gate
from .title_normalizer import normalize_author, normalize_title_for_initial


logger = logging.getLogger(__name__)


# Точність порівняння score (щоб p та 1-p давали однаковий score)
SCORE_PRECISION = 12

# Смуга p для SOFT_CONFIRM, якщо explore_p_value_* не задані
SOFT_P_VALUE_MIN = 0.05
SOFT_P_VALUE_MAX = 0.95


@dataclass
class TagScore:
    """Оцінка тегу як питання"""
    tag_key: str
    p_value: float          # p(має тег)
    holders: int            # кількість поточних кандидатів з тегом

    @property
    def distance_from_half(self) -> float:
        return round(abs(self.p_value - 0.5), SCORE_PRECISION)

    @property
    def split_entropy(self) -> float:
        return round(binary_entropy(self.p_value), SCORE_PRECISION)

    def __repr__(self) -> str:
        return f"TagScore('{self.tag_key}', p={self.p_value:.3f}, holders={self.holders})"


def binary_entropy(p: float) -> float:
    """H(p) = -p·log p - (1-p)·log(1-p), 0 на краях"""
    if p <= 0.0 or p >= 1.0:
        return 0.0
    return -(p * math.log(p) + (1.0 - p) * math.log(1.0 - p))


# =============================================================================
# PURE SELECTION RULES
# =============================================================================

def select_explore_tag(
    scores: Sequence[TagScore],
    p_value_band: Optional[Tuple[float, float]] = None,
    band_fallback: bool = True,
    prefer_high_p: bool = False,
    use_information_gain: bool = False
) -> Optional[TagScore]:
    """
    Вибрати тег для EXPLORE_TAG.

    Args:
        scores: Оцінки допустимих тегів
        p_value_band: Обмежити теги з p у [min, max]
        band_fallback: Якщо в смузі нічого немає: ігнорувати смугу
        prefer_high_p: Обрати тег з найбільшим p (після серії NO)
        use_information_gain: Ранжувати за H(p) замість |p - 0.5|

    Returns:
        Найкращий TagScore або None
    """
    candidates = list(scores)
    if p_value_band is not None:
        low, high = p_value_band
        in_band = [s for s in candidates if low <= s.p_value <= high]
        if in_band or not band_fallback:
            candidates = in_band

    if not candidates:
        return None

    if prefer_high_p:
        key = lambda s: (-round(s.p_value, SCORE_PRECISION), s.tag_key)
    elif use_information_gain:
        key = lambda s: (-s.split_entropy, s.tag_key)
    else:
        key = lambda s: (s.distance_from_half, s.tag_key)

    return min(candidates, key=key)


def should_insert_confirm(
    question_index: int,
    confidence: float,
    effective: float,
    effective_threshold: float,
    config: EngineConfig
) -> bool:
    """
    Чи вставляти підтвердження замість EXPLORE_TAG.

    Так, якщо номер питання примусовий, впевненість у смузі або ≥ hard_confidence_min,
    або ефективних кандидатів не більше порогу.
    """
    confirm = config.confirm
    if question_index in confirm.q_forced_indices:
        return True
    low, high = confirm.confidence_confirm_band
    if low <= confidence <= high:
        return True
    if confidence >= confirm.hard_confidence_min:
        return True
    return effective <= effective_threshold


def select_confirm_type(
    confidence: float,
    has_soft_data: bool,
    forced: bool,
    config: EngineConfig
) -> Optional[QuestionKind]:
    """
    Тип підтвердження.

    - confidence ≥ hard_confidence_min → HARD_CONFIRM
    - confidence ≥ soft_confidence_min і є DERIVED теги → SOFT_CONFIRM
    - примусовий номер → SOFT_CONFIRM якщо є дані, інакше HARD_CONFIRM
    - інакше None (підтвердження передчасне)
    """
    if confidence >= config.confirm.hard_confidence_min:
        return QuestionKind.HARD_CONFIRM
    if confidence >= config.confirm.soft_confidence_min and has_soft_data:
        return QuestionKind.SOFT_CONFIRM
    if forced:
        return QuestionKind.SOFT_CONFIRM if has_soft_data else QuestionKind.HARD_CONFIRM
    return None


def next_hard_confirm_type(used_types: Iterable[HardConfirmType]) -> Optional[HardConfirmType]:
    """Наступний невикористаний тип у порядку TITLE_INITIAL → AUTHOR"""
    used = set(used_types)
    for confirm_type in HARD_CONFIRM_ORDER:
        if confirm_type not in used:
            return confirm_type
    return None


# =============================================================================
# SELECTOR
# =============================================================================

class QuestionSelector:
    """
    Вибір наступного питання для сесії.

    Приклад використання:
        selector = QuestionSelector(catalog, config)

        question = selector.select_next_question(
            probabilities=probs,
            question_index=4,
            asked_tags={"tag_a"},
        )
        if question is None:
            print("Питань більше немає")
    """

    def __init__(self, catalog: CatalogSnapshot, config: EngineConfig):
        self.catalog = catalog
        self.config = config
        self._threshold = config.algo.derived_confidence_threshold

    # -------------------------------------------------------------------------
    # Holders
    # -------------------------------------------------------------------------

    def holders(self, tag_key: str, candidate_ids: Iterable[str]) -> FrozenSet[str]:
        """Поточні кандидати з тегом"""
        return self.catalog.feature_holders(tag_key, self._threshold, candidate_ids)

    def hard_confirm_holders(
        self,
        confirm_type: HardConfirmType,
        value: str,
        candidate_ids: Iterable[str]
    ) -> FrozenSet[str]:
        """Кандидати, чий ініціал назви / автор збігається з value"""
        return frozenset(
            cid for cid in candidate_ids
            if self.probe_value(confirm_type, cid) == value
        )

    def probe_value(self, confirm_type: HardConfirmType, candidate_id: str) -> str:
        """Значення перевірки для кандидата"""
        candidate = self.catalog.get_candidate(candidate_id)
        if confirm_type == HardConfirmType.TITLE_INITIAL:
            return normalize_title_for_initial(candidate.title if candidate else None)
        return normalize_author(candidate.author if candidate else None)

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def score_tags(
        self,
        probabilities: Dict[str, float],
        question_index: int,
        asked_tags: Set[str],
        sources: Optional[Set[FeatureSource]] = None,
        apply_coverage_gate: bool = True
    ) -> List[TagScore]:
        """
        Оцінити всі допустимі теги.

        Допустимий тег: ще не питали, розблокований на цьому номері,
        має хоча б одного поточного кандидата, проходить фільтр покриття.
        """
        candidate_ids = list(probabilities.keys())
        total = len(candidate_ids)
        scores = []

        for feature in self.catalog.features:
            if feature.key in asked_tags:
                continue
            if feature.unlock_question_index > question_index:
                continue
            if sources is not None and feature.source not in sources:
                continue

            holders = self.holders(feature.key, candidate_ids)
            if not holders:
                continue
            if apply_coverage_gate and not passes_coverage_gate(
                len(holders), total, self.config.data_quality
            ):
                continue

            p_value = sum(probabilities[cid] for cid in holders)
            scores.append(TagScore(tag_key=feature.key, p_value=p_value, holders=len(holders)))

        return scores

    # -------------------------------------------------------------------------
    # Question kinds
    # -------------------------------------------------------------------------

    def select_explore(
        self,
        probabilities: Dict[str, float],
        question_index: int,
        asked_tags: Set[str],
        prefer_high_p: bool = False
    ) -> Optional[TagQuestion]:
        algo = self.config.algo
        band = None
        if algo.explore_p_value_min is not None or algo.explore_p_value_max is not None:
            band = (
                algo.explore_p_value_min if algo.explore_p_value_min is not None else 0.0,
                algo.explore_p_value_max if algo.explore_p_value_max is not None else 1.0,
            )

        scores = self.score_tags(probabilities, question_index, asked_tags)
        best = select_explore_tag(
            scores,
            p_value_band=band,
            band_fallback=algo.explore_p_value_fallback_enabled,
            prefer_high_p=prefer_high_p,
            use_information_gain=algo.use_information_gain,
        )
        if best is None:
            return None

        logger.debug(f"EXPLORE_TAG: {best}")
        return TagQuestion(
            kind=QuestionKind.EXPLORE_TAG,
            q_index=question_index,
            tag_key=best.tag_key,
            p_value=best.p_value,
        )

    def soft_confirm_scores(
        self,
        probabilities: Dict[str, float],
        question_index: int,
        asked_tags: Set[str]
    ) -> List[TagScore]:
        return self.score_tags(
            probabilities,
            question_index,
            asked_tags,
            sources={FeatureSource.DERIVED},
            apply_coverage_gate=False,
        )

    def select_soft_confirm(
        self,
        probabilities: Dict[str, float],
        question_index: int,
        asked_tags: Set[str],
        target_id: Optional[str]
    ) -> Optional[TagQuestion]:
        """
        SOFT_CONFIRM: DERIVED тег топ-кандидата з p у смузі, найближчий до 0.5.

        Якщо у топ-кандидата таких тегів немає: будь-який DERIVED тег у смузі.
        """
        algo = self.config.algo
        low = algo.explore_p_value_min if algo.explore_p_value_min is not None else SOFT_P_VALUE_MIN
        high = algo.explore_p_value_max if algo.explore_p_value_max is not None else SOFT_P_VALUE_MAX

        scores = self.soft_confirm_scores(probabilities, question_index, asked_tags)
        in_band = [s for s in scores if low <= s.p_value <= high]

        target_tags = set()
        if target_id is not None:
            target_tags = self.catalog.candidate_tags(target_id, self._threshold)
        target_in_band = [s for s in in_band if s.tag_key in target_tags]

        best = select_explore_tag(target_in_band or in_band)
        if best is None:
            return None

        logger.debug(f"SOFT_CONFIRM: {best} (top1={best.tag_key in target_tags})")
        return TagQuestion(
            kind=QuestionKind.SOFT_CONFIRM,
            q_index=question_index,
            tag_key=best.tag_key,
            p_value=best.p_value,
        )

    def select_hard_confirm(
        self,
        probabilities: Dict[str, float],
        question_index: int,
        used_probes: Set[Tuple[HardConfirmType, str]],
        exclude_ids: Iterable[str] = (),
        last_kind: Optional[QuestionKind] = None,
        log_weights: Optional[Dict[str, float]] = None
    ) -> Optional[HardConfirmQuestion]:
        """
        HARD_CONFIRM: перша невикористана перевірка серед топ-N кандидатів.

        Топ-N за log_weights, якщо передані (розрізняють кандидатів з p = 0.0).

        Не двічі поспіль: якщо попереднє питання було HARD_CONFIRM: None.
        """
        if last_kind == QuestionKind.HARD_CONFIRM:
            return None

        top_n = self.config.flow.title_initial_top_n
        ranking = log_weights if log_weights is not None else probabilities
        for target_id in top_candidates(ranking, top_n, exclude=exclude_ids):
            probes = {t: self.probe_value(t, target_id) for t in HARD_CONFIRM_ORDER}
            used_types = [t for t, value in probes.items() if (t, value) in used_probes]
            confirm_type = next_hard_confirm_type(used_types)
            if confirm_type is None:
                continue

            value = probes[confirm_type]
            logger.debug(f"HARD_CONFIRM: {confirm_type.value}={value} (target={target_id})")
            return HardConfirmQuestion(
                q_index=question_index,
                confirm_type=confirm_type,
                value=value,
                target_candidate_id=target_id,
            )
        return None

    # -------------------------------------------------------------------------
    # Policy
    # -------------------------------------------------------------------------

    def select_next_question(
        self,
        probabilities: Dict[str, float],
        question_index: int,
        asked_tags: Optional[Set[str]] = None,
        used_probes: Optional[Set[Tuple[HardConfirmType, str]]] = None,
        exclude_ids: Iterable[str] = (),
        last_kind: Optional[QuestionKind] = None,
        consecutive_no: int = 0,
        explore_first: bool = False,
        log_weights: Optional[Dict[str, float]] = None
    ):
        """
        Вибрати наступне питання.

        Args:
            probabilities: Поточний розподіл
            question_index: Номер питання, яке обираємо (з 1)
            asked_tags: Теги, про які вже питали
            used_probes: Використані перевірки HARD_CONFIRM
            exclude_ids: Відхилені при показі кандидати (не цілі підтвердження)
            last_kind: Тип попереднього питання
            consecutive_no: Кількість NO поспіль на EXPLORE_TAG
            explore_first: Спершу EXPLORE_TAG (після відхиленого показу)
            log_weights: Лог-ваги для порядку кандидатів (за замовчуванням probabilities)

        Returns:
            TagQuestion, HardConfirmQuestion або None якщо питань немає
        """
        asked_tags = set(asked_tags or ())
        used_probes = set(used_probes or ())
        excluded = set(exclude_ids)
        prefer_high_p = consecutive_no >= self.config.flow.consecutive_no_for_atari

        def explore():
            return self.select_explore(probabilities, question_index, asked_tags, prefer_high_p)

        def hard():
            return self.select_hard_confirm(
                probabilities, question_index, used_probes, excluded, last_kind, log_weights
            )

        if explore_first:
            question = explore()
            if question is not None:
                return question

        # Ціль підтверджень: топ серед не відхилених
        ranking = log_weights if log_weights is not None else probabilities
        top = top_candidates(ranking, 1, exclude=excluded)
        target_id = top[0] if top else None
        confidence = probabilities[target_id] if target_id is not None else 0.0

        total = len(probabilities)
        params = self.config.flow.effective_confirm_threshold_params
        threshold = effective_confirm_threshold(total, params.min, params.max, params.divisor)
        effective = effective_candidates(probabilities)

        if target_id is not None and should_insert_confirm(
            question_index, confidence, effective, threshold, self.config
        ):
            has_soft = bool(self.soft_confirm_scores(probabilities, question_index, asked_tags))
            forced = question_index in self.config.confirm.q_forced_indices
            confirm_kind = select_confirm_type(confidence, has_soft, forced, self.config)

            question = None
            if confirm_kind == QuestionKind.HARD_CONFIRM:
                question = hard()
                if question is None and has_soft:
                    question = self.select_soft_confirm(
                        probabilities, question_index, asked_tags, target_id
                    )
            elif confirm_kind == QuestionKind.SOFT_CONFIRM:
                question = self.select_soft_confirm(
                    probabilities, question_index, asked_tags, target_id
                )
            if question is not None:
                return question

        question = explore()
        if question is not None:
            return question

        # Тегів не лишилось: пряма перевірка
        return hard()

    def __repr__(self) -> str:
        return (
            f"QuestionSelector(features={len(self.catalog.features)}, "
            f"beta={self.config.algo.beta}, mode={self.config.data_quality.min_coverage_mode.value})"
        )
