"""
Akinator Core — Пояснення результату

- explain_candidate: які відповіді гравця збіглися з тегами кандидата
- tag_match_rate: "схожість" двох творів за тегами (50..100)
- similar_candidates: схожі твори для показу після гри
"""

from typing import Collection, List, Optional, Tuple
from dataclasses import dataclass, field

from akinator_core.errors import UnknownFeatureError
from akinator_core.schemas import (
    AnswerChoice,
    CatalogSnapshot,
    GameSession,
    QuestionKind,
)


@dataclass
class FeatureMatch:
    """Відповідь на питання про тег і чи узгоджується вона з кандидатом"""
    tag_key: str
    display_name: str
    answer: AnswerChoice
    candidate_has: bool

    @property
    def matched(self) -> bool:
        """Позитивна відповідь і тег є, або негативна і тегу немає"""
        if self.answer in (AnswerChoice.YES, AnswerChoice.PROBABLY_YES):
            return self.candidate_has
        if self.answer.is_negative:
            return not self.candidate_has
        return False


@dataclass
class CandidateExplanation:
    """Пояснення для одного кандидата"""
    candidate_id: str
    title: str
    matches: List[FeatureMatch] = field(default_factory=list)

    @property
    def matched_features(self) -> List[FeatureMatch]:
        return [m for m in self.matches if m.matched]

    @property
    def contradicted_features(self) -> List[FeatureMatch]:
        neutral = (AnswerChoice.UNKNOWN, AnswerChoice.DONT_CARE)
        return [m for m in self.matches if not m.matched and m.answer not in neutral]

    def __repr__(self) -> str:
        return (
            f"CandidateExplanation('{self.candidate_id}', "
            f"matched={len(self.matched_features)}/{len(self.matches)})"
        )


def explain_candidate(
    session: GameSession,
    catalog: CatalogSnapshot,
    candidate_id: str,
    threshold: float
) -> CandidateExplanation:
    """
    Пояснити, які відповіді гравця підтверджують кандидата.

    Args:
        session: Сесія з історією питань
        catalog: Каталог
        candidate_id: Кандидат (зазвичай показаний)
        threshold: derived_confidence_threshold

    Raises:
        UnknownFeatureError: У історії тег, якого немає в каталозі
    """
    candidate = catalog.get_candidate(candidate_id)
    explanation = CandidateExplanation(
        candidate_id=candidate_id,
        title=candidate.title if candidate else "",
    )

    for entry in session.question_entries:
        if entry.kind == QuestionKind.HARD_CONFIRM:
            continue
        tag_key = entry.question.tag_key
        feature = catalog.get_feature(tag_key)
        if feature is None:
            raise UnknownFeatureError(tag_key)
        explanation.matches.append(FeatureMatch(
            tag_key=tag_key,
            display_name=feature.display_name,
            answer=entry.answer,
            candidate_has=catalog.has_feature(candidate_id, tag_key, threshold),
        ))

    return explanation


def tag_match_rate(base_tags: Collection[str], other_tags: Collection[str]) -> float:
    """
    Схожість за тегами: 50 + 50 · |base ∩ other| / |base|, 1 знак після коми.

    50 якщо у базового твору немає тегів.
    """
    base = set(base_tags)
    if not base:
        return 50.0
    intersection = len(base & set(other_tags))
    return round(50.0 + 50.0 * intersection / len(base), 1)


def similar_candidates(
    catalog: CatalogSnapshot,
    candidate_id: str,
    threshold: float,
    top_n: int = 5,
    pool: Optional[Collection[str]] = None
) -> List[Tuple[str, float]]:
    """
    Найсхожіші твори (rate ↓, id ↑), без самого кандидата.

    Args:
        pool: Обмежити пошук цими id (за замовчуванням весь каталог)
    """
    base_tags = catalog.candidate_tags(candidate_id, threshold)
    ids = pool if pool is not None else catalog.candidate_ids
    rated = [
        (other_id, tag_match_rate(base_tags, catalog.candidate_tags(other_id, threshold)))
        for other_id in ids
        if other_id != candidate_id
    ]
    rated.sort(key=lambda x: (-x[1], x[0]))
    return rated[:top_n]
