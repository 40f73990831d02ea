"""
Akinator Core — Схеми каталогу

Pydantic моделі для:
- Candidate: твір, який можна вгадати
- Feature: тег (ознака) твору
- Incidence: зв'язок твір ↔ тег з опційною впевненістю
- CatalogSnapshot: незмінний знімок каталогу на час сесії
"""

import json
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from .questions import AiGateChoice


class AiFlag(str, Enum):
    """Походження твору"""
    AI = "AI"
    HAND = "HAND"
    UNKNOWN = "UNKNOWN"


class FeatureSource(str, Enum):
    """Джерело тегу"""
    OFFICIAL = "OFFICIAL"       # тег з каталогу, призначений вручну
    DERIVED = "DERIVED"         # тег, виведений моделлю (з confidence)
    STRUCTURAL = "STRUCTURAL"   # службовий тег (формат, довжина...)


class Candidate(BaseModel):
    """
    Кандидат (твір).

    Приклад:
        candidate = Candidate(
            id="work_001",
            title="【新作】Example",
            author="circle",
            popularity_base=1.5
        )
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Стабільний ідентифікатор")
    title: str = Field(default="", description="Назва твору")
    author: Optional[str] = Field(default=None, description="Автор / гурток")
    popularity_base: float = Field(default=0.0, description="Базова популярність")
    popularity_play_bonus: float = Field(default=0.0, description="Накопичений бонус за ігри")
    ai_flag: AiFlag = Field(default=AiFlag.UNKNOWN)


class Feature(BaseModel):
    """Тег, про який можна спитати"""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    display_name: str = Field(default="")
    source: FeatureSource = Field(default=FeatureSource.OFFICIAL)
    question_text: Optional[str] = Field(default=None, description="Готовий текст питання")
    unlock_question_index: int = Field(
        default=1,
        ge=1,
        description="З якого номера питання тег можна питати"
    )

    @property
    def is_derived(self) -> bool:
        return self.source == FeatureSource.DERIVED


class Incidence(BaseModel):
    """Зв'язок твір ↔ тег"""
    model_config = ConfigDict(frozen=True)

    candidate_id: str
    tag_key: str
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


def incidence_present(incidence: Incidence, feature: Feature, threshold: float) -> bool:
    """
    Чи вважається тег присутнім у твору.

    DERIVED: присутній лише якщо confidence ≥ threshold (невідома = відсутній).
    OFFICIAL / STRUCTURAL: призначення без confidence вважається достовірним.
    """
    if incidence.confidence is None:
        return not feature.is_derived
    return incidence.confidence >= threshold


class CatalogSnapshot(BaseModel):
    """
    Незмінний знімок каталогу для однієї сесії.

    Приклад:
        catalog = CatalogSnapshot.from_json_file("data/catalog.json")
        holders = catalog.feature_holders("tag_a", threshold=0.7)
    """
    model_config = ConfigDict(frozen=True)

    candidates: List[Candidate] = Field(default_factory=list)
    features: List[Feature] = Field(default_factory=list)
    incidences: List[Incidence] = Field(default_factory=list)

    _candidates_by_id: Dict[str, Candidate] = PrivateAttr(default_factory=dict)
    _features_by_key: Dict[str, Feature] = PrivateAttr(default_factory=dict)
    _by_tag: Dict[str, List[Incidence]] = PrivateAttr(default_factory=dict)
    _by_candidate: Dict[str, List[Incidence]] = PrivateAttr(default_factory=dict)

    @field_validator("candidates")
    @classmethod
    def unique_candidates(cls, v: List[Candidate]) -> List[Candidate]:
        ids = [c.id for c in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Дубльовані id кандидатів")
        return v

    @field_validator("features")
    @classmethod
    def unique_features(cls, v: List[Feature]) -> List[Feature]:
        keys = [f.key for f in v]
        if len(keys) != len(set(keys)):
            raise ValueError("Дубльовані ключі тегів")
        return v

    @model_validator(mode="after")
    def check_references(self) -> "CatalogSnapshot":
        candidate_ids = {c.id for c in self.candidates}
        feature_keys = {f.key for f in self.features}
        for inc in self.incidences:
            if inc.candidate_id not in candidate_ids:
                raise ValueError(f"Incidence посилається на невідомого кандидата: {inc.candidate_id}")
            if inc.tag_key not in feature_keys:
                raise ValueError(f"Incidence посилається на невідомий тег: {inc.tag_key}")
        return self

    def model_post_init(self, __context) -> None:
        self._candidates_by_id = {c.id: c for c in self.candidates}
        self._features_by_key = {f.key: f for f in self.features}
        by_tag: Dict[str, List[Incidence]] = {}
        by_candidate: Dict[str, List[Incidence]] = {}
        for inc in self.incidences:
            by_tag.setdefault(inc.tag_key, []).append(inc)
            by_candidate.setdefault(inc.candidate_id, []).append(inc)
        self._by_tag = by_tag
        self._by_candidate = by_candidate

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def candidate_ids(self) -> List[str]:
        return [c.id for c in self.candidates]

    @property
    def feature_keys(self) -> List[str]:
        return sorted(self._features_by_key)

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        return self._candidates_by_id.get(candidate_id)

    def get_feature(self, tag_key: str) -> Optional[Feature]:
        return self._features_by_key.get(tag_key)

    def has_feature_key(self, tag_key: str) -> bool:
        return tag_key in self._features_by_key

    # -------------------------------------------------------------------------
    # Has-feature
    # -------------------------------------------------------------------------

    def has_feature(self, candidate_id: str, tag_key: str, threshold: float) -> bool:
        """Чи має кандидат тег (з порогом для DERIVED)"""
        feature = self._features_by_key.get(tag_key)
        if feature is None:
            return False
        for inc in self._by_candidate.get(candidate_id, []):
            if inc.tag_key == tag_key:
                return incidence_present(inc, feature, threshold)
        return False

    def feature_holders(
        self,
        tag_key: str,
        threshold: float,
        candidate_ids: Optional[Iterable[str]] = None
    ) -> FrozenSet[str]:
        """
        Кандидати, що мають тег.

        Args:
            tag_key: Ключ тегу
            threshold: derived_confidence_threshold
            candidate_ids: Обмежити множиною (наприклад, поточною сесією)
        """
        feature = self._features_by_key.get(tag_key)
        if feature is None:
            return frozenset()
        allowed = set(candidate_ids) if candidate_ids is not None else None
        holders = {
            inc.candidate_id
            for inc in self._by_tag.get(tag_key, [])
            if incidence_present(inc, feature, threshold)
            and (allowed is None or inc.candidate_id in allowed)
        }
        return frozenset(holders)

    def candidate_tags(self, candidate_id: str, threshold: float) -> Set[str]:
        """Всі теги, присутні у кандидата"""
        tags = set()
        for inc in self._by_candidate.get(candidate_id, []):
            feature = self._features_by_key[inc.tag_key]
            if incidence_present(inc, feature, threshold):
                tags.add(inc.tag_key)
        return tags

    # -------------------------------------------------------------------------
    # AI gate
    # -------------------------------------------------------------------------

    def filter_by_ai_gate(self, choice: AiGateChoice) -> List[Candidate]:
        """
        Відібрати кандидатів за вибором AI-гейту.

        YES → лише AI, NO → лише HAND, DONT_CARE → всі.
        """
        if choice == AiGateChoice.YES:
            return [c for c in self.candidates if c.ai_flag == AiFlag.AI]
        if choice == AiGateChoice.NO:
            return [c for c in self.candidates if c.ai_flag == AiFlag.HAND]
        return list(self.candidates)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogSnapshot":
        return cls.model_validate(data)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "CatalogSnapshot":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def __repr__(self) -> str:
        return (
            f"CatalogSnapshot(candidates={len(self.candidates)}, "
            f"features={len(self.features)}, incidences={len(self.incidences)})"
        )
