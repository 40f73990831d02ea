"""
Akinator Core — Налаштування рушія

Всі параметри гри зібрані в pydantic-моделі для:
- Суворої валідації при завантаженні (невідомі ключі відхиляються)
- Доступу через config.algo.beta
- Серіалізації в YAML/JSON

Конфігурація створюється один раз при старті процесу і передається
в компоненти явно (без глобального стану).
"""

from typing import List, Literal, Optional, Tuple
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================

class CoverageMode(str, Enum):
    """Режим фільтра покриття тегу"""
    RATIO = "RATIO"     # частка кандидатів з тегом
    WORKS = "WORKS"     # абсолютна кількість кандидатів
    AUTO = "AUTO"       # частка, виведена з обох порогів


class _StrictModel(BaseModel):
    """Базова модель: невідомі ключі заборонені, значення незмінні"""
    model_config = ConfigDict(extra="forbid", frozen=True)


# =============================================================================
# CONFIRM CONFIGURATION
# =============================================================================

class ConfirmConfig(_StrictModel):
    """Пороги підтвердження та показу відповіді"""

    # Показ кандидата (REVEAL)
    reveal_threshold: float = Field(default=0.85, gt=0.0, le=1.0)

    # Смуга впевненості для SOFT_CONFIRM [нижня, верхня]
    confidence_confirm_band: Tuple[float, float] = Field(default=(0.4, 0.8))

    # Номери питань (з 1), на яких примусово вставляється підтвердження
    q_forced_indices: List[int] = Field(default_factory=lambda: [6, 10, 14])

    soft_confidence_min: float = Field(default=0.3, ge=0.0, le=1.0)
    hard_confidence_min: float = Field(default=0.6, ge=0.0, le=1.0)

    @field_validator("confidence_confirm_band")
    @classmethod
    def check_band(cls, v: Tuple[float, float]) -> Tuple[float, float]:
        low, high = v
        if not (0.0 <= low <= 1.0 and 0.0 <= high <= 1.0):
            raise ValueError("confidence_confirm_band має бути в межах [0, 1]")
        if low > high:
            raise ValueError(
                f"confidence_confirm_band інвертована: {low} > {high}"
            )
        return v

    @field_validator("q_forced_indices")
    @classmethod
    def check_forced_indices(cls, v: List[int]) -> List[int]:
        if any(i <= 0 for i in v):
            raise ValueError("q_forced_indices мають бути додатними")
        return v


# =============================================================================
# ALGORITHM CONFIGURATION
# =============================================================================

class AlgoConfig(_StrictModel):
    """Параметри оновлення ваг"""

    beta: float = Field(default=1.2, gt=0.0, allow_inf_nan=False)  # крутизна оновлення
    alpha: float = Field(default=0.02, ge=0.0, le=1.0)  # крутизна prior
    derived_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    reveal_penalty: float = Field(default=0.2, gt=0.0, le=1.0)

    # Смуга p для EXPLORE (опційно)
    explore_p_value_min: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    explore_p_value_max: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    explore_p_value_fallback_enabled: bool = True

    # Масштаб сили відповіді за типом питання
    explore_tag_strength_scale: float = Field(default=1.0, gt=0.0, allow_inf_nan=False)
    soft_confirm_strength_scale: float = Field(default=1.0, gt=0.0, allow_inf_nan=False)

    # Оцінювати теги ентропією розбиття замість |p - 0.5|
    use_information_gain: bool = False

    # Байєсове оновлення: w *= P(відповідь | ознака) замість exp(±β·s)
    use_bayesian_update: bool = False
    bayesian_epsilon: float = Field(default=0.02, gt=0.0, le=0.5)

    @model_validator(mode="after")
    def check_p_band(self) -> "AlgoConfig":
        low, high = self.explore_p_value_min, self.explore_p_value_max
        if low is not None and high is not None and low > high:
            raise ValueError(
                f"explore_p_value_min > explore_p_value_max: {low} > {high}"
            )
        return self


# =============================================================================
# FLOW CONFIGURATION
# =============================================================================

class EffectiveConfirmThresholdParams(_StrictModel):
    """Параметри формули A: clamp(round(total / divisor), min, max)"""
    min: int = Field(default=5, ge=0)
    max: int = Field(default=50, ge=0)
    divisor: int = Field(default=20, gt=0)

    @model_validator(mode="after")
    def check_range(self) -> "EffectiveConfirmThresholdParams":
        if self.max < self.min:
            raise ValueError(f"max ({self.max}) < min ({self.min})")
        return self


class FlowConfig(_StrictModel):
    """Ліміти та перебіг гри"""

    max_questions: int = Field(default=30, gt=0)
    max_reveal_misses: int = Field(default=3, gt=0)
    fail_list_n: int = Field(default=10, gt=0)

    effective_confirm_threshold_formula: Literal["A"] = "A"
    effective_confirm_threshold_params: EffectiveConfirmThresholdParams = Field(
        default_factory=EffectiveConfirmThresholdParams
    )

    # Після стількох NO поспіль шукаємо "влучне" питання
    consecutive_no_for_atari: int = Field(default=3, gt=0)

    # Скільки топ-кандидатів перебирати для HARD_CONFIRM
    title_initial_top_n: int = Field(default=1, gt=0)


# =============================================================================
# DATA QUALITY CONFIGURATION
# =============================================================================

class DataQualityConfig(_StrictModel):
    """Фільтр покриття тегів"""

    min_coverage_mode: CoverageMode = CoverageMode.AUTO
    min_coverage_ratio: Optional[float] = Field(default=0.02, ge=0.0, le=1.0)
    min_coverage_works: Optional[int] = Field(default=3, ge=0)
    max_coverage_ratio: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_required_params(self) -> "DataQualityConfig":
        mode = self.min_coverage_mode
        if mode in (CoverageMode.RATIO, CoverageMode.AUTO) and self.min_coverage_ratio is None:
            raise ValueError(f"min_coverage_ratio обов'язковий для режиму {mode.value}")
        if mode in (CoverageMode.WORKS, CoverageMode.AUTO) and self.min_coverage_works is None:
            raise ValueError(f"min_coverage_works обов'язковий для режиму {mode.value}")
        return self


# =============================================================================
# POPULARITY CONFIGURATION
# =============================================================================

class PopularityConfig(_StrictModel):
    """Бонус популярності"""
    play_bonus_on_success: float = Field(default=0.1, ge=0.0)


# =============================================================================
# MAIN CONFIGURATION
# =============================================================================

class EngineConfig(_StrictModel):
    """
    Головна конфігурація Akinator Core.

    Приклад:
        config = get_default_config()
        print(config.algo.beta)
        print(config.confirm.confidence_confirm_band)

        custom = config.model_copy(update={"algo": AlgoConfig(beta=1.0)})
    """

    version: Literal["v1.5"] = "v1.5"

    confirm: ConfirmConfig = Field(default_factory=ConfirmConfig)
    algo: AlgoConfig = Field(default_factory=AlgoConfig)
    flow: FlowConfig = Field(default_factory=FlowConfig)
    data_quality: DataQualityConfig = Field(default_factory=DataQualityConfig)
    popularity: PopularityConfig = Field(default_factory=PopularityConfig)

    @model_validator(mode="after")
    def check_thresholds(self) -> "EngineConfig":
        if self.confirm.reveal_threshold < self.confirm.hard_confidence_min:
            raise ValueError(
                "reveal_threshold не може бути меншим за hard_confidence_min"
            )
        return self

    def __repr__(self) -> str:
        return (
            f"EngineConfig(version={self.version}, beta={self.algo.beta}, "
            f"alpha={self.algo.alpha}, max_questions={self.flow.max_questions})"
        )


# =============================================================================
# DEFAULT CONFIG INSTANCE
# =============================================================================

def get_default_config() -> EngineConfig:
    """Отримати конфігурацію за замовчуванням"""
    return EngineConfig()
