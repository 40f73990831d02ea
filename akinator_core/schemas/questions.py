"""
Akinator Core — Схеми питань та історії

Питання та записи історії мають різні обов'язкові поля залежно від типу,
тому представлені як discriminated union:
- TagQuestion (EXPLORE_TAG / SOFT_CONFIRM): ключ тегу
- HardConfirmQuestion (HARD_CONFIRM): тип перевірки та значення
- QuestionAnswerEntry / RevealEntry: незмінні записи історії
"""

from typing import Annotated, Literal, Optional, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class AnswerChoice(str, Enum):
    """Якісна відповідь гравця"""
    YES = "YES"
    PROBABLY_YES = "PROBABLY_YES"
    UNKNOWN = "UNKNOWN"
    PROBABLY_NO = "PROBABLY_NO"
    NO = "NO"
    DONT_CARE = "DONT_CARE"

    @property
    def is_negative(self) -> bool:
        return self in (AnswerChoice.NO, AnswerChoice.PROBABLY_NO)


class AiGateChoice(str, Enum):
    """Перше питання гри: твір створено з AI?"""
    YES = "YES"
    NO = "NO"
    DONT_CARE = "DONT_CARE"


class QuestionKind(str, Enum):
    """Тип питання"""
    EXPLORE_TAG = "EXPLORE_TAG"
    SOFT_CONFIRM = "SOFT_CONFIRM"
    HARD_CONFIRM = "HARD_CONFIRM"


class HardConfirmType(str, Enum):
    """Тип прямої перевірки топ-кандидата"""
    TITLE_INITIAL = "TITLE_INITIAL"
    AUTHOR = "AUTHOR"


# Порядок перевірок HARD_CONFIRM
HARD_CONFIRM_ORDER = (HardConfirmType.TITLE_INITIAL, HardConfirmType.AUTHOR)


# =============================================================================
# QUESTIONS
# =============================================================================

class TagQuestion(BaseModel):
    """Питання про тег (EXPLORE_TAG або SOFT_CONFIRM)"""
    model_config = ConfigDict(frozen=True)

    kind: Literal[QuestionKind.EXPLORE_TAG, QuestionKind.SOFT_CONFIRM]
    q_index: int = Field(..., ge=1, description="Номер питання (з 1)")
    tag_key: str = Field(..., min_length=1)
    p_value: Optional[float] = Field(default=None, description="p(має тег) на момент вибору")
    text: Optional[str] = Field(default=None, description="Текст для показу")


class HardConfirmQuestion(BaseModel):
    """Пряма перевірка топ-кандидата (ініціал назви або автор)"""
    model_config = ConfigDict(frozen=True)

    kind: Literal[QuestionKind.HARD_CONFIRM] = QuestionKind.HARD_CONFIRM
    q_index: int = Field(..., ge=1)
    confirm_type: HardConfirmType
    value: str = Field(..., min_length=1)
    target_candidate_id: str
    text: Optional[str] = None


Question = Annotated[Union[TagQuestion, HardConfirmQuestion], Field(discriminator="kind")]


# =============================================================================
# HISTORY
# =============================================================================

class QuestionAnswerEntry(BaseModel):
    """Запис питання-відповідь"""
    model_config = ConfigDict(frozen=True)

    entry_type: Literal["QUESTION"] = "QUESTION"
    question: Question
    answer: AnswerChoice
    strength: float

    @property
    def q_index(self) -> int:
        return self.question.q_index

    @property
    def kind(self) -> QuestionKind:
        return self.question.kind


class RevealEntry(BaseModel):
    """Запис показу кандидата та вердикту гравця"""
    model_config = ConfigDict(frozen=True)

    entry_type: Literal["REVEAL"] = "REVEAL"
    candidate_id: str
    confidence: float
    accepted: bool
    after_question: int = Field(..., ge=0, description="Кількість питань до показу")


HistoryEntry = Annotated[Union[QuestionAnswerEntry, RevealEntry], Field(discriminator="entry_type")]
