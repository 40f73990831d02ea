"""
Akinator Core — Тексти питань

Перетворює дескриптор питання на текст для показу.
Готовий question_text тегу має пріоритет над шаблоном.
Підтримує японську та англійську мови.
"""

from typing import Dict, Optional

from akinator_core.schemas import (
    CatalogSnapshot,
    Candidate,
    FeatureSource,
    HardConfirmQuestion,
    HardConfirmType,
    TagQuestion,
)


class QuestionTextGenerator:
    """
    Генератор текстів питань.

    Приклад:
        generator = QuestionTextGenerator(catalog, language="en")
        text = generator.generate_text(question)
    """

    def __init__(self, catalog: CatalogSnapshot, language: str = "ja"):
        """
        Args:
            catalog: Каталог (для назв тегів і творів)
            language: Мова питань ("ja" або "en")
        """
        self.catalog = catalog
        self.language = language

        # Шаблони питань
        self._templates: Dict[str, Dict[str, str]] = {
            "ja": {
                FeatureSource.OFFICIAL.value: "「{name}」の作品？",
                FeatureSource.DERIVED.value: "「{name}」っぽい作品？",
                FeatureSource.STRUCTURAL.value: "{name}？",
                HardConfirmType.TITLE_INITIAL.value: "タイトルは「{value}」から始まる？",
                HardConfirmType.AUTHOR.value: "作者（サークル）は「{value}」？",
                "reveal": "思い浮かべているのは「{title}」？",
            },
            "en": {
                FeatureSource.OFFICIAL.value: "Is it tagged \"{name}\"?",
                FeatureSource.DERIVED.value: "Does it feel like \"{name}\"?",
                FeatureSource.STRUCTURAL.value: "{name}?",
                HardConfirmType.TITLE_INITIAL.value: "Does the title start with \"{value}\"?",
                HardConfirmType.AUTHOR.value: "Is the author \"{value}\"?",
                "reveal": "Are you thinking of \"{title}\"?",
            },
        }
        if language not in self._templates:
            raise ValueError(f"Непідтримувана мова: {language}")

    def tag_text(self, tag_key: str) -> str:
        feature = self.catalog.get_feature(tag_key)
        if feature is None:
            return tag_key
        if feature.question_text:
            return feature.question_text
        template = self._templates[self.language][feature.source.value]
        return template.format(name=feature.display_name or feature.key)

    def hard_confirm_text(self, confirm_type: HardConfirmType, value: str) -> str:
        return self._templates[self.language][confirm_type.value].format(value=value)

    def reveal_text(self, candidate: Optional[Candidate]) -> str:
        title = candidate.title if candidate is not None and candidate.title else "?"
        return self._templates[self.language]["reveal"].format(title=title)

    def generate_text(self, question) -> str:
        """Текст для TagQuestion або HardConfirmQuestion"""
        if isinstance(question, HardConfirmQuestion):
            return self.hard_confirm_text(question.confirm_type, question.value)
        if isinstance(question, TagQuestion):
            return self.tag_text(question.tag_key)
        raise TypeError(f"Невідомий тип питання: {type(question).__name__}")

    def with_text(self, question):
        """Копія питання з заповненим текстом"""
        return question.model_copy(update={"text": self.generate_text(question)})
