"""
Akinator Core — Фільтр покриття тегів

Тег корисний як питання лише якщо його має достатня (але не майже повна)
частка поточних кандидатів.

coverage(tag) = count / total

Режими нижньої межі:
- RATIO: coverage ≥ min_coverage_ratio
- WORKS: count ≥ min_coverage_works
- AUTO:  coverage ≥ max(ratio, min(works, total) / max(total, 1))

Верхня межа max_coverage_ratio перевіряється першою для всіх режимів.
Відсутній обов'язковий параметр → тег не проходить.
"""

from typing import Optional

from akinator_core.config import CoverageMode, DataQualityConfig


def calculate_coverage(count: int, total: int) -> float:
    """Частка кандидатів з тегом; 0 якщо кандидатів немає"""
    if total <= 0:
        return 0.0
    return count / total


def derived_min_ratio(min_ratio: float, min_works: int, total: int) -> float:
    """
    Мінімальна частка для режиму AUTO.

    Абсолютний поріг обрізається до total, тому результат ніколи не > 1.
    """
    return max(min_ratio, min(min_works, total) / max(total, 1))


def passes_coverage_gate(count: int, total: int, quality: DataQualityConfig) -> bool:
    """
    Чи проходить тег фільтр покриття.

    Args:
        count: Кількість поточних кандидатів з тегом
        total: Кількість поточних кандидатів
        quality: Параметри data_quality

    Returns:
        True якщо тег можна використовувати як питання
    """
    coverage = calculate_coverage(count, total)

    # Верхня межа (для всіх режимів)
    if quality.max_coverage_ratio is not None and coverage > quality.max_coverage_ratio:
        return False

    mode = quality.min_coverage_mode
    ratio: Optional[float] = quality.min_coverage_ratio
    works: Optional[int] = quality.min_coverage_works

    if mode == CoverageMode.RATIO:
        if ratio is None:
            return False
        return coverage >= ratio

    if mode == CoverageMode.WORKS:
        if works is None:
            return False
        return count >= works

    if mode == CoverageMode.AUTO:
        if ratio is None or works is None:
            return False
        return coverage >= derived_min_ratio(ratio, works, total)

    return False
