"""
Akinator Core — Нормалізація назви для HARD_CONFIRM

Для перевірки TITLE_INITIAL беремо перший значущий символ назви:
1. NFKC нормалізація
2. Видалення префікса в дужках (【新作】, [R18], （再）...) до 3 разів
3. Видалення службових символів на початку (★, ・, !...) до 10 разів
4. Перший символ або '?' якщо нічого не лишилось
"""

import re
import unicodedata
from typing import Optional


UNKNOWN_INITIAL = "?"
UNKNOWN_AUTHOR = "(不明)"

MAX_BRACKET_PASSES = 3
MAX_SYMBOL_PASSES = 10

BRACKET_PATTERNS = [
    re.compile(r'^【[^】]*】'),
    re.compile(r'^\([^)]*\)'),
    re.compile(r'^\[[^\]]*\]'),
    re.compile(r'^\{[^}]*\}'),
    re.compile(r'^＜[^＞]*＞'),
    re.compile(r'^<[^>]*>'),
    re.compile(r'^「[^」]*」'),
    re.compile(r'^『[^』]*』'),
    re.compile(r'^（[^）]*）'),
    re.compile(r'^［[^］]*］'),
    re.compile(r'^｛[^｝]*｝'),
]

SYMBOL_PATTERNS = [
    # ASCII
    re.compile(r'^[!"#$%&\'()*+,\-./:;<=>?@\[\\\]^_`{|}~]'),
    # Повноширинні
    re.compile(r'^[！＂＃＄％＆＇（）＊＋，－．／：；＜＝＞？＠［＼］＾＿｀｛｜｝～]'),
    # Декоративні
    re.compile(r'^[★☆◆◇■□・…〜ー—–]'),
]

LEADING_SPACE = re.compile(r'^[\s　\t]+')


def _strip_once(text: str, patterns) -> Optional[str]:
    """Видалити перший збіг з patterns або None якщо збігу немає"""
    for pattern in patterns:
        if pattern.match(text):
            return pattern.sub('', text, count=1)
    return None


def normalize_title_for_initial(title) -> str:
    """
    Перший значущий символ назви.

    Приклад:
        normalize_title_for_initial("【新作】 ★Hello")  # → "H"
        normalize_title_for_initial("")                  # → "?"
    """
    if not isinstance(title, str):
        return UNKNOWN_INITIAL

    text = unicodedata.normalize('NFKC', title)

    for _ in range(MAX_BRACKET_PASSES):
        stripped = _strip_once(text, BRACKET_PATTERNS)
        if stripped is None:
            break
        text = LEADING_SPACE.sub('', stripped)

    for _ in range(MAX_SYMBOL_PASSES):
        stripped = _strip_once(text, SYMBOL_PATTERNS)
        if stripped is None:
            break
        text = LEADING_SPACE.sub('', stripped)

    text = text.strip()
    return text[0] if text else UNKNOWN_INITIAL


def normalize_author(author: Optional[str]) -> str:
    """Автор для перевірки AUTHOR; порожній → (不明)"""
    if author is None:
        return UNKNOWN_AUTHOR
    author = unicodedata.normalize('NFKC', author).strip()
    return author or UNKNOWN_AUTHOR
