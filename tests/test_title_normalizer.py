"""
Тести для нормалізації назви (question_engine.title_normalizer)

Запуск: pytest tests/test_title_normalizer.py -v
"""


def test_plain_titles():
    """Звичайні назви"""
    from akinator_core.question_engine import normalize_title_for_initial

    assert normalize_title_for_initial("Summer Memories") == "S"
    assert normalize_title_for_initial("星降る夜") == "星"


def test_bracket_prefix_removed():
    """Префікси в дужках прибираються"""
    from akinator_core.question_engine import normalize_title_for_initial

    assert normalize_title_for_initial("【新作】星降る夜の物語") == "星"
    assert normalize_title_for_initial("【新作】 ★Hello") == "H"
    assert normalize_title_for_initial("[R] 森の喫茶店") == "森"
    assert normalize_title_for_initial("（再販）雨の図書館") == "雨"
    assert normalize_title_for_initial("「特典」『限定』<新>本編") == "本"


def test_bracket_passes_limited():
    """Не більше трьох префіксів у дужках"""
    from akinator_core.question_engine import normalize_title_for_initial

    assert normalize_title_for_initial("【A】【B】【C】タイトル") == "タ"
    assert normalize_title_for_initial("【A】【B】【C】【D】タイトル") == "【"


def test_symbols_removed():
    """Службові символи на початку прибираються (до 10 разів)"""
    from akinator_core.question_engine import normalize_title_for_initial

    assert normalize_title_for_initial("★月光ノート") == "月"
    assert normalize_title_for_initial("・・・…〜夜") == "夜"
    assert normalize_title_for_initial("!!! ??? abc") == "a"
    assert normalize_title_for_initial("!" * 10 + "x") == "x"
    assert normalize_title_for_initial("!" * 11 + "x") == "!"


def test_nfkc_normalization():
    """Повноширинні символи зводяться до звичайних"""
    from akinator_core.question_engine import normalize_title_for_initial

    assert normalize_title_for_initial("ｈｅｌｌｏ") == "h"
    assert normalize_title_for_initial("！？Ａbc") == "A"


def test_empty_and_invalid():
    """Порожня назва або не рядок → '?'"""
    from akinator_core.question_engine import normalize_title_for_initial, UNKNOWN_INITIAL

    assert normalize_title_for_initial("") == UNKNOWN_INITIAL
    assert normalize_title_for_initial("   ") == UNKNOWN_INITIAL
    assert normalize_title_for_initial("【only】") == UNKNOWN_INITIAL
    assert normalize_title_for_initial(None) == "?"
    assert normalize_title_for_initial(42) == "?"


def test_normalize_author():
    """Автор: відсутній → (不明)"""
    from akinator_core.question_engine import normalize_author, UNKNOWN_AUTHOR

    assert normalize_author(None) == UNKNOWN_AUTHOR == "(不明)"
    assert normalize_author("   ") == UNKNOWN_AUTHOR
    assert normalize_author(" Circle C ") == "Circle C"
