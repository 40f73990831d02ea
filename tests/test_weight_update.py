"""
Тести для оновлення ваг (question_engine.weight_update)

Запуск: pytest tests/test_weight_update.py -v
"""

import math

import pytest


def test_answer_strength_map():
    """Шість відповідей → п'ять значень сили"""
    from akinator_core.question_engine import ANSWER_STRENGTH, answer_strength
    from akinator_core.schemas import AnswerChoice

    assert ANSWER_STRENGTH[AnswerChoice.YES] == 1.0
    assert ANSWER_STRENGTH[AnswerChoice.PROBABLY_YES] == 0.6
    assert ANSWER_STRENGTH[AnswerChoice.UNKNOWN] == 0.0
    assert ANSWER_STRENGTH[AnswerChoice.DONT_CARE] == 0.0
    assert ANSWER_STRENGTH[AnswerChoice.PROBABLY_NO] == -0.6
    assert ANSWER_STRENGTH[AnswerChoice.NO] == -1.0
    assert len(set(ANSWER_STRENGTH.values())) == 5

    assert answer_strength(AnswerChoice.PROBABLY_YES, scale=0.5) == pytest.approx(0.3)


def test_neutral_answer_is_identity():
    """s = 0 не змінює жодної ваги"""
    from akinator_core.question_engine import update_weights_for_tag_question

    log_weights = {"a": -1.2, "b": 0.5, "c": 3.7}
    updated = update_weights_for_tag_question(log_weights, {"a"}, strength=0.0, beta=2.5)

    assert updated == log_weights
    assert updated is not log_weights


def test_yes_and_no_are_mirrors():
    """YES: має ×e^β, не має ×e^-β; NO: дзеркально"""
    from akinator_core.question_engine import update_weights_for_tag_question
    from akinator_core.scoring import normalize_log_weights

    log_weights = {"a": 0.0, "b": 0.0}
    beta = 0.8

    yes = update_weights_for_tag_question(log_weights, {"a"}, strength=1.0, beta=beta)
    assert yes["a"] - yes["b"] == pytest.approx(2 * beta)
    assert max(yes.values()) == 0.0
    probs = normalize_log_weights(yes)
    assert probs["a"] == pytest.approx(math.exp(beta) / (math.exp(beta) + math.exp(-beta)))

    no = update_weights_for_tag_question(log_weights, {"a"}, strength=-1.0, beta=beta)
    assert no["a"] == pytest.approx(yes["b"])
    assert no["b"] == pytest.approx(yes["a"])

    # Вхідний словник не змінюється
    assert log_weights == {"a": 0.0, "b": 0.0}


def test_three_candidates_one_holder():
    """
    3 рівні кандидати, тег лише у першого, відповідь YES.

    Двостороннє оновлення: має ×e^β, не має ×e^-β, тобто відношення e^(2β) : 1 : 1.
    """
    from akinator_core.question_engine import update_weights_for_tag_question
    from akinator_core.scoring import calculate_confidence, normalize_log_weights

    log_weights = {"work_001": 0.0, "work_002": 0.0, "work_003": 0.0}

    # beta = 0.5 → e : 1 : 1, впевненість e / (e + 2)
    updated = update_weights_for_tag_question(log_weights, {"work_001"}, strength=1.0, beta=0.5)
    assert updated["work_001"] - updated["work_002"] == pytest.approx(1.0)
    assert updated["work_002"] == updated["work_003"]
    top_id, confidence = calculate_confidence(normalize_log_weights(updated))
    assert top_id == "work_001"
    assert confidence == pytest.approx(math.e / (math.e + 2))
    assert confidence == pytest.approx(0.576, abs=1e-3)

    # beta = 1 → e² : 1 : 1
    updated = update_weights_for_tag_question(log_weights, {"work_001"}, strength=1.0, beta=1.0)
    _, confidence = calculate_confidence(normalize_log_weights(updated))
    assert updated["work_001"] - updated["work_002"] == pytest.approx(2.0)
    assert confidence == pytest.approx(math.e ** 2 / (math.e ** 2 + 2))

    print(f"✓ confidence = {confidence:.4f}")


def test_reveal_penalty_only_target():
    """Штраф змінює лише відхиленого кандидата"""
    from akinator_core.question_engine import apply_reveal_penalty

    log_weights = {"a": 0.0, "b": -1.0, "c": -2.0}
    updated = apply_reveal_penalty(log_weights, "a", math.exp(-2.0))

    # a: 0 - 2 → новий максимум b, зсув на +1
    assert updated == pytest.approx({"a": -1.0, "b": 0.0, "c": -1.0})
    assert apply_reveal_penalty(log_weights, "zzz", 0.25) == log_weights
    assert apply_reveal_penalty(log_weights, "a", 1.0) == log_weights

    with pytest.raises(ValueError):
        apply_reveal_penalty(log_weights, "a", 0.0)


def test_large_beta_does_not_overflow():
    """β = 800: e^β не обчислюється, лог-ваги скінченні"""
    from akinator_core.question_engine import update_weights_for_tag_question
    from akinator_core.scoring import normalize_log_weights, rank_candidates

    updated = update_weights_for_tag_question({"a": 0.0, "b": 0.0}, {"a"}, strength=1.0, beta=800.0)

    assert all(math.isfinite(w) for w in updated.values())
    assert updated == pytest.approx({"a": 0.0, "b": -1600.0})

    probs = normalize_log_weights(updated)
    assert probs["a"] == 1.0
    assert probs["b"] >= 0.0
    assert [cid for cid, _ in rank_candidates(updated)] == ["a", "b"]


def test_weights_stay_finite_and_keep_order():
    """Багато сильних оновлень: лог-ваги скінченні, порядок не змінюється"""
    from akinator_core.question_engine import update_weights_for_tag_question
    from akinator_core.scoring import normalize_log_weights, rank_candidates, top_candidates

    # z_third вдвічі важчий за a_other; id у зворотному порядку до ваг
    log_weights = {"holder": 0.0, "a_other": 0.0, "z_third": math.log(2.0)}
    for _ in range(200):
        log_weights = update_weights_for_tag_question(log_weights, {"holder"}, strength=1.0, beta=5.0)
        assert all(math.isfinite(w) for w in log_weights.values())

    assert log_weights["holder"] == 0.0
    assert log_weights["z_third"] > log_weights["a_other"]
    assert log_weights["z_third"] - log_weights["a_other"] == pytest.approx(math.log(2.0))

    assert [cid for cid, _ in rank_candidates(log_weights)] == ["holder", "z_third", "a_other"]
    assert top_candidates(log_weights, 2, exclude=["holder"]) == ["z_third", "a_other"]

    # Ймовірності обох вже 0.0, але порядок тримають лог-ваги
    probs = normalize_log_weights(log_weights)
    assert probs["holder"] == 1.0
    assert probs["a_other"] == probs["z_third"] == 0.0


# =============================================================================
# BAYESIAN UPDATE
# =============================================================================

def test_answer_likelihood_table():
    """YES / NO: 1 - ε / ε; PROBABLY_*: 0.7 / 0.3; нейтральні: 1"""
    from akinator_core.question_engine import answer_likelihood
    from akinator_core.schemas import AnswerChoice

    eps = 0.02
    assert answer_likelihood(True, AnswerChoice.YES, eps) == pytest.approx(0.98)
    assert answer_likelihood(False, AnswerChoice.YES, eps) == pytest.approx(0.02)
    assert answer_likelihood(True, AnswerChoice.NO, eps) == pytest.approx(0.02)
    assert answer_likelihood(False, AnswerChoice.NO, eps) == pytest.approx(0.98)

    assert answer_likelihood(True, AnswerChoice.PROBABLY_YES, eps) == pytest.approx(0.7)
    assert answer_likelihood(False, AnswerChoice.PROBABLY_YES, eps) == pytest.approx(0.3)
    assert answer_likelihood(True, AnswerChoice.PROBABLY_NO, eps) == pytest.approx(0.3)
    assert answer_likelihood(False, AnswerChoice.PROBABLY_NO, eps) == pytest.approx(0.7)

    for neutral in (AnswerChoice.UNKNOWN, AnswerChoice.DONT_CARE):
        assert answer_likelihood(True, neutral, eps) == 1.0
        assert answer_likelihood(False, neutral, eps) == 1.0

    # Велике ε обмежує "можливо" до [ε, 1 - ε]
    assert answer_likelihood(True, AnswerChoice.PROBABLY_YES, 0.4) == pytest.approx(0.6)
    assert answer_likelihood(False, AnswerChoice.PROBABLY_YES, 0.4) == pytest.approx(0.4)


def test_bayesian_update():
    """log w += log P(відповідь | ознака)"""
    from akinator_core.question_engine import update_weights_bayesian
    from akinator_core.schemas import AnswerChoice
    from akinator_core.scoring import normalize_log_weights

    log_weights = {"a": 0.0, "b": 0.0, "c": 0.0}

    yes = update_weights_bayesian(log_weights, {"a"}, AnswerChoice.YES, 0.02)
    assert yes["a"] == 0.0
    assert yes["b"] == pytest.approx(math.log(0.02 / 0.98))
    assert yes["b"] == yes["c"]
    assert normalize_log_weights(yes)["a"] == pytest.approx(0.98 / (0.98 + 2 * 0.02))

    probably = update_weights_bayesian(log_weights, {"a"}, AnswerChoice.PROBABLY_NO, 0.02)
    assert probably["a"] - probably["b"] == pytest.approx(math.log(0.3 / 0.7))

    # Нейтральна відповідь: без змін
    same = update_weights_bayesian(log_weights, {"a"}, AnswerChoice.DONT_CARE, 0.02)
    assert same == log_weights
    assert same is not log_weights


def test_bayesian_update_epsilon_bounds():
    """ε поза (0, 0.5] відхиляється"""
    from akinator_core.question_engine import update_weights_bayesian
    from akinator_core.schemas import AnswerChoice

    for eps in (0.0, -0.1, 0.6):
        with pytest.raises(ValueError):
            update_weights_bayesian({"a": 0.0}, {"a"}, AnswerChoice.YES, eps)

    # ε = 0.5: відповідь нічого не розрізняє
    flat = update_weights_bayesian({"a": 0.0, "b": 0.0}, {"a"}, AnswerChoice.YES, 0.5)
    assert flat == {"a": 0.0, "b": 0.0}


def test_bayesian_many_answers_stay_finite():
    """Сотні NO: лог-ваги скінченні, порядок збережено"""
    from akinator_core.question_engine import update_weights_bayesian
    from akinator_core.schemas import AnswerChoice
    from akinator_core.scoring import rank_candidates

    log_weights = {"holder": 0.0, "a_other": -0.5, "z_other": 0.0}
    for _ in range(1000):
        log_weights = update_weights_bayesian(log_weights, {"holder"}, AnswerChoice.NO, 0.02)

    assert all(math.isfinite(w) for w in log_weights.values())
    assert [cid for cid, _ in rank_candidates(log_weights)] == ["z_other", "a_other", "holder"]
