"""
Тести для модуля scoring

Запуск: pytest tests/test_scoring.py -v
"""

import math

import numpy as np
import pytest


def test_normalize_uniform():
    """Рівномірні ваги → 1/n"""
    from akinator_core.scoring import normalize_weights

    for n in (1, 3, 7):
        weights = {f"work_{i:03d}": 2.5 for i in range(n)}
        probs = normalize_weights(weights)
        assert all(p == pytest.approx(1.0 / n) for p in probs.values())

    print("✓ 1/n для рівномірних ваг")


def test_normalize_degenerate():
    """Σw = 0 → рівномірний розподіл; порожній → порожній"""
    from akinator_core.scoring import normalize_weights

    probs = normalize_weights({"a": 0.0, "b": 0.0, "c": 0.0, "d": 0.0})
    assert probs == {"a": 0.25, "b": 0.25, "c": 0.25, "d": 0.25}
    assert normalize_weights({}) == {}


def test_normalize_sums_to_one():
    """Σp = 1, кожне p ∈ [0, 1]"""
    from akinator_core.scoring import normalize_weights

    rng = np.random.default_rng(42)
    for _ in range(20):
        n = int(rng.integers(1, 50))
        weights = {f"w{i}": float(v) for i, v in enumerate(rng.exponential(size=n) * 10 ** rng.uniform(-50, 50))}
        probs = normalize_weights(weights)
        assert sum(probs.values()) == pytest.approx(1.0)
        assert all(0.0 <= p <= 1.0 for p in probs.values())


def test_confidence_tie_break():
    """Рівні максимуми → лексикографічно найменший id"""
    from akinator_core.scoring import calculate_confidence, normalize_weights

    weights = {"work_003": 0.5, "work_001": 0.5, "work_002": 0.5}
    top_id, confidence = calculate_confidence(normalize_weights(weights))

    assert top_id == "work_001"
    assert confidence == pytest.approx(1.0 / 3)

    top_id, _ = calculate_confidence({"b": 0.4, "c": 0.4, "a": 0.2})
    assert top_id == "b"

    assert calculate_confidence({}) == (None, 0.0)
    print(f"✓ Tie-break: {top_id}")


def test_rank_candidates():
    """Порядок p ↓, id ↑"""
    from akinator_core.scoring import rank_candidates, top_candidates

    probs = {"d": 0.1, "c": 0.3, "a": 0.3, "b": 0.3}
    assert [cid for cid, _ in rank_candidates(probs)] == ["a", "b", "c", "d"]
    assert top_candidates(probs, 2) == ["a", "b"]
    assert top_candidates(probs, 2, exclude=["a"]) == ["b", "c"]


def test_effective_candidates():
    """1 / Σp²"""
    from akinator_core.scoring import effective_candidates

    assert effective_candidates({}) == 0.0
    assert effective_candidates({"a": 1.0}) == pytest.approx(1.0)
    uniform = {f"w{i}": 0.1 for i in range(10)}
    assert effective_candidates(uniform) == pytest.approx(10.0)

    skewed = {"a": 0.9, "b": 0.05, "c": 0.05}
    assert 1.0 < effective_candidates(skewed) < 1.3


def test_effective_confirm_threshold():
    """clamp(round(total / divisor), min, max)"""
    from akinator_core.scoring import effective_confirm_threshold

    assert effective_confirm_threshold(1000, 5, 30, 20) == 30
    assert effective_confirm_threshold(400, 5, 30, 20) == 20
    assert effective_confirm_threshold(60, 5, 30, 20) == 5
    assert effective_confirm_threshold(0, 5, 30, 20) == 5
    # Половина округлюється вгору
    assert effective_confirm_threshold(30, 1, 10, 20) == 2
    assert effective_confirm_threshold(50, 1, 10, 20) == 3


def test_base_prior():
    """exp(alpha · (base + bonus)); alpha = 0 → 1"""
    from akinator_core.schemas import Candidate
    from akinator_core.scoring import base_prior

    candidate = Candidate(id="w1", popularity_base=1.5, popularity_play_bonus=0.5)

    assert base_prior(candidate, 0.0) == 1.0
    assert base_prior(candidate, 0.5) == pytest.approx(math.e)


def test_initial_log_weights_no_overflow():
    """Великі популярності: лог-ваги без exp, порядок збережено"""
    from akinator_core.schemas import Candidate
    from akinator_core.scoring import base_prior, initial_log_weights, normalize_log_weights

    candidates = [
        Candidate(id="big", popularity_base=1000.0),
        Candidate(id="mid", popularity_base=999.0),
        Candidate(id="low", popularity_base=0.0),
    ]
    log_weights = initial_log_weights(candidates, alpha=1.0)

    assert log_weights == {"big": 1000.0, "mid": 999.0, "low": 0.0}
    probs = normalize_log_weights(log_weights)
    assert probs["big"] / probs["mid"] == pytest.approx(math.e)
    assert probs["mid"] > probs["low"]

    small = Candidate(id="w1", popularity_base=1.5, popularity_play_bonus=0.5)
    assert initial_log_weights([small], 0.5)["w1"] == pytest.approx(math.log(base_prior(small, 0.5)))
    assert initial_log_weights([], 0.5) == {}


def test_normalize_log_weights():
    """log-sum-exp: той самий розподіл, що й normalize_weights, без переповнення"""
    from akinator_core.scoring import normalize_log_weights, normalize_weights

    weights = {"a": 3.0, "b": 1.0, "c": 0.5}
    log_weights = {cid: math.log(w) for cid, w in weights.items()}
    assert normalize_log_weights(log_weights) == pytest.approx(normalize_weights(weights))

    # Зсув усіх лог-ваг не змінює розподіл
    shifted = {cid: v + 5000.0 for cid, v in log_weights.items()}
    assert normalize_log_weights(shifted) == pytest.approx(normalize_weights(weights))

    assert normalize_log_weights({}) == {}
    with pytest.raises(ValueError):
        normalize_log_weights({"a": 0.0, "b": float("inf")})


def test_shift_log_weights():
    """max = 0, різниці (відношення ваг) збережені"""
    from akinator_core.scoring import shift_log_weights

    shifted = shift_log_weights({"a": 1500.0, "b": 1500.0 - math.log(10.0), "c": -3000.0})
    assert shifted["a"] == 0.0
    assert shifted["a"] - shifted["b"] == pytest.approx(math.log(10.0))
    assert shifted["c"] == pytest.approx(-4500.0)

    assert shift_log_weights({}) == {}
    with pytest.raises(ValueError):
        shift_log_weights({"a": float("nan")})
