"""
Тести для сховищ сесій, історії ігор та пояснень

Запуск: pytest tests/test_session_repository.py -v
"""

from pathlib import Path

import pytest


SAMPLE_CATALOG = Path(__file__).parent.parent / "data" / "sample_catalog.json"


# =============================================================================
# SESSION REPOSITORY
# =============================================================================

def test_repository_returns_copies():
    """Незбережені зміни не потрапляють у сховище"""
    from akinator_core.game_cycle import InMemorySessionRepository
    from akinator_core.schemas import GameSession

    repo = InMemorySessionRepository()
    session = GameSession(log_weights={"w1": 0.0})
    repo.save(session)

    loaded = repo.load(session.session_id)
    loaded.log_weights["w1"] = -99.0
    loaded.question_count = 5

    again = repo.load(session.session_id)
    assert again.log_weights == {"w1": 0.0}
    assert again.question_count == 0

    repo.save(loaded)
    assert repo.load(session.session_id).question_count == 5
    print(f"✓ {len(repo)} сесія у сховищі")


def test_repository_delete_and_exists():
    """delete / exists / SessionNotFoundError"""
    from akinator_core.errors import SessionNotFoundError
    from akinator_core.game_cycle import InMemorySessionRepository
    from akinator_core.schemas import GameSession

    repo = InMemorySessionRepository()
    a, b = GameSession(session_id="a"), GameSession(session_id="b")
    repo.save(b)
    repo.save(a)

    assert repo.list_ids() == ["a", "b"]
    assert repo.exists("a")

    repo.delete("a")
    repo.delete("a")
    assert not repo.exists("a")
    assert len(repo) == 1

    with pytest.raises(SessionNotFoundError) as exc:
        repo.load("a")
    assert exc.value.session_id == "a"


# =============================================================================
# PLAY HISTORY
# =============================================================================

def test_build_record_requires_outcome():
    """Запис лише для сесії з підсумком"""
    from akinator_core.config import get_default_config
    from akinator_core.game_cycle import build_play_history_record
    from akinator_core.schemas import GameSession, Outcome

    config = get_default_config()
    session = GameSession()

    with pytest.raises(ValueError):
        build_play_history_record(session, config)

    session.outcome = Outcome.SUCCESS
    session.result_candidate_id = "w1"
    record = build_play_history_record(session, config)
    assert record.play_bonus == config.popularity.play_bonus_on_success

    session.outcome = Outcome.ALMOST_SUCCESS
    assert build_play_history_record(session, config).play_bonus == 0.0


def test_play_history_upsert():
    """Один запис на сесію: повторне збереження замінює"""
    from akinator_core.config import get_default_config
    from akinator_core.game_cycle import InMemoryPlayHistory, build_play_history_record
    from akinator_core.schemas import GameSession, Outcome

    config = get_default_config()
    history = InMemoryPlayHistory()
    session = GameSession(session_id="s1", outcome=Outcome.FAIL_LIST)

    history.save(build_play_history_record(session, config))
    session.outcome = Outcome.NOT_IN_LIST
    session.submitted_title = "Title"
    history.save(build_play_history_record(session, config))
    history.save(build_play_history_record(GameSession(session_id="s2", outcome=Outcome.SUCCESS), config))

    assert len(history) == 2
    assert history.get("s1").outcome == Outcome.NOT_IN_LIST
    assert history.get("s1").submitted_title == "Title"
    assert history.get("missing") is None

    counts = history.outcome_counts()
    assert counts == {"SUCCESS": 1, "FAIL_LIST": 0, "ALMOST_SUCCESS": 0, "NOT_IN_LIST": 1}


def test_record_history_json():
    """Історія питань серіалізується в JSON"""
    import json
    from akinator_core.schemas import (
        AiGateChoice, AnswerChoice, Outcome, PlayHistoryRecord,
        QuestionAnswerEntry, QuestionKind, TagQuestion,
    )

    record = PlayHistoryRecord(
        session_id="s1",
        outcome=Outcome.SUCCESS,
        question_count=1,
        ai_gate_choice=AiGateChoice.DONT_CARE,
        history=[QuestionAnswerEntry(
            question=TagQuestion(kind=QuestionKind.EXPLORE_TAG, q_index=1, tag_key="a"),
            answer=AnswerChoice.YES,
            strength=1.0,
        )],
    )
    data = json.loads(record.serialized_history())

    assert data["history"][0]["entry_type"] == "QUESTION"
    assert data["history"][0]["question"]["tag_key"] == "a"
    assert data["history"][0]["answer"] == "YES"


# =============================================================================
# EXPLANATION
# =============================================================================

def test_tag_match_rate():
    """50 + 50 · |∩| / |base|"""
    from akinator_core.game_cycle import tag_match_rate

    assert tag_match_rate(set(), {"a"}) == 50.0
    assert tag_match_rate({"a", "b"}, {"a"}) == 75.0
    assert tag_match_rate({"a", "b", "c"}, {"a", "b", "z"}) == 83.3
    assert tag_match_rate({"a", "b", "c"}, {"a"}) == 66.7
    assert tag_match_rate({"a"}, {"a", "b"}) == 100.0


def test_similar_candidates():
    """Схожі твори: rate ↓, id ↑, без самого кандидата"""
    from akinator_core.game_cycle import similar_candidates
    from akinator_core.schemas import CatalogSnapshot

    catalog = CatalogSnapshot.from_json_file(SAMPLE_CATALOG)

    # work_001: fantasy, romance, healing
    similar = similar_candidates(catalog, "work_001", 0.7, top_n=3)
    assert similar == [("work_006", 83.3), ("work_002", 66.7), ("work_003", 66.7)]

    pooled = similar_candidates(catalog, "work_001", 0.7, pool=["work_001", "work_005"])
    assert pooled == [("work_005", 50.0)]


def test_explain_candidate():
    """Збіги та суперечності з відповідями гравця"""
    from akinator_core.game_cycle import explain_candidate
    from akinator_core.schemas import (
        AnswerChoice, CatalogSnapshot, GameSession, HardConfirmQuestion, HardConfirmType,
        QuestionAnswerEntry, QuestionKind, TagQuestion,
    )

    catalog = CatalogSnapshot.from_json_file(SAMPLE_CATALOG)
    session = GameSession()
    answers = [("fantasy", AnswerChoice.YES), ("school", AnswerChoice.YES), ("dark", AnswerChoice.NO),
               ("voice", AnswerChoice.DONT_CARE)]
    for i, (tag, answer) in enumerate(answers, start=1):
        session.history.append(QuestionAnswerEntry(
            question=TagQuestion(kind=QuestionKind.EXPLORE_TAG, q_index=i, tag_key=tag),
            answer=answer,
            strength=0.0,
        ))
    session.history.append(QuestionAnswerEntry(
        question=HardConfirmQuestion(
            q_index=5, confirm_type=HardConfirmType.AUTHOR, value="サークルA", target_candidate_id="work_001"
        ),
        answer=AnswerChoice.YES,
        strength=1.0,
    ))

    explanation = explain_candidate(session, catalog, "work_001", 0.7)

    assert len(explanation.matches) == 4
    assert [m.tag_key for m in explanation.matched_features] == ["fantasy", "dark"]
    assert [m.tag_key for m in explanation.contradicted_features] == ["school"]
    assert explanation.matches[0].display_name == "ファンタジー"
    print(f"✓ {explanation!r}")


def test_explain_unknown_tag_raises():
    """Тег з історії, якого немає в каталозі → UnknownFeatureError"""
    from akinator_core.errors import UnknownFeatureError
    from akinator_core.game_cycle import explain_candidate
    from akinator_core.schemas import (
        AnswerChoice, CatalogSnapshot, GameSession, QuestionAnswerEntry, QuestionKind, TagQuestion,
    )

    catalog = CatalogSnapshot.from_json_file(SAMPLE_CATALOG)
    session = GameSession()
    session.history.append(QuestionAnswerEntry(
        question=TagQuestion(kind=QuestionKind.EXPLORE_TAG, q_index=1, tag_key="ghost"),
        answer=AnswerChoice.YES,
        strength=1.0,
    ))

    with pytest.raises(UnknownFeatureError) as exc:
        explain_candidate(session, catalog, "work_001", 0.7)
    assert exc.value.tag_key == "ghost"
