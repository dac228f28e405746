import pytest

from interview.fallbacks import (
    GENERIC_BANK,
    ROLE_BANKS,
    fallback_question,
    fallback_summary,
    heuristic_score,
    round_half_up,
    summary_for_score,
)


@pytest.mark.parametrize(
    "answer,expected",
    [
        (None, 2),
        ("", 2),
        ("a" * 9, 2),
        ("a" * 10, 5),
        ("a" * 30, 5),
        ("a" * 49, 5),
        ("a" * 50, 7),
        ("a" * 80, 7),
        ("   short   ", 2),
    ],
)
def test_heuristic_score_boundaries(answer, expected):
    assert heuristic_score(answer) == expected


def test_fallback_question_uses_role_bank():
    question = fallback_question("Full-Stack Developer", "easy", 1)
    assert question.text in ROLE_BANKS["Full-Stack Developer"]["easy"]
    assert question.difficulty == "easy"
    assert question.time_limit == 20


def test_fallback_question_unknown_role_uses_generic_bank():
    question = fallback_question("Astronaut", "hard", 6, offset=4)
    assert question.text in GENERIC_BANK["hard"]
    assert question.time_limit == 120


def test_fallback_question_tier_pair_differs():
    bank = ROLE_BANKS["Backend Developer"]["medium"]
    for offset in range(6):
        first = fallback_question("Backend Developer", "medium", 3, offset)
        second = fallback_question("Backend Developer", "medium", 4, offset)
        assert first.text != second.text
        assert {first.text, second.text} == set(bank)


def test_round_half_up():
    assert round_half_up(74.5) == 75
    assert round_half_up(74.4) == 74
    assert round_half_up(65.0) == 65


def test_fallback_summary_averages_scores():
    result = fallback_summary([8, 7, 9, 6, 8, 7])
    assert result.final_score == 75
    assert result.summary.startswith("Good performance")


@pytest.mark.parametrize(
    "score,prefix",
    [
        (80, "Excellent performance"),
        (79, "Good performance"),
        (60, "Good performance"),
        (59, "Average performance"),
        (40, "Average performance"),
        (39, "Below expectations"),
        (0, "Below expectations"),
    ],
)
def test_summary_tiers(score, prefix):
    assert summary_for_score(score).startswith(prefix)


def test_fallback_summary_empty_scores():
    result = fallback_summary([])
    assert result.final_score == 0
    assert result.summary.startswith("Below expectations")
