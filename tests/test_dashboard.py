# tests/test_dashboard.py
from conftest import make_result
from study_assistant.dashboard import (
    TrendPoint, calc_avg_score, get_dashboard_stats, get_encouragement,
    get_score_color, get_score_label, truncate_label,
)


def test_empty_history():
    stats = get_dashboard_stats([])
    assert stats["total_tests"] == 0
    assert stats["avg_score"] == 0
    assert stats["mastery_count"] == 0
    assert stats["trend"] == []
    assert stats["recent"] == []
    assert stats["streak"] == 0
    assert stats["encouragement"].startswith("Ready to start")


def test_avg_and_mastery():
    stats = get_dashboard_stats([make_result(100), make_result(50)])
    assert stats["avg_score"] == 75
    assert stats["mastery_count"] == 1
    assert stats["total_questions"] == 20


def test_avg_rounds_half_up():
    assert calc_avg_score([make_result(70), make_result(71)]) == 71
    assert calc_avg_score([make_result(33), make_result(33), make_result(34)]) == 33


def test_mastery_threshold_is_inclusive():
    stats = get_dashboard_stats([make_result(80), make_result(79)])
    assert stats["mastery_count"] == 1


def test_encouragement_thresholds():
    assert get_encouragement(0, 0).startswith("Ready to start")
    assert get_encouragement(3, 90).startswith("You're on fire")
    assert get_encouragement(3, 89).startswith("Great progress")
    assert get_encouragement(3, 70).startswith("Great progress")
    assert get_encouragement(3, 69).startswith("Don't give up")


def test_trend_keeps_last_ten_in_order():
    history = [make_result(p, topic=f"Topic {p}") for p in range(0, 120, 10) if p <= 100]
    history += [make_result(5, topic="Extra")]
    stats = get_dashboard_stats(history)
    trend = stats["trend"]
    assert len(trend) == 10
    assert [p.index for p in trend] == list(range(10))
    assert trend[-1] == TrendPoint(9, 5, "Extra")
    assert [p.percentage for p in trend[:-1]] == [p.percentage for p in history[-10:-1]]


def test_truncate_label():
    assert truncate_label("Short") == "Short"
    assert truncate_label("Photosynthesis basics") == "Photosynth..."
    assert truncate_label("") == "Untitled Quiz"


def test_recent_is_newest_first_and_capped():
    history = [make_result(p, topic=str(p)) for p in (10, 20, 30, 40, 50, 60, 70)]
    recent = get_dashboard_stats(history)["recent"]
    assert [r.topic for r in recent] == ["70", "60", "50", "40", "30"]


def test_streak_capped_at_five():
    stats = get_dashboard_stats([make_result(50)] * 8)
    assert stats["streak"] == 5


def test_dashboard_does_not_mutate_history():
    history = [make_result(10), make_result(20)]
    get_dashboard_stats(history)
    assert [r.percentage for r in history] == [10, 20]


def test_score_label_and_color():
    assert get_score_label(85) == "Excellent"
    assert get_score_label(60) == "Good"
    assert get_score_label(59) == "Needs Work"
    assert get_score_color(80) == "green"
    assert get_score_color(65) == "yellow"
    assert get_score_color(10) == "red"
