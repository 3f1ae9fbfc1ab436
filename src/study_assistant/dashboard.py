"""Dashboard statistics derived from quiz history."""
from dataclasses import dataclass

from study_assistant.models import QuizResult
from study_assistant.quiz import round_half_up

TREND_SIZE = 10
RECENT_SIZE = 5
MASTERY_THRESHOLD = 80
LABEL_LENGTH = 10


@dataclass(frozen=True)
class TrendPoint:
    index: int
    percentage: int
    label: str


def get_score_label(percentage: float) -> str:
    if percentage >= 80:
        return "Excellent"
    elif percentage >= 60:
        return "Good"
    return "Needs Work"


def get_score_color(percentage: float) -> str:
    if percentage >= 80:
        return "green"
    elif percentage >= 60:
        return "yellow"
    return "red"


def get_encouragement(total_tests: int, avg_score: int) -> str:
    if total_tests == 0:
        return "Ready to start your learning journey? Upload your first note!"
    if avg_score >= 90:
        return "You're on fire! Keep up the excellent work."
    if avg_score >= 70:
        return "Great progress! Consistent practice is key."
    return "Don't give up! Review your notes and try again."


def calc_avg_score(history: list[QuizResult]) -> int:
    if not history:
        return 0
    return round_half_up(sum(r.percentage for r in history) / len(history))


def truncate_label(topic: str) -> str:
    if not topic:
        return "Untitled Quiz"
    if len(topic) <= LABEL_LENGTH:
        return topic
    return topic[:LABEL_LENGTH] + "..."


def get_trend(history: list[QuizResult]) -> list[TrendPoint]:
    """Last ten results, oldest first."""
    recent = history[-TREND_SIZE:]
    return [TrendPoint(i, r.percentage, truncate_label(r.topic)) for i, r in enumerate(recent)]


def get_dashboard_stats(history: list[QuizResult]) -> dict:
    history = list(history)
    total_tests = len(history)
    avg_score = calc_avg_score(history)
    return {
        "total_tests": total_tests,
        "avg_score": avg_score,
        "mastery_count": sum(1 for r in history if r.percentage >= MASTERY_THRESHOLD),
        "trend": get_trend(history),
        "encouragement": get_encouragement(total_tests, avg_score),
        "recent": list(reversed(history))[:RECENT_SIZE],
        "total_questions": sum(r.total for r in history),
        "streak": min(total_tests, 5),
        "quote": (
            "Every expert was once a beginner." if total_tests == 0
            else "Success is the sum of small efforts, repeated day in and day out."
        ),
    }
