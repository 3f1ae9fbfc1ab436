# tests/test_integration.py
"""End-to-end test of the core workflow."""
from conftest import FakeService
from study_assistant.dashboard import get_dashboard_stats
from study_assistant.flashcards import FlashcardSession
from study_assistant.generation import Orchestrator
from study_assistant.models import CardStatus, View
from study_assistant.quiz import QuizSession, get_rank
from study_assistant.state import AppState


def test_full_study_workflow():
    """Upload material, study the cards, take the quiz twice and read the dashboard."""
    state = AppState()
    questions = [
        {"question": f"Q{i}?", "options": ["a", "b", "c", "d"], "correctAnswerIndex": 0, "explanation": ""}
        for i in range(10)
    ]
    orchestrator = Orchestrator(FakeService(questions=questions))

    # Upload
    outcome = orchestrator.process_material(state, "The water cycle moves water around Earth.")
    assert outcome.ok
    assert state.navigator.current is View.NOTES

    # Flashcards
    assert orchestrator.generate_flashcards(state).ok
    session = FlashcardSession(state.study_set.flashcards)
    session.mark(CardStatus.KNOWN)
    session.settle()
    session.mark(CardStatus.REVIEW)
    session.settle()
    assert [c.status for c in state.study_set.flashcards] == [CardStatus.KNOWN, CardStatus.REVIEW]
    assert session.current_index == 0

    # Quiz: 7 of 10, then a perfect retry
    assert orchestrator.generate_quiz(state).ok
    quiz = QuizSession(state.study_set.quiz, topic=state.study_set.topic)
    for i in range(10):
        quiz.select_option(0 if i < 7 else 2)
        quiz.check_answer()
        result = quiz.next_question()
    state.history.record(result)
    assert result.percentage == 70
    assert get_rank(result.percentage) == "Apprentice"

    quiz.retry()
    for _ in range(10):
        quiz.select_option(0)
        quiz.check_answer()
        result = quiz.next_question()
    state.history.record(result)

    # Dashboard
    stats = get_dashboard_stats(state.history)
    assert stats["total_tests"] == 2
    assert stats["avg_score"] == 85
    assert stats["mastery_count"] == 1
    assert stats["recent"][0].percentage == 100
    assert stats["trend"][0].label == state.study_set.topic[:10] + "..."
