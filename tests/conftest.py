import pytest

from study_assistant.errors import GenerationError
from study_assistant.generation import Orchestrator
from study_assistant.models import Flashcard, QuizQuestion, QuizResult
from study_assistant.state import AppState


class FakeService:
    """Stands in for GeminiService; records every call it receives."""

    def __init__(self, notes="# Topic\n\n- point", cards=None, questions=None, fail=False):
        self.notes = notes
        self.cards = cards if cards is not None else [
            {"front": "What is a cell?", "back": "The basic unit of life"},
            {"front": "Mitochondria", "back": "Powerhouse of the cell"},
        ]
        self.questions = questions if questions is not None else [
            {
                "question": f"Question {i}?",
                "options": ["A", "B", "C", "D"],
                "correctAnswerIndex": i % 4,
                "explanation": f"Because {i}",
            }
            for i in range(3)
        ]
        self.fail = fail
        self.calls = []

    def generate_notes(self, text, file=None):
        self.calls.append(("notes", text, file))
        if self.fail:
            raise GenerationError("service down")
        return self.notes

    def generate_flashcards(self, notes):
        self.calls.append(("flashcards", notes))
        if self.fail:
            raise GenerationError("service down")
        return self.cards

    def generate_quiz(self, notes):
        self.calls.append(("quiz", notes))
        if self.fail:
            raise GenerationError("service down")
        return self.questions


def make_cards(n):
    return [Flashcard(id=f"fc-{i}", front=f"front {i}", back=f"back {i}") for i in range(n)]


def make_questions(n, correct=0):
    return [
        QuizQuestion(
            id=f"qz-{i}", question=f"Q{i}?", options=("a", "b", "c", "d"),
            correct_answer_index=correct, explanation=f"Explanation {i}",
        )
        for i in range(n)
    ]


def make_result(percentage, topic="Biology", total=10):
    return QuizResult(
        score=round(percentage * total / 100), total=total, answers={},
        percentage=percentage, timestamp=1700000000000, topic=topic,
    )


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def orchestrator(service):
    return Orchestrator(service)


@pytest.fixture
def state_with_notes(state):
    state.study_set.notes_markdown = "# Photosynthesis\n\n- Light reactions"
    state.study_set.original_content = "Plants turn light into sugar."
    state.study_set.title = "Text Notes 2026-01-01"
    return state
