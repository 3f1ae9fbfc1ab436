"""Quiz session state machine, scoring and ranks."""
import math
import time
from typing import Optional

from study_assistant.models import QuizQuestion, QuizResult

RANKS = [
    (90, "Grandmaster", "Outstanding! You've mastered this topic perfectly. You're ready to teach it!"),
    (80, "Expert", "Great job! You have a solid grasp of the material. Just a few minor details to polish."),
    (60, "Apprentice", "Good effort. You understand the basics, but review the explanations for the "
                       "questions you missed to strengthen your knowledge."),
    (0, "Novice", "Keep going! It seems this topic is a bit tricky. We recommend reviewing the notes "
                  "and trying the flashcards again before retrying the quiz."),
]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calc_percentage(score: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(score / total * 100)


def score_answers(questions: list[QuizQuestion], answers: dict) -> int:
    return sum(1 for q in questions if answers.get(q.id) == q.correct_answer_index)


def get_rank(percentage: float) -> str:
    for threshold, rank, _ in RANKS:
        if percentage >= threshold:
            return rank
    return RANKS[-1][1]


def get_rank_feedback(percentage: float) -> str:
    for threshold, _, feedback in RANKS:
        if percentage >= threshold:
            return feedback
    return RANKS[-1][2]


class QuizSession:
    """Answer-by-answer walk through a quiz.

    A run ends when next_question() is called on the last question; that call
    returns the QuizResult, and it is the only call of the run that does.
    retry() starts a fresh run.
    """

    def __init__(self, questions: list[QuizQuestion], topic: str = "General Knowledge"):
        self.questions = questions
        self.topic = topic
        self.retry()

    def retry(self) -> None:
        self.current_index = 0
        self.selected_option: Optional[int] = None
        self.answer_revealed = False
        self.answers: dict[str, int] = {}
        self.completed = False
        self.result: Optional[QuizResult] = None

    def sync(self, questions: list[QuizQuestion], topic: Optional[str] = None) -> bool:
        """Adopt a newly generated quiz. Returns True if the session was reset."""
        if topic is not None:
            self.topic = topic
        if questions is self.questions:
            return False
        self.questions = questions
        self.retry()
        return True

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if not self.questions or self.completed:
            return None
        return self.questions[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index == self.total - 1

    @property
    def is_correct(self) -> Optional[bool]:
        q = self.current_question
        if q is None or not self.answer_revealed:
            return None
        return self.selected_option == q.correct_answer_index

    @property
    def score(self) -> int:
        return score_answers(self.questions, self.answers)

    @property
    def percentage(self) -> int:
        return calc_percentage(self.score, self.total)

    def select_option(self, index: int) -> bool:
        q = self.current_question
        if q is None or self.answer_revealed:
            return False
        if not 0 <= index < len(q.options):
            return False
        self.selected_option = index
        return True

    def check_answer(self) -> bool:
        q = self.current_question
        if q is None or self.answer_revealed or self.selected_option is None:
            return False
        self.answers[q.id] = self.selected_option
        self.answer_revealed = True
        return True

    def next_question(self) -> Optional[QuizResult]:
        if not self.questions or self.completed:
            return None
        if not self.is_last:
            self.current_index += 1
            self.selected_option = None
            self.answer_revealed = False
            return None
        self.completed = True
        score = self.score
        self.result = QuizResult(
            score=score,
            total=self.total,
            answers=dict(self.answers),
            percentage=calc_percentage(score, self.total),
            timestamp=int(time.time() * 1000),
            topic=self.topic,
        )
        return self.result
