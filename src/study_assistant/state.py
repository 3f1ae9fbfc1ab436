"""Application state: the live study set, quiz history and current view."""
import logging
from dataclasses import dataclass, field

from study_assistant.models import QuizResult, StudySet, View

logger = logging.getLogger(__name__)


class QuizHistory:
    """Append-only record of completed quiz runs."""

    def __init__(self):
        self._results: list[QuizResult] = []

    def record(self, result: QuizResult) -> None:
        self._results.append(result)
        logger.info("Recorded quiz result %s/%s for %r", result.score, result.total, result.topic)

    @property
    def results(self) -> list[QuizResult]:
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self):
        return iter(list(self._results))


class ViewNavigator:
    """Tracks the active screen.

    set_view() never refuses a target. Whether NOTES, FLASHCARDS and QUIZ are
    reachable is decided by the presentation layer from the study set's notes.
    """

    def __init__(self, initial: View = View.HOME):
        self.current = initial

    def set_view(self, target: View) -> None:
        logger.debug("View %s -> %s", self.current.value, target.value)
        self.current = target


@dataclass
class AppState:
    study_set: StudySet = field(default_factory=StudySet)
    history: QuizHistory = field(default_factory=QuizHistory)
    navigator: ViewNavigator = field(default_factory=ViewNavigator)
