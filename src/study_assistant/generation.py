"""Generation orchestrator: sequences Gemini calls and updates the study set.

Each user request is a small command object handled by Orchestrator.handle(),
which always returns an Outcome. Failures are translated into outcomes and
never propagate to the caller; the busy flag is cleared on every path and
the study set keeps its previous contents when a call fails.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Optional

from study_assistant.errors import BusyError, GenerationError, InputError, StudyAssistantError
from study_assistant.models import FileUpload, Flashcard, QuizQuestion, View, new_id
from study_assistant.state import AppState

logger = logging.getLogger(__name__)

PROCESS_FAILED = "Failed to process content. Please ensure your API key is valid and try again."
FLASHCARDS_FAILED = "Could not generate flashcards. Please try again."
QUIZ_FAILED = "Could not generate quiz. Please try again."


@dataclass(frozen=True)
class ProcessMaterial:
    text: str = ""
    file: Optional[FileUpload] = None


@dataclass(frozen=True)
class GenerateFlashcards:
    pass


@dataclass(frozen=True)
class GenerateQuiz:
    pass


@dataclass(frozen=True)
class RegenerateNotes:
    pass


@dataclass(frozen=True)
class Outcome:
    ok: bool
    message: str = ""
    error: Optional[str] = None  # StudyAssistantError.tag
    next_view: Optional[View] = None
    skipped: bool = False


def default_title(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"Text Notes {today.isoformat()}"


class Orchestrator:
    def __init__(self, service):
        self.service = service
        self._lock = threading.Lock()

    # Convenience wrappers

    def process_material(self, state: AppState, text: str = "", file: Optional[FileUpload] = None) -> Outcome:
        return self.handle(state, ProcessMaterial(text=text, file=file))

    def generate_flashcards(self, state: AppState) -> Outcome:
        return self.handle(state, GenerateFlashcards())

    def generate_quiz(self, state: AppState) -> Outcome:
        return self.handle(state, GenerateQuiz())

    def regenerate_notes(self, state: AppState) -> Outcome:
        return self.handle(state, RegenerateNotes())

    def handle(self, state: AppState, request) -> Outcome:
        if isinstance(request, RegenerateNotes):
            # The uploaded file's bytes are not kept, so a regeneration only
            # replays the stored source text.
            if not state.study_set.original_content:
                logger.info("Rejected regeneration: no stored source text")
                return _failure(InputError(
                    "This study set came from a file, which is not kept. Upload it again to regenerate."
                ))
            request = ProcessMaterial(text=state.study_set.original_content)

        if isinstance(request, ProcessMaterial):
            if not request.text and request.file is None:
                logger.info("Rejected empty material")
                return _failure(InputError("Paste some text or choose a file first."))
            run, failure_message = self._process, PROCESS_FAILED
        elif isinstance(request, GenerateFlashcards):
            if not state.study_set.has_notes:
                return Outcome(ok=True, skipped=True, message="Generate notes first.")
            run, failure_message = self._flashcards, FLASHCARDS_FAILED
        elif isinstance(request, GenerateQuiz):
            if not state.study_set.has_notes:
                return Outcome(ok=True, skipped=True, message="Generate notes first.")
            run, failure_message = self._quiz, QUIZ_FAILED
        else:
            raise TypeError(f"unknown request {request!r}")

        if not self._acquire(state):
            logger.warning("Rejected %s: generation already in progress", type(request).__name__)
            return _failure(BusyError("A generation is already in progress."))

        logger.info("Handling %s", type(request).__name__)
        try:
            outcome = run(state, request)
        except StudyAssistantError as e:
            logger.warning("%s failed: %s", type(request).__name__, e)
            return _failure(e, failure_message)
        finally:
            self._release(state)

        if outcome.next_view is not None:
            state.navigator.set_view(outcome.next_view)
        return outcome

    def _acquire(self, state: AppState) -> bool:
        with self._lock:
            if state.study_set.is_generating:
                return False
            state.study_set.is_generating = True
            return True

    def _release(self, state: AppState) -> None:
        with self._lock:
            state.study_set.is_generating = False

    def _process(self, state: AppState, request: ProcessMaterial) -> Outcome:
        notes = self.service.generate_notes(request.text, request.file)
        study_set = state.study_set
        study_set.notes_markdown = notes
        study_set.title = request.file.name if request.file else default_title()
        study_set.original_content = request.text
        study_set.file_name = request.file.name if request.file else None
        study_set.file_type = request.file.mime_type if request.file else None
        return Outcome(ok=True, message=f"Notes ready for {study_set.title}.", next_view=View.NOTES)

    def _flashcards(self, state: AppState, request: GenerateFlashcards) -> Outcome:
        records = self.service.generate_flashcards(state.study_set.notes_markdown)
        try:
            cards = [
                Flashcard(id=new_id("fc"), front=r["front"], back=r["back"])
                for r in records
            ]
        except (KeyError, TypeError) as e:
            raise GenerationError("The flashcard response was malformed.") from e
        state.study_set.flashcards = cards
        return Outcome(ok=True, message=f"Generated {len(cards)} flashcards.")

    def _quiz(self, state: AppState, request: GenerateQuiz) -> Outcome:
        records = self.service.generate_quiz(state.study_set.notes_markdown)
        try:
            questions = [
                QuizQuestion(
                    id=new_id("qz"),
                    question=r["question"],
                    options=tuple(r["options"]),
                    correct_answer_index=r["correctAnswerIndex"],
                    explanation=r.get("explanation", ""),
                )
                for r in records
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise GenerationError("The quiz response was malformed.") from e
        state.study_set.quiz = questions
        return Outcome(ok=True, message=f"Generated {len(questions)} quiz questions.")


def _failure(error: StudyAssistantError, message: Optional[str] = None) -> Outcome:
    text = str(error)
    if message and message != text:
        text = f"{message}\n{text}"
    return Outcome(ok=False, message=text, error=error.tag)
