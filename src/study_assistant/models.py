"""Data classes for the study set domain model."""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class View(str, Enum):
    HOME = "HOME"
    UPLOAD = "UPLOAD"
    NOTES = "NOTES"
    FLASHCARDS = "FLASHCARDS"
    QUIZ = "QUIZ"


class CardStatus(str, Enum):
    NEW = "new"
    KNOWN = "known"
    REVIEW = "review"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass
class Flashcard:
    id: str
    front: str
    back: str
    status: CardStatus = CardStatus.NEW


@dataclass(frozen=True)
class QuizQuestion:
    id: str
    question: str
    options: tuple
    correct_answer_index: int
    explanation: str = ""

    def __post_init__(self):
        if len(self.options) != 4:
            raise ValueError(f"expected 4 options, got {len(self.options)}")
        if not 0 <= self.correct_answer_index < 4:
            raise ValueError(f"correct_answer_index out of range: {self.correct_answer_index}")
        # Lists coming from JSON are frozen into tuples.
        object.__setattr__(self, "options", tuple(self.options))


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int
    answers: dict
    percentage: int
    timestamp: int
    topic: str = "General Knowledge"
    completed: bool = True


@dataclass
class FileUpload:
    name: str
    mime_type: str
    data: str  # base64


@dataclass
class StudySet:
    id: str = "default"
    title: str = "Untitled Set"
    original_content: str = ""
    notes_markdown: str = ""
    flashcards: list = field(default_factory=list)
    quiz: list = field(default_factory=list)
    is_generating: bool = False
    file_name: Optional[str] = None
    file_type: Optional[str] = None

    @property
    def has_notes(self) -> bool:
        return bool(self.notes_markdown)

    @property
    def topic(self) -> str:
        return self.file_name or self.title or "General Knowledge"
