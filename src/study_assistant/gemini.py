"""Gemini client that turns source material into notes, flashcards and quizzes."""
import base64
import binascii
import json
import logging
from typing import Optional

from google import genai
from google.genai import types

from study_assistant.config import Settings, get_settings
from study_assistant.errors import GenerationError
from study_assistant.models import FileUpload

logger = logging.getLogger(__name__)

NOTES_PROMPT = """
You are an expert study assistant.
Analyze the provided material (text and/or file) and create comprehensive, structured study notes in Markdown format.

CRITICAL INSTRUCTION: Keep points concise and short. Use bullet points heavily. Avoid long paragraphs.

Structure the output as follows:
# [Title of the Topic]

## Important Points
- Provide a comprehensive list of bullet points covering the most critical takeaways.
- Keep each bullet point short (1-2 sentences maximum).
- Extract the core message and key facts into these points.

## Key Concepts
- **Concept Name**: Short definition and explanation.

## Detailed Notes
Break down the main sections of the content with clear headers and bullet points.
- Use nested bullets for sub-points.
- Focus on brevity and clarity.

## Important Formulas / Key Dates / Figures
(If applicable, list them here)

## Glossary
- **Term**: Definition.

Use bolding for emphasis. Keep it clean and easy to read.
"""

FLASHCARDS_PROMPT = """
Based on the following study notes, create 10-15 high-quality flashcards for studying.
Each card should have a clear question/term on the 'front' and a concise answer/explanation on the 'back'.

Notes:
{notes}
"""

QUIZ_PROMPT = """
Based on the following study notes, create a multiple-choice quiz with 10 questions.
Provide 4 options for each question.

Notes:
{notes}
"""

FLASHCARD_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "front": types.Schema(type=types.Type.STRING),
            "back": types.Schema(type=types.Type.STRING),
        },
        required=["front", "back"],
    ),
)

QUIZ_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "question": types.Schema(type=types.Type.STRING),
            "options": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
            ),
            "correctAnswerIndex": types.Schema(
                type=types.Type.INTEGER,
                description="Index of the correct option (0-3)",
            ),
            "explanation": types.Schema(
                type=types.Type.STRING,
                description="Why this answer is correct",
            ),
        },
        required=["question", "options", "correctAnswerIndex", "explanation"],
    ),
)


class GeminiService:
    """Calls the Gemini API on behalf of the generation orchestrator.

    Structured calls return plain records ({front, back} cards and
    {question, options, correctAnswerIndex, explanation} questions); ids are
    assigned by the orchestrator.

    Every failure, whether raised by the SDK or caused by a response that
    does not match the requested structure, surfaces as GenerationError.
    """

    def __init__(self, settings: Optional[Settings] = None, client=None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.settings.api_key:
                raise GenerationError(
                    "No Gemini API key configured. Set GEMINI_API_KEY and try again."
                )
            self._client = genai.Client(api_key=self.settings.api_key)
        return self._client

    def _truncate(self, notes: str) -> str:
        return notes[: self.settings.notes_char_limit]

    def _generate(self, what: str, contents, config=None) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.settings.model,
                contents=contents,
                config=config,
            )
        except GenerationError:
            raise
        except Exception as e:
            logger.error("Gemini %s request failed: %s", what, e, exc_info=True)
            raise GenerationError(f"Failed to generate {what}. Please try again.") from e
        return response.text or ""

    def _generate_json(self, what: str, prompt: str, schema: types.Schema) -> list:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )
        raw = self._generate(what, prompt, config)
        try:
            data = json.loads(raw or "[]")
        except json.JSONDecodeError as e:
            logger.error("Gemini returned invalid JSON for %s: %.200s", what, raw)
            raise GenerationError(f"Failed to generate {what}.") from e
        if not isinstance(data, list):
            raise GenerationError(f"Failed to generate {what}: expected a list.")
        if not data:
            raise GenerationError(f"Failed to generate {what}: the response was empty.")
        return data

    def generate_notes(self, text: str, file: Optional[FileUpload] = None) -> str:
        parts = []
        if file:
            try:
                payload = base64.b64decode(file.data, validate=True)
            except (binascii.Error, ValueError) as e:
                raise GenerationError(f"Could not decode {file.name}.") from e
            parts.append(types.Part.from_bytes(data=payload, mime_type=file.mime_type))
        if text:
            parts.append(types.Part.from_text(text=f"Source material context: {text}"))
        parts.append(types.Part.from_text(text=NOTES_PROMPT))

        notes = self._generate("notes", parts).strip()
        if not notes:
            raise GenerationError("Failed to generate notes. Please try again.")
        logger.info("Generated %d characters of notes", len(notes))
        return notes

    def generate_flashcards(self, notes: str) -> list[dict]:
        prompt = FLASHCARDS_PROMPT.format(notes=self._truncate(notes))
        data = self._generate_json("flashcards", prompt, FLASHCARD_SCHEMA)
        try:
            cards = [{"front": str(item["front"]), "back": str(item["back"])} for item in data]
        except (KeyError, TypeError) as e:
            raise GenerationError("Failed to generate flashcards: malformed card.") from e
        logger.info("Generated %d flashcards", len(cards))
        return cards

    def generate_quiz(self, notes: str) -> list[dict]:
        prompt = QUIZ_PROMPT.format(notes=self._truncate(notes))
        data = self._generate_json("quiz", prompt, QUIZ_SCHEMA)
        questions = []
        try:
            for item in data:
                options = [str(o) for o in item["options"]]
                index = int(item["correctAnswerIndex"])
                if len(options) != 4 or not 0 <= index < 4:
                    raise ValueError(f"bad options for {item['question']!r}")
                questions.append({
                    "question": str(item["question"]),
                    "options": options,
                    "correctAnswerIndex": index,
                    "explanation": str(item.get("explanation", "")),
                })
        except (KeyError, TypeError, ValueError) as e:
            raise GenerationError("Failed to generate quiz: malformed question.") from e
        logger.info("Generated %d quiz questions", len(questions))
        return questions
