"""Exception taxonomy shared by the orchestrator, the Gemini client and the CLI."""


class StudyAssistantError(Exception):
    """Base class for every failure the app knows how to report."""

    tag = "error"


class InputError(StudyAssistantError):
    """No usable text or file was supplied."""

    tag = "input"


class GenerationError(StudyAssistantError):
    """The generation service failed or returned unusable data."""

    tag = "generation"


class BusyError(StudyAssistantError):
    """A generation request is already in flight for this study set."""

    tag = "busy"
