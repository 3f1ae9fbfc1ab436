"""Interactive CLI application."""
import logging
import time
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from study_assistant.config import get_settings
from study_assistant.dashboard import get_dashboard_stats, get_score_color, get_score_label
from study_assistant.errors import InputError
from study_assistant.flashcards import FlashcardSession
from study_assistant.gemini import GeminiService
from study_assistant.generation import Orchestrator, Outcome
from study_assistant.importer import read_source
from study_assistant.log import setup_logging
from study_assistant.models import CardStatus, StudySet, View
from study_assistant.quiz import QuizSession, get_rank, get_rank_feedback
from study_assistant.state import AppState, QuizHistory

logger = logging.getLogger(__name__)

console = Console()

EXIT_WORDS = ("q", "menu")

MENU = [
    ("home", View.HOME, "Dashboard"),
    ("upload", View.UPLOAD, "Upload & source"),
    ("notes", View.NOTES, "AI notes"),
    ("flashcards", View.FLASHCARDS, "Flashcards"),
    ("quiz", View.QUIZ, "Quiz"),
]
COMMANDS = {cmd: view for cmd, view, _ in MENU}

NOTES_VIEWS = (View.NOTES, View.FLASHCARDS, View.QUIZ)


class SessionExitRequested(Exception):
    """User asked to leave the current view."""


def session_prompt(prompt: str, choices: Optional[list] = None, default: str = "") -> str:
    while True:
        answer = Prompt.ask(prompt, default=default, show_default=bool(default)).strip()
        key = answer.lower()
        if key in EXIT_WORDS:
            raise SessionExitRequested()
        if choices is None:
            return answer
        if key in choices:
            return key
        console.print(f"[red]Please choose one of: {', '.join(choices)} (or q to leave)[/red]")


def session_int_prompt(prompt: str, choices: list) -> int:
    return int(session_prompt(prompt, choices=choices))


def available_views(study_set: StudySet) -> list[View]:
    """Views the user may open. Notes, flashcards and quiz need generated notes."""
    if study_set.has_notes:
        return [view for _, view, _ in MENU]
    return [view for _, view, _ in MENU if view not in NOTES_VIEWS]


def show_welcome():
    console.print(Panel(
        "[bold]AI Study Assistant[/bold]\n[dim]Notes, flashcards and quizzes from your material[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu(state: AppState):
    enabled = available_views(state.study_set)
    console.print("\n[bold]Commands:[/bold]")
    for cmd, view, desc in MENU:
        if view in enabled:
            marker = " ←" if view is state.navigator.current else ""
            console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}{marker}")
        else:
            console.print(f"  [dim]{cmd:<14} {desc} (needs notes)[/dim]")
    console.print(f"  [cyan]{'quit':<14}[/cyan] Exit")


def show_outcome(outcome: Outcome):
    if not outcome.ok:
        console.print(Panel(outcome.message, title="Something went wrong", border_style="red"))
    elif outcome.skipped:
        console.print(f"[yellow]{outcome.message}[/yellow]")
    elif outcome.message:
        console.print(f"[green]{outcome.message}[/green]")


def run_generation(status: str, action) -> Outcome:
    with console.status(status):
        outcome = action()
    show_outcome(outcome)
    return outcome


# Views


def cmd_home(state: AppState, orchestrator: Orchestrator):
    stats = get_dashboard_stats(state.history)
    console.print(Panel(f"[bold]{stats['encouragement']}[/bold]", title="Dashboard", border_style="blue"))

    avg_color = get_score_color(stats["avg_score"]) if stats["total_tests"] else "white"
    console.print(
        f"\n  Quizzes taken: [bold]{stats['total_tests']}[/bold]  |  "
        f"Average score: [bold {avg_color}]{stats['avg_score']}%[/bold {avg_color}]  |  "
        f"Topics mastered (80%+): [bold magenta]{stats['mastery_count']}[/bold magenta]"
    )
    console.print(
        f"  Questions answered: [bold]{stats['total_questions']}[/bold]  |  "
        f"Study streak: [bold]{stats['streak']} days[/bold]\n"
    )

    trend = stats["trend"]
    if len(trend) < 2:
        console.print("[dim]Take at least 2 quizzes to see your trend graph.[/dim]")
    else:
        chart = Table(title="Performance History (last 10 quizzes)", show_header=False, box=None)
        chart.add_column("Topic", style="cyan")
        chart.add_column("Bar")
        chart.add_column("Score", justify="right")
        for point in trend:
            color = get_score_color(point.percentage)
            bar = "█" * (point.percentage // 5) + "░" * (20 - point.percentage // 5)
            chart.add_row(point.label, f"[{color}]{bar}[/{color}]", f"{point.percentage}%")
        console.print(chart)

    if not stats["recent"]:
        console.print("[dim]No quizzes taken yet.[/dim]")
    else:
        table = Table(title="Recent Quizzes")
        table.add_column("Topic", style="cyan")
        table.add_column("Date")
        table.add_column("Correct", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Status")
        for result in stats["recent"]:
            color = get_score_color(result.percentage)
            taken = datetime.fromtimestamp(result.timestamp / 1000).strftime("%Y-%m-%d")
            table.add_row(
                result.topic or "Untitled Quiz",
                taken,
                f"{result.score}/{result.total}",
                f"{result.percentage}%",
                f"[{color}]{get_score_label(result.percentage)}[/{color}]",
            )
        console.print(table)
    console.print(f'\n[italic dim]"{stats["quote"]}"[/italic dim]')


def cmd_upload(state: AppState, orchestrator: Orchestrator):
    console.print("\n[bold]Upload Your Study Material[/bold]")
    console.print("[dim]PDF, PNG, JPG (max 10MB), a .txt/.md file, or paste text. Enter q to leave.[/dim]")
    file_path = session_prompt("File path (blank to paste text)")
    text, upload = "", None
    if file_path:
        try:
            text, upload = read_source(file_path)
        except InputError as e:
            console.print(f"[red]{e}[/red]")
            return
        if upload is not None:
            text = session_prompt("Extra context (optional)")
    else:
        text = session_prompt("Paste your notes or topic")
    run_generation(
        "Analyzing your material...",
        lambda: orchestrator.process_material(state, text, upload),
    )


def cmd_notes(state: AppState, orchestrator: Orchestrator):
    while True:
        study_set = state.study_set
        console.print(Panel(Markdown(study_set.notes_markdown), title=study_set.title, border_style="cyan"))
        choice = session_prompt(
            "regenerate / flashcards / quiz / menu",
            choices=["regenerate", "flashcards", "quiz"],
        )
        if choice != "regenerate":
            state.navigator.set_view(COMMANDS[choice])
            return
        run_generation("Regenerating notes...", lambda: orchestrator.regenerate_notes(state))


def show_card(session: FlashcardSession):
    card = session.current_card
    side, body, style = ("Answer", card.back, "green") if session.is_flipped else ("Question", card.front, "cyan")
    console.print(Panel(
        body,
        title=f"{side} · {session.current_index + 1} / {len(session.cards)}",
        border_style=style,
    ))
    counts = session.counts()
    console.print(
        f"  [green]Known: {counts[CardStatus.KNOWN]}[/green]  "
        f"[dark_orange]Review: {counts[CardStatus.REVIEW]}[/dark_orange]  "
        f"[dim]New: {counts[CardStatus.NEW]}[/dim]"
    )


def finish_transition(session: FlashcardSession):
    if not session.transitioning:
        return
    settings = get_settings()
    time.sleep(settings.transition_out_seconds)
    time.sleep(settings.transition_settle_seconds)
    session.settle()


FLASHCARD_ACTIONS = {
    "f": FlashcardSession.flip,
    "n": FlashcardSession.next,
    "p": FlashcardSession.prev,
    "k": lambda s: s.mark(CardStatus.KNOWN),
    "r": lambda s: s.mark(CardStatus.REVIEW),
    "s": FlashcardSession.shuffle,
}


def run_flashcard_session(session: FlashcardSession) -> None:
    """Browse the deck until the user leaves with q."""
    if not session.cards:
        console.print("[yellow]No flashcards yet![/yellow]")
        return
    while True:
        show_card(session)
        action = session_prompt(
            "[f]lip [n]ext [p]rev [k]now it [r]eview later [s]huffle",
            choices=list(FLASHCARD_ACTIONS),
            default="f",
        )
        FLASHCARD_ACTIONS[action](session)
        finish_transition(session)


def cmd_flashcards(state: AppState, orchestrator: Orchestrator):
    session = FlashcardSession(state.study_set.flashcards)
    if not session.cards:
        console.print("\n[bold]No flashcards yet[/bold]")
        console.print("[dim]Generate flashcards from your notes to start studying efficiently.[/dim]")
        session_prompt("Press Enter to generate flashcards")
        outcome = run_generation(
            "Generating flashcards...", lambda: orchestrator.generate_flashcards(state),
        )
        if not outcome.ok:
            return
        session.sync(state.study_set.flashcards)
    run_flashcard_session(session)


def show_question(session: QuizSession):
    q = session.current_question
    console.print(f"\n[bold]Question {session.current_index + 1} of {session.total}[/bold]")
    console.print(f"{q.question}\n")
    for i, option in enumerate(q.options, 1):
        console.print(f"  [cyan]{i})[/cyan] {option}")


def show_quiz_result(result):
    rank = get_rank(result.percentage)
    console.print(Panel(
        f"[bold]{rank}[/bold]\n\n"
        f"[bold]{result.percentage}%[/bold]  ({result.score} / {result.total} correct)\n\n"
        f"{get_rank_feedback(result.percentage)}",
        title="Quiz Completed!", border_style="yellow",
    ))


def run_quiz_session(session: QuizSession, history: QuizHistory):
    """Play the quiz to the end, recording each finished run in history."""
    if not session.questions:
        console.print("[yellow]No questions available![/yellow]")
        return None
    result = None
    while True:
        while not session.completed:
            show_question(session)
            choices = [str(i) for i in range(1, len(session.current_question.options) + 1)]
            answer = session_int_prompt("\nYour answer", choices=choices)
            session.select_option(answer - 1)
            session.check_answer()
            q = session.current_question
            if session.is_correct:
                console.print("[green]Correct![/green]")
            else:
                console.print(f"[red]Incorrect.[/red] Answer: [green]{q.options[q.correct_answer_index]}[/green]")
            if q.explanation:
                console.print(f"[dim]{q.explanation}[/dim]")
            session_prompt("Finish quiz" if session.is_last else "Next question")
            result = session.next_question()
            if result is not None:
                history.record(result)
        show_quiz_result(session.result)
        if session_prompt("Retry quiz? (y/n)", choices=["y", "n"], default="n") != "y":
            return result
        session.retry()


def cmd_quiz(state: AppState, orchestrator: Orchestrator):
    session = QuizSession(state.study_set.quiz, topic=state.study_set.topic)
    if not session.questions:
        console.print("\n[bold]No quiz generated yet[/bold]")
        session_prompt("Press Enter to generate a quiz")
        outcome = run_generation(
            "Designing a quiz based on your notes...", lambda: orchestrator.generate_quiz(state),
        )
        if not outcome.ok:
            return
        session.sync(state.study_set.quiz, topic=state.study_set.topic)
    run_quiz_session(session, state.history)


VIEW_HANDLERS = {
    View.HOME: cmd_home,
    View.UPLOAD: cmd_upload,
    View.NOTES: cmd_notes,
    View.FLASHCARDS: cmd_flashcards,
    View.QUIZ: cmd_quiz,
}


def show_view(state: AppState, orchestrator: Orchestrator):
    """Render the current view, following any navigation it triggers."""
    while True:
        view = state.navigator.current
        if view not in available_views(state.study_set):
            state.navigator.set_view(View.HOME)
            continue
        try:
            VIEW_HANDLERS[view](state, orchestrator)
        except SessionExitRequested:
            return
        if state.navigator.current is view:
            return


def main():
    settings = get_settings()
    setup_logging(settings.log_level, console=console)
    state = AppState()
    orchestrator = Orchestrator(GeminiService(settings))

    show_welcome()
    if not settings.api_key:
        console.print("[yellow]No Gemini API key found. Set GEMINI_API_KEY before generating.[/yellow]")
    show_view(state, orchestrator)

    while True:
        show_menu(state)
        choice = Prompt.ask("\n[bold]>[/bold]", default="home").strip().lower()
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]Happy studying![/dim]")
                break
            view = COMMANDS.get(choice)
            if view is None:
                console.print("[red]Unknown command. Try again.[/red]")
            elif view not in available_views(state.study_set):
                console.print("[yellow]Upload some material and generate notes first.[/yellow]")
            else:
                state.navigator.set_view(view)
                show_view(state, orchestrator)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Unexpected error in %s", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
