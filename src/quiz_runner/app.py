"""Interactive CLI application."""
import logging
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from quiz_runner.config import QuizConfig
from quiz_runner.errors import QuizError, NoAnswerSelectedError, InvalidQuestionStateError
from quiz_runner.evaluator import evaluate
from quiz_runner.importer import load_question_file, list_question_files
from quiz_runner.models import QuizComplete, Blocked, SINGLE_CHOICE, MULTIPLE_CHOICE, FREE_TEXT
from quiz_runner.navigation import advance, go_back, schedule_auto_advance, run_due_auto_advance
from quiz_runner.recorder import record_choice, toggle_choice, record_text
from quiz_runner.scorer import score
from quiz_runner.session import (
    Session, start, restart_all, restart_filtered, get_or_create_shuffle_map,
    set_shuffle_options_enabled,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a quiz from any prompt."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def show_welcome():
    console.print(Panel(
        "[bold]Quiz Runner[/bold]\n[dim]Practice any question set from the terminal[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu(config: QuizConfig):
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("open", "Start a quiz from a question-set file"),
        ("shuffle", f"Shuffle answer options ({'on' if config.shuffle_options else 'off'})"),
        ("order", f"Shuffle question order ({'on' if config.shuffle_questions else 'off'})"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def render_question(session: Session) -> None:
    position = session.current_index
    question = session.active_questions[position]
    shuffle_map = get_or_create_shuffle_map(session, position)
    title = f"Question {position + 1}/{session.total} ({session.progress_percent:.0f}%)"
    if session.shuffle_options_enabled:
        title += " [dim]shuffled[/dim]"
    # Single line breaks in prompts are paragraph breaks.
    console.print(Panel(Markdown(question.prompt.replace("\n", "\n\n")), title=title, border_style="cyan"))
    if question.image:
        console.print(f"[dim]Image: {question.image}[/dim]")

    if question.kind == FREE_TEXT:
        answer = session.answers.get(position)
        if answer:
            console.print(f"  Your answer: [bold]{answer}[/bold]")
        return
    if not shuffle_map.shuffled_options:
        console.print("[dim]This question has no options.[/dim]")
        return
    selected = session.answers.get(position)
    if selected is None:
        selected = set()
    elif not isinstance(selected, (set, frozenset)):
        selected = {selected}
    for i, option in enumerate(shuffle_map.shuffled_options):
        marker = "[bold green]*[/bold green]" if i in selected else " "
        console.print(f" {marker}[cyan]{i + 1})[/cyan] {option}")


def render_feedback(result) -> None:
    if not result.scorable:
        console.print("[green]Recorded[/green] [dim](this question is not graded automatically)[/dim]")
    elif result.correct:
        console.print("[green]Correct![/green]")
    else:
        console.print(f"[red]Incorrect.[/red] Answer: [green]{result.correct_display}[/green]")


def _option_number(raw: str, session: Session) -> int | None:
    if not raw.strip().isdigit():
        return None
    shuffle_map = get_or_create_shuffle_map(session, session.current_index)
    index = int(raw.strip()) - 1
    if 0 <= index < len(shuffle_map.shuffled_options):
        return index
    return None


def _auto_advance(session: Session, config: QuizConfig):
    schedule_auto_advance(session, config.auto_advance_delay)
    time.sleep(config.auto_advance_delay)
    return run_due_auto_advance(session)


def handle_input(session: Session, raw: str, config: QuizConfig):
    """Apply one line of user input to the current question.

    Returns the AdvanceOutcome when the cursor moved, otherwise None.
    """
    command = raw.strip().lower()
    position = session.current_index
    question = session.active_questions[position]

    # On an open free-text question "b" and "s" are answers; only the slash forms are commands.
    free_text_open = question.kind == FREE_TEXT and not session.is_evaluated(position)
    back_commands = ("/b",) if free_text_open else ("b", "/b")
    shuffle_commands = ("/s",) if free_text_open else ("s", "/s")

    if command in back_commands:
        go_back(session)
        return None
    if command in shuffle_commands:
        set_shuffle_options_enabled(session, not session.shuffle_options_enabled)
        config.shuffle_options = session.shuffle_options_enabled
        return None

    if session.is_evaluated(position):
        if command:
            console.print("[yellow]This question is already answered.[/yellow]")
            return None
        return advance(session)

    if command == "":
        if question.kind == FREE_TEXT:
            render_feedback(evaluate(session, position))
            return None
        if question.kind == MULTIPLE_CHOICE:
            try:
                result = evaluate(session, position)
            except NoAnswerSelectedError:
                console.print("[yellow]Select at least one option first.[/yellow]")
                return None
            render_feedback(result)
            return _auto_advance(session, config)
        outcome = advance(session)
        if isinstance(outcome, Blocked):
            console.print(f"[yellow]{outcome.reason}[/yellow]")
        return outcome

    if question.kind == FREE_TEXT:
        record_text(session, position, raw)
        render_feedback(evaluate(session, position))
        return None

    option = _option_number(raw, session)
    if option is None:
        console.print("[red]Enter an option number.[/red]")
        return None
    if question.kind == SINGLE_CHOICE:
        render_feedback(record_choice(session, position, option))
        return _auto_advance(session, config)
    toggle_choice(session, position, option)
    return None


def _prompt_text(session: Session) -> str:
    question = session.current_question
    if session.is_evaluated(session.current_index):
        return "[dim]Enter = next, b = back, q = quit[/dim]"
    if question.kind == FREE_TEXT:
        return "Your answer [dim](Enter = submit, /b = back, /s = shuffle, q = quit)[/dim]"
    if question.kind == MULTIPLE_CHOICE:
        return "Toggle an option [dim](Enter = submit, b = back, s = shuffle, q = quit)[/dim]"
    return "Your answer [dim](Enter = skip, b = back, s = shuffle, q = quit)[/dim]"


def run_quiz_session(session: Session, config: QuizConfig):
    """Drive session until the last question is done. Returns the ScoreReport."""
    console.print(f"\n[bold]Quiz[/bold] — {session.total} questions\n")
    while not session.is_complete:
        render_question(session)
        if session.is_evaluated(session.current_index):
            render_feedback(evaluate(session, session.current_index))
        raw = session_prompt(_prompt_text(session), default="", show_default=False)
        try:
            outcome = handle_input(session, raw, config)
        except InvalidQuestionStateError as e:
            console.print(f"[red]{e}[/red]")
            continue
        if isinstance(outcome, QuizComplete):
            break
        console.print()
    return score(session)


def show_results(report) -> None:
    table = Table(title="Results")
    table.add_column("Correct", justify="right", style="green")
    table.add_column("Incorrect", justify="right", style="red")
    table.add_column("Accuracy", justify="right")
    table.add_row(str(report.correct_count), str(report.incorrect_count), f"{report.accuracy_percent}%")
    console.print(table)


def run_quiz(session: Session, config: QuizConfig) -> None:
    """Run quizzes until the user returns to the menu, offering retries."""
    while True:
        report = run_quiz_session(session, config)
        show_results(report)
        choices = ["all", "menu"]
        if report.missed_positions:
            choices.insert(0, "missed")
        choice = Prompt.ask("Retry", choices=choices, default="menu")
        if choice == "missed":
            session = restart_filtered(session, report.missed_positions, config.shuffle_questions)
        elif choice == "all":
            session = restart_all(session, config.shuffle_questions)
        else:
            return


def choose_question_file(config: QuizConfig) -> str | None:
    files = list_question_files(config.question_dir)
    for i, path in enumerate(files, 1):
        console.print(f"  [cyan]{i}[/cyan]) {path.name}")
    if files:
        raw = Prompt.ask("Select a file number or enter a path")
    else:
        console.print(f"[dim]No question sets found in {config.question_dir}[/dim]")
        raw = Prompt.ask("File path")
    raw = raw.strip()
    if raw.isdigit() and 1 <= int(raw) <= len(files):
        return str(files[int(raw) - 1])
    if not Path(raw).exists():
        console.print(f"[red]File not found: {raw}[/red]")
        return None
    return raw


def cmd_open(config: QuizConfig):
    file_path = choose_question_file(config)
    if file_path is None:
        return
    questions = load_question_file(file_path)
    session = start(
        questions,
        shuffle_questions=config.shuffle_questions,
        shuffle_options=config.shuffle_options,
    )
    try:
        run_quiz(session, config)
    except SessionExitRequested:
        console.print("[dim]Quiz abandoned.[/dim]")


def main():
    config = QuizConfig.from_env()
    setup_logging(config.log_level)
    show_welcome()

    while True:
        show_menu(config)
        choice = Prompt.ask("\n[bold]>[/bold]", default="open").strip().lower()
        try:
            if choice == "open":
                cmd_open(config)
            elif choice == "shuffle":
                config.shuffle_options = not config.shuffle_options
            elif choice == "order":
                config.shuffle_questions = not config.shuffle_questions
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Goodbye![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except QuizError as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
