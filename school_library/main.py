import logging
import sys
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from .config import settings
from .errors import CirculationError, NotFoundError
from .library import Library
from .seed import build_demo_library
from .ui_helpers import (
    print_available,
    print_book_report,
    print_books,
    print_checklist,
    print_loan_created,
    print_loan_lines,
    print_return_quote,
    print_return_receipt,
    print_stats_result,
    print_student_report,
    print_students,
    set_output_mode,
)

console = Console()
logger = logging.getLogger(__name__)

_logging_configured = False


def configure_logging() -> None:
    """Set up root logging once per process from the current settings."""
    global _logging_configured
    if _logging_configured:
        return
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    kwargs = {"level": level, "format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}
    if settings.log_file:
        kwargs["filename"] = settings.log_file
    logging.basicConfig(**kwargs)
    _logging_configured = True


class LibraryManager:
    """Holds the one Library this console session works against."""

    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        if cls._instance is None:
            if settings.load_seed_data:
                cls._instance = build_demo_library(currency=settings.currency_symbol)
            else:
                cls._instance = Library(currency=settings.currency_symbol)
            problems = cls._instance.audit()
            for problem in problems:
                logger.warning(problem)
        return cls._instance

    @classmethod
    def set_instance(cls, library: Optional[Library]) -> None:
        cls._instance = library

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


# --- Typer CLI application ---
app = typer.Typer(help="School library circulation CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    if output:
        set_output_mode(output)


@app.command("students")
def cli_students():
    """List every registered student."""
    print_students(LibraryManager.get_instance().list_students())


@app.command("books")
def cli_books():
    """List the whole catalog."""
    print_books(LibraryManager.get_instance().list_books())


@app.command("available")
def cli_available():
    """List books that can be borrowed right now."""
    print_available(LibraryManager.get_instance().list_available())


@app.command("history")
def cli_history():
    """Show every loan ever registered."""
    print_loan_lines(LibraryManager.get_instance().loan_history())


@app.command("overdue")
def cli_overdue():
    """Show outstanding loans that are past their due date."""
    print_loan_lines(LibraryManager.get_instance().overdue_loans(), empty_message="No overdue loans.")


@app.command("stats")
def cli_stats():
    """Show library statistics."""
    print_stats_result(LibraryManager.get_instance().get_statistics())


@app.command("student")
def cli_student(student_id: int = typer.Argument(..., help="Student ID")):
    """Show a student's account, limits, fines and active loans."""
    lib = LibraryManager.get_instance()
    try:
        print_student_report(lib.student_report(student_id))
    except NotFoundError as e:
        print(f"Error: {e}")


@app.command("book")
def cli_book(code: str = typer.Argument(..., help="Book code")):
    """Show a book's status and, when out, who has it."""
    lib = LibraryManager.get_instance()
    try:
        print_book_report(lib.book_report(code))
    except NotFoundError as e:
        print(f"Error: {e}")


@app.command("borrow")
def cli_borrow(
    student_id: int = typer.Argument(..., help="Student ID"),
    code: str = typer.Argument(..., help="Book code"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Lend a book to a student after running the eligibility checklist."""
    lib = LibraryManager.get_instance()
    try:
        decision = lib.circulation.check_loan(student_id, code)
    except NotFoundError as e:
        print(f"Error: {e}")
        return

    print_checklist(decision)
    if not decision.approved:
        print("Loan cancelled. The student or book does not meet the conditions.")
        return

    if not yes and not typer.confirm("Confirm loan?", default=False):
        print("Loan cancelled by user.")
        return

    try:
        loan = lib.circulation.commit_loan(decision)
    except CirculationError as e:
        print(f"Error: {e}")
        return
    print_loan_created(loan, decision.student, decision.book, decision.limit)


@app.command("return")
def cli_return(
    loan_id: int = typer.Argument(..., help="Loan ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Take a book back, charging any overdue fine."""
    lib = LibraryManager.get_instance()
    try:
        quote = lib.circulation.preview_return(loan_id)
    except NotFoundError as e:
        print(f"Error: {e}")
        return

    print_return_quote(quote)
    if not yes and not typer.confirm("Confirm return?", default=False):
        print("Return cancelled by user.")
        return

    try:
        receipt = lib.circulation.commit_return(quote)
    except CirculationError as e:
        print(f"Error: {e}")
        return
    print_return_receipt(receipt)


@app.command("audit")
def cli_audit():
    """Check that loan counts and availability agree with the loan records."""
    problems = LibraryManager.get_instance().audit()
    if not problems:
        print("No inconsistencies found.")
        return
    for problem in problems:
        print(f"- {problem}")


@app.command("menu")
def cli_menu():
    """Start the interactive menu."""
    run_menu()


# --- Interactive menu ---
def _pause() -> None:
    Prompt.ask("\nPress ENTER to continue", default="", show_default=False)


def _ask_int(label: str) -> int:
    return IntPrompt.ask(f"➤ {label} (0 to cancel)")


def student_status() -> None:
    lib = LibraryManager.get_instance()
    student_id = _ask_int("Student ID")
    if student_id == 0:
        return
    try:
        print_student_report(lib.student_report(student_id))
    except NotFoundError as e:
        console.print(f"[bold red]Error:[/] {e}")


def book_status() -> None:
    lib = LibraryManager.get_instance()
    code = Prompt.ask("➤ Book code (0 to cancel)").strip()
    if code == "0":
        return
    try:
        print_book_report(lib.book_report(code))
    except NotFoundError as e:
        console.print(f"[bold red]Error:[/] {e}")


def borrow() -> None:
    """Walk the librarian through a loan: student, book, checklist, confirmation."""
    lib = LibraryManager.get_instance()

    console.print("[bold]Registered students:[/]")
    for s in lib.list_students():
        console.print(f"ID {s.student_id}: {s.name} - grade {s.grade} - {s.status}")
    student_id = _ask_int("Student ID")
    if student_id == 0:
        return
    student = lib.find_student(student_id)
    if student is None:
        console.print("[bold red]Error:[/] Student not found.")
        return
    console.print(f"Student found: [bold]{student.name}[/]")

    available = lib.list_available()
    if not available:
        console.print("[yellow]No books available for loan.[/]")
        return
    console.print("\n[bold]Available books:[/]")
    for b in available:
        console.print(f"{b.code}: {b.title} [{b.category}]", markup=False)
    code = Prompt.ask("➤ Book code (0 to cancel)").strip()
    if code == "0":
        return

    try:
        decision = lib.circulation.check_loan(student_id, code)
    except NotFoundError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return

    print_checklist(decision)
    if not decision.approved:
        console.print("\n[red]Loan cancelled. The student or book does not meet the conditions.[/]")
        return
    if not Confirm.ask("Confirm loan?", default=False):
        console.print("[blue]Loan cancelled by user.[/]")
        return
    loan = lib.circulation.commit_loan(decision)
    print()
    print_loan_created(loan, decision.student, decision.book, decision.limit)


def give_back() -> None:
    lib = LibraryManager.get_instance()
    lines = lib.outstanding_lines()
    if not lines:
        console.print("[yellow]No outstanding loans to return.[/]")
        return
    print_loan_lines(lines)
    loan_id = _ask_int("Loan ID to return")
    if loan_id == 0:
        return
    try:
        quote = lib.circulation.preview_return(loan_id)
    except NotFoundError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return
    print_return_quote(quote)
    if not Confirm.ask("Confirm return?", default=False):
        console.print("[blue]Return cancelled by user.[/]")
        return
    print_return_receipt(lib.circulation.commit_return(quote))


def run_menu():
    """Simple interactive menu for the library console."""
    configure_logging()
    lib = LibraryManager.get_instance()
    actions = {
        "1": lambda: print_students(lib.list_students()),
        "2": lambda: print_books(lib.list_books()),
        "3": lambda: print_available(lib.list_available()),
        "4": student_status,
        "5": book_status,
        "6": borrow,
        "7": give_back,
        "8": lambda: print_loan_lines(lib.loan_history()),
    }

    def render_menu() -> None:
        menu_items = [
            ("1", "List students", "🎓"),
            ("2", "Book catalog", "📚"),
            ("3", "Available books", "📗"),
            ("4", "Student status", "🔎"),
            ("5", "Book status", "📖"),
            ("6", "Lend a book", "➕"),
            ("7", "Return a book", "↩️"),
            ("8", "Loan history", "🗂️"),
            ("0", "Exit", "🚪"),
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        console.print(Panel(
            table,
            title=f"{settings.app_name} v{settings.app_version}",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        ))

    while True:
        console.clear()
        render_menu()
        choice = Prompt.ask("Choose an option", choices=list(actions) + ["0"], default="1").strip()
        if choice == "0":
            console.print("[green]Thanks for using the library system. Goodbye![/]")
            break
        actions[choice]()
        _pause()


def run() -> None:
    configure_logging()
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()


if __name__ == "__main__":
    run()
