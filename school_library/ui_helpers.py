import json
import os
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()


def money(amount: Decimal) -> str:
    return f"{settings.currency_symbol}{amount:.2f}"


def fmt_date(value: datetime) -> str:
    if value is None:
        return "N/A"
    return value.strftime(settings.date_format)


def _dump(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, default=str))


def print_students(students: List[Any]) -> None:
    mode = get_output_mode()
    if not students:
        print("No students registered.")
        return

    if mode == "json":
        _dump([s.to_dict() for s in students])
    elif mode == "rich":
        table = Table(title="🎓 Students", show_lines=True, header_style="bold cyan")
        for col in ("ID", "Name", "Grade", "Books", "Fines", "Status"):
            table.add_column(col)
        for s in students:
            status = "[green]Active[/]" if s.active else "[red]Inactive[/]"
            table.add_row(str(s.student_id), escape(s.name), f"{s.grade}°", str(s.loan_count), money(s.fine_balance), status)
        _console.print(table)
    else:
        for s in students:
            print(f"{s.student_id} | {s.name} | {s.grade}° | {s.loan_count} | {money(s.fine_balance)} | {s.status}")


def print_books(books: List[Any], title: str = "📚 Catalog") -> None:
    mode = get_output_mode()
    if not books:
        print("No books in library.")
        return

    if mode == "json":
        _dump([b.to_dict() for b in books])
    elif mode == "rich":
        table = Table(title=title, show_lines=True, header_style="bold cyan")
        table.add_column("Code", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Category", style="white")
        table.add_column("Status")
        for b in books:
            status = "[green]Available[/]" if b.available else "[yellow]On loan[/]"
            table.add_row(escape(b.code), escape(b.title), escape(b.category), status)
        _console.print(table)
    else:
        for b in books:
            print(f"{b.code} | {b.title} | {b.category} | {b.status}")


def print_available(books: List[Any]) -> None:
    if not books:
        print("No books available right now.")
        return
    if get_output_mode() != "plain":
        print_books(books, title="📗 Available books")
        return
    for b in books:
        print(f"{b.code}: {b.title} (Category: {b.category})")
    print(f"Total available books: {len(books)}")


def print_loan_lines(lines: List[Any], empty_message: str = "No loans registered.") -> None:
    mode = get_output_mode()
    if not lines:
        print(empty_message)
        return

    if mode == "json":
        _dump([dict(l.loan.to_dict(), student_name=l.student_name, book_title=l.book_title) for l in lines])
    elif mode == "rich":
        table = Table(title="🗂️ Loans", show_lines=True, header_style="bold cyan")
        for col in ("ID", "Student", "Book", "Loaned", "Due", "Returned", "Status"):
            table.add_column(col)
        for l in lines:
            loan = l.loan
            table.add_row(
                f"#{loan.loan_id}",
                escape(f"{l.student_name} ({loan.student_id})"),
                escape(f"{l.book_title} ({loan.book_code})"),
                fmt_date(loan.loaned_at),
                fmt_date(loan.due_at),
                fmt_date(loan.returned_at),
                l.status,
            )
        _console.print(table)
    else:
        print(f"Total loans: {len(lines)}")
        for l in lines:
            loan = l.loan
            print(f"Loan #{loan.loan_id}")
            print(f"  Student: {l.student_name} (ID: {loan.student_id})")
            print(f"  Book: {l.book_title} ({loan.book_code})")
            print(f"  Loaned: {fmt_date(loan.loaned_at)} | Due: {fmt_date(loan.due_at)}")
            if loan.returned:
                print(f"  Returned: {fmt_date(loan.returned_at)}")
            print(f"  Status: {l.status}")


def print_checklist(decision: Any) -> None:
    """Show every eligibility condition, passing or failing, in order."""
    if get_output_mode() == "json":
        _dump({
            "student_id": decision.student.student_id,
            "book_code": decision.book.code,
            "approved": decision.approved,
            "checks": [{"check": c.reason.value, "passed": c.passed, "detail": c.detail}
                       for c in decision.eligibility.checks],
        })
        return
    print("Validating loan...")
    for check in decision.eligibility.checks:
        mark = "✓" if check.passed else "✗"
        print(f"{mark} {check.detail}")


def print_loan_created(loan: Any, student: Any, book: Any, limit: int) -> None:
    if get_output_mode() == "json":
        _dump(loan.to_dict())
        return
    print("Loan registered successfully")
    print(f"Loan ID: #{loan.loan_id}")
    print(f"Student: {student.name}")
    print(f"Book: {book.title}")
    print(f"Loan date: {fmt_date(loan.loaned_at)}")
    print(f"Due date: {fmt_date(loan.due_at)}")
    print(f"Student's current books: {student.loan_count}/{limit}")


def print_return_quote(quote: Any) -> None:
    if get_output_mode() == "json":
        return
    print(f"Student: {quote.student.name}")
    print(f"Book: {quote.book.title}")
    print(f"Due date: {fmt_date(quote.loan.due_at)}")
    print(f"Return date (today): {fmt_date(quote.returned_at)}")
    if quote.days_late > 0:
        print(f"Days late: {quote.days_late}")
        print(f"Fine to charge: {money(quote.fine)}")
    else:
        print("Returned on time.")


def print_return_receipt(receipt: Any) -> None:
    if get_output_mode() == "json":
        _dump({
            "loan": receipt.loan.to_dict(),
            "days_late": receipt.days_late,
            "fine_charged": str(receipt.fine_charged),
            "fine_balance": str(receipt.student.fine_balance),
        })
        return
    if receipt.fine_charged > 0:
        print("Return processed with a fine")
        print(f"Fine of {money(receipt.fine_charged)} charged to the student.")
        print(f"Student's fine balance: {money(receipt.student.fine_balance)}")
    else:
        print("Return processed on time. No fine charged.")


def print_student_report(report: Any) -> None:
    s = report.student
    if get_output_mode() == "json":
        _dump({
            "student": s.to_dict(),
            "limit": report.limit,
            "capacity": report.capacity,
            "can_borrow": report.can_borrow,
            "blocking_reason": report.blocking_reason.value if report.blocking_reason else None,
            "active_loans": [l.loan.to_dict() for l in report.active_loans],
        })
        return

    reasons = {
        "inactive": "Inactive account",
        "fines": "Has outstanding fines",
        "limit": "Has reached the book limit",
    }
    if report.can_borrow:
        verdict = "CAN request a loan."
    else:
        verdict = f"CANNOT request a loan. Reason: {reasons[report.blocking_reason.value]}."

    lines = [
        f"ID: {s.student_id}",
        f"Name: {s.name}",
        f"Grade: {s.grade}°",
        f"Account: {s.status}",
        "",
        f"Book limit for grade: {report.limit}",
        f"Books on loan: {s.loan_count} of {report.limit}",
        f"Capacity left: {report.capacity} book(s)",
        "",
        f"Fines: {money(s.fine_balance)}",
        f"Fine status: {report.fine_status}",
        "",
        f"Loan request: {verdict}",
        "",
        "Active loans:",
    ]
    if not report.active_loans:
        lines.append("No active loans.")
    for l in report.active_loans:
        lines.append(f"- #{l.loan.loan_id}: {l.book_title}")
        lines.append(f"  Loaned: {fmt_date(l.loan.loaned_at)} | Due: {fmt_date(l.loan.due_at)}")

    if get_output_mode() == "rich":
        _console.print(Panel(escape("\n".join(lines)), title="🎓 Student status", border_style="cyan"))
    else:
        print("\n".join(lines))


def print_book_report(report: Any) -> None:
    b = report.book
    if get_output_mode() == "json":
        _dump({
            "book": b.to_dict(),
            "loan": report.current_loan.to_dict() if report.current_loan else None,
            "borrower": report.borrower.to_dict() if report.borrower else None,
        })
        return
    lines = [
        f"Code: {b.code}",
        f"Title: {b.title}",
        f"Category: {b.category}",
        f"Status: {b.status.upper()}",
    ]
    if report.current_loan and report.borrower:
        lines.append(f"On loan to: {report.borrower.name} (ID: {report.borrower.student_id})")
        lines.append(f"Due date: {fmt_date(report.current_loan.due_at)}")
    if get_output_mode() == "rich":
        _console.print(Panel(escape("\n".join(lines)), title="📖 Book status", border_style="cyan"))
    else:
        print("\n".join(lines))


def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()
    if not stats:
        print("No statistics available.")
        return

    if mode == "json":
        _dump(stats)
    elif mode == "rich":
        content = (
            f"[bold]Students:[/] {stats['total_students']}\n"
            f"[bold]Books:[/] {stats['total_books']} ({stats['available_books']} available)\n"
            f"[bold]Loans:[/] {stats['total_loans']} ({stats['outstanding_loans']} outstanding)\n"
            f"[bold]Fines owed:[/] {money(stats['total_fines'])}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Students: {stats['total_students']}")
        print(f"Books: {stats['total_books']} ({stats['available_books']} available)")
        print(f"Loans: {stats['total_loans']} ({stats['outstanding_loans']} outstanding)")
        print(f"Fines owed: {money(stats['total_fines'])}")
