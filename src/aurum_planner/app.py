"""Interactive CLI application."""
import logging
from datetime import date, datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from aurum_planner import api
from aurum_planner.config import DEFAULT_DB_PATH, LOG_LEVEL, get_suggested_subjects
from aurum_planner.dashboard import (
    calc_test_progress, days_until, get_greeting, profile_stats, sessions_on,
    upcoming_tests,
)
from aurum_planner.db import init_db
from aurum_planner.models import User
from aurum_planner.validation import is_suggested_subject

console = Console()


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]Aurum[/bold]\n[dim]Study planner for your next test[/dim]",
        title="Welcome", border_style="yellow",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("login", "Sign in with your email"),
        ("today", "Today's study sessions"),
        ("tests", "Upcoming tests + progress"),
        ("add", "Schedule a new test"),
        ("view", "Show a test's study plan"),
        ("toggle", "Mark a session done / not done"),
        ("delete", "Remove a test"),
        ("profile", "Profile + stats"),
        ("users", "List known accounts"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def show_failure(result: api.ApiResult) -> None:
    console.print(f"[red]Error: {result.error}[/red]")


def load_user(db_path: str, user_id: str) -> User | None:
    result = api.get_user(db_path, user_id)
    if not result.success:
        show_failure(result)
        return None
    return User.from_dict(result.data)


def pick_test(user: User):
    """Ask which test to work on. Returns None if there are none."""
    if not user.tests:
        console.print("[yellow]No tests yet. Use 'add' to schedule one.[/yellow]")
        return None
    tests = sorted(user.tests, key=lambda t: t.date)
    for i, t in enumerate(tests, 1):
        console.print(f"  [cyan]{i}[/cyan]) {t.title} [dim]({t.subject}, {t.date.isoformat()})[/dim]")
    choice = IntPrompt.ask("Select test", choices=[str(i) for i in range(1, len(tests) + 1)])
    return tests[choice - 1]


def cmd_login(db_path: str) -> str | None:
    email = Prompt.ask("Email")
    name = Prompt.ask("Name", default="")
    result = api.create_or_get_user(db_path, email, name)
    if not result.success:
        show_failure(result)
        return None
    user = User.from_dict(result.data)
    console.print(f"[green]{get_greeting(datetime.now().hour)}, {user.name}![/green]")
    return user.id


def cmd_today(db_path: str, user_id: str):
    user = load_user(db_path, user_id)
    if user is None:
        return
    todays = sessions_on(user, date.today())
    if not todays:
        console.print("[dim]No sessions scheduled for today.[/dim]")
        return
    done = sum(1 for _, s in todays if s.is_completed)
    table = Table(title=f"Today's Focus ({done}/{len(todays)} completed)")
    table.add_column("Test", style="cyan")
    table.add_column("Topic")
    table.add_column("Minutes", justify="right")
    table.add_column("Done", justify="center")
    for test, session in todays:
        table.add_row(test.title, session.topic, str(session.duration_minutes),
                      "[green]✓[/green]" if session.is_completed else "")
    console.print(table)


def cmd_tests(db_path: str, user_id: str):
    user = load_user(db_path, user_id)
    if user is None:
        return
    today = date.today()
    tests = upcoming_tests(user, today)
    if not tests:
        console.print("[dim]No upcoming tests. Use 'add' to schedule one.[/dim]")
        return
    table = Table(title="Upcoming Tests")
    table.add_column("Test", style="cyan")
    table.add_column("Subject")
    table.add_column("Date")
    table.add_column("Days left", justify="right")
    table.add_column("Progress", justify="right")
    for t in tests:
        table.add_row(t.title, t.subject, t.date.isoformat(),
                      str(days_until(t, today)), f"{calc_test_progress(t)}%")
    console.print(table)


def cmd_add(db_path: str, user_id: str):
    console.print("\n[bold]Schedule a Test[/bold]")
    console.print("[dim]Suggested subjects: " + ", ".join(get_suggested_subjects()) + "[/dim]")
    subject = Prompt.ask("Subject")
    if subject.strip() and not is_suggested_subject(subject):
        console.print(f"[dim]Using custom subject '{subject.strip()}'.[/dim]")
    title = Prompt.ask("Title", default="")
    test_date = Prompt.ask("Test date (YYYY-MM-DD)")
    difficulty = IntPrompt.ask("Difficulty (1=easy, 5=hard)", choices=["1", "2", "3", "4", "5"])
    result = api.schedule_test(db_path, user_id, subject, test_date, difficulty, title=title)
    if not result.success:
        show_failure(result)
        return
    test = User.from_dict(result.data).tests[-1]
    console.print(
        f"[green]Scheduled {len(test.sessions)} sessions for {test.title}, "
        f"starting {test.sessions[0].date.isoformat() if test.sessions else test.date.isoformat()}.[/green]"
    )


def show_plan(test) -> None:
    table = Table(title=f"{test.title} - {calc_test_progress(test)}% complete")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date")
    table.add_column("Topic", style="cyan")
    table.add_column("Minutes", justify="right")
    table.add_column("Done", justify="center")
    for i, s in enumerate(test.sessions, 1):
        table.add_row(str(i), s.date.isoformat(), s.topic, str(s.duration_minutes),
                      "[green]✓[/green]" if s.is_completed else "")
    console.print(table)


def cmd_view(db_path: str, user_id: str):
    user = load_user(db_path, user_id)
    if user is None:
        return
    test = pick_test(user)
    if test is not None:
        show_plan(test)


def cmd_toggle(db_path: str, user_id: str):
    user = load_user(db_path, user_id)
    if user is None:
        return
    test = pick_test(user)
    if test is None:
        return
    if not test.sessions:
        console.print("[yellow]This test has no study sessions.[/yellow]")
        return
    show_plan(test)
    choice = IntPrompt.ask("Session #", choices=[str(i) for i in range(1, len(test.sessions) + 1)])
    session = test.sessions[choice - 1]
    result = api.toggle_session(db_path, user_id, test.id, session.id)
    if not result.success:
        show_failure(result)
        return
    state = "not done" if session.is_completed else "done"
    console.print(f"[green]Marked '{session.topic}' as {state}.[/green]")


def cmd_delete(db_path: str, user_id: str):
    user = load_user(db_path, user_id)
    if user is None:
        return
    test = pick_test(user)
    if test is None:
        return
    if not Confirm.ask(f"Delete {test.title} and its {len(test.sessions)} sessions?", default=False):
        return
    result = api.delete_test(db_path, user_id, test.id)
    if not result.success:
        show_failure(result)
        return
    console.print(f"[green]Deleted {test.title}.[/green]")


def cmd_profile(db_path: str, user_id: str):
    user = load_user(db_path, user_id)
    if user is None:
        return
    stats = profile_stats(user)
    console.print(Panel(
        f"[bold]{user.name}[/bold]\n[dim]{user.email}[/dim]\n\n"
        f"Tests: {stats['total_tests']}\n"
        f"Sessions: {stats['completed_sessions']}/{stats['total_sessions']}\n"
        f"Completion: {stats['completion_rate']}%",
        title="Profile", border_style="yellow",
    ))
    new_name = Prompt.ask("New display name (blank to keep)", default="")
    if new_name.strip():
        result = api.update_profile(db_path, user_id, {"name": new_name.strip()})
        if not result.success:
            show_failure(result)
            return
        console.print("[green]Profile updated.[/green]")


def cmd_users(db_path: str):
    result = api.list_users(db_path)
    if not result.success:
        show_failure(result)
        return
    for user_id in result.data:
        console.print(f"  {user_id}")


USER_COMMANDS = {
    "today": cmd_today,
    "tests": cmd_tests,
    "add": cmd_add,
    "view": cmd_view,
    "toggle": cmd_toggle,
    "delete": cmd_delete,
    "profile": cmd_profile,
}


def main():
    setup_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    show_welcome()

    user_id = None
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today" if user_id else "login").strip().lower()
        try:
            if choice == "login":
                user_id = cmd_login(db_path) or user_id
            elif choice in USER_COMMANDS:
                if not user_id:
                    console.print("[yellow]Sign in first with 'login'.[/yellow]")
                    continue
                USER_COMMANDS[choice](db_path, user_id)
            elif choice == "users":
                cmd_users(db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your test![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")


if __name__ == "__main__":
    main()
