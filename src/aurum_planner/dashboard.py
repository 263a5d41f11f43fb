"""Progress summaries computed from a user's tests."""
from datetime import date

from aurum_planner.models import StudySession, Test, User


def calc_test_progress(test: Test) -> int:
    """Percent of a test's sessions completed, rounded. 0 for an empty plan."""
    if not test.sessions:
        return 0
    done = sum(1 for s in test.sessions if s.is_completed)
    return round(done / len(test.sessions) * 100)


def sessions_on(user: User, day: date) -> list[tuple[Test, StudySession]]:
    results = []
    for test in sorted(user.tests, key=lambda t: t.date):
        for session in test.sessions:
            if session.date == day:
                results.append((test, session))
    return results


def upcoming_tests(user: User, today: date) -> list[Test]:
    return sorted((t for t in user.tests if t.date >= today), key=lambda t: t.date)


def days_until(test: Test, today: date) -> int:
    return (test.date - today).days


def profile_stats(user: User) -> dict:
    total_sessions = sum(len(t.sessions) for t in user.tests)
    completed = sum(1 for t in user.tests for s in t.sessions if s.is_completed)
    rate = round(completed / total_sessions * 100) if total_sessions else 0
    return {
        "total_tests": len(user.tests),
        "total_sessions": total_sessions,
        "completed_sessions": completed,
        "completion_rate": rate,
    }


def get_greeting(hour: int) -> str:
    if hour < 12:
        return "Good Morning"
    if hour < 18:
        return "Good Afternoon"
    return "Good Evening"
