"""Study schedule generation for an upcoming test."""
import uuid
from datetime import date, datetime, timedelta

from aurum_planner.models import StudySession, Test

# Difficulty level -> weeks of preparation before the test.
DIFFICULTY_WEEKS = {
    1: 1,
    2: 2,
    3: 3,
    4: 4,
    5: 5,
}

STUDY_TOPICS = {
    "default": [
        "Review core concepts",
        "Practice problem set",
        "Summarize key notes",
        "Flashcard review",
        "Mock quiz",
        "Deep dive into weak areas",
        "Final review",
    ],
}


def new_id() -> str:
    return str(uuid.uuid4())


def session_duration(difficulty: int) -> int:
    """Minutes per session. Harder tests get longer sessions."""
    return 45 + 5 * difficulty


def prep_start(test_date: date, difficulty: int) -> date:
    return test_date - timedelta(weeks=DIFFICULTY_WEEKS.get(difficulty, 0))


def generate_schedule(subject: str, test_date: date, difficulty: int) -> list[StudySession]:
    """Build one study session per day from the prep start up to the test day.

    The test day itself is excluded. Sessions come back in ascending date
    order, so the first entry is always the earliest session. Difficulty is
    validated by callers; a level with no prep weeks gives an empty schedule.
    """
    start = prep_start(test_date, difficulty)
    total_days = (test_date - start).days
    topics = STUDY_TOPICS.get(subject) or STUDY_TOPICS["default"]
    sessions = []
    for i in range(total_days):
        sessions.append(StudySession(
            id=new_id(),
            date=start + timedelta(days=i),
            topic=f"Day {i + 1}: {topics[i % len(topics)]}",
            duration_minutes=session_duration(difficulty),
            is_completed=False,
        ))
    return sessions


def build_test(subject: str, test_date: date, difficulty: int, title: str = "") -> Test:
    """Create a new test with its full study schedule attached."""
    return Test(
        id=new_id(),
        subject=subject,
        title=title.strip() or subject,
        date=test_date,
        difficulty=difficulty,
        sessions=tuple(generate_schedule(subject, test_date, difficulty)),
        created_at=datetime.now(),
    )
