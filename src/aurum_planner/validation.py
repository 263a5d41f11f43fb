"""Boundary checks applied before anything reaches the store."""
import re
from datetime import date, datetime

from aurum_planner.config import get_suggested_subjects
from aurum_planner.errors import ValidationError
from aurum_planner.models import Test
from aurum_planner.schedule import DIFFICULTY_WEEKS, prep_start


def user_id_for_email(email: str) -> str:
    """Deterministic user id: lower-cased email with non-alphanumerics as dashes."""
    return re.sub(r"[^a-z0-9]", "-", email.strip().lower())


def validate_email(email) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required")
    email = email.strip()
    if "@" not in email:
        raise ValidationError(f"Not an email address: {email}")
    return email


def validate_subject(subject) -> str:
    if not isinstance(subject, str) or not subject.strip():
        raise ValidationError("Subject is required")
    return subject.strip()


def is_suggested_subject(subject: str) -> bool:
    return subject.strip().lower() in {s.lower() for s in get_suggested_subjects()}


def validate_difficulty(value) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Difficulty must be an integer, got {value!r}")
    if value not in DIFFICULTY_WEEKS:
        raise ValidationError(f"Difficulty must be between 1 and 5, got {value}")
    return value


def parse_test_date(value) -> date:
    """Accept a date, a datetime, or an ISO-8601 date/timestamp string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Test date is required")
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as e:
        raise ValidationError(f"Invalid test date: {value}") from e


def validate_title(title) -> str:
    if title is None:
        return ""
    if not isinstance(title, str):
        raise ValidationError(f"Title must be text, got {type(title).__name__}")
    return title.strip()


def validate_test_payload(payload) -> Test:
    """Check a wire-format test record and build a Test from it."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid test data")
    if not payload.get("id") or not payload.get("subject") or not payload.get("date"):
        raise ValidationError("Invalid test data: id, subject and date are required")
    if not isinstance(payload["id"], str):
        raise ValidationError("Invalid test data: id must be text")
    data = dict(payload)
    data["subject"] = validate_subject(payload["subject"])
    data["title"] = validate_title(payload.get("title"))
    data["date"] = parse_test_date(payload["date"])
    data["difficulty"] = validate_difficulty(payload.get("difficulty"))
    try:
        test = Test.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid test data: {e}") from e
    validate_sessions(test)
    return test


def validate_sessions(test: Test) -> None:
    """Sessions must have distinct ids, be strictly increasing and fall inside the prep window."""
    window_start = prep_start(test.date, test.difficulty)
    previous = None
    seen = set()
    for session in test.sessions:
        if session.id in seen:
            raise ValidationError(f"Duplicate session id {session.id}")
        seen.add(session.id)
        if not window_start <= session.date < test.date:
            raise ValidationError(f"Session {session.id} is outside the prep window")
        if previous is not None and session.date <= previous:
            raise ValidationError("Sessions must be in ascending date order")
        if session.duration_minutes <= 0:
            raise ValidationError(f"Session {session.id} has no duration")
        previous = session.date


def validate_display_name(name) -> str:
    """Optional display name. None means not given."""
    if name is None:
        return ""
    if not isinstance(name, str):
        raise ValidationError(f"Name must be text, got {type(name).__name__}")
    return name.strip()


def validate_profile_updates(updates) -> dict:
    """Keep only the editable profile fields, checking their types."""
    if not isinstance(updates, dict):
        raise ValidationError("Profile updates must be a mapping of field to value")
    allowed = {}
    if "name" in updates and updates["name"] is not None:
        allowed["name"] = validate_display_name(updates["name"])
    if "avatar_url" in updates:
        avatar_url = updates["avatar_url"]
        if avatar_url is not None and not isinstance(avatar_url, str):
            raise ValidationError(f"Avatar URL must be text, got {type(avatar_url).__name__}")
        allowed["avatar_url"] = avatar_url
    return allowed


