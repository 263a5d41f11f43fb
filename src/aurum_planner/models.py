"""Data classes for the planner domain model.

Instances are immutable snapshots. Updates build a new top-level value with
``dataclasses.replace`` and share every untouched test and session.
"""
import json
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional


def _parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Older records stored full ISO timestamps for calendar dates.
    return date.fromisoformat(str(value)[:10])


def _parse_datetime(value) -> datetime:
    if value is None:
        return datetime.now()
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000)
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class StudySession:
    id: str
    date: date
    topic: str
    duration_minutes: int
    is_completed: bool = False

    def toggled(self) -> "StudySession":
        return replace(self, is_completed=not self.is_completed)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "topic": self.topic,
            "is_completed": self.is_completed,
            "duration_minutes": self.duration_minutes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StudySession":
        return cls(
            id=data["id"],
            date=_parse_date(data["date"]),
            topic=data.get("topic", ""),
            duration_minutes=int(data.get("duration_minutes", 0)),
            is_completed=bool(data.get("is_completed", False)),
        )


@dataclass(frozen=True)
class Test:
    id: str
    subject: str
    title: str
    date: date
    difficulty: int
    sessions: tuple = ()
    created_at: datetime = field(default_factory=datetime.now)

    # Keep pytest from collecting this class when imported into test modules.
    __test__ = False

    def find_session(self, session_id: str) -> Optional[StudySession]:
        return next((s for s in self.sessions if s.id == session_id), None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "title": self.title,
            "date": self.date.isoformat(),
            "difficulty": self.difficulty,
            "sessions": [s.to_dict() for s in self.sessions],
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Test":
        return cls(
            id=data["id"],
            subject=data["subject"],
            title=data.get("title") or data["subject"],
            date=_parse_date(data["date"]),
            difficulty=int(data["difficulty"]),
            sessions=tuple(StudySession.from_dict(s) for s in data.get("sessions") or []),
            created_at=_parse_datetime(data.get("created_at")),
        )


@dataclass(frozen=True)
class User:
    id: str
    name: str = ""
    email: str = ""
    avatar_url: Optional[str] = None
    tests: tuple = ()
    created_at: datetime = field(default_factory=datetime.now)

    def find_test(self, test_id: str) -> Optional[Test]:
        return next((t for t in self.tests if t.id == test_id), None)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "tests": [t.to_dict() for t in self.tests],
            "created_at": self.created_at.isoformat(),
        }
        if self.avatar_url is not None:
            data["avatar_url"] = self.avatar_url
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Load a stored user, filling in fields that older records lack."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            email=data.get("email", ""),
            avatar_url=data.get("avatar_url"),
            tests=tuple(Test.from_dict(t) for t in data.get("tests") or []),
            created_at=_parse_datetime(data.get("created_at")),
        )


def encode_user(user: User) -> bytes:
    return json.dumps(user.to_dict(), sort_keys=True).encode("utf-8")


def decode_user(raw: bytes, user_id: Optional[str] = None) -> User:
    data = json.loads(raw.decode("utf-8"))
    if user_id is not None:
        data.setdefault("id", user_id)
    return User.from_dict(data)
