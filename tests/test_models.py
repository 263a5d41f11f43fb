"""Tests for data model classes."""
import json
from datetime import date, datetime

from aurum_planner.models import StudySession, Test, User, decode_user, encode_user


def make_test(**overrides):
    fields = dict(
        id="t1", subject="Physics", title="Midterm", date=date(2024, 3, 15), difficulty=2,
        sessions=(StudySession(id="s1", date=date(2024, 3, 1), topic="Day 1: Mock quiz",
                               duration_minutes=55),),
        created_at=datetime(2024, 2, 1, 9, 30),
    )
    fields.update(overrides)
    return Test(**fields)


def test_study_session_defaults():
    s = StudySession(id="s1", date=date(2024, 3, 1), topic="Day 1", duration_minutes=50)
    assert s.is_completed is False


def test_study_session_toggled_returns_new_value():
    s = StudySession(id="s1", date=date(2024, 3, 1), topic="Day 1", duration_minutes=50)
    flipped = s.toggled()
    assert flipped.is_completed is True
    assert s.is_completed is False
    assert flipped.toggled() == s


def test_user_defaults():
    u = User(id="ada")
    assert u.name == ""
    assert u.email == ""
    assert u.avatar_url is None
    assert u.tests == ()


def test_find_test_and_session():
    t = make_test()
    u = User(id="ada", tests=(t,))
    assert u.find_test("t1") is t
    assert u.find_test("missing") is None
    assert t.find_session("s1").topic == "Day 1: Mock quiz"
    assert t.find_session("missing") is None


def test_test_to_dict_uses_iso_dates():
    data = make_test().to_dict()
    assert data["date"] == "2024-03-15"
    assert data["created_at"] == "2024-02-01T09:30:00"
    assert data["sessions"][0] == {
        "id": "s1", "date": "2024-03-01", "topic": "Day 1: Mock quiz",
        "is_completed": False, "duration_minutes": 55,
    }


def test_user_dict_round_trip():
    u = User(id="ada", name="Ada", email="ada@example.com", avatar_url="a.png",
             tests=(make_test(),), created_at=datetime(2024, 1, 1))
    assert User.from_dict(u.to_dict()) == u
    assert decode_user(encode_user(u)) == u


def test_avatar_omitted_when_unset():
    assert "avatar_url" not in User(id="ada").to_dict()


def test_from_dict_backfills_older_records():
    """Records written before tests/avatars existed still load."""
    u = User.from_dict({"id": "old", "name": "Old", "email": "old@example.com"})
    assert u.tests == ()
    assert u.avatar_url is None
    assert isinstance(u.created_at, datetime)


def test_decode_user_fills_missing_id():
    raw = json.dumps({"name": "Nobody"}).encode()
    assert decode_user(raw, "fallback").id == "fallback"


def test_from_dict_accepts_timestamps_and_millis():
    t = Test.from_dict({
        "id": "t1", "subject": "Art", "date": "2024-03-15T00:00:00.000Z",
        "difficulty": 1, "created_at": 1704067200000,
        "sessions": [{"id": "s1", "date": "2024-03-08T00:00:00.000Z", "topic": "x",
                      "duration_minutes": 50}],
    })
    assert t.date == date(2024, 3, 15)
    assert t.title == "Art"
    assert t.sessions[0].date == date(2024, 3, 8)
    assert isinstance(t.created_at, datetime)
