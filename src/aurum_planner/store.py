"""Per-user aggregate store: the only writer of a user's persisted state.

A user and all of its tests and sessions are stored as one JSON record. Every
change goes through ``mutate_user``, which re-runs the transform on the latest
state whenever a concurrent write to the same user wins, so no update is lost.
Different users never contend with each other.
"""
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from aurum_planner.db import kv_get, kv_put, update_value
from aurum_planner.errors import CorruptRecord, ValidationError
from aurum_planner.models import Test, User, decode_user, encode_user
from aurum_planner.registry import is_registered, register
from aurum_planner.validation import validate_profile_updates

logger = logging.getLogger(__name__)

def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def _load(raw: bytes, user_id: str) -> User:
    try:
        return decode_user(raw, user_id)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise CorruptRecord(f"Stored record for user {user_id} is unreadable: {e}") from e


def user_exists(db_path: str, user_id: str) -> bool:
    return kv_get(db_path, user_key(user_id)) is not None


def ensure_user(db_path: str, user_id: str) -> User:
    """Return the stored user, creating an empty profile on first access."""
    current = kv_get(db_path, user_key(user_id))
    if current:
        user = _load(current[0], user_id)
        # A failed registration after the insert is repaired on the next access.
        if not is_registered(db_path, user_id):
            register(db_path, user_id)
        return user
    user = User(id=user_id, created_at=datetime.now())
    if kv_put(db_path, user_key(user_id), encode_user(user), 0):
        logger.info("created user %s", user_id)
        register(db_path, user_id)
        return user
    # Someone else created it between our read and write.
    return ensure_user(db_path, user_id)


def mutate_user(db_path: str, user_id: str, transform: Callable[[User], User]) -> User:
    """Apply ``transform`` to the latest state of the user and persist the result.

    ``transform`` must be pure: it can run more than once if other writers
    update the same user concurrently.
    """
    ensure_user(db_path, user_id)

    def apply(raw):
        before = _load(raw, user_id)
        after = transform(before)
        if after is before:
            return raw
        return encode_user(after)

    return _load(update_value(db_path, user_key(user_id), apply), user_id)


def merge_profile(user: User, updates: dict) -> User:
    changes = {}
    if updates.get("name"):
        changes["name"] = updates["name"]
    if "avatar_url" in updates:
        changes["avatar_url"] = updates["avatar_url"]
    return replace(user, **changes) if changes else user


def append_test(user: User, test: Test) -> User:
    if user.find_test(test.id) is not None:
        raise ValidationError(f"User {user.id} already has a test with id {test.id}")
    return replace(user, tests=user.tests + (test,))


def flip_session(user: User, test_id: str, session_id: str) -> User:
    """Toggle one session's completion flag. Unknown ids leave the user as is."""
    test = user.find_test(test_id)
    if test is None or test.find_session(session_id) is None:
        return user
    sessions = tuple(s.toggled() if s.id == session_id else s for s in test.sessions)
    updated = replace(test, sessions=sessions)
    return replace(user, tests=tuple(updated if t.id == test_id else t for t in user.tests))


def drop_test(user: User, test_id: str) -> User:
    if user.find_test(test_id) is None:
        return user
    return replace(user, tests=tuple(t for t in user.tests if t.id != test_id))


def patch_profile(db_path: str, user_id: str, updates: dict) -> User:
    """Shallow-merge profile fields. Tests are never touched."""
    allowed = validate_profile_updates(updates)
    return mutate_user(db_path, user_id, lambda u: merge_profile(u, allowed))


def add_test(db_path: str, user_id: str, test: Test) -> User:
    return mutate_user(db_path, user_id, lambda u: append_test(u, test))


def toggle_session(db_path: str, user_id: str, test_id: str, session_id: str) -> User:
    return mutate_user(db_path, user_id, lambda u: flip_session(u, test_id, session_id))


def delete_test(db_path: str, user_id: str, test_id: str) -> User:
    """Remove a test and all of its sessions in one write."""
    return mutate_user(db_path, user_id, lambda u: drop_test(u, test_id))
