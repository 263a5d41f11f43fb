"""Operations exposed to the request-handling layer.

Every call names the user explicitly and returns an ``ApiResult``. Planner
failures come back as unsuccessful results instead of propagating.
"""
import functools
import logging
from dataclasses import dataclass, replace
from typing import Optional

from aurum_planner import registry, store
from aurum_planner.errors import NotFound, PlannerError
from aurum_planner.schedule import build_test
from aurum_planner.validation import (
    parse_test_date, user_id_for_email, validate_difficulty, validate_display_name,
    validate_email, validate_profile_updates, validate_subject, validate_test_payload,
    validate_title,
)

logger = logging.getLogger(__name__)


@dataclass
class ApiResult:
    success: bool
    data: Optional[object] = None
    error: Optional[str] = None
    kind: Optional[str] = None


def ok(data) -> ApiResult:
    return ApiResult(success=True, data=data)


def fail(error: PlannerError) -> ApiResult:
    return ApiResult(success=False, error=str(error), kind=error.kind)


def _as_result(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return ok(func(*args, **kwargs))
        except PlannerError as e:
            logger.info("%s failed: %s (%s)", func.__name__, e, e.kind)
            return fail(e)
    return wrapper


def _require_user(db_path: str, user_id: str) -> None:
    if not user_id or not store.user_exists(db_path, user_id):
        raise NotFound("User not found")


@_as_result
def create_or_get_user(db_path: str, email: str, name: Optional[str] = None) -> dict:
    """Sign in by email, creating the profile on first use."""
    email = validate_email(email)
    display_name = validate_display_name(name) or "Student"
    user_id = user_id_for_email(email)
    user = store.ensure_user(db_path, user_id)
    if not user.email:
        def fill_profile(u):
            if u.email:
                return u
            return replace(u, name=display_name, email=email)

        user = store.mutate_user(db_path, user_id, fill_profile)
    return user.to_dict()


@_as_result
def get_user(db_path: str, user_id: str) -> dict:
    _require_user(db_path, user_id)
    return store.ensure_user(db_path, user_id).to_dict()


@_as_result
def update_profile(db_path: str, user_id: str, updates: dict) -> dict:
    updates = validate_profile_updates({} if updates is None else updates)
    _require_user(db_path, user_id)
    return store.patch_profile(db_path, user_id, updates).to_dict()


@_as_result
def add_test(db_path: str, user_id: str, test_payload: dict) -> dict:
    test = validate_test_payload(test_payload)
    _require_user(db_path, user_id)
    return store.add_test(db_path, user_id, test).to_dict()


@_as_result
def schedule_test(
    db_path: str,
    user_id: str,
    subject: str,
    test_date,
    difficulty: int,
    title: str = "",
) -> dict:
    """Generate a study plan for a new test and add it to the user."""
    test = build_test(
        validate_subject(subject),
        parse_test_date(test_date),
        validate_difficulty(difficulty),
        title=validate_title(title),
    )
    _require_user(db_path, user_id)
    return store.add_test(db_path, user_id, test).to_dict()


@_as_result
def toggle_session(db_path: str, user_id: str, test_id: str, session_id: str) -> dict:
    _require_user(db_path, user_id)
    return store.toggle_session(db_path, user_id, test_id, session_id).to_dict()


@_as_result
def delete_test(db_path: str, user_id: str, test_id: str) -> dict:
    _require_user(db_path, user_id)
    return store.delete_test(db_path, user_id, test_id).to_dict()


@_as_result
def list_users(db_path: str) -> list[str]:
    return registry.list_ids(db_path)
