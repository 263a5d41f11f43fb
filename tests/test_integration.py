"""End-to-end test of the core workflow."""
import threading
from datetime import date

from aurum_planner import api
from aurum_planner.dashboard import calc_test_progress, profile_stats, sessions_on
from aurum_planner.db import init_db
from aurum_planner.models import User


def test_full_planning_workflow(tmp_db):
    """Sign in, plan two tests, work through sessions, drop one test."""
    init_db(tmp_db)
    user_id = api.create_or_get_user(tmp_db, "ada@example.com", "Ada").data["id"]

    api.schedule_test(tmp_db, user_id, "Mathematics", "2024-03-15", 2)
    data = api.schedule_test(tmp_db, user_id, "History", "2024-03-20", 1).data
    user = User.from_dict(data)
    math, history = user.tests
    assert len(math.sessions) == 14
    assert len(history.sessions) == 7

    # Both tests have a session on 2024-03-14; complete them concurrently.
    todays = sessions_on(user, date(2024, 3, 14))
    assert len(todays) == 2
    threads = [
        threading.Thread(target=api.toggle_session, args=(tmp_db, user_id, t.id, s.id))
        for t, s in todays
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    user = User.from_dict(api.get_user(tmp_db, user_id).data)
    assert all(s.is_completed for _, s in sessions_on(user, date(2024, 3, 14)))
    assert calc_test_progress(user.find_test(math.id)) == 7
    assert profile_stats(user)["completed_sessions"] == 2

    user = User.from_dict(api.delete_test(tmp_db, user_id, math.id).data)
    assert [t.id for t in user.tests] == [history.id]
    assert user.tests[0].sessions[-1].is_completed is False
    assert user.tests[0].sessions[0].is_completed is False
    assert sum(s.is_completed for s in user.tests[0].sessions) == 1
    assert api.list_users(tmp_db).data == [user_id]
