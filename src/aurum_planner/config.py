"""Runtime settings, overridable from the environment."""
import os
from pathlib import Path

DEFAULT_DB_PATH = os.getenv(
    "AURUM_DB_PATH", str(Path.home() / ".aurum_planner" / "planner.db")
)
MAX_MUTATE_RETRIES = int(os.getenv("AURUM_MAX_RETRIES", "5"))
# Sign-ups for different users all append to the one registry record.
REGISTRY_MAX_RETRIES = int(os.getenv("AURUM_REGISTRY_MAX_RETRIES", "64"))
LOG_LEVEL = os.getenv("AURUM_LOG_LEVEL", "WARNING").upper()

DEFAULT_SUBJECTS = [
    "Mathematics", "Physics", "Chemistry", "Biology",
    "History", "Literature", "Languages", "Computer Science",
    "Art", "Economics", "Other",
]


def get_suggested_subjects() -> list[str]:
    """Subjects offered as suggestions. Custom subjects are still accepted."""
    raw = os.getenv("AURUM_SUBJECTS")
    if not raw:
        return list(DEFAULT_SUBJECTS)
    return [s.strip() for s in raw.split(",") if s.strip()]
