"""Registry of known aggregate ids, kept in insertion order."""
import json
import logging

from aurum_planner.config import REGISTRY_MAX_RETRIES
from aurum_planner.db import kv_get, update_value
from aurum_planner.errors import CorruptRecord

logger = logging.getLogger(__name__)

USERS_INDEX = "users"


def index_key(index: str) -> str:
    return f"index:{index}"


def _decode(raw: bytes | None, index: str) -> list[str]:
    if not raw:
        return []
    try:
        ids = json.loads(raw.decode("utf-8"))
    except ValueError as e:
        raise CorruptRecord(f"Index {index} is unreadable: {e}") from e
    if not isinstance(ids, list):
        raise CorruptRecord(f"Index {index} is not a list")
    return ids


def register(db_path: str, entity_id: str, index: str = USERS_INDEX) -> None:
    """Add ``entity_id`` to the index. Registering twice is harmless."""
    def add(raw):
        ids = _decode(raw, index)
        if entity_id in ids:
            return raw
        return json.dumps(ids + [entity_id]).encode("utf-8")

    update_value(db_path, index_key(index), add, max_retries=REGISTRY_MAX_RETRIES)
    logger.debug("registered %s in index %s", entity_id, index)


def list_ids(db_path: str, index: str = USERS_INDEX) -> list[str]:
    current = kv_get(db_path, index_key(index))
    return _decode(current[0], index) if current else []


def is_registered(db_path: str, entity_id: str, index: str = USERS_INDEX) -> bool:
    return entity_id in list_ids(db_path, index)
