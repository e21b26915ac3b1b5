"""
database.py — Key/value persistence for the garden planner.

Every collection is a JSON array stored under its own key:
- garden_plants: GardenPlant records (schedules embedded)
- custom_tasks: CustomTask records
- projects: Project records
- task_sources: {"show_custom": bool, "show_system": bool}
- hide_completed_suggestions: bool

The store only knows "get by key" and "set by key". All mutations are
read-modify-write of a whole collection. Malformed stored JSON is logged
and read as an empty collection; it never raises to the caller.

KeyValueStore keeps the table in SQLite (WAL mode, one connection per
operation). MemoryStore keeps it in a dict, for tests and scripts.
"""

import sqlite3
import os
import json
import logging

from flask import current_app

from models import GardenPlant, CustomTask, Project, TaskSources

logger = logging.getLogger(__name__)

GARDEN_PLANTS_KEY = 'garden_plants'
CUSTOM_TASKS_KEY = 'custom_tasks'
PROJECTS_KEY = 'projects'
TASK_SOURCES_KEY = 'task_sources'
HIDE_COMPLETED_KEY = 'hide_completed_suggestions'

STORE_EXTENSION = 'garden_store'


def get_store_path() -> str:
    """Get the store database path from environment or default."""
    default_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'garden_planner.db')
    return os.environ.get('GARDEN_DB_PATH', default_path)


class KeyValueStore:
    """SQLite-backed key/value table."""

    def __init__(self, path=None):
        self.path = path or get_store_path()

    def get_db(self):
        """Get a database connection with WAL mode enabled."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self):
        """Create the key/value table if it doesn't exist."""
        conn = self.get_db()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get(self, key, default=None):
        conn = self.get_db()
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row:
            return row['value']
        return default

    def set(self, key, value):
        conn = self.get_db()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value)
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, key):
        conn = self.get_db()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()


class MemoryStore:
    """In-process key/value store with the same surface as KeyValueStore."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def init_db(self):
        pass

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = value

    def delete(self, key):
        self._data.pop(key, None)


# ========================================
# JSON helpers
# ========================================

def read_json(store, key, default=None):
    """
    Read and decode a JSON value.

    Returns default when the key is absent or the stored text is not valid JSON.
    """
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning("Stored value for %r is not valid JSON, ignoring it: %s", key, e)
        return default


def write_json(store, key, value):
    store.set(key, json.dumps(value, ensure_ascii=False))


def read_collection(store, key, record_cls):
    """
    Read a collection of records.

    Args:
        store: KeyValueStore or MemoryStore
        key: Collection key
        record_cls: Dataclass with a from_dict() constructor

    Returns:
        List of records. A missing or malformed collection reads as [];
        individual records that don't fit the shape are skipped.
    """
    data = read_json(store, key, default=[])
    if not isinstance(data, list):
        logger.warning("Stored collection %r is not a list, ignoring it", key)
        return []

    records = []
    for position, item in enumerate(data):
        try:
            records.append(record_cls.from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed %s record #%d in %r: %s",
                           record_cls.__name__, position, key, e)
    return records


def write_collection(store, key, records):
    """Serialize and store a whole collection."""
    write_json(store, key, [record.to_dict() for record in records])


def get_garden_plants(store):
    return read_collection(store, GARDEN_PLANTS_KEY, GardenPlant)


def save_garden_plants(store, plants):
    write_collection(store, GARDEN_PLANTS_KEY, plants)


def get_custom_tasks(store):
    return read_collection(store, CUSTOM_TASKS_KEY, CustomTask)


def save_custom_tasks(store, tasks):
    write_collection(store, CUSTOM_TASKS_KEY, tasks)


def get_projects(store):
    return read_collection(store, PROJECTS_KEY, Project)


def save_projects(store, projects):
    write_collection(store, PROJECTS_KEY, projects)


# ========================================
# View preferences
# ========================================

def get_task_sources(store):
    """Task source toggles; defaults to custom tasks shown, suggestions hidden."""
    data = read_json(store, TASK_SOURCES_KEY)
    if not isinstance(data, dict):
        return TaskSources()
    return TaskSources(
        show_custom=bool(data.get('show_custom', data.get('showCustom', True))),
        show_system=bool(data.get('show_system', data.get('showSystem', False))),
    )


def set_task_sources(store, sources):
    write_json(store, TASK_SOURCES_KEY, {
        'show_custom': sources.show_custom,
        'show_system': sources.show_system,
    })


def get_hide_completed_suggestions(store):
    """Whether completed suggestions are hidden in the suggestions view (default True)."""
    value = read_json(store, HIDE_COMPLETED_KEY, default=True)
    if not isinstance(value, bool):
        return True
    return value


def set_hide_completed_suggestions(store, hide):
    write_json(store, HIDE_COMPLETED_KEY, bool(hide))


def current_store():
    """The store attached to the running Flask application."""
    return current_app.extensions[STORE_EXTENSION]
