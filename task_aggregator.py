"""
task_aggregator.py — Merges system and custom tasks into one task list.

This module implements:
- Loading schedule tasks from active garden plants and user custom tasks
- Normalization of legacy priorities and date-only due dates, written back
  to the store when anything changed
- Completion toggling through back-references to the originating record
- Custom task and project CRUD (deleting a project unassigns its tasks)
- Today's tasks

Every mutation is a read-modify-write of the whole collection it touches.
Missing references are no-ops, never errors.
"""

import logging

from models import (
    Category, Priority, TaskWithSource, CustomTask, Project,
)
from database import (
    get_garden_plants, save_garden_plants,
    get_custom_tasks, save_custom_tasks,
    get_projects, save_projects,
)
from utils.dates import to_instant, to_iso, normalize_iso, now, as_date, local_date, utc_millis_id

logger = logging.getLogger(__name__)

LEGACY_PRIORITIES = {
    'high': Priority.URGENT_IMPORTANT.value,
    'medium': Priority.IMPORTANT.value,
    'low': Priority.NICE_TO_DO.value,
}

CUSTOM_TASK_FIELDS = ('activity', 'details', 'completed', 'due_date', 'category', 'priority', 'project_id')
PROJECT_FIELDS = ('name', 'description', 'color')


# ========================================
# Normalization
# ========================================

def normalize_priority(value):
    """
    Map any stored priority onto the four canonical values.

    Legacy high/medium/low are translated; anything unrecognized
    (including None) becomes 'important'. Idempotent.
    """
    if isinstance(value, Priority):
        return value.value
    if not isinstance(value, str):
        return Priority.IMPORTANT.value
    key = value.strip().lower()
    if key in {p.value for p in Priority}:
        return key
    return LEGACY_PRIORITIES.get(key, Priority.IMPORTANT.value)


def normalize_category(value):
    """Custom task categories outside the known set become 'other'."""
    if isinstance(value, Category):
        return value.value
    if isinstance(value, str) and value in {c.value for c in Category}:
        return value
    return Category.OTHER.value


def normalize_due_date(value):
    """Return (iso_string, changed); date-only strings become local midnight."""
    return normalize_iso(value)


def _migrate_custom_task(task):
    """Normalize a custom task in place. Returns True if it changed."""
    due_date, changed = normalize_due_date(task.due_date)
    task.due_date = due_date
    priority = normalize_priority(task.priority)
    if priority != task.priority:
        task.priority = priority
        changed = True
    return changed


# ========================================
# Loading
# ========================================

def _system_tasks(plants):
    tasks = []
    for plant in plants:
        if plant.is_harvested:
            continue
        for index, scheduled in enumerate(plant.schedule):
            try:
                due = to_instant(scheduled.due_date)
            except ValueError as e:
                logger.warning("Skipping task %d of %s (%s): bad due date: %s",
                               index, plant.name, plant.date_planted, e)
                continue
            tasks.append(TaskWithSource(
                activity=scheduled.activity,
                details=scheduled.details,
                completed=scheduled.completed,
                due_date=due,
                category=scheduled.category,
                source='system',
                week_number=scheduled.week_number,
                plant_name=plant.name,
                plant_date_planted=plant.date_planted,
                task_index=index,
            ))
    return tasks


def _custom_task_view(task):
    return TaskWithSource(
        activity=task.activity,
        details=task.details,
        completed=task.completed,
        due_date=to_instant(task.due_date),
        category=task.category,
        source='custom',
        custom_task_id=task.id,
        priority=task.priority,
        project_id=task.project_id,
    )


def load_custom_tasks(store):
    """Read custom tasks, persisting any priority/date normalization."""
    tasks = get_custom_tasks(store)
    migrated = 0
    for task in tasks:
        try:
            if _migrate_custom_task(task):
                migrated += 1
        except ValueError:
            # Left as stored; load_all_tasks logs and skips it.
            pass
    if migrated:
        save_custom_tasks(store, tasks)
        logger.info("Normalized %d custom task(s)", migrated)
    return tasks


def load_all_tasks(store):
    """
    Load every task the views work from.

    Args:
        store: KeyValueStore or MemoryStore

    Returns:
        List of TaskWithSource sorted by due date ascending. Schedule tasks
        of non-harvested plants come before custom tasks when due dates tie.
    """
    tasks = _system_tasks(get_garden_plants(store))
    for task in load_custom_tasks(store):
        try:
            tasks.append(_custom_task_view(task))
        except ValueError as e:
            logger.warning("Skipping custom task %s: bad due date: %s", task.id, e)
    tasks.sort(key=lambda t: t.due_date)
    return tasks


# ========================================
# Completion
# ========================================

def toggle_complete(store, task):
    """
    Flip the completion flag of the record behind an aggregated task.

    Returns:
        True if a record was updated, False if it could not be found.
    """
    if task.is_system:
        plants = get_garden_plants(store)
        for plant in plants:
            if not plant.same_planting(task.plant_name, task.plant_date_planted):
                continue
            if not 0 <= task.task_index < len(plant.schedule):
                break
            scheduled = plant.schedule[task.task_index]
            scheduled.completed = not scheduled.completed
            save_garden_plants(store, plants)
            return True
        logger.debug("Toggle skipped: no task %d for %s (%s)",
                     task.task_index, task.plant_name, task.plant_date_planted)
        return False

    tasks = get_custom_tasks(store)
    for custom in tasks:
        if custom.id == task.custom_task_id:
            custom.completed = not custom.completed
            save_custom_tasks(store, tasks)
            return True
    logger.debug("Toggle skipped: no custom task %s", task.custom_task_id)
    return False


def find_task(tasks, source, plant_name=None, plant_date_planted=None, task_index=None,
              custom_task_id=None):
    """Locate an aggregated task by its back-reference."""
    for task in tasks:
        if task.source != source:
            continue
        if source == 'custom' and task.custom_task_id == custom_task_id:
            return task
        if (source == 'system' and task.plant_name == plant_name
                and task.plant_date_planted == plant_date_planted
                and task.task_index == task_index):
            return task
    return None


# ========================================
# Custom task CRUD
# ========================================

def _new_id(existing_ids):
    candidate = int(utc_millis_id())
    while str(candidate) in existing_ids:
        candidate += 1
    return str(candidate)


def _known_project_id(store, project_id):
    """project_id when it names a stored project, else None."""
    if not project_id:
        return None
    if any(p.id == project_id for p in get_projects(store)):
        return project_id
    logger.warning("Ignoring unknown project id %s", project_id)
    return None


def add_custom_task(store, activity, due_date, details="", category=Category.OTHER.value,
                    priority=Priority.IMPORTANT.value, project_id=None):
    """
    Create and persist a custom task. Returns the new CustomTask.

    A project_id that names no stored project is dropped to None.
    """
    tasks = get_custom_tasks(store)
    task = CustomTask(
        id=_new_id({t.id for t in tasks}),
        activity=activity,
        details=details or "",
        completed=False,
        due_date=to_iso(due_date),
        category=normalize_category(category),
        priority=normalize_priority(priority),
        project_id=_known_project_id(store, project_id),
        created_at=now().isoformat(),
    )
    tasks.append(task)
    save_custom_tasks(store, tasks)
    return task


def update_custom_task(store, task_id, updates):
    """
    Apply field updates to a custom task.

    Args:
        store: KeyValueStore or MemoryStore
        task_id: CustomTask.id
        updates: dict of field -> value; unknown fields are ignored, and an
            unknown project_id unassigns the task

    Returns:
        The updated CustomTask, or None if no task has that id.
    """
    tasks = get_custom_tasks(store)
    for task in tasks:
        if task.id != task_id:
            continue
        for name in CUSTOM_TASK_FIELDS:
            if name not in updates:
                continue
            value = updates[name]
            if name == 'due_date':
                value = to_iso(value)
            elif name == 'priority':
                value = normalize_priority(value)
            elif name == 'category':
                value = normalize_category(value)
            elif name == 'completed':
                value = bool(value)
            elif name == 'project_id':
                value = _known_project_id(store, value)
            setattr(task, name, value)
        save_custom_tasks(store, tasks)
        return task
    return None


def delete_custom_task(store, task_id):
    tasks = get_custom_tasks(store)
    remaining = [t for t in tasks if t.id != task_id]
    if len(remaining) == len(tasks):
        return False
    save_custom_tasks(store, remaining)
    return True


# ========================================
# Projects
# ========================================

def list_projects(store):
    return get_projects(store)


def add_project(store, name, description=None, color=None):
    projects = get_projects(store)
    project = Project(
        id=_new_id({p.id for p in projects}),
        name=name,
        description=description or None,
        created_at=now().isoformat(),
    )
    if color:
        project.color = color
    projects.append(project)
    save_projects(store, projects)
    return project


def update_project(store, project_id, updates):
    """Returns the updated Project, or None if no project has that id."""
    projects = get_projects(store)
    for project in projects:
        if project.id == project_id:
            for name in PROJECT_FIELDS:
                if name in updates and updates[name] is not None:
                    setattr(project, name, updates[name])
            save_projects(store, projects)
            return project
    return None


def delete_project(store, project_id):
    """
    Delete a project and unassign every custom task that referenced it.

    Tasks are cleaned up even when the project itself is already gone.

    Returns:
        True if a project was removed.
    """
    projects = get_projects(store)
    remaining = [p for p in projects if p.id != project_id]
    removed = len(remaining) != len(projects)
    if removed:
        save_projects(store, remaining)

    tasks = get_custom_tasks(store)
    unassigned = 0
    for task in tasks:
        if task.project_id == project_id:
            task.project_id = None
            unassigned += 1
    if unassigned:
        save_custom_tasks(store, tasks)
        logger.info("Unassigned %d task(s) from deleted project %s", unassigned, project_id)
    return removed


# ========================================
# Today
# ========================================

def todays_tasks(store, today=None):
    """
    Pending tasks due on today's calendar date.

    Returns:
        {'custom': [...], 'suggestions': [...]} of TaskWithSource
    """
    day = as_date(today)
    result = {'custom': [], 'suggestions': []}
    for task in load_all_tasks(store):
        if task.completed or local_date(task.due_date) != day:
            continue
        if task.is_system:
            result['suggestions'].append(task)
        else:
            result['custom'].append(task)
    return result
