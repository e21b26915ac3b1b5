"""
view_projector.py — Reshapes the aggregated task list for each view.

Views:
- project(): grouped list (none / category / priority / project)
- timeline_view(): tasks by calendar date
- priority_board(): four fixed priority columns
- project_board(): custom tasks by project, 'unassigned' first
- suggestions_view(): schedule tasks only, by due date or by plant

All functions are pure. Input order is the aggregator's due-date order
and every grouping keeps it inside each bucket.
"""

from collections import OrderedDict
from datetime import timedelta

from models import PRIORITY_ORDER, Priority
from task_aggregator import normalize_priority
from utils.dates import local_date

GROUP_BY_OPTIONS = ('none', 'category', 'priority', 'project')
STATUS_FILTERS = ('all', 'pending', 'completed')
SOURCE_FILTERS = ('all', 'system', 'custom')

ALL_TASKS_KEY = 'All Tasks'
SUGGESTIONS_KEY = 'suggestions'
UNASSIGNED_KEY = 'unassigned'
OTHER_PLANT = 'Other'

DUE_SOON_DAYS = 7


# ========================================
# Filters
# ========================================

def filter_tasks(tasks, status_filter='all', source_filter='all'):
    """
    Filter by completion status and by source; order is kept.

    Raises:
        ValueError: for a status or source filter outside STATUS_FILTERS / SOURCE_FILTERS.
    """
    if status_filter not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status_filter}")
    if source_filter not in SOURCE_FILTERS:
        raise ValueError(f"Unknown source filter: {source_filter}")

    result = []
    for task in tasks:
        if status_filter == 'pending' and task.completed:
            continue
        if status_filter == 'completed' and not task.completed:
            continue
        if source_filter in ('system', 'custom') and task.source != source_filter:
            continue
        result.append(task)
    return result


def count_tasks(tasks):
    completed = sum(1 for t in tasks if t.completed)
    return {'all': len(tasks), 'pending': len(tasks) - completed, 'completed': completed}


def task_priority(task):
    """Canonical priority for grouping; system tasks rank as important."""
    if task.is_system:
        return Priority.IMPORTANT.value
    return normalize_priority(task.priority)


def due_status(task, now):
    """
    Due status badge of a task relative to now.

    Returns:
        'completed', 'overdue', 'due-soon' (within 7 days) or 'upcoming'
    """
    if task.completed:
        return 'completed'
    if task.due_date < now:
        return 'overdue'
    if task.due_date <= now + timedelta(days=DUE_SOON_DAYS):
        return 'due-soon'
    return 'upcoming'


# ========================================
# Grouped list
# ========================================

def _bucket(tasks, key_func):
    groups = OrderedDict()
    for task in tasks:
        groups.setdefault(key_func(task), []).append(task)
    return groups


def _project_key(task):
    if task.is_system:
        return SUGGESTIONS_KEY
    return task.project_id or UNASSIGNED_KEY


def project(tasks, group_by='none', status_filter='all', source_filter='all'):
    """
    Group tasks for the task list.

    Args:
        tasks: TaskWithSource list in aggregator order
        group_by: 'none', 'category', 'priority' or 'project'
        status_filter: 'all', 'pending' or 'completed'
        source_filter: 'all', 'system' or 'custom'

    Returns:
        OrderedDict of group key -> list of tasks. 'none' always gives the
        single 'All Tasks' group; otherwise only observed keys appear, in
        order of first appearance.

    Raises:
        ValueError: for an unknown group_by, status or source filter.
    """
    visible = filter_tasks(tasks, status_filter, source_filter)

    if group_by == 'none':
        return OrderedDict([(ALL_TASKS_KEY, visible)])
    if group_by == 'category':
        return _bucket(visible, lambda t: t.category)
    if group_by == 'priority':
        return _bucket(visible, task_priority)
    if group_by == 'project':
        return _bucket(visible, _project_key)
    raise ValueError(f"Unknown grouping: {group_by}")


# ========================================
# Timeline and boards
# ========================================

def timeline_view(tasks):
    """Calendar date -> tasks due that day, ascending by date."""
    groups = _bucket(tasks, lambda t: local_date(t.due_date))
    return OrderedDict(sorted(groups.items()))


def priority_board(tasks):
    """Every priority column is present, in canonical order, even when empty."""
    board = OrderedDict((priority, []) for priority in PRIORITY_ORDER)
    for task in tasks:
        board[task_priority(task)].append(task)
    return board


def project_board(tasks, projects):
    """
    Custom tasks by project.

    'unassigned' comes first, then projects by name. Tasks pointing at a
    project id that no longer exists get their own column at the end.
    """
    custom = [t for t in tasks if not t.is_system]
    if not custom:
        return OrderedDict()

    names = {p.id: p.name for p in projects}
    groups = _bucket(custom, lambda t: t.project_id or UNASSIGNED_KEY)

    board = OrderedDict()
    board[UNASSIGNED_KEY] = groups.pop(UNASSIGNED_KEY, [])
    known = sorted((key for key in groups if key in names), key=lambda key: names[key].lower())
    for key in known:
        board[key] = groups.pop(key)
    for key, items in groups.items():
        board[key] = items
    return board


def _plant_sort_key(task):
    return (task.plant_name or OTHER_PLANT).casefold()


def suggestions_view(tasks, sort_by='due_date', hide_completed=True, status_filter='all'):
    """
    Schedule-derived tasks for the suggestions panel.

    hide_completed is the panel's own preference and applies on top of
    status_filter.

    Args:
        sort_by: 'due_date' or 'plant' (alphabetical, ties by due date)
    """
    suggestions = filter_tasks(tasks, status_filter, 'system')
    if hide_completed:
        suggestions = [t for t in suggestions if not t.completed]

    if sort_by == 'plant':
        return sorted(suggestions, key=lambda t: (_plant_sort_key(t), t.due_date))
    if sort_by == 'due_date':
        return sorted(suggestions, key=lambda t: t.due_date)
    raise ValueError(f"Unknown sort: {sort_by}")
