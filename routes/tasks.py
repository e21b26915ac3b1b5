"""
routes/tasks.py — Task list API routes.

Provides:
- GET /tasks/ — Grouped task list (query: group_by, status, source)
- GET /tasks/today — Pending tasks due today
- GET /tasks/suggestions — Schedule tasks (query: sort_by, status)
- GET /tasks/board/priority — Priority board
- GET /tasks/board/project — Project board (custom tasks)
- GET /tasks/timeline — Tasks by due date
- POST /tasks/toggle — Toggle completion of a schedule or custom task
- POST /tasks/add — Add a custom task
- POST /tasks/edit — Edit a custom task
- POST /tasks/delete — Delete a custom task

When no source is given, the stored task-source preference decides which
tasks the list shows.
"""

from flask import Blueprint, request, jsonify

from database import current_store, get_task_sources, get_hide_completed_suggestions
from task_aggregator import (
    load_all_tasks, toggle_complete, find_task, todays_tasks,
    add_custom_task, update_custom_task, delete_custom_task, list_projects
)
from view_projector import (
    project, count_tasks, due_status, timeline_view, priority_board, project_board,
    suggestions_view, filter_tasks, GROUP_BY_OPTIONS, STATUS_FILTERS, SOURCE_FILTERS
)
from utils.dates import now
from utils.validators import validate_name, validate_date, validate_choice, parse_bool

tasks_bp = Blueprint('tasks', __name__, url_prefix='/tasks')


def _task_json(task, moment):
    data = task.to_dict()
    data['due_status'] = due_status(task, moment)
    return data


def _groups_json(groups, moment):
    return {str(key): [_task_json(t, moment) for t in items] for key, items in groups.items()}


def _preferred_source(store):
    """Source filter implied by the stored show_custom/show_system toggles."""
    sources = get_task_sources(store)
    if sources.show_custom and sources.show_system:
        return 'all'
    if sources.show_system:
        return 'system'
    if sources.show_custom:
        return 'custom'
    return None


def _status_arg():
    return validate_choice(request.args.get('status', 'all'), STATUS_FILTERS, 'status filter')


# ========================================
# Views
# ========================================

@tasks_bp.route('/')
def index():
    """Grouped task list (JSON API)."""
    group_by, error = validate_choice(request.args.get('group_by', 'none'), GROUP_BY_OPTIONS, 'grouping')
    if error:
        return jsonify({'success': False, 'error': error}), 400
    status, error = _status_arg()
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        store = current_store()
        source = request.args.get('source')
        if source is None:
            source = _preferred_source(store)
        elif source not in SOURCE_FILTERS:
            return jsonify({'success': False, 'error': f"Unknown source filter: {source!r}"}), 400

        tasks = load_all_tasks(store)
        visible = filter_tasks(tasks, 'all', source) if source else []
        moment = now()
        return jsonify({
            'success': True,
            'counts': count_tasks(visible),
            'groups': _groups_json(project(visible, group_by, status), moment),
        })
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/today')
def today():
    try:
        due = todays_tasks(current_store())
        moment = now()
        return jsonify({
            'success': True,
            'custom': [_task_json(t, moment) for t in due['custom']],
            'suggestions': [_task_json(t, moment) for t in due['suggestions']],
        })
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/suggestions')
def suggestions():
    """Schedule-derived tasks; hides completed ones per the stored preference."""
    sort_by, error = validate_choice(request.args.get('sort_by', 'due_date'), ('due_date', 'plant'), 'sort')
    if error:
        return jsonify({'success': False, 'error': error}), 400
    status, error = _status_arg()
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        store = current_store()
        hide_completed = get_hide_completed_suggestions(store)
        tasks = suggestions_view(load_all_tasks(store), sort_by, hide_completed, status)
        moment = now()
        return jsonify({
            'success': True,
            'hide_completed': hide_completed,
            'tasks': [_task_json(t, moment) for t in tasks],
        })
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/board/priority')
def board_priority():
    status, error = _status_arg()
    if error:
        return jsonify({'success': False, 'error': error}), 400
    try:
        tasks = filter_tasks(load_all_tasks(current_store()), status)
        return jsonify({'success': True, 'columns': _groups_json(priority_board(tasks), now())})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/board/project')
def board_project():
    status, error = _status_arg()
    if error:
        return jsonify({'success': False, 'error': error}), 400
    try:
        store = current_store()
        tasks = filter_tasks(load_all_tasks(store), status)
        projects = list_projects(store)
        return jsonify({
            'success': True,
            'projects': [p.to_dict() for p in projects],
            'columns': _groups_json(project_board(tasks, projects), now()),
        })
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/timeline')
def timeline():
    status, error = _status_arg()
    if error:
        return jsonify({'success': False, 'error': error}), 400
    try:
        tasks = filter_tasks(load_all_tasks(current_store()), status)
        groups = timeline_view(tasks)
        return jsonify({
            'success': True,
            'days': _groups_json({day.isoformat(): items for day, items in groups.items()}, now()),
        })
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


# ========================================
# Mutations
# ========================================

@tasks_bp.route('/toggle', methods=['POST'])
def toggle():
    """
    Toggle completion.

    Body: {'source': 'custom', 'custom_task_id': ...} or
          {'source': 'system', 'plant_name': ..., 'plant_date_planted': ..., 'task_index': ...}
    """
    data = request.get_json(silent=True) or request.form.to_dict()
    source = data.get('source')
    if source not in ('system', 'custom'):
        return jsonify({'success': False, 'error': 'source must be system or custom'}), 400

    try:
        store = current_store()
        task_index = data.get('task_index')
        task = find_task(
            load_all_tasks(store), source,
            plant_name=data.get('plant_name'),
            plant_date_planted=data.get('plant_date_planted'),
            task_index=int(task_index) if task_index is not None else None,
            custom_task_id=data.get('custom_task_id'),
        )
        if task is None or not toggle_complete(store, task):
            return jsonify({'success': False, 'error': 'Task not found'}), 404
        return jsonify({'success': True, 'completed': not task.completed})
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/add', methods=['POST'])
def task_add():
    """Add a custom task."""
    data = request.get_json(silent=True) or request.form.to_dict()
    activity, error = validate_name(data.get('activity'), 'Task')
    if error:
        return jsonify({'success': False, 'error': error}), 400
    due_date, error = validate_date(data.get('due_date'), 'Due date')
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        task = add_custom_task(
            current_store(), activity, due_date,
            details=data.get('details', ''),
            category=data.get('category', 'other'),
            priority=data.get('priority', 'important'),
            project_id=data.get('project_id'),
        )
        return jsonify({'success': True, 'task': task.to_dict()})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/edit', methods=['POST'])
def task_edit():
    """Edit a custom task."""
    data = request.get_json(silent=True) or request.form.to_dict()
    task_id = data.get('id')
    if not task_id:
        return jsonify({'success': False, 'error': 'Task id is required'}), 400

    updates = {k: v for k, v in data.items() if k != 'id'}
    if 'activity' in updates:
        updates['activity'], error = validate_name(updates['activity'], 'Task')
        if error:
            return jsonify({'success': False, 'error': error}), 400
    if 'due_date' in updates:
        updates['due_date'], error = validate_date(updates['due_date'], 'Due date')
        if error:
            return jsonify({'success': False, 'error': error}), 400
    if 'completed' in updates:
        updates['completed'] = parse_bool(updates['completed'])

    try:
        task = update_custom_task(current_store(), str(task_id), updates)
        if task is None:
            return jsonify({'success': False, 'error': 'Task not found'}), 404
        return jsonify({'success': True, 'task': task.to_dict()})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@tasks_bp.route('/delete', methods=['POST'])
def task_delete():
    data = request.get_json(silent=True) or request.form.to_dict()
    task_id = data.get('id')
    if not task_id:
        return jsonify({'success': False, 'error': 'Task id is required'}), 400
    if delete_custom_task(current_store(), str(task_id)):
        return jsonify({'success': True})
    return jsonify({'success': False, 'error': 'Task not found'}), 404
