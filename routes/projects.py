"""
routes/projects.py — Project API routes.

Provides:
- GET /projects/ — List projects
- POST /projects/add — Add a project
- POST /projects/edit — Rename / recolor a project
- POST /projects/delete — Delete a project (its tasks become unassigned)
"""

from flask import Blueprint, request, jsonify

from database import current_store
from task_aggregator import list_projects, add_project, update_project, delete_project
from utils.validators import validate_name

projects_bp = Blueprint('projects', __name__, url_prefix='/projects')


@projects_bp.route('/')
def index():
    try:
        projects = list_projects(current_store())
        return jsonify({'success': True, 'projects': [p.to_dict() for p in projects]})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@projects_bp.route('/add', methods=['POST'])
def project_add():
    data = request.get_json(silent=True) or request.form.to_dict()
    name, error = validate_name(data.get('name'), 'Project name')
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        project = add_project(current_store(), name, data.get('description'), data.get('color'))
        return jsonify({'success': True, 'project': project.to_dict()})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@projects_bp.route('/edit', methods=['POST'])
def project_edit():
    data = request.get_json(silent=True) or request.form.to_dict()
    project_id = data.get('id')
    if not project_id:
        return jsonify({'success': False, 'error': 'Project id is required'}), 400

    updates = {k: data[k] for k in ('name', 'description', 'color') if k in data}
    if 'name' in updates:
        updates['name'], error = validate_name(updates['name'], 'Project name')
        if error:
            return jsonify({'success': False, 'error': error}), 400

    project = update_project(current_store(), str(project_id), updates)
    if project is None:
        return jsonify({'success': False, 'error': 'Project not found'}), 404
    return jsonify({'success': True, 'project': project.to_dict()})


@projects_bp.route('/delete', methods=['POST'])
def project_delete():
    """Delete a project. Tasks in it are kept and unassigned."""
    data = request.get_json(silent=True) or request.form.to_dict()
    project_id = data.get('id')
    if not project_id:
        return jsonify({'success': False, 'error': 'Project id is required'}), 400

    if delete_project(current_store(), str(project_id)):
        return jsonify({'success': True})
    return jsonify({'success': False, 'error': 'Project not found'}), 404
