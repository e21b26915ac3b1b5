"""
routes/preferences.py — View preference routes.

Provides:
- GET/POST /preferences/task-sources — Show custom tasks / show suggestions
- GET/POST /preferences/hide-completed — Hide completed suggestions
"""

from flask import Blueprint, request, jsonify

from database import (
    current_store, get_task_sources, set_task_sources,
    get_hide_completed_suggestions, set_hide_completed_suggestions
)
from utils.validators import parse_bool


preferences_bp = Blueprint('preferences', __name__, url_prefix='/preferences')


@preferences_bp.route('/task-sources', methods=['GET', 'POST'])
def task_sources():
    store = current_store()
    sources = get_task_sources(store)
    if request.method == 'POST':
        data = request.get_json(silent=True) or request.form.to_dict()
        if 'show_custom' in data:
            sources.show_custom = parse_bool(data['show_custom'])
        if 'show_system' in data:
            sources.show_system = parse_bool(data['show_system'])
        set_task_sources(store, sources)
    return jsonify({
        'success': True,
        'show_custom': sources.show_custom,
        'show_system': sources.show_system,
    })


@preferences_bp.route('/hide-completed', methods=['GET', 'POST'])
def hide_completed():
    store = current_store()
    if request.method == 'POST':
        data = request.get_json(silent=True) or request.form.to_dict()
        set_hide_completed_suggestions(store, parse_bool(data.get('hide_completed', True)))
    return jsonify({'success': True, 'hide_completed': get_hide_completed_suggestions(store)})
