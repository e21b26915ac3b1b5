"""
routes/garden.py — Garden plant API routes.

Provides:
- GET /garden/plants — List plantings (active and harvested)
- POST /garden/plants/add — Add a planting (schedule computed on creation)
- POST /garden/plants/edit — Edit location/notes, or planting date (reschedules)
- POST /garden/plants/delete — Remove a planting
- POST /garden/plants/replant — Replace a harvested planting with a fresh one
- GET /garden/options — Registered plant names
- GET /garden/harvests — Upcoming harvests (next 5)
- GET /garden/timeline — Active plantings by harvest stage

Plantings are addressed by (name, date_planted).
"""

from flask import Blueprint, request, jsonify, current_app

from database import current_store, get_garden_plants
from garden import (
    add_plant, update_plant, remove_plant, replant,
    upcoming_harvests, harvest_timeline, HARVEST_STAGES
)
from plant_timelines import plant_options, is_registered
from utils.validators import (
    validate_name, validate_growth_form, validate_climate, validate_date, validate_choice
)

garden_bp = Blueprint('garden', __name__, url_prefix='/garden')


def _climate(data):
    return validate_climate(data.get('climate'), current_app.config['CLIMATE'])


def _planting_key(data):
    """(name, date_planted, error) addressing an existing planting."""
    name = data.get('name')
    date_planted = data.get('date_planted')
    if not name or not date_planted:
        return None, None, 'Plant name and planting date are required'
    return name, date_planted, None


# ========================================
# Plant List
# ========================================

@garden_bp.route('/plants')
def list_plants():
    """All plantings (JSON API)."""
    try:
        plants = get_garden_plants(current_store())
        return jsonify({
            'success': True,
            'active': [p.to_dict() for p in plants if not p.is_harvested],
            'harvested': [p.to_dict() for p in plants if p.is_harvested],
        })
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@garden_bp.route('/options')
def options():
    return jsonify({'success': True, 'plants': plant_options()})


# ========================================
# Plant CRUD
# ========================================

@garden_bp.route('/plants/add', methods=['POST'])
def plant_add():
    """Add a planting."""
    data = request.get_json(silent=True) or request.form.to_dict()

    name, error = validate_name(data.get('name'), 'Plant name')
    if error:
        return jsonify({'success': False, 'error': error}), 400
    planting_date, error = validate_date(data.get('date_planted'), 'Planting date')
    if error:
        return jsonify({'success': False, 'error': error}), 400
    growth_form, error = validate_growth_form(data.get('growth_form', 'seedling'))
    if error:
        return jsonify({'success': False, 'error': error}), 400
    climate, error = _climate(data)
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        plant = add_plant(
            current_store(), name, planting_date, growth_form, climate,
            location=data.get('location'), notes=data.get('notes'),
        )
        return jsonify({
            'success': True,
            'plant': plant.to_dict(),
            'registered': is_registered(name),
        })
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@garden_bp.route('/plants/edit', methods=['POST'])
def plant_edit():
    """Edit a planting. A new planting date regenerates its schedule."""
    data = request.get_json(silent=True) or request.form.to_dict()
    name, date_planted, error = _planting_key(data)
    if error:
        return jsonify({'success': False, 'error': error}), 400

    updates = {k: data[k] for k in ('location', 'notes') if k in data}
    if data.get('new_date_planted'):
        new_date, error = validate_date(data['new_date_planted'], 'Planting date')
        if error:
            return jsonify({'success': False, 'error': error}), 400
        updates['date_planted'] = new_date
    if data.get('growth_form'):
        growth_form, error = validate_growth_form(data['growth_form'])
        if error:
            return jsonify({'success': False, 'error': error}), 400
        updates['growth_form'] = growth_form
    climate, error = _climate(data)
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        plant = update_plant(current_store(), name, date_planted, updates, climate)
        if plant is None:
            return jsonify({'success': False, 'error': 'Planting not found'}), 404
        return jsonify({'success': True, 'plant': plant.to_dict()})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@garden_bp.route('/plants/delete', methods=['POST'])
def plant_delete():
    """Remove a planting."""
    data = request.get_json(silent=True) or request.form.to_dict()
    name, date_planted, error = _planting_key(data)
    if error:
        return jsonify({'success': False, 'error': error}), 400

    if remove_plant(current_store(), name, date_planted):
        return jsonify({'success': True})
    return jsonify({'success': False, 'error': 'Planting not found'}), 404


@garden_bp.route('/plants/replant', methods=['POST'])
def plant_replant():
    """Replant a harvested planting from today."""
    data = request.get_json(silent=True) or request.form.to_dict()
    name, date_planted, error = _planting_key(data)
    if error:
        return jsonify({'success': False, 'error': error}), 400
    climate, error = _climate(data)
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        plant = replant(current_store(), name, date_planted, climate)
        if plant is None:
            return jsonify({'success': False, 'error': 'No harvested planting to replant'}), 404
        return jsonify({'success': True, 'plant': plant.to_dict()})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


# ========================================
# Harvest views
# ========================================

def _harvest_entry(entry):
    item = dict(entry)
    item['plant'] = entry['plant'].to_dict()
    return item


@garden_bp.route('/harvests')
def harvests():
    """Upcoming harvests, soonest first."""
    limit = request.args.get('limit', 5, type=int)
    try:
        upcoming = upcoming_harvests(current_store(), limit=limit)
        return jsonify({'success': True, 'harvests': [_harvest_entry(h) for h in upcoming]})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@garden_bp.route('/timeline')
def timeline():
    """Active plantings by harvest date, filtered by stage."""
    stage, error = validate_choice(request.args.get('stage', 'all'), ('all',) + HARVEST_STAGES, 'stage')
    if error:
        return jsonify({'success': False, 'error': error}), 400
    try:
        entries = harvest_timeline(current_store(), stage)
        return jsonify({'success': True, 'timeline': [_harvest_entry(e) for e in entries]})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500
