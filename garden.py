"""
garden.py — Garden plant lifecycle.

Provides:
- add_plant / update_plant / remove_plant / replant
- sweep_harvested: marks plants whose estimated harvest date has passed
- backfill_schedules: computes schedules for records stored without one
- upcoming_harvests / harvest_timeline: harvest-oriented views of the garden
- garden_summary: counts for the dashboard, tolerant of missing weather

A planting is identified by (name, date_planted).
"""

import logging

from models import Climate, GardenPlant, GrowthForm
from database import get_garden_plants, save_garden_plants
from schedule_engine import generate_schedule
from task_aggregator import todays_tasks
from utils.dates import to_instant, to_iso, now, as_date

logger = logging.getLogger(__name__)

READY_DAYS = 0
SOON_DAYS = 7

STAGE_SOON_DAYS = 15
STAGE_COMING_DAYS = 60
HARVEST_STAGES = ('soon', 'coming', 'waiting')


def _find(plants, name, date_planted):
    for plant in plants:
        if plant.same_planting(name, date_planted):
            return plant
    return None


def _reschedule(plant, climate):
    schedule, harvest = generate_schedule(plant.name, plant.date_planted, plant.growth_form, climate)
    plant.schedule = schedule
    plant.estimated_harvest_date = harvest


# ========================================
# CRUD
# ========================================

def add_plant(store, name, planting_date, growth_form=GrowthForm.SEEDLING.value,
              climate=Climate.TEMPERATE.value, location=None, notes=None):
    """
    Add a planting with its schedule and harvest estimate.

    Raises:
        ValueError: for an unknown growth form or climate, or a bad date.
    """
    plant = GardenPlant(
        name=name,
        date_planted=to_iso(planting_date),
        growth_form=GrowthForm(growth_form).value,
        location=location or None,
        notes=notes or None,
    )
    _reschedule(plant, climate)

    plants = get_garden_plants(store)
    plants.append(plant)
    save_garden_plants(store, plants)
    return plant


def update_plant(store, name, date_planted, updates, climate=Climate.TEMPERATE.value):
    """
    Update a planting.

    Location and notes are merged. A new planting date or growth form
    regenerates the schedule, replacing it wholesale (completion state
    on the old schedule is dropped).

    Returns:
        The updated GardenPlant, or None if the planting does not exist.
    """
    plants = get_garden_plants(store)
    plant = _find(plants, name, date_planted)
    if plant is None:
        return None

    for field_name in ('location', 'notes'):
        if field_name in updates:
            setattr(plant, field_name, updates[field_name] or None)

    regenerate = False
    if updates.get('date_planted'):
        new_date = to_iso(updates['date_planted'])
        if new_date != plant.date_planted:
            plant.date_planted = new_date
            regenerate = True
    if updates.get('growth_form'):
        growth_form = GrowthForm(updates['growth_form']).value
        if growth_form != plant.growth_form:
            plant.growth_form = growth_form
            regenerate = True

    if regenerate:
        _reschedule(plant, climate)

    save_garden_plants(store, plants)
    return plant


def remove_plant(store, name, date_planted):
    plants = get_garden_plants(store)
    remaining = [p for p in plants if not p.same_planting(name, date_planted)]
    if len(remaining) == len(plants):
        return False
    save_garden_plants(store, remaining)
    return True


def replant(store, name, date_planted, climate=Climate.TEMPERATE.value, today=None):
    """
    Replace a harvested planting with a fresh one planted today.

    The new record keeps location, notes and growth form; it gets a new
    planting date and schedule. The harvested record is removed.

    Returns:
        The new GardenPlant, or None if no harvested planting matches.
    """
    plants = get_garden_plants(store)
    old = _find(plants, name, date_planted)
    if old is None or not old.is_harvested:
        return None

    planted_at = now() if today is None else to_instant(today)
    fresh = GardenPlant(
        name=old.name,
        date_planted=planted_at.isoformat(),
        growth_form=old.growth_form,
        location=old.location,
        notes=old.notes,
    )
    _reschedule(fresh, climate)

    plants = [p for p in plants if not (p.same_planting(name, date_planted) and p.is_harvested)]
    plants.append(fresh)
    save_garden_plants(store, plants)
    return fresh


# ========================================
# Maintenance sweeps
# ========================================

def sweep_harvested(store, today=None):
    """
    Mark every active plant whose estimated harvest is due as harvested.

    Returns:
        Number of plants marked. The store is written only if that is > 0.
    """
    moment = now() if today is None else to_instant(today)
    plants = get_garden_plants(store)
    marked = 0
    for plant in plants:
        if plant.is_harvested or not plant.estimated_harvest_date:
            continue
        try:
            harvest = to_instant(plant.estimated_harvest_date)
        except ValueError as e:
            logger.warning("Bad harvest date on %s (%s): %s", plant.name, plant.date_planted, e)
            continue
        if harvest <= moment:
            plant.is_harvested = True
            plant.harvested_date = moment.isoformat()
            marked += 1

    if marked:
        save_garden_plants(store, plants)
        logger.info("Marked %d plant(s) as harvested", marked)
    return marked


def backfill_schedules(store, climate=Climate.TEMPERATE.value):
    """Generate schedule and harvest date for records stored without them."""
    plants = get_garden_plants(store)
    filled = 0
    for plant in plants:
        if plant.schedule and plant.estimated_harvest_date:
            continue
        try:
            _reschedule(plant, climate)
        except ValueError as e:
            logger.warning("Cannot schedule %s (%s): %s", plant.name, plant.date_planted, e)
            continue
        filled += 1

    if filled:
        save_garden_plants(store, plants)
        logger.info("Generated schedules for %d legacy plant record(s)", filled)
    return filled


# ========================================
# Harvest views
# ========================================

def _active_with_days(store, today):
    day = as_date(today)
    result = []
    for plant in get_garden_plants(store):
        if plant.is_harvested or not plant.estimated_harvest_date:
            continue
        try:
            days_until = (as_date(plant.estimated_harvest_date) - day).days
        except ValueError:
            continue
        result.append((plant, days_until))
    result.sort(key=lambda item: to_instant(item[0].estimated_harvest_date))
    return result


def upcoming_harvests(store, today=None, limit=5):
    """
    Active plants with a harvest date today or later, soonest first.

    Returns:
        List of dicts: {'plant', 'days_until', 'is_ready', 'is_soon'}
    """
    upcoming = []
    for plant, days_until in _active_with_days(store, today):
        if days_until < 0:
            continue
        upcoming.append({
            'plant': plant,
            'days_until': days_until,
            'is_ready': days_until <= READY_DAYS,
            'is_soon': READY_DAYS < days_until <= SOON_DAYS,
        })
    return upcoming[:limit]


def harvest_stage(days_until):
    if days_until <= STAGE_SOON_DAYS:
        return 'soon'
    if days_until <= STAGE_COMING_DAYS:
        return 'coming'
    return 'waiting'


def harvest_timeline(store, stage='all', today=None):
    """Active plants by harvest date, optionally limited to one stage."""
    timeline = []
    for plant, days_until in _active_with_days(store, today):
        plant_stage = harvest_stage(days_until)
        if stage != 'all' and plant_stage != stage:
            continue
        timeline.append({'plant': plant, 'days_until': days_until, 'stage': plant_stage})
    return timeline


def garden_summary(store, weather=None, today=None):
    """
    Dashboard counts for the garden.

    Args:
        store: KeyValueStore or MemoryStore
        weather: WeatherReading, or None when the weather service is unavailable
        today: date or datetime, defaults to now

    Returns:
        Dict with plant counts, pending task counts and the weather reading.
    """
    plants = get_garden_plants(store)
    active = [p for p in plants if not p.is_harvested]
    today_tasks = todays_tasks(store, today)
    ready = [h for h in upcoming_harvests(store, today) if h['is_ready']]
    return {
        'active_plants': len(active),
        'harvested_plants': len(plants) - len(active),
        'tasks_today': len(today_tasks['custom']) + len(today_tasks['suggestions']),
        'ready_to_harvest': len(ready),
        'weather': weather,
    }
