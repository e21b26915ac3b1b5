"""
schedule_engine.py — Planting schedule derivation.

This module implements:
- Harvest date estimation from the plant's timeline, growth form and climate
- Dated care tasks from the timeline's key activities
- Climate-care reminders from the climate adjustment's extra care list

Algorithm details:
- Total growth days: seed = sow→seedling + seedling→harvest; seedling =
  seedling→harvest only. Multiplied by the climate growth multiplier and
  rounded half-up to whole days.
- Key activity due date: planting date + round(timing × multiplier) days.
  Week number: ceil(adjusted timing / 7).
- Excluded activities:
    - seedlings skip activities with timing < sow→seedling days
      (timing equal to sow→seedling days is kept)
    - initial sowing/planting actions ("sow seed", "plant seed",
      "seed packet", "plant according")
    - watering actions ("water", "moisture", "irrigation"); watering cadence
      belongs to the separate watering schedule
- Climate-care reminder i (0-based, after the watering filter):
  due at planting date + round(total growth days × 0.3 × (i + 1)) days,
  category 'climate'.

The generator is pure: the output depends only on its arguments. The task
list is returned unsorted (key activities first, then climate care).
"""

import math

from models import Category, Climate, GrowthForm, ScheduledTask
from plant_timelines import get_timeline
from utils.dates import add_days, to_instant


CLIMATE_CARE_SPACING = 0.3

PLANTING_ACTION_MARKERS = ('sow seed', 'plant seed', 'seed packet', 'plant according')
WATERING_MARKERS = ('water', 'moisture', 'irrigation')


def round_half_up(value):
    """Round to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))


def is_watering_text(text):
    lowered = text.lower()
    return any(marker in lowered for marker in WATERING_MARKERS)


def is_planting_action(text):
    lowered = text.lower()
    return any(marker in lowered for marker in PLANTING_ACTION_MARKERS)


def is_excluded_activity(activity, timeline, growth_form):
    """
    Decide whether a key activity is left out of a schedule.

    Args:
        activity: KeyActivity from the timeline
        timeline: PlantTimeline the activity belongs to
        growth_form: 'seed' or 'seedling'

    Returns:
        True if the activity must not be scheduled.
    """
    if growth_form == GrowthForm.SEEDLING.value and activity.timing_days < timeline.sow_to_seedling_days:
        return True
    return is_planting_action(activity.activity) or is_watering_text(activity.activity)


def base_growth_days(timeline, growth_form):
    """Unadjusted days from planting to harvest for a growth form."""
    if growth_form == GrowthForm.SEED.value:
        return timeline.sow_to_seedling_days + timeline.seedling_to_harvest_days
    return timeline.seedling_to_harvest_days


def total_growth_days(timeline, growth_form, climate):
    """Climate-adjusted days from planting to harvest."""
    adjustment = timeline.climate_adjustments[climate]
    return round_half_up(base_growth_days(timeline, growth_form) * adjustment.growth_multiplier)


def _coerce_enum_value(value, enum_cls):
    if isinstance(value, enum_cls):
        return value.value
    return enum_cls(value).value


def generate_schedule(plant_name, planting_date, growth_form, climate=Climate.TEMPERATE):
    """
    Generate the care schedule and estimated harvest for a planting.

    Args:
        plant_name: Plant display name (unregistered names use the default timeline)
        planting_date: Planting date (datetime, date, or ISO string; date-only
            strings mean local midnight)
        growth_form: 'seed' or 'seedling'
        climate: 'warm', 'cool' or 'temperate'

    Returns:
        (schedule, estimated_harvest_date) where schedule is a list of
        ScheduledTask and estimated_harvest_date is an ISO instant string.

    Raises:
        ValueError: for an unknown growth form or climate class.
    """
    growth_form = _coerce_enum_value(growth_form, GrowthForm)
    climate = _coerce_enum_value(climate, Climate)

    timeline = get_timeline(plant_name)
    adjustment = timeline.climate_adjustments[climate]
    start = to_instant(planting_date)

    growth_days = total_growth_days(timeline, growth_form, climate)
    estimated_harvest = add_days(start, growth_days)

    schedule = []
    for activity in timeline.key_activities:
        if is_excluded_activity(activity, timeline, growth_form):
            continue
        adjusted_timing = round_half_up(activity.timing_days * adjustment.growth_multiplier)
        schedule.append(ScheduledTask(
            week_number=math.ceil(adjusted_timing / 7),
            activity=activity.activity,
            details=activity.details,
            completed=False,
            due_date=add_days(start, adjusted_timing).isoformat(),
            category=activity.category,
        ))

    extra_care = [care for care in adjustment.extra_care if not is_watering_text(care)]
    for index, care in enumerate(extra_care):
        spacing = growth_days * CLIMATE_CARE_SPACING * (index + 1)
        offset = round_half_up(spacing)
        schedule.append(ScheduledTask(
            # Week comes from the unrounded spacing
            week_number=math.ceil(spacing / 7),
            activity=care,
            details=f"Climate-specific care for {climate} conditions",
            completed=False,
            due_date=add_days(start, offset).isoformat(),
            category=Category.CLIMATE.value,
        ))

    return schedule, estimated_harvest.isoformat()
