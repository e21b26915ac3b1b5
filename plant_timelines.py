"""
plant_timelines.py — Timeline Registry: static growth timelines per plant.

Each entry gives sow→seedling and seedling→harvest durations (days), the
harvest window, per-climate adjustments (growth multiplier, watering
cadence, extra care reminders) and the ordered key care activities.

The table is read-only reference data. Lookups are by PlantName; any name
that is not registered (matched case-sensitively) gets DEFAULT_TIMELINE.
"""

import logging
from types import MappingProxyType

from models import PlantName, Climate, KeyActivity, ClimateAdjustment, PlantTimeline

logger = logging.getLogger(__name__)


def _climates(warm, cool, temperate):
    """Build the climate table from (multiplier, watering days, extra care) triples."""
    table = {}
    for climate, (multiplier, watering, extra) in (
        (Climate.WARM, warm), (Climate.COOL, cool), (Climate.TEMPERATE, temperate)
    ):
        table[climate.value] = ClimateAdjustment(multiplier, watering, tuple(extra))
    return MappingProxyType(table)


def _timeline(sow, grow, window, climates, activities):
    return PlantTimeline(
        sow_to_seedling_days=sow,
        seedling_to_harvest_days=grow,
        harvest_window_days=window,
        climate_adjustments=climates,
        key_activities=tuple(KeyActivity(*a) for a in activities),
    )


# (timing_days, activity, details, category)
_TIMELINES = {
    PlantName.TOMATOES: _timeline(21, 60, 45, _climates(
        (0.9, 2, ['Provide afternoon shade', 'Monitor for blossom end rot']),
        (1.2, 4, ['Use frost protection when needed', 'Monitor night temperatures']),
        (1, 3, []),
    ), [
        (21, 'Fertilise', 'Use balanced 5-5-5 organic fertilizer, apply 2 tablespoons per plant in a ring around the stem', 'fertilizing'),
        (28, 'Monitor for pests', 'Check undersides of leaves for hornworms and aphids. Look for holes or spotted damage', 'pest'),
        (35, 'Install supports', 'Place cage or 6-foot stakes 4 inches from stem base. Ensure stakes are sturdy and well-anchored', 'planting'),
        (45, 'Remove suckers and lower leaves', 'Maintain plant health', 'pruning'),
        (60, 'Check first fruits for ripeness', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.BEANS: _timeline(7, 45, 30, _climates(
        (0.95, 2, ['Mulch to retain moisture']),
        (1.1, 4, ['Protect from late frosts']),
        (1, 3, []),
    ), [
        (7, 'Check for germination and thin to 4 inches', 'Remove weaker seedlings, leaving strongest plants 4-6 inches apart. Water around roots, not leaves, to prevent disease.', 'planting'),
        (14, 'Install trellis for climbing varieties', 'Set up 6-8 foot trellis or poles. Ensure supports are sturdy and well-anchored.', 'planting'),
        (21, 'Apply nitrogen-rich fertilizer', 'Use low-nitrogen organic fertilizer (5-10-10) as beans fix their own nitrogen. Apply 2-3 inches from stem base.', 'fertilizing'),
        (30, 'Check for bean beetles and rust', 'Look for yellow-brown spots on leaves (rust) and chewed holes (beetles). Remove affected leaves.', 'pest'),
        (45, 'Begin harvesting young pods', 'Harvest when pods are firm, crisp, and before seeds bulge. Pick regularly to encourage production.', 'harvest'),
        (60, 'Regular pod harvesting', 'Continue harvesting every 2-3 days. Pick all mature pods to maintain plant production.', 'harvest'),
    ]),
    PlantName.BROCCOLI: _timeline(14, 70, 14, _climates(
        (1.1, 2, ['Provide afternoon shade', 'Monitor for bolting']),
        (1, 4, ['Check for cabbage worms']),
        (1.05, 3, []),
    ), [
        (0, 'Sow seeds 1/2 inch deep', 'Plant in rich, well-draining soil with pH 6.0-6.8. Space seeds 3 inches apart in rows 24 inches apart.', 'planting'),
        (14, 'Thin seedlings to 18 inches apart', 'Select strongest seedlings with dark green leaves. Cut unwanted seedlings at soil level.', 'planting'),
        (28, 'Apply calcium-rich fertilizer', 'Use balanced fertilizer with added calcium (5-5-5 + Ca). Apply 2 tablespoons per plant in a ring 4 inches from stem.', 'fertilizing'),
        (35, 'Check for cabbage white butterflies', 'Inspect leaf undersides for yellow eggs and green caterpillars. Consider row covers or organic BT spray.', 'pest'),
        (50, 'Remove yellowing lower leaves', 'Cut off any yellowing or damaged leaves at the stem. Improve air circulation.', 'pruning'),
        (65, 'Monitor head development', 'Check central head size - should be 4-7 inches wide. Look for tight, compact buds.', 'harvest'),
        (70, 'Harvest before florets separate', 'Cut stem 6 inches below head when buds are tight and compact. Leave plant for side shoots.', 'harvest'),
    ]),
    PlantName.CARROTS: _timeline(14, 75, 21, _climates(
        (0.9, 2, ['Keep soil consistently moist']),
        (1.1, 4, ['Protect tops from frost']),
        (1, 3, []),
    ), [
        (0, 'Sow seeds 1/4 inch deep in loose soil', 'Prepare soil 12 inches deep, removing rocks. Space seeds 1/2 inch apart in rows 12-18 inches apart.', 'planting'),
        (14, 'Thin seedlings to 2 inches apart', 'When seedlings are 2 inches tall, thin to 2 inches apart. Cut tops rather than pulling.', 'planting'),
        (21, 'Apply light balanced fertilizer', 'Use low-nitrogen fertilizer (5-10-10). Too much nitrogen causes forking.', 'fertilizing'),
        (30, 'Monitor for carrot rust flies', 'Look for wilting, reddish-purple leaves and tunnels in roots. Consider row covers.', 'pest'),
        (45, 'Check root size by brushing away soil', 'Gently brush soil from crown to check width. Keep shoulders covered to prevent greening.', 'harvest'),
        (60, 'Begin harvesting baby carrots', 'Harvest when roots are 1/2 inch in diameter. Loosen soil before pulling.', 'harvest'),
        (75, 'Harvest full-sized carrots', 'Pull when tops of roots are 1-1.5 inches in diameter. Harvest before soil freezes.', 'harvest'),
    ]),
    PlantName.CABBAGE: _timeline(14, 85, 14, _climates(
        (1.1, 2, ['Monitor for splitting heads']),
        (1, 4, ['Check for frost damage']),
        (1.05, 3, []),
    ), [
        (0, 'Sow seeds 1/2 inch deep', 'Plant in fertile soil with pH 6.0-6.8. Space seeds 2 inches apart in rows 24 inches apart.', 'planting'),
        (14, 'Thin to strongest seedling per spot', 'Select seedlings with sturdy stems. Space final plants 18-24 inches apart.', 'planting'),
        (28, 'Apply nitrogen-rich fertilizer', 'Use balanced organic fertilizer (10-5-5). Apply 2 tablespoons per plant in a ring 4 inches from stem.', 'fertilizing'),
        (42, 'Check for cabbage loopers', 'Look for small green caterpillars and holes in leaves. Remove by hand or use Bt spray.', 'pest'),
        (60, 'Remove yellowing outer leaves', 'Remove any yellowed, damaged, or diseased leaves at the base. Ensure good air circulation.', 'pruning'),
        (75, 'Test head firmness', 'Gently squeeze head - should be firm and compact. Monitor daily as harvest approaches.', 'harvest'),
        (85, 'Harvest when head is firm and full-sized', 'Cut stem at base with sharp knife. Leave a few outer leaves attached.', 'harvest'),
    ]),
    PlantName.LETTUCE: _timeline(7, 45, 14, _climates(
        (1.2, 2, ['Provide shade cloth', 'Monitor for bolting']),
        (1, 3, ['Protect from hard frost']),
        (1.1, 3, []),
    ), [
        (0, 'Sow seeds 1/8 inch deep', 'Scatter seeds lightly on prepared soil, barely cover with fine soil. Space rows 12-18 inches apart.', 'planting'),
        (7, 'Thin seedlings to 6 inches apart', 'Select strongest seedlings. For head lettuce, space 10-12 inches.', 'planting'),
        (14, 'Fertilise', 'Apply nitrogen-rich fertilizer (NPK 8-0-0) in a shallow furrow 3 inches from plant base.', 'fertilizing'),
        (21, 'Check for slugs and snails', 'Inspect plants early morning or evening. Look for irregular holes in leaves and silvery slime trails.', 'pest'),
        (30, 'Begin harvesting outer leaves', 'Harvest outer leaves when 4-6 inches long. Keep harvesting to prevent bolting.', 'harvest'),
        (40, 'Monitor for signs of bolting', 'Watch for center stem elongation and bitter taste. Harvest entire plant if bolting begins.', 'pest'),
    ]),
    PlantName.PEAS: _timeline(10, 60, 21, _climates(
        (1.2, 2, ['Mulch roots', 'Provide afternoon shade']),
        (1, 4, ['Check for frost damage']),
        (1.1, 3, []),
    ), [
        (10, 'Install pea supports/trellis', 'Support plant', 'planting'),
        (21, 'Check for pea moths', 'Monitor for pests', 'pest'),
        (35, 'Guide vines to supports', 'Monitor for growth', 'pruning'),
        (50, 'Watch for first flower formation', 'Monitor for growth', 'harvest'),
        (60, 'Begin harvesting pods when plump', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.PEPPERS: _timeline(21, 80, 45, _climates(
        (0.9, 2, ['Monitor for sunscald', 'Check moisture levels']),
        (1.3, 4, ['Use row covers', 'Protect from cold winds']),
        (1, 3, []),
    ), [
        (21, 'Transplant when 4-6 leaves appear', 'Monitor for growth', 'planting'),
        (28, 'Fertilise\nApply calcium-rich fertilizer with NPK 3-4-5', 'Provide essential nutrients', 'fertilizing'),
        (42, 'Check for aphids and mites', 'Monitor for pests', 'pest'),
        (60, 'Remove early flower buds', 'Maintain plant health', 'pruning'),
        (75, 'Begin harvesting when full-sized', 'Monitor for maturity', 'harvest'),
        (90, 'Regular harvesting for continued production', 'Monitor for growth', 'harvest'),
    ]),
    PlantName.SPINACH: _timeline(7, 40, 21, _climates(
        (1.3, 2, ['Provide shade', 'Watch for early bolting']),
        (1, 4, ['Protect from severe frost']),
        (1.1, 3, []),
    ), [
        (7, 'Thin to 3-4 inches apart', 'Monitor spacing', 'planting'),
        (14, 'Apply nitrogen-rich fertilizer', 'Provide essential nutrients', 'fertilizing'),
        (21, 'Check for leaf miners', 'Monitor for pests', 'pest'),
        (30, 'Begin harvesting outer leaves', 'Monitor for maturity', 'harvest'),
        (35, 'Monitor for flowering stems', 'Monitor for growth', 'pruning'),
    ]),
    PlantName.ZUCCHINI: _timeline(7, 50, 60, _climates(
        (0.9, 2, ['Monitor for powdery mildew', 'Mulch soil']),
        (1.2, 4, ['Use row covers until flowering']),
        (1, 3, []),
    ), [
        (14, 'Thin to strongest 2-3 plants per mound', 'Monitor spacing', 'planting'),
        (21, 'Apply balanced organic fertilizer', 'Provide essential nutrients', 'fertilizing'),
        (35, 'Monitor for squash bugs and beetles', 'Monitor for pests', 'pest'),
        (45, 'Remove any yellowing leaves', 'Maintain plant health', 'pruning'),
        (50, 'Begin harvesting when 6-8 inches long', 'Monitor for maturity', 'harvest'),
        (60, 'Harvest regularly to encourage production', 'Monitor for growth', 'harvest'),
    ]),
    PlantName.CUCUMBER: _timeline(7, 55, 45, _climates(
        (0.9, 2, ['Provide afternoon shade', 'Monitor for powdery mildew']),
        (1.2, 4, ['Use row covers until warm']),
        (1, 3, []),
    ), [
        (14, 'Thin to 2-3 strongest plants per mound', 'Monitor spacing', 'planting'),
        (21, 'Install trellis or support', 'Support plant', 'planting'),
        (28, 'Guide vines to supports', 'Monitor for growth', 'pruning'),
        (35, 'Monitor for cucumber beetles', 'Monitor for pests', 'pest'),
        (50, 'Begin harvesting when 6-8 inches', 'Monitor for maturity', 'harvest'),
        (60, 'Harvest regularly to encourage production', 'Monitor for growth', 'harvest'),
    ]),
    PlantName.ONIONS: _timeline(14, 100, 21, _climates(
        (1.1, 3, ['Mulch to retain moisture']),
        (1, 5, ['Protect from late frosts']),
        (1.05, 4, []),
    ), [
        (30, 'Begin nitrogen-rich fertilizer regime', 'Provide essential nutrients', 'fertilizing'),
        (45, 'Check for onion fly damage', 'Monitor for pests', 'pest'),
        (60, 'Stop fertilizing when bulbs start forming', 'Monitor for growth', 'fertilizing'),
        (90, 'Check for bulb maturity', 'Monitor for growth', 'harvest'),
        (100, 'Harvest when tops begin falling over', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.GARLIC: _timeline(30, 240, 21, _climates(
        (1.1, 4, ['Mulch heavily', 'Monitor soil moisture']),
        (1, 7, ['Protect from severe frost']),
        (1.05, 5, []),
    ), [
        (30, 'Check for emergence and mulch', 'Monitor for growth', 'planting'),
        (150, 'Remove any flower stalks (scapes)', 'Maintain plant health', 'pruning'),
        (180, 'Reduce watering as maturity approaches', 'Monitor for growth', 'pruning'),
        (210, 'Monitor leaf yellowing', 'Monitor for health', 'harvest'),
        (240, 'Harvest when 50% of leaves are yellow', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.RADISH: _timeline(5, 25, 10, _climates(
        (0.9, 2, ['Provide partial shade', 'Keep soil cool']),
        (1, 3, ['Monitor soil temperature']),
        (0.95, 2, []),
    ), [
        (7, 'Thin to 2 inches apart', 'Monitor spacing', 'planting'),
        (14, 'Check for flea beetles', 'Monitor for pests', 'pest'),
        (21, 'Test size by brushing soil away', 'Monitor for growth', 'harvest'),
        (25, 'Harvest before becoming woody', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.KALE: _timeline(10, 50, 90, _climates(
        (1.2, 2, ['Provide afternoon shade', 'Monitor for bolting']),
        (1, 4, ['Protect from extreme frost']),
        (1.1, 3, []),
    ), [
        (14, 'Thin to 18 inches apart', 'Monitor spacing', 'planting'),
        (21, 'Apply balanced organic fertilizer', 'Provide essential nutrients', 'fertilizing'),
        (35, 'Check for cabbage white butterflies', 'Monitor for pests', 'pest'),
        (45, 'Begin harvesting outer leaves', 'Monitor for maturity', 'harvest'),
        (60, 'Remove any yellowing leaves', 'Maintain plant health', 'pruning'),
    ]),
    PlantName.SWEET_CORN: _timeline(7, 75, 14, _climates(
        (0.9, 2, ['Monitor for corn earworm', 'Ensure good air circulation']),
        (1.2, 4, ['Wait for soil to warm', 'Protect from late frost']),
        (1, 3, []),
    ), [
        (14, 'Thin to strongest plants', 'Monitor spacing', 'planting'),
        (30, 'Side-dress with nitrogen fertilizer', 'Provide essential nutrients', 'fertilizing'),
        (45, 'Watch for corn borers', 'Monitor for pests', 'pest'),
        (60, 'Check silk development', 'Monitor for growth', 'harvest'),
        (75, 'Test kernels for milk stage', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.EGGPLANT: _timeline(21, 70, 45, _climates(
        (0.9, 2, ['Monitor for spider mites', 'Provide support for heavy fruits']),
        (1.3, 4, ['Use black plastic mulch', 'Protect from cold']),
        (1, 3, []),
    ), [
        (21, 'Transplant when soil is warm', 'Monitor for growth', 'planting'),
        (35, 'Apply calcium-rich fertilizer', 'Provide essential nutrients', 'fertilizing'),
        (45, 'Check for flea beetles', 'Monitor for pests', 'pest'),
        (60, 'Support heavy branches', 'Support plant', 'pruning'),
        (70, 'Harvest when skin is glossy', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.BRUSSELS_SPROUTS: _timeline(14, 100, 30, _climates(
        (1.2, 2, ['Provide afternoon shade', 'Watch for bolting']),
        (1, 4, ['Mulch roots', 'Protect from strong winds']),
        (1.1, 3, []),
    ), [
        (14, 'Thin to 2 feet apart', 'Monitor spacing', 'planting'),
        (45, 'Remove yellowing bottom leaves', 'Maintain plant health', 'pruning'),
        (60, 'Top plants to focus growth', 'Monitor for growth', 'pruning'),
        (80, 'Check sprout development', 'Monitor for growth', 'harvest'),
        (100, 'Harvest from bottom up when firm', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.SWEET_POTATO: _timeline(21, 100, 30, _climates(
        (0.9, 3, ['Mulch soil', 'Monitor for vine borers']),
        (1.3, 5, ['Use black plastic mulch', 'Protect vines from wind']),
        (1, 4, []),
    ), [
        (21, 'Train vines in rows', 'Monitor for growth', 'pruning'),
        (40, 'Add phosphorus-rich fertilizer', 'Provide essential nutrients', 'fertilizing'),
        (60, 'Check for sweet potato weevils', 'Monitor for pests', 'pest'),
        (90, 'Test tuber size', 'Monitor for growth', 'harvest'),
        (100, 'Harvest before soil cools', 'Monitor for maturity', 'harvest'),
    ]),
    PlantName.RADISH_SPROUTS: _timeline(3, 10, 5, _climates(
        (0.9, 1, ['Keep soil consistently moist', 'Ensure good air circulation']),
        (1.1, 2, ['Maintain room temperature']),
        (1, 1, []),
    ), [
        (3, 'Check germination\nEnsure even moisture and remove dome when sprouted', 'Monitor for growth', 'planting'),
        (5, 'Monitor growth\nCheck moisture twice daily, ensure good airflow to prevent mold', 'Monitor for health', 'pest'),
        (10, 'Begin harvest\nCut just above soil level when stems reach 2-3 inches', 'Monitor for maturity', 'harvest'),
        (13, 'Complete harvest\nHarvest any remaining sprouts before they become too mature', 'Monitor for maturity', 'harvest'),
    ]),
}

PLANT_TIMELINES = MappingProxyType(_TIMELINES)

DEFAULT_TIMELINE = _timeline(14, 60, 30, _climates(
    (1, 2, ['Monitor moisture levels']),
    (1.2, 4, ['Protect from frost']),
    (1, 3, []),
), [
    (14, 'Check seedling spacing and thin if needed', 'Monitor spacing', 'planting'),
    (21, 'Apply balanced organic fertilizer', 'Provide essential nutrients', 'fertilizing'),
    (30, 'Inspect leaves for pest damage', 'Monitor for health', 'pest'),
    (45, 'Remove damaged or diseased foliage', 'Maintain plant health', 'pruning'),
    (60, 'Begin checking for harvest readiness', 'Monitor for maturity', 'harvest'),
])


def resolve_plant_name(name):
    """Return the PlantName for a display name, or None if unregistered."""
    if isinstance(name, PlantName):
        return name
    try:
        return PlantName(name)
    except ValueError:
        return None


def is_registered(name):
    return resolve_plant_name(name) in PLANT_TIMELINES


def get_timeline(name):
    """
    Look up the growth timeline for a plant.

    Names are matched case-sensitively against the registry; anything
    unregistered falls back to DEFAULT_TIMELINE.
    """
    key = resolve_plant_name(name)
    timeline = PLANT_TIMELINES.get(key) if key is not None else None
    if timeline is None:
        logger.debug("No timeline registered for %r, using default", name)
        return DEFAULT_TIMELINE
    return timeline


def plant_options():
    """Registered plant names, sorted for selection lists."""
    return sorted(p.value for p in PLANT_TIMELINES)
