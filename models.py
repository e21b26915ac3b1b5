"""
models.py — Python dataclasses for the garden planner.

Records persisted in the key/value store (GardenPlant, CustomTask, Project)
serialize to plain dicts with to_dict() and are rebuilt with from_dict().
from_dict() also accepts the camelCase field names written by older
versions of the planner.
"""

import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

logger = logging.getLogger(__name__)


class PlantName(str, Enum):
    """Plants with a registered growth timeline."""
    TOMATOES = 'Tomatoes'
    BEANS = 'Beans'
    BROCCOLI = 'Broccoli'
    CARROTS = 'Carrots'
    CABBAGE = 'Cabbage'
    LETTUCE = 'Lettuce'
    PEAS = 'Peas'
    PEPPERS = 'Peppers'
    SPINACH = 'Spinach'
    ZUCCHINI = 'Zucchini'
    CUCUMBER = 'Cucumber'
    ONIONS = 'Onions'
    GARLIC = 'Garlic'
    RADISH = 'Radish'
    KALE = 'Kale'
    SWEET_CORN = 'Sweet Corn'
    EGGPLANT = 'Eggplant'
    BRUSSELS_SPROUTS = 'Brussels Sprouts'
    SWEET_POTATO = 'Sweet Potato'
    RADISH_SPROUTS = 'Radish Sprouts'


class Climate(str, Enum):
    WARM = 'warm'
    COOL = 'cool'
    TEMPERATE = 'temperate'


class GrowthForm(str, Enum):
    SEED = 'seed'
    SEEDLING = 'seedling'


class Category(str, Enum):
    PLANTING = 'planting'
    FERTILIZING = 'fertilizing'
    PRUNING = 'pruning'
    PEST = 'pest'
    HARVEST = 'harvest'
    CLIMATE = 'climate'
    OTHER = 'other'


class Priority(str, Enum):
    URGENT_IMPORTANT = 'urgent-important'
    URGENT = 'urgent'
    IMPORTANT = 'important'
    NICE_TO_DO = 'nice-to-do'


PRIORITY_ORDER = [p.value for p in Priority]
SYSTEM_CATEGORIES = [c.value for c in Category if c is not Category.OTHER]


# ========================================
# Timeline Registry types (immutable)
# ========================================

@dataclass(frozen=True)
class KeyActivity:
    """Care action at a fixed offset (days) from planting."""
    timing_days: int
    activity: str
    details: str
    category: str


@dataclass(frozen=True)
class ClimateAdjustment:
    growth_multiplier: float
    watering_frequency_days: int
    extra_care: tuple = ()


@dataclass(frozen=True)
class PlantTimeline:
    """Growth timeline for one plant."""
    sow_to_seedling_days: int
    seedling_to_harvest_days: int
    harvest_window_days: int
    climate_adjustments: Dict[str, ClimateAdjustment]
    key_activities: tuple = ()


# ========================================
# Persisted records
# ========================================

def _pick(data, *names, default=None):
    """Return the first key present in data among names."""
    for name in names:
        if name in data:
            return data[name]
    return default


def _require(data, *names):
    """Like _pick, but a missing or null value is a KeyError."""
    value = _pick(data, *names)
    if value is None:
        raise KeyError(names[0])
    return value


@dataclass
class ScheduledTask:
    """System-derived task embedded in GardenPlant.schedule."""
    week_number: int = 0
    activity: str = ""
    details: str = ""
    completed: bool = False
    due_date: str = ""
    category: str = Category.PLANTING.value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScheduledTask':
        return cls(
            week_number=int(_pick(data, 'week_number', 'week', default=0) or 0),
            activity=data['activity'],
            details=data.get('details') or "",
            completed=bool(data.get('completed', False)),
            due_date=_require(data, 'due_date', 'dueDate'),
            category=data.get('category') or Category.PLANTING.value,
        )


@dataclass
class GardenPlant:
    """A user's live planting."""
    name: str = ""
    date_planted: str = ""
    growth_form: str = GrowthForm.SEEDLING.value
    location: Optional[str] = None
    notes: Optional[str] = None
    estimated_harvest_date: Optional[str] = None
    schedule: List[ScheduledTask] = field(default_factory=list)
    is_harvested: bool = False
    harvested_date: Optional[str] = None

    def same_planting(self, name: str, date_planted: str) -> bool:
        """(name, date_planted) is the identity of a planting."""
        return self.name == name and self.date_planted == date_planted

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['schedule'] = [task.to_dict() for task in self.schedule]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GardenPlant':
        name = data['name']
        schedule = []
        for position, item in enumerate(_pick(data, 'schedule', default=None) or []):
            try:
                schedule.append(ScheduledTask.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Dropping malformed schedule entry #%d of %s: %s", position, name, e)
        return cls(
            name=name,
            date_planted=_require(data, 'date_planted', 'datePlanted'),
            growth_form=_pick(data, 'growth_form', 'growthForm', 'type',
                              default=GrowthForm.SEEDLING.value),
            location=data.get('location'),
            notes=data.get('notes'),
            estimated_harvest_date=_pick(data, 'estimated_harvest_date',
                                         'estimatedHarvestDate', 'estimatedHarvest'),
            schedule=schedule,
            is_harvested=bool(_pick(data, 'is_harvested', 'isHarvested', default=False)),
            harvested_date=_pick(data, 'harvested_date', 'harvestedDate'),
        )


@dataclass
class CustomTask:
    """User-authored standalone task."""
    id: str = ""
    activity: str = ""
    details: str = ""
    completed: bool = False
    due_date: str = ""
    category: str = Category.OTHER.value
    priority: str = Priority.IMPORTANT.value
    project_id: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CustomTask':
        return cls(
            id=str(data['id']),
            activity=data.get('activity') or "",
            details=data.get('details') or "",
            completed=bool(data.get('completed', False)),
            due_date=_require(data, 'due_date', 'dueDate'),
            category=data.get('category') or Category.OTHER.value,
            priority=data.get('priority'),
            project_id=_pick(data, 'project_id', 'projectId') or None,
            created_at=_pick(data, 'created_at', 'createdAt'),
        )


@dataclass
class Project:
    """User-defined grouping label for custom tasks."""
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    color: str = "#10b981"
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            id=str(data['id']),
            name=data['name'],
            description=data.get('description'),
            color=data.get('color') or "#10b981",
            created_at=_pick(data, 'created_at', 'createdAt'),
        )


# ========================================
# Aggregated / view types
# ========================================

@dataclass
class TaskWithSource:
    """A system or custom task normalized into one shape for the views."""
    activity: str
    details: str
    completed: bool
    due_date: datetime
    category: str
    source: str  # 'system' | 'custom'
    week_number: int = 0
    plant_name: str = ""
    plant_date_planted: str = ""
    task_index: int = 0
    custom_task_id: Optional[str] = None
    priority: Optional[str] = None
    project_id: Optional[str] = None

    @property
    def is_system(self) -> bool:
        return self.source == 'system'

    @property
    def effective_priority(self) -> str:
        """System tasks carry no priority; they rank as important."""
        return self.priority or Priority.IMPORTANT.value

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['due_date'] = self.due_date.isoformat()
        return data


@dataclass
class TaskSources:
    """View preference: which task sources are shown."""
    show_custom: bool = True
    show_system: bool = False


@dataclass
class WeatherReading:
    """Reading supplied by the external weather service, when available."""
    temperature: float
    rainfall: float
    humidity: float
    forecast: List[Dict[str, Any]] = field(default_factory=list)
