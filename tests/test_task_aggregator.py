"""
tests/test_task_aggregator.py — Tests for task loading, normalization and mutations.

Tests cover:
- Priority normalization (legacy values, idempotence)
- Merge and due-date sort of system and custom tasks
- Self-healing write-back of priorities and date-only due dates
- Completion toggling and missing references
- Custom task CRUD, project CRUD and unassign on delete
- Today's tasks
"""

import json
from datetime import date, datetime

import pytest

from database import (
    MemoryStore, get_custom_tasks, get_garden_plants, save_garden_plants,
    save_custom_tasks, CUSTOM_TASKS_KEY, GARDEN_PLANTS_KEY,
)
from models import CustomTask, GardenPlant, ScheduledTask, TaskWithSource
from task_aggregator import (
    normalize_priority, normalize_category, load_all_tasks, toggle_complete, find_task,
    add_custom_task, update_custom_task, delete_custom_task,
    add_project, update_project, delete_project, list_projects, todays_tasks,
)
from utils.dates import local_date, to_instant
from view_projector import filter_tasks, project


def _plant(name='Kale', planted='2024-04-01T00:00:00+00:00', due_dates=('2024-06-01T00:00:00+00:00',),
           harvested=False):
    return GardenPlant(
        name=name,
        date_planted=planted,
        growth_form='seed',
        estimated_harvest_date='2024-07-01T00:00:00+00:00',
        schedule=[ScheduledTask(1, f'Task {i}', '', False, due, 'pest') for i, due in enumerate(due_dates)],
        is_harvested=harvested,
    )


def _custom(task_id='c1', due='2024-05-15T00:00:00+00:00', priority='important', **kwargs):
    return CustomTask(id=task_id, activity=kwargs.pop('activity', f'Custom {task_id}'),
                      due_date=due, priority=priority, **kwargs)


@pytest.fixture
def store():
    return MemoryStore()


# ========================================
# Normalization
# ========================================

class TestNormalizePriority:

    @pytest.mark.parametrize('legacy,canonical', [
        ('high', 'urgent-important'),
        ('medium', 'important'),
        ('low', 'nice-to-do'),
    ])
    def test_legacy_values(self, legacy, canonical):
        assert normalize_priority(legacy) == canonical

    @pytest.mark.parametrize('value', ['urgent-important', 'urgent', 'important', 'nice-to-do'])
    def test_canonical_unchanged(self, value):
        assert normalize_priority(value) == value

    @pytest.mark.parametrize('value', ['critical', '', None, 3, 'HIGHEST'])
    def test_unknown_defaults_to_important(self, value):
        assert normalize_priority(value) == 'important'

    @pytest.mark.parametrize('value', ['high', 'medium', 'low', 'urgent', 'bogus', None])
    def test_idempotent(self, value):
        once = normalize_priority(value)
        assert normalize_priority(once) == once

    def test_unknown_category_is_other(self):
        assert normalize_category('weeding') == 'other'
        assert normalize_category('pest') == 'pest'


# ========================================
# Loading
# ========================================

class TestLoadAllTasks:

    def test_sorted_by_due_date(self, store):
        save_garden_plants(store, [_plant(due_dates=('2024-06-01T00:00:00+00:00',))])
        save_custom_tasks(store, [_custom(due='2024-05-15T00:00:00+00:00')])

        tasks = load_all_tasks(store)
        assert [t.source for t in tasks] == ['custom', 'system']

    def test_toggle_then_reload_moves_task_to_completed(self, store):
        save_garden_plants(store, [_plant(due_dates=('2024-06-01T00:00:00+00:00',))])
        save_custom_tasks(store, [_custom(due='2024-05-15T00:00:00+00:00')])

        custom = load_all_tasks(store)[0]
        assert toggle_complete(store, custom) is True

        tasks = load_all_tasks(store)
        completed = filter_tasks(tasks, 'completed')
        pending = filter_tasks(tasks, 'pending')
        assert [t.custom_task_id for t in completed] == ['c1']
        assert 'c1' not in [t.custom_task_id for t in pending]

    def test_equal_dates_keep_source_order(self, store):
        same = '2024-06-01T00:00:00+00:00'
        save_garden_plants(store, [_plant(due_dates=(same,))])
        save_custom_tasks(store, [_custom(due=same)])
        assert [t.source for t in load_all_tasks(store)] == ['system', 'custom']

    def test_harvested_plants_excluded(self, store):
        save_garden_plants(store, [_plant(harvested=True), _plant(name='Peas')])
        assert {t.plant_name for t in load_all_tasks(store)} == {'Peas'}

    def test_back_references(self, store):
        plant = _plant(due_dates=('2024-06-01T00:00:00+00:00', '2024-06-08T00:00:00+00:00'))
        save_garden_plants(store, [plant])
        tasks = load_all_tasks(store)
        assert [(t.plant_name, t.plant_date_planted, t.task_index) for t in tasks] == [
            ('Kale', plant.date_planted, 0),
            ('Kale', plant.date_planted, 1),
        ]
        assert all(t.priority is None for t in tasks)

    def test_empty_store(self, store):
        assert load_all_tasks(store) == []

    def test_malformed_json_is_empty_not_error(self):
        store = MemoryStore({GARDEN_PLANTS_KEY: '[{"name": ', CUSTOM_TASKS_KEY: 'oops'})
        assert load_all_tasks(store) == []
        assert project(load_all_tasks(store), 'category') == {}

    def test_mixed_date_formats_sorted(self, store):
        save_custom_tasks(store, [
            _custom('a', due='2024-05-20T10:00:00.000Z'),
            _custom('b', due='2024-05-10'),
            _custom('c', due='2024-05-15T08:00:00+02:00'),
        ])
        assert [t.custom_task_id for t in load_all_tasks(store)] == ['b', 'c', 'a']


class TestSelfHealing:

    def test_legacy_priority_written_back(self, store):
        save_custom_tasks(store, [_custom('a', priority='high'), _custom('b', priority='low'),
                                  _custom('c', priority=None)])
        tasks = load_all_tasks(store)
        assert [t.priority for t in tasks] == ['urgent-important', 'nice-to-do', 'important']
        assert [t.priority for t in get_custom_tasks(store)] == ['urgent-important', 'nice-to-do', 'important']

    def test_date_only_due_date_written_back(self, store):
        save_custom_tasks(store, [_custom('a', due='2024-05-15')])
        load_all_tasks(store)
        stored = get_custom_tasks(store)[0].due_date
        assert 'T' in stored
        assert to_instant(stored) == datetime(2024, 5, 15).astimezone()

    def test_canonical_data_not_rewritten(self):
        raw = json.dumps([_custom('a').to_dict()])
        store = MemoryStore({CUSTOM_TASKS_KEY: raw})
        load_all_tasks(store)
        assert store.get(CUSTOM_TASKS_KEY) == raw


# ========================================
# Toggling
# ========================================

class TestToggleComplete:

    def test_toggle_system_task(self, store):
        save_garden_plants(store, [_plant(due_dates=('2024-06-01T00:00:00+00:00', '2024-06-08T00:00:00+00:00'))])
        second = load_all_tasks(store)[1]
        assert toggle_complete(store, second) is True

        plant = get_garden_plants(store)[0]
        assert [t.completed for t in plant.schedule] == [False, True]

    def test_toggle_twice_restores(self, store):
        save_custom_tasks(store, [_custom()])
        task = load_all_tasks(store)[0]
        toggle_complete(store, task)
        toggle_complete(store, task)
        assert get_custom_tasks(store)[0].completed is False

    def test_same_name_different_planting(self, store):
        save_garden_plants(store, [
            _plant(planted='2024-04-01T00:00:00+00:00'),
            _plant(planted='2024-04-15T00:00:00+00:00'),
        ])
        tasks = load_all_tasks(store)
        later = [t for t in tasks if t.plant_date_planted == '2024-04-15T00:00:00+00:00'][0]
        toggle_complete(store, later)
        plants = get_garden_plants(store)
        assert plants[0].schedule[0].completed is False
        assert plants[1].schedule[0].completed is True

    def test_missing_plant_is_noop(self, store):
        ghost = TaskWithSource('x', '', False, to_instant('2024-06-01'), 'pest', 'system',
                               plant_name='Ghost', plant_date_planted='2024-01-01', task_index=0)
        assert toggle_complete(store, ghost) is False
        assert get_garden_plants(store) == []

    def test_missing_task_index_is_noop(self, store):
        save_garden_plants(store, [_plant()])
        task = load_all_tasks(store)[0]
        task.task_index = 7
        assert toggle_complete(store, task) is False

    def test_missing_custom_task_is_noop(self, store):
        ghost = TaskWithSource('x', '', False, to_instant('2024-06-01'), 'other', 'custom',
                               custom_task_id='nope')
        assert toggle_complete(store, ghost) is False

    def test_find_task(self, store):
        save_garden_plants(store, [_plant()])
        save_custom_tasks(store, [_custom()])
        tasks = load_all_tasks(store)
        assert find_task(tasks, 'custom', custom_task_id='c1').custom_task_id == 'c1'
        found = find_task(tasks, 'system', plant_name='Kale',
                          plant_date_planted='2024-04-01T00:00:00+00:00', task_index=0)
        assert found.is_system
        assert find_task(tasks, 'custom', custom_task_id='zzz') is None

    def test_plant_with_broken_schedule_entry_survives_toggle(self, store):
        tomatoes = _plant('Tomatoes', due_dates=('2024-06-02T00:00:00+00:00', '2024-06-09T00:00:00+00:00')).to_dict()
        del tomatoes['schedule'][0]['activity']
        store.set(GARDEN_PLANTS_KEY, json.dumps([_plant().to_dict(), tomatoes]))

        kale_task = [t for t in load_all_tasks(store) if t.plant_name == 'Kale'][0]
        assert toggle_complete(store, kale_task) is True

        plants = get_garden_plants(store)
        assert [p.name for p in plants] == ['Kale', 'Tomatoes']
        assert plants[0].schedule[0].completed is True
        assert [t.activity for t in plants[1].schedule] == ['Task 1']


# ========================================
# Custom tasks and projects
# ========================================

class TestCustomTaskCRUD:

    def test_add_normalizes(self, store):
        task = add_custom_task(store, 'Order seeds', '2024-05-01', priority='high', category='shopping')
        assert task.priority == 'urgent-important'
        assert task.category == 'other'
        assert 'T' in task.due_date
        assert get_custom_tasks(store) == [task]

    def test_ids_unique(self, store):
        ids = {add_custom_task(store, f'Task {i}', '2024-05-01').id for i in range(5)}
        assert len(ids) == 5

    def test_update(self, store):
        task = add_custom_task(store, 'Order seeds', '2024-05-01')
        updated = update_custom_task(store, task.id, {'activity': 'Order bulbs', 'priority': 'medium',
                                                      'due_date': '2024-06-02', 'unknown': 1})
        assert updated.activity == 'Order bulbs'
        assert updated.priority == 'important'
        assert local_date(updated.due_date) == date(2024, 6, 2)

    def test_update_missing(self, store):
        assert update_custom_task(store, 'nope', {'activity': 'x'}) is None

    def test_delete(self, store):
        task = add_custom_task(store, 'Order seeds', '2024-05-01')
        assert delete_custom_task(store, task.id) is True
        assert delete_custom_task(store, task.id) is False
        assert get_custom_tasks(store) == []


class TestProjects:

    def test_add_and_list(self, store):
        project_ = add_project(store, 'Front beds', 'Spring work')
        assert project_.color == '#10b981'
        assert [p.name for p in list_projects(store)] == ['Front beds']

    def test_update(self, store):
        project_ = add_project(store, 'Front beds')
        updated = update_project(store, project_.id, {'name': 'Back beds', 'color': '#ff0000'})
        assert updated.name == 'Back beds'
        assert updated.color == '#ff0000'
        assert update_project(store, 'missing', {'name': 'x'}) is None

    def test_delete_unassigns_tasks(self, store):
        project_ = add_project(store, 'Front beds')
        add_custom_task(store, 'Weed', '2024-05-01', project_id=project_.id)
        add_custom_task(store, 'Mulch', '2024-05-02', project_id=project_.id)
        add_custom_task(store, 'Loose', '2024-05-03')

        assert delete_project(store, project_.id) is True

        tasks = load_all_tasks(store)
        assert all(t.project_id is None for t in tasks)
        groups = project(tasks, 'project')
        assert list(groups) == ['unassigned']
        assert len(groups['unassigned']) == 3
        assert list_projects(store) == []

    def test_delete_missing_project_still_cleans_tasks(self, store):
        save_custom_tasks(store, [CustomTask(id='1', activity='Weed', due_date='2024-05-01T00:00:00+00:00',
                                             priority='important', project_id='gone')])
        assert delete_project(store, 'gone') is False
        assert get_custom_tasks(store)[0].project_id is None

    def test_add_with_unknown_project_is_unassigned(self, store):
        task = add_custom_task(store, 'Weed', '2024-05-01', project_id='gone')
        assert task.project_id is None
        assert get_custom_tasks(store)[0].project_id is None

    def test_update_project_reference(self, store):
        project_ = add_project(store, 'Front beds')
        task = add_custom_task(store, 'Weed', '2024-05-01')

        assert update_custom_task(store, task.id, {'project_id': project_.id}).project_id == project_.id
        assert update_custom_task(store, task.id, {'project_id': 'gone'}).project_id is None
        assert get_custom_tasks(store)[0].project_id is None


# ========================================
# Today
# ========================================

class TestTodaysTasks:

    def test_split_by_source(self, store):
        today = date(2024, 6, 1)
        save_garden_plants(store, [_plant(due_dates=(
            datetime(2024, 6, 1).astimezone().isoformat(),
            datetime(2024, 6, 2).astimezone().isoformat(),
        ))])
        add_custom_task(store, 'Weed', '2024-06-01')
        done = add_custom_task(store, 'Done already', '2024-06-01')
        update_custom_task(store, done.id, {'completed': True})

        due = todays_tasks(store, today)
        assert [t.activity for t in due['custom']] == ['Weed']
        assert [t.activity for t in due['suggestions']] == ['Task 0']
