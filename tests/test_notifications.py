"""
tests/test_notifications.py — Tests for due-task reminders.
"""

from datetime import date

from database import MemoryStore
from garden import add_plant
from notifications import LoggingNotifier, RecordingNotifier, send_due_reminders
from task_aggregator import add_custom_task, load_all_tasks, toggle_complete


class FailingNotifier:
    """Simulates a denied notification permission."""

    def notify(self, subject, detail):
        raise PermissionError("notifications denied")


def _store_with_due_tasks():
    store = MemoryStore()
    add_plant(store, 'Tomatoes', '2024-03-01', 'seed')      # Fertilise due 2024-03-22
    add_custom_task(store, 'Buy stakes', '2024-03-22', details='Six foot')
    add_custom_task(store, 'Other day', '2024-03-23')
    return store


def test_one_reminder_per_task_due_today():
    store = _store_with_due_tasks()
    notifier = RecordingNotifier()
    assert send_due_reminders(store, notifier, date(2024, 3, 22)) == 2
    assert ('Buy stakes', 'Six foot') in notifier.sent
    assert any(subject == 'Tomatoes: Fertilise' for subject, _ in notifier.sent)


def test_completed_tasks_not_reminded():
    store = _store_with_due_tasks()
    for task in load_all_tasks(store):
        if task.activity == 'Buy stakes':
            toggle_complete(store, task)
    notifier = RecordingNotifier()
    send_due_reminders(store, notifier, date(2024, 3, 22))
    assert [s for s, _ in notifier.sent] == ['Tomatoes: Fertilise']


def test_failing_notifier_is_tolerated(caplog):
    store = _store_with_due_tasks()
    assert send_due_reminders(store, FailingNotifier(), date(2024, 3, 22)) == 0
    assert 'Notifier failed' in caplog.text
    # The engine still works afterwards
    assert len(load_all_tasks(store)) > 0


def test_missing_notifier():
    assert send_due_reminders(_store_with_due_tasks(), None, date(2024, 3, 22)) == 0


def test_logging_notifier(caplog):
    caplog.set_level('INFO', logger='notifications')
    LoggingNotifier().notify('Kale: Feed', 'Compost tea')
    assert 'Kale: Feed' in caplog.text
