"""
notifications.py — Task reminders through an injected notifier.

A notifier is any object with notify(subject, detail). Delivery is
best effort: a notifier that fails (permission denied, no display) is
logged and the remaining reminders are still attempted.
"""

import logging

from task_aggregator import todays_tasks

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Default notifier: writes reminders to the application log."""

    def notify(self, subject, detail):
        logger.info("Reminder: %s (%s)", subject, detail)


class RecordingNotifier:
    """Keeps every notification in memory."""

    def __init__(self):
        self.sent = []

    def notify(self, subject, detail):
        self.sent.append((subject, detail))


def reminder_text(task):
    """(subject, detail) for a task reminder."""
    if task.is_system:
        return f"{task.plant_name}: {task.activity}", task.details
    return task.activity, task.details


def send_due_reminders(store, notifier, today=None):
    """
    Notify once for every pending task due today.

    Returns:
        Number of reminders delivered.
    """
    if notifier is None:
        return 0

    due = todays_tasks(store, today)
    delivered = 0
    for task in due['custom'] + due['suggestions']:
        subject, detail = reminder_text(task)
        try:
            notifier.notify(subject, detail)
        except Exception as e:
            logger.warning("Notifier failed for %r: %s", subject, e)
            continue
        delivered += 1
    return delivered
