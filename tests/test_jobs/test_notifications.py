# tests/test_jobs/test_notifications.py
from ficsync.jobs import UpdatesFound, DownloadFinished
from ficsync.jobs.notifications import CallbackNotifier
from ficsync.models import DownloadStatus


def test_updates_found_message():
    assert UpdatesFound(1).message == "1 work has new chapters"
    assert UpdatesFound(3).message == "3 works have new chapters"


def test_callback_notifier_forwards_events():
    notifier = CallbackNotifier()
    received = []
    notifier.subscribe(received.append)

    event = DownloadFinished("999", "Stars Over Harbor", DownloadStatus.FAILED, "HTTP 503")
    notifier.notify(event)

    assert received == [event]
