# tests/test_jobs/test_download_job.py
import threading
import pytest

from ficsync.exceptions import TransportError, ParseError
from ficsync.jobs.download_job import DownloadJob
from ficsync.models import (
    DownloadStatus, Result, InProgress, Completed, Failed, Cancelled,
)
from ficsync.sa.repositories import ChapterRepository, DownloadRepository


@pytest.fixture
def make_job(database, mock_source):
    """Create a download row and a job for it, recording published states"""
    def _make(work_id="999", total=3, on_publish=None, max_attempts=3):
        with database.get_db() as session:
            DownloadRepository(session).reset_pending(work_id, total)
        published = []
        cancel_event = threading.Event()

        def publish(state):
            published.append(state)
            if on_publish is not None:
                on_publish(state, cancel_event)

        job = DownloadJob(
            database, mock_source, work_id, title="Stars Over Harbor",
            cancel_event=cancel_event, publish=publish,
            max_attempts=max_attempts, backoff_seconds=0,
        )
        return job, published
    return _make


def stored_chapters(database, work_id="999"):
    with database.get_db() as session:
        return [c.chapter_number for c in ChapterRepository(session).get_for_work(work_id)]


def download_row(database, work_id="999"):
    with database.get_db() as session:
        row = DownloadRepository(session).get(work_id)
        return row.status, row.downloaded_chapters, row.total_chapters, row.error_message


def test_download_stores_every_chapter(make_job, mock_source, chapter_factory, database):
    mock_source.get_all_chapters.return_value = Result.success(chapter_factory("999", 3))
    job, published = make_job()

    state = job.run()

    assert state == Completed()
    assert stored_chapters(database) == [1, 2, 3]
    assert download_row(database) == (DownloadStatus.COMPLETED.value, 3, 3, None)
    assert published == [
        InProgress(0.0, 0),
        InProgress(1 / 3, 1),
        InProgress(2 / 3, 2),
        InProgress(1.0, 3),
        Completed(),
    ]


def test_chapters_stored_in_ascending_order(make_job, mock_source, chapter_factory, database):
    mock_source.get_all_chapters.return_value = Result.success(list(reversed(chapter_factory("999", 3))))
    job, published = make_job()

    job.run()

    progress = [s.downloaded_chapters for s in published if isinstance(s, InProgress)]
    assert progress == [0, 1, 2, 3]
    assert stored_chapters(database) == [1, 2, 3]


def test_cancel_keeps_stored_chapters(make_job, mock_source, chapter_factory, database):
    """Test cancelling after two chapters keeps exactly those two"""
    mock_source.get_all_chapters.return_value = Result.success(chapter_factory("999", 5))

    def cancel_after_two(state, cancel_event):
        if isinstance(state, InProgress) and state.downloaded_chapters == 2:
            cancel_event.set()

    job, published = make_job(total=5, on_publish=cancel_after_two)

    state = job.run()

    assert state == Cancelled()
    assert published[-1] == Cancelled()
    assert stored_chapters(database) == [1, 2]
    assert download_row(database)[:2] == (DownloadStatus.CANCELLED.value, 2)


def test_cancelled_before_start(make_job, mock_source, database):
    job, published = make_job()
    job.cancel_event.set()

    assert job.run() == Cancelled()
    mock_source.get_all_chapters.assert_not_called()
    assert download_row(database)[0] == DownloadStatus.CANCELLED.value


def test_row_cancelled_elsewhere_stops_job(make_job, mock_source, chapter_factory, database):
    """Test a download cancelled through the database stores no further chapters"""
    mock_source.get_all_chapters.return_value = Result.success(chapter_factory("999", 4))

    def cancel_row(state, cancel_event):
        if isinstance(state, InProgress) and state.downloaded_chapters == 1:
            with database.get_db() as session:
                DownloadRepository(session).cancel("999")

    job, _ = make_job(total=4, on_publish=cancel_row)

    assert job.run() == Cancelled()
    assert stored_chapters(database) == [1]
    assert download_row(database)[:2] == (DownloadStatus.CANCELLED.value, 1)


def test_row_cancelled_before_start_is_not_restarted(make_job, mock_source, chapter_factory, database):
    """Test a queued download cancelled through the database never runs"""
    mock_source.get_all_chapters.return_value = Result.success(chapter_factory("999", 3))
    job, published = make_job()
    with database.get_db() as session:
        DownloadRepository(session).cancel("999")

    state = job.run()

    assert state == Cancelled()
    assert published == [Cancelled()]
    mock_source.get_all_chapters.assert_not_called()
    assert stored_chapters(database) == []
    assert download_row(database)[:2] == (DownloadStatus.CANCELLED.value, 0)


def test_row_cancelled_on_last_chapter_is_not_completed(make_job, mock_source, chapter_factory, database):
    """Test a cancel landing with the last chapter keeps the row CANCELLED"""
    mock_source.get_all_chapters.return_value = Result.success(chapter_factory("999", 2))

    def cancel_row(state, cancel_event):
        if isinstance(state, InProgress) and state.downloaded_chapters == 2:
            with database.get_db() as session:
                DownloadRepository(session).cancel("999")

    job, published = make_job(total=2, on_publish=cancel_row)

    assert job.run() == Cancelled()
    assert Completed() not in published
    assert stored_chapters(database) == [1, 2]
    assert download_row(database)[:2] == (DownloadStatus.CANCELLED.value, 2)


def test_row_deleted_during_download(make_job, mock_source, chapter_factory, database):
    mock_source.get_all_chapters.return_value = Result.success(chapter_factory("999", 3))

    def delete_row(state, cancel_event):
        if isinstance(state, InProgress) and state.downloaded_chapters == 1:
            with database.get_db() as session:
                DownloadRepository(session).delete("999")

    job, _ = make_job(on_publish=delete_row)

    assert job.run() == Cancelled()
    assert stored_chapters(database) == [1]
    with database.get_db() as session:
        assert DownloadRepository(session).get("999") is None


def test_transport_errors_are_retried(make_job, mock_source, chapter_factory, database):
    mock_source.get_all_chapters.side_effect = [
        Result.failure(TransportError("HTTP 503: Service Unavailable", status_code=503)),
        Result.failure(TransportError("Request timed out")),
        Result.success(chapter_factory("999", 2)),
    ]
    job, _ = make_job(total=2)

    assert job.run() == Completed()
    assert mock_source.get_all_chapters.call_count == 3
    assert stored_chapters(database) == [1, 2]


def test_retries_are_bounded(make_job, mock_source, database):
    mock_source.get_all_chapters.return_value = Result.failure(TransportError("Network error: reset"))
    job, published = make_job(max_attempts=2)

    state = job.run()

    assert state == Failed("Network error: reset")
    assert mock_source.get_all_chapters.call_count == 2
    assert download_row(database)[0] == DownloadStatus.FAILED.value
    assert download_row(database)[3] == "Network error: reset"


def test_parse_errors_are_not_retried(make_job, mock_source, database):
    mock_source.get_all_chapters.return_value = Result.failure(ParseError("Chapter content not found"))
    job, published = make_job()

    state = job.run()

    assert isinstance(state, Failed)
    assert mock_source.get_all_chapters.call_count == 1
    assert stored_chapters(database) == []
    assert published[-1] == state


def test_empty_chapter_list_fails(make_job, mock_source, database):
    mock_source.get_all_chapters.return_value = Result.success([])
    job, _ = make_job()

    assert job.run() == Failed("No chapters found")


def test_total_corrected_to_chapters_found(make_job, mock_source, chapter_factory, database):
    mock_source.get_all_chapters.return_value = Result.success(chapter_factory("999", 3))
    job, published = make_job(total=5)

    job.run()

    assert download_row(database)[1:3] == (3, 3)
    assert published[-2] == InProgress(1.0, 3)


def test_unexpected_exception_fails_job(make_job, mock_source, database):
    mock_source.get_all_chapters.side_effect = RuntimeError("disk on fire")
    job, published = make_job()

    assert job.run() == Failed("disk on fire")
    assert download_row(database)[0] == DownloadStatus.FAILED.value
