# tests/test_utils/test_rate_limit.py
import threading
import pytest
from ficsync.utils.rate_limit import RateLimiter


@pytest.fixture
def limiter(fake_clock):
    return RateLimiter(5.0, clock=fake_clock, sleep=fake_clock.sleep)


def test_first_request_runs_immediately(limiter, fake_clock):
    """The first request never waits"""
    assert limiter.throttle(lambda: "page") == "page"
    assert fake_clock.sleeps == []


def test_second_request_waits_remaining_interval(limiter, fake_clock):
    """A request 2 seconds after the last one waits the remaining 3 seconds"""
    limiter.throttle(lambda: None)
    fake_clock.advance(2.0)

    starts = []
    limiter.throttle(lambda: starts.append(fake_clock()))

    assert fake_clock.sleeps == [pytest.approx(3.0)]
    assert starts[0] - 1000.0 >= 5.0


def test_no_wait_after_interval_elapsed(limiter, fake_clock):
    limiter.throttle(lambda: None)
    fake_clock.advance(6.0)
    limiter.throttle(lambda: None)
    assert fake_clock.sleeps == []


def test_interval_below_minimum_is_raised(fake_clock):
    """Configured intervals below five seconds are clamped up"""
    limiter = RateLimiter(1.0, clock=fake_clock, sleep=fake_clock.sleep)
    assert limiter.min_interval == 5.0


def test_interval_can_be_raised(fake_clock):
    limiter = RateLimiter(8.0, clock=fake_clock, sleep=fake_clock.sleep)
    limiter.throttle(lambda: None)
    limiter.throttle(lambda: None)
    assert fake_clock.sleeps == [pytest.approx(8.0)]


def test_failed_operation_still_advances_clock(limiter, fake_clock):
    """An operation that raises still counts as a request"""
    def failing():
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        limiter.throttle(failing)
    assert limiter.last_request_time == 1000.0

    limiter.throttle(lambda: None)
    assert fake_clock.sleeps == [pytest.approx(5.0)]


def test_time_until_next_request(limiter, fake_clock):
    assert limiter.time_until_next_request() == 0.0
    limiter.throttle(lambda: None)
    assert limiter.time_until_next_request() == pytest.approx(5.0)
    fake_clock.advance(2.0)
    assert limiter.time_until_next_request() == pytest.approx(3.0)
    fake_clock.advance(10.0)
    assert limiter.time_until_next_request() == 0.0


def test_reset_allows_immediate_request(limiter, fake_clock):
    limiter.throttle(lambda: None)
    limiter.reset()
    assert limiter.time_until_next_request() == 0.0
    limiter.throttle(lambda: None)
    assert fake_clock.sleeps == []


def test_concurrent_requests_are_spaced(limiter, fake_clock):
    """Requests from several threads start at least five seconds apart"""
    starts = []
    barrier = threading.Barrier(4)

    def worker():
        barrier.wait()
        limiter.throttle(lambda: starts.append(fake_clock()))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    starts.sort()
    assert len(starts) == 4
    for earlier, later in zip(starts, starts[1:]):
        assert later - earlier >= 5.0
