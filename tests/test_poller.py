"""
Unit tests for the bounded wait loops
"""
import pytest
from remotefs.libs.errors import BootstrapError, PollTimeout
from remotefs.libs.poller import PollStatus, poll_until, wait_for


def test_ready_immediately_never_sleeps(clock):
    result = poll_until(lambda: True, 1, 10, clock=clock, sleep=clock.sleep)
    assert result
    assert result.status == PollStatus.READY
    assert result.attempts == 1
    assert clock.sleeps == []


def test_ready_after_retries(clock):
    answers = iter([False, False, True])
    result = poll_until(lambda: next(answers), 2, 900, clock=clock, sleep=clock.sleep)
    assert result.attempts == 3
    assert clock.sleeps == [2, 2]
    assert result.elapsed == 4


def test_times_out_within_budget_plus_one_interval(clock):
    result = poll_until(lambda: False, 1, 300, clock=clock, sleep=clock.sleep)
    assert result.timed_out
    assert not result
    assert 300 <= result.elapsed < 301
    assert result.attempts == 301


def test_wait_for_raises_poll_timeout(clock):
    with pytest.raises(PollTimeout) as excinfo:
        wait_for(lambda: False, 2, 900, "gluster volume gv0", clock=clock, sleep=clock.sleep)
    assert isinstance(excinfo.value, BootstrapError)
    assert excinfo.value.exit_code == 1
    assert excinfo.value.timeout == 900
    assert "gluster volume gv0" in str(excinfo.value)
    assert clock.now < 902


def test_unbounded_wait_keeps_polling(clock):
    calls = []

    def condition():
        calls.append(1)
        return len(calls) == 5000
    result = wait_for(condition, 1, None, clock=clock, sleep=clock.sleep)
    assert result.attempts == 5000
    assert clock.now == 4999
