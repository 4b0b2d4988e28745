"""In-process deadline scheduler tests."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from bike_assembly.infrastructure.scheduling import InProcessDeadlineScheduler
from bike_assembly.shared.clock import FrozenClock
from bike_assembly.tests.utils import START


@pytest.fixture
def clock():
    return FrozenClock(START)


@pytest.fixture
def handler():
    return Mock()


@pytest.fixture
def scheduler(clock, handler):
    scheduler = InProcessDeadlineScheduler(clock=clock, retry_delay=30)
    scheduler.bind(handler)
    return scheduler


def test_runs_only_due_deadlines_in_order(scheduler, clock, handler):
    scheduler.register_deadline(2, START + timedelta(minutes=20))
    scheduler.register_deadline(1, START + timedelta(minutes=10))
    scheduler.register_deadline(3, START + timedelta(hours=1))

    clock.advance(minutes=20)
    fired = scheduler.run_pending()

    assert fired == [1, 2]
    assert [c.args[0] for c in handler.call_args_list] == [1, 2]
    assert handler.call_args_list[0].args[1] == START + timedelta(minutes=10)
    assert scheduler.pending() == {3: START + timedelta(hours=1)}
    assert scheduler.next_deadline() == START + timedelta(hours=1)


def test_cancel(scheduler, clock, handler):
    scheduler.register_deadline(1, START)

    assert scheduler.cancel(1) is True
    assert scheduler.cancel(1) is False
    assert scheduler.run_pending() == []
    handler.assert_not_called()
    assert scheduler.next_deadline() is None


def test_register_replaces_pending_deadline(scheduler, clock, handler):
    scheduler.register_deadline(1, START)
    scheduler.register_deadline(1, START + timedelta(minutes=5))

    assert scheduler.run_pending() == []
    clock.advance(minutes=5)
    assert scheduler.run_pending() == [1]
    handler.assert_called_once_with(1, START + timedelta(minutes=5))


def test_failing_action_is_retried(scheduler, clock, handler):
    handler.side_effect = [RuntimeError("storage down"), None]
    scheduler.register_deadline(7, START)

    assert scheduler.run_pending() == []
    assert scheduler.pending() == {7: START + timedelta(seconds=30)}

    clock.advance(seconds=30)
    assert scheduler.run_pending() == [7]
    assert scheduler.pending() == {}


def test_unbound_scheduler_refuses_to_fire(clock):
    scheduler = InProcessDeadlineScheduler(clock=clock, retry_delay=1)
    with pytest.raises(RuntimeError):
        scheduler.handler


def test_start_and_stop(scheduler):
    scheduler.start()
    assert scheduler.is_running
    scheduler.start()

    scheduler.stop(timeout=2)
    assert not scheduler.is_running
