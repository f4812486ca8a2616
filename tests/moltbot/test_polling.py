"""
Tests for moltbot_lib.polling.
"""

from moltbot_lib.polling import PollResult, backoff_delays, wait_until


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


class TestBackoffDelays:
    """Tests for backoff_delays."""

    def test_default_schedule(self):
        assert backoff_delays(6, 0.5) == [0.5, 1.0, 2.0, 4.0, 8.0]
        assert sum(backoff_delays(6, 0.5)) == 15.5

    def test_single_attempt_never_sleeps(self):
        assert backoff_delays(1, 0.5) == []

    def test_zero_attempts(self):
        assert backoff_delays(0, 0.5) == []

    def test_factor(self):
        assert backoff_delays(3, 1.0, factor=3.0) == [1.0, 3.0]


class TestWaitUntil:
    """Tests for wait_until."""

    def test_ready_immediately(self):
        sleep = RecordingSleep()
        result = wait_until(lambda: True, sleep=sleep)
        assert result == PollResult(ready=True, attempts=1, waited=0.0)
        assert sleep.calls == []

    def test_ready_after_retries(self):
        sleep = RecordingSleep()
        answers = iter([False, False, True])

        result = wait_until(lambda: next(answers), sleep=sleep)

        assert result.ready
        assert result.attempts == 3
        assert sleep.calls == [0.5, 1.0]
        assert result.waited == 1.5

    def test_gives_up(self):
        sleep = RecordingSleep()
        checks = []

        result = wait_until(lambda: checks.append(1) or False, sleep=sleep)

        assert not result
        assert result.attempts == 6
        assert len(checks) == 6
        # No sleep after the last check
        assert sleep.calls == [0.5, 1.0, 2.0, 4.0, 8.0]
        assert result.waited == 15.5

    def test_custom_budget(self):
        sleep = RecordingSleep()
        result = wait_until(lambda: False, attempts=2, initial_delay=0.1, sleep=sleep)
        assert result.attempts == 2
        assert sleep.calls == [0.1]

    def test_bool(self):
        assert PollResult(ready=True, attempts=1, waited=0.0)
        assert not PollResult(ready=False, attempts=6, waited=15.5)
