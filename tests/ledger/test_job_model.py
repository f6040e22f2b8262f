"""Tests for the Job model and hour rounding."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from hypothesis import given, strategies as st

from jobber.ledger import Interval, Job, round_to_resolution

START = datetime(2024, 1, 5, 9, 0)


class TestRounding:
    @pytest.mark.parametrize(
        "hours,resolution,expected",
        [
            (1.1, 0.25, 1.0),
            (1.125, 0.25, 1.25),
            (1.2, 0.25, 1.25),
            (2.0, 0.25, 2.0),
            (0.1, 0.25, 0.0),
            (1.04, 0.1, 1.0),
            (1.06, 0.1, 1.1),
            (7.4, 1, 7.0),
            (7.5, 1, 8.0),
        ],
    )
    def test_round_to_resolution(self, hours, resolution, expected):
        assert round_to_resolution(hours, resolution) == pytest.approx(expected)

    def test_result_is_free_of_float_noise(self):
        assert round_to_resolution(1.1, 0.1) == 1.1


class TestJobTimes:
    def test_new_job_is_neither_valid_nor_finished(self):
        job = Job()

        assert not job.is_valid
        assert job.is_open
        assert not job.is_finished

    def test_constructor_rejects_end_before_start(self):
        with pytest.raises(ValueError):
            Job(start=START, end=START)

    def test_set_end_before_start_keeps_previous_value(self):
        job = Job(start=START, end=START + timedelta(hours=2))

        assert job.set_end(START - timedelta(minutes=1)) is False
        assert job.end == START + timedelta(hours=2)

    def test_set_start_after_end_keeps_previous_value(self):
        job = Job(start=START, end=START + timedelta(hours=2))

        assert job.set_start(START + timedelta(hours=3)) is False
        assert job.start == START

    def test_valid_setters_apply(self):
        job = Job(start=START)

        assert job.set_end(START + timedelta(hours=1)) is True
        assert job.set_start(START - timedelta(hours=1)) is True
        assert job.is_finished
        assert job.hours_exact() == pytest.approx(2.0)

    def test_check(self):
        assert Job.check(None, START)
        assert Job.check(START, None)
        assert Job.check(START, START + timedelta(seconds=1))
        assert not Job.check(START, START)


class TestJobHours:
    def test_finished_job_hours_are_rounded(self):
        job = Job(start=START, end=START + timedelta(minutes=66))

        assert job.hours_exact() == pytest.approx(1.1)
        assert job.hours(0.25) == 1.0

    def test_running_job_counts_until_now(self):
        job = Job(start=START)
        now = START + timedelta(hours=1, minutes=30)

        assert job.hours(0.25, now) == 1.5
        assert job.effective_end(now) == now

    def test_interval_of_unstarted_job_raises(self):
        with pytest.raises(ValueError):
            Job().interval()

    def test_interval(self):
        job = Job(start=START, end=START + timedelta(hours=3))

        assert job.interval() == Interval(START, START + timedelta(hours=3))
        assert job.interval().duration == timedelta(hours=3)

    def test_calendar_fields_come_from_start(self):
        job = Job(start=datetime(2024, 1, 31, 23, 0), end=datetime(2024, 2, 1, 1, 0))

        assert (job.year, job.month, job.mday) == (2024, 1, 31)


class TestJobValue:
    def test_equality_compares_fields(self):
        a = Job(start=START, message="x")
        b = Job(start=START, message="x")

        assert a == b
        assert a is not b
        assert a != Job(start=START, message="y")


moments = st.datetimes(min_value=datetime(2024, 1, 1), max_value=datetime(2024, 1, 3))


@given(
    start=st.one_of(st.none(), moments),
    changes=st.lists(st.tuples(st.sampled_from(["start", "end"]), moments), max_size=20),
)
def test_start_stays_before_end_under_any_changes(start, changes):
    """Setters never leave a job with start >= end."""
    job = Job(start=start)

    for field, value in changes:
        before = (job.start, job.end)
        setter = job.set_start if field == "start" else job.set_end
        applied = setter(value)

        assert Job.check(job.start, job.end)
        if not applied:
            assert (job.start, job.end) == before
