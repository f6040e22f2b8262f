"""Tests for overlap detection."""

from __future__ import annotations

from datetime import datetime

from jobber.ledger import Interval, Job, find_overlaps, intersect


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 5, hour, minute)


class TestIntersect:
    def test_overlapping_jobs(self):
        a = Job(start=at(9), end=at(12))
        b = Job(start=at(11), end=at(13))

        assert intersect(a, b) == Interval(at(11), at(12))
        assert intersect(b, a) == Interval(at(11), at(12))

    def test_disjoint_jobs(self):
        a = Job(start=at(9), end=at(12))
        b = Job(start=at(13), end=at(14))

        assert intersect(a, b) is None

    def test_touching_jobs_meet_in_a_point(self):
        a = Job(start=at(9), end=at(12))
        b = Job(start=at(12), end=at(13))

        common = intersect(a, b)
        assert common == Interval(at(12), at(12))

    def test_contained_job(self):
        a = Job(start=at(8), end=at(18))
        b = Job(start=at(10), end=at(11))

        assert intersect(a, b) == Interval(at(10), at(11))

    def test_running_job_extends_until_now(self):
        running = Job(start=at(11))
        finished = Job(start=at(9), end=at(12))

        assert intersect(running, finished, now=at(15)) == Interval(at(11), at(12))
        assert intersect(running, finished, now=at(11, 30)) == Interval(at(11), at(11, 30))


class TestFindOverlaps:
    def test_reports_positions_and_skips_the_job_itself(self):
        jobs = [
            Job(start=at(8), end=at(10)),
            Job(start=at(10), end=at(11)),
            Job(start=at(12), end=at(13)),
        ]
        new = Job(start=at(9), end=at(12, 30))
        jobs.append(new)

        overlaps = find_overlaps(jobs, new, now=at(18))

        assert overlaps == [
            (1, Interval(at(9), at(10))),
            (2, Interval(at(10), at(11))),
            (3, Interval(at(12), at(12, 30))),
        ]

    def test_touching_jobs_are_not_reported(self):
        jobs = [Job(start=at(8), end=at(9))]
        new = Job(start=at(9), end=at(10))

        assert find_overlaps(jobs, new, now=at(18)) == []

    def test_equal_job_at_other_position_is_reported(self):
        first = Job(start=at(9), end=at(10))
        second = Job(start=at(9), end=at(10))

        assert find_overlaps([first, second], second, now=at(18)) == [(1, Interval(at(9), at(10)))]
