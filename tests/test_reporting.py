"""Tests for the coordinator's convergence report."""

import io

import pytest
from Hotplate import ConvergenceReporter
from Hotplate.reporting import is_power_of_two


def make_reporter():
    stream = io.StringIO()
    return ConvergenceReporter(stream=stream), stream


def test_header_format():
    reporter, stream = make_reporter()
    reporter.header()
    assert stream.getvalue() == "Iteration    Epsilon\n"


def test_iteration_line_format():
    reporter, stream = make_reporter()
    reporter.iteration(1, 0.5)
    assert stream.getvalue() == "1" + " " * 11 + "0.500000\n"


def test_reports_powers_of_two_and_final():
    reporter, stream = make_reporter()
    for i in range(20):
        reporter.iteration(i, 1.0 / (i + 1), converged=(i == 19))

    reported = [int(line.split()[0]) for line in stream.getvalue().splitlines()]
    assert reported == [1, 2, 4, 8, 16, 19]


def test_iteration_zero_not_reported():
    reporter, stream = make_reporter()
    reporter.iteration(0, 3.0)
    assert stream.getvalue() == ""


def test_total_time():
    reporter, stream = make_reporter()
    reporter.total_time(1.5)
    assert stream.getvalue() == "TOTAL TIME:  1.50\n"


def test_disabled_reporter_is_silent():
    stream = io.StringIO()
    reporter = ConvergenceReporter(stream=stream, enabled=False)
    reporter.header()
    reporter.iteration(4, 0.1)
    reporter.total_time(2.0)
    assert stream.getvalue() == ""


@pytest.mark.parametrize("n,expected", [(0, False), (1, True), (2, True), (3, False), (64, True), (96, False)])
def test_is_power_of_two(n, expected):
    assert is_power_of_two(n) is expected
