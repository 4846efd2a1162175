"""Console report of convergence progress (coordinator rank only)."""

import sys


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


class ConvergenceReporter:
    """Prints a header, selected iterations, and the total run time.

    An iteration line is printed when its 0-based index is a power of two
    or when it is the iteration that converged.
    """

    def __init__(self, stream=None, enabled: bool = True):
        self.stream = stream if stream is not None else sys.stdout
        self.enabled = enabled

    def _write(self, line: str):
        if self.enabled:
            print(line, file=self.stream, flush=True)

    def header(self):
        self._write(f"{'Iteration':<10}{'Epsilon':>10}")

    def should_report(self, iteration: int, converged: bool) -> bool:
        return converged or is_power_of_two(iteration)

    def iteration(self, iteration: int, max_diff: float, converged: bool = False):
        if self.should_report(iteration, converged):
            self._write(f"{iteration:<10d}{max_diff:10.6f}")

    def total_time(self, seconds: float):
        self._write(f"TOTAL TIME: {seconds:5.2f}")
