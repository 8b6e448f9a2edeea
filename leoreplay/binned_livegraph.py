"""A live chart that accumulates values in fixed-width time bins."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable, Sequence

from .graph import Canvas, Graph, Style

log = logging.getLogger(__name__)

FRAME_INTERVAL = 1 / 60


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def _divide(numerator: float, denominator: float) -> float:
    """Floating division giving infinity or NaN for a zero denominator."""
    if denominator:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator)


def _reset_to_zero(bin_width_ms: int, value: int) -> int:
    return 0


class BinnedLiveGraph:
    """Sums (or maxima) per time bin, plotted as one point per finished bin.

    ``initialize_new_bin(bin_width_ms, old_value)`` returns the starting
    value of the next bin; a negative value marks a bin holding a default.
    """

    def __init__(
        self,
        name: str,
        styles: Sequence[Style | tuple],
        y_label: str,
        multiplier: float,
        rate_quantity: bool,
        bin_width_ms: int,
        initialize_new_bin: Callable[[int, int], int] | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        if bin_width_ms <= 0:
            raise ValueError("bin width must be positive")
        self.graph = Graph(name, 0, 1, styles, "time (s)", y_label, 640, 480)
        self.bin_width_ms = bin_width_ms
        self.multiplier = multiplier
        self.rate_quantity = rate_quantity
        self._initialize_new_bin = initialize_new_bin or _reset_to_zero
        self._clock = clock or _monotonic_ms
        self._values = [0] * len(self.graph.styles)
        self._current_bin = self._clock() // bin_width_ms
        self._lock = threading.Lock()
        self._halt = threading.Event()
        self._thread: threading.Thread | None = None
        self.animation_exception: BaseException | None = None

        for num in range(len(self._values)):
            self.graph.add_data_point(num, 0, 0)

    def _scaled(self, value: float, seconds: float) -> float:
        scaled = value * self.multiplier
        return _divide(scaled, seconds) if self.rate_quantity else scaled

    def advance(self) -> int:
        """Close every bin that has ended, plotting it; return the current time."""
        with self._lock:
            now = self._clock()
            now_bin = now // self.bin_width_ms
            while self._current_bin < now_bin:
                bin_end = (self._current_bin + 1) * self.bin_width_ms / 1000.0
                for num, value in enumerate(self._values):
                    self.graph.add_data_point(
                        num, bin_end, self._scaled(value, self.bin_width_ms / 1000.0)
                    )
                    self._values[num] = self._initialize_new_bin(self.bin_width_ms, value)
                self._current_bin += 1
            return now

    def logical_width(self) -> float:
        """Seconds of history shown across the chart."""
        return max(5.0, self.graph.size()[0] / 100.0)

    def current_estimates(self, now: int) -> list[float]:
        """Provisional value of each line from the partly filled bin at ``now``."""
        elapsed = (now % self.bin_width_ms) / 1000.0
        with self._lock:
            values = list(self._values)
        return [self._scaled(value, elapsed) for value in values]

    def draw_frame(self, canvas: Canvas) -> int:
        """Draw one frame onto ``canvas``; return the time it shows."""
        now = self.advance()
        estimates = self.current_estimates(now)
        bin_fraction = (now % self.bin_width_ms) / self.bin_width_ms
        confidence = (1 - math.cos(bin_fraction * 3.14159 / 2.0)) ** 2
        self.graph.blocking_draw(
            now / 1000.0, self.logical_width(), estimates, confidence, canvas
        )
        return now

    def _check_line(self, num: int) -> None:
        if not 0 <= num < len(self._values):
            raise IndexError(f"no data line {num}")

    def add_value_now(self, num: int, amount: int) -> None:
        """Add ``amount`` to line ``num`` in the current bin."""
        self._check_line(num)
        self.advance()
        with self._lock:
            if self._values[num] < 0:
                raise ValueError("BinnedLiveGraph: attempt to add to a default value")
            self._values[num] += amount

    def set_max_value_now(self, num: int, amount: int) -> None:
        """Raise line ``num`` in the current bin to at least ``amount``."""
        self._check_line(num)
        self.advance()
        with self._lock:
            if self._values[num] < 0:
                self._values[num] = amount
            else:
                self._values[num] = max(self._values[num], amount)

    def _animation_loop(self, canvas_factory: Callable[[], Canvas]) -> None:
        try:
            while not self._halt.is_set():
                self.draw_frame(canvas_factory())
                self._halt.wait(FRAME_INTERVAL)
        except Exception as error:
            self.animation_exception = error

    def start(self, canvas_factory: Callable[[], Canvas]) -> None:
        """Draw frames on a background thread, each onto a new canvas."""
        if self._thread is not None:
            raise RuntimeError("BinnedLiveGraph: animation already running")
        self._halt.clear()
        self._thread = threading.Thread(
            target=self._animation_loop, args=(canvas_factory,), daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        """Stop the animation thread and report how it ended."""
        self._halt.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self.animation_exception is not None:
            log.error(
                "BinnedLiveGraph exited from exception: %s", self.animation_exception
            )

    def __enter__(self) -> BinnedLiveGraph:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()