"""A scrolling time-series chart drawn onto a canvas."""

from __future__ import annotations

import math
import threading
from collections import deque
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol

RGBA = tuple[float, float, float, float]
Point = tuple[float, float]

# Smallest positive normal single-precision float: the starting maximum
# when autoscaling, so an empty chart contracts to its minimum range.
_FLT_MIN = 1.1754943508222875e-38

_WHITE: RGBA = (1.0, 1.0, 1.0, 1.0)
_AXIS: RGBA = (0.0, 0.0, 0.4, 1.0)
_INFO: RGBA = (0.4, 0.0, 0.0, 1.0)

TICK_LABEL_MARGIN = 190
Y_TICK_LABEL_X = 100


@dataclass(frozen=True)
class Style:
    """Colour of one data line, and whether the area below it is filled."""

    red: float
    green: float
    blue: float
    alpha: float
    fill: bool = False

    @property
    def rgba(self) -> RGBA:
        return (self.red, self.green, self.blue, self.alpha)


class Canvas(Protocol):
    width: int
    height: int

    def fill_rectangle(
        self, x: float, y: float, width: float, height: float, rgba: RGBA
    ) -> None: ...

    def line(
        self, x1: float, y1: float, x2: float, y2: float, width: float, rgba: RGBA
    ) -> None: ...

    def text(self, text: str, x: float, y: float, rgba: RGBA) -> None: ...

    def polyline(
        self, points: Sequence[Point], width: float, rgba: RGBA, fill: bool
    ) -> None: ...


class RecordingCanvas:
    """A canvas that keeps a list of the drawing operations it receives.

    Text is placed centred on the given point.
    """

    def __init__(self, width: int = 640, height: int = 480) -> None:
        self.width = width
        self.height = height
        self.operations: list[tuple] = []

    def fill_rectangle(
        self, x: float, y: float, width: float, height: float, rgba: RGBA
    ) -> None:
        self.operations.append(("fill_rectangle", (x, y, width, height), tuple(rgba)))

    def line(
        self, x1: float, y1: float, x2: float, y2: float, width: float, rgba: RGBA
    ) -> None:
        self.operations.append(("line", ((x1, y1), (x2, y2)), width, tuple(rgba)))

    def text(self, text: str, x: float, y: float, rgba: RGBA) -> None:
        self.operations.append(("text", text, (x, y), tuple(rgba)))

    def polyline(
        self, points: Sequence[Point], width: float, rgba: RGBA, fill: bool = False
    ) -> None:
        self.operations.append(("polyline", tuple(points), width, tuple(rgba), fill))

    def of_kind(self, kind: str) -> list[tuple]:
        """The recorded operations of one kind, in order."""
        return [op for op in self.operations if op[0] == kind]


@dataclass
class _YLabel:
    height: float
    text: str
    intensity: float


def _frange(start: float, stop: float, step: float) -> Iterator[float]:
    value = start
    while value <= stop:
        yield value
        value += step


class Graph:
    """A chart of several lines over a sliding time window, with autoscaling."""

    def __init__(
        self,
        title: str,
        min_y: float,
        max_y: float,
        styles: Sequence[Style | tuple],
        x_label: str,
        y_label: str,
        width: int = 640,
        height: int = 480,
    ) -> None:
        self.title = title
        self.styles = [s if isinstance(s, Style) else Style(*s) for s in styles]
        self.data_points: list[deque[Point]] = [deque() for _ in self.styles]
        self.x_label = x_label
        self.y_label = y_label
        self.info = ""
        self.target_min_y = min_y
        self.target_max_y = max_y
        self.bottom = min_y
        self.top = max_y
        self._width = width
        self._height = height
        self._x_ticks: deque[tuple[int, str]] = deque()
        self._y_ticks: list[_YLabel] = []
        self._lock = threading.Lock()

    def add_data_point(self, num: int, t: float, y: float) -> None:
        """Append the point (t, y) to line ``num``; negative y breaks the line."""
        if not 0 <= num < len(self.data_points):
            raise IndexError(f"no data line {num}")
        with self._lock:
            self.data_points[num].append((t, y))

    def project_height(self, x: float) -> float:
        """Position of ``x`` within the current vertical range (0 bottom, 1 top)."""
        return (x - self.bottom) / (self.top - self.bottom)

    def chart_height(self, x: float, window_height: int) -> float:
        """Vertical pixel position of value ``x`` in a window of that height."""
        return (window_height - 40) * (
            0.825 * (1 - self.project_height(x)) + 0.025
        ) + 0.825 * 40

    def size(self) -> tuple[int, int]:
        return (self._width, self._height)

    @staticmethod
    def _x_position(t: float, x: float, logical_width: float, width: int) -> float:
        return width - (t - x) * width / logical_width

    def _autoscale(
        self,
        snapshot: list[list[Point]],
        current_values: Sequence[float],
        current_weight: float,
    ) -> None:
        max_value = _FLT_MIN
        for style, line, current in zip(self.styles, snapshot, current_values):
            if style.fill:
                continue
            max_value = max([max_value, *(y for _, y in line)])
            if current_weight > 0.4:
                max_value = max(max_value, current)

        if max_value * 1.2 > self.target_max_y:
            self.target_max_y = max(max_value * 1.4, self.target_min_y + 1)
        if max_value * 1.8 < self.target_max_y:
            self.target_max_y = max(max_value * 1.6, self.target_min_y + 1)

        self.top = self.top * 0.95 + self.target_max_y * 0.05
        self.bottom = self.bottom * 0.95 + self.target_min_y * 0.05

    def blocking_draw(
        self,
        t: float,
        logical_width: float,
        current_values: Sequence[float],
        current_weight: float,
        canvas: Canvas,
    ) -> bool:
        """Draw one frame ending at time ``t`` spanning ``logical_width`` seconds.

        ``current_values`` are provisional values for the newest moment,
        blended in with ``current_weight`` (between 0 and 1).
        """
        horizon = t - logical_width - 1
        with self._lock:
            for line in self.data_points:
                while len(line) >= 2 and line[0][0] < horizon and line[1][0] < horizon:
                    line.popleft()
            snapshot = [list(line) for line in self.data_points]

        if len(current_values) != len(snapshot):
            raise ValueError("one current value is needed for each data line")
        if not 0 <= current_weight <= 1:
            raise ValueError("current_weight must lie between 0 and 1")

        self._autoscale(snapshot, current_values, current_weight)

        width, height = canvas.width, canvas.height
        self._width, self._height = width, height

        canvas.fill_rectangle(0, 0, width, height, _WHITE)
        self._draw_x_axis(canvas, t, logical_width, horizon)

        for style, line, current in zip(self.styles, snapshot, current_values):
            if line:
                self._draw_line(
                    canvas, style, line, current, current_weight, t, logical_width
                )

        self._update_y_ticks()
        for label in self._y_ticks:
            y = self.chart_height(label.height, height)
            canvas.line(0, y, width, y, 1, (0.0, 0.0, 0.4, 0.25 * label.intensity))

        canvas.fill_rectangle(0, 0, TICK_LABEL_MARGIN, height, _WHITE)
        if self.info:
            canvas.text(self.info, width // 2, 20, _INFO)
        canvas.text(self.y_label, 25, height * 0.4375, _AXIS)
        for label in self._y_ticks:
            canvas.text(
                label.text,
                Y_TICK_LABEL_X,
                self.chart_height(label.height, height),
                (0.0, 0.0, 0.4, label.intensity),
            )
        return False

    def _draw_x_axis(
        self, canvas: Canvas, t: float, logical_width: float, horizon: float
    ) -> None:
        width, height = canvas.width, canvas.height
        while self._x_ticks and self._x_ticks[0][0] < horizon:
            self._x_ticks.popleft()
        while not self._x_ticks or self._x_ticks[-1][0] < t + 1:
            following = self._x_ticks[-1][0] + 1 if self._x_ticks else round(t)
            self._x_ticks.append((following, f"{following:,}"))

        for value, label in self._x_ticks:
            x = self._x_position(t, value, logical_width, width)
            canvas.text(label, x, height * 9.0 / 10.0, _AXIS)
            canvas.line(
                x,
                self.chart_height(self.bottom, height),
                x,
                self.chart_height(self.top, height),
                2,
                (0.0, 0.0, 0.4, 0.25),
            )
        canvas.text(self.x_label, 35 + width // 2, height * 9.6 / 10.0, _AXIS)

    def _draw_line(
        self,
        canvas: Canvas,
        style: Style,
        line: list[Point],
        current: float,
        current_weight: float,
        t: float,
        logical_width: float,
    ) -> None:
        width, height = canvas.width, canvas.height

        def place(x: float, y: float) -> Point:
            return (
                self._x_position(t, x, logical_width, width),
                self.chart_height(y, height),
            )

        def finish(stroke: list[Point], closing_x: float) -> None:
            points = list(stroke)
            if style.fill:
                baseline = self.chart_height(0, height)
                points.append((width, baseline))
                points.append(
                    (self._x_position(t, closing_x, logical_width, width), baseline)
                )
            canvas.polyline(points, 3, style.rgba, style.fill)

        stroke: list[Point] = []
        last_x = 0.0
        for x, y in line:
            if y >= 0:
                stroke.append(place(x, y))
                last_x = x
            elif stroke:
                finish(stroke, last_x)
                stroke = []

        if stroke:
            if current >= 0:
                blended = current_weight * current + (1 - current_weight) * line[-1][1]
                stroke.append(place(t, blended))
            finish(stroke, line[0][0])

    def _update_y_ticks(self) -> None:
        label_bottom = float(round(math.floor(self.bottom)))
        label_top = float(round(math.ceil(self.top)))
        spacing = 0.25
        while spacing < (label_top - label_bottom) / 6:
            spacing *= 2

        self._y_ticks = [label for label in self._y_ticks if label.intensity >= 0.01]

        pending = dict.fromkeys(
            value
            for value in _frange(label_bottom, label_top, spacing)
            if not (self.project_height(value) < 0 or self.project_height(value) > 1)
        )

        for label in self._y_ticks:
            if label.height in pending:
                del pending[label.height]
                label.intensity = 0.95 * label.intensity + 0.05
            else:
                label.intensity = 0.95 * label.intensity

        self._y_ticks.extend(_YLabel(value, f"{value:g}", 0.05) for value in pending)