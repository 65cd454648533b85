import pytest

from draftboard.geometry import Point
from draftboard.shapes import Circle, Rectangle
from draftboard.units import Measurement, reset_dpi_provider


@pytest.fixture(autouse=True)
def default_dpi():
    """Every test starts (and ends) with the 96 DPI default provider."""
    reset_dpi_provider()
    yield
    reset_dpi_provider()


class RecordingPainter:
    """Painter double that records each call with the view depth it ran at."""

    def __init__(self):
        self.calls = []
        self.depth = 0

    def _record(self, name, *args):
        self.calls.append((name, self.depth, args))

    def clear(self, background):
        self._record("clear", background)

    def push_view(self, scale, offset_x, offset_y):
        self._record("push_view", scale, offset_x, offset_y)
        self.depth += 1

    def pop_view(self):
        self.depth -= 1
        self._record("pop_view")

    def polyline(self, points, pen, closed=False):
        self._record("polyline", list(points), pen, closed)

    def ellipse(self, cx, cy, rx, ry, pen):
        self._record("ellipse", cx, cy, rx, ry, pen)

    def rect(self, x, y, w, h, pen):
        self._record("rect", x, y, w, h, pen)

    def line(self, x1, y1, x2, y2, pen):
        self._record("line", x1, y1, x2, y2, pen)

    def circle(self, cx, cy, r, pen):
        self._record("circle", cx, cy, r, pen)

    def named(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def painter():
    return RecordingPainter()


def px_rect(x, y, w, h):
    """Rectangle given in world pixels (96 DPI)."""
    return Rectangle(Point.from_px(x, y), Measurement.from_px(w), Measurement.from_px(h))


@pytest.fixture
def rect_a():
    return px_rect(100, 100, 120, 80)


@pytest.fixture
def rect_b():
    return px_rect(160, 140, 120, 80)


@pytest.fixture
def circle():
    return Circle(Point.from_px(400, 400), Measurement.from_px(30))


@pytest.fixture
def make_rect():
    return px_rect
