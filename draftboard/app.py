"""Application bootstrap for the draftboard canvas."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .config import EditorSettings, load_settings
from .errors import DraftboardError
from .geometry import Point
from .serialize import load_drawing
from .shapes import Arc, BezierCurve, Circle, Ellipse, Polygon, PolygonWithHoles, Rectangle, Shape, Triangle
from .units import Angle, Measurement, set_dpi_provider

logger = logging.getLogger(__name__)


def demo_shapes() -> List[Shape]:
    mm = Measurement.from_mm
    return [
        Rectangle.from_mm(10.0, 10.0, 40.0, 25.0),
        Circle(Point.from_mm(80.0, 25.0), mm(12.0)),
        Ellipse(Point.from_mm(125.0, 25.0), mm(20.0), mm(10.0)),
        Triangle(Point.from_mm(15.0, 60.0), Point.from_mm(55.0, 60.0), Point.from_mm(35.0, 90.0)),
        PolygonWithHoles(
            Polygon((Point.from_mm(70.0, 55.0), Point.from_mm(110.0, 55.0), Point.from_mm(110.0, 90.0), Point.from_mm(70.0, 90.0))),
            (Polygon((Point.from_mm(80.0, 65.0), Point.from_mm(100.0, 65.0), Point.from_mm(90.0, 80.0))),),
        ),
        Arc(Point.from_mm(140.0, 75.0), mm(15.0), Angle.from_degrees(0.0), Angle.from_degrees(200.0)),
        BezierCurve(
            Point.from_mm(20.0, 110.0),
            Point.from_mm(50.0, 95.0),
            Point.from_mm(80.0, 130.0),
            Point.from_mm(110.0, 110.0),
        ),
    ]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="draftboard", description="Interactive 2D vector drawing canvas")
    parser.add_argument("drawing", nargs="?", help="Drawing JSON to open (defaults to a demo scene)")
    parser.add_argument("--config", help="Editor settings JSON (overrides $DRAFTBOARD_CONFIG)")
    parser.add_argument("--dpi", type=float, help="Fix the DPI used for millimetre/pixel conversion")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser


def _prepare(args: argparse.Namespace) -> tuple[EditorSettings, List[Shape]]:
    settings = load_settings(args.config)
    if args.dpi is not None:
        settings = settings.model_copy(update={"dpi": args.dpi})
    shapes = load_drawing(args.drawing) if args.drawing else demo_shapes()
    return settings, shapes


def main(argv: Optional[Sequence[str]] = None) -> int:  # pragma: no cover - GUI entry point
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        settings, shapes = _prepare(args)
    except (DraftboardError, OSError) as exc:
        logger.error("%s", exc)
        return 2

    from PySide6.QtWidgets import QApplication, QMainWindow

    from .widgets import Canvas

    app = QApplication(sys.argv[:1])
    if not settings.apply_dpi():
        screen = app.primaryScreen()
        set_dpi_provider(lambda: float(screen.logicalDotsPerInch()))

    window = QMainWindow()
    window.setWindowTitle("draftboard")
    canvas = Canvas(settings, shapes)
    window.setCentralWidget(canvas)
    status = window.statusBar()
    canvas.selection_changed.connect(lambda n: status.showMessage(f"{n} selected" if n else ""))
    window.resize(1200, 800)
    window.show()
    canvas.setFocus()
    return app.exec()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
