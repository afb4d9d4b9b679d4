from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import List

from domain.models import Bounds, CanvasSize, OverflowResult, Rectangle, ScrollOffset

logger = logging.getLogger(__name__)

DEFAULT_MIN_ZOOM = 0.1
DEFAULT_MAX_ZOOM = 3.0
DEFAULT_ZOOM = 1.0
DEFAULT_ZOOM_STEP = 1.2

EMPTY_BOUNDS = Bounds(min_x=0.0, max_x=0.0, min_y=0.0, max_y=0.0)


def compute_content_bounds(elements: Iterable[Rectangle]) -> Bounds:
    min_x = math.inf
    max_x = -math.inf
    min_y = math.inf
    max_y = -math.inf
    for element in elements:
        # Negative coordinates are valid: nodes may sit left of / above the origin.
        min_x = min(min_x, element.x)
        max_x = max(max_x, element.x + element.width)
        min_y = min(min_y, element.y)
        max_y = max(max_y, element.y + element.height)

    if min_x == math.inf:
        return EMPTY_BOUNDS
    return Bounds(min_x=min_x, max_x=max_x, min_y=min_y, max_y=max_y)


def is_element_visible(element: Rectangle, area: Rectangle) -> bool:
    # Touching edges count as visible.
    return not (
        element.x + element.width < area.x
        or element.x > area.x + area.width
        or element.y + element.height < area.y
        or element.y > area.y + area.height
    )


def format_zoom_level(zoom: float) -> str:
    return f"{math.floor(zoom * 100 + 0.5)}%"


class ViewportOverflowTracker:
    """Tracks the viewport, the zoom level and the positioned elements on a canvas.

    Every mutating call returns a fresh :class:`OverflowResult`. None of the
    operations raise for numeric edge cases: an empty element list, identical
    points or a zero-size canvas all degrade to the no-overflow result so the
    render loop never has to handle exceptions.
    """

    def __init__(
        self,
        canvas: CanvasSize,
        *,
        min_zoom: float = DEFAULT_MIN_ZOOM,
        max_zoom: float = DEFAULT_MAX_ZOOM,
        zoom: float = DEFAULT_ZOOM,
        zoom_step: float = DEFAULT_ZOOM_STEP,
    ) -> None:
        if not 0 < min_zoom <= max_zoom:
            msg = f"Invalid zoom range: [{min_zoom}, {max_zoom}]"
            raise ValueError(msg)
        if zoom_step <= 0:
            msg = f"Zoom step must be positive, got {zoom_step}"
            raise ValueError(msg)
        self._canvas = canvas
        self._elements: List[Rectangle] = []
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.zoom_step = zoom_step
        self._zoom = self._clamp_zoom(zoom, fallback=DEFAULT_ZOOM)

    @property
    def canvas_size(self) -> CanvasSize:
        return self._canvas

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def elements(self) -> List[Rectangle]:
        return list(self._elements)

    def update_elements(self, elements: Iterable[Rectangle]) -> OverflowResult:
        self._elements = list(elements)
        return self.calculate_overflow()

    def set_canvas_size(self, canvas: CanvasSize) -> OverflowResult:
        self._canvas = canvas
        return self.calculate_overflow()

    def set_zoom(self, zoom: float) -> OverflowResult:
        self._zoom = self._clamp_zoom(zoom, fallback=self._zoom)
        return self.calculate_overflow()

    def zoom_in(self, step: float | None = None) -> OverflowResult:
        return self.set_zoom(self._zoom * (step or self.zoom_step))

    def zoom_out(self, step: float | None = None) -> OverflowResult:
        return self.set_zoom(self._zoom / (step or self.zoom_step))

    def zoom_to_fit(self, padding: float = 0.0) -> OverflowResult:
        if not self._elements:
            return self.calculate_overflow()
        bounds = self.get_content_bounds()
        ratios: List[float] = []
        content_width = bounds.width + padding * 2
        content_height = bounds.height + padding * 2
        if content_width > 0:
            ratios.append(self._canvas.width / content_width)
        if content_height > 0:
            ratios.append(self._canvas.height / content_height)
        if not ratios:
            return self.calculate_overflow()
        return self.set_zoom(min(ratios))

    def get_content_bounds(self) -> Bounds:
        return compute_content_bounds(self._elements)

    def calculate_overflow(self) -> OverflowResult:
        if not self._elements:
            return OverflowResult(overflow=False, scroll=ScrollOffset(), zoom=self._zoom)

        scaled = self.get_content_bounds().scaled(self._zoom)
        overflow = scaled.width > self._canvas.width or scaled.height > self._canvas.height
        if overflow:
            # Only compensate for content that starts left of / above the origin.
            scroll = ScrollOffset(x=max(0.0, -scaled.min_x), y=max(0.0, -scaled.min_y))
        else:
            scroll = ScrollOffset()

        logger.debug(
            "Recomputed overflow for %d elements: overflow=%s scroll=(%s, %s) zoom=%s",
            len(self._elements),
            overflow,
            scroll.x,
            scroll.y,
            self._zoom,
        )
        return OverflowResult(overflow=overflow, scroll=scroll, zoom=self._zoom)

    def get_visible_area(self) -> Rectangle:
        scroll = self.calculate_overflow().scroll
        return Rectangle(
            x=-scroll.x / self._zoom,
            y=-scroll.y / self._zoom,
            width=self._canvas.width / self._zoom,
            height=self._canvas.height / self._zoom,
        )

    def get_visible_elements(self) -> List[Rectangle]:
        area = self.get_visible_area()
        return [element for element in self._elements if is_element_visible(element, area)]

    def _clamp_zoom(self, zoom: float, *, fallback: float) -> float:
        if math.isnan(zoom):
            logger.debug("Ignoring NaN zoom, keeping %s", fallback)
            zoom = fallback
        return min(max(zoom, self.min_zoom), self.max_zoom)
