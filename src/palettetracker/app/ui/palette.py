"""
Palette
=======
Draws the hexagon cells of a layout into a QGraphicsScene and keeps the
displayed values in sync with the model.

The palette only composes the model and the geometry: cell centres and the
outer border come from `model.hex_geometry` and `model.outline`, values and
goals from the `Store`.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from math import cos, sin, pi
from typing import Callable, Dict, List, Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPen, QPolygonF
from PySide6.QtWidgets import (
    QGraphicsItem, QGraphicsPolygonItem, QGraphicsScene, QGraphicsSceneHoverEvent,
    QGraphicsSceneMouseEvent, QGraphicsSimpleTextItem
)

from palettetracker.app.state import Store
from palettetracker.config import (
    CELL_HEX_SIZE, CONTAINER_HEX_SIZE, DEFAULT_GLOBAL_MARGIN, EDGE_HEX_SIZE,
    INCREMENT_CONTROL_OFFSET_X, INCREMENT_CONTROL_OFFSET_Y, INCREMENT_CONTROL_SPACING
)
from palettetracker.controller.key_controller import InputEvent
from palettetracker.model.exceptions import MalformedCluster
from palettetracker.model.hex_geometry import EDGE_ANGLES, EdgeDirection, hex_center, hex_corners
from palettetracker.model.outline import trace_outline
from palettetracker.model.profiles import TrackerLayout
from palettetracker.model.state import ChangeEvent, TrackerModel

logger = logging.getLogger(__name__)

CHECK_MARK = "✔"

CONTAINER_COLOR = QColor("#1b1b24")
CELL_COLOR = QColor("#3a3f5c")
EDGE_COLOR = QColor("#8a93c9")
TEXT_COLOR = QColor("white")
UNMET_COLOR = QColor("#ffb347")
HIGHLIGHT_COLOR = QColor("#7fd1ff")
INACTIVE_OPACITY = 0.45

# label above, value below the cell centre
VALUE_TEXT_OFFSET_Y = 12.0


@dataclass(frozen=True)
class PaletteOptions:
    """Extra features and behaviors to set for a Palette."""
    cell_controls: bool = False         # clicking a cell changes its value
    increment_controls: bool = False    # one clickable text per increment level
    display_value: bool = False
    display_key: bool = False
    outer_edge: bool = False            # border around the whole palette


VIEW_PRESETS: Dict[str, List[PaletteOptions]] = {
    "hybrid": [
        PaletteOptions(cell_controls=True, increment_controls=True, display_value=True,
                       display_key=True, outer_edge=True),
    ],
    "view-only-mouse": [
        PaletteOptions(cell_controls=True, display_value=True, outer_edge=True),
    ],
    "view-only-keys": [
        PaletteOptions(display_value=True, outer_edge=True),
    ],
    "two-palettes": [
        PaletteOptions(cell_controls=True, increment_controls=True, display_key=True),
        PaletteOptions(display_value=True, outer_edge=True),
    ],
}


def cell_value_text(model: TrackerModel, track_key: str) -> str:
    """
    Text shown for a trackable value.

    An unmet target is shown as "value/target", zero as nothing and a set
    toggle as a check mark.
    """
    value = model.get_value(track_key)
    goal = model.goal_status(track_key)
    if goal.target_value and not goal.fulfilled:
        return f"{value:g}/{goal.target_value:g}"
    if value == 0:
        return ""
    if value == 1 and model.get_attribute(track_key, "toggle", False):
        return CHECK_MARK
    return f"{value:g}"


def _polygon(points) -> QPolygonF:
    return QPolygonF([QPointF(float(x), float(y)) for x, y in points])


class _ClickableMixin:
    """Routes left/right clicks and hover to callbacks."""
    on_click: Optional[Callable[[int], None]] = None
    on_hover: Optional[Callable[[bool], None]] = None

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        if self.on_click is None:
            event.ignore()
            return
        if event.button() == Qt.MouseButton.LeftButton:
            self.on_click(1)
        elif event.button() == Qt.MouseButton.RightButton:
            self.on_click(-1)
        event.accept()

    def hoverEnterEvent(self, event: QGraphicsSceneHoverEvent) -> None:
        if self.on_hover is not None:
            self.on_hover(True)

    def hoverLeaveEvent(self, event: QGraphicsSceneHoverEvent) -> None:
        if self.on_hover is not None:
            self.on_hover(False)


class CellItem(_ClickableMixin, QGraphicsPolygonItem):
    pass


class IncrementItem(_ClickableMixin, QGraphicsSimpleTextItem):
    pass


@dataclass
class _CellItems:
    group: List[QGraphicsItem]
    cell: CellItem
    value: Optional[QGraphicsSimpleTextItem] = None
    key: Optional[QGraphicsSimpleTextItem] = None
    increments: Optional[List[IncrementItem]] = None


class Palette:
    """
    A view and user interface to the tracker model.

    Args:
        store: Qt bridge of the model (and key controller, if any).
        scene: Scene to add the items to.
        options: Features of this palette.
        status_callback: Receives the status text of the hovered cell ("" on leave).
    """

    def __init__(
        self,
        store: Store,
        scene: QGraphicsScene,
        options: PaletteOptions,
        status_callback: Optional[Callable[[str], None]] = None
    ) -> None:
        self.store = store
        self.model = store.model
        self.key_controller = store.key_controller
        self.scene = scene
        self.options = options
        self.status_callback = status_callback

        self.global_margin: float = DEFAULT_GLOBAL_MARGIN
        self.layout: Optional[TrackerLayout] = None
        self.outline: Optional[QGraphicsPolygonItem] = None
        self._cells: Dict[str, _CellItems] = {}

        store.value_changed.connect(self._on_value_changed)
        store.input_changed.connect(self._on_input)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def render(self, layout: TrackerLayout, offset_x: float = 0.0, offset_y: float = 0.0) -> None:
        """Create all items for a layout, translated by the given offset."""
        self.layout = layout
        origin = (offset_x + self.global_margin, offset_y + self.global_margin)

        for track_key, entry in layout.items():
            center = hex_center(entry.coord, CONTAINER_HEX_SIZE)
            self._cells[track_key] = self._render_cell(
                track_key, QPointF(float(center[0]) + origin[0], float(center[1]) + origin[1])
            )

        if self.options.outer_edge:
            self._render_outer_edge(layout, origin)

        for track_key in layout:
            self.refresh_cell(track_key)

    def bounds(self) -> QRectF:
        """Scene rectangle covered by this palette."""
        rect = QRectF()
        for items in self._cells.values():
            for item in items.group:
                rect = rect.united(item.sceneBoundingRect())
        if self.outline is not None:
            rect = rect.united(self.outline.sceneBoundingRect())
        return rect

    def status_text(self, track_key: str) -> str:
        text = self.model.get_attribute(track_key, "description", track_key)
        if self.key_controller is not None:
            text += f"  {self.key_controller.get_all_increments_display_text(track_key)}"
        return text

    def refresh_cell(self, track_key: str) -> None:
        """Update texts and highlight state of one cell."""
        items = self._cells.get(track_key)
        if items is None:
            return

        if self.options.display_value:
            value = self.model.get_value(track_key)
            for item in items.group:
                item.setOpacity(INACTIVE_OPACITY if value == 0 else 1.0)
            text = cell_value_text(self.model, track_key)
            items.value.setText(text)
            unmet = not self.store.goal_fulfilled(track_key) and self.model.get_attribute(track_key, "target") is not None
            items.value.setBrush(QBrush(UNMET_COLOR if unmet else TEXT_COLOR))
            self._center_text(items.value, items.cell.pos(), dy=VALUE_TEXT_OFFSET_Y)

        if self.options.display_key and items.key is not None:
            key_text = self.key_controller.get_key_code_display_text(track_key) if self.key_controller else ""
            items.key.setText(key_text)
            self._center_text(items.key, items.cell.pos(), dy=-INCREMENT_CONTROL_OFFSET_Y)

        if self.options.increment_controls and items.increments:
            steps = self.model.get_attribute(track_key, "increment", (1,))
            level = self._input_level(track_key)
            sign = "-" if self._input_factor() < 0 else "+"
            for index, (step, item) in enumerate(zip(steps, items.increments)):
                item.setText(f"{sign}{step:g}")
                item.setBrush(QBrush(HIGHLIGHT_COLOR if index == level else TEXT_COLOR))

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _render_cell(self, track_key: str, center: QPointF) -> _CellItems:
        container = QGraphicsPolygonItem(_polygon(hex_corners(CONTAINER_HEX_SIZE)))
        container.setBrush(QBrush(CONTAINER_COLOR))
        container.setPen(QPen(Qt.PenStyle.NoPen))
        container.setPos(center)
        self.scene.addItem(container)

        cell = CellItem(_polygon(hex_corners(CELL_HEX_SIZE)))
        cell.setBrush(QBrush(CELL_COLOR))
        cell.setPen(QPen(Qt.PenStyle.NoPen))
        cell.setPos(center)
        cell.setAcceptHoverEvents(True)
        cell.on_hover = lambda entered, key=track_key: self._show_status(key if entered else None)
        if self.options.cell_controls:
            cell.on_click = lambda factor, key=track_key: self._increment(key, factor)
        self.scene.addItem(cell)

        items = _CellItems(group=[container, cell], cell=cell)

        label = self.model.get_attribute(track_key, "label")
        if label:
            label_item = self._add_text(label, QFont("Sans Serif", 9, QFont.Weight.Bold))
            self._center_text(label_item, center, dy=-VALUE_TEXT_OFFSET_Y)
            items.group.append(label_item)

        if self.options.display_value:
            items.value = self._add_text("", QFont("Sans Serif", 12, QFont.Weight.Bold))
            items.group.append(items.value)

        if self.options.display_key:
            items.key = self._add_text("", QFont("Sans Serif", 8))
            items.group.append(items.key)

        if self.options.increment_controls:
            items.increments = self._render_increment_controls(track_key, center)
            items.group.extend(items.increments)

        return items

    def _render_increment_controls(self, track_key: str, center: QPointF) -> List[IncrementItem]:
        controls: List[IncrementItem] = []
        steps = self.model.get_attribute(track_key, "increment", (1,))
        # slide along the SE edge, going counter clockwise
        angle = EDGE_ANGLES[EdgeDirection.SE] + pi
        for level in range(len(steps)):
            item = IncrementItem("")
            item.setFont(QFont("Sans Serif", 8))
            item.setBrush(QBrush(TEXT_COLOR))
            item.setPos(
                center.x() + cos(angle) * level * INCREMENT_CONTROL_SPACING + INCREMENT_CONTROL_OFFSET_X,
                center.y() + sin(angle) * level * INCREMENT_CONTROL_SPACING + INCREMENT_CONTROL_OFFSET_Y - 12
            )
            item.setAcceptHoverEvents(True)
            item.on_click = lambda factor, key=track_key: self._increment(key, factor)
            item.on_hover = lambda entered, key=track_key, lvl=level: self._hover_increment(key, lvl, entered)
            self.scene.addItem(item)
            controls.append(item)
        return controls

    def _render_outer_edge(self, layout: TrackerLayout, origin: tuple[float, float]) -> None:
        coords = [entry.coord for entry in layout.values()]
        try:
            points = trace_outline(coords, CONTAINER_HEX_SIZE, outline_size=EDGE_HEX_SIZE, offset=origin)
        except MalformedCluster as e:
            logger.warning(f"Palette outline skipped: {e}")
            return

        self.outline = QGraphicsPolygonItem(_polygon(points))
        pen = QPen(EDGE_COLOR)
        pen.setWidthF(2.0)
        self.outline.setPen(pen)
        self.outline.setBrush(QBrush(Qt.BrushStyle.NoBrush))
        self.outline.setZValue(-1)
        self.scene.addItem(self.outline)

    def _add_text(self, text: str, font: QFont) -> QGraphicsSimpleTextItem:
        item = QGraphicsSimpleTextItem(text)
        item.setFont(font)
        item.setBrush(QBrush(TEXT_COLOR))
        # text must not steal clicks from the cell underneath
        item.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self.scene.addItem(item)
        return item

    @staticmethod
    def _center_text(item: QGraphicsSimpleTextItem, center: QPointF, dy: float = 0.0) -> None:
        rect = item.boundingRect()
        item.setPos(center.x() - rect.width() / 2, center.y() + dy - rect.height() / 2)

    def _increment(self, track_key: str, factor: int) -> None:
        # a left click uses the Shift state, a right click always subtracts
        if factor > 0:
            factor = self._input_factor()
        self.model.increment_value(track_key, self._input_level(track_key), factor)

    def _hover_increment(self, track_key: str, level: int, entered: bool) -> None:
        if self.key_controller is not None:
            self.key_controller.override_input_level(track_key, level if entered else None)
        self._show_status(track_key if entered else None)
        self.refresh_cell(track_key)

    def _show_status(self, track_key: Optional[str]) -> None:
        if self.status_callback is not None:
            self.status_callback(self.status_text(track_key) if track_key else "")

    def _input_level(self, track_key: str) -> int:
        if self.key_controller is not None:
            return self.key_controller.get_input_level(track_key)
        return 0

    def _input_factor(self) -> int:
        if self.key_controller is not None:
            return self.key_controller.input_factor
        return 1

    def _on_value_changed(self, event: ChangeEvent) -> None:
        self.refresh_cell(event.track_key)

    def _on_input(self, event: InputEvent) -> None:
        # modifier keys change the increment texts of every cell
        for track_key in self._cells:
            if track_key != event.track_key:
                self.refresh_cell(track_key)
