"""
Main window: one graphics view holding the palettes of the session's view mode.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QBrush, QColor, QKeyEvent, QPainter
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView, QMainWindow, QToolBar

from palettetracker.app.application import VISIBLE_APP_NAME
from palettetracker.app.state import Store
from palettetracker.app.ui.palette import VIEW_PRESETS, Palette
from palettetracker.config import PALETTE_SPACING
from palettetracker.controller.session import TrackerSession

logger = logging.getLogger(__name__)

# Shift+digit on a US layout reports the symbol, not the digit
_SHIFTED_DIGITS = ")!@#$%^&*("

_MODIFIER_CODES = {
    Qt.Key.Key_Shift.value: "ShiftLeft",
    Qt.Key.Key_Control.value: "ControlLeft",
    Qt.Key.Key_Alt.value: "AltLeft",
}


def qt_key_to_code(key: int) -> Optional[str]:
    """
    Convert a Qt key to the symbolic code used in layouts ("KeyQ", "Digit1", ...).

    Returns None for keys without a code.
    """
    if Qt.Key.Key_A.value <= key <= Qt.Key.Key_Z.value:
        return "Key" + chr(key)
    if Qt.Key.Key_0.value <= key <= Qt.Key.Key_9.value:
        return "Digit" + chr(key)
    if 0 < key < 0x80 and chr(key) in _SHIFTED_DIGITS:
        return "Digit" + str(_SHIFTED_DIGITS.index(chr(key)))
    return _MODIFIER_CODES.get(key)


class MainWindow(QMainWindow):
    def __init__(self, session: TrackerSession):
        super().__init__()
        self.session = session
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - {session.profile.name}")

        self.store = Store(session.model, session.key_controller)

        self.scene = QGraphicsScene(self)
        self.view = QGraphicsView(self.scene, self)
        self.view.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.view.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        # keys go to the window, not to the scene
        self.view.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        if session.configuration.background:
            self.view.setBackgroundBrush(QBrush(QColor(session.configuration.background)))
        self.setCentralWidget(self.view)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self.palettes: List[Palette] = []
        self._build_palettes()
        self._build_toolbar()
        self.statusBar().showMessage(f"Profile: {session.profile.name}")

        config = session.configuration
        if config.window_width and config.window_height:
            self.resize(config.window_width, config.window_height)
        else:
            rect = self.scene.itemsBoundingRect()
            self.resize(int(rect.width()) + 40, int(rect.height()) + 100)

    def _build_palettes(self) -> None:
        presets = VIEW_PRESETS.get(self.session.configuration.view)
        if presets is None:
            logger.warning(f"Unknown view '{self.session.configuration.view}', using 'hybrid'.")
            presets = VIEW_PRESETS["hybrid"]

        offset_y = 0.0
        for options in presets:
            palette = Palette(self.store, self.scene, options, status_callback=self._show_status)
            palette.render(self.session.layout, 0.0, offset_y)
            offset_y = palette.bounds().bottom() + PALETTE_SPACING
            self.palettes.append(palette)

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Session", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        act_reset = QAction("Reset", self)
        act_reset.setToolTip("Reset all values")
        act_reset.triggered.connect(self.session.reset)
        toolbar.addAction(act_reset)

        act_size = QAction("Remember window size", self)
        act_size.triggered.connect(self._remember_window_size)
        toolbar.addAction(act_size)

    def _remember_window_size(self) -> None:
        self.session.remember_window_size(self.width(), self.height())
        self.statusBar().showMessage(f"Window size saved: {self.width()}x{self.height()}", 3000)

    def _show_status(self, text: str) -> None:
        if text:
            self.statusBar().showMessage(text)
        else:
            self.statusBar().clearMessage()

    # ------------------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------------------

    def keyPressEvent(self, event: QKeyEvent) -> None:
        controller = self.session.key_controller
        code = qt_key_to_code(event.key())
        if controller is None or code is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return

        mods = event.modifiers()
        handled = controller.on_key_down(
            code,
            alt=bool(mods & Qt.KeyboardModifier.AltModifier),
            ctrl=bool(mods & Qt.KeyboardModifier.ControlModifier),
            shift=bool(mods & Qt.KeyboardModifier.ShiftModifier),
        )
        if handled:
            event.accept()
        else:
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        controller = self.session.key_controller
        code = qt_key_to_code(event.key())
        if controller is None or code is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        if controller.on_key_up(code):
            event.accept()
        else:
            super().keyReleaseEvent(event)

    def closeEvent(self, event) -> None:
        self.store.detach()
        self.session.close()
        super().closeEvent(event)
