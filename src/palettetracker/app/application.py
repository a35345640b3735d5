from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication, QSettings

import sys
import os
from typing import Optional, Sequence

ORG_ID = "palettetracker"
APP_ID = "palettetracker"

VISIBLE_APP_NAME = "Palette Tracker"


def create_app(argv: Optional[Sequence[str]] = None) -> QApplication:
    """Create and configure the QApplication instance (or return the running one)."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    app = QApplication.instance()
    if app is not None:
        return app

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication(list(argv) if argv is not None else sys.argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app
