from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from tasknest.config import PROJECT_ROOT
from tasknest.infra.db import init_db
from tasknest.infra.logging import setup_logging
from tasknest.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def _apply_paper_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#F9F8F6"))
    palette.setColor(QPalette.WindowText, QColor("#292524"))
    palette.setColor(QPalette.Base, QColor("#FFFFFF"))
    palette.setColor(QPalette.AlternateBase, QColor("#F5F5F4"))
    palette.setColor(QPalette.Text, QColor("#44403C"))
    palette.setColor(QPalette.Button, QColor("#F5F5F4"))
    palette.setColor(QPalette.ButtonText, QColor("#44403C"))
    palette.setColor(QPalette.ToolTipBase, QColor("#FFFFFF"))
    palette.setColor(QPalette.ToolTipText, QColor("#44403C"))
    palette.setColor(QPalette.Highlight, QColor("#FDA4AF"))
    palette.setColor(QPalette.HighlightedText, QColor("#1C1917"))
    app.setPalette(palette)


def _find_qss_path() -> Path | None:
    candidates = [
        Path(__file__).resolve().parent / "ui" / "styles.qss",
        PROJECT_ROOT / "tasknest" / "ui" / "styles.qss",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def load_styles(app: QApplication) -> None:
    qss_path = _find_qss_path()
    if not qss_path:
        logger.warning("Stylesheet not found, using the plain palette")
        return
    app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def main() -> None:
    setup_logging()
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Database is not available")
        app = QApplication(sys.argv)
        QMessageBox.critical(None, "DB error", str(exc))
        return

    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_paper_palette(app)
    app.setFont(QFont("Noto Serif", 10))
    load_styles(app)

    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
