from __future__ import annotations

import asyncio
import logging
import sys

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from task_tracker.config import SETTINGS
from task_tracker.infra.collation import setup_collation
from task_tracker.infra.db import engine, init_db
from task_tracker.infra.kv_store import SqlKeyValueStore
from task_tracker.infra.logging import setup_logging
from task_tracker.infra.task_store import TaskStore
from task_tracker.services.session_loader import SessionLoader
from task_tracker.services.task_repository import TaskRepository
from task_tracker.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def _apply_light_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#F5F5F5"))
    palette.setColor(QPalette.WindowText, QColor("#333333"))
    palette.setColor(QPalette.Base, QColor("#FFFFFF"))
    palette.setColor(QPalette.AlternateBase, QColor("#F0F0F0"))
    palette.setColor(QPalette.Text, QColor("#333333"))
    palette.setColor(QPalette.PlaceholderText, QColor("#999999"))
    palette.setColor(QPalette.Button, QColor("#F0F0F0"))
    palette.setColor(QPalette.ButtonText, QColor("#333333"))
    palette.setColor(QPalette.Highlight, QColor("#007AFF"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def main() -> None:
    setup_logging()
    setup_collation()
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    app = QApplication(sys.argv)
    try:
        loop.run_until_complete(init_db())
    except Exception as exc:  # noqa: BLE001
        logger.exception("Database initialisation failed")
        QMessageBox.critical(None, "DB error", str(exc))
        loop.close()
        return

    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_light_palette(app)
    app.setFont(QFont("Segoe UI", 10))

    store = TaskStore(SqlKeyValueStore(), key=SETTINGS.storage_key)
    repository = TaskRepository(store)
    loader = SessionLoader(store, repository)

    window = MainWindow(repository, loader, loop)
    window.show()
    exit_code = app.exec()

    loop.run_until_complete(engine.dispose())
    loop.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
