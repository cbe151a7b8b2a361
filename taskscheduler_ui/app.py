from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from taskscheduler.config import RunContext
from taskscheduler_ui.main_window import MainWindow
from taskscheduler_ui.run_controller import RunController


def run_app(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = QApplication(argv if argv is not None else sys.argv)
    app.setApplicationName("Task Scheduler")
    app.setOrganizationName("Task Scheduler")

    controller = RunController()
    # Ensure we don't tear down while a pipeline worker thread is still running.
    app.aboutToQuit.connect(controller.shutdown)
    window = MainWindow(run_controller=controller, context=RunContext.from_env())
    window.resize(1100, 620)
    window.show()

    return app.exec()
