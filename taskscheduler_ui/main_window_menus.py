from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import QMainWindow


def build_menus(
    window: QMainWindow,
    *,
    on_open_tasks: Callable[[], None],
    on_save_tasks: Callable[[], None],
    on_export_schedule: Callable[[], None],
    on_exit: Callable[[], None],
) -> None:
    file_menu = window.menuBar().addMenu("File")
    open_action = file_menu.addAction("Open tasks…")
    open_action.triggered.connect(on_open_tasks)
    save_action = file_menu.addAction("Save tasks…")
    save_action.triggered.connect(on_save_tasks)
    file_menu.addSeparator()
    window._export_action = file_menu.addAction("Export schedule…")  # noqa: SLF001
    window._export_action.triggered.connect(on_export_schedule)  # noqa: SLF001
    file_menu.addSeparator()
    exit_action = file_menu.addAction("Exit")
    exit_action.triggered.connect(on_exit)
