"""Gantt-style timeline of one run.

One row per task in execution order; each bar spans the task's start (its
waiting time) to its end (its turnaround time) on a shared axis.
"""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QRect, QSize, Qt
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from taskscheduler.types import TimelineEntry


@dataclass(frozen=True)
class BarGeometry:
    name: str
    x: int
    width: int
    start_label: str
    end_label: str


def _fmt_time(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def layout_bars(entries: list[TimelineEntry], *, track_width: int) -> list[BarGeometry]:
    """Scale entries onto `track_width` pixels (Qt-free for tests)."""

    if not entries:
        return []
    span = max(max(e.end for e in entries), 1.0)
    scale = max(1, track_width) / span
    bars: list[BarGeometry] = []
    for e in entries:
        start = max(0.0, e.start)
        end = max(start, e.end)
        bars.append(
            BarGeometry(
                name=e.name,
                x=int(round(start * scale)),
                width=max(1, int(round((end - start) * scale))),
                start_label=_fmt_time(e.start),
                end_label=_fmt_time(e.end),
            )
        )
    return bars


class TimelineWidget(QWidget):
    _ROW_H = 30
    _ROW_GAP = 10
    _LABEL_W = 90
    _MARGIN = 24

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self._entries: list[TimelineEntry] = []

    def set_entries(self, entries: list[TimelineEntry]) -> None:
        self._entries = list(entries)
        self.updateGeometry()
        self.update()

    def entries(self) -> list[TimelineEntry]:
        return list(self._entries)

    def sizeHint(self) -> QSize:  # type: ignore[override]
        rows = max(1, len(self._entries))
        return QSize(600, self._MARGIN * 2 + rows * (self._ROW_H + self._ROW_GAP))

    def paintEvent(self, event) -> None:  # type: ignore[override]
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        p.fillRect(self.rect(), self.palette().base())

        text_color = self.palette().text().color()
        p.setPen(text_color)

        if not self._entries:
            p.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "No timeline yet.")
            return

        track_x = self._LABEL_W
        track_w = max(1, self.width() - track_x - self._MARGIN)
        bars = layout_bars(self._entries, track_width=track_w)

        for i, bar in enumerate(bars):
            y = self._MARGIN + i * (self._ROW_H + self._ROW_GAP)
            p.setPen(text_color)
            p.drawText(
                QRect(4, y, self._LABEL_W - 8, self._ROW_H),
                Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft,
                bar.name,
            )

            rect = QRect(track_x + bar.x, y, bar.width, self._ROW_H)
            fill = QColor.fromHsv((i * 47) % 360, 110, 210)
            p.fillRect(rect, fill)
            p.drawRect(rect)

            p.drawText(rect.left(), y - 2, bar.start_label)
            p.drawText(rect.right() - 12, y - 2, bar.end_label)
