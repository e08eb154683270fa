"""Trend line chart.

This module provides:
    - paint decorator: wraps paint helpers with save/restore and error logging
    - axis_ticks: evenly spaced y-axis values starting at zero
    - Geometry: container for calculated drawing regions
    - TrendChart: custom QWidget painting the spending per day as a filled line
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import pandas as pd
from PySide6 import QtCore, QtGui, QtWidgets

from ..records import TrendPoint
from ...settings import locale
from ...ui import ui

SERIES_LABEL: str = 'Daily Expenses'
SERIES_COLOR: str = '#667eea'


def paint(func):  # type: ignore[valid-type]
    """Decorator to wrap paint helpers with save/restore + exception log."""

    def wrapper(self, painter: QtGui.QPainter) -> None:  # type: ignore[valid-type]
        painter.save()
        try:
            func(self, painter)
        except Exception as ex:
            logging.error(f'TrendChart: error in {func.__name__}', exc_info=ex)
        painter.restore()

    return wrapper


def axis_ticks(maximum: float, count: int = 5) -> List[float]:
    """Return y-axis tick values from zero up to at least ``maximum``.

    The step is rounded to 1, 2, 2.5 or 5 times a power of ten.

    Args:
        maximum (float): The largest value to show.
        count (int): The approximate number of intervals.

    Returns:
        list[float]: Tick values, always starting at ``0.0``.
    """
    if count < 1 or not math.isfinite(maximum) or maximum <= 0:
        return [0.0]

    raw = maximum / count
    magnitude = 10 ** math.floor(math.log10(raw))
    step = magnitude * 10
    for m in (1.0, 2.0, 2.5, 5.0, 10.0):
        if m * magnitude >= raw:
            step = m * magnitude
            break

    n = math.ceil(maximum / step - 1e-9)
    return [round(i * step, 10) for i in range(n + 1)]


@dataclass
class Geometry:
    """All pixel-space objects bundled in one container."""
    area: QtCore.QRectF = field(default_factory=QtCore.QRectF)
    points: list[QtCore.QPointF] = field(default_factory=list)
    line_path: QtGui.QPainterPath = field(default_factory=QtGui.QPainterPath)
    fill_path: QtGui.QPainterPath = field(default_factory=QtGui.QPainterPath)
    ticks: list[tuple[float, float]] = field(default_factory=list)
    baseline_y: float = 0.0
    data_max: float = 0.0


class TrendChart(QtWidgets.QWidget):
    """Custom QWidget painting the trend as a filled line.

    Points are drawn in the order the service sent them. The y-axis starts at zero and
    every tick and tooltip is formatted as currency.
    """

    def __init__(self, trend: Sequence[TrendPoint], locale_name: str,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName('ExpenseDashboardTrendChart')

        self._locale = locale_name
        self._amounts: pd.Series = pd.Series([float(f.amount) for f in trend], dtype=float)
        self._labels: List[str] = [locale.format_date(f.date, locale_name) for f in trend]

        self._geom: Geometry = Geometry()
        self._show_tooltip: bool = True

        self._hover_index: Optional[int] = None
        self._hover_pos: Optional[QtCore.QPoint] = None

        self.setMouseTracking(True)
        self.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)
        self.setMinimumSize(ui.Size.DefaultWidth(0.5), ui.Size.DefaultHeight(0.4))
        self.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Expanding)

        self._init_actions()

    def _init_actions(self) -> None:
        tooltip_action = QtGui.QAction('Show Tooltip', self, checkable=True)
        tooltip_action.setChecked(self._show_tooltip)
        tooltip_action.toggled.connect(self.toggle_tooltip)
        tooltip_action.setToolTip('Show or hide the tooltip')
        tooltip_action.setStatusTip('Show or hide the tooltip')
        tooltip_action.setShortcut('alt+1')
        self.addAction(tooltip_action)

    @QtCore.Slot(bool)
    def toggle_tooltip(self, visible: bool) -> None:
        """Toggle tooltip visibility."""
        self._show_tooltip = bool(visible)
        self.update()

    def labels(self) -> List[str]:
        """The x-axis labels, in data order."""
        return list(self._labels)

    def tick_labels(self) -> List[str]:
        """The y-axis tick labels, bottom to top."""
        return [locale.format_currency_value(v, self._locale) for v in axis_ticks(self._data_max())]

    def tooltip_text(self, index: int) -> str:
        return f'{self._labels[index]}: {locale.format_currency_value(self._amounts.iat[index], self._locale)}'

    def _data_max(self) -> float:
        if self._amounts.empty:
            return 0.0
        return max(0.0, float(self._amounts.max(skipna=True)))

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(ui.Size.DefaultWidth(1.0), ui.Size.DefaultHeight(0.6))

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        self._rebuild_geometry()
        super().resizeEvent(event)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)

        self._draw_background(painter)
        self._draw_legend(painter)
        self._draw_axes(painter)
        self._draw_series(painter)
        if self._show_tooltip:
            self._draw_tooltip(painter)

        painter.end()

    def _font(self):
        return ui.Font.ThinFont(ui.Size.SmallText(1.0))

    @paint
    def _draw_background(self, painter: QtGui.QPainter) -> None:
        painter.fillRect(self.rect(), ui.Color.VeryDarkBackground())

        o = ui.Size.Indicator(1.0)
        rect = self.rect().adjusted(o, o, -o, -o)

        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(ui.Color.DarkBackground())

        o = ui.Size.Indicator(2.0)
        painter.drawRoundedRect(rect, o, o)

    @paint
    def _draw_legend(self, painter: QtGui.QPainter) -> None:
        font, metrics = ui.Font.MediumFont(ui.Size.SmallText(1.0))
        painter.setFont(font)

        swatch = metrics.height() * 0.7
        pad = ui.Size.Indicator(1.5)
        text_w = metrics.horizontalAdvance(SERIES_LABEL)
        total_w = swatch + pad + text_w
        x = self.rect().center().x() - total_w / 2.0
        y = ui.Size.Margin(0.5)

        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(QtGui.QColor(SERIES_COLOR))
        painter.drawRoundedRect(QtCore.QRectF(x, y + (metrics.height() - swatch) / 2.0, swatch, swatch), 2, 2)

        painter.setPen(ui.Color.SecondaryText())
        painter.drawText(QtCore.QPointF(x + swatch + pad, y + metrics.ascent()), SERIES_LABEL)

    @paint
    def _draw_axes(self, painter: QtGui.QPainter) -> None:
        geom = self._geom
        if geom.area.isEmpty():
            return

        font, metrics = self._font()
        painter.setFont(font)

        # horizontal grid lines with currency labels on the left
        grid_pen = QtGui.QPen(ui.Color.Background())
        grid_pen.setCosmetic(True)
        for value, y in geom.ticks:
            painter.setPen(grid_pen)
            painter.drawLine(QtCore.QPointF(geom.area.left(), y), QtCore.QPointF(geom.area.right(), y))

            lbl = locale.format_currency_value(value, self._locale)
            painter.setPen(ui.Color.SecondaryText())
            rect = QtCore.QRectF(
                self.rect().left(), y - metrics.height() / 2.0,
                geom.area.left() - ui.Size.Indicator(1.0) - self.rect().left(), metrics.height()
            )
            painter.drawText(rect, QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter, lbl)

        # x labels under each point, skipping labels that would overlap
        occupied: List[QtCore.QRectF] = []
        pad = ui.Size.Indicator(1.0)
        painter.setPen(ui.Color.SecondaryText())
        for pt, lbl in zip(geom.points, self._labels):
            w = metrics.horizontalAdvance(lbl) + pad * 2
            rect = QtCore.QRectF(pt.x() - w / 2.0, geom.baseline_y + pad, w, metrics.height())
            if any(rect.intersects(o) for o in occupied):
                continue
            occupied.append(rect)
            painter.drawText(rect, QtCore.Qt.AlignCenter, lbl)

    @paint
    def _draw_series(self, painter: QtGui.QPainter) -> None:
        geom = self._geom
        if not geom.points:
            return

        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)

        color = QtGui.QColor(SERIES_COLOR)
        fill = QtGui.QColor(color)
        fill.setAlphaF(0.1)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(fill)
        painter.drawPath(geom.fill_path)

        pen = QtGui.QPen(color)
        pen.setCosmetic(True)
        pen.setWidthF(ui.Size.Separator(2.0))
        pen.setCapStyle(QtCore.Qt.RoundCap)
        pen.setJoinStyle(QtCore.Qt.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(QtCore.Qt.NoBrush)
        painter.drawPath(geom.line_path)

        r = ui.Size.Indicator(0.75)
        painter.setBrush(color)
        for idx, pt in enumerate(geom.points):
            radius = r * 1.6 if idx == self._hover_index else r
            painter.drawEllipse(pt, radius, radius)

    @paint
    def _draw_tooltip(self, painter: QtGui.QPainter) -> None:
        """Draw the hovered point's date and amount."""
        idx = self._hover_index
        if idx is None or self._hover_pos is None or not (0 <= idx < len(self._geom.points)):
            return

        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)

        font, metrics = ui.Font.BoldFont(ui.Size.MediumText(1.0))
        painter.setFont(font)
        text = self.tooltip_text(idx)
        pad = ui.Size.Indicator(2.0)
        w = metrics.horizontalAdvance(text) + pad * 2
        h = metrics.height() + pad * 2

        pt = self._geom.points[idx]
        area = self._geom.area
        x = max(area.left(), min(pt.x() - w / 2, area.right() - w))
        y = pt.y() - h - pad
        if y < area.top():
            y = pt.y() + pad

        rect = QtCore.QRectF(x, y, w, h)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(ui.Color.VeryDarkBackground())
        painter.drawRoundedRect(rect, pad, pad)
        painter.setPen(QtGui.QPen(ui.Color.Text()))
        painter.drawText(QtCore.QPointF(x + pad, y + pad + metrics.ascent()), text)

    def _rebuild_geometry(self) -> None:
        """Populate self._geom from current data + widget size."""
        self._geom = Geometry()
        geom = self._geom

        font, metrics = self._font()
        ticks = axis_ticks(self._data_max())
        label_w = max(
            metrics.horizontalAdvance(locale.format_currency_value(v, self._locale)) for v in ticks
        )

        rect = QtCore.QRectF(self.contentsRect())
        m = ui.Size.Margin(1.0)
        geom.area = rect.adjusted(
            m + label_w,
            m + metrics.height() * 1.5,
            -m,
            -(m + metrics.height() * 1.5)
        )
        if geom.area.width() <= 0 or geom.area.height() <= 0:
            geom.area = QtCore.QRectF()
            return

        geom.baseline_y = geom.area.bottom()
        geom.data_max = ticks[-1] or 1.0

        for value in ticks:
            y = geom.area.bottom() - value / geom.data_max * geom.area.height()
            geom.ticks.append((value, y))

        n = len(self._amounts)
        if not n:
            return

        step = geom.area.width() / (n - 1) if n > 1 else 0.0
        for i in range(n):
            value = max(0.0, float(self._amounts.iat[i]))
            x = geom.area.left() + i * step if n > 1 else geom.area.center().x()
            y = geom.area.bottom() - min(value / geom.data_max, 1.0) * geom.area.height()
            pt = QtCore.QPointF(x, y)
            geom.points.append(pt)
            if i == 0:
                geom.line_path.moveTo(pt)
            else:
                geom.line_path.lineTo(pt)

        geom.fill_path = QtGui.QPainterPath(geom.line_path)
        geom.fill_path.lineTo(geom.points[-1].x(), geom.baseline_y)
        geom.fill_path.lineTo(geom.points[0].x(), geom.baseline_y)
        geom.fill_path.closeSubpath()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        """Highlight the point nearest to the cursor."""
        pos = event.pos()
        self._hover_pos = pos

        hovered: Optional[int] = None
        if self._geom.points:
            distances = [abs(pt.x() - pos.x()) for pt in self._geom.points]
            nearest = min(range(len(distances)), key=distances.__getitem__)
            if distances[nearest] <= ui.Size.Margin(1.0):
                hovered = nearest

        if hovered != self._hover_index:
            self._hover_index = hovered
        self.update()
        super().mouseMoveEvent(event)

    def leaveEvent(self, event: QtCore.QEvent) -> None:
        """Clear hover state when mouse leaves widget."""
        if self._hover_index is not None:
            self._hover_index = None
            self._hover_pos = None
            self.update()
        super().leaveEvent(event)
