"""Doughnut chart view for visualizing spending per category."""
import math
from typing import Dict, List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ...ui import ui
from ...ui.basechart import BaseChartView

PALETTE: List[str] = [
    '#667eea',
    '#764ba2',
    '#f093fb',
    '#4facfe',
    '#43e97b',
    '#fa709a',
    '#fee140',
    '#30cfd0',
]


class CategoryChart(BaseChartView):
    """Interactive doughnut chart with the legend on the right."""

    def __init__(self, values: Dict[str, float], locale_name: str,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(PALETTE, parent)
        self.setObjectName('ExpenseDashboardCategoryChart')

        # hole size ratio (inner radius / outer radius)
        self.hole_ratio = 0.55
        # ensure geometry attributes exist before first paint
        self._outer_rect = QtCore.QRect()
        self._inner_rect = QtCore.QRect()
        self._legend_rect = QtCore.QRectF()

        self.set_values(values, locale_name)

    def _legend_width(self) -> float:
        if not self._show_legend or not self.model.slices:
            return 0.0
        _, metrics = ui.Font.MediumFont(ui.Size.SmallText(1.0))
        text_w = max(metrics.horizontalAdvance(sl.category) for sl in self.model.slices)
        return text_w + ui.Size.Margin(1.5)

    def _recalc_geometry(self) -> None:
        sig = (self.width(), self.height())
        if sig == self._geom_sig:
            return

        margin = ui.Size.Margin(1.0)
        chart_inner = QtCore.QRectF(self.rect()).adjusted(margin, margin, -margin, -margin)

        # reserve the right-hand strip for the legend
        legend_w = min(self._legend_width(), chart_inner.width() * 0.5)
        self._legend_rect = QtCore.QRectF(
            chart_inner.right() - legend_w, chart_inner.top(),
            legend_w, chart_inner.height()
        )
        chart_inner.setRight(chart_inner.right() - legend_w)

        edge = int(max(0.0, min(chart_inner.width(), chart_inner.height())))
        outer = QtCore.QRect(
            int(chart_inner.x() + (chart_inner.width() - edge) / 2),
            int(chart_inner.y() + (chart_inner.height() - edge) / 2),
            edge, edge
        )

        radius = outer.width() / 2.0
        thickness = int(radius - radius * self.hole_ratio)
        self._outer_rect = outer
        self._inner_rect = outer.adjusted(thickness, thickness, -thickness, -thickness)

        for sl in self.model.slices:
            sl.mid_deg = (sl.start_qt + sl.span_qt / 2.0) / 16.0

        self._geom_sig = sig

    def _slice_at(self, pos: QtCore.QPoint) -> int:
        if self._outer_rect.isEmpty():
            return -1

        center = QtCore.QPointF(self._outer_rect.center())
        dx = pos.x() - center.x()
        dy = center.y() - pos.y()
        dist = math.hypot(dx, dy)
        if dist < self._inner_rect.width() / 2.0 or dist > self._outer_rect.width() / 2.0:
            return -1

        angle = math.degrees(math.atan2(dy, dx)) % 360.0
        for index, sl in enumerate(self.model.slices):
            span = sl.span_qt / 16.0
            if span == 0:
                continue
            start = (sl.start_qt / 16.0) % 360.0
            end = (start + span) % 360.0

            if start < end:
                if start <= angle <= end:
                    return index
            elif angle >= start or angle <= end:
                return index

        return -1

    def _draw_slices(self, painter: QtGui.QPainter) -> None:
        if not self.model.slices or self._outer_rect.isEmpty():
            return

        border = QtGui.QPen(ui.Color.DarkBackground())
        border.setWidthF(ui.Size.Separator(2.0))

        for idx, sl in enumerate(self.model.slices):
            color = sl.color.lighter(115) if idx == self._hover_index else sl.color
            painter.setBrush(color)
            painter.setPen(border)
            painter.drawPie(self._outer_rect, sl.start_qt, sl.span_qt)

        painter.setBrush(ui.Color.DarkBackground())
        painter.setPen(QtCore.Qt.NoPen)
        painter.drawEllipse(self._inner_rect)

    def _draw_legend(self, painter: QtGui.QPainter) -> None:
        if self._legend_rect.isEmpty():
            return

        font, metrics = ui.Font.MediumFont(ui.Size.SmallText(1.0))
        painter.setFont(font)

        row_h = metrics.height() + ui.Size.Indicator(1.0)
        swatch = metrics.height() * 0.7
        pad = ui.Size.Indicator(1.5)

        y = self._legend_rect.center().y() - row_h * len(self.model.slices) / 2.0
        y = max(self._legend_rect.top(), y)
        x = self._legend_rect.left() + pad

        for sl in self.model.slices:
            if y + row_h > self._legend_rect.bottom():
                break
            rect = QtCore.QRectF(x, y + (row_h - swatch) / 2.0, swatch, swatch)
            painter.setPen(QtCore.Qt.NoPen)
            painter.setBrush(sl.color)
            painter.drawRoundedRect(rect, swatch * 0.2, swatch * 0.2)

            painter.setPen(ui.Color.Text())
            text_rect = QtCore.QRectF(rect.right() + pad, y, self._legend_rect.right() - rect.right() - pad, row_h)
            painter.drawText(
                text_rect,
                QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter,
                metrics.elidedText(sl.category, QtCore.Qt.ElideRight, text_rect.width())
            )
            sl.legend_rect = QtCore.QRectF(rect.topLeft(), text_rect.bottomRight())
            y += row_h

    def _draw_tooltip(self, painter: QtGui.QPainter) -> None:
        if self._hover_index < 0 or self._hover_index >= len(self.model.slices):
            return

        sl = self.model.slices[self._hover_index]
        cursor_pos = self.mapFromGlobal(QtGui.QCursor.pos())

        text = self.tooltip_text(self._hover_index)
        font, metrics = ui.Font.BoldFont(ui.Size.MediumText())
        painter.setFont(font)

        pad = ui.Size.Indicator(2.0)
        swatch = metrics.height()
        width = swatch + pad + metrics.horizontalAdvance(text) + pad * 2
        height = swatch + pad * 2

        x = max(self.rect().left(), min(cursor_pos.x() - width / 2, self.rect().right() - width))
        y = cursor_pos.y() - height - pad
        if y < self.rect().top():
            y = cursor_pos.y() + pad

        bg = QtCore.QRectF(x, y, width, height)
        painter.setBrush(ui.Color.VeryDarkBackground())
        painter.setPen(QtCore.Qt.NoPen)
        painter.drawRoundedRect(bg, pad, pad)

        painter.setBrush(sl.color)
        painter.drawRoundedRect(QtCore.QRectF(bg.x() + pad, bg.y() + pad, swatch, swatch), pad * 0.5, pad * 0.5)

        painter.setPen(ui.Color.Text())
        painter.drawText(
            QtCore.QPointF(bg.x() + pad + swatch + pad, bg.y() + pad + metrics.ascent()),
            text
        )
