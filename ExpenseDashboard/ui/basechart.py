"""Shared chart slice, model, and base view for category-based charts."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from PySide6 import QtCore, QtGui, QtWidgets

from . import ui
from ..settings import locale


@dataclass(slots=True)
class ChartSlice:
    """Slice data plus geometry computed at paint time."""
    category: str
    amount_txt: str
    value_abs: float
    color: QtGui.QColor
    start_qt: int
    span_qt: int
    # geometry fields for slice rendering
    mid_deg: float = 0.0
    legend_rect: QtCore.QRectF = field(default_factory=QtCore.QRectF, repr=False)


class ChartModel:
    """Builds ChartSlice instances from a category to amount mapping.

    Slices follow the order of the mapping and take their colour from the palette by
    position, wrapping around when there are more categories than colours.
    """

    def __init__(self, palette: Sequence[str]) -> None:
        if not palette:
            raise ValueError('A chart palette needs at least one colour.')
        self._palette = [QtGui.QColor(f) for f in palette]
        self._slices: List[ChartSlice] = []

    @property
    def slices(self) -> List[ChartSlice]:
        return self._slices

    def color_at(self, position: int) -> QtGui.QColor:
        return QtGui.QColor(self._palette[position % len(self._palette)])

    def rebuild(self, values: Dict[str, float], locale_name: str) -> None:
        """Populate slices from the given mapping."""
        if not values:
            logging.debug('ChartModel: no data available')
            self._slices = []
            return

        amounts = [abs(v) for v in values.values()]
        total_abs = sum(amounts)
        qt_circle = 360 * 16
        rotation_qt = 90 * 16

        spans: List[int] = [
            int(round(v / total_abs * qt_circle)) if total_abs else 0
            for v in amounts
        ]

        # Rounding leftovers go to the largest slice so the ring closes
        leftover = qt_circle - sum(spans) if total_abs else 0
        if leftover:
            largest = max(range(len(amounts)), key=lambda i: amounts[i])
            spans[largest] += leftover

        cursor = 0
        new_slices: List[ChartSlice] = []
        for n, ((category, value), span_qt) in enumerate(zip(values.items(), spans)):
            new_slices.append(
                ChartSlice(
                    category=category,
                    amount_txt=locale.format_currency_value(value, locale_name),
                    value_abs=abs(value),
                    color=self.color_at(n),
                    # Qt angles run counter-clockwise, slices are laid out clockwise from 12 o'clock
                    start_qt=(rotation_qt - cursor - span_qt) % qt_circle,
                    span_qt=span_qt,
                )
            )
            cursor += span_qt

        self._slices = new_slices


class BaseChartView(QtWidgets.QWidget):
    """Base widget for interactive category charts.

    Subclasses implement the geometry, hit testing and the drawing of slices, legend and
    tooltip. The data is set once at construction time.
    """
    hoverChanged = QtCore.Signal(int)

    def __init__(self, palette: Sequence[str], parent=None) -> None:
        super().__init__(parent)
        self._show_legend: bool = True
        self._show_tooltip: bool = True
        self._geom_sig: tuple[int, int] = (-1, -1)
        self._hover_index: int = -1

        self.model = ChartModel(palette)

        self.setMouseTracking(True)
        self.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)

        self._create_ui()
        self._init_actions()

    def _create_ui(self) -> None:
        self.setMinimumSize(
            ui.Size.DefaultWidth(0.5), ui.Size.DefaultHeight(0.4)
        )
        self.setSizePolicy(
            QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Expanding
        )

    def set_values(self, values: Dict[str, float], locale_name: str) -> None:
        self.model.rebuild(values, locale_name)
        self._geom_sig = (-1, -1)
        self._hover_index = -1
        self.update()

    def slice_count(self) -> int:
        return len(self.model.slices)

    def tooltip_text(self, index: int) -> str:
        """The tooltip shown when hovering the slice at the given index."""
        sl = self.model.slices[index]
        return f'{sl.category}: {sl.amount_txt}'

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        self._recalc_geometry()

        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)

        self._draw_background(painter)
        self._draw_slices(painter)

        if self._show_legend:
            self._draw_legend(painter)

        if self._show_tooltip:
            self._draw_tooltip(painter)

        painter.end()

    def _draw_background(self, painter: QtGui.QPainter) -> None:
        painter.fillRect(self.rect(), ui.Color.VeryDarkBackground())
        offset = ui.Size.Indicator(1.0)
        inner = self.rect().adjusted(offset, offset, -offset, -offset)
        painter.setBrush(ui.Color.DarkBackground())
        painter.setPen(QtCore.Qt.NoPen)
        painter.drawRoundedRect(inner, ui.Size.Indicator(2.0), ui.Size.Indicator(2.0))

    # Subclasses must implement:
    def _recalc_geometry(self) -> None:
        raise NotImplementedError

    def _draw_slices(self, painter: QtGui.QPainter) -> None:
        raise NotImplementedError

    def _slice_at(self, pos: QtCore.QPoint) -> int:
        raise NotImplementedError

    def _draw_legend(self, painter: QtGui.QPainter) -> None:
        raise NotImplementedError

    def _draw_tooltip(self, painter: QtGui.QPainter) -> None:
        raise NotImplementedError

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        idx = self._slice_at(event.pos())
        if idx != self._hover_index:
            self._hover_index = idx
            self.hoverChanged.emit(idx)
        self.update()
        super().mouseMoveEvent(event)

    def leaveEvent(self, event: QtCore.QEvent) -> None:
        if self._hover_index != -1:
            self._hover_index = -1
            self.hoverChanged.emit(-1)
            self.update()
        super().leaveEvent(event)

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        self._geom_sig = (-1, -1)
        self.update()
        super().resizeEvent(event)

    def _init_actions(self) -> None:
        @QtCore.Slot(bool)
        def toggle_legend(checked: bool) -> None:
            self._show_legend = checked
            self.update()

        action = QtGui.QAction('Toggle Legend', self)
        action.setCheckable(True)
        action.setChecked(self._show_legend)
        action.setToolTip('Show/hide legend')
        action.setStatusTip('Show/hide legend')
        action.setShortcut('Alt+1')
        action.setShortcutContext(QtCore.Qt.WidgetShortcut)
        action.triggered.connect(toggle_legend)
        self.addAction(action)

        @QtCore.Slot(bool)
        def toggle_tooltip(checked: bool) -> None:
            self._show_tooltip = checked
            self.update()

        action = QtGui.QAction('Toggle Tooltip', self)
        action.setCheckable(True)
        action.setChecked(self._show_tooltip)
        action.setToolTip('Show/hide tooltip')
        action.setStatusTip('Show/hide tooltip')
        action.setShortcut('Alt+2')
        action.setShortcutContext(QtCore.Qt.WidgetShortcut)
        action.triggered.connect(toggle_tooltip)
        self.addAction(action)
