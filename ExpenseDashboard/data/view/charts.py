"""Chart lifecycle management.

This module provides:
    - ChartKind: the two charts shown on the dashboard
    - ChartManager: owns the chart widgets and rebuilds them from every analytics summary
    - ChartDockWidget: dock widget the charts are rendered into
"""
import enum
import logging
from typing import Callable, Dict, Optional

from PySide6 import QtCore, QtWidgets

from .doughnut import CategoryChart
from .trends import TrendChart
from ..records import Analytics
from ...settings import locale
from ...ui import ui
from ...ui.dockable_widget import DockableWidget


class ChartKind(enum.StrEnum):
    TREND = 'trend'
    CATEGORY = 'category'


def _create_trend_chart(analytics: Analytics, locale_name: str, parent: QtWidgets.QWidget) -> QtWidgets.QWidget:
    return TrendChart(analytics.trend, locale_name, parent=parent)


def _create_category_chart(analytics: Analytics, locale_name: str, parent: QtWidgets.QWidget) -> QtWidgets.QWidget:
    return CategoryChart(dict(analytics.by_category), locale_name, parent=parent)


FACTORIES: Dict[ChartKind, Callable[[Analytics, str, QtWidgets.QWidget], QtWidgets.QWidget]] = {
    ChartKind.TREND: _create_trend_chart,
    ChartKind.CATEGORY: _create_category_chart,
}


class ChartManager(QtCore.QObject):
    """Keeps at most one live chart widget per kind.

    Every call to :meth:`refresh` destroys the current widget of each kind and builds a
    new one from the summary. Charts are never updated in place.

    Args:
        targets (dict): Maps each :class:`ChartKind` to the widget the chart is shown in.
            Dock widgets take the chart with ``setWidget``, other widgets get it added to
            their layout.
    """

    def __init__(self, targets: Dict[ChartKind, QtWidgets.QWidget], parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        missing = [f for f in ChartKind if f not in targets]
        if missing:
            raise ValueError(f'No render target given for {", ".join(missing)}.')

        self._targets = dict(targets)
        self._charts: Dict[ChartKind, QtWidgets.QWidget] = {}

    def is_active(self, kind: ChartKind) -> bool:
        return kind in self._charts

    @QtCore.Slot(object)
    def refresh(self, analytics: Analytics) -> None:
        """Replace both charts with new ones built from ``analytics``."""
        from ...settings import lib
        locale_name = lib.settings['locale'] or locale.DEFAULT_LOCALE

        for kind in ChartKind:
            self._destroy(kind)
            self._attach(kind, FACTORIES[kind](analytics, locale_name, self._targets[kind]))

        logging.debug(
            f'Charts rebuilt: {len(analytics.trend)} trend points, {len(analytics.by_category)} categories'
        )

    @QtCore.Slot()
    def clear(self) -> None:
        """Destroy all charts."""
        for kind in ChartKind:
            self._destroy(kind)

    def _attach(self, kind: ChartKind, chart: QtWidgets.QWidget) -> None:
        target = self._targets[kind]
        if isinstance(target, QtWidgets.QDockWidget):
            _set_dock_widget(target, chart)
        else:
            if target.layout() is None:
                layout = QtWidgets.QVBoxLayout(target)
                layout.setContentsMargins(0, 0, 0, 0)
            target.layout().addWidget(chart)
        chart.show()
        self._charts[kind] = chart

    def _destroy(self, kind: ChartKind) -> None:
        chart = self._charts.pop(kind, None)
        if chart is None:
            return

        target = self._targets[kind]
        if isinstance(target, QtWidgets.QDockWidget):
            # The dock keeps a single empty widget while no chart is shown
            if target.widget() is chart:
                _set_dock_widget(target, QtWidgets.QWidget(target))
            else:
                _discard(chart)
        else:
            if target.layout() is not None:
                target.layout().removeWidget(chart)
            _discard(chart)
        logging.debug(f'Destroyed {kind} chart')


def _discard(widget: QtWidgets.QWidget) -> None:
    widget.hide()
    widget.setParent(None)
    widget.deleteLater()


def _set_dock_widget(dock: QtWidgets.QDockWidget, widget: QtWidgets.QWidget) -> None:
    """Show ``widget`` in ``dock`` and delete the widget it replaces.

    ``QDockWidget.setWidget`` only hides the previous widget, it stays a child of the dock.
    """
    old = dock.widget()
    dock.setWidget(widget)
    if old is not None and old is not widget:
        _discard(old)


class ChartDockWidget(DockableWidget):
    """Dock widget hosting one of the dashboard charts."""

    def __init__(self, title: str, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(
            title,
            parent,
            min_width=ui.Size.DefaultWidth(0.5),
            min_height=ui.Size.DefaultHeight(0.4),
            size_hint=QtCore.QSize(ui.Size.DefaultWidth(0.8), ui.Size.DefaultHeight(0.6)),
        )
        self.setContentsMargins(0, 0, 0, 0)
        self.setWidget(QtWidgets.QWidget(self))
