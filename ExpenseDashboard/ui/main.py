"""Main window composition and UI entry points for ExpenseDashboard.

This module defines:
    - show(): initialize and display the main window
    - TitleLabel: painted title showing the dashboard name
    - MainWindow: the form, statistics and expense table, with the charts and logs in docks
"""
import functools
import logging

from PySide6 import QtWidgets, QtCore, QtGui

from . import ui
from .actions import signals
from .form import ExpenseForm
from .prompt import MessageBoxPrompter
from ..core.controller import DashboardController
from ..core.service import Gateway
from ..data.view.charts import ChartDockWidget, ChartKind, ChartManager
from ..data.view.expense import ExpenseTableView
from ..data.view.statistics import StatisticsPanel
from ..log.view import LogDockWidget
from ..settings.lib import app_name

widget = None


def show():
    global widget

    if widget is None:
        widget = MainWindow()

    widget.show()


class TitleLabel(QtWidgets.QWidget):
    """Painted title label showing the dashboard name from the settings."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseDashboardTitleLabel')
        self.setFixedHeight(ui.Size.RowHeight(1.5))

        self._connect_signals()
        self.update_title()

    def _connect_signals(self) -> None:
        signals.metadataChanged.connect(self.metadata_changed)

    @QtCore.Slot(str, object)
    def metadata_changed(self, key: str, value: object) -> None:
        if key == 'name':
            self.update_title()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)

        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(ui.Color.Text())

        font, metrics = self.get_font()
        x = self.rect().x()
        y = self.rect().center().y() + metrics.height() / 2.0 - metrics.descent()

        path = QtGui.QPainterPath()
        path.addText(x, y, font, self.get_title())
        painter.drawPath(path)

    @staticmethod
    def get_font():
        return ui.Font.BlackFont(ui.Size.LargeText(1.5))

    @staticmethod
    def get_title():
        from ..settings import lib
        v = lib.settings['name']
        return v or 'Expense Dashboard'

    @QtCore.Slot()
    def update_title(self) -> None:
        font, metrics = self.get_font()
        title = self.get_title()
        self.setMinimumWidth(int(metrics.horizontalAdvance(title)) + ui.Size.Margin(1.0))
        self.update()


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self._configure_dock_behavior()
        self.setWindowTitle(app_name)
        self.setObjectName('ExpenseDashboardMainWindow')
        self.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)

        # Predeclare UI elements for type clarity
        self.toolbar: QtWidgets.QToolBar
        self.form: ExpenseForm
        self.statistics: StatisticsPanel
        self.expense_view: ExpenseTableView

        self.trends_view: ChartDockWidget
        self.category_view: ChartDockWidget
        self.log_view: LogDockWidget

        self.gateway: Gateway
        self.charts: ChartManager
        self.controller: DashboardController

        self._create_ui()
        self._init_controller()
        self._init_actions()
        self._connect_signals()
        self.load_window_settings()

    def _configure_dock_behavior(self) -> None:
        opts = self.dockOptions()
        opts |= QtWidgets.QMainWindow.AllowNestedDocks | QtWidgets.QMainWindow.AnimatedDocks
        self.setDockOptions(opts)

    def _create_ui(self) -> None:
        central = QtWidgets.QWidget(self)
        layout = QtWidgets.QVBoxLayout(central)
        margin = ui.Size.Margin(1.0)
        layout.setContentsMargins(margin, ui.Size.Margin(0.5), margin, margin)
        layout.setSpacing(ui.Size.Margin(0.5))
        self.setCentralWidget(central)

        self.toolbar = QtWidgets.QToolBar(self)
        self.toolbar.setObjectName('ExpenseDashboardActionToolBar')
        self.toolbar.setMovable(False)
        self.addToolBar(QtCore.Qt.TopToolBarArea, self.toolbar)

        layout.addWidget(TitleLabel(parent=central), 0)

        top = QtWidgets.QHBoxLayout()
        top.setSpacing(ui.Size.Margin(0.5))
        layout.addLayout(top, 0)

        self.form = ExpenseForm(parent=central)
        top.addWidget(self.form, 1)

        self.statistics = StatisticsPanel(parent=central)
        top.addWidget(self.statistics, 2)

        self.expense_view = ExpenseTableView(parent=central)
        layout.addWidget(self.expense_view, 1)

        dock_configs = [
            {
                'attr': 'trends_view',
                'title': 'Spending Trend',
                'name': 'ExpenseDashboardTrendDockWidget',
                'area': QtCore.Qt.RightDockWidgetArea},
            {
                'attr': 'category_view',
                'title': 'By Category',
                'name': 'ExpenseDashboardCategoryDockWidget',
                'area': QtCore.Qt.RightDockWidgetArea},
        ]
        for cfg in dock_configs:
            widget = ChartDockWidget(cfg['title'], parent=self)
            setattr(self, cfg['attr'], widget)
            widget.setObjectName(cfg['name'])
            self.addDockWidget(cfg['area'], widget)
            logging.debug(f'Added dock {cfg["name"]} in area {cfg["area"]}')

        self.log_view = LogDockWidget(parent=self)
        self.addDockWidget(QtCore.Qt.BottomDockWidgetArea, self.log_view)
        self.log_view.hide()

    def _init_controller(self) -> None:
        self.gateway = Gateway(parent=self)
        self.charts = ChartManager({
            ChartKind.TREND: self.trends_view,
            ChartKind.CATEGORY: self.category_view,
        }, parent=self)
        self.controller = DashboardController(
            self.gateway,
            MessageBoxPrompter(parent=self),
            self.form,
            self.expense_view.model(),
            self.statistics,
            self.charts,
            parent=self
        )

    def _init_actions(self) -> None:
        def toggle_visibility(widget, checked=None):
            checked = checked if checked is not None else not widget.isVisible()
            widget.setVisible(checked)

        action_configs = [
            {
                'label': 'Reload',
                'trigger': signals.refreshRequested,
                'shortcut': 'Ctrl+R',
                'tip': 'Reload expenses and analytics'
            },
            {'separator': True},
            {
                'label': 'Trend',
                'widget_attr': 'trends_view',
                'shortcut': 'Ctrl+1'
            },
            {
                'label': 'Categories',
                'widget_attr': 'category_view',
                'shortcut': 'Ctrl+2'
            },
            {
                'label': 'Logs',
                'widget_attr': 'log_view',
                'shortcut': 'Ctrl+L'
            },
        ]

        for cfg in action_configs:
            if cfg.get('separator'):
                self.toolbar.addSeparator()
                continue

            action = QtGui.QAction(cfg['label'], self)
            if 'trigger' in cfg:
                action.triggered.connect(cfg['trigger'])
            if 'tip' in cfg:
                action.setToolTip(cfg['tip'])
                action.setStatusTip(cfg['tip'])

            if 'widget_attr' in cfg:
                _widget = getattr(self, cfg['widget_attr'])
                action.setCheckable(True)
                action.setChecked(_widget.isVisible())
                action.triggered.connect(functools.partial(toggle_visibility, _widget))
                _widget.toggled.connect(action.setChecked)

            action.setShortcut(cfg['shortcut'])
            action.setShortcutContext(QtCore.Qt.ApplicationShortcut)

            self.toolbar.addAction(action)
            self.addAction(action)
            logging.debug(f'Added action: {cfg["label"]}')

    def _connect_signals(self) -> None:
        signals.initializationRequested.connect(self.controller.start)
        signals.refreshRequested.connect(self.controller.refresh)

        self.expense_view.deleteRequested.connect(self.controller.delete)

    def sizeHint(self):
        return QtCore.QSize(
            ui.Size.DefaultWidth(2.0),
            ui.Size.DefaultHeight(1.6)
        )

    def closeEvent(self, event) -> None:
        """Persist window geometry and state, and wait for running requests."""
        settings = QtCore.QSettings(app_name, app_name)
        settings.setValue('MainWindow/geometry', self.saveGeometry())
        settings.setValue('MainWindow/windowState', self.saveState())
        settings.setValue('MainWindow/maximized', self.isMaximized())

        self.gateway.close()
        super().closeEvent(event)

    def load_window_settings(self) -> None:
        settings = QtCore.QSettings(app_name, app_name)
        geom_data = settings.value('MainWindow/geometry')

        raw_max = settings.value('MainWindow/maximized', False)
        if isinstance(raw_max, str):
            was_maximized = raw_max.lower() in ('true', '1')
        else:
            was_maximized = bool(raw_max)

        if isinstance(geom_data, QtCore.QByteArray):
            self.restoreGeometry(geom_data)
        else:
            self.resize(self.sizeHint())

        state = settings.value('MainWindow/windowState')
        if isinstance(state, QtCore.QByteArray):
            self.restoreState(state)

        if was_maximized:
            self.setWindowState(self.windowState() | QtCore.Qt.WindowMaximized)
        else:
            self.clamp_window_to_screens()

    def clamp_window_to_screens(self) -> None:
        frame = self.frameGeometry()
        screen = QtGui.QGuiApplication.screenAt(frame.center()) or QtGui.QGuiApplication.primaryScreen()
        if screen is None:
            return
        avail = screen.availableGeometry()

        width = min(frame.width(), avail.width())
        height = min(frame.height(), avail.height())

        x = max(avail.left(), min(frame.x(), avail.right() - width))
        y = max(avail.top(), min(frame.y(), avail.bottom() - height))

        self.setGeometry(x, y, width, height)
