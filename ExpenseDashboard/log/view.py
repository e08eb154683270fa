"""Log view and dock widget.

This module provides:
    - LogTableView: table view of the captured log lines
    - LogDockWidget: dockable container with level filter and clear actions
"""
import logging

from PySide6 import QtCore, QtGui, QtWidgets

from . import log
from .model import Columns, LogFilterProxyModel, LogTableModel
from ..ui import ui
from ..ui.dockable_widget import DockableWidget

LEVELS = (
    ('Debug', logging.DEBUG),
    ('Info', logging.INFO),
    ('Warning', logging.WARNING),
    ('Error', logging.ERROR),
    ('Critical', logging.CRITICAL),
)


class LogTableView(QtWidgets.QTableView):
    """A QTableView displaying log messages from LogTableModel."""

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self.setWordWrap(True)

        self._init_model()
        self._init_headers()
        self._connect_signals()

    def _init_model(self):
        proxy = LogFilterProxyModel(self)
        proxy.setSourceModel(LogTableModel(parent=self))
        self.setModel(proxy)

    def _init_headers(self):
        header = self.horizontalHeader()
        header.setDefaultAlignment(QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter)
        header.setSectionResizeMode(Columns.Date.value, QtWidgets.QHeaderView.ResizeToContents)
        header.setSectionResizeMode(Columns.Module.value, QtWidgets.QHeaderView.ResizeToContents)
        header.setSectionResizeMode(Columns.Level.value, QtWidgets.QHeaderView.ResizeToContents)
        header.setSectionResizeMode(Columns.Message.value, QtWidgets.QHeaderView.Stretch)

        header = self.verticalHeader()
        header.setDefaultSectionSize(ui.Size.RowHeight(1.0))
        header.setHidden(True)

    def _connect_signals(self):
        self.model().rowsInserted.connect(self.scrollToBottom)

    def sizeHint(self):
        return QtCore.QSize(
            ui.Size.DefaultWidth(1.0),
            ui.Size.DefaultHeight(0.5)
        )


class LogDockWidget(DockableWidget):
    """Dockable widget for viewing app logs."""

    def __init__(self, parent=None) -> None:
        super().__init__('Logs', parent)
        self.setObjectName('ExpenseDashboardLogDockWidget')

        widget = QtWidgets.QWidget(self)
        QtWidgets.QVBoxLayout(widget)
        widget.layout().setContentsMargins(0, 0, 0, 0)
        widget.layout().setSpacing(ui.Size.Indicator(1.0))

        toolbar = QtWidgets.QHBoxLayout()
        toolbar.setContentsMargins(0, 0, 0, 0)

        self.level_filter = QtWidgets.QComboBox(widget)
        for name, lvl in LEVELS:
            self.level_filter.addItem(name, lvl)
        self.level_filter.setToolTip('Show entries at or above this level')
        toolbar.addWidget(QtWidgets.QLabel('Minimum level', widget))
        toolbar.addWidget(self.level_filter)
        toolbar.addStretch(1)

        self.clear_button = QtWidgets.QPushButton('Clear', widget)
        self.clear_button.setToolTip('Clear all log entries')
        toolbar.addWidget(self.clear_button)

        widget.layout().addLayout(toolbar)

        self.view = LogTableView(widget)
        self.view.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)
        widget.layout().addWidget(self.view, 1)

        self.setWidget(widget)

        self._init_actions()
        self._connect_signals()

    def _init_actions(self) -> None:
        action = QtGui.QAction('App Level', self)
        menu = QtWidgets.QMenu(self)
        action_group = QtGui.QActionGroup(self)
        action_group.setExclusive(True)

        for name, lvl in LEVELS:
            act = menu.addAction(name)
            act.setData(lvl)
            act.setCheckable(True)
            if logging.getLogger().level == lvl:
                act.setChecked(True)
            action_group.addAction(act)
        action_group.triggered.connect(lambda a: log.set_logging_level(a.data()))

        action.setMenu(menu)
        action.setToolTip('Set application logging level')
        self.view.addAction(action)

        action = QtGui.QAction('Clear Logs', self)
        action.setToolTip('Clear all log entries')
        action.triggered.connect(self.clear_logs)
        self.view.addAction(action)

    def _connect_signals(self) -> None:
        self.visibilityChanged.connect(self.on_visibility_changed)
        self.clear_button.clicked.connect(self.clear_logs)

        @QtCore.Slot(int)
        def level_changed(index: int) -> None:
            self.view.model().set_filter_level(self.level_filter.itemData(index))

        self.level_filter.currentIndexChanged.connect(level_changed)

    @QtCore.Slot()
    def clear_logs(self) -> None:
        handler = log.get_handler()
        if handler is not None:
            handler.clear_logs()
        self.view.model().sourceModel().clear_logs()

    @QtCore.Slot(bool)
    def on_visibility_changed(self, visible: bool) -> None:
        model = self.view.model().sourceModel()
        if visible:
            model.resume()
        else:
            model.pause()
