"""Log table model fed from the in-memory log tank.

This module provides:
    - Columns: column indexes of the log table
    - LogTableModel: polls the TankHandler and exposes parsed log lines
    - LogFilterProxyModel: hides entries below a minimum level
"""
import enum
import logging
import re
from typing import Any

from PySide6 import QtCore

from .log import get_handler
from ..ui import ui

LogLevelRole = QtCore.Qt.UserRole + 1


class Columns(enum.IntEnum):
    Date = 0
    Module = 1
    Level = 2
    Message = 3


class LogTableModel(QtCore.QAbstractTableModel):
    """
    A model for displaying log messages fetched from the TankHandler.

    Each row holds the date, module, level and message parsed from a formatted log line.
    Lines that do not match the log format are kept whole as the message.
    """

    re_log_pattern = re.compile(
        r'^\[(?P<date>[^\]]+)\]\s+<(?P<module>[^>]+)>\s+(?P<level>[^:]+):\s+(?P<message>.*)$',
        flags=re.DOTALL
    )

    def __init__(self, parent: Any = None, fetch_interval_ms: int = 1000):
        super().__init__(parent=parent)
        self._logs: list[dict[str, Any]] = []
        self._is_paused = False

        self._timer = QtCore.QTimer(self)
        self._timer.timeout.connect(self.fetch_new_logs)
        self._timer.start(fetch_interval_ms)

    @QtCore.Slot()
    def pause(self) -> None:
        self._is_paused = True

    @QtCore.Slot()
    def resume(self) -> None:
        self._is_paused = False
        self.fetch_new_logs()

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._logs)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(Columns)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid() or index.row() >= len(self._logs):
            return None

        entry = self._logs[index.row()]

        if role == QtCore.Qt.DisplayRole:
            if index.column() == Columns.Date:
                return entry['date']
            elif index.column() == Columns.Module:
                return entry['module']
            elif index.column() == Columns.Level:
                return logging.getLevelName(entry['level'])
            elif index.column() == Columns.Message:
                return entry['message']

        if role == QtCore.Qt.ForegroundRole:
            if entry['level'] >= logging.ERROR:
                return ui.Color.Red()
            if entry['level'] == logging.DEBUG:
                return ui.Color.SecondaryText()

        if role == LogLevelRole:
            return entry['level']

        return None

    def headerData(self, section: int, orientation, role: int = QtCore.Qt.DisplayRole) -> Any:
        if orientation == QtCore.Qt.Horizontal and role == QtCore.Qt.DisplayRole:
            return Columns(section).name
        return super().headerData(section, orientation, role)

    @QtCore.Slot()
    def fetch_new_logs(self) -> None:
        """Append lines added to the tank since the last fetch."""
        if self._is_paused:
            return

        handler = get_handler()
        if handler is None:
            return

        all_logs = handler.get_logs(logging.NOTSET)
        existing_count = len(self._logs)
        if len(all_logs) < existing_count:
            # The tank was cleared elsewhere
            self.clear_logs()
            existing_count = 0

        incoming = all_logs[existing_count:]
        if not incoming:
            return

        parsed = [self.parse_log_message(f) for f in incoming]
        self.beginInsertRows(QtCore.QModelIndex(), existing_count, existing_count + len(parsed) - 1)
        self._logs.extend(parsed)
        self.endInsertRows()

    def parse_log_message(self, raw_message: str) -> dict[str, Any]:
        result: dict[str, Any] = {
            'date': '',
            'module': '',
            'level': logging.NOTSET,
            'message': raw_message
        }

        match = self.re_log_pattern.match(raw_message)
        if not match:
            return result

        level = logging.getLevelName(match.group('level').strip().upper())
        result.update(
            date=match.group('date'),
            module=match.group('module'),
            level=level if isinstance(level, int) else logging.NOTSET,
            message=match.group('message').strip(),
        )
        return result

    @QtCore.Slot()
    def clear_logs(self) -> None:
        self.beginResetModel()
        self._logs.clear()
        self.endResetModel()


class LogFilterProxyModel(QtCore.QSortFilterProxyModel):
    """Filters log rows by a minimum level."""

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self._filter_level = logging.NOTSET

    def filter_level(self) -> int:
        return self._filter_level

    @QtCore.Slot(int)
    def set_filter_level(self, level: int) -> None:
        self._filter_level = level
        self.invalidateFilter()

    def filterAcceptsRow(self, source_row: int, source_parent: QtCore.QModelIndex) -> bool:
        index = self.sourceModel().index(source_row, 0, source_parent)
        level = index.data(LogLevelRole)
        return level is None or level >= self._filter_level
