"""Application-wide Qt signals for ExpenseDashboard.

This module provides:
    - Signals: custom Qt signals for configuration changes, the dashboard load
      lifecycle and the refresh action.
"""
import logging

from PySide6 import QtCore


class Signals(QtCore.QObject):
    """Centralized Qt signals for application config, data, and UI events."""
    initializationRequested = QtCore.Signal()
    refreshRequested = QtCore.Signal()

    configSectionChanged = QtCore.Signal(str)  # Section
    metadataChanged = QtCore.Signal(str, object)  # Key, value

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        @QtCore.Slot(str, object)
        def metadata_changed(key: str, value: object) -> None:
            if key != 'theme':
                return

            from PySide6 import QtWidgets
            if not QtWidgets.QApplication.instance():
                return

            from . import ui
            try:
                ui.apply_theme()
            except (OSError, KeyError, RuntimeError) as ex:
                logging.error(f'Error applying theme: {ex}')

        self.metadataChanged.connect(metadata_changed)


signals = Signals()
