"""
ExpenseDashboard: desktop dashboard for an expense-tracking backend service.

This package provides:

- :mod:`ExpenseDashboard.core` – The remote data gateway and the dashboard controller that sequences fetches and mutations.
- :mod:`ExpenseDashboard.data` – Expense and analytics records, the expense table model, and the statistics and chart views.
- :mod:`ExpenseDashboard.ui` – A PySide6-based UI: main window, add-expense form, themed widgets and the base chart view.
- :mod:`ExpenseDashboard.settings` – Settings management and locale-aware formatting.
- :mod:`ExpenseDashboard.log` – In-app logging with a log viewer.

Use :func:`ExpenseDashboard.exec_` to launch the application.
"""

import sys

from PySide6 import QtCore

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('ExpenseDashboard requires Python 3.11 or higher.')

__version__ = '0.1.0'
__author__ = 'Gergely Wootsch'
__license__ = 'GPL-3.0'
__copyright__ = 'Copyright (C) 2025 Gergely Wootsch'
__description__ = 'ExpenseDashboard: desktop dashboard for tracking expenses stored by a remote expense service.'

from .log import log

log.setup_logging()


def exec_() -> None:
    """Launch the ExpenseDashboard GUI application and enter its event loop.

    Initializes the QApplication, shows the main window, and starts the Qt event loop.
    The dashboard's initial load is requested once the event loop is running.
    """
    from .ui import app
    from .ui import main
    from .ui.actions import signals
    application = app.Application(sys.argv)
    main.show()

    # Ask components to load their data
    QtCore.QTimer.singleShot(100, signals.initializationRequested)

    sys.exit(application.exec())


if __name__ == '__main__':
    exec_()
