"""
UI package: application signals, main application setup, theming, and widgets.

This package provides:

- :mod:`ExpenseDashboard.ui.actions` – Application-wide Qt signals.
- :mod:`ExpenseDashboard.ui.app` – QApplication subclass and setup functions for high-DPI support.
- :mod:`ExpenseDashboard.ui.main` – Main window composition.
- :mod:`ExpenseDashboard.ui.ui` – Styling constants for fonts, sizes, and colors.
- :mod:`ExpenseDashboard.ui.form` – The add-expense form.
- :mod:`ExpenseDashboard.ui.prompt` – Confirmation and notification port used by the controller.
- :mod:`ExpenseDashboard.ui.basechart` – Base chart widget class (:class:`ExpenseDashboard.ui.basechart.BaseChartView`).
- :mod:`ExpenseDashboard.ui.dockable_widget` – Base class for dockable widgets.
"""
