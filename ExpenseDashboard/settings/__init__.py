"""
Settings package: configuration API and locale utilities.

This package provides:

- :mod:`ExpenseDashboard.settings.lib` – Core settings management and schema validation.
- :mod:`ExpenseDashboard.settings.locale` – Localization utilities for currency and date formatting.
"""
