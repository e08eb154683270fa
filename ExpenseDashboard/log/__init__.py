"""
Logging subsystem: handlers and views for application logging.

Modules:

- :mod:`ExpenseDashboard.log.log` – Log handler integrating with Python logging.
- :mod:`ExpenseDashboard.log.model` – Table and filter models over the in-memory log tank.
- :mod:`ExpenseDashboard.log.view` – Dock widget for browsing and filtering in-memory logs.
"""
