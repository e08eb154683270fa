"""
Core package for ExpenseDashboard providing the synchronization layer.

This package includes:

- :mod:`ExpenseDashboard.core.service` – HTTP gateway to the expense service with asynchronous list, analytics, create and delete operations.
- :mod:`ExpenseDashboard.core.controller` – Dashboard controller wiring the gateway to the form, table, statistics and charts.
"""
