"""
ExpenseDashboard data package: records, models, and views.

This package provides:

- :mod:`ExpenseDashboard.data.records` – Immutable expense, draft and analytics records parsed from service payloads.
- :mod:`ExpenseDashboard.data.model` – Qt table model (:class:`ExpenseDashboard.data.model.expense.ExpenseTableModel`) projecting expenses into sorted, formatted rows.
- :mod:`ExpenseDashboard.data.view` – Qt views for the expense table, summary statistics, the trend and category charts and the chart manager.
"""
