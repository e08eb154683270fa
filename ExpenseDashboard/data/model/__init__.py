"""Qt table models for the ExpenseDashboard application.

This subpackage provides the expense table model (ExpenseTableModel) and the
pure row projection it is built on (sort_expenses, render_rows).
"""
