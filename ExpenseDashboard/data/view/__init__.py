"""Qt views for the ExpenseDashboard application.

This subpackage provides view widgets for visualizing expense data, including:

- ExpenseTableView: the expense table with a delete control per row
- StatisticsPanel: total, highest and lowest category summary
- TrendChart: daily expense line chart
- CategoryChart: per-category doughnut chart
- ChartManager: owner of the two chart widget instances
"""
