"""Expense table model.

This module provides:
    - sort_expenses: stable, newest-first ordering of an expense collection
    - TableRow: one formatted table row
    - render_rows: projects expenses into formatted rows
    - ExpenseTableModel: QAbstractTableModel backed by the rendered rows
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import pandas as pd
from PySide6 import QtCore

from ..records import Expense, ExpenseId
from ...settings import locale
from ...ui import ui

PLACEHOLDER_TEXT: str = 'No expenses yet. Add your first expense above!'
EMPTY_DESCRIPTION: str = '-'

ExpenseIdRole = QtCore.Qt.UserRole + 1
PlaceholderRole = QtCore.Qt.UserRole + 2


class Columns(enum.IntEnum):
    Date = 0
    Category = 1
    Amount = 2
    Description = 3
    Actions = 4


@dataclass(frozen=True, slots=True)
class TableRow:
    """Display values of a single table row.

    The placeholder row has no expense id and carries its message in ``date``.
    """
    date: str
    category: str = ''
    amount: str = ''
    description: str = ''
    expense_id: Optional[ExpenseId] = None
    placeholder: bool = False


def sort_expenses(expenses: Iterable[Expense]) -> List[Expense]:
    """Return a copy of the expenses ordered by date, newest first.

    The sort is stable: expenses sharing a date keep the order they were received in.
    The input is not modified.

    Args:
        expenses: The expenses to sort.

    Returns:
        list[Expense]: A new, sorted list.
    """
    expenses = list(expenses)
    if not expenses:
        return []

    df = pd.DataFrame({
        'date': pd.to_datetime([f.date for f in expenses]),
        'position': range(len(expenses)),
    })
    df = df.sort_values('date', ascending=False, kind='stable')
    return [expenses[i] for i in df['position']]


def render_rows(expenses: Iterable[Expense], locale_name: str = locale.DEFAULT_LOCALE) -> List[TableRow]:
    """Project an expense collection into formatted table rows.

    An empty collection yields a single placeholder row.

    Args:
        expenses: The expenses to render.
        locale_name: Locale used to format dates and amounts.

    Returns:
        list[TableRow]: The rows, newest first.
    """
    rows = [
        TableRow(
            date=locale.format_date(f.date, locale_name),
            category=f.category,
            amount=locale.format_currency_value(f.amount, locale_name),
            description=f.description or EMPTY_DESCRIPTION,
            expense_id=f.id,
        )
        for f in sort_expenses(expenses)
    ]
    if not rows:
        return [TableRow(date=PLACEHOLDER_TEXT, placeholder=True)]
    return rows


class ExpenseTableModel(QtCore.QAbstractTableModel):
    header = ['Date', 'Category', 'Amount', 'Description', 'Actions']

    def __init__(self, parent: QtCore.QObject | None = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseDashboardExpenseTableModel')

        self._rows: List[TableRow] = render_rows([])

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self.header)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None
        row = index.row()
        col = index.column()

        if row < 0 or row >= self.rowCount():
            return None

        item = self._rows[row]

        if role == ExpenseIdRole:
            return item.expense_id
        if role == PlaceholderRole:
            return item.placeholder

        if item.placeholder:
            if col == Columns.Date and role == QtCore.Qt.DisplayRole:
                return item.date
            if role == QtCore.Qt.TextAlignmentRole:
                return QtCore.Qt.AlignCenter
            if role == QtCore.Qt.ForegroundRole:
                return ui.Color.SecondaryText()
            return None

        if role in (QtCore.Qt.DisplayRole, QtCore.Qt.ToolTipRole):
            if col == Columns.Date:
                return item.date
            if col == Columns.Category:
                return item.category
            if col == Columns.Amount:
                return item.amount
            if col == Columns.Description:
                return item.description
            return None

        if col == Columns.Category:
            if role == QtCore.Qt.ForegroundRole:
                return ui.Color.Accent()
            if role == QtCore.Qt.FontRole:
                font, _ = ui.Font.BoldFont(ui.Size.SmallText(1.0))
                return font

        if col == Columns.Amount:
            if role == QtCore.Qt.FontRole:
                font, _ = ui.Font.BlackFont(ui.Size.MediumText(1.0))
                return font
            if role == QtCore.Qt.TextAlignmentRole:
                return QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter

        return None

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation,
                   role: int = QtCore.Qt.DisplayRole) -> Any:
        if role == QtCore.Qt.DisplayRole and orientation == QtCore.Qt.Horizontal:
            return self.header[section]
        return None

    def rows(self) -> List[TableRow]:
        """The rows currently shown."""
        return list(self._rows)

    def is_placeholder(self) -> bool:
        return len(self._rows) == 1 and self._rows[0].placeholder

    @QtCore.Slot(list)
    def set_expenses(self, expenses: List[Expense]) -> None:
        """Replace every row with a fresh rendering of the given expenses."""
        from ...settings import lib

        logging.debug(f'Rendering {len(expenses)} expenses')
        self.beginResetModel()
        try:
            self._rows = render_rows(expenses, lib.settings['locale'] or locale.DEFAULT_LOCALE)
        finally:
            self.endResetModel()
