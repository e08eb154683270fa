"""Expense table view.

This module provides:
    - ExpenseTableView: table of expenses, newest first, with a delete button per row
"""
import functools
import logging
from typing import Optional

from PySide6 import QtWidgets, QtCore

from ..model.expense import ExpenseTableModel, Columns, ExpenseIdRole, PlaceholderRole
from ..records import ExpenseId
from ...ui import ui


class ExpenseTableView(QtWidgets.QTableView):
    """Table view for the expense list.

    Every expense row gets a "Delete" button bound to that row's expense id. Clicking
    it emits ``deleteRequested`` with the id, nothing is deleted by the view itself.
    The placeholder row spans the whole table.
    """
    deleteRequested = QtCore.Signal(object)

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseDashboardExpenseTableView')
        self.verticalHeader().hide()

        self.setSelectionMode(QtWidgets.QAbstractItemView.NoSelection)
        self.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.setFocusPolicy(QtCore.Qt.NoFocus)
        self.setShowGrid(False)
        self.setAlternatingRowColors(True)
        self.setWordWrap(False)
        self.setTextElideMode(QtCore.Qt.ElideRight)

        self._init_model()
        self._init_section_sizing()
        self._connect_signals()

        self.refresh_row_widgets()

    def _init_model(self) -> None:
        model = ExpenseTableModel(parent=self)
        self.setModel(model)

    def _connect_signals(self) -> None:
        self.model().modelReset.connect(self.refresh_row_widgets)

    def _init_section_sizing(self) -> None:
        header = self.horizontalHeader()
        header.setSectionResizeMode(Columns.Date.value, QtWidgets.QHeaderView.ResizeToContents)
        header.setSectionResizeMode(Columns.Category.value, QtWidgets.QHeaderView.ResizeToContents)
        header.setSectionResizeMode(Columns.Amount.value, QtWidgets.QHeaderView.ResizeToContents)
        header.setSectionResizeMode(Columns.Description.value, QtWidgets.QHeaderView.Stretch)
        header.setSectionResizeMode(Columns.Actions.value, QtWidgets.QHeaderView.Fixed)
        header.resizeSection(Columns.Actions.value, ui.Size.Section(1.0))

        header = self.verticalHeader()
        header.setSectionResizeMode(QtWidgets.QHeaderView.Fixed)
        header.setDefaultSectionSize(ui.Size.RowHeight(1.2))

    @QtCore.Slot()
    def refresh_row_widgets(self) -> None:
        """Rebuild the row spans and the per-row delete buttons after a model reset."""
        model = self.model()
        self.clearSpans()

        for row in range(model.rowCount()):
            index = model.index(row, Columns.Actions.value)

            if model.index(row, 0).data(PlaceholderRole):
                self.setSpan(row, 0, 1, model.columnCount())
                continue

            expense_id = index.data(ExpenseIdRole)
            button = QtWidgets.QPushButton('Delete', parent=self)
            button.setProperty('danger', True)
            button.setCursor(QtCore.Qt.PointingHandCursor)
            button.setToolTip('Delete this expense')
            button.clicked.connect(functools.partial(self._request_delete, expense_id))
            self.setIndexWidget(index, button)

        logging.debug(f'Expense table shows {model.rowCount()} rows')

    def delete_button(self, row: int) -> Optional[QtWidgets.QPushButton]:
        """Return the delete button of a row, or None for the placeholder row."""
        return self.indexWidget(self.model().index(row, Columns.Actions.value))

    def _request_delete(self, expense_id: ExpenseId, *args) -> None:
        self.deleteRequested.emit(expense_id)
