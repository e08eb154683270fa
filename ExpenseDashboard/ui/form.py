"""Add-expense form.

The form only collects input. On submit it emits a :class:`FormValues` snapshot of its
fields; validation and the request itself are left to the controller.
"""
import datetime
import logging
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from . import ui
from .actions import signals
from ..data.records import FormValues


class ExpenseForm(QtWidgets.QWidget):
    """Form with category, amount, date and description fields.

    Signals:
        submitted (FormValues): Emitted when the user clicks the submit button.
    """
    submitted = QtCore.Signal(object)

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseDashboardExpenseForm')

        self.category_editor = None
        self.amount_editor = None
        self.date_editor = None
        self.description_editor = None
        self.submit_button = None

        self.setSizePolicy(
            QtWidgets.QSizePolicy.MinimumExpanding,
            QtWidgets.QSizePolicy.Maximum
        )

        self._create_ui()
        self._init_actions()
        self._connect_signals()

        self.init_categories()

    def _create_ui(self) -> None:
        QtWidgets.QHBoxLayout(self)
        o = ui.Size.Indicator(2.0)
        self.layout().setContentsMargins(0, 0, 0, 0)
        self.layout().setSpacing(o)

        box = QtWidgets.QGroupBox('Add Expense', parent=self)
        QtWidgets.QFormLayout(box)
        box.layout().setSpacing(ui.Size.Indicator(1.0))
        self.layout().addWidget(box, 1)

        self.category_editor = QtWidgets.QComboBox(parent=box)
        self.category_editor.setEditable(True)
        self.category_editor.setInsertPolicy(QtWidgets.QComboBox.NoInsert)
        self.category_editor.lineEdit().setPlaceholderText('e.g. Food')
        box.layout().addRow('Category', self.category_editor)

        self.amount_editor = QtWidgets.QLineEdit(parent=box)
        self.amount_editor.setPlaceholderText('0.00')
        self.amount_editor.setAlignment(QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
        box.layout().addRow('Amount', self.amount_editor)

        self.date_editor = QtWidgets.QDateEdit(parent=box)
        self.date_editor.setCalendarPopup(True)
        self.date_editor.setDisplayFormat('yyyy-MM-dd')
        box.layout().addRow('Date', self.date_editor)

        self.description_editor = QtWidgets.QLineEdit(parent=box)
        self.description_editor.setPlaceholderText('Optional')
        box.layout().addRow('Description', self.description_editor)

        self.submit_button = QtWidgets.QPushButton('Add Expense', parent=box)
        self.submit_button.setDefault(True)
        box.layout().addRow('', self.submit_button)

    def _init_actions(self) -> None:
        action = QtGui.QAction('Add Expense', self)
        action.setShortcut('Ctrl+Return')
        action.setShortcutContext(QtCore.Qt.WidgetWithChildrenShortcut)
        action.setStatusTip('Submit the expense')
        action.triggered.connect(self.submit)
        self.addAction(action)

    def _connect_signals(self) -> None:
        self.submit_button.clicked.connect(self.submit)
        self.amount_editor.returnPressed.connect(self.submit)
        signals.metadataChanged.connect(self.metadata_changed)

    @QtCore.Slot(str, object)
    def metadata_changed(self, key: str, value: object) -> None:
        if key == 'categories':
            self.init_categories()

    @QtCore.Slot()
    def init_categories(self) -> None:
        """Populate the category suggestions from the settings."""
        from ..settings import lib
        categories = lib.settings['categories'] or []

        text = self.category_editor.currentText()
        self.category_editor.blockSignals(True)
        self.category_editor.clear()
        self.category_editor.addItems(categories)
        self.category_editor.setCurrentIndex(-1)
        self.category_editor.setEditText(text)
        self.category_editor.blockSignals(False)

    def values(self) -> FormValues:
        """Return a snapshot of the current field values."""
        return FormValues(
            category=self.category_editor.currentText(),
            amount=self.amount_editor.text(),
            date=self.date_editor.date().toString(QtCore.Qt.ISODate),
            description=self.description_editor.text(),
        )

    def set_values(self, values: FormValues) -> None:
        self.category_editor.setEditText(values.category)
        self.amount_editor.setText(values.amount)
        if values.date:
            self.date_editor.setDate(QtCore.QDate.fromString(values.date, QtCore.Qt.ISODate))
        self.description_editor.setText(values.description)

    @QtCore.Slot()
    def submit(self) -> None:
        values = self.values()
        logging.debug(f'Form submitted: {values}')
        self.submitted.emit(values)

    @QtCore.Slot()
    def reset(self) -> None:
        """Clear every field."""
        self.category_editor.setCurrentIndex(-1)
        self.category_editor.setEditText('')
        self.amount_editor.clear()
        self.description_editor.clear()

    def set_default_date(self, date: Optional[datetime.date] = None) -> None:
        """Set the date field, defaults to today."""
        date = date or datetime.date.today()
        self.date_editor.setDate(QtCore.QDate(date.year, date.month, date.day))
