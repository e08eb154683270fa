"""Dashboard controller.

Sequences the initial load, the add and delete mutations and the re-fetches that follow
them, and routes every gateway outcome to the table, the statistics panel and the charts.

Fetch responses are tagged with the request id returned by the gateway. A response older
than the last one applied for the same kind is dropped, so a slow response can never roll
the dashboard back to older server state.

Mutations run one at a time. A mutation requested while another is in flight waits in a
FIFO queue until the previous one has been answered and its refresh has been issued.
"""
import collections
import enum
import logging
from typing import Callable, Deque, Dict, Optional

from PySide6 import QtCore

from ..data import records
from ..status import status

MSG_LOAD_FAILED: str = 'Failed to load expenses'
MSG_ADD_SUCCEEDED: str = 'Expense added successfully!'
MSG_ADD_FAILED: str = 'Failed to add expense'
MSG_DELETE_CONFIRM: str = 'Are you sure you want to delete this expense?'
MSG_DELETE_SUCCEEDED: str = 'Expense deleted successfully!'
MSG_DELETE_FAILED: str = 'Failed to delete expense'


class FetchKind(enum.StrEnum):
    Expenses = enum.auto()
    Analytics = enum.auto()


class DashboardController(QtCore.QObject):
    """Keeps the dashboard widgets in sync with the expense service.

    Args:
        gateway: The :class:`~ExpenseDashboard.core.service.Gateway` used for all requests.
        prompter: The :class:`~ExpenseDashboard.ui.prompt.Prompter` used to confirm and notify.
        form: The add-expense form.
        table_model: The expense table model.
        statistics: The statistics panel.
        charts: The chart manager.
    """

    def __init__(self, gateway, prompter, form, table_model, statistics, charts,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self.gateway = gateway
        self.prompter = prompter
        self.form = form
        self.table_model = table_model
        self.statistics = statistics
        self.charts = charts

        self._applied: Dict[FetchKind, int] = {f: 0 for f in FetchKind}
        self._mutations: Deque[Callable[[], int]] = collections.deque()
        self._mutation_in_flight: Optional[int] = None

        self._connect_signals()

    def _connect_signals(self) -> None:
        self.gateway.expensesFetched.connect(self.expenses_fetched)
        self.gateway.expensesFetchFailed.connect(self.expenses_fetch_failed)
        self.gateway.analyticsFetched.connect(self.analytics_fetched)
        self.gateway.analyticsFetchFailed.connect(self.analytics_fetch_failed)

        self.gateway.expenseCreated.connect(self.expense_created)
        self.gateway.expenseCreateFailed.connect(self.expense_create_failed)
        self.gateway.expenseDeleted.connect(self.expense_deleted)
        self.gateway.expenseDeleteFailed.connect(self.expense_delete_failed)

        self.form.submitted.connect(self.submit)

    @QtCore.Slot()
    def start(self) -> None:
        """Apply today's date to the form and load the dashboard."""
        self.form.set_default_date()
        self.refresh()

    @QtCore.Slot()
    def refresh(self) -> None:
        """Request the expense list and the analytics summary.

        The two requests are independent and may be answered in any order.
        """
        self.gateway.list_expenses()
        self.gateway.fetch_analytics()

    def busy(self) -> bool:
        """True while a mutation is in flight or queued."""
        return self._mutation_in_flight is not None or bool(self._mutations)

    def _accept(self, kind: FetchKind, request_id: int) -> bool:
        if request_id < self._applied[kind]:
            logging.debug(f'Dropping stale {kind} response {request_id}, {self._applied[kind]} already applied')
            return False
        self._applied[kind] = request_id
        return True

    @QtCore.Slot(int, object)
    def expenses_fetched(self, request_id: int, expenses: list) -> None:
        if not self._accept(FetchKind.Expenses, request_id):
            return
        self.table_model.set_expenses(expenses)

    @QtCore.Slot(int, object)
    def expenses_fetch_failed(self, request_id: int, error: Exception) -> None:
        if not self._accept(FetchKind.Expenses, request_id):
            return
        logging.error(f'Error loading expenses: {error}')
        self.prompter.warn('Error', MSG_LOAD_FAILED)

    @QtCore.Slot(int, object)
    def analytics_fetched(self, request_id: int, analytics: records.Analytics) -> None:
        if not self._accept(FetchKind.Analytics, request_id):
            return
        self.statistics.set_analytics(analytics)
        self.charts.refresh(analytics)

    @QtCore.Slot(int, object)
    def analytics_fetch_failed(self, request_id: int, error: Exception) -> None:
        # The previous statistics and charts stay on screen
        if not self._accept(FetchKind.Analytics, request_id):
            return
        logging.error(f'Error loading analytics: {error}')

    def _enqueue(self, func: Callable[[], int]) -> None:
        self._mutations.append(func)
        if self._mutation_in_flight is None:
            self._start_next_mutation()

    def _start_next_mutation(self) -> None:
        if self._mutation_in_flight is not None or not self._mutations:
            return
        func = self._mutations.popleft()
        self._mutation_in_flight = func()

    def _finish_mutation(self, request_id: int) -> bool:
        if request_id != self._mutation_in_flight:
            logging.warning(f'Ignoring response {request_id}, waiting for {self._mutation_in_flight}')
            return False
        self._mutation_in_flight = None
        return True

    @QtCore.Slot(object)
    def submit(self, values: records.FormValues) -> None:
        """Validate the form snapshot and create the expense.

        An invalid draft is reported once and never sent.
        """
        try:
            draft = records.build_draft(values)
        except status.DraftInvalidException as ex:
            self.prompter.warn('Invalid Expense', ex.detail or ex.status_message)
            return

        self._enqueue(lambda: self.gateway.create_expense(draft))

    @QtCore.Slot(int, object)
    def expense_created(self, request_id: int, expense: records.Expense) -> None:
        if not self._finish_mutation(request_id):
            return
        logging.info(f'Expense {expense.id} created')

        self.form.reset()
        self.form.set_default_date()
        self.refresh()
        self.prompter.notify('Success', MSG_ADD_SUCCEEDED)

        self._start_next_mutation()

    @QtCore.Slot(int, object)
    def expense_create_failed(self, request_id: int, error: Exception) -> None:
        if not self._finish_mutation(request_id):
            return
        logging.error(f'Error adding expense: {error}')
        self.prompter.warn('Error', MSG_ADD_FAILED)

        self._start_next_mutation()

    @QtCore.Slot(object)
    def delete(self, expense_id: records.ExpenseId) -> None:
        """Ask for confirmation, then delete the expense."""
        if not self.prompter.confirm('Delete Expense', MSG_DELETE_CONFIRM):
            logging.debug(f'Deleting expense {expense_id} cancelled')
            return

        self._enqueue(lambda: self.gateway.delete_expense(expense_id))

    @QtCore.Slot(int, object)
    def expense_deleted(self, request_id: int, expense_id: records.ExpenseId) -> None:
        if not self._finish_mutation(request_id):
            return
        logging.info(f'Expense {expense_id} deleted')

        self.refresh()
        self.prompter.notify('Success', MSG_DELETE_SUCCEEDED)

        self._start_next_mutation()

    @QtCore.Slot(int, object)
    def expense_delete_failed(self, request_id: int, error: Exception) -> None:
        if not self._finish_mutation(request_id):
            return
        logging.error(f'Error deleting expense: {error}')
        self.prompter.warn('Error', MSG_DELETE_FAILED)

        self._start_next_mutation()
