"""Tests for the dashboard controller.

The gateway is replaced by a fake that only records requests. Tests answer a request by
emitting the matching signal with the recorded request id, the same way the real gateway
reports back from its worker threads.
"""
import datetime

from PySide6 import QtCore, QtWidgets

from ExpenseDashboard.core import controller
from ExpenseDashboard.data import records
from ExpenseDashboard.data.model.expense import ExpenseIdRole, ExpenseTableModel
from ExpenseDashboard.data.view.charts import ChartKind, ChartManager
from ExpenseDashboard.data.view.statistics import StatisticsPanel
from ExpenseDashboard.status import status
from ExpenseDashboard.ui.form import ExpenseForm
from ExpenseDashboard.ui.prompt import Prompter
from tests.base import ANALYTICS_PAYLOAD, EXPENSES_PAYLOAD, BaseTestCase


class FakeGateway(QtCore.QObject):
    expensesFetched = QtCore.Signal(int, object)
    expensesFetchFailed = QtCore.Signal(int, object)
    analyticsFetched = QtCore.Signal(int, object)
    analyticsFetchFailed = QtCore.Signal(int, object)
    expenseCreated = QtCore.Signal(int, object)
    expenseCreateFailed = QtCore.Signal(int, object)
    expenseDeleted = QtCore.Signal(int, object)
    expenseDeleteFailed = QtCore.Signal(int, object)

    def __init__(self) -> None:
        super().__init__()
        self.calls = []
        self._next_id = 0

    def _record(self, name, *args):
        self._next_id += 1
        self.calls.append((name, args, self._next_id))
        return self._next_id

    def list_expenses(self):
        return self._record('list_expenses')

    def fetch_analytics(self):
        return self._record('fetch_analytics')

    def create_expense(self, draft):
        return self._record('create_expense', draft)

    def delete_expense(self, expense_id):
        return self._record('delete_expense', expense_id)

    def named(self, name):
        return [f for f in self.calls if f[0] == name]

    def last_id(self, name):
        return self.named(name)[-1][2]


class RecordingPrompter(Prompter):

    def __init__(self, answer=True):
        self.answer = answer
        self.confirmed = []
        self.notified = []
        self.warned = []

    def confirm(self, title, text):
        self.confirmed.append((title, text))
        return self.answer

    def notify(self, title, text):
        self.notified.append((title, text))

    def warn(self, title, text):
        self.warned.append((title, text))


class DashboardControllerTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.gateway = FakeGateway()
        self.prompter = RecordingPrompter()
        self.form = ExpenseForm()
        self.table_model = ExpenseTableModel()
        self.statistics = StatisticsPanel()
        self.chart_host = QtWidgets.QWidget()
        self.trend_target = QtWidgets.QWidget(self.chart_host)
        self.category_target = QtWidgets.QWidget(self.chart_host)
        self.charts = ChartManager({
            ChartKind.TREND: self.trend_target,
            ChartKind.CATEGORY: self.category_target,
        })
        self.controller = controller.DashboardController(
            self.gateway, self.prompter, self.form, self.table_model, self.statistics, self.charts
        )

    def tearDown(self) -> None:
        self.charts.clear()
        for widget in (self.form, self.statistics, self.chart_host):
            widget.deleteLater()
        super().tearDown()

    def _answer_expenses(self, request_id=None, payload=EXPENSES_PAYLOAD):
        request_id = request_id or self.gateway.last_id('list_expenses')
        self.gateway.expensesFetched.emit(request_id, records.parse_expenses(payload))

    def _answer_analytics(self, request_id=None, payload=ANALYTICS_PAYLOAD):
        request_id = request_id or self.gateway.last_id('fetch_analytics')
        self.gateway.analyticsFetched.emit(request_id, records.parse_analytics(payload))

    def _fill_form(self, amount='12.5'):
        self.form.set_values(records.FormValues('Food', amount, '2024-01-05', 'Lunch'))

    def _table_ids(self):
        return [self.table_model.index(r, 0).data(ExpenseIdRole) for r in range(self.table_model.rowCount())]

    # Loading

    def test_start_sets_date_and_loads(self):
        self.form.set_default_date(datetime.date(2000, 1, 1))
        self.controller.start()

        self.assertEqual(self.form.values().date, datetime.date.today().isoformat())
        self.assertEqual([f[0] for f in self.gateway.calls], ['list_expenses', 'fetch_analytics'])

    def test_responses_populate_the_dashboard(self):
        self.controller.start()
        self._answer_analytics()
        self._answer_expenses()

        self.assertEqual(self._table_ids(), [2, 3, 1])
        self.assertEqual(self.statistics.text().total, '$50.00')
        self.assertTrue(self.charts.is_active(ChartKind.TREND))
        self.assertTrue(self.charts.is_active(ChartKind.CATEGORY))

    def test_stale_expenses_are_dropped(self):
        self.controller.refresh()
        old_id = self.gateway.last_id('list_expenses')
        self.controller.refresh()
        new_id = self.gateway.last_id('list_expenses')

        self._answer_expenses(new_id, EXPENSES_PAYLOAD[:1])
        self._answer_expenses(old_id, EXPENSES_PAYLOAD)

        self.assertEqual(self._table_ids(), [1])

    def test_stale_analytics_are_dropped(self):
        self.controller.refresh()
        old_id = self.gateway.last_id('fetch_analytics')
        self.controller.refresh()
        new_id = self.gateway.last_id('fetch_analytics')

        self._answer_analytics(new_id, dict(ANALYTICS_PAYLOAD, total=99))
        self._answer_analytics(old_id)

        self.assertEqual(self.statistics.text().total, '$99.00')

    def test_stale_failure_is_not_reported(self):
        self.controller.refresh()
        old_id = self.gateway.last_id('list_expenses')
        self.controller.refresh()
        self._answer_expenses()

        self.gateway.expensesFetchFailed.emit(old_id, status.ServiceUnavailableException())
        self.assertEqual(self.prompter.warned, [])

    def test_load_failure_warns(self):
        self.controller.refresh()
        self.gateway.expensesFetchFailed.emit(
            self.gateway.last_id('list_expenses'), status.ServiceUnavailableException()
        )
        self.assertEqual(self.prompter.warned, [('Error', controller.MSG_LOAD_FAILED)])

    def test_analytics_failure_is_only_logged(self):
        self.controller.refresh()
        self._answer_analytics()

        self.controller.refresh()
        with self.assertLogs(level='ERROR'):
            self.gateway.analyticsFetchFailed.emit(
                self.gateway.last_id('fetch_analytics'), status.ServiceUnavailableException()
            )

        self.assertEqual(self.prompter.warned, [])
        self.assertEqual(self.statistics.text().total, '$50.00')
        self.assertTrue(self.charts.is_active(ChartKind.CATEGORY))

    # Adding

    def test_invalid_submit_warns_once_and_sends_nothing(self):
        self._fill_form(amount='-5')
        self.form.submit()

        self.assertEqual(len(self.prompter.warned), 1)
        self.assertEqual(self.prompter.warned[0][0], 'Invalid Expense')
        self.assertEqual(self.gateway.named('create_expense'), [])
        self.assertFalse(self.controller.busy())

    def test_submit_sends_draft(self):
        self._fill_form()
        self.form.submit()

        calls = self.gateway.named('create_expense')
        self.assertEqual(len(calls), 1)
        self.assertEqual(calls[0][1][0], records.ExpenseDraft('Food', 12.5, datetime.date(2024, 1, 5), 'Lunch'))
        self.assertTrue(self.controller.busy())

    def test_created_resets_form_and_refreshes(self):
        self._fill_form()
        self.form.submit()

        self.gateway.expenseCreated.emit(
            self.gateway.last_id('create_expense'), records.parse_expense(EXPENSES_PAYLOAD[0])
        )

        values = self.form.values()
        self.assertEqual((values.category, values.amount, values.description), ('', '', ''))
        self.assertEqual(values.date, datetime.date.today().isoformat())
        self.assertEqual(len(self.gateway.named('list_expenses')), 1)
        self.assertEqual(len(self.gateway.named('fetch_analytics')), 1)
        self.assertEqual(self.prompter.notified, [('Success', controller.MSG_ADD_SUCCEEDED)])
        self.assertFalse(self.controller.busy())

    def test_create_failure_keeps_form(self):
        self._fill_form()
        self.form.submit()

        self.gateway.expenseCreateFailed.emit(
            self.gateway.last_id('create_expense'), status.ServiceUnavailableException()
        )

        self.assertEqual(self.prompter.warned, [('Error', controller.MSG_ADD_FAILED)])
        self.assertEqual(self.form.values().amount, '12.5')
        self.assertEqual(self.gateway.named('list_expenses'), [])
        self.assertFalse(self.controller.busy())

    # Deleting

    def test_delete_declined(self):
        self.prompter.answer = False
        self.controller.delete(3)

        self.assertEqual(self.prompter.confirmed, [('Delete Expense', controller.MSG_DELETE_CONFIRM)])
        self.assertEqual(self.gateway.calls, [])

    def test_delete_confirmed(self):
        self.controller.delete(3)
        self.assertEqual(self.gateway.named('delete_expense')[0][1], (3,))

        self.gateway.expenseDeleted.emit(self.gateway.last_id('delete_expense'), 3)

        self.assertEqual(self.prompter.notified, [('Success', controller.MSG_DELETE_SUCCEEDED)])
        self.assertEqual(len(self.gateway.named('list_expenses')), 1)
        self.assertEqual(len(self.gateway.named('fetch_analytics')), 1)

    def test_delete_failure(self):
        self.controller.delete(3)
        self.gateway.expenseDeleteFailed.emit(
            self.gateway.last_id('delete_expense'), status.ServiceUnavailableException()
        )

        self.assertEqual(self.prompter.warned, [('Error', controller.MSG_DELETE_FAILED)])
        self.assertEqual(self.gateway.named('list_expenses'), [])

    def test_table_delete_button_reaches_controller(self):
        from ExpenseDashboard.data.view.expense import ExpenseTableView

        view = ExpenseTableView()
        self.addCleanup(view.deleteLater)
        view.deleteRequested.connect(self.controller.delete)
        view.model().set_expenses(records.parse_expenses(EXPENSES_PAYLOAD))

        view.delete_button(0).click()
        self.assertEqual(self.gateway.named('delete_expense')[0][1], (2,))

    # Ordering

    def test_mutations_run_one_at_a_time(self):
        self._fill_form()
        self.form.submit()
        self.controller.delete(1)

        self.assertEqual(len(self.gateway.named('create_expense')), 1)
        self.assertEqual(self.gateway.named('delete_expense'), [])

        self.gateway.expenseCreated.emit(
            self.gateway.last_id('create_expense'), records.parse_expense(EXPENSES_PAYLOAD[0])
        )

        # The refresh for the first mutation is issued before the second one starts
        names = [f[0] for f in self.gateway.calls]
        self.assertEqual(names, ['create_expense', 'list_expenses', 'fetch_analytics', 'delete_expense'])
        self.assertTrue(self.controller.busy())

        self.gateway.expenseDeleted.emit(self.gateway.last_id('delete_expense'), 1)
        self.assertFalse(self.controller.busy())

    def test_unexpected_mutation_response_is_ignored(self):
        self.controller.delete(3)
        self.gateway.expenseDeleted.emit(999, 3)

        self.assertEqual(self.prompter.notified, [])
        self.assertTrue(self.controller.busy())
