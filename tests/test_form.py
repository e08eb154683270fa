"""Tests for the add-expense form."""
import datetime

from ExpenseDashboard.data import records
from ExpenseDashboard.settings import lib
from ExpenseDashboard.ui.form import ExpenseForm
from tests.base import BaseTestCase


class ExpenseFormTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.form = ExpenseForm()
        self.addCleanup(self.form.deleteLater)

    def test_values_snapshot(self):
        self.form.set_values(records.FormValues('Bills', '80', '2024-03-01', 'Rent'))
        self.assertEqual(self.form.values(), records.FormValues('Bills', '80', '2024-03-01', 'Rent'))

    def test_submit_emits_snapshot(self):
        submitted = []
        self.form.submitted.connect(submitted.append)
        self.form.set_values(records.FormValues('Food', 'abc', '2024-03-01', ''))

        self.form.submit_button.click()

        # Invalid input is still emitted, validation happens downstream
        self.assertEqual(submitted, [records.FormValues('Food', 'abc', '2024-03-01', '')])

    def test_reset_clears_fields(self):
        self.form.set_values(records.FormValues('Bills', '80', '2024-03-01', 'Rent'))
        self.form.reset()

        values = self.form.values()
        self.assertEqual((values.category, values.amount, values.description), ('', '', ''))

    def test_default_date(self):
        self.form.set_default_date(datetime.date(2023, 12, 31))
        self.assertEqual(self.form.values().date, '2023-12-31')

        self.form.set_default_date()
        self.assertEqual(self.form.values().date, datetime.date.today().isoformat())

    def test_categories_from_settings(self):
        items = [self.form.category_editor.itemText(n) for n in range(self.form.category_editor.count())]
        self.assertEqual(items, lib.settings['categories'])
        self.assertEqual(self.form.category_editor.currentText(), '')

    def test_categories_follow_settings_changes(self):
        lib.settings['categories'] = ['Rent', 'Travel']
        items = [self.form.category_editor.itemText(n) for n in range(self.form.category_editor.count())]
        self.assertEqual(items, ['Rent', 'Travel'])
