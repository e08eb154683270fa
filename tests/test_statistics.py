"""Tests for the statistics panel."""
import unittest

from ExpenseDashboard.data import records
from ExpenseDashboard.data.view.statistics import StatisticsPanel, StatisticsText, project_statistics
from tests.base import ANALYTICS_PAYLOAD, BaseTestCase


class ProjectStatisticsTests(unittest.TestCase):

    def test_full_summary(self):
        text = project_statistics(records.parse_analytics(ANALYTICS_PAYLOAD), 'en_US')
        self.assertEqual(text, StatisticsText(
            total='$50.00',
            highest_category='Food',
            highest_amount='$40.00',
            lowest_category='Transport',
            lowest_amount='$10.00',
        ))

    def test_empty_summary(self):
        text = project_statistics(records.Analytics(), 'en_US')
        self.assertEqual(text.total, '$0.00')
        self.assertEqual((text.highest_category, text.highest_amount), ('-', '$0.00'))
        self.assertEqual((text.lowest_category, text.lowest_amount), ('-', '$0.00'))

    def test_extrema_are_shown_verbatim(self):
        # The service decides which category wins a tie
        analytics = records.Analytics(
            total=20.0,
            highest=records.CategoryAggregate('Transport', 10.0),
            lowest=records.CategoryAggregate('Food', 10.0),
            by_category={'Food': 10.0, 'Transport': 10.0},
        )
        text = project_statistics(analytics, 'en_US')
        self.assertEqual(text.highest_category, 'Transport')
        self.assertEqual(text.lowest_category, 'Food')


class StatisticsPanelTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.panel = StatisticsPanel()
        self.addCleanup(self.panel.deleteLater)

    def test_initial_state(self):
        text = self.panel.text()
        self.assertEqual(text.total, '$0.00')
        self.assertEqual(text.highest_category, '-')

    def test_no_stale_values_survive(self):
        self.panel.set_analytics(records.parse_analytics(ANALYTICS_PAYLOAD))
        self.assertEqual(self.panel.text().highest_category, 'Food')

        self.panel.set_analytics(records.Analytics(total=5.0))
        self.assertEqual(self.panel.text(), StatisticsText(
            total='$5.00',
            highest_category='-',
            highest_amount='$0.00',
            lowest_category='-',
            lowest_amount='$0.00',
        ))
