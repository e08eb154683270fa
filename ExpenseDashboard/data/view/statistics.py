"""Summary statistics panel.

The panel shows the total spent and the highest and lowest spending categories exactly as
the service reports them. Nothing is recomputed on the client.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from PySide6 import QtWidgets, QtCore

from ..records import Analytics, CategoryAggregate
from ...settings import locale
from ...ui import ui

MISSING_CATEGORY: str = '-'


@dataclass(frozen=True, slots=True)
class StatisticsText:
    total: str
    highest_category: str
    highest_amount: str
    lowest_category: str
    lowest_amount: str


def _aggregate_text(aggregate: Optional[CategoryAggregate], locale_name: str) -> tuple[str, str]:
    if aggregate is None:
        return MISSING_CATEGORY, locale.format_currency_value(0, locale_name)
    return aggregate.category, locale.format_currency_value(aggregate.amount, locale_name)


def project_statistics(analytics: Analytics, locale_name: str = locale.DEFAULT_LOCALE) -> StatisticsText:
    """Convert an analytics summary into the panel's display text.

    A missing highest or lowest aggregate shows as ``-`` and a zero amount.

    Args:
        analytics (Analytics): The summary from the service.
        locale_name (str): Locale used to format amounts.

    Returns:
        StatisticsText: The text of all five fields.
    """
    highest_category, highest_amount = _aggregate_text(analytics.highest, locale_name)
    lowest_category, lowest_amount = _aggregate_text(analytics.lowest, locale_name)
    return StatisticsText(
        total=locale.format_currency_value(analytics.total, locale_name),
        highest_category=highest_category,
        highest_amount=highest_amount,
        lowest_category=lowest_category,
        lowest_amount=lowest_amount,
    )


class StatisticsPanel(QtWidgets.QWidget):
    """Three cards showing the total, the highest and the lowest category."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseDashboardStatisticsPanel')

        self.labels: Dict[str, QtWidgets.QLabel] = {}

        self._create_ui()
        self.set_analytics(Analytics())

    def _create_ui(self) -> None:
        QtWidgets.QHBoxLayout(self)
        o = ui.Size.Indicator(2.0)
        self.layout().setContentsMargins(0, 0, 0, 0)
        self.layout().setSpacing(o)

        cards = (
            ('Total Expenses', ('total',)),
            ('Highest Category', ('highest_category', 'highest_amount')),
            ('Lowest Category', ('lowest_category', 'lowest_amount')),
        )
        for title, keys in cards:
            box = QtWidgets.QGroupBox(title, parent=self)
            QtWidgets.QVBoxLayout(box)
            box.layout().setSpacing(ui.Size.Indicator(1.0))

            for n, key in enumerate(keys):
                label = QtWidgets.QLabel(parent=box)
                label.setObjectName(f'ExpenseDashboardStatistics_{key}')
                label.setTextInteractionFlags(QtCore.Qt.TextSelectableByMouse)
                # The first label of a card is the headline value
                label.setProperty('statistic' if n == 0 else 'caption', True)
                box.layout().addWidget(label)
                self.labels[key] = label

            self.layout().addWidget(box, 1)

    def text(self) -> StatisticsText:
        """The text currently displayed."""
        return StatisticsText(**{k: v.text() for k, v in self.labels.items()})

    @QtCore.Slot(object)
    def set_analytics(self, analytics: Analytics) -> None:
        """Overwrite every field from the given summary."""
        from ...settings import lib

        text = project_statistics(analytics, lib.settings['locale'] or locale.DEFAULT_LOCALE)
        for key, label in self.labels.items():
            label.setText(getattr(text, key))

        logging.debug(f'Statistics updated: total={text.total}')
