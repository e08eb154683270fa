"""Expense and analytics records exchanged with the expense service.

This module provides:
    - Expense: an immutable expense record as returned by the service
    - FormValues: a snapshot of the add-expense form taken at submit time
    - ExpenseDraft: a validated, not yet persisted expense
    - CategoryAggregate, TrendPoint, Analytics: the service's derived summary
    - parse_expense, parse_expenses, parse_analytics: payload parsers
    - build_draft: FormValues to ExpenseDraft conversion with local validation

Parsers raise :class:`~ExpenseDashboard.status.status.ResponseInvalidException` when the
service sends data of an unexpected shape. Draft validation raises
:class:`~ExpenseDashboard.status.status.DraftInvalidException`.
"""
import datetime
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..status import status

ExpenseId = Union[int, str]


@dataclass(frozen=True, slots=True)
class Expense:
    """A single recorded expense. The id is assigned by the service."""
    id: ExpenseId
    category: str
    amount: float
    date: datetime.date
    description: str = ''


@dataclass(frozen=True, slots=True)
class FormValues:
    """Raw values read from the add-expense form, all as entered by the user."""
    category: str = ''
    amount: str = ''
    date: str = ''
    description: str = ''


@dataclass(frozen=True, slots=True)
class ExpenseDraft:
    """A client-side candidate expense submitted for creation."""
    category: str
    amount: float
    date: datetime.date
    description: str = ''

    def to_payload(self) -> Dict[str, Any]:
        """Return the request body sent to the service."""
        return {
            'category': self.category,
            'amount': self.amount,
            'date': self.date.isoformat(),
            'description': self.description or '',
        }


@dataclass(frozen=True, slots=True)
class CategoryAggregate:
    category: str
    amount: float


@dataclass(frozen=True, slots=True)
class TrendPoint:
    date: str
    amount: float


@dataclass(frozen=True, slots=True)
class Analytics:
    """Summary computed by the service over all expenses.

    ``by_category`` keeps the order of the response, which drives the chart legend and
    the colour assignment.
    """
    total: float = 0.0
    highest: Optional[CategoryAggregate] = None
    lowest: Optional[CategoryAggregate] = None
    trend: Tuple[TrendPoint, ...] = ()
    by_category: Dict[str, float] = field(default_factory=dict)


def _to_float(value: Any, name: str) -> float:
    # bool is an int subclass, but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise status.ResponseInvalidException(f'"{name}" must be a number, got {value!r}.')
    try:
        v = float(value)
    except ValueError as ex:
        raise status.ResponseInvalidException(f'"{name}" must be a number, got {value!r}.') from ex
    if not math.isfinite(v):
        raise status.ResponseInvalidException(f'"{name}" must be finite, got {value!r}.')
    return v


def _to_date(value: Any, name: str) -> datetime.date:
    if not isinstance(value, str):
        raise status.ResponseInvalidException(f'"{name}" must be an ISO date string, got {value!r}.')
    try:
        return datetime.date.fromisoformat(value.strip())
    except ValueError as ex:
        raise status.ResponseInvalidException(f'"{name}" must be an ISO date string, got {value!r}.') from ex


def parse_expense(data: Any) -> Expense:
    """Convert a single expense record from the service into an :class:`Expense`.

    Args:
        data (dict): The decoded JSON object.

    Returns:
        Expense: The parsed record.

    Raises:
        status.ResponseInvalidException: If required fields are missing or malformed.
    """
    if not isinstance(data, dict):
        raise status.ResponseInvalidException(f'Expense must be an object, got {type(data).__name__}.')

    missing = [k for k in ('id', 'category', 'amount', 'date') if data.get(k) is None]
    if missing:
        raise status.ResponseInvalidException(f'Expense is missing required fields: {missing}.')

    _id = data['id']
    if isinstance(_id, bool) or not isinstance(_id, (int, str)):
        raise status.ResponseInvalidException(f'Expense id must be an integer or a string, got {_id!r}.')

    category = data['category']
    if not isinstance(category, str):
        raise status.ResponseInvalidException(f'Expense category must be a string, got {category!r}.')

    description = data.get('description') or ''
    if not isinstance(description, str):
        description = str(description)

    return Expense(
        id=_id,
        category=category,
        amount=_to_float(data['amount'], 'amount'),
        date=_to_date(data['date'], 'date'),
        description=description,
    )


def parse_expenses(data: Any) -> List[Expense]:
    """Convert the expense list response into a list of :class:`Expense` records.

    The order of the response is preserved.
    """
    if not isinstance(data, list):
        raise status.ResponseInvalidException(f'Expected a list of expenses, got {type(data).__name__}.')
    return [parse_expense(f) for f in data]


def _parse_aggregate(data: Any, name: str) -> Optional[CategoryAggregate]:
    if data is None:
        return None
    if not isinstance(data, dict) or 'category' not in data or 'amount' not in data:
        raise status.ResponseInvalidException(f'"{name}" must be a {{category, amount}} object, got {data!r}.')
    return CategoryAggregate(
        category=str(data['category']),
        amount=_to_float(data['amount'], f'{name}.amount'),
    )


def parse_analytics(data: Any) -> Analytics:
    """Convert the analytics response into an :class:`Analytics` record.

    ``highest`` and ``lowest`` are optional; both a missing key and an explicit ``null``
    map to ``None``. Trend points are kept in the order they were sent.

    Args:
        data (dict): The decoded JSON object.

    Returns:
        Analytics: The parsed summary.

    Raises:
        status.ResponseInvalidException: If the payload has an unexpected shape.
    """
    if not isinstance(data, dict):
        raise status.ResponseInvalidException(f'Analytics must be an object, got {type(data).__name__}.')

    trend_data = data.get('trend') or []
    if not isinstance(trend_data, list):
        raise status.ResponseInvalidException('"trend" must be a list.')

    trend = []
    for item in trend_data:
        if not isinstance(item, dict) or 'date' not in item or 'amount' not in item:
            raise status.ResponseInvalidException(f'Trend items must be {{date, amount}} objects, got {item!r}.')
        trend.append(TrendPoint(date=str(item['date']), amount=_to_float(item['amount'], 'trend.amount')))

    by_category_data = data.get('byCategory') or {}
    if not isinstance(by_category_data, dict):
        raise status.ResponseInvalidException('"byCategory" must be an object.')
    by_category = {str(k): _to_float(v, f'byCategory.{k}') for k, v in by_category_data.items()}

    analytics = Analytics(
        total=_to_float(data.get('total', 0.0), 'total'),
        highest=_parse_aggregate(data.get('highest'), 'highest'),
        lowest=_parse_aggregate(data.get('lowest'), 'lowest'),
        trend=tuple(trend),
        by_category=by_category,
    )
    logging.debug(
        f'Parsed analytics: total={analytics.total}, {len(analytics.trend)} trend points, '
        f'{len(analytics.by_category)} categories'
    )
    return analytics


def parse_amount(value: Union[str, float, int]) -> float:
    """Parse a user-entered amount.

    Args:
        value: The amount as entered, e.g. ``'12.5'``.

    Returns:
        float: The parsed amount.

    Raises:
        status.DraftInvalidException: If the amount is not a finite, non-negative number.
    """
    if isinstance(value, bool):
        raise status.DraftInvalidException(f'Amount must be a number, got {value!r}.')
    try:
        v = float(str(value).strip())
    except ValueError as ex:
        raise status.DraftInvalidException(f'Amount must be a number, got {value!r}.') from ex
    if not math.isfinite(v):
        raise status.DraftInvalidException(f'Amount must be a finite number, got {value!r}.')
    if v < 0:
        raise status.DraftInvalidException(f'Amount must not be negative, got {value!r}.')
    return v


def validate_draft(draft: ExpenseDraft) -> ExpenseDraft:
    """Check a draft before it is sent to the service.

    Raises:
        status.DraftInvalidException: If the draft is not valid.
    """
    if not isinstance(draft.category, str) or not draft.category.strip():
        raise status.DraftInvalidException('Category is required.')
    parse_amount(draft.amount)
    if not isinstance(draft.date, datetime.date):
        raise status.DraftInvalidException(f'Date must be a calendar date, got {draft.date!r}.')
    return draft


def build_draft(values: FormValues) -> ExpenseDraft:
    """Build a validated draft from a form snapshot.

    Args:
        values (FormValues): The form values captured at submit time.

    Returns:
        ExpenseDraft: The draft to submit.

    Raises:
        status.DraftInvalidException: If any field is invalid.
    """
    category = (values.category or '').strip()
    if not category:
        raise status.DraftInvalidException('Category is required.')

    amount = parse_amount(values.amount)

    try:
        date = datetime.date.fromisoformat((values.date or '').strip())
    except ValueError as ex:
        raise status.DraftInvalidException(f'Date must be in YYYY-MM-DD format, got {values.date!r}.') from ex

    return ExpenseDraft(
        category=category,
        amount=amount,
        date=date,
        description=(values.description or '').strip(),
    )
