"""Expense service integration with asynchronous operations.

Provides the blocking request helpers used to list, create and delete expenses and to
fetch the analytics summary, and :class:`Gateway`, which runs them on worker threads
and reports the outcome on the UI thread through Qt signals.

Every gateway call returns a request id. The id is passed along with the result or
the error so callers can tell responses apart when several requests are in flight.
"""

import itertools
import logging
from typing import Any, Callable, Dict, List, Optional

import requests
from PySide6 import QtCore

from ..data import records
from ..status import status

JSON_HEADERS: Dict[str, str] = {
    'Accept': 'application/json',
}


class AsyncWorker(QtCore.QThread):
    """
    Generic worker thread running a single blocking call.

    There are no retries: the first failure is reported.

    Signals:
        resultReady (int, object): Emitted with the request id and the function's result on success.
        errorOccurred (int, object): Emitted with the request id and the exception on failure.
    """
    resultReady = QtCore.Signal(int, object)
    errorOccurred = QtCore.Signal(int, object)

    def __init__(self, request_id: int, func: Callable[..., Any], *args: Any,
                 parent: Optional[QtCore.QObject] = None, **kwargs: Any) -> None:
        super().__init__(parent)
        self.request_id = request_id
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:
        try:
            result = self.func(*self.args, **self.kwargs)
        except status.BaseStatusException as ex:
            self.errorOccurred.emit(self.request_id, ex)
            return
        except Exception as ex:
            logging.exception(f'Request {self.request_id} failed unexpectedly')
            self.errorOccurred.emit(self.request_id, status.UnknownException(str(ex)))
            return
        self.resultReady.emit(self.request_id, result)


def _request(session: requests.Session, method: str, url: str, timeout: float, **kwargs: Any) -> requests.Response:
    """
    Sends a single request and checks the response status.

    Transport failures and non-success statuses are not told apart: both raise
    :class:`status.ServiceUnavailableException`.
    """
    logging.debug(f'{method} {url}')
    try:
        response = session.request(method, url, timeout=timeout, headers=JSON_HEADERS, **kwargs)
    except requests.RequestException as ex:
        raise status.ServiceUnavailableException(f'{method} {url} failed: {ex}') from ex

    if not response.ok:
        raise status.ServiceUnavailableException(
            f'{method} {url} returned {response.status_code} {response.reason or ""}'.strip()
        )
    logging.debug(f'{method} {url} returned {response.status_code}')
    return response


def _decode(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as ex:
        raise status.ResponseInvalidException(f'Could not decode the response: {ex}') from ex


def _list_expenses(session: requests.Session, base_url: str, timeout: float) -> List[records.Expense]:
    """
    Retrieves all expenses.

    Returns:
        list[Expense]: The expenses in the order the service sent them.
    """
    response = _request(session, 'GET', f'{base_url}/expenses', timeout)
    expenses = records.parse_expenses(_decode(response))
    logging.debug(f'Fetched {len(expenses)} expenses.')
    return expenses


def _fetch_analytics(session: requests.Session, base_url: str, timeout: float) -> records.Analytics:
    """
    Retrieves the analytics summary computed by the service.
    """
    response = _request(session, 'GET', f'{base_url}/analytics', timeout)
    return records.parse_analytics(_decode(response))


def _create_expense(session: requests.Session, base_url: str, timeout: float,
                    draft: records.ExpenseDraft) -> records.Expense:
    """
    Submits a new expense.

    The draft is validated before anything is sent.

    Args:
        draft (ExpenseDraft): The expense to create.

    Returns:
        Expense: The record created by the service.

    Raises:
        status.DraftInvalidException: If the draft is not valid. No request is made.
        status.ServiceUnavailableException: If the request fails.
        status.ResponseInvalidException: If the created record cannot be parsed.
    """
    records.validate_draft(draft)
    response = _request(session, 'POST', f'{base_url}/expenses', timeout, json=draft.to_payload())
    expense = records.parse_expense(_decode(response))
    logging.debug(f'Created expense {expense.id}.')
    return expense


def _delete_expense(session: requests.Session, base_url: str, timeout: float,
                    expense_id: records.ExpenseId) -> records.ExpenseId:
    """
    Deletes an expense. The response body is ignored.

    Returns:
        The id of the deleted expense.
    """
    _id = requests.utils.quote(str(expense_id), safe='')
    _request(session, 'DELETE', f'{base_url}/expenses/{_id}', timeout)
    logging.debug(f'Deleted expense {expense_id}.')
    return expense_id


class Gateway(QtCore.QObject):
    """Runs expense service requests in the background.

    Results and errors are delivered on the thread the gateway lives in, normally the
    UI thread. Each signal carries the request id returned by the call that started it.

    Args:
        base_url (str, optional): Service root. Read from the settings on every call when omitted.
        timeout (float, optional): Request timeout in seconds. Read from the settings when omitted.
        session (requests.Session, optional): Session to send requests with.
    """
    expensesFetched = QtCore.Signal(int, object)
    expensesFetchFailed = QtCore.Signal(int, object)

    analyticsFetched = QtCore.Signal(int, object)
    analyticsFetchFailed = QtCore.Signal(int, object)

    expenseCreated = QtCore.Signal(int, object)
    expenseCreateFailed = QtCore.Signal(int, object)

    expenseDeleted = QtCore.Signal(int, object)
    expenseDeleteFailed = QtCore.Signal(int, object)

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._base_url = base_url.rstrip('/') if base_url else None
        self._timeout = timeout
        self._session = session or requests.Session()

        self._counter = itertools.count(1)
        self._pending: Dict[int, tuple] = {}

    @property
    def base_url(self) -> str:
        if self._base_url:
            return self._base_url
        from ..settings import lib
        return lib.settings.api_url

    @property
    def timeout(self) -> float:
        if self._timeout:
            return self._timeout
        from ..settings import lib
        return lib.settings.api_timeout

    def _start(self, func: Callable[..., Any], ok_signal: QtCore.Signal,
               failed_signal: QtCore.Signal, *args: Any) -> int:
        request_id = next(self._counter)

        worker = AsyncWorker(
            request_id, func, self._session, self.base_url, self.timeout, *args,
            parent=self
        )
        worker.resultReady.connect(self._on_result, QtCore.Qt.QueuedConnection)
        worker.errorOccurred.connect(self._on_error, QtCore.Qt.QueuedConnection)
        worker.finished.connect(worker.deleteLater)

        self._pending[request_id] = (ok_signal, failed_signal, worker)
        worker.start()

        logging.debug(f'Started request {request_id}: {func.__name__}')
        return request_id

    @QtCore.Slot(int, object)
    def _on_result(self, request_id: int, result: object) -> None:
        entry = self._pending.pop(request_id, None)
        if entry is None:
            logging.warning(f'Received a result for unknown request {request_id}')
            return
        ok_signal, _, _ = entry
        ok_signal.emit(request_id, result)

    @QtCore.Slot(int, object)
    def _on_error(self, request_id: int, error: object) -> None:
        entry = self._pending.pop(request_id, None)
        if entry is None:
            logging.warning(f'Received an error for unknown request {request_id}')
            return
        _, failed_signal, _ = entry
        failed_signal.emit(request_id, error)

    def list_expenses(self) -> int:
        """Fetch all expenses. Emits ``expensesFetched`` or ``expensesFetchFailed``."""
        return self._start(_list_expenses, self.expensesFetched, self.expensesFetchFailed)

    def fetch_analytics(self) -> int:
        """Fetch the analytics summary. Emits ``analyticsFetched`` or ``analyticsFetchFailed``."""
        return self._start(_fetch_analytics, self.analyticsFetched, self.analyticsFetchFailed)

    def create_expense(self, draft: records.ExpenseDraft) -> int:
        """Create an expense. Emits ``expenseCreated`` or ``expenseCreateFailed``."""
        return self._start(_create_expense, self.expenseCreated, self.expenseCreateFailed, draft)

    def delete_expense(self, expense_id: records.ExpenseId) -> int:
        """Delete an expense. Emits ``expenseDeleted`` or ``expenseDeleteFailed``."""
        return self._start(_delete_expense, self.expenseDeleted, self.expenseDeleteFailed, expense_id)

    def pending(self) -> int:
        """Number of requests that have not reported back yet."""
        return len(self._pending)

    def close(self) -> None:
        """Wait for running requests and close the session."""
        for worker in self.findChildren(AsyncWorker):
            worker.wait()
        self._pending.clear()
        self._session.close()
        logging.debug('Gateway closed.')
