"""Tests for ExpenseDashboard.core.service.

The blocking request helpers are tested against a mocked ``requests.Session``; the
:class:`Gateway` tests additionally spin the Qt event loop until the worker reports back.
"""
import datetime
import unittest
from unittest import mock

import requests

from ExpenseDashboard.core import service
from ExpenseDashboard.data import records
from ExpenseDashboard.status import status
from tests.base import ANALYTICS_PAYLOAD, EXPENSES_PAYLOAD, BaseTestCase, make_response, make_session

BASE_URL = 'http://example.test/api'
TIMEOUT = 3.0


def _draft(amount=12.5):
    return records.ExpenseDraft('Food', amount, datetime.date(2024, 1, 1), 'Lunch')


class ListExpensesTests(unittest.TestCase):

    def test_success(self):
        session = make_session(make_response(200, EXPENSES_PAYLOAD))
        expenses = service._list_expenses(session, BASE_URL, TIMEOUT)

        self.assertEqual([f.id for f in expenses], [1, 2, 3])
        session.request.assert_called_once_with(
            'GET', f'{BASE_URL}/expenses', timeout=TIMEOUT, headers=service.JSON_HEADERS
        )

    def test_empty_list(self):
        session = make_session(make_response(200, []))
        self.assertEqual(service._list_expenses(session, BASE_URL, TIMEOUT), [])

    def test_server_error(self):
        session = make_session(make_response(500, {'error': 'boom'}))
        with self.assertRaises(status.ServiceUnavailableException):
            service._list_expenses(session, BASE_URL, TIMEOUT)

    def test_transport_error(self):
        session = make_session(requests.ConnectionError('refused'))
        with self.assertRaises(status.ServiceUnavailableException):
            service._list_expenses(session, BASE_URL, TIMEOUT)

    def test_timeout(self):
        session = make_session(requests.Timeout('slow'))
        with self.assertRaises(status.ServiceUnavailableException):
            service._list_expenses(session, BASE_URL, TIMEOUT)

    def test_unparseable_body(self):
        session = make_session(make_response(200, body=b'<html>'))
        with self.assertRaises(status.ResponseInvalidException):
            service._list_expenses(session, BASE_URL, TIMEOUT)

    def test_wrong_shape(self):
        session = make_session(make_response(200, {'id': 1}))
        with self.assertRaises(status.ResponseInvalidException):
            service._list_expenses(session, BASE_URL, TIMEOUT)


class FetchAnalyticsTests(unittest.TestCase):

    def test_success(self):
        session = make_session(make_response(200, ANALYTICS_PAYLOAD))
        analytics = service._fetch_analytics(session, BASE_URL, TIMEOUT)

        self.assertEqual(analytics.total, 50.0)
        self.assertEqual(session.request.call_args.args, ('GET', f'{BASE_URL}/analytics'))

    def test_not_found(self):
        session = make_session(make_response(404))
        with self.assertRaises(status.ServiceUnavailableException):
            service._fetch_analytics(session, BASE_URL, TIMEOUT)


class CreateExpenseTests(unittest.TestCase):

    def test_success(self):
        created = dict(EXPENSES_PAYLOAD[0], id=42)
        session = make_session(make_response(201, created))

        expense = service._create_expense(session, BASE_URL, TIMEOUT, _draft())

        self.assertEqual(expense.id, 42)
        session.request.assert_called_once_with(
            'POST', f'{BASE_URL}/expenses', timeout=TIMEOUT, headers=service.JSON_HEADERS,
            json={'category': 'Food', 'amount': 12.5, 'date': '2024-01-01', 'description': 'Lunch'}
        )

    def test_invalid_draft_is_never_sent(self):
        session = make_session()
        for amount in (-1.0, float('nan'), float('inf')):
            with self.subTest(amount=amount), self.assertRaises(status.DraftInvalidException):
                service._create_expense(session, BASE_URL, TIMEOUT, _draft(amount))
        session.request.assert_not_called()

    def test_rejected(self):
        session = make_session(make_response(400, {'error': 'bad'}))
        with self.assertRaises(status.ServiceUnavailableException):
            service._create_expense(session, BASE_URL, TIMEOUT, _draft())

    def test_unparseable_created_record(self):
        session = make_session(make_response(201, body=b''))
        with self.assertRaises(status.ResponseInvalidException):
            service._create_expense(session, BASE_URL, TIMEOUT, _draft())


class DeleteExpenseTests(unittest.TestCase):

    def test_success_ignores_body(self):
        session = make_session(make_response(204))
        self.assertEqual(service._delete_expense(session, BASE_URL, TIMEOUT, 7), 7)
        self.assertEqual(session.request.call_args.args, ('DELETE', f'{BASE_URL}/expenses/7'))

    def test_id_is_quoted(self):
        session = make_session(make_response(200, body=b'not json'))
        service._delete_expense(session, BASE_URL, TIMEOUT, 'a/b c')
        self.assertEqual(session.request.call_args.args, ('DELETE', f'{BASE_URL}/expenses/a%2Fb%20c'))

    def test_failure(self):
        session = make_session(make_response(404))
        with self.assertRaises(status.ServiceUnavailableException):
            service._delete_expense(session, BASE_URL, TIMEOUT, 7)


class GatewayTests(BaseTestCase):

    def _gateway(self, *responses):
        self.session = make_session(*responses)
        gateway = service.Gateway(base_url=BASE_URL + '/', timeout=TIMEOUT, session=self.session)
        self.addCleanup(gateway.close)
        return gateway

    def _record(self, signal):
        calls = []
        signal.connect(lambda request_id, payload: calls.append((request_id, payload)))
        return calls

    def test_request_ids_are_unique(self):
        gateway = self._gateway(make_response(200, []), make_response(200, ANALYTICS_PAYLOAD))
        first = gateway.list_expenses()
        second = gateway.fetch_analytics()
        self.assertNotEqual(first, second)
        self.wait_for(lambda: gateway.pending() == 0)

    def test_list_expenses_delivers_result(self):
        gateway = self._gateway(make_response(200, EXPENSES_PAYLOAD))
        ok = self._record(gateway.expensesFetched)
        failed = self._record(gateway.expensesFetchFailed)

        request_id = gateway.list_expenses()
        self.wait_for(lambda: ok or failed)

        self.assertEqual(failed, [])
        self.assertEqual(ok[0][0], request_id)
        self.assertEqual([f.id for f in ok[0][1]], [1, 2, 3])

    def test_failure_is_delivered_once(self):
        gateway = self._gateway(make_response(503))
        ok = self._record(gateway.analyticsFetched)
        failed = self._record(gateway.analyticsFetchFailed)

        request_id = gateway.fetch_analytics()
        self.wait_for(lambda: ok or failed)
        self.process_events(50)

        self.assertEqual(ok, [])
        self.assertEqual(len(failed), 1)
        self.assertEqual(failed[0][0], request_id)
        self.assertIsInstance(failed[0][1], status.ServiceUnavailableException)
        self.assertEqual(self.session.request.call_count, 1)

    def test_unexpected_error_is_wrapped(self):
        gateway = self._gateway(RuntimeError('unexpected'))
        failed = self._record(gateway.expenseDeleteFailed)

        gateway.delete_expense(1)
        self.wait_for(lambda: failed)

        self.assertIsInstance(failed[0][1], status.UnknownException)

    def test_create_and_delete(self):
        gateway = self._gateway(make_response(201, dict(EXPENSES_PAYLOAD[0], id=9)), make_response(204))
        created = self._record(gateway.expenseCreated)
        deleted = self._record(gateway.expenseDeleted)

        gateway.create_expense(_draft())
        self.wait_for(lambda: created)
        gateway.delete_expense(9)
        self.wait_for(lambda: deleted)

        self.assertEqual(created[0][1].id, 9)
        self.assertEqual(deleted[0][1], 9)

    def test_base_url_from_settings(self):
        from ExpenseDashboard.settings import lib

        gateway = service.Gateway(session=mock.MagicMock(spec=requests.Session))
        self.assertEqual(gateway.base_url, lib.settings.api_url)
        self.assertEqual(gateway.timeout, lib.settings.api_timeout)
        gateway.close()
