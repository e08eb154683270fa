# tests/test_log.py
"""
Integration tests for ExpenseDashboard.log
(covers TankHandler, the Qt bridge, setup helpers and the log table model).

Run:
    python -m unittest tests.test_log
"""
import logging
import threading
from typing import List

from PySide6 import QtCore
from PySide6.QtCore import QtMsgType

from ExpenseDashboard.log.log import (
    TankHandler,
    get_handler,
    qt_message_handler,
    set_logging_level,
    setup_logging,
)
from ExpenseDashboard.log.model import Columns, LogFilterProxyModel, LogTableModel
from tests.base import BaseTestCase


class LogModuleTests(BaseTestCase):
    """
    Each test starts with a fresh root logger configured by
    setup_logging(enable_stream_handler=False).
    """

    def setUp(self) -> None:
        super().setUp()

        logging.disable(logging.NOTSET)

        setup_logging(enable_stream_handler=False,
                      enable_qt_handler=False,
                      log_level=logging.DEBUG)

        self.root_logger = logging.getLogger()
        self.tank: TankHandler = get_handler()

    def test_setup_logging_installs_tank_handler_only(self):
        self.assertEqual(
            [type(h) for h in self.root_logger.handlers],
            [TankHandler],
        )

    def test_set_logging_level_accepts_valid_levels(self):
        set_logging_level(logging.ERROR)
        self.assertEqual(self.root_logger.level, logging.ERROR)
        for h in self.root_logger.handlers:
            self.assertEqual(h.level, logging.ERROR)
        set_logging_level(logging.DEBUG)

    def test_set_logging_level_rejects_non_int(self):
        with self.assertRaises(ValueError):
            set_logging_level('INFO')  # type: ignore[arg-type]

    def test_set_logging_level_rejects_unknown(self):
        with self.assertRaises(ValueError):
            set_logging_level(1234)

    def test_tank_handler_stores_and_filters(self):
        self.tank.clear_logs()
        logging.debug('dbg message')
        logging.error('err message')
        self.assertEqual(len(self.tank.tank), 2)
        errs: List[str] = self.tank.get_logs(logging.ERROR)
        self.assertEqual(len(errs), 1)
        self.assertIn('err message', errs[0])
        self.tank.clear_logs()
        self.assertEqual(len(self.tank.tank), 0)

    def test_tank_handler_accepts_records_from_threads(self):
        self.tank.clear_logs()

        def _log(n):
            for i in range(200):
                logging.info('thread-%d-%d', n, i)

        threads = [threading.Thread(target=_log, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(self.tank.get_logs()), 800)

    def test_qt_message_handler_maps_to_logging(self):
        qt_message_handler(QtMsgType.QtInfoMsg, None, 'Qt info')
        qt_message_handler(QtMsgType.QtWarningMsg, None, 'Qt warn')
        msgs = self.tank.get_logs()
        self.assertTrue(any('Qt info' in m for m in msgs))
        self.assertTrue(any('Qt warn' in m for m in msgs))

    def test_qt_message_handler_fatal_exits(self):
        with self.assertRaises(SystemExit):
            qt_message_handler(QtMsgType.QtFatalMsg, None, 'fatal')


class LogTableModelTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        logging.disable(logging.NOTSET)
        setup_logging(enable_stream_handler=False, enable_qt_handler=False, log_level=logging.DEBUG)
        get_handler().clear_logs()

        self.model = LogTableModel(fetch_interval_ms=60_000)

    def tearDown(self) -> None:
        self.model.deleteLater()
        super().tearDown()

    def test_fetch_parses_log_lines(self):
        logging.warning('something odd')
        self.model.fetch_new_logs()

        self.assertEqual(self.model.rowCount(), 1)
        self.assertEqual(self.model.index(0, Columns.Level).data(), 'WARNING')
        self.assertEqual(self.model.index(0, Columns.Message).data(), 'something odd')
        self.assertEqual(self.model.index(0, Columns.Module).data(), 'test_log')

    def test_fetch_only_appends_new_lines(self):
        logging.info('first')
        self.model.fetch_new_logs()
        logging.info('second')
        self.model.fetch_new_logs()

        messages = [self.model.index(r, Columns.Message).data() for r in range(self.model.rowCount())]
        self.assertEqual(messages, ['first', 'second'])

    def test_unparseable_line_is_kept_whole(self):
        entry = self.model.parse_log_message('free form text')
        self.assertEqual(entry['message'], 'free form text')
        self.assertEqual(entry['level'], logging.NOTSET)

    def test_filter_proxy_hides_lower_levels(self):
        logging.debug('quiet')
        logging.error('loud')
        self.model.fetch_new_logs()

        proxy = LogFilterProxyModel()
        proxy.setSourceModel(self.model)
        self.assertEqual(proxy.rowCount(), 2)

        proxy.set_filter_level(logging.ERROR)
        self.assertEqual(proxy.rowCount(), 1)
        self.assertEqual(proxy.index(0, Columns.Message).data(), 'loud')

    def test_paused_model_does_not_fetch(self):
        self.model.pause()
        logging.info('while paused')
        self.model.fetch_new_logs()
        self.assertEqual(self.model.rowCount(), 0)

        self.model.resume()
        self.assertEqual(self.model.rowCount(), 1)

    def test_cleared_tank_resets_model(self):
        logging.info('one')
        self.model.fetch_new_logs()
        get_handler().clear_logs()
        self.model.fetch_new_logs()
        self.assertEqual(self.model.rowCount(), 0)
