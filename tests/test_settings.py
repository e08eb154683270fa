# tests/test_settings.py
"""
Unit tests for ExpenseDashboard.settings.lib
(covers validators, ConfigPaths, SettingsAPI and the service address override).

Run with:
    python -m unittest tests.test_settings
"""

from __future__ import annotations

import json
import os
import unittest
from pathlib import Path
from typing import Any, Dict

from ExpenseDashboard.settings import lib
from ExpenseDashboard.settings.lib import SETTINGS_SCHEMA, SettingsAPI, _validate_api, _validate_items
from ExpenseDashboard.status import status
from tests.base import BaseTestCase, mute_ui_signals


def minimal_settings() -> Dict[str, Any]:
    return {
        'api': {'base_url': 'http://example.test/api', 'timeout': 5},
        'metadata': {
            'name': 'Test Dashboard',
            'locale': 'en_US',
            'theme': 'light',
            'categories': ['Food', 'Transport'],
        },
    }


def write_json(p: Path, data: Dict[str, Any]) -> None:
    with p.open('w', encoding='utf-8') as f:
        json.dump(data, f, indent=4, ensure_ascii=False)


class ValidatorTests(unittest.TestCase):
    def test_validate_api_good(self):
        _validate_api({'base_url': 'https://example.test/api', 'timeout': 2.5}, SETTINGS_SCHEMA['api'])

    def test_validate_api_rejects_non_http_url(self):
        with self.assertRaises(status.SettingsInvalidException):
            _validate_api({'base_url': 'ftp://example.test', 'timeout': 2}, SETTINGS_SCHEMA['api'])

    def test_validate_api_rejects_non_positive_timeout(self):
        with self.assertRaises(status.SettingsInvalidException):
            _validate_api({'base_url': 'http://example.test', 'timeout': 0}, SETTINGS_SCHEMA['api'])

    def test_validate_api_rejects_bool_timeout(self):
        with self.assertRaises(status.SettingsInvalidException):
            _validate_api({'base_url': 'http://example.test', 'timeout': True}, SETTINGS_SCHEMA['api'])

    def test_validate_items_missing_field(self):
        data = minimal_settings()['metadata']
        del data['locale']
        with self.assertRaises(status.SettingsInvalidException):
            _validate_items('metadata', data, SETTINGS_SCHEMA['metadata']['item_schema'])

    def test_validate_items_rejects_non_string_categories(self):
        data = minimal_settings()['metadata']
        data['categories'] = ['Food', 3]
        with self.assertRaises(status.SettingsInvalidException):
            _validate_items('metadata', data, SETTINGS_SCHEMA['metadata']['item_schema'])


class RealTemplateSmokeTest(BaseTestCase):
    def test_templates_exist(self):
        cp = lib.ConfigPaths()
        self.assertTrue(cp.settings_template.exists())
        self.assertTrue(cp.stylesheet_path.exists())
        self.assertTrue(cp.settings_path.exists())

    def test_template_is_valid(self):
        with self.config_paths.settings_template.open('r', encoding='utf-8') as f:
            data = json.load(f)
        lib.settings.validate_settings_data(data)
        self.assertEqual(data['api']['base_url'], lib.DEFAULT_API_URL)


class SettingsAPIBehaviour(BaseTestCase):
    """Functional coverage for SettingsAPI."""

    def setUp(self) -> None:
        super().setUp()
        write_json(self.config_paths.settings_path, minimal_settings())

        self.api: SettingsAPI = lib.settings
        self.api.load_settings()

    def test_metadata_get_and_set(self):
        self.assertEqual(self.api['name'], 'Test Dashboard')
        self.assertEqual(self.api['categories'], ['Food', 'Transport'])

        with mute_ui_signals():
            self.api['name'] = 'Renamed'

        with self.config_paths.settings_path.open('r', encoding='utf-8') as f:
            self.assertEqual(json.load(f)['metadata']['name'], 'Renamed')

    def test_metadata_unknown_key(self):
        with self.assertRaises(KeyError):
            _ = self.api['bogus']
        with self.assertRaises(KeyError):
            self.api['bogus'] = 1

    def test_metadata_wrong_type(self):
        with self.assertRaises(TypeError):
            self.api['categories'] = 'Food'

    def test_metadata_emits_signal(self):
        from ExpenseDashboard.ui.actions import signals
        calls = []

        def _slot(key, value):
            calls.append((key, value))

        signals.metadataChanged.connect(_slot)
        try:
            self.api['locale'] = 'en_GB'
        finally:
            signals.metadataChanged.disconnect(_slot)
        self.assertEqual(calls, [('locale', 'en_GB')])

    def test_block_signals(self):
        from ExpenseDashboard.ui.actions import signals
        calls = []

        def _slot(key, value):
            calls.append(key)

        signals.metadataChanged.connect(_slot)
        try:
            self.api.block_signals(True)
            self.api['name'] = 'Quiet'
            self.api.block_signals(False)
        finally:
            signals.metadataChanged.disconnect(_slot)
        self.assertEqual(calls, [])

    def test_set_section_invalid_value_rollback(self):
        api = self.api.get_section('api')
        api['base_url'] = 'not a url'

        with self.assertRaises(status.SettingsInvalidException):
            self.api.set_section('api', api)

        self.assertEqual(self.api.get_section('api')['base_url'], 'http://example.test/api')

    def test_set_section_unknown(self):
        with self.assertRaises(ValueError):
            self.api.set_section('does_not_exist', {})

    def test_revert_section_api(self):
        with mute_ui_signals():
            self.api.revert_section('api')
        self.assertEqual(self.api.get_section('api')['base_url'], lib.DEFAULT_API_URL)

    def test_revert_section_metadata(self):
        with mute_ui_signals():
            self.api['name'] = 'Household'
            self.api.revert_section('metadata')
        self.assertEqual(self.api['name'], 'Expense Dashboard')

        self.api.load_settings()
        self.assertEqual(self.api['name'], 'Expense Dashboard')

    def test_missing_settings_file_restored_from_template(self):
        self.config_paths.settings_path.unlink()
        paths = lib.ConfigPaths()
        self.assertEqual(
            paths.settings_path.read_text(encoding='utf-8'),
            paths.settings_template.read_text(encoding='utf-8')
        )

    def test_save_section_unknown(self):
        with self.assertRaises(ValueError):
            self.api.save_section('does_not_exist')

    def test_load_missing_file(self):
        self.config_paths.settings_path.unlink()
        with self.assertRaises(status.SettingsNotFoundException):
            self.api.load_settings()

    def test_load_malformed_file(self):
        self.config_paths.settings_path.write_text('{ not json', encoding='utf-8')
        with self.assertRaises(status.SettingsInvalidException):
            self.api.load_settings()

    def test_api_url_strips_trailing_slash(self):
        api = self.api.get_section('api')
        api['base_url'] = 'http://example.test/api/'
        with mute_ui_signals():
            self.api.set_section('api', api)
        self.assertEqual(self.api.api_url, 'http://example.test/api')

    def test_api_url_environment_override(self):
        os.environ[lib.API_URL_ENV_KEY] = 'http://override.test:9000/api'
        self.assertEqual(self.api.api_url, 'http://override.test:9000/api')

    def test_api_timeout(self):
        self.assertEqual(self.api.api_timeout, 5.0)
