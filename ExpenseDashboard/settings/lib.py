"""Settings library for the dashboard configuration.

Provides:
    - Schema validation and enforcement for the settings.json structure.
    - Loading, saving, reverting, and managing application settings.
    - The expense service address, with an environment override for the session.
"""

import json
import logging
import os
import pathlib
import shutil
from typing import Dict, Any, Optional, List

from PySide6 import QtCore, QtWidgets

from ..status import status

app_name: str = 'ExpenseDashboard'

API_URL_ENV_KEY: str = 'EXPENSEDASHBOARD_API_URL'
DEFAULT_API_URL: str = 'http://localhost:8080/api'
DEFAULT_TIMEOUT: float = 10.0

API_KEYS: List[str] = ['base_url', 'timeout']

METADATA_KEYS: List[str] = [
    'name',
    'locale',
    'theme',
    'categories',
]

SETTINGS_SCHEMA: Dict[str, Any] = {
    'api': {
        'type': dict,
        'required': True,
        'required_keys': API_KEYS,
        'item_schema': {
            'base_url': {'type': str, 'required': True},
            'timeout': {'type': (int, float), 'required': True},
        }
    },
    'metadata': {
        'type': dict,
        'required': True,
        'required_keys': METADATA_KEYS,
        'item_schema': {
            'name': {'type': str, 'required': True},
            'locale': {'type': str, 'required': True},
            'theme': {'type': str, 'required': True},
            'categories': {'type': list, 'required': True, 'value_type': str},
        }
    },
}


def _validate_items(section: str, data: Dict[str, Any], item_schema: Dict[str, Any]) -> None:
    """Validate the keys of a settings section against its item schema.

    Args:
        section: Name of the section being validated, used in error messages.
        data: The section data.
        item_schema: Dict describing required fields and their types.

    Raises:
        status.SettingsInvalidException: If a required field is missing or has the wrong type.
    """
    logging.debug(f'Validating "{section}" section.')
    for field, field_specs in item_schema.items():
        if field_specs['required'] and field not in data:
            raise status.SettingsInvalidException(f'Section "{section}" missing "{field}".')
        if field not in data:
            continue

        v = data[field]
        # bool is an int subclass but never a valid number here
        if isinstance(v, bool) and field_specs['type'] is not bool:
            raise status.SettingsInvalidException(
                f'Section "{section}" field "{field}" must be {field_specs["type"]}, got bool.'
            )
        if not isinstance(v, field_specs['type']):
            raise status.SettingsInvalidException(
                f'Section "{section}" field "{field}" must be {field_specs["type"]}, got {type(v)}.'
            )
        value_type = field_specs.get('value_type')
        if value_type and not all(isinstance(f, value_type) for f in v):
            raise status.SettingsInvalidException(
                f'Section "{section}" field "{field}" must only contain {value_type} items.'
            )


def _validate_api(api_dict: Dict[str, Any], specs: Dict[str, Any]) -> None:
    """Validate the 'api' section.

    Args:
        api_dict: The api section data.
        specs: Schema dict of the section.

    Raises:
        status.SettingsInvalidException: If the url is not http(s) or the timeout is not positive.
    """
    _validate_items('api', api_dict, specs['item_schema'])

    url = api_dict['base_url'].strip()
    if not url.startswith(('http://', 'https://')):
        raise status.SettingsInvalidException(f'"base_url" must be an http(s) address, got "{url}".')
    if api_dict['timeout'] <= 0:
        raise status.SettingsInvalidException(f'"timeout" must be positive, got {api_dict["timeout"]}.')


class ConfigPaths:
    """Manage application file paths and ensure default templates and directories exist.

    The settings template ships with the package; the user's copy lives in the
    writable AppData location and is created from the template on first run.
    """

    def __init__(self) -> None:
        # Set the application name and organization
        QtWidgets.QApplication.setApplicationName(app_name)
        QtWidgets.QApplication.setOrganizationName('')
        logging.debug(f'Setting application name: {app_name}')

        # Get the app data directory
        p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
        app_data_dir = pathlib.Path(p)
        logging.debug(f'Using app data directory: {app_data_dir}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.settings_template: pathlib.Path = self.template_dir / 'settings.json.template'
        self.stylesheet_path: pathlib.Path = self.template_dir / 'stylesheet.qss'

        self.config_dir: pathlib.Path = app_data_dir / 'config'
        self.settings_path: pathlib.Path = self.config_dir / 'settings.json'

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify the template exists and copy it into the config directory if needed.

        Raises:
            FileNotFoundError: If the template directory or the settings template is missing.
        """
        logging.debug(f'Verifying required directories and templates in {self.template_dir}')
        if not self.template_dir.exists():
            msg: str = f'Missing template directory: {self.template_dir}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        if not self.settings_template.exists():
            msg = f'Missing settings template: {self.settings_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)

        if not self.config_dir.exists():
            logging.debug(f'Creating config directory: {self.config_dir}')
            self.config_dir.mkdir(parents=True, exist_ok=True)

        # Ensure a valid config exists even if we haven't yet set it up
        if not self.settings_path.exists():
            logging.debug(f'Copying default settings from template to {self.settings_path}')
            shutil.copy(self.settings_template, self.settings_path)


class SettingsAPI(ConfigPaths):
    """
    Provides an interface to get/set/revert/save settings.json sections.
    """

    def __init__(self, settings_path: Optional[str] = None) -> None:
        """Initialize SettingsAPI and load the settings data.

        Args:
            settings_path: Optional path to a custom settings.json file.
        """
        super().__init__()

        self.settings_path: pathlib.Path = pathlib.Path(settings_path) if settings_path else self.settings_path

        self._signals_blocked: bool = False

        self.data: Dict[str, Any] = {}
        for k in SETTINGS_SCHEMA.keys():
            self.data[k] = {}

        self.init_data()

    def __getitem__(self, key: str) -> Any:
        """Retrieve a metadata value using dictionary-style access.

        Args:
            key: Metadata key to retrieve.

        Returns:
            Value stored for the metadata key, or None if it has the wrong type.

        Raises:
            KeyError: If key is not in METADATA_KEYS.
            RuntimeError: If metadata section is missing from the settings data.
        """
        if key not in METADATA_KEYS:
            raise KeyError(f'Invalid metadata key: {key}, must be one of {METADATA_KEYS}')

        if 'metadata' not in self.data:
            raise RuntimeError('Malformed settings data, missing "metadata" section.')

        _type = SETTINGS_SCHEMA['metadata']['item_schema'][key]['type']
        v = self.data['metadata'].get(key)

        if not isinstance(v, _type):
            logging.error(f'Metadata key "{key}" is not of type {_type}, got {type(v)}.')
            return None

        return v

    def __setitem__(self, key: str, value: Any) -> None:
        """Assign a metadata value using dictionary-style access and persist it.

        Args:
            key: Metadata key to set.
            value: Value to assign to the metadata key.

        Raises:
            KeyError: If key is not in METADATA_KEYS.
            TypeError: If the value does not match the schema type.
        """
        if key not in METADATA_KEYS:
            raise KeyError(f'Invalid metadata key: {key}, must be one of {METADATA_KEYS}')

        _type = SETTINGS_SCHEMA['metadata']['item_schema'][key]['type']
        if _type is str and not isinstance(value, str):
            logging.warning(f'Metadata key "{key}" is not of type {_type}, got {type(value)}.')
            value = str(value)
        if not isinstance(value, _type):
            msg = f'Metadata key "{key}" must be {_type}, got {type(value)}.'
            logging.error(msg)
            raise TypeError(msg)

        self.data['metadata'][key] = value
        self.save_section('metadata')

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        signals.metadataChanged.emit(key, value)

    def block_signals(self, v: bool) -> None:
        """Enable or disable emission of configuration change signals.

        Args:
            v: True to block signals, False to allow signals to emit.
        """
        self._signals_blocked = v

    @QtCore.Slot()
    def init_data(self) -> None:
        """Reload the settings data, emitting UI update signals."""
        self.load_settings()

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        for section in SETTINGS_SCHEMA.keys():
            if section == 'metadata':
                continue
            signals.configSectionChanged.emit(section)

        for k, v in self.data.get('metadata', {}).items():
            signals.metadataChanged.emit(k, v)

    def load_settings(self) -> Dict[str, Any]:
        """Load settings.json from disk and validate against schema.

        Returns:
            The loaded settings data dictionary.

        Raises:
            status.SettingsNotFoundException: If settings.json file is missing.
            status.SettingsInvalidException: If JSON parsing or validation fails.
        """
        logging.debug(f'Loading settings from "{self.settings_path}"')
        if not self.settings_path.exists():
            raise status.SettingsNotFoundException(str(self.settings_path))

        try:
            with self.settings_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
        except (OSError, ValueError) as ex:
            raise status.SettingsInvalidException(str(ex)) from ex

        self.validate_settings_data(data)
        self.data = data
        return self.data

    def validate_settings_data(self, data: Dict[str, Any] = None) -> None:
        """Validate settings data against the defined SETTINGS_SCHEMA.

        Args:
            data (dict, optional): Settings data to validate. Defaults to self.data.

        Raises:
            status.SettingsInvalidException: If a required section is missing or validation fails.
        """
        if data is None:
            data = self.data
        if not isinstance(data, dict) or not data:
            raise status.SettingsInvalidException('Settings data is empty.')

        logging.debug('Validating settings data against schema.')
        for field, specs in SETTINGS_SCHEMA.items():
            if specs.get('required') and field not in data:
                raise status.SettingsInvalidException(f'Missing required field: {field}')

            if field not in data:
                continue

            if not isinstance(data[field], specs['type']):
                raise status.SettingsInvalidException(
                    f'Field "{field}" must be {specs["type"]}, got {type(data[field])}.'
                )

            if field == 'api':
                _validate_api(data[field], specs)
            else:
                _validate_items(field, data[field], specs['item_schema'])

        logging.debug('Settings data is valid.')

    def get_section(self, section_name: str) -> Dict[str, Any]:
        """Retrieve a copy of a configuration section.

        Args:
            section_name: Section name, a key of SETTINGS_SCHEMA.

        Returns:
            A copied dict of the requested section data.

        Raises:
            KeyError: If section_name is not in the settings data.
        """
        return self.data[section_name].copy()

    def set_section(self, section_name: str, new_data: Dict[str, Any]) -> None:
        """Replace and persist a configuration section.

        Args:
            section_name: Section to update.
            new_data: New data dict for the section.

        Raises:
            ValueError: If section_name is unrecognized.
            status.SettingsInvalidException: If the new data fails validation.
        """
        if section_name not in self.data:
            msg: str = f'Unknown section_name for set: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        current_section_data: Dict[str, Any] = self.data[section_name].copy()

        self.data[section_name] = new_data
        try:
            self.validate_settings_data()
        except status.SettingsInvalidException:
            logging.error(f'Validation error on set_section("{section_name}"), rolling back.')
            self.data[section_name] = current_section_data
            raise

        self.save_section(section_name)

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        signals.configSectionChanged.emit(section_name)

    def revert_section(self, section_name: str) -> None:
        """Revert a configuration section to its template default and save.

        Args:
            section_name: Section to revert.

        Raises:
            ValueError: If section_name is invalid or not present in the template.
        """
        if section_name not in self.data:
            msg: str = f'Unknown section_name for revert: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        with self.settings_template.open('r', encoding='utf-8') as f:
            template_data: Dict[str, Any] = json.load(f)

        if section_name not in template_data:
            msg = f'No template-based revert logic for section "{section_name}".'
            logging.error(msg)
            raise ValueError(msg)

        self.data[section_name] = template_data[section_name]
        self.save_section(section_name)

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        signals.configSectionChanged.emit(section_name)

    def save_section(self, section_name: str) -> None:
        """Persist a single configuration section to settings.json.

        Args:
            section_name: The section to save.

        Raises:
            ValueError: If section_name is not recognized.
        """
        if section_name not in self.data:
            msg: str = f'Unknown section_name for save: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        with self.settings_path.open('r', encoding='utf-8') as f:
            original_data: Dict[str, Any] = json.load(f)

        new_data: Dict[str, Any] = original_data.copy()
        new_data[section_name] = self.data[section_name]

        logging.debug(f'Saving section "{section_name}" to "{self.settings_path}"')
        with self.settings_path.open('w', encoding='utf-8') as f:
            json.dump(new_data, f, indent=4, ensure_ascii=False)

    @property
    def api_url(self) -> str:
        """The expense service base url, without a trailing slash.

        The ``EXPENSEDASHBOARD_API_URL`` environment variable takes precedence over the
        saved value for the current session.
        """
        url = os.environ.get(API_URL_ENV_KEY, '').strip()
        if url:
            logging.debug(f'Using service url from {API_URL_ENV_KEY}: {url}')
        else:
            url = self.data.get('api', {}).get('base_url', DEFAULT_API_URL)
        return url.strip().rstrip('/')

    @property
    def api_timeout(self) -> float:
        """The request timeout in seconds."""
        return float(self.data.get('api', {}).get('timeout', DEFAULT_TIMEOUT))


settings: SettingsAPI = SettingsAPI()
