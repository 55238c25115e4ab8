"""Settings library for application paths and the user configuration.

Provides:
    - Schema validation for settings.json.
    - Loading, saving and reverting application settings.
    - Application paths: the settings file, the preset store and the bundled dockutil.
"""

import json
import logging
import os
import pathlib
import shutil
from typing import Any, Dict, List

from PySide6 import QtCore

from ..log import log
from ..status import status

app_name: str = 'ProDock'

MALFORMED_LINE_POLICIES: List[str] = ['skip', 'fail']
LOG_LEVELS: List[str] = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

SETTINGS_SCHEMA: Dict[str, Any] = {
    'dockutil_path': {'type': str, 'required': True},
    'killall_path': {'type': str, 'required': True, 'non_empty': True},
    'dock_process': {'type': str, 'required': True, 'non_empty': True},
    'malformed_lines': {'type': str, 'required': True, 'allowed_values': MALFORMED_LINE_POLICIES},
    'status_timeout': {'type': int, 'required': True, 'min': 0},
    'error_timeout': {'type': int, 'required': True, 'min': 0},
    'hotkey': {'type': str, 'required': True},
    'log_level': {'type': str, 'required': True, 'allowed_values': LOG_LEVELS},
}


def _validate_value(key: str, value: Any) -> None:
    """Validate a single settings value against SETTINGS_SCHEMA.

    Args:
        key: Settings key.
        value: Value to validate.

    Raises:
        KeyError: If key is not defined in the schema.
        TypeError: If value has the wrong type.
        ValueError: If value is empty, out of range or not an allowed value.
    """
    if key not in SETTINGS_SCHEMA:
        raise KeyError(f'Invalid settings key: {key}, must be one of {list(SETTINGS_SCHEMA)}')

    specs = SETTINGS_SCHEMA[key]
    # bool is a subclass of int, reject it explicitly for integer fields
    if not isinstance(value, specs['type']) or (specs['type'] is int and isinstance(value, bool)):
        msg = f'Setting "{key}" must be {specs["type"].__name__}, got {type(value).__name__}.'
        logging.error(msg)
        raise TypeError(msg)
    if specs.get('non_empty') and not value:
        msg = f'Setting "{key}" must not be empty.'
        logging.error(msg)
        raise ValueError(msg)
    if 'allowed_values' in specs and value not in specs['allowed_values']:
        msg = f'Setting "{key}" must be one of {specs["allowed_values"]}, got "{value}".'
        logging.error(msg)
        raise ValueError(msg)
    if 'min' in specs and value < specs['min']:
        msg = f'Setting "{key}" must be >= {specs["min"]}, got {value}.'
        logging.error(msg)
        raise ValueError(msg)


def validate_settings(data: Dict[str, Any]) -> None:
    """Validate a settings dictionary against SETTINGS_SCHEMA.

    Unknown keys are ignored; missing required keys are errors.

    Raises:
        TypeError: If data is not a dict or a value has the wrong type.
        ValueError: If a required key is missing or a value is not allowed.
    """
    logging.debug('Validating settings.')
    if not isinstance(data, dict):
        raise TypeError(f'Settings must be a dict, got {type(data).__name__}.')
    for key, specs in SETTINGS_SCHEMA.items():
        if key not in data:
            if specs['required']:
                raise ValueError(f'Missing required setting: {key}')
            continue
        _validate_value(key, data[key])


class ConfigPaths:
    """Manage application file paths and ensure the default template and directories exist.

    Paths live in the per-user application data directory reported by Qt. The settings
    template is copied there on first run.
    """

    def __init__(self) -> None:
        QtCore.QCoreApplication.setApplicationName(app_name)
        QtCore.QCoreApplication.setOrganizationName('')
        logging.debug(f'Setting application name: {app_name}')

        p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
        app_data_dir = pathlib.Path(p)
        logging.debug(f'Using app data directory: {app_data_dir}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.settings_template: pathlib.Path = self.template_dir / 'settings.json.template'
        self.bundled_dockutil: pathlib.Path = self.template_dir / 'bin' / 'dockutil'

        self.config_dir: pathlib.Path = app_data_dir
        self.settings_path: pathlib.Path = self.config_dir / 'settings.json'
        self.presets_path: pathlib.Path = self.config_dir / 'presets.json'

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify the template exists, create the config directory and copy the default settings.

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

        if not self.settings_path.exists():
            logging.debug(f'Copying default settings from template to {self.settings_path}')
            shutil.copy(self.settings_template, self.settings_path)

    def revert_settings_to_template(self) -> None:
        """Restore settings.json from the default template file.

        Raises:
            FileNotFoundError: If the settings template file is missing.
        """
        logging.debug(f'Reverting settings to template: {self.settings_template}')
        if not self.settings_template.exists():
            msg: str = f'Settings template not found: {self.settings_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        shutil.copy(self.settings_template, self.settings_path)


class SettingsAPI(ConfigPaths):
    """
    Provides dictionary-style access to settings.json with validation and persistence.
    """

    def __init__(self) -> None:
        super().__init__()

        self._signals_blocked: bool = False
        self.data: Dict[str, Any] = {}

        self.load()

    def __getitem__(self, key: str) -> Any:
        """Retrieve a setting.

        Raises:
            KeyError: If key is not defined in SETTINGS_SCHEMA.
        """
        if key not in SETTINGS_SCHEMA:
            raise KeyError(f'Invalid settings key: {key}, must be one of {list(SETTINGS_SCHEMA)}')
        return self.data.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        """Validate, assign and persist a setting, then emit settingChanged.

        Raises:
            KeyError: If key is not defined in SETTINGS_SCHEMA.
            TypeError: If value has the wrong type.
            ValueError: If value is not allowed.
        """
        _validate_value(key, value)

        self.data[key] = value
        self.save()

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        signals.settingChanged.emit(key, value)

    def block_signals(self, v: bool) -> None:
        """Enable or disable emission of settings change signals.

        Args:
            v: True to block signals, False to allow signals to emit.
        """
        self._signals_blocked = v

    def load(self) -> Dict[str, Any]:
        """Load settings.json from disk, validate it and apply the saved log level.

        Returns:
            The loaded settings dictionary.

        Raises:
            status.SettingsNotFoundException: If settings.json is missing.
            status.SettingsInvalidException: If JSON parsing or validation fails.
        """
        logging.debug(f'Loading settings from "{self.settings_path}"')
        if not self.settings_path.exists():
            raise status.SettingsNotFoundException(str(self.settings_path))

        try:
            with self.settings_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
            validate_settings(data)
        except (ValueError, TypeError, KeyError) as ex:
            raise status.SettingsInvalidException(str(ex)) from ex

        self.data = data
        log.set_logging_level(self.data['log_level'])
        return self.data

    def save(self) -> None:
        """Write the current settings to settings.json.

        Raises:
            status.SettingsInvalidException: If the current settings fail validation.
        """
        try:
            validate_settings(self.data)
        except (ValueError, TypeError, KeyError) as ex:
            raise status.SettingsInvalidException(str(ex)) from ex

        logging.debug(f'Saving settings to "{self.settings_path}"')
        with self.settings_path.open('w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=4, ensure_ascii=False)

    def revert(self) -> None:
        """Revert settings.json to the template and reload it."""
        self.revert_settings_to_template()
        self.load()

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        for k, v in self.data.items():
            signals.settingChanged.emit(k, v)

    def dockutil_path(self) -> pathlib.Path:
        """Resolve the dockutil executable.

        The configured path wins, then the copy bundled in the template directory,
        then the first ``dockutil`` on PATH.

        Raises:
            status.ToolUnavailableException: If no executable dockutil is found.
        """
        configured = self.data.get('dockutil_path') or ''
        if configured:
            path = pathlib.Path(configured).expanduser()
        elif self.bundled_dockutil.exists():
            path = self.bundled_dockutil
        else:
            found = shutil.which('dockutil')
            if not found:
                raise status.ToolUnavailableException('dockutil was not found on PATH.')
            path = pathlib.Path(found)

        if not path.is_file() or not os.access(path, os.X_OK):
            raise status.ToolUnavailableException(str(path))
        return path


settings: SettingsAPI = SettingsAPI()
