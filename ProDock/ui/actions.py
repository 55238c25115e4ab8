"""Application-wide Qt signals for ProDock.

This module provides:
    - Signals: custom Qt signals for settings changes, preset lifecycle,
      Dock capture and application, and error reporting.
"""
import logging

from PySide6 import QtCore


class Signals(QtCore.QObject):
    """Centralized Qt signals for settings, presets and dockutil events."""
    settingChanged = QtCore.Signal(str, object)  # Key, value

    presetsChanged = QtCore.Signal()
    presetAboutToBeApplied = QtCore.Signal(str)  # Preset id
    presetApplied = QtCore.Signal(str)  # Preset id
    dockCaptured = QtCore.Signal(str)  # Preset id

    error = QtCore.Signal(str)

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        @QtCore.Slot(str, object)
        def setting_changed(key: str, value: object) -> None:
            if key != 'log_level':
                return
            from ..log import log
            try:
                log.set_logging_level(value)
            except ValueError as ex:
                logging.warning(f'Ignoring log level "{value}": {ex}')

        self.settingChanged.connect(setting_changed)


signals = Signals()
