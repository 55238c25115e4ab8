"""Observable application state shared by the controller and any host views.

Every field change is broadcast through :attr:`AppState.changed`. Status and
error messages clear themselves after the timeouts configured in settings.
"""
import logging
from typing import Any

from PySide6 import QtCore

from ..settings import lib

FIELDS = (
    'new_preset_name',
    'is_loading',
    'status_message',
    'error_message',
    'show_error_alert',
    'accessibility_granted',
)


class AppState(QtCore.QObject):
    """State of the preset window.

    Signals:
        changed (str, object): Emitted with the field name and its new value.
    """
    changed = QtCore.Signal(str, object)

    def __init__(self, parent: QtCore.QObject = None) -> None:
        super().__init__(parent=parent)

        self._values = {
            'new_preset_name': '',
            'is_loading': False,
            'status_message': '',
            'error_message': '',
            'show_error_alert': False,
            'accessibility_granted': False,
        }

        self._status_timer = QtCore.QTimer(self)
        self._status_timer.setSingleShot(True)
        self._error_timer = QtCore.QTimer(self)
        self._error_timer.setSingleShot(True)

        self._connect_signals()

    def _connect_signals(self) -> None:
        self._status_timer.timeout.connect(self._clear_status)
        self._error_timer.timeout.connect(self._clear_error)

    def __repr__(self) -> str:
        return f'<AppState {self._values!r}>'

    def get(self, field: str) -> Any:
        if field not in self._values:
            raise KeyError(f'Invalid state field: {field}, must be one of {FIELDS}')
        return self._values[field]

    def set(self, field: str, value: Any) -> None:
        """Set a field and emit changed.

        Setting the status or error message restarts its clear timer, and
        dismissing the alert clears the error message.
        """
        if field not in self._values:
            raise KeyError(f'Invalid state field: {field}, must be one of {FIELDS}')

        self._values[field] = value
        self.changed.emit(field, value)

        if field == 'status_message':
            self._restart_timer(self._status_timer, 'status_timeout')
        elif field == 'error_message':
            self._restart_timer(self._error_timer, 'error_timeout')
        elif field == 'show_error_alert' and not value:
            self.set('error_message', '')

    @staticmethod
    def _restart_timer(timer: QtCore.QTimer, key: str) -> None:
        seconds = lib.settings[key] or 0
        timer.stop()
        if seconds > 0:
            timer.start(seconds * 1000)

    @QtCore.Slot()
    def _clear_status(self) -> None:
        if self._values['status_message']:
            self._values['status_message'] = ''
            self.changed.emit('status_message', '')

    @QtCore.Slot()
    def _clear_error(self) -> None:
        # Keep the message while the alert still shows it
        if self._values['show_error_alert']:
            return
        if self._values['error_message']:
            self._values['error_message'] = ''
            self.changed.emit('error_message', '')

    def present_error(self, message: str) -> None:
        """Show an error message and raise the alert."""
        logging.error(f'Error presented: {message}')
        self.set('error_message', message)
        self.set('show_error_alert', True)

    def dismiss_error(self) -> None:
        self.set('show_error_alert', False)

    @property
    def new_preset_name(self) -> str:
        return self._values['new_preset_name']

    @new_preset_name.setter
    def new_preset_name(self, value: str) -> None:
        self.set('new_preset_name', value)

    @property
    def is_loading(self) -> bool:
        return self._values['is_loading']

    @is_loading.setter
    def is_loading(self, value: bool) -> None:
        self.set('is_loading', value)

    @property
    def status_message(self) -> str:
        return self._values['status_message']

    @status_message.setter
    def status_message(self, value: str) -> None:
        self.set('status_message', value)

    @property
    def error_message(self) -> str:
        return self._values['error_message']

    @error_message.setter
    def error_message(self, value: str) -> None:
        self.set('error_message', value)

    @property
    def show_error_alert(self) -> bool:
        return self._values['show_error_alert']

    @show_error_alert.setter
    def show_error_alert(self, value: bool) -> None:
        self.set('show_error_alert', value)

    @property
    def accessibility_granted(self) -> bool:
        return self._values['accessibility_granted']

    @accessibility_granted.setter
    def accessibility_granted(self, value: bool) -> None:
        self.set('accessibility_granted', value)
