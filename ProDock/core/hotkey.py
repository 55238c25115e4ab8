"""Keyboard shortcut monitor for applying a preset without opening the window.

The monitor is only installed when the caller reports that the accessibility
permission was granted. It filters key presses on the running Qt application
and emits :attr:`HotkeyMonitor.triggered` when the configured sequence is
pressed.
"""
import ctypes
import logging
import sys
from typing import Optional

from PySide6 import QtCore, QtGui

from ..settings import lib

APPLICATION_SERVICES = '/System/Library/Frameworks/ApplicationServices.framework/ApplicationServices'


def check_accessibility_permission() -> bool:
    """Return True if macOS reports this process as trusted for accessibility.

    Always False on other platforms.
    """
    if sys.platform != 'darwin':
        return False
    try:
        services = ctypes.cdll.LoadLibrary(APPLICATION_SERVICES)
    except OSError as ex:
        logging.warning(f'Could not load ApplicationServices: {ex}')
        return False
    services.AXIsProcessTrusted.restype = ctypes.c_bool
    trusted = bool(services.AXIsProcessTrusted())
    logging.debug(f'Accessibility check result: {trusted}')
    return trusted


class HotkeyMonitor(QtCore.QObject):
    """Application event filter matching a single key sequence.

    Signals:
        triggered (): Emitted when the sequence is pressed.
    """
    triggered = QtCore.Signal()

    def __init__(self, sequence: Optional[str] = None, parent: QtCore.QObject = None) -> None:
        super().__init__(parent=parent)
        self.sequence = QtGui.QKeySequence(sequence or lib.settings['hotkey'])
        self._target: Optional[QtCore.QObject] = None

    @property
    def is_installed(self) -> bool:
        return self._target is not None

    def install(self, permission_granted: bool) -> bool:
        """Start listening for the shortcut.

        Args:
            permission_granted: Result of the permission check. Nothing is installed when False.

        Returns:
            bool: True if the monitor is installed after the call.
        """
        if self.is_installed:
            logging.debug('Hotkey monitor already installed.')
            return True
        if not permission_granted:
            logging.warning('Accessibility access denied. Global shortcuts will not work.')
            return False
        if self.sequence.isEmpty():
            logging.warning('No hotkey configured.')
            return False

        app = QtCore.QCoreApplication.instance()
        if app is None:
            logging.error('Failed to install hotkey monitor: no application instance.')
            return False

        app.installEventFilter(self)
        self._target = app
        logging.debug(f'Hotkey monitor installed for {self.sequence.toString()}')
        return True

    def uninstall(self) -> None:
        """Stop listening. Safe to call when not installed."""
        if self._target is None:
            return
        self._target.removeEventFilter(self)
        self._target = None
        logging.debug('Hotkey monitor removed.')

    def matches(self, event: QtGui.QKeyEvent) -> bool:
        return QtGui.QKeySequence(event.keyCombination()) == self.sequence

    def eventFilter(self, watched: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if event.type() == QtCore.QEvent.KeyPress and not event.isAutoRepeat() and self.matches(event):
            logging.debug('Global shortcut detected.')
            self.triggered.emit()
            return True
        return False
