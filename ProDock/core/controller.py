"""User actions on presets: capture the Dock, apply, delete, and the apply shortcut.

The controller owns the :class:`~ProDock.core.state.AppState` a host window
binds to. Capture and apply run one at a time, guarded by
:attr:`AppState.is_loading`. Every failure ends up as a readable error
message on the state; nothing is retried.
"""
import logging
from typing import Callable, Iterable, List, Optional

from PySide6 import QtCore

from . import fragment
from .dockutil import DockutilService
from .hotkey import HotkeyMonitor, check_accessibility_permission
from .sequencer import ApplyOutcome, ApplyResult, PresetSequencer
from .state import AppState
from ..presets.lib import Preset, PresetStore
from ..status import status
from ..ui.actions import signals


class PresetController(QtCore.QObject):
    """Binds the dockutil adapter, the preset store and the application state."""

    def __init__(
            self,
            store: Optional[PresetStore] = None,
            service: Optional[DockutilService] = None,
            state: Optional[AppState] = None,
            parent: Optional[QtCore.QObject] = None
    ) -> None:
        super().__init__(parent=parent)
        self.service = service or DockutilService()
        self.store = store or PresetStore()
        self.state = state or AppState(parent=self)
        self.sequencer = PresetSequencer(service=self.service, parent=self)
        self.hotkey: Optional[HotkeyMonitor] = None

    def save_current_dock(self, name: Optional[str] = None) -> Optional[Preset]:
        """Capture the current Dock as a new preset.

        Args:
            name: Preset name. Defaults to the name typed into the state.

        Returns:
            The new preset, or None if nothing was saved.
        """
        name = (self.state.new_preset_name if name is None else name).strip()
        if not name:
            self.state.present_error('Please enter a name for the preset.')
            return None
        if self.state.is_loading:
            logging.debug('Ignoring capture request, another action is running.')
            return None

        self.state.is_loading = True
        self.state.status_message = 'Reading current Dock state...'
        self.state.error_message = ''
        try:
            items = self.service.list_items()
            fragments = fragment.build_fragments(items)
            if not fragments:
                self.state.present_error('Could not read any items from the Dock.')
                return None

            preset = self.store.new(name, fragments)
        except status.BaseStatusException as ex:
            self.state.present_error(f'Failed to read Dock: {ex}')
            return None
        except OSError as ex:
            self.state.present_error(f'Failed to save preset: {ex}')
            return None
        finally:
            self.state.is_loading = False

        self.state.status_message = f'Preset \'{name}\' saved successfully.'
        self.state.new_preset_name = ''
        signals.dockCaptured.emit(preset.id)
        return preset

    def apply_preset(self, preset: Preset) -> Optional[ApplyResult]:
        """Replace the Dock with a stored preset.

        Returns:
            The result, or None if another action was running.
        """
        if self.state.is_loading:
            logging.debug('Ignoring apply request, another action is running.')
            return None

        self.state.is_loading = True
        self.state.status_message = f'Applying preset \'{preset.name}\'...'
        self.state.error_message = ''
        signals.presetAboutToBeApplied.emit(preset.id)
        try:
            result = self.sequencer.apply(preset)
        finally:
            self.state.is_loading = False

        if result.outcome is ApplyOutcome.Failed:
            self.state.present_error(result.message)
        else:
            self.state.status_message = result.message
            signals.presetApplied.emit(preset.id)
        return result

    def delete_preset(self, preset: Preset) -> bool:
        try:
            removed = self.store.remove(preset.id)
        except OSError as ex:
            self.state.present_error(f'Failed to delete preset \'{preset.name}\': {ex}')
            return False
        if removed:
            self.state.status_message = f'Preset \'{preset.name}\' deleted.'
        return removed

    def delete_presets(self, indexes: Iterable[int]) -> List[Preset]:
        try:
            removed = self.store.remove_indexes(indexes)
        except OSError as ex:
            self.state.present_error(f'Failed to delete presets: {ex}')
            return []
        if removed:
            names = ', '.join(p.name for p in removed)
            self.state.status_message = f'Deleted preset(s): {names}.'
        return removed

    def setup_hotkey(self, permission_check: Callable[[], bool] = check_accessibility_permission) -> bool:
        """Check the permission and install the apply shortcut.

        Does nothing if the shortcut was already set up. The shortcut applies
        the first stored preset.

        Returns:
            bool: True if the shortcut is installed.
        """
        if self.hotkey is not None and self.hotkey.is_installed:
            logging.debug('Event monitor setup already completed.')
            return True

        granted = bool(permission_check())
        self.state.accessibility_granted = granted

        if self.hotkey is None:
            self.hotkey = HotkeyMonitor(parent=self)
            self.hotkey.triggered.connect(self._on_hotkey_triggered)

        return self.hotkey.install(granted)

    def remove_hotkey(self) -> None:
        if self.hotkey is not None:
            self.hotkey.uninstall()

    @QtCore.Slot()
    def _on_hotkey_triggered(self) -> None:
        if not len(self.store):
            logging.info('Shortcut triggered, but no presets found to apply.')
            return
        preset = self.store[0]
        logging.info(f'Applying preset via shortcut: {preset.name}')
        self.apply_preset(preset)
