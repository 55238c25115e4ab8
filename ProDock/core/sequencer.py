"""Replays a stored preset onto the Dock.

The sequence is::

    Idle -> Clearing -> Adding(i) -> Restarting -> Idle

A failure while clearing or adding ends the run as failed and abandons the
remaining fragments, so the Dock may be left partially applied. A failed
restart only downgrades the result to a warning: the items are in place and
the Dock can be restarted by hand.
"""
import dataclasses
import enum
import logging
from typing import Optional

from PySide6 import QtCore

from .dockutil import DockutilService
from ..presets.lib import Preset
from ..status import status


class ApplyState(enum.StrEnum):
    Idle = enum.auto()
    Clearing = enum.auto()
    Adding = enum.auto()
    Restarting = enum.auto()


class ApplyOutcome(enum.StrEnum):
    Succeeded = enum.auto()
    SucceededWithWarning = enum.auto()
    Failed = enum.auto()


@dataclasses.dataclass
class ApplyResult:
    """Outcome of applying a preset.

    Attributes:
        outcome: Whether the preset was applied, applied without a restart, or not applied.
        message: User-facing summary.
        error: The failure that ended the run, if any.
        failed_index: Index of the fragment that failed to add, if any.
        failed_fragment: The fragment that failed to add, if any.
    """
    outcome: ApplyOutcome
    message: str
    error: Optional[status.BaseStatusException] = None
    failed_index: Optional[int] = None
    failed_fragment: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is not ApplyOutcome.Failed


class PresetSequencer(QtCore.QObject):
    """Clears the Dock, adds each fragment of a preset in order, then restarts the Dock.

    Signals:
        stateChanged (str): Emitted with the new :class:`ApplyState`.
        progressChanged (int, int): Emitted before each add with the 1-based position and total.
    """
    stateChanged = QtCore.Signal(str)
    progressChanged = QtCore.Signal(int, int)

    def __init__(self, service: Optional[DockutilService] = None,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self.service = service or DockutilService()
        self._state = ApplyState.Idle

    @property
    def state(self) -> ApplyState:
        return self._state

    def _set_state(self, state: ApplyState) -> None:
        self._state = state
        self.stateChanged.emit(str(state))

    def apply(self, preset: Preset) -> ApplyResult:
        """Apply a preset and return the result. Never raises status exceptions."""
        try:
            return self._apply(preset)
        finally:
            self._set_state(ApplyState.Idle)

    def _apply(self, preset: Preset) -> ApplyResult:
        self._set_state(ApplyState.Clearing)
        logging.debug('Clearing current Dock items (no restart)...')
        try:
            self.service.remove_all(no_restart=True)
        except status.BaseStatusException as ex:
            return ApplyResult(
                ApplyOutcome.Failed,
                f'Failed to clear Dock: {ex}',
                error=ex,
            )

        self._set_state(ApplyState.Adding)
        total = len(preset.fragments)
        logging.debug(f'Adding items for preset {preset.name!r} (no restart)...')
        for idx, fragment in enumerate(preset.fragments):
            self.progressChanged.emit(idx + 1, total)
            logging.debug(f'  Adding item {idx + 1}/{total}: {fragment}')
            try:
                self.service.add_item(fragment, no_restart=True)
            except status.BaseStatusException as ex:
                return ApplyResult(
                    ApplyOutcome.Failed,
                    f'Failed to add item ({fragment}): {ex}',
                    error=ex,
                    failed_index=idx,
                    failed_fragment=fragment,
                )

        self._set_state(ApplyState.Restarting)
        logging.debug('All items added, restarting Dock...')
        if not self.service.restart_dock():
            return ApplyResult(
                ApplyOutcome.SucceededWithWarning,
                f'Preset \'{preset.name}\' applied, but Dock restart failed (may require manual restart).',
            )

        return ApplyResult(
            ApplyOutcome.Succeeded,
            f'Preset \'{preset.name}\' applied successfully.',
        )
