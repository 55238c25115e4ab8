"""Qt list model exposing the preset store to item views."""
from typing import Any, Optional

from PySide6 import QtCore

from .lib import Preset, PresetStore

PresetIdRole = QtCore.Qt.UserRole + 1


class PresetModel(QtCore.QAbstractListModel):
    """QAbstractListModel for listing Preset instances."""

    def __init__(self, store: PresetStore, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._store = store
        self._connect_signals()

    def store(self) -> PresetStore:
        return self._store

    def _connect_signals(self) -> None:
        """Forward store changes to attached views.

        The store has already changed when it emits, so inserts and removals
        are reported as resets of the affected rows.
        """
        self._store.presetAdded.connect(self._reset_model)
        self._store.presetRemoved.connect(self._reset_model)
        self._store.presetsReloaded.connect(self._reset_model)

    def _reset_model(self, *args) -> None:
        self.beginResetModel()
        self.endResetModel()

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._store)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._store):
            return None

        preset: Preset = self._store[index.row()]

        if role in (QtCore.Qt.DisplayRole, QtCore.Qt.EditRole):
            return preset.name
        if role == QtCore.Qt.ToolTipRole:
            return f'{preset.name}: {len(preset.fragments)} item(s)'
        if role == PresetIdRole:
            return preset.id
        return None

    def preset(self, index: QtCore.QModelIndex) -> Optional[Preset]:
        """Return the preset at a model index, or None."""
        if not index.isValid() or not 0 <= index.row() < len(self._store):
            return None
        return self._store[index.row()]

    def roleNames(self):
        roles = super().roleNames()
        roles[PresetIdRole] = b'presetId'
        return roles
