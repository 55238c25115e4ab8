"""Preset records and the JSON document that stores them.

Presets keep their insertion order. The document is a list of
``{"id", "name", "fragments"}`` objects in the application data directory.
"""
import dataclasses
import json
import logging
import os
import pathlib
import tempfile
import uuid
from typing import Any, Dict, Iterable, List, Optional, Union

from PySide6 import QtCore

from ..settings import lib
from ..ui.actions import signals


@dataclasses.dataclass
class Preset:
    """
    A named Dock layout: the ordered list of ``dockutil --add`` fragments that recreate it.

    Presets are never edited in place. Replacing one means adding a new preset
    and deleting the old one.
    """
    name: str
    fragments: List[str]
    id: str = dataclasses.field(default_factory=lambda: uuid.uuid4().hex)

    def __repr__(self) -> str:
        return f'<Preset name={self.name!r}, id={self.id}, fragments={len(self.fragments)}>'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'fragments': list(self.fragments),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Preset':
        """
        Create a Preset from its stored form.

        Raises:
            ValueError: if a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f'Preset record must be an object, got {type(data).__name__}')
        _id = data.get('id')
        name = data.get('name')
        fragments = data.get('fragments')
        if not isinstance(_id, str) or not _id:
            raise ValueError('Preset record has no id')
        if not isinstance(name, str):
            raise ValueError(f'Preset {_id} has no name')
        if not isinstance(fragments, list) or not all(isinstance(f, str) for f in fragments):
            raise ValueError(f'Preset {_id} has invalid fragments')
        return cls(name=name, fragments=list(fragments), id=_id)


class PresetStore(QtCore.QObject):
    """
    Ordered collection of presets persisted to a JSON document.

    The document is read once on construction and rewritten after every
    add or remove. A missing or unreadable document starts an empty store.
    """

    presetsReloaded = QtCore.Signal()
    presetAdded = QtCore.Signal(int)
    presetRemoved = QtCore.Signal(int)

    def __init__(self, path: Optional[pathlib.Path] = None) -> None:
        super().__init__()
        self.path: pathlib.Path = pathlib.Path(path) if path else lib.settings.presets_path
        self._items: List[Preset] = []
        self.load()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __getitem__(self, key: Union[int, str]) -> Preset:
        if isinstance(key, int):
            return self._items[key]
        if isinstance(key, str):
            for item in self._items:
                if item.id == key:
                    return item
            raise KeyError(f'No preset with id \'{key}\'')
        raise TypeError('Key must be int or str')

    def get(self, preset_id: str) -> Optional[Preset]:
        """Return the preset with the given id, or None if not found."""
        return next((item for item in self._items if item.id == preset_id), None)

    def index(self, preset: Preset) -> int:
        """Return the row of a preset, matched by id.

        Raises:
            ValueError: if the preset is not in the store.
        """
        for idx, item in enumerate(self._items):
            if item.id == preset.id:
                return idx
        raise ValueError(f'{preset!r} is not in the store')

    def items(self) -> List[Preset]:
        """Return a snapshot list of all presets."""
        return list(self._items)

    def load(self) -> None:
        """Reload presets from disk.

        Unreadable documents are treated as empty; malformed records are skipped.
        """
        self._items.clear()

        if not self.path.exists():
            logging.debug(f'Presets file not found at {self.path}, starting fresh.')
            self.presetsReloaded.emit()
            return

        try:
            with self.path.open('r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError(f'Expected a list of presets, got {type(data).__name__}')
        except (OSError, ValueError) as ex:
            logging.error(f'Error loading presets from {self.path}: {ex}')
            self.presetsReloaded.emit()
            return

        for record in data:
            try:
                self._items.append(Preset.from_dict(record))
            except ValueError as ex:
                logging.warning(f'Skipped invalid preset: {ex}')

        logging.debug(f'Loaded {len(self._items)} presets from {self.path}')
        self.presetsReloaded.emit()

    def save(self) -> None:
        """Write all presets to disk atomically.

        The document is written to a temporary file next to the target, then
        moved over it.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [item.to_dict() for item in self._items]

        fd, tmp = tempfile.mkstemp(prefix=f'{self.path.name}.', suffix='.tmp', dir=self.path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
            os.replace(tmp, self.path)
        except Exception:
            pathlib.Path(tmp).unlink(missing_ok=True)
            raise

        logging.debug(f'Saved {len(self._items)} presets to {self.path}')

    def new(self, name: str, fragments: Iterable[str]) -> Preset:
        """Create, append and save a new preset."""
        preset = Preset(name=name, fragments=list(fragments))
        self.add(preset)
        return preset

    def add(self, preset: Preset) -> None:
        """Append a preset and save. Names need not be unique."""
        self._items.append(preset)
        try:
            self.save()
        except OSError:
            self._items.pop()
            raise

        idx = len(self._items) - 1
        self.presetAdded.emit(idx)
        signals.presetsChanged.emit()

    def remove(self, preset_id: str) -> bool:
        """Remove the preset with the given id and save.

        The preset is put back if the document cannot be written.

        Returns:
            bool: True if a preset was removed.

        Raises:
            OSError: If the presets file could not be written.
        """
        for idx, item in enumerate(self._items):
            if item.id != preset_id:
                continue
            self._items.pop(idx)
            try:
                self.save()
            except OSError:
                self._items.insert(idx, item)
                raise
            self.presetRemoved.emit(idx)
            signals.presetsChanged.emit()
            return True

        logging.warning(f'No preset with id {preset_id} to remove')
        return False

    def remove_indexes(self, indexes: Iterable[int]) -> List[Preset]:
        """Remove the presets at the given rows and save once.

        Rows out of range are ignored. Nothing is removed if the document
        cannot be written.

        Returns:
            list[Preset]: The removed presets in their original order.

        Raises:
            OSError: If the presets file could not be written.
        """
        rows = sorted({i for i in indexes if 0 <= i < len(self._items)})
        if not rows:
            return []

        previous = list(self._items)
        removed = [self._items[i] for i in rows]
        # Pop from the end so the remaining rows keep their positions
        for idx in reversed(rows):
            self._items.pop(idx)
        try:
            self.save()
        except OSError:
            self._items[:] = previous
            raise

        for idx in reversed(rows):
            self.presetRemoved.emit(idx)
        signals.presetsChanged.emit()
        return removed
