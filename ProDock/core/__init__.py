"""Core services: the ``dockutil`` adapter and the actions built on top of it.

Modules:

- :mod:`ProDock.core.parser` – Parses ``dockutil --list`` output into :class:`ParsedItem` records.
- :mod:`ProDock.core.fragment` – Builds ``dockutil --add`` argument fragments from parsed records.
- :mod:`ProDock.core.dockutil` – Runs ``dockutil`` and ``killall`` through the shell.
- :mod:`ProDock.core.sequencer` – Replays a preset: clear, add each fragment, restart the Dock.
- :mod:`ProDock.core.state` – Observable application state.
- :mod:`ProDock.core.controller` – User actions: capture, apply and delete presets.
- :mod:`ProDock.core.hotkey` – Keyboard shortcut monitor gated by a permission check.
"""
