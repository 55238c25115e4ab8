"""
ProDock: capture and restore macOS Dock layouts as named presets.

This package provides:

- :mod:`ProDock.core` – The ``dockutil`` adapter: listing parser, add-fragment builder, tool runner,
  preset application sequencer, application state and controller.
- :mod:`ProDock.presets` – Persistent preset store and its Qt item model.
- :mod:`ProDock.settings` – Settings management and application paths.
- :mod:`ProDock.log` – In-app logging.
- :mod:`ProDock.status` – Status codes and exceptions.

"""
import sys

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('ProDock requires Python 3.11 or higher.')

__version__ = '0.1.0'
__license__ = 'GPL-3.0'
__description__ = 'ProDock: save and restore macOS Dock layouts using dockutil.'

from .log import log

log.setup_logging()
