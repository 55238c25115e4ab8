"""
Logging subsystem for application logging.

Modules:

- :mod:`ProDock.log.log` – Root logger setup, level control and the Qt message bridge.
"""
