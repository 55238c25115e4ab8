"""Test package.

Qt is switched to test paths and an offscreen platform before any ProDock
module creates the settings singleton.
"""
import os

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from PySide6 import QtCore

QtCore.QStandardPaths.setTestModeEnabled(True)
