"""Presets package: the persistent preset store and the Qt model exposing it to views."""
