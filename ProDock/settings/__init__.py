"""Settings package: application paths and the ``settings.json`` configuration API."""
