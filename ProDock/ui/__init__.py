"""Qt glue shared by the application: global signals and the preset item model."""
