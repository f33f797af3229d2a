"""Container / CLI entry points."""
