"""Filter commands: list and apply filters."""
