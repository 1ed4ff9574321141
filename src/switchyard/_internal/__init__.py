"""Internal helpers shared across switchyard subpackages."""
