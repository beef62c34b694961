"""HTTP query layer for bragi-status."""
