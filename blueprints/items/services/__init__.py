"""Item services package."""
