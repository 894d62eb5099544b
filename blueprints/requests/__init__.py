"""Item requests blueprint package."""
