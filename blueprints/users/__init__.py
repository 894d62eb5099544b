"""Users blueprint package."""
