"""Service API blueprint package."""
