"""Items blueprint package."""
