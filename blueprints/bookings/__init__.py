"""Bookings blueprint package."""
