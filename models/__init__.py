"""Data access layer: users, items, item requests, comments and bookings."""
