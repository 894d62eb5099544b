"""Shared helpers: responses, exceptions, validation and time handling."""
